class JpegDumpError(ValueError):
    """Subclass of ValueError with the following additional properties:

    msg: The unformatted error message
    pos: The absolute offset in the stream where dumping failed

    """
    def __init__(self, msg: str, pos: int):
        errmsg = '%s: offset %d' % (msg, pos)
        ValueError.__init__(self, errmsg)
        self.msg = msg
        self.pos = pos


class MalformedSegmentError(JpegDumpError):
    """Declared segment size cannot hold the fields its marker requires."""


class TruncatedSegmentError(MalformedSegmentError):
    """The source ended while a mandatory field was being read."""
