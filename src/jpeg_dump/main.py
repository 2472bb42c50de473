import argparse
import sys

from . import trace
from .errors import JpegDumpError
from .reader import dump_file

EX_OK = 0
EX_DATAERR = 65
EX_IOERR = 74


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="jpegdump", description="Dump the marker segments of a JPEG / JPEG-LS file")
    parser.add_argument("path", help="Path to the JPEG or JPEG-LS file to dump")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Report skipped marker candidates and unrecognized application data on stderr")

    args = parser.parse_args(argv)
    trace.DEBUG = args.verbose

    print(f"Dumping JPEG file: {args.path}")
    print("=" * 77)

    try:
        dump_file(args.path)
    except OSError as e:
        print(f"Failed to open \\ parse file {args.path}, error: {e}")
        return EX_IOERR
    except JpegDumpError as e:
        print(f"Malformed segment in {args.path}: {e}")
        return EX_DATAERR

    return EX_OK


if __name__ == "__main__":
    sys.exit(main())
