from __future__ import annotations
from pathlib import Path
from typing import BinaryIO, Callable

from .cursor import Cursor
from .extensions import APP7_SNIFFERS, APP8_SNIFFERS, APP14_SNIFFERS, dump_application_data
from .marker import (
    dump_define_huffman_table, dump_define_quantization_table, dump_define_restart_interval,
    dump_described_segment, dump_jpegls_extended_parameters, dump_marker_only,
    dump_opaque_segment, dump_start_of_frame, dump_start_of_scan, dump_unknown_marker,
)
from .primitives import OPAQUE_SEGMENT_NAMES, START_OF_FRAME_MODES, JpegMarker, ScanState
from .trace import Trace, debug

MARKER_PREFIX = 0xFF


class JpegStreamReader:
    """Scans a JPEG / JPEG-LS stream for markers and dumps every segment found."""
    def __init__(self, f: BinaryIO, write_line: Callable[[str], None] = print):
        self.cursor = Cursor(f)
        self.trace = Trace(write_line)
        self.state = ScanState()

    def dump(self) -> None:
        while True:
            byte = self.cursor.next_byte()
            if byte is None:
                break  # End of stream
            if byte != MARKER_PREFIX:
                continue

            start = self.cursor.position - 1
            code = self.cursor.next_byte()
            if code is None:
                break
            if not self.is_marker_code(code):
                debug(f"Skipping 0xFF{code:02X} at {start}, not a marker code")
                continue
            self.dump_marker(code, start)

    def is_marker_code(self, code: int) -> bool:
        # Encoders keep marker codes out of the scan data by stuffing a zero
        # byte (T.81) or a zero bit (JPEG-LS) after every 0xFF.
        if self.state.entropy_mode:
            return (code & 0x80) == 0x80
        return code > 0

    def dump_marker(self, code: int, start: int) -> None:
        cursor, trace = self.cursor, self.trace

        if code == JpegMarker.START_OF_FRAME_JPEGLS:
            self.state.entropy_mode = True

        if JpegMarker.RESTART0 <= code <= JpegMarker.RESTART7:
            dump_marker_only(cursor, trace, start, code)
        elif code == JpegMarker.START_OF_IMAGE or code == JpegMarker.END_OF_IMAGE:
            dump_marker_only(cursor, trace, start, code)
        elif code == JpegMarker.START_OF_FRAME_JPEGLS:
            dump_start_of_frame(cursor, trace, start, code, jpegls=True)
        elif code in START_OF_FRAME_MODES:
            dump_start_of_frame(cursor, trace, start, code)
        elif code == JpegMarker.JPEGLS_EXTENDED_PARAMETERS:
            dump_jpegls_extended_parameters(cursor, trace, start, code)
        elif code == JpegMarker.START_OF_SCAN:
            dump_start_of_scan(cursor, trace, start, code)
        elif code == JpegMarker.DEFINE_RESTART_INTERVAL:
            dump_define_restart_interval(cursor, trace, start, code)
        elif code == JpegMarker.DEFINE_QUANTIZATION_TABLE:
            dump_define_quantization_table(cursor, trace, start, code)
        elif code == JpegMarker.DEFINE_HUFFMAN_TABLE:
            dump_define_huffman_table(cursor, trace, start, code)
        elif code == JpegMarker.APPLICATION_DATA0 or code == JpegMarker.COMMENT:
            dump_described_segment(cursor, trace, start, code)
        elif code == JpegMarker.APPLICATION_DATA7:
            dump_application_data(cursor, trace, start, code, APP7_SNIFFERS)
        elif code == JpegMarker.APPLICATION_DATA8:
            dump_application_data(cursor, trace, start, code, APP8_SNIFFERS)
        elif code == JpegMarker.APPLICATION_DATA14:
            dump_application_data(cursor, trace, start, code, APP14_SNIFFERS)
        elif code in OPAQUE_SEGMENT_NAMES:
            dump_opaque_segment(cursor, trace, start, code)
        else:
            dump_unknown_marker(cursor, trace, start, code)


def dump_file(path: str | Path, write_line: Callable[[str], None] = print) -> None:
    """
    Dump all markers of a JPEG / JPEG-LS file.

    Args:
        path: Path to the JPEG file
        write_line: Receives every line of the dump (print by default)
    """
    with open(path, "rb") as f:
        JpegStreamReader(f, write_line).dump()
