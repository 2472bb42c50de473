from __future__ import annotations

import numpy as np

from .cursor import Cursor
from .primitives import INTERLEAVE_MODE_NAMES, marker_info
from .trace import Trace


def dump_marker_only(cursor: Cursor, trace: Trace, start: int, code: int) -> None:
    """SOI, EOI and RST0..RST7: the 2-byte marker is all there is."""
    trace.marker(start, code, marker_info(code))


def dump_unknown_marker(cursor: Cursor, trace: Trace, start: int, code: int) -> None:
    # The length convention of the code is unknown, so nothing after the marker is consumed.
    trace.marker(start, code)


def dump_described_segment(cursor: Cursor, trace: Trace, start: int, code: int) -> None:
    """APP0 and COM: one line, payload skipped."""
    trace.marker(start, code, marker_info(code))
    size = cursor.read_u16()
    with cursor.segment(size):
        pass


def dump_opaque_segment(cursor: Cursor, trace: Trace, start: int, code: int) -> None:
    trace.marker(start, code, marker_info(code))
    size = read_size(cursor, trace)
    with cursor.segment(size):
        pass


def read_size(cursor: Cursor, trace: Trace) -> int:
    position = cursor.position
    size = cursor.read_u16()
    trace.field(position, "Size", size)
    return size


def dump_start_of_frame(cursor: Cursor, trace: Trace, start: int, code: int, jpegls: bool = False) -> None:
    """Frame header, B.2.2 in T.81 (SOFn) and C.2.2 in T.87 (SOF_55)."""
    trace.marker(start, code, marker_info(code))
    size = read_size(cursor, trace)
    with cursor.segment(size):
        trace.field(cursor.position, "Sample precision (P)", cursor.read_u8())
        trace.field(cursor.position, "Number of lines (Y)", cursor.read_u16())
        trace.field(cursor.position, "Number of samples per line (X)", cursor.read_u16())
        position = cursor.position
        component_count = cursor.read_u8()
        trace.field(position, "Number of image components in a frame (Nf)", component_count)
        for _ in range(component_count):
            trace.field(cursor.position, "Component identifier (Ci)", cursor.read_u8(), depth=2)
            position = cursor.position
            sampling_factor = cursor.read_u8()
            # upper 4 bits = horizontal, lower 4 bits = vertical
            trace.field(position, "H and V sampling factor (Hi + Vi)", sampling_factor,
                        f"{sampling_factor >> 4} + {sampling_factor & 0x0F}", depth=2)
            if jpegls:
                label = "Quantization table (Tqi) [reserved, should be 0]"
            else:
                label = "Quantization table destination selector (Tqi)"
            trace.field(cursor.position, label, cursor.read_u8(), depth=2)


def dump_jpegls_extended_parameters(cursor: Cursor, trace: Trace, start: int, code: int) -> None:
    trace.marker(start, code, marker_info(code))
    size = read_size(cursor, trace)
    with cursor.segment(size):
        position = cursor.position
        parameter_type = cursor.read_u8()
        if parameter_type != 1:
            # Mapping tables and oversize dimensions are not broken down.
            trace.field(position, "Type", parameter_type, "Unknown")
            return

        trace.field(position, "Type", parameter_type, "Preset coding parameters")
        trace.field(cursor.position, "MaximumSampleValue", cursor.read_u16())
        trace.field(cursor.position, "Threshold 1", cursor.read_u16())
        trace.field(cursor.position, "Threshold 2", cursor.read_u16())
        trace.field(cursor.position, "Threshold 3", cursor.read_u16())
        trace.field(cursor.position, "Reset value", cursor.read_u16())


def dump_start_of_scan(cursor: Cursor, trace: Trace, start: int, code: int) -> None:
    trace.marker(start, code, marker_info(code))
    size = read_size(cursor, trace)
    with cursor.segment(size):
        position = cursor.position
        component_count = cursor.read_u8()
        trace.field(position, "Component Count", component_count)
        for _ in range(component_count):
            trace.field(cursor.position, "Component identifier (Ci)", cursor.read_u8(), depth=2)
            position = cursor.position
            selector = cursor.read_u8()
            trace.field(position, "Mapping table selector", selector,
                        "None" if selector == 0 else None, depth=2)

        trace.field(cursor.position, "Near lossless (NEAR parameter)", cursor.read_u8())
        position = cursor.position
        interleave_mode = cursor.read_u8()
        trace.field(position, "Interleave mode (ILV parameter)", interleave_mode,
                    INTERLEAVE_MODE_NAMES.get(interleave_mode, "Invalid"))
        trace.field(cursor.position, "Point Transform", cursor.read_u8())


def dump_define_restart_interval(cursor: Cursor, trace: Trace, start: int, code: int) -> None:
    trace.marker(start, code, marker_info(code))
    size = read_size(cursor, trace)
    # T.87 C.2.5 extends DRI to a 2, 3 or 4 byte interval.
    readers = {4: cursor.read_u16, 5: cursor.read_u24, 6: cursor.read_u32}
    with cursor.segment(size):
        if size in readers:
            trace.field(cursor.position, "Restart Interval", readers[size]())


def dump_define_quantization_table(cursor: Cursor, trace: Trace, start: int, code: int) -> None:
    """DQT, B.2.4.1: one line per table, the 64 values are skipped."""
    trace.marker(start, code, marker_info(code))
    size = read_size(cursor, trace)
    with cursor.segment(size):
        while cursor.remaining > 0:
            position = cursor.position
            table_info = cursor.read_u8()
            precision = (table_info >> 4) & 0x0F  # 0 = 8-bit, 1 = 16-bit
            table_id = table_info & 0x0F
            trace.field(position, "Precision and table identifier (Pq + Tq)", table_info,
                        f"{precision} + {table_id}")
            cursor.read_bytes(64 if precision == 0 else 128)


def dump_define_huffman_table(cursor: Cursor, trace: Trace, start: int, code: int) -> None:
    """DHT, B.2.4.2: class, id and code count per table, symbols are skipped."""
    trace.marker(start, code, marker_info(code))
    size = read_size(cursor, trace)
    with cursor.segment(size):
        while cursor.remaining > 0:
            position = cursor.position
            table_info = cursor.read_u8()
            table_class = (table_info >> 4) & 0x0F  # 0 = DC, 1 = AC
            table_id = table_info & 0x0F
            trace.field(position, "Table class and identifier (Tc + Th)", table_info,
                        f"{table_class} + {table_id}")
            position = cursor.position
            code_counts = np.frombuffer(cursor.read_bytes(16), dtype=np.uint8)
            code_count = int(code_counts.sum())
            trace.field(position, "Number of codes", code_count, depth=2)
            cursor.read_bytes(code_count)
