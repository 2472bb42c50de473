"""
Recognizers for auxiliary records carried in APP7, APP8 and APP14 segments.

Each ``try_dump_as_*`` function takes the complete payload of the segment and
the absolute offset of its first byte. It either matches (exact length and
signature) and writes the decoded record to the trace, returning True, or
writes nothing and returns False.
"""
from __future__ import annotations
from typing import Callable, Sequence

import numpy as np

from .cursor import Cursor
from .marker import read_size
from .primitives import (
    ADOBE_APP14, ADOBE_COLOR_TRANSFORM_NAMES,
    HP_COLOR_SPACE_NAMES, HP_COLOR_TRANSFORMATION_NAMES, HP_TAGGED_BYTE,
    SPIFF_COLOR_SPACE_NAMES, SPIFF_COMPRESSION_TYPE_NAMES, SPIFF_END_OF_DIRECTORY,
    SPIFF_HEADER, SPIFF_RESOLUTION_UNITS_NAMES,
    marker_info,
)
from .trace import Trace, debug

Sniffer = Callable[[bytes, int, Trace], bool]

SPIFF_MAGIC = b"SPIFF"
ADOBE_MAGIC = b"Adobe"
# 'colr' and 'xfrm' are written as little-endian 32 bit values.
HP_COLOR_SPACE_TAG = b"colr"[::-1]
HP_COLOR_TRANSFORMATION_TAG = b"xfrm"[::-1]


def field_offset(record: np.dtype, name: str) -> int:
    return record.fields[name][1]


def try_dump_as_spiff_header(buffer: bytes, offset: int, trace: Trace) -> bool:
    """SPIFF header, ISO/IEC 10918-3 Annex F."""
    if len(buffer) < SPIFF_HEADER.itemsize:
        return False
    if buffer[:len(SPIFF_MAGIC)] != SPIFF_MAGIC:
        return False

    header = np.frombuffer(buffer, dtype=SPIFF_HEADER, count=1)[0]

    def emit(name, label, names=None):
        value = int(header[name])
        trace.field(offset + field_offset(SPIFF_HEADER, name), label, value,
                    None if names is None else names.get(value, "Unknown"))

    trace.note(offset, "SPIFF Header, defined in ISO/IEC 10918-3, Annex F")
    emit('high_version', "High version")
    emit('low_version', "Low version")
    emit('profile_id', "Profile id")
    emit('component_count', "Component count")
    emit('height', "Height")
    emit('width', "Width")
    emit('color_space', "Color Space", SPIFF_COLOR_SPACE_NAMES)
    emit('bits_per_sample', "Bits per sample")
    emit('compression_type', "Compression Type", SPIFF_COMPRESSION_TYPE_NAMES)
    emit('resolution_units', "Resolution Units", SPIFF_RESOLUTION_UNITS_NAMES)
    emit('vertical_resolution', "Vertical resolution")
    emit('horizontal_resolution', "Horizontal resolution")
    return True


def try_dump_as_spiff_end_of_directory(buffer: bytes, offset: int, trace: Trace) -> bool:
    # Every 6 byte payload is claimed, only entry type 1 is reported.
    if len(buffer) != SPIFF_END_OF_DIRECTORY.itemsize:
        return False

    entry = np.frombuffer(buffer, dtype=SPIFF_END_OF_DIRECTORY, count=1)[0]
    if int(entry['entry_type']) == 1:
        trace.note(offset, "SPIFF EndOfDirectory Entry, defined in ISO/IEC 10918-3, Annex F")
    return True


def _try_dump_hp_record(buffer: bytes, offset: int, trace: Trace,
                        tag: bytes, title: str, label: str, names: dict) -> bool:
    if len(buffer) != HP_TAGGED_BYTE.itemsize:
        return False
    if buffer[:len(tag)] != tag:
        return False

    record = np.frombuffer(buffer, dtype=HP_TAGGED_BYTE, count=1)[0]
    value = int(record['value'])
    trace.note(offset, f"{title}, defined by HP JPEG-LS implementation")
    trace.field(offset + field_offset(HP_TAGGED_BYTE, 'value'), label, value, names.get(value, "Unknown"))
    return True


def try_dump_as_hp_color_transformation(buffer: bytes, offset: int, trace: Trace) -> bool:
    return _try_dump_hp_record(buffer, offset, trace, HP_COLOR_TRANSFORMATION_TAG,
                               "HP colorXForm", "Transformation", HP_COLOR_TRANSFORMATION_NAMES)


def try_dump_as_hp_color_space(buffer: bytes, offset: int, trace: Trace) -> bool:
    return _try_dump_hp_record(buffer, offset, trace, HP_COLOR_SPACE_TAG,
                               "HP color space", "Color Space", HP_COLOR_SPACE_NAMES)


def try_dump_as_adobe_app14(buffer: bytes, offset: int, trace: Trace) -> bool:
    if len(buffer) != ADOBE_APP14.itemsize:
        return False
    if buffer[:len(ADOBE_MAGIC)] != ADOBE_MAGIC:
        return False

    record = np.frombuffer(buffer, dtype=ADOBE_APP14, count=1)[0]
    trace.note(offset, "APP14 'Adobe' identifier")
    trace.field(offset + field_offset(ADOBE_APP14, 'version'), "Version", int(record['version']), depth=2)
    color_transform = int(record['color_transform'])
    trace.field(offset + field_offset(ADOBE_APP14, 'color_transform'), "ColorSpace", color_transform,
                ADOBE_COLOR_TRANSFORM_NAMES.get(color_transform, "Unknown"), depth=2)
    return True


APP7_SNIFFERS: Sequence[Sniffer] = (
    try_dump_as_hp_color_space,
)

APP8_SNIFFERS: Sequence[Sniffer] = (
    try_dump_as_spiff_header,
    try_dump_as_spiff_end_of_directory,
    try_dump_as_hp_color_transformation,
)

APP14_SNIFFERS: Sequence[Sniffer] = (
    try_dump_as_adobe_app14,
)


def sniff(sniffers: Sequence[Sniffer], buffer: bytes, offset: int, trace: Trace) -> bool:
    """Run the sniffers in order, stopping at the first that matches."""
    for sniffer in sniffers:
        if sniffer(buffer, offset, trace):
            return True
    debug(f"No known record in {len(buffer)} byte application payload at {offset}")
    return False


def dump_application_data(cursor: Cursor, trace: Trace, start: int, code: int,
                          sniffers: Sequence[Sniffer]) -> None:
    """APPn with known auxiliary records: the whole payload is read before sniffing."""
    trace.marker(start, code, marker_info(code))
    size = read_size(cursor, trace)
    with cursor.segment(size):
        offset = cursor.position
        buffer = cursor.read_up_to(size - 2)
    if len(buffer) != size - 2:
        debug(f"Source ended inside application payload at {offset}, {len(buffer)} of {size - 2} bytes present")
        return
    sniff(sniffers, buffer, offset, trace)
