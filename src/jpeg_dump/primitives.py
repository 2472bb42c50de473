# --------------------------------------------------------------------
# |segment name|marker value|has size|description                    |
# --------------------------------------------------------------------
# |RST0..RST7  |0xFFD0-D7   |No      | restart markers               |
# |SOI         |0xFFD8      |No      | start of image                |
# |EOI         |0xFFD9      |No      | end of image                  |
# |SOS         |0xFFDA      |Yes     | start of scan                 |
# |DQT         |0xFFDB      |Yes     | quantization table            |
# |DRI         |0xFFDD      |Yes     | restart interval (2-4 bytes)  |
# |DHT         |0xFFC4      |Yes     | huffman table                 |
# |SOF0..SOF15 |0xFFC0-CF   |Yes     | start of frame (T.81)         |
# |SOF_55      |0xFFF7      |Yes     | start of frame (JPEG-LS)      |
# |LSE         |0xFFF8      |Yes     | JPEG-LS extended parameters   |
# |APP0..APP15 |0xFFE0-EF   |Yes     | application data              |
# |COM         |0xFFFE      |Yes     | comment                       |
# --------------------------------------------------------------------
# The size field counts itself, so the payload is size - 2 bytes.
from dataclasses import dataclass
from enum import IntEnum, unique
from typing import Dict

import numpy as np


@unique
class JpegMarker(IntEnum):
    RESTART0 = 0xD0  # RST0
    RESTART7 = 0xD7  # RST7
    START_OF_IMAGE = 0xD8  # SOI
    END_OF_IMAGE = 0xD9  # EOI
    START_OF_SCAN = 0xDA  # SOS
    DEFINE_QUANTIZATION_TABLE = 0xDB  # DQT
    DEFINE_NUMBER_OF_LINES = 0xDC  # DNL
    DEFINE_RESTART_INTERVAL = 0xDD  # DRI
    DEFINE_HIERARCHICAL_PROGRESSION = 0xDE  # DHP
    EXPAND_REFERENCE_COMPONENTS = 0xDF  # EXP
    DEFINE_HUFFMAN_TABLE = 0xC4  # DHT
    DEFINE_ARITHMETIC_CODING = 0xCC  # DAC
    START_OF_FRAME_JPEGLS = 0xF7  # SOF_55: Marks the start of a (JPEG-LS) encoded frame.
    JPEGLS_EXTENDED_PARAMETERS = 0xF8  # LSE: JPEG-LS extended parameters.
    APPLICATION_DATA0 = 0xE0  # APP0: used for JFIF header.
    APPLICATION_DATA7 = 0xE7  # APP7: HP color space.
    APPLICATION_DATA8 = 0xE8  # APP8: SPIFF header or HP colorXForm.
    APPLICATION_DATA14 = 0xEE  # APP14: used by Adobe.
    COMMENT = 0xFE  # COM


ITU_T81 = "defined in ITU T.81/IEC 10918-1"
ITU_T87 = "defined in ITU T.87/IEC 14495-1 JPEG LS"

# SOFn codes share the frame header layout; C4, C8 and CC are not frames.
START_OF_FRAME_MODES: Dict[int, str] = {
    0xC0: "Baseline DCT",
    0xC1: "Extended sequential DCT",
    0xC2: "Progressive DCT",
    0xC3: "Lossless",
    0xC5: "Differential sequential DCT",
    0xC6: "Differential progressive DCT",
    0xC7: "Differential lossless",
    0xC9: "Extended sequential DCT, arithmetic",
    0xCA: "Progressive DCT, arithmetic",
    0xCB: "Lossless, arithmetic",
    0xCD: "Differential sequential DCT, arithmetic",
    0xCE: "Differential progressive DCT, arithmetic",
    0xCF: "Differential lossless, arithmetic",
}

# Length-prefixed markers that are reported by size only.
OPAQUE_SEGMENT_NAMES: Dict[int, str] = {
    JpegMarker.DEFINE_ARITHMETIC_CODING: "DAC (Define Arithmetic Coding conditioning)",
    JpegMarker.DEFINE_NUMBER_OF_LINES: "DNL (Define Number of Lines)",
    JpegMarker.DEFINE_HIERARCHICAL_PROGRESSION: "DHP (Define Hierarchical Progression)",
    JpegMarker.EXPAND_REFERENCE_COMPONENTS: "EXP (Expand Reference Components)",
}
OPAQUE_SEGMENT_NAMES.update({
    code: f"APP{code - 0xE0} (Application Data {code - 0xE0})"
    for code in range(0xE1, 0xF0)
    if code not in (JpegMarker.APPLICATION_DATA7, JpegMarker.APPLICATION_DATA8, JpegMarker.APPLICATION_DATA14)
})


def marker_info(marker: int) -> str:
    """Description printed after "Marker 0xFFxx: " for every handled marker."""
    if JpegMarker.RESTART0 <= marker <= JpegMarker.RESTART7:
        n = marker - JpegMarker.RESTART0
        return f"RST{n} (Restart Marker {n}), {ITU_T81}"
    if marker in START_OF_FRAME_MODES:
        return f"SOF{marker - 0xC0} (Start Of Frame, {START_OF_FRAME_MODES[marker]}), {ITU_T81}"
    if marker in OPAQUE_SEGMENT_NAMES:
        return f"{OPAQUE_SEGMENT_NAMES[marker]}, {ITU_T81}"

    marker_dict = {
        0xD8: f"SOI (Start Of Image), {ITU_T81}",
        0xD9: f"EOI (End Of Image), {ITU_T81}",
        0xDA: f"SOS (Start Of Scan), {ITU_T81}",
        0xDB: f"DQT (Define Quantization Table), {ITU_T81}",
        0xDD: f"DRI (Define Restart Interval), {ITU_T81}",
        0xC4: f"DHT (Define Huffman Table), {ITU_T81}",
        0xF7: f"SOF_55 (Start Of Frame JPEG-LS), {ITU_T87}",
        0xF8: f"LSE (JPEG-LS Extended parameters), {ITU_T87}",
        0xE0: f"APP0 (Application Data 0), {ITU_T81}",
        0xE7: f"APP7 (Application Data 7), {ITU_T81}",
        0xE8: f"APP8 (Application Data 8), {ITU_T81}",
        0xEE: f"APP14 (Application Data 14), {ITU_T81}",
        0xFE: f"COM (Comment), {ITU_T81}",
    }

    return marker_dict.get(marker, "Unknown Marker")


@dataclass
class ScanState:
    # Set for good once a JPEG-LS frame has started; from then on only
    # 0xFF followed by a byte with the high bit set is a marker.
    entropy_mode: bool = False


INTERLEAVE_MODE_NAMES = {
    0: "None",
    1: "Line interleaved",
    2: "Sample interleaved",
}

# SPIFF, ISO/IEC 10918-3 Annex F
SPIFF_COLOR_SPACE_NAMES = {
    0: "Bi-level black",
    1: "ITU-R BT.709 Video",
    2: "None",
    3: "ITU-R BT.601-1. (RGB)",
    4: "ITU-R BT.601-1. (video)",
    8: "Gray-scale",
    9: "Photo CD",
    10: "RGB",
    11: "CMY",
    12: "CMYK",
    13: "Transformed CMYK",
    14: "CIE 1976(L * a * b *)",
    15: "Bi-level white",
}

SPIFF_COMPRESSION_TYPE_NAMES = {
    0: "Uncompressed",
    1: "Modified Huffman",
    2: "Modified READ",
    3: "Modified Modified READ",
    4: "ISO/IEC 11544 (JBIG)",
    5: "ISO/IEC 10918-1 or ISO/IEC 10918-3 (JPEG)",
    6: "ISO/IEC 14495-1 or ISO/IEC 14495-2 (JPEG-LS)",
}

SPIFF_RESOLUTION_UNITS_NAMES = {
    0: "Aspect Ratio",
    1: "Dots per Inch",
    2: "Dots per Centimeter",
}

HP_COLOR_TRANSFORMATION_NAMES = {
    1: "HP1",
    2: "HP2",
    3: "HP3",
    4: "RGB as YUV lossy",
    5: "Matrix",
}

HP_COLOR_SPACE_NAMES = {
    1: "Gray",
    2: "Palettized",
    3: "RGB",
    4: "YUV",
    5: "HSV",
    6: "HSB",
    7: "HSL",
    8: "LAB",
    9: "CMYK",
}

ADOBE_COLOR_TRANSFORM_NAMES = {
    0: "Unknown (monochrome or RGB)",
    1: "YCbCr",
    2: "YCCK",
}

# Fixed-layout application records, all multi-byte fields big-endian.
SPIFF_HEADER = np.dtype([
    ('magic', 'S6'),
    ('high_version', 'u1'),
    ('low_version', 'u1'),
    ('profile_id', 'u1'),
    ('component_count', 'u1'),
    ('height', '>u4'),
    ('width', '>u4'),
    ('color_space', 'u1'),
    ('bits_per_sample', 'u1'),
    ('compression_type', 'u1'),
    ('resolution_units', 'u1'),
    ('vertical_resolution', '>u4'),
    ('horizontal_resolution', '>u4'),
])

SPIFF_END_OF_DIRECTORY = np.dtype([
    ('entry_type', '>u4'),
    ('start_of_image', 'S2'),
])

# HP records start with a four character tag stored little-endian.
HP_TAGGED_BYTE = np.dtype([
    ('tag', 'S4'),
    ('value', 'u1'),
])

ADOBE_APP14 = np.dtype([
    ('identifier', 'S5'),
    ('version', '>u2'),
    ('flags0', '>u2'),
    ('flags1', '>u2'),
    ('color_transform', 'u1'),
])
