"""Tests for scanning whole streams."""
import io
import pytest

from jpeg_dump.errors import MalformedSegmentError
from jpeg_dump.reader import JpegStreamReader, dump_file

SOI_LINE = "00000000 Marker 0xFFD8: SOI (Start Of Image), defined in ITU T.81/IEC 10918-1"

# SOI, SOF_55 (1 component, 1x1 image) at offset 2, ends at offset 15.
JPEGLS_HEADER = b"\xFF\xD8" + b"\xFF\xF7\x00\x0B\x08\x00\x01\x00\x01\x01\x01\x11\x00"


def dump(data):
    lines = []
    reader = JpegStreamReader(io.BytesIO(data), lines.append)
    reader.dump()
    return lines, reader


def marker_lines(lines):
    return [line for line in lines if " Marker 0xFF" in line]


class TestScanner:
    """Tests for marker detection."""

    def test_start_of_image_only(self):
        lines, reader = dump(b"\xFF\xD8")
        assert lines == [SOI_LINE]
        assert reader.state.entropy_mode is False

    def test_empty_stream(self):
        lines, _ = dump(b"")
        assert lines == []

    def test_leading_garbage_is_skipped(self):
        lines, _ = dump(b"\x00\x12\x34\xFF\xD8")
        assert lines == ["00000003 Marker 0xFFD8: SOI (Start Of Image), defined in ITU T.81/IEC 10918-1"]

    def test_trailing_prefix_without_code(self):
        """Test a lone 0xFF at the end of the stream ends the scan."""
        lines, _ = dump(b"\xFF\xD8\xFF")
        assert lines == [SOI_LINE]

    def test_stuffed_zero_is_not_a_marker(self):
        lines, _ = dump(b"\xFF\xD8\x12\xFF\x00\x34\xFF\xD9")
        assert marker_lines(lines) == [
            SOI_LINE,
            "00000006 Marker 0xFFD9: EOI (End Of Image), defined in ITU T.81/IEC 10918-1",
        ]

    def test_unknown_marker_resumes_at_next_byte(self):
        """Test the fallback consumes only the two marker bytes."""
        lines, _ = dump(b"\xFF\x01\xFF\xD9")
        assert lines == [
            "00000000 Marker 0xFF01",
            "00000002 Marker 0xFFD9: EOI (End Of Image), defined in ITU T.81/IEC 10918-1",
        ]

    def test_fill_byte_pair(self):
        """Test 0xFF 0xFF is reported by the fallback."""
        lines, _ = dump(b"\xFF\xFF\xD8")
        assert lines == ["00000000 Marker 0xFFFF"]

    def test_comment_payload_is_not_scanned(self):
        """Test marker-like bytes inside a comment are skipped with the payload."""
        lines, _ = dump(b"\xFF\xFE\x00\x04\xFF\xD9\xFF\xD9")
        assert lines == [
            "00000000 Marker 0xFFFE: COM (Comment), defined in ITU T.81/IEC 10918-1",
            "00000006 Marker 0xFFD9: EOI (End Of Image), defined in ITU T.81/IEC 10918-1",
        ]

    @pytest.mark.parametrize("code,name", [(0xE1, "APP1 (Application Data 1)"), (0xE8, "APP8 (Application Data 8)")])
    def test_stream_ends_inside_application_payload(self, code, name):
        """Test a cut-off APPn payload ends the dump after its size line."""
        lines, _ = dump(b"\xFF\xD8\xFF" + bytes([code]) + b"\x00\x10Exif")
        assert lines == [
            SOI_LINE,
            f"00000002 Marker 0xFF{code:02X}: {name}, defined in ITU T.81/IEC 10918-1",
            "00000004  Size = 16",
        ]

    def test_low_codes_are_markers_before_frame_start(self):
        lines, _ = dump(b"\xFF\xD8\xFF\x10")
        assert lines == [SOI_LINE, "00000002 Marker 0xFF10"]


class TestEntropyMode:
    """Tests for the JPEG-LS marker rule."""

    def test_frame_start_header(self):
        """Test the frame header of a stream whose size field overstates the payload."""
        data = b"\xFF\xD8\xFF\xF7\x00\x0D\x08\x00\x10\x00\x20\x01\x05\x11\x00"
        lines, reader = dump(data)
        assert lines == [
            SOI_LINE,
            "00000002 Marker 0xFFF7: SOF_55 (Start Of Frame JPEG-LS), defined in ITU T.87/IEC 14495-1 JPEG LS",
            "00000004  Size = 13",
            "00000006  Sample precision (P) = 8",
            "00000007  Number of lines (Y) = 16",
            "00000009  Number of samples per line (X) = 32",
            "00000011  Number of image components in a frame (Nf) = 1",
            "00000012   Component identifier (Ci) = 5",
            "00000013   H and V sampling factor (Hi + Vi) = 17 (1 + 1)",
            "00000014   Quantization table (Tqi) [reserved, should be 0] = 0",
        ]
        assert reader.state.entropy_mode is True

    def test_high_bit_clear_is_not_a_marker(self):
        lines, _ = dump(JPEGLS_HEADER + b"\x12\xFF\x10\x34\xFF\x7F\xFF\xD9")
        assert marker_lines(lines)[2:] == [
            "00000021 Marker 0xFFD9: EOI (End Of Image), defined in ITU T.81/IEC 10918-1",
        ]

    def test_restart_marker_in_scan_data(self):
        """Test RSTn keeps working: 0xD0 has the high bit set."""
        lines, _ = dump(JPEGLS_HEADER + b"\x12\xFF\xD0\x34")
        assert lines[-1] == "00000016 Marker 0xFFD0: RST0 (Restart Marker 0), defined in ITU T.81/IEC 10918-1"

    def test_mode_is_not_set_by_other_frames(self):
        """Test a baseline frame leaves the T.81 rule in place."""
        sof0 = b"\xFF\xC0\x00\x0B\x08\x00\x01\x00\x01\x01\x01\x11\x00"
        lines, reader = dump(b"\xFF\xD8" + sof0 + b"\xFF\x10")
        assert reader.state.entropy_mode is False
        assert lines[-1] == "00000015 Marker 0xFF10"

    def test_mode_is_set_before_the_frame_is_decoded(self):
        """Test the switch happens even if the frame header is malformed."""
        reader = JpegStreamReader(io.BytesIO(b"\xFF\xF7\x00\x01"), lambda line: None)
        with pytest.raises(MalformedSegmentError):
            reader.dump()
        assert reader.state.entropy_mode is True


class TestWholeStream:
    """Tests for complete JPEG-LS streams."""

    def make_stream(self):
        spiff = (
            b"SPIFF\x00\x02\x00\x00\x01"
            + (1).to_bytes(4, "big") + (1).to_bytes(4, "big")
            + b"\x08\x08\x06\x00"
            + (1).to_bytes(4, "big") + (1).to_bytes(4, "big")
        )
        return (
            b"\xFF\xD8"
            + b"\xFF\xE8\x00\x20" + spiff
            + b"\xFF\xF7\x00\x0B\x08\x00\x01\x00\x01\x01\x01\x11\x00"
            + b"\xFF\xF8\x00\x0D\x01\x00\xFF\x00\x03\x00\x07\x00\x15\x00\x40"
            + b"\xFF\xDA\x00\x08\x01\x01\x00\x00\x00\x00"
            + b"\x12\xFF\x00\x34\xFF\x7F\x56"
            + b"\xFF\xD9"
        )

    def test_markers(self):
        lines, _ = dump(self.make_stream())
        assert marker_lines(lines) == [
            SOI_LINE,
            "00000002 Marker 0xFFE8: APP8 (Application Data 8), defined in ITU T.81/IEC 10918-1",
            "00000036 Marker 0xFFF7: SOF_55 (Start Of Frame JPEG-LS), defined in ITU T.87/IEC 14495-1 JPEG LS",
            "00000049 Marker 0xFFF8: LSE (JPEG-LS Extended parameters), defined in ITU T.87/IEC 14495-1 JPEG LS",
            "00000064 Marker 0xFFDA: SOS (Start Of Scan), defined in ITU T.81/IEC 10918-1",
            "00000081 Marker 0xFFD9: EOI (End Of Image), defined in ITU T.81/IEC 10918-1",
        ]
        assert "00000006  SPIFF Header, defined in ISO/IEC 10918-3, Annex F" in lines

    def test_same_output_twice(self):
        first, _ = dump(self.make_stream())
        second, _ = dump(self.make_stream())
        assert first == second

    def test_offsets_never_decrease(self):
        lines, _ = dump(self.make_stream())
        offsets = [int(line[:8]) for line in lines]
        assert offsets == sorted(offsets)

    def test_dump_file(self, tmp_path):
        path = tmp_path / "image.jls"
        path.write_bytes(self.make_stream())
        lines = []
        dump_file(path, lines.append)
        assert lines == dump(self.make_stream())[0]
