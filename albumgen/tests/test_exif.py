"""Tests for EXIF extraction and orientation."""

from datetime import datetime

import piexif
import pytest

from albumgen.errors import TimestampParseError
from albumgen.exif import (
    CaptureMetadata,
    Orientation,
    convert_tag,
    decode_string,
    extract_metadata,
    parse_capture_time,
    parse_exif_time,
)


class TestOrientation:
    """Tests for Orientation."""

    @pytest.mark.parametrize('tag, expected', [
        (3, Orientation.UPSIDE_DOWN),
        (6, Orientation.CW_90),
        (8, Orientation.CCW_90),
        (1, Orientation.NONE),
        (2, Orientation.NONE),
        (None, Orientation.NONE),
    ])
    def test_from_tag(self, tag, expected):
        """Test tag values map to rotation angles."""
        assert Orientation.from_tag(tag) == expected

    def test_angles(self):
        """Test enum values are degrees."""
        assert int(Orientation.CW_90) == 90
        assert int(Orientation.CCW_90) == -90
        assert int(Orientation.UPSIDE_DOWN) == 180

    def test_swaps_dimensions(self):
        """Test only quarter turns swap width and height."""
        assert Orientation.CW_90.swaps_dimensions
        assert Orientation.CCW_90.swaps_dimensions
        assert not Orientation.UPSIDE_DOWN.swaps_dimensions
        assert not Orientation.NONE.swaps_dimensions


class TestTagConversion:
    """Tests for tag value conversion."""

    def test_decode_string_trims_padding(self):
        """Test trailing NULs are trimmed."""
        assert decode_string(b'Canon\x00\x00') == 'Canon'

    def test_decode_string_embedded_nul(self):
        """Test an embedded NUL empties the value."""
        assert decode_string(b'abc\x00def') == ''

    def test_decode_string_invalid_utf8(self):
        """Test invalid text is dropped."""
        assert decode_string(b'\xff\xfe\xfa') is None

    def test_convert_int(self):
        """Test integer kinds keep their first value."""
        assert convert_tag(piexif.TYPES.Short, 6) == 6
        assert convert_tag(piexif.TYPES.Short, (8, 8, 8)) == 8
        assert convert_tag(piexif.TYPES.Long, 4000) == 4000

    def test_convert_float(self):
        """Test float kinds keep their value."""
        assert convert_tag(piexif.TYPES.Float, 1.5) == 1.5

    def test_convert_drops_other_kinds(self):
        """Test rationals and undefined values are dropped."""
        assert convert_tag(piexif.TYPES.Rational, (72, 1)) is None
        assert convert_tag(piexif.TYPES.Undefined, b'0230') is None


class TestCaptureTime:
    """Tests for capture time parsing."""

    def test_parse_local_time(self):
        """Test EXIF dates are parsed in the local timezone."""
        result = parse_exif_time('2020:01:02 10:00:00')

        assert result.tzinfo is not None
        assert result.replace(tzinfo=None) == datetime(2020, 1, 2, 10, 0, 0)

    def test_parse_trims_nul(self):
        """Test NUL padding is ignored."""
        result = parse_exif_time('2020:01:02 10:00:00\x00')

        assert result.replace(tzinfo=None) == datetime(2020, 1, 2, 10, 0, 0)

    def test_parse_invalid(self):
        """Test a malformed date raises TimestampParseError."""
        with pytest.raises(TimestampParseError):
            parse_exif_time('0000:00:00 00:00:00')

    def test_prefers_original(self):
        """Test DateTimeOriginal wins over DateTime."""
        tags = {'DateTime': '2021:05:05 05:05:05', 'DateTimeOriginal': '2020:01:02 10:00:00'}

        assert parse_capture_time(tags).replace(tzinfo=None) == datetime(2020, 1, 2, 10)

    def test_falls_back_to_datetime(self):
        """Test DateTime is used when DateTimeOriginal is absent."""
        tags = {'DateTime': '2021:05:05 05:05:05'}

        assert parse_capture_time(tags).replace(tzinfo=None) == datetime(2021, 5, 5, 5, 5, 5)

    def test_absent(self):
        """Test no date tags gives None."""
        assert parse_capture_time({'Make': 'Canon'}) is None

    def test_unparseable(self):
        """Test an unparseable date gives None."""
        assert parse_capture_time({'DateTimeOriginal': 'yesterday'}) is None


class TestExtractMetadata:
    """Tests for extract_metadata."""

    def test_full_exif(self, jpeg_factory):
        """Test timestamp, orientation and generic tags are extracted."""
        data = jpeg_factory(
            orientation=6,
            date_time_original=b'2020:01:02 10:00:00',
            extra_0th={
                piexif.ImageIFD.Make: b'Canon',
                piexif.ImageIFD.XResolution: (72, 1),
            },
        )

        metadata = extract_metadata(data, 'a.jpg')

        assert metadata.orientation == Orientation.CW_90
        assert metadata.orientation_tag == 6
        assert metadata.captured_at.replace(tzinfo=None) == datetime(2020, 1, 2, 10, 0, 0)
        assert metadata.tags['Make'] == 'Canon'
        assert metadata.tags['Orientation'] == 6
        assert metadata.tags['DateTimeOriginal'] == '2020:01:02 10:00:00'
        assert 'XResolution' not in metadata.tags

    def test_no_exif(self, sample_image_bytes):
        """Test a JPEG without EXIF yields empty metadata."""
        metadata = extract_metadata(sample_image_bytes)

        assert metadata.captured_at is None
        assert metadata.orientation == Orientation.NONE
        assert metadata.tags == {}

    def test_undecodable_container(self):
        """Test a broken container is not fatal."""
        metadata = extract_metadata(b'not an image at all', 'broken.jpg')

        assert metadata == CaptureMetadata()

    def test_path_like_bytes_not_opened(self, tmp_path, jpeg_factory):
        """Test bytes naming another file do not read that file's EXIF."""
        other = tmp_path / 'other.jpg'
        other.write_bytes(jpeg_factory(date_time_original=b'2020:01:02 10:00:00'))

        metadata = extract_metadata(str(other).encode(), 'broken.jpg')

        assert metadata == CaptureMetadata()

    def test_unparseable_date(self, jpeg_factory):
        """Test a bad date string leaves the timestamp absent."""
        data = jpeg_factory(date_time_original=b'not a date')

        metadata = extract_metadata(data)

        assert metadata.captured_at is None
        assert metadata.tags['DateTimeOriginal'] == 'not a date'
