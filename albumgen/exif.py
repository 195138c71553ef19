"""
EXIF extraction and orientation normalization.

Decodes the embedded EXIF container with piexif and produces CaptureMetadata:
the capture timestamp, the orientation tag and a flat tag-name -> scalar map.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, Dict, Optional, Union

import piexif

from .errors import MetadataDecodeError, TimestampParseError

logger = logging.getLogger(__name__)

EXIF_TIME_FORMAT = '%Y:%m:%d %H:%M:%S'
JPEG_SOI = b'\xff\xd8'

# IFD1 describes the embedded thumbnail and would shadow IFD0 tags
IFD_NAMES = ('0th', 'Exif', 'GPS', 'Interop')

STRING_TYPES = {piexif.TYPES.Ascii}
INT_TYPES = {
    piexif.TYPES.Byte,
    piexif.TYPES.Short,
    piexif.TYPES.Long,
    piexif.TYPES.SByte,
    piexif.TYPES.SShort,
    piexif.TYPES.SLong,
}
FLOAT_TYPES = {piexif.TYPES.Float, piexif.TYPES.DFloat}

TagValue = Union[str, int, float]


class Orientation(IntEnum):
    """Rotation, in degrees clockwise, needed to display an image upright."""
    NONE = 0
    CW_90 = 90
    CCW_90 = -90
    UPSIDE_DOWN = 180

    @classmethod
    def from_tag(cls, value: Any) -> 'Orientation':
        """Map an EXIF Orientation tag value to a rotation."""
        return {3: cls.UPSIDE_DOWN, 6: cls.CW_90, 8: cls.CCW_90}.get(value, cls.NONE)

    @property
    def swaps_dimensions(self) -> bool:
        return self in (Orientation.CW_90, Orientation.CCW_90)


@dataclass(frozen=True)
class CaptureMetadata:
    """
    Metadata extracted from a source image.

    Attributes:
        captured_at: Capture time in the local timezone, or None
        orientation_tag: Raw Orientation tag value, or None
        tags: Tag name -> scalar value
    """
    captured_at: Optional[datetime] = None
    orientation_tag: Optional[int] = None
    tags: Dict[str, TagValue] = field(default_factory=dict)

    @property
    def orientation(self) -> Orientation:
        return Orientation.from_tag(self.orientation_tag)


def decode_string(raw: Union[bytes, str]) -> Optional[str]:
    """
    Decode an ASCII tag value.

    Trailing NUL padding is trimmed; a value with an embedded NUL becomes an
    empty string. Returns None for bytes that are not valid UTF-8.
    """
    if isinstance(raw, str):
        text = raw
    else:
        try:
            text = raw.decode('utf-8')
        except UnicodeDecodeError:
            return None
    text = text.rstrip('\x00')
    if '\x00' in text:
        return ''
    return text


def _first(value: Any) -> Any:
    if isinstance(value, (tuple, list)):
        return value[0] if value else None
    return value


def convert_tag(tag_type: int, raw: Any) -> Optional[TagValue]:
    """Convert a raw piexif value to a scalar, or None if the kind is dropped."""
    if tag_type in STRING_TYPES:
        return decode_string(raw)
    if tag_type in INT_TYPES:
        value = _first(raw)
        return int(value) if value is not None else None
    if tag_type in FLOAT_TYPES:
        value = _first(raw)
        return float(value) if value is not None else None
    # Rational, Undefined and anything else
    return None


def decode_exif(data: bytes) -> Dict[str, TagValue]:
    """
    Decode the EXIF container of a JPEG into a flat tag map.

    Raises:
        MetadataDecodeError: If the container is unreadable
    """
    # piexif treats bytes without a known magic number as a file name
    if data[:2] != JPEG_SOI:
        raise MetadataDecodeError("Not a JPEG stream")
    try:
        exif_dict = piexif.load(data)
    except Exception as e:
        raise MetadataDecodeError(f"Cannot decode EXIF: {e}") from e

    tags: Dict[str, TagValue] = {}
    for ifd in IFD_NAMES:
        known = piexif.TAGS.get(ifd, {})
        for tag_id, raw in (exif_dict.get(ifd) or {}).items():
            info = known.get(tag_id)
            if info is None:
                continue
            value = convert_tag(info['type'], raw)
            if value is not None:
                tags[info['name']] = value
    return tags


def parse_exif_time(value: str) -> datetime:
    """
    Parse an EXIF date string in the local timezone.

    Raises:
        TimestampParseError: If the string is not 'YYYY:MM:DD HH:MM:SS'
    """
    text = value.rstrip('\x00').strip()
    try:
        naive = datetime.strptime(text, EXIF_TIME_FORMAT)
    except ValueError as e:
        raise TimestampParseError(f"Could not parse date: {value!r}") from e
    return naive.astimezone()


def parse_capture_time(tags: Dict[str, TagValue]) -> Optional[datetime]:
    """Capture time from DateTimeOriginal, falling back to DateTime."""
    value = tags.get('DateTimeOriginal')
    if value is None:
        value = tags.get('DateTime')
    if not isinstance(value, str):
        return None
    try:
        return parse_exif_time(value)
    except TimestampParseError as e:
        logger.debug(str(e))
        return None


def extract_metadata(data: bytes, source: Optional[str] = None) -> CaptureMetadata:
    """
    Extract CaptureMetadata from raw JPEG bytes.

    A container that cannot be decoded yields empty metadata.

    Args:
        data: Raw image bytes
        source: Source path, for log messages
    """
    try:
        tags = decode_exif(data)
    except MetadataDecodeError as e:
        logger.warning(f"Error reading exif from {source or '<bytes>'}: {e}")
        return CaptureMetadata()

    captured_at = parse_capture_time(tags)
    if captured_at is None:
        logger.debug(f"No capture time for {source or '<bytes>'}")

    orientation = tags.get('Orientation')
    return CaptureMetadata(
        captured_at=captured_at,
        orientation_tag=orientation if isinstance(orientation, int) else None,
        tags=tags,
    )
