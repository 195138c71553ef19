"""
Errors - Exception types raised by the rendition pipeline.

Rendition- and file-level errors are recovered where they occur and recorded
on the ImageRecord. Only AlbumScanError aborts a whole album.
"""

from typing import Optional


class AlbumgenError(Exception):
    """Base class for all albumgen errors."""

    def __init__(self, message: str, path: Optional[str] = None, label: Optional[str] = None):
        super().__init__(message)
        self.path = path
        self.label = label


class SourceReadError(AlbumgenError):
    """A source image could not be opened or read."""


class MetadataDecodeError(AlbumgenError):
    """The EXIF container is unreadable or malformed."""


class TimestampParseError(AlbumgenError):
    """A capture timestamp tag is present but not in EXIF date format."""


class DecodeError(AlbumgenError):
    """The JPEG payload is corrupt or unsupported."""


class DestinationWriteError(AlbumgenError):
    """An output rendition could not be created or written."""


class AlbumScanError(AlbumgenError):
    """An album source directory is missing or unreadable."""


class DiscoveryError(AlbumgenError):
    """An album content file has unreadable front matter."""
