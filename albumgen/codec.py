"""
RenditionCodec - Decodes, resizes, rotates and encodes JPEG renditions.
"""

import io
import logging
import os
import tempfile
from typing import Dict, Optional, Tuple

from PIL import Image

from .errors import DecodeError, DestinationWriteError
from .exif import Orientation

# Renditions are served from a static site by another user
RENDITION_MODE = 0o644

# One transpose per orientation class. Pillow's ROTATE_* turn counter-clockwise.
TRANSPOSE = {
    Orientation.CW_90: Image.Transpose.ROTATE_270,
    Orientation.CCW_90: Image.Transpose.ROTATE_90,
    Orientation.UPSIDE_DOWN: Image.Transpose.ROTATE_180,
}


def scaled_height(width: int, original_width: int, original_height: int) -> int:
    """Height preserving the aspect ratio at the given width."""
    return max(1, round(width * original_height / original_width))


class RenditionCodec:
    """
    Produces JPEG renditions from decoded source images using Pillow.
    """

    def __init__(
        self,
        quality: Optional[Dict[int, int]] = None,
        default_quality: int = 80,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize codec.

        Args:
            quality: JPEG quality by target width
            default_quality: Quality for widths missing from the table (default: 80)
            logger: Optional logger instance
        """
        self.quality = quality or {}
        self.default_quality = default_quality
        self.logger = logger or logging.getLogger(__name__)

    def quality_for(self, width: int) -> int:
        """JPEG quality for a target width."""
        return self.quality.get(width, self.default_quality)

    def decode(self, data: bytes, source: Optional[str] = None) -> Image.Image:
        """
        Decode JPEG bytes into an RGB image.

        Raises:
            DecodeError: If the payload is not a readable JPEG
        """
        try:
            img = Image.open(io.BytesIO(data))
            if img.format != 'JPEG':
                raise DecodeError(f"Not a JPEG ({img.format})", path=source)
            img.load()
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            raise DecodeError(f"Cannot decode {source or 'image'}: {e}", path=source) from e
        return self._convert_color_mode(img)

    def resize(self, img: Image.Image, width: int) -> Image.Image:
        """Resize to a target width, preserving aspect ratio."""
        height = scaled_height(width, img.width, img.height)
        return img.resize((width, height), Image.Resampling.LANCZOS)

    def rotate(self, img: Image.Image, orientation: Orientation) -> Image.Image:
        """
        Rotate an image upright.

        For W x H input, CW_90 gives output (x, y) = input (y, H-1-x) and
        CCW_90 gives output (x, y) = input (W-1-y, x); both yield H x W.
        """
        method = TRANSPOSE.get(orientation)
        if method is None:
            return img
        return img.transpose(method)

    def encode(
        self,
        img: Image.Image,
        dest: str,
        quality: int,
        comment: Optional[str] = None
    ) -> None:
        """
        Write a JPEG to dest via a temporary file and an atomic rename.

        Raises:
            DestinationWriteError: If the file cannot be written
        """
        dest_dir = os.path.dirname(dest) or '.'
        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                dir=dest_dir, prefix='.', suffix='.tmp', delete=False
            ) as tmp:
                tmp_path = tmp.name
                options = {'quality': quality, 'optimize': True}
                if comment:
                    options['comment'] = comment
                img.save(tmp, format='JPEG', **options)
            os.chmod(tmp_path, RENDITION_MODE)
            os.replace(tmp_path, dest)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise DestinationWriteError(f"Cannot write {dest}: {e}", path=dest) from e

    def render(
        self,
        img: Image.Image,
        width: int,
        orientation: Orientation,
        dest: str,
        comment: Optional[str] = None
    ) -> Tuple[int, int]:
        """
        Resize, rotate and encode one rendition.

        Args:
            img: Decoded source image
            width: Target width
            orientation: Rotation to apply after resizing
            dest: Destination path
            comment: Optional JPEG comment (cache fingerprint)

        Returns:
            Tuple of (width, height) of the written file
        """
        resized = self.resize(img, width)
        if orientation != Orientation.NONE:
            self.logger.info(f"Rotating {dest} by {int(orientation)}")
        rotated = self.rotate(resized, orientation)

        quality = self.quality_for(width)
        self.logger.info(f"Encoding {dest} with quality {quality}")
        self.encode(rotated, dest, quality, comment)
        return rotated.size

    def probe(self, path: str) -> Tuple[int, int, Optional[str]]:
        """
        Read the size and comment of an existing JPEG without decoding pixels.

        Returns:
            Tuple of (width, height, comment)

        Raises:
            DecodeError: If the file cannot be read as an image
        """
        try:
            with Image.open(path) as img:
                width, height = img.size
                comment = img.info.get('comment')
        except OSError as e:
            raise DecodeError(f"Cannot read {path}: {e}", path=path) from e

        if isinstance(comment, bytes):
            comment = comment.decode('ascii', errors='replace')
        return width, height, comment

    def _convert_color_mode(self, img: Image.Image) -> Image.Image:
        """Convert image to RGB for JPEG output."""
        if img.mode != 'RGB':
            return img.convert('RGB')
        return img
