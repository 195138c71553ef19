"""
RenditionCache - Decides whether an existing rendition can be reused.
"""

import hashlib
import logging
import os
from typing import Optional

from .codec import RenditionCodec
from .config import CACHE_EXISTS, CACHE_FINGERPRINT
from .errors import DecodeError
from .image_record import RenditionResult


def source_digest(data: bytes) -> str:
    """SHA-256 of the source bytes."""
    return hashlib.sha256(data).hexdigest()


def fingerprint(digest: str, width: int, quality: int, angle: int) -> str:
    """Fingerprint of everything that determines a rendition's bytes."""
    key = f"{digest}:{width}:{quality}:{angle}"
    return 'albumgen:' + hashlib.sha256(key.encode('ascii')).hexdigest()


class RenditionCache:
    """
    Cache check in front of the codec.

    With the 'exists' policy any existing destination is a hit and is trusted
    as is. With the 'fingerprint' policy the destination must carry the
    expected fingerprint in its JPEG comment.
    """

    def __init__(
        self,
        codec: RenditionCodec,
        policy: str = CACHE_EXISTS,
        logger: Optional[logging.Logger] = None
    ):
        self.codec = codec
        self.policy = policy
        self.logger = logger or logging.getLogger(__name__)

    def lookup(
        self,
        dest: str,
        url: str,
        expected: Optional[str] = None
    ) -> Optional[RenditionResult]:
        """
        Return the cached rendition at dest, or None on a miss.

        Args:
            dest: Destination path
            url: Relative URL of dest
            expected: Fingerprint the file must carry (fingerprint policy)
        """
        if not os.path.exists(dest):
            return None

        try:
            width, height, comment = self.codec.probe(dest)
        except DecodeError as e:
            self.logger.warning(f"Unreadable rendition, regenerating: {e}")
            return None

        if self.policy == CACHE_FINGERPRINT and comment != expected:
            self.logger.info(f"Stale rendition, regenerating: {dest}")
            return None

        self.logger.debug(f"Cache hit: {dest} ({width}x{height})")
        return RenditionResult(url=url, width=width, height=height, cached=True)
