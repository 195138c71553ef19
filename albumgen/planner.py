"""
DerivationRules - Decides which renditions each source file gets.
"""

import os
from dataclasses import dataclass
from typing import Dict

SMALL = 'small'
MEDIUM = 'medium'
LARGE = 'large'

LABELS = (SMALL, MEDIUM, LARGE)


@dataclass(frozen=True)
class DerivationRules:
    """
    Label to width table plus the cover-file predicate.

    Every file gets a small and a large rendition; the album cover
    additionally gets a medium one.

    Attributes:
        small_width: Width of the small rendition
        medium_width: Width of the medium rendition (cover only)
        large_width: Width of the large rendition
        cover_name: Basename identifying the album cover, compared lowercased
    """
    small_width: int = 600
    medium_width: int = 800
    large_width: int = 1536
    cover_name: str = 'cover.jpg'

    def is_cover(self, filename: str) -> bool:
        """True if the file is the album cover."""
        return os.path.basename(filename).lower() == self.cover_name.lower()

    def plan(self, filename: str) -> Dict[str, int]:
        """
        Build the derivation plan for a single source file.

        Args:
            filename: Source file name or path

        Returns:
            Dict mapping rendition label -> target width
        """
        widths = {SMALL: self.small_width}
        if self.is_cover(filename):
            widths[MEDIUM] = self.medium_width
            widths[LARGE] = self.large_width
        else:
            widths[LARGE] = self.large_width
        return widths

    @property
    def widths(self) -> Dict[str, int]:
        """All configured widths by label."""
        return {
            SMALL: self.small_width,
            MEDIUM: self.medium_width,
            LARGE: self.large_width,
        }
