"""
PipelineConfig - Process-wide configuration for the rendition pipeline.

Constructed once at startup and passed to every component.
"""

import os
import posixpath
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .planner import DerivationRules

CACHE_EXISTS = 'exists'
CACHE_FINGERPRINT = 'fingerprint'
CACHE_POLICIES = (CACHE_EXISTS, CACHE_FINGERPRINT)

DEFAULT_QUALITY = 80


def default_quality_table(rules: DerivationRules) -> Dict[int, int]:
    """Quality 80 for every configured width."""
    return {width: DEFAULT_QUALITY for width in rules.widths.values()}


@dataclass
class PipelineConfig:
    """
    Configuration for a pipeline run.

    Attributes:
        static_root: Directory receiving per-album rendition directories
        data_root: Directory receiving per-album manifests
        url_prefix: Prefix for rendition URLs (relative to static_root)
        rules: Derivation rules (widths and cover detection)
        quality: JPEG quality by target width
        default_quality: Quality for widths missing from the table
        cache_policy: 'exists' or 'fingerprint'
        max_workers: Optional cap on concurrent tasks per level (None = one per task)
    """
    static_root: str
    data_root: str
    url_prefix: str = 'album'
    rules: DerivationRules = field(default_factory=DerivationRules)
    quality: Dict[int, int] = field(default_factory=dict)
    default_quality: int = DEFAULT_QUALITY
    cache_policy: str = CACHE_EXISTS
    max_workers: Optional[int] = None

    def __post_init__(self):
        if not self.quality:
            self.quality = default_quality_table(self.rules)

    @classmethod
    def from_env(cls) -> 'PipelineConfig':
        """Create configuration from ALBUMGEN_* environment variables."""
        max_workers = os.getenv('ALBUMGEN_MAX_WORKERS')
        return cls(
            static_root=os.getenv('ALBUMGEN_STATIC_ROOT', ''),
            data_root=os.getenv('ALBUMGEN_DATA_ROOT', ''),
            url_prefix=os.getenv('ALBUMGEN_URL_PREFIX', 'album'),
            cache_policy=os.getenv('ALBUMGEN_CACHE_POLICY', CACHE_EXISTS),
            max_workers=int(max_workers) if max_workers else None,
        )

    def validate(self) -> List[str]:
        """
        Check the configuration.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []
        if not self.static_root:
            errors.append("Static root is required (--static-root or ALBUMGEN_STATIC_ROOT)")
        if not self.data_root:
            errors.append("Data root is required (--data-root or ALBUMGEN_DATA_ROOT)")
        if self.cache_policy not in CACHE_POLICIES:
            errors.append(
                f"Unknown cache policy {self.cache_policy!r} "
                f"(expected one of: {', '.join(CACHE_POLICIES)})"
            )
        for label, width in self.rules.widths.items():
            if width <= 0:
                errors.append(f"Width for {label} must be positive, got {width}")
        for width, quality in self.quality.items():
            if not 1 <= quality <= 100:
                errors.append(f"Quality for width {width} must be 1-100, got {quality}")
        if not 1 <= self.default_quality <= 100:
            errors.append(f"Default quality must be 1-100, got {self.default_quality}")
        if self.max_workers is not None and self.max_workers < 1:
            errors.append(f"Max workers must be at least 1, got {self.max_workers}")
        return errors

    def quality_for(self, width: int) -> int:
        """JPEG quality for a target width."""
        return self.quality.get(width, self.default_quality)

    def album_static_dir(self, slug: str) -> str:
        """Directory receiving an album's renditions."""
        return os.path.join(self.static_root, slug)

    def album_data_dir(self, slug: str) -> str:
        """Directory receiving an album's manifest."""
        return os.path.join(self.data_root, slug)

    def relative_url(self, path: str) -> str:
        """
        Make a rendition path relative to the static root.

        Converts: <static_root>/trip/a_small.jpg -> album/trip/a_small.jpg
        """
        rel = os.path.relpath(path, self.static_root)
        parts = rel.split(os.sep)
        if self.url_prefix:
            return posixpath.join(self.url_prefix, *parts)
        return posixpath.join(*parts)
