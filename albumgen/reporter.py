"""
Reporter - Generates human-readable reports from album manifests.
"""

import logging
import sys
from collections import Counter
from typing import Optional, TextIO

from .generation_stats import GenerationStats
from .manifest import AlbumManifest
from .planner import LABELS


class Reporter:
    """
    Generates human-readable reports from manifest data.
    """

    def __init__(
        self,
        output: Optional[TextIO] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize reporter.

        Args:
            output: Output stream (default: stdout)
            logger: Optional logger instance
        """
        self.output = output or sys.stdout
        self.logger = logger or logging.getLogger(__name__)

    def _print(self, text: str = "") -> None:
        """Print to output stream."""
        print(text, file=self.output)

    def _format_duration(self, seconds: float) -> str:
        """Format duration as human-readable string."""
        if seconds < 60:
            return f"{seconds:.1f} seconds"
        elif seconds < 3600:
            return f"{seconds / 60:.1f} minutes"
        else:
            return f"{seconds / 3600:.1f} hours"

    def report_summary(self, manifest: AlbumManifest) -> None:
        """Print a summary of one album manifest."""
        self._print("=" * 60)
        self._print(f"ALBUM SUMMARY: {manifest.slug}")
        self._print("=" * 60)
        self._print(f"  Source:          {manifest.path}")
        self._print(f"  Created:         {manifest.created_at}")
        self._print()

        undated = manifest.total_images - manifest.total_dated
        self._print(f"  Total Images:    {manifest.total_images:>8,}")
        self._print(f"  With Date:       {manifest.total_dated:>8,}")
        self._print(f"  Without Date:    {undated:>8,}")
        self._print()

        by_label = Counter(
            label for record in manifest.records for label in record.renditions
        )
        self._print("  Renditions:")
        for label in LABELS:
            self._print(f"    {label:<10} {by_label.get(label, 0):>8,}")
        self._print()

        if manifest.total_failures:
            self._print(f"  WARNING: {manifest.total_failures} failed renditions")
            self._print()

    def report_detailed(self, manifest: AlbumManifest) -> None:
        """Print the summary followed by one line per image in manifest order."""
        self.report_summary(manifest)

        self._print("-" * 60)
        self._print("IMAGES (by capture time)")
        self._print("-" * 60)
        for record in manifest.records:
            when = record.captured_at.strftime('%Y-%m-%d %H:%M:%S') if record.captured_at else 'undated'
            self._print(f"  {when:<20} {record.format_status()}")
            for label, message in sorted(record.failures.items()):
                self._print(f"      {label}: {message}")
        self._print()

    def report_run(self, stats: GenerationStats) -> None:
        """Print totals for a pipeline run."""
        self._print(f"Albums: {stats.albums} ({stats.failed_albums} failed)")
        self._print(f"Images: {stats.images}")
        self._print(f"Generated: {stats.generated}")
        self._print(f"Cached: {stats.cached}")
        self._print(f"Errors: {stats.errors}")
        self._print(f"Time: {self._format_duration(stats.elapsed_seconds)}")
