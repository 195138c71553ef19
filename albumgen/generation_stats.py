"""
GenerationStats - Statistics for a pipeline run.
"""

import time
from dataclasses import dataclass, field
from typing import List

from .manifest import AlbumManifest


@dataclass
class GenerationStats:
    """
    Statistics for a pipeline run.

    Only updated from the joining thread, after each album's fan-in.

    Attributes:
        albums: Albums processed successfully
        failed_albums: Albums aborted (source directory missing or unreadable)
        images: Source images processed
        generated: Renditions written this run
        cached: Renditions reused from a previous run
        errors: Failed renditions plus unreadable sources
        start_time: Start timestamp
        error_details: List of error messages
    """
    albums: int = 0
    failed_albums: int = 0
    images: int = 0
    generated: int = 0
    cached: int = 0
    errors: int = 0
    start_time: float = field(default_factory=time.time)
    error_details: List[str] = field(default_factory=list)

    def add_manifest(self, manifest: AlbumManifest) -> None:
        """Fold one album's results into the totals."""
        self.albums += 1
        self.images += manifest.total_images
        for record in manifest.records:
            for result in record.renditions.values():
                if result.cached:
                    self.cached += 1
                else:
                    self.generated += 1
            if record.error:
                self.errors += 1
                self.error_details.append(f"{record.path}: {record.error}")
                continue
            for label, message in record.failures.items():
                self.errors += 1
                self.error_details.append(f"{record.path} [{label}]: {message}")

    def add_album_error(self, slug: str, message: str) -> None:
        self.failed_albums += 1
        self.error_details.append(f"album {slug}: {message}")

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds."""
        return time.time() - self.start_time

    @property
    def rate_per_second(self) -> float:
        """Generated renditions per second."""
        if self.elapsed_seconds > 0:
            return self.generated / self.elapsed_seconds
        return 0.0

    @property
    def has_errors(self) -> bool:
        return self.errors > 0 or self.failed_albums > 0
