"""
GenerationProgress - Tracks and displays pipeline progress.
"""

import logging
from typing import Dict, Optional

from .image_record import ImageRecord
from .manifest import AlbumManifest


class GenerationProgress:
    """
    Displays progress with optional per-file output.

    Callbacks run in the thread joining an album's file tasks, so the
    counters are only touched by one thread per album.
    """

    def __init__(
        self,
        show_files: bool = False,
        log_interval: int = 100,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize progress tracker.

        Args:
            show_files: If True, print each file as it's processed
            log_interval: Log summary progress every N images (when not show_files)
            logger: Optional logger instance
        """
        self.show_files = show_files
        self.log_interval = log_interval
        self.logger = logger or logging.getLogger(__name__)
        self.album_counts: Dict[str, int] = {}

    def on_image_processed(self, slug: str, record: ImageRecord) -> None:
        """Called as each file task of an album joins."""
        count = self.album_counts.get(slug, 0) + 1
        self.album_counts[slug] = count

        if self.show_files:
            marker = 'OK' if record.ok else 'ERROR'
            print(f"  [{marker}] [{slug}] {record.format_status()}")
        elif count % self.log_interval == 0:
            self.logger.info(f"  Progress: {count} images in {slug}")

    def on_album_complete(self, manifest: AlbumManifest) -> None:
        """Called when an album's manifest is assembled."""
        message = (
            f"{manifest.slug}: {manifest.total_images} images, "
            f"{manifest.total_renditions} renditions, {manifest.total_failures} failures"
        )
        if self.show_files:
            print(f"--- {message} ---")
        else:
            self.logger.info(f"Album {message}")

    def on_album_failed(self, slug: str, error: BaseException) -> None:
        """Called when an album is aborted."""
        if self.show_files:
            print(f"--- {slug}: FAILED ({error}) ---")
        self.logger.error(f"Error processing album {slug}: {error}")
