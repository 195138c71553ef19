"""
AlbumManifest - Ordered description of one album's images and renditions.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

from .image_record import ImageRecord

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = 'album.json'


def sort_key(record: ImageRecord):
    if record.captured_at is None:
        return (1, 0.0)
    return (0, record.captured_at.timestamp())


def sort_records(records: Iterable[ImageRecord]) -> List[ImageRecord]:
    """
    Order records by capture time.

    Dated records come first in ascending order, undated ones after them;
    ties keep their encounter order.
    """
    return sorted(records, key=sort_key)


@dataclass
class AlbumManifest:
    """
    Manifest of a processed album.

    Attributes:
        path: Album source directory
        slug: Album slug
        records: Image records sorted by capture time
        created_at: ISO timestamp when the manifest was assembled
    """
    path: str
    slug: str
    records: List[ImageRecord] = field(default_factory=list)
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())

    @classmethod
    def assemble(cls, path: str, slug: str, records: Iterable[ImageRecord]) -> 'AlbumManifest':
        """Build a manifest from records in arrival order."""
        return cls(path=path, slug=slug, records=sort_records(records))

    @property
    def total_images(self) -> int:
        return len(self.records)

    @property
    def total_dated(self) -> int:
        """Images with a capture time."""
        return sum(1 for r in self.records if r.captured_at is not None)

    @property
    def total_renditions(self) -> int:
        return sum(len(r.renditions) for r in self.records)

    @property
    def total_failures(self) -> int:
        """Failed renditions, with an unreadable source counted once."""
        return sum(1 if r.error else len(r.failures) for r in self.records)

    @property
    def failed_records(self) -> List[ImageRecord]:
        return [r for r in self.records if not r.ok]

    def get_record(self, filename: str) -> Optional[ImageRecord]:
        """Find a record by source file name."""
        for record in self.records:
            if record.filename == filename:
                return record
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'slug': self.slug,
            'path': self.path,
            'created_at': self.created_at,
            'images': [r.to_dict() for r in self.records],
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'AlbumManifest':
        """Create from dictionary."""
        return cls(
            path=data['path'],
            slug=data['slug'],
            records=[ImageRecord.from_dict(r) for r in data.get('images', [])],
            created_at=data.get('created_at', ''),
        )

    def save(self, filepath: str) -> None:
        """Save manifest to JSON file."""
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)

        logger.info(f"Writing {path.name} for {self.slug}")
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: str) -> 'AlbumManifest':
        """Load manifest from JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)
        return cls.from_dict(data)
