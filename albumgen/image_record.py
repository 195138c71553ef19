"""
ImageRecord - Record for a single source image and its renditions.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional

from .exif import CaptureMetadata
from .planner import LABELS


@dataclass(frozen=True)
class RenditionResult:
    """
    One written (or reused) rendition.

    Attributes:
        url: Path relative to the static root, with URL prefix
        width: Pixel width of the file
        height: Pixel height of the file
        cached: True if an existing file was reused (not serialized)
    """
    url: str
    width: int
    height: int
    cached: bool = field(default=False, compare=False)

    def to_dict(self) -> dict:
        return {'url': self.url, 'width': self.width, 'height': self.height}

    @classmethod
    def from_dict(cls, data: dict) -> 'RenditionResult':
        return cls(url=data['url'], width=data['width'], height=data['height'])


@dataclass
class ImageRecord:
    """
    Record for a single source image.

    Attributes:
        path: Source image path
        metadata: Capture metadata from EXIF
        renditions: Dict mapping label -> RenditionResult
        failures: Dict mapping label -> error message for failed renditions
        error: File-level error (source unreadable), if any
    """
    path: str
    metadata: CaptureMetadata = field(default_factory=CaptureMetadata)
    renditions: Dict[str, RenditionResult] = field(default_factory=dict)
    failures: Dict[str, str] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def captured_at(self) -> Optional[datetime]:
        return self.metadata.captured_at

    @property
    def filename(self) -> str:
        return self.path.replace('\\', '/').rsplit('/', 1)[-1]

    @property
    def planned_labels(self) -> set:
        """Labels that were planned, whether they succeeded or failed."""
        return set(self.renditions) | set(self.failures)

    @property
    def ok(self) -> bool:
        return self.error is None and not self.failures

    def get_rendition(self, label: str) -> Optional[RenditionResult]:
        """Get rendition for a label."""
        return self.renditions.get(label)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = {
            'path': self.path,
            'date_time': self.captured_at.isoformat() if self.captured_at else None,
        }
        for label in LABELS:
            if label in self.renditions:
                data[label] = self.renditions[label].to_dict()
        data['exif'] = dict(self.metadata.tags)
        if self.failures:
            data['failures'] = dict(self.failures)
        if self.error:
            data['error'] = self.error
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'ImageRecord':
        """Create from dictionary."""
        date_time = data.get('date_time')
        tags = data.get('exif') or {}
        orientation = tags.get('Orientation')
        metadata = CaptureMetadata(
            captured_at=datetime.fromisoformat(date_time) if date_time else None,
            orientation_tag=orientation if isinstance(orientation, int) else None,
            tags=tags,
        )
        renditions = {
            label: RenditionResult.from_dict(data[label])
            for label in LABELS if label in data
        }
        return cls(
            path=data['path'],
            metadata=metadata,
            renditions=renditions,
            failures=data.get('failures', {}),
            error=data.get('error'),
        )

    def format_status(self) -> str:
        """
        Format a human-readable status line.

        Returns:
            Status string like "a.jpg - small 600x450, large 1536x1152"
        """
        if self.error:
            return f"{self.filename} - FAILED ({self.error})"

        parts = []
        for label in LABELS:
            if label in self.renditions:
                r = self.renditions[label]
                suffix = " cached" if r.cached else ""
                parts.append(f"{label} {r.width}x{r.height}{suffix}")
            elif label in self.failures:
                parts.append(f"{label} FAILED")
        return f"{self.filename} - {', '.join(parts) or 'no renditions'}"
