"""
Web rendition generation for photo albums.

For each album source directory:
    1. Scan: list source JPEGs, skipping earlier outputs
    2. Derive: resize, orientation-correct and encode small/large renditions
       (plus medium for the cover), reusing renditions that already exist
    3. Assemble: build a manifest ordered by EXIF capture time

Albums, and the files within each album, are processed concurrently.
"""

__version__ = "1.0.0"

from .config import PipelineConfig
from .planner import DerivationRules
from .exif import CaptureMetadata, Orientation, extract_metadata
from .codec import RenditionCodec
from .cache import RenditionCache
from .image_record import ImageRecord, RenditionResult
from .manifest import AlbumManifest
from .scheduler import TaskOutcome, fan_out
from .generation_stats import GenerationStats
from .generation_progress import GenerationProgress
from .pipeline import AlbumPipeline, AlbumSource, AlbumOutcome
from .discovery import find_albums
from .reporter import Reporter

__all__ = [
    "PipelineConfig",
    "DerivationRules",
    "CaptureMetadata",
    "Orientation",
    "extract_metadata",
    "RenditionCodec",
    "RenditionCache",
    "ImageRecord",
    "RenditionResult",
    "AlbumManifest",
    "TaskOutcome",
    "fan_out",
    "GenerationStats",
    "GenerationProgress",
    "AlbumPipeline",
    "AlbumSource",
    "AlbumOutcome",
    "find_albums",
    "Reporter",
]
