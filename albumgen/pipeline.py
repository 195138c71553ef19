"""
AlbumPipeline - Derives renditions for albums and assembles their manifests.

Two fan-out/fan-in levels: one task per album, and within each album one
task per source file. Every task returns a value; failures are recorded on
the ImageRecord (file and rendition level) or the AlbumOutcome (album level).
"""

import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .cache import RenditionCache, fingerprint, source_digest
from .codec import RenditionCodec
from .config import PipelineConfig
from .errors import DecodeError, DestinationWriteError, SourceReadError
from .exif import extract_metadata
from .generation_progress import GenerationProgress
from .generation_stats import GenerationStats
from .image_record import ImageRecord, RenditionResult
from .manifest import MANIFEST_FILENAME, AlbumManifest
from .scanner import list_candidates
from .scheduler import TaskOutcome, fan_out


@dataclass(frozen=True)
class AlbumSource:
    """An album to process: its slug and source directory."""
    slug: str
    src_dir: str


@dataclass
class AlbumOutcome:
    """Manifest or error for one album."""
    source: AlbumSource
    manifest: Optional[AlbumManifest] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def load_bytes(path: str) -> bytes:
    """
    Read a source image.

    Raises:
        SourceReadError: If the file cannot be opened or read
    """
    try:
        with open(path, 'rb') as f:
            return f.read()
    except OSError as e:
        raise SourceReadError(f"Could not read raw image {path}: {e}", path=path) from e


def rendition_path(dest_dir: str, src_path: str, label: str) -> str:
    """Destination of a rendition: <stem>_<label>.jpg in dest_dir."""
    stem = os.path.splitext(os.path.basename(src_path))[0]
    return os.path.join(dest_dir, f"{stem}_{label}.jpg")


class AlbumPipeline:
    """
    Runs the rendition pipeline over one or more albums.
    """

    def __init__(
        self,
        config: PipelineConfig,
        codec: Optional[RenditionCodec] = None,
        cache: Optional[RenditionCache] = None,
        progress: Optional[GenerationProgress] = None,
        write_manifests: bool = True,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize pipeline.

        Args:
            config: Pipeline configuration
            codec: Optional codec (default: built from config qualities)
            cache: Optional cache check (default: config cache policy)
            progress: Optional progress tracker
            write_manifests: If True, save each album's manifest under the data root
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.codec = codec or RenditionCodec(
            quality=config.quality,
            default_quality=config.default_quality,
            logger=self.logger,
        )
        self.cache = cache or RenditionCache(self.codec, config.cache_policy, self.logger)
        self.progress = progress
        self.write_manifests = write_manifests
        self.stats = GenerationStats()

    def run(self, sources: Sequence[AlbumSource]) -> List[AlbumOutcome]:
        """
        Process albums concurrently, one task per album.

        Args:
            sources: Albums to process

        Returns:
            One AlbumOutcome per album, in completion order
        """
        self.stats = GenerationStats()
        self.logger.info(f"Processing {len(sources)} albums")

        album_outcomes: List[AlbumOutcome] = []

        def collect(outcome: TaskOutcome) -> None:
            source = outcome.item
            if outcome.ok:
                album_outcomes.append(AlbumOutcome(source=source, manifest=outcome.result))
                self.stats.add_manifest(outcome.result)
            else:
                album_outcomes.append(AlbumOutcome(source=source, error=str(outcome.error)))
                self.stats.add_album_error(source.slug, str(outcome.error))
                if self.progress:
                    self.progress.on_album_failed(source.slug, outcome.error)
                else:
                    self.logger.error(f"Error processing album {source.slug}: {outcome.error}")

        fan_out(sources, self._run_album, self.config.max_workers, on_result=collect)

        self.logger.info(
            f"Run complete: {self.stats.albums} albums, {self.stats.generated} generated, "
            f"{self.stats.cached} cached, {self.stats.errors} errors, "
            f"{self.stats.failed_albums} failed albums ({self.stats.elapsed_seconds:.1f}s)"
        )
        return album_outcomes

    def _run_album(self, source: AlbumSource) -> AlbumManifest:
        manifest = self.process_album(source)
        if self.write_manifests:
            data_dir = self.config.album_data_dir(source.slug)
            manifest.save(os.path.join(data_dir, MANIFEST_FILENAME))
        return manifest

    def process_album(self, source: AlbumSource) -> AlbumManifest:
        """
        Process one album, one task per source file.

        Args:
            source: Album to process

        Returns:
            AlbumManifest with records sorted by capture time

        Raises:
            AlbumScanError: If the source directory is missing or unreadable
        """
        paths = list_candidates(source.src_dir, self.logger)
        dest_dir = self.config.album_static_dir(source.slug)
        self.logger.info(f"Album {source.slug}: {len(paths)} images from {source.src_dir}")

        records: List[ImageRecord] = []

        def collect(outcome: TaskOutcome) -> None:
            if outcome.ok:
                record = outcome.result
            else:
                record = self._failed_record(outcome.item, outcome.error)
            records.append(record)
            if self.progress:
                self.progress.on_image_processed(source.slug, record)

        fan_out(
            paths,
            lambda path: self.process_image(path, dest_dir),
            self.config.max_workers,
            on_result=collect,
        )

        manifest = AlbumManifest.assemble(source.src_dir, source.slug, records)
        if self.progress:
            self.progress.on_album_complete(manifest)
        return manifest

    def process_image(self, src_path: str, dest_dir: str) -> ImageRecord:
        """
        Derive all planned renditions of a single source file.

        Args:
            src_path: Source image path
            dest_dir: Album output directory

        Returns:
            ImageRecord; failed renditions are listed in its failures
        """
        plan = self.config.rules.plan(src_path)
        record = ImageRecord(path=src_path)

        try:
            data = load_bytes(src_path)
        except SourceReadError as e:
            self.logger.error(str(e))
            record.error = str(e)
            record.failures = {label: 'source unreadable' for label in plan}
            return record

        record.metadata = extract_metadata(data, src_path)
        orientation = record.metadata.orientation
        digest = source_digest(data)

        try:
            os.makedirs(dest_dir, exist_ok=True)
        except OSError as e:
            message = f"Cannot create {dest_dir}: {e}"
            self.logger.error(f"Error processing {src_path}: {message}")
            record.failures = {label: message for label in plan}
            return record

        decoded = None
        decode_error: Optional[DecodeError] = None

        for label, width in plan.items():
            dest = rendition_path(dest_dir, src_path, label)
            url = self.config.relative_url(dest)
            expected = fingerprint(digest, width, self.codec.quality_for(width), int(orientation))

            try:
                result = self.cache.lookup(dest, url, expected)
                if result is None:
                    if decode_error:
                        raise decode_error
                    if decoded is None:
                        try:
                            decoded = self.codec.decode(data, src_path)
                        except DecodeError as e:
                            decode_error = e
                            raise
                    out_width, out_height = self.codec.render(decoded, width, orientation, dest, expected)
                    result = RenditionResult(url=url, width=out_width, height=out_height)
            except (DecodeError, DestinationWriteError) as e:
                self.logger.error(f"Error processing {src_path} [{label}]: {e}")
                record.failures[label] = str(e)
                continue

            record.renditions[label] = result

        return record

    def _failed_record(self, src_path: str, error: BaseException) -> ImageRecord:
        """Record for a file task that raised unexpectedly."""
        plan = self.config.rules.plan(src_path)
        return ImageRecord(
            path=src_path,
            failures={label: str(error) for label in plan},
            error=str(error),
        )
