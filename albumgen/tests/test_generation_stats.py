"""Tests for GenerationStats class."""

import time

from albumgen.generation_stats import GenerationStats
from albumgen.image_record import ImageRecord, RenditionResult
from albumgen.manifest import AlbumManifest


class TestGenerationStats:
    """Tests for GenerationStats class."""

    def test_elapsed_seconds(self):
        """Test elapsed time calculation."""
        stats = GenerationStats()
        stats.start_time = time.time() - 10

        assert stats.elapsed_seconds >= 10
        assert stats.elapsed_seconds < 12

    def test_rate_per_second(self):
        """Test rate calculation."""
        stats = GenerationStats()
        stats.start_time = time.time() - 10
        stats.generated = 100

        rate = stats.rate_per_second

        assert rate >= 9
        assert rate <= 11

    def test_add_manifest(self):
        """Test folding an album into the totals."""
        manifest = AlbumManifest.assemble('/photos/trip', 'trip', [
            ImageRecord(path='a.jpg', renditions={
                'small': RenditionResult('u1', 600, 450),
                'large': RenditionResult('u2', 1536, 1152, cached=True),
            }),
            ImageRecord(path='b.jpg', failures={'small': 'boom', 'large': 'boom'}),
            ImageRecord(path='c.jpg', error='unreadable', failures={'small': 'x', 'large': 'x'}),
        ])
        stats = GenerationStats()

        stats.add_manifest(manifest)

        assert stats.albums == 1
        assert stats.images == 3
        assert stats.generated == 1
        assert stats.cached == 1
        assert stats.errors == 3
        assert len(stats.error_details) == 3
        assert "c.jpg: unreadable" in stats.error_details
        assert stats.has_errors

    def test_add_album_error(self):
        """Test album failures are counted."""
        stats = GenerationStats()

        stats.add_album_error('gone', 'source dir not found')

        assert stats.failed_albums == 1
        assert stats.error_details == ['album gone: source dir not found']
        assert stats.has_errors

    def test_no_errors(self):
        """Test a clean run has no errors."""
        assert GenerationStats().has_errors is False
