"""Tests for the directory scanner."""

import os

import pytest

from albumgen.errors import AlbumScanError
from albumgen.scanner import is_candidate, list_candidates


class TestIsCandidate:
    """Tests for the entry filter."""

    @pytest.mark.parametrize('name', ['a.jpg', 'IMG_0001.JPG', 'cover.jpg', 'x.Jpg'])
    def test_accepts_jpg(self, name):
        """Test .jpg files in any case are candidates."""
        assert is_candidate(name) is True

    @pytest.mark.parametrize('name', ['a.png', 'a.jpeg', 'notes.txt', 'jpg'])
    def test_rejects_other_extensions(self, name):
        """Test non-.jpg files are skipped."""
        assert is_candidate(name) is False

    @pytest.mark.parametrize('name', ['a_small.jpg', 'a_medium.jpg', 'cover_large.jpg'])
    def test_rejects_own_outputs(self, name):
        """Test prior renditions are never sources."""
        assert is_candidate(name) is False

    def test_rejects_directories(self):
        """Test directories are skipped even with a .jpg name."""
        assert is_candidate('folder.jpg', is_dir=True) is False


class TestListCandidates:
    """Tests for list_candidates."""

    def test_filters_directory(self, album_dir, sample_image_bytes):
        """Test listing applies every filter rule."""
        for name in ['a.jpg', 'B.JPG', 'a_small.jpg', 'a_large.jpg', 'readme.txt']:
            (album_dir / name).write_bytes(sample_image_bytes)
        (album_dir / 'sub.jpg').mkdir()

        paths = list_candidates(str(album_dir))

        names = sorted(os.path.basename(p) for p in paths)
        assert names == ['B.JPG', 'a.jpg']
        assert all(os.path.isabs(p) or p.startswith(str(album_dir)) for p in paths)

    def test_empty_directory(self, album_dir):
        """Test an empty album yields no candidates."""
        assert list_candidates(str(album_dir)) == []

    def test_missing_directory(self, tmp_path):
        """Test a missing source directory raises AlbumScanError."""
        with pytest.raises(AlbumScanError) as exc_info:
            list_candidates(str(tmp_path / 'missing'))

        assert 'not found' in str(exc_info.value)
