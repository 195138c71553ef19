"""
Pytest fixtures for albumgen tests.
"""

import io
import logging
from datetime import datetime

import pytest


def make_jpeg_bytes(
    size=(800, 600),
    color='red',
    orientation=None,
    date_time_original=None,
    date_time=None,
    extra_0th=None,
):
    """Build JPEG bytes, optionally with an EXIF block built by piexif."""
    import piexif
    from PIL import Image

    img = Image.new('RGB', size, color=color)
    buffer = io.BytesIO()

    zeroth = dict(extra_0th or {})
    exif_ifd = {}
    if orientation is not None:
        zeroth[piexif.ImageIFD.Orientation] = orientation
    if date_time is not None:
        zeroth[piexif.ImageIFD.DateTime] = date_time
    if date_time_original is not None:
        exif_ifd[piexif.ExifIFD.DateTimeOriginal] = date_time_original

    if zeroth or exif_ifd:
        exif_bytes = piexif.dump({'0th': zeroth, 'Exif': exif_ifd})
        img.save(buffer, format='JPEG', exif=exif_bytes)
    else:
        img.save(buffer, format='JPEG')
    return buffer.getvalue()


@pytest.fixture
def jpeg_factory():
    """Fixture providing the make_jpeg_bytes helper."""
    return make_jpeg_bytes


@pytest.fixture
def sample_image_bytes():
    """Fixture providing sample JPEG bytes without EXIF."""
    return make_jpeg_bytes(size=(100, 100))


@pytest.fixture
def album_dir(tmp_path):
    """Fixture providing an empty album source directory."""
    path = tmp_path / 'src' / 'trip'
    path.mkdir(parents=True)
    return path


@pytest.fixture
def config(tmp_path):
    """Fixture providing a pipeline configuration rooted in tmp_path."""
    from albumgen.config import PipelineConfig

    return PipelineConfig(
        static_root=str(tmp_path / 'static' / 'album'),
        data_root=str(tmp_path / 'data' / 'album'),
    )


@pytest.fixture
def sample_records():
    """Fixture providing records with and without capture times."""
    from albumgen.exif import CaptureMetadata
    from albumgen.image_record import ImageRecord, RenditionResult

    def record(name, when=None):
        return ImageRecord(
            path=f'/photos/trip/{name}',
            metadata=CaptureMetadata(
                captured_at=when.astimezone() if when else None,
                tags={'Make': 'Canon'},
            ),
            renditions={
                'small': RenditionResult(f'album/trip/{name[:-4]}_small.jpg', 600, 450),
                'large': RenditionResult(f'album/trip/{name[:-4]}_large.jpg', 1536, 1152),
            },
        )

    return [
        record('undated1.jpg'),
        record('late.jpg', datetime(2021, 6, 1, 12, 0, 0)),
        record('undated2.jpg'),
        record('early.jpg', datetime(2020, 1, 2, 10, 0, 0)),
    ]


@pytest.fixture
def sample_manifest(sample_records):
    """Fixture providing an assembled manifest."""
    from albumgen.manifest import AlbumManifest

    return AlbumManifest.assemble('/photos/trip', 'trip', sample_records)


@pytest.fixture
def temp_manifest_file(sample_manifest, tmp_path):
    """Fixture providing a temporary manifest file."""
    filepath = tmp_path / 'album.json'
    sample_manifest.save(str(filepath))
    return str(filepath)


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    return logging.getLogger('test')
