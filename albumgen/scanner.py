"""
Scanner - Lists the candidate source images of an album directory.
"""

import logging
import os
from typing import List, Optional

from .errors import AlbumScanError

# Our own outputs from earlier runs, never treated as sources
RENDITION_SUFFIXES = ('_small.jpg', '_medium.jpg', '_large.jpg')


def is_candidate(name: str, is_dir: bool = False) -> bool:
    """
    Check whether a directory entry is a source image.

    Args:
        name: Entry name
        is_dir: True if the entry is a directory

    Returns:
        True if the entry should be processed
    """
    if is_dir:
        return False
    if not name.lower().endswith('.jpg'):
        return False
    return not name.endswith(RENDITION_SUFFIXES)


def list_candidates(src_dir: str, logger: Optional[logging.Logger] = None) -> List[str]:
    """
    List candidate source files in directory order.

    Args:
        src_dir: Album source directory
        logger: Optional logger instance

    Returns:
        List of full paths

    Raises:
        AlbumScanError: If the directory is missing or unreadable
    """
    logger = logger or logging.getLogger(__name__)

    if not os.path.isdir(src_dir):
        raise AlbumScanError(f"Source directory {src_dir} not found", path=src_dir)

    try:
        with os.scandir(src_dir) as entries:
            paths = [
                entry.path for entry in entries
                if is_candidate(entry.name, entry.is_dir())
            ]
    except OSError as e:
        raise AlbumScanError(f"Cannot read source directory {src_dir}: {e}", path=src_dir) from e

    logger.debug(f"Found {len(paths)} source images in {src_dir}")
    return paths
