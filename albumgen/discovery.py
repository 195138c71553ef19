"""
Album discovery from static-site front matter.

Each file in <site>/content/album/ is one album page; its slug is the file
name without extension and its `album` front matter key names the source
directory. YAML (---) and TOML (+++) front matter are supported.
"""

import logging
import os
import tomllib
from typing import List, Optional

import yaml

from .errors import DiscoveryError
from .pipeline import AlbumSource

CONTENT_DIR = os.path.join('content', 'album')

DELIMITERS = {'---': 'yaml', '+++': 'toml'}


def slug_from_filename(filename: str) -> str:
    """album/summer-2019.md -> summer-2019"""
    return os.path.splitext(os.path.basename(filename))[0]


def read_front_matter(text: str, source: str = '<string>') -> dict:
    """
    Parse the front matter block at the top of a content file.

    Returns:
        Front matter mapping (empty if the file has none)

    Raises:
        DiscoveryError: If the block is unterminated or unparseable
    """
    lines = text.lstrip('\ufeff').splitlines()
    if not lines or lines[0].strip() not in DELIMITERS:
        return {}

    delimiter = lines[0].strip()
    try:
        end = next(i for i in range(1, len(lines)) if lines[i].strip() == delimiter)
    except StopIteration:
        raise DiscoveryError(f"Unterminated front matter in {source}", path=source) from None

    block = '\n'.join(lines[1:end])
    try:
        if DELIMITERS[delimiter] == 'yaml':
            data = yaml.safe_load(block)
        else:
            data = tomllib.loads(block)
    except (yaml.YAMLError, tomllib.TOMLDecodeError) as e:
        raise DiscoveryError(f"Invalid front matter in {source}: {e}", path=source) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise DiscoveryError(f"Got incorrect front matter value in {source}", path=source)
    return data


def find_albums(site_root: str, logger: Optional[logging.Logger] = None) -> List[AlbumSource]:
    """
    Find albums declared in a site's content/album directory.

    Pages without an `album` key and pages with broken front matter are
    logged and skipped.

    Args:
        site_root: Static site root
        logger: Optional logger instance

    Returns:
        List of AlbumSource in directory order

    Raises:
        DiscoveryError: If the content directory cannot be read
    """
    logger = logger or logging.getLogger(__name__)
    content_path = os.path.join(site_root, CONTENT_DIR)

    try:
        entries = sorted(os.scandir(content_path), key=lambda e: e.name)
    except OSError as e:
        raise DiscoveryError(f"Cannot read {content_path}: {e}", path=content_path) from e

    albums = []
    for entry in entries:
        if entry.is_dir():
            continue

        slug = slug_from_filename(entry.name)
        logger.debug(f"Extracted slug {slug}")

        try:
            with open(entry.path, 'r', encoding='utf-8') as f:
                front_matter = read_front_matter(f.read(), entry.path)
        except (OSError, UnicodeDecodeError, DiscoveryError) as e:
            logger.warning(f"Skipping {entry.name}: {e}")
            continue

        src_dir = front_matter.get('album')
        if not isinstance(src_dir, str) or not src_dir:
            logger.info(f"No album front matter setting in {entry.name}")
            continue

        albums.append(AlbumSource(slug=slug, src_dir=os.path.expanduser(src_dir)))

    logger.info(f"Found {len(albums)} albums in {content_path}")
    return albums
