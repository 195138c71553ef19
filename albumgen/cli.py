"""
Command Line Interface for album rendition generation.
"""

import argparse
import logging
import os
from typing import List, Optional

from .config import CACHE_POLICIES, PipelineConfig
from .discovery import find_albums
from .errors import DiscoveryError
from .generation_progress import GenerationProgress
from .manifest import AlbumManifest
from .pipeline import AlbumPipeline, AlbumSource
from .planner import DerivationRules
from .reporter import Reporter


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logging.getLogger('PIL').setLevel(logging.WARNING)

    return logging.getLogger('albumgen')


def get_config(args: argparse.Namespace) -> PipelineConfig:
    """Get pipeline configuration from environment and CLI overrides."""
    config = PipelineConfig.from_env()

    site = getattr(args, 'site', None)
    if site:
        config.static_root = config.static_root or os.path.join(site, 'static', 'album')
        config.data_root = config.data_root or os.path.join(site, 'data', 'album')

    if args.static_root:
        config.static_root = args.static_root
    if args.data_root:
        config.data_root = args.data_root
    if args.url_prefix is not None:
        config.url_prefix = args.url_prefix
    if args.cache_policy:
        config.cache_policy = args.cache_policy
    if args.max_workers:
        config.max_workers = args.max_workers

    config.rules = DerivationRules(
        small_width=args.small_width,
        medium_width=args.medium_width,
        large_width=args.large_width,
    )
    config.default_quality = args.quality
    config.quality = {width: args.quality for width in config.rules.widths.values()}

    return config


def add_pipeline_arguments(parser: argparse.ArgumentParser) -> None:
    """Add output and rendition arguments to a parser."""
    out_group = parser.add_argument_group('Output')
    out_group.add_argument('--static-root', metavar='PATH',
                           help='Rendition output root (overrides ALBUMGEN_STATIC_ROOT)')
    out_group.add_argument('--data-root', metavar='PATH',
                           help='Manifest output root (overrides ALBUMGEN_DATA_ROOT)')
    out_group.add_argument('--url-prefix', help='Prefix for rendition URLs (default: album)')

    rend_group = parser.add_argument_group('Renditions')
    rend_group.add_argument('--small-width', type=int, default=600, help='Small width (default: 600)')
    rend_group.add_argument('--medium-width', type=int, default=800, help='Cover medium width (default: 800)')
    rend_group.add_argument('--large-width', type=int, default=1536, help='Large width (default: 1536)')
    rend_group.add_argument('--quality', type=int, default=80, help='JPEG quality (default: 80)')
    rend_group.add_argument('--cache-policy', choices=CACHE_POLICIES,
                            help='Reuse existing renditions if they exist, or only if their fingerprint matches')
    rend_group.add_argument('--max-workers', type=int, metavar='N',
                            help='Cap concurrent albums and files (default: unbounded)')

    parser.add_argument('-q', '--quiet', action='store_true', help='Suppress progress output')
    parser.add_argument('--show-files', action='store_true',
                        help='Print each file as processed with result')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')


def run_pipeline(
    args: argparse.Namespace,
    sources: List[AlbumSource],
    config: PipelineConfig,
    logger: logging.Logger
) -> int:
    """Run the pipeline over albums and print results."""
    logger.info(f"Static root: {config.static_root}")
    logger.info(f"Data root: {config.data_root}")
    logger.info(f"Cache policy: {config.cache_policy}")

    progress = None
    if not args.quiet:
        progress = GenerationProgress(show_files=args.show_files, logger=logger)

    pipeline = AlbumPipeline(config, progress=progress, logger=logger)
    pipeline.run(sources)

    if not args.quiet:
        print()
        Reporter().report_run(pipeline.stats)

    return 1 if pipeline.stats.has_errors else 0


def cmd_build(args: argparse.Namespace) -> int:
    """Execute build command (all albums of a site)."""
    logger = setup_logging(args.verbose)

    config = get_config(args)
    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        return 1

    try:
        sources = find_albums(args.site, logger)
    except DiscoveryError as e:
        logger.error(str(e))
        return 1

    try:
        return run_pipeline(args, sources, config, logger)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as e:
        logger.exception(f"Build failed: {e}")
        return 1


def cmd_album(args: argparse.Namespace) -> int:
    """Execute album command (a single source directory)."""
    logger = setup_logging(args.verbose)

    config = get_config(args)
    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        return 1

    source = AlbumSource(slug=args.slug, src_dir=args.src)

    try:
        return run_pipeline(args, [source], config, logger)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as e:
        logger.exception(f"Album failed: {e}")
        return 1


def cmd_report(args: argparse.Namespace) -> int:
    """Execute report command."""
    logger = setup_logging(args.verbose)

    try:
        manifest = AlbumManifest.load(args.manifest)
    except FileNotFoundError:
        logger.error(f"Manifest not found: {args.manifest}")
        return 1
    except Exception as e:
        logger.error(f"Failed to load manifest: {e}")
        return 1

    reporter = Reporter()
    if args.type == 'summary':
        reporter.report_summary(manifest)
    elif args.type == 'detailed':
        reporter.report_detailed(manifest)

    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='albumgen',
        description='Web rendition and manifest generation for photo albums',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Workflow:
  Whole site:   python -m albumgen build --site ~/src/photos
  One album:    python -m albumgen album --src ~/Pictures/trip --slug trip \\
                    --static-root static/album --data-root data/album
  Report:       python -m albumgen report --manifest data/album/trip/album.json

Existing renditions are reused; use --cache-policy fingerprint to regenerate
renditions made with different widths or quality.
"""
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Build command
    build_parser = subparsers.add_parser('build', help='Process every album declared in site front matter')
    build_parser.add_argument('--site', required=True, help='Static site root (contains content/album)')
    add_pipeline_arguments(build_parser)

    # Album command
    album_parser = subparsers.add_parser('album', help='Process a single album directory')
    album_parser.add_argument('--src', required=True, help='Album source directory')
    album_parser.add_argument('--slug', required=True, help='Album slug')
    add_pipeline_arguments(album_parser)

    # Report command
    report_parser = subparsers.add_parser('report', help='Print a report for an album manifest')
    report_parser.add_argument('-m', '--manifest', required=True, help='Input manifest file')
    report_parser.add_argument('-t', '--type', choices=['summary', 'detailed'],
                               default='summary', help='Report type')
    report_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'build':
        return cmd_build(parsed_args)
    elif parsed_args.command == 'album':
        return cmd_album(parsed_args)
    elif parsed_args.command == 'report':
        return cmd_report(parsed_args)

    return 1

