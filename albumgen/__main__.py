"""
Main entry point for running the package as a module.

Usage:
    python -m albumgen build --site ~/src/photos
    python -m albumgen album --src DIR --slug SLUG --static-root PATH --data-root PATH
    python -m albumgen report --manifest album.json
"""

import sys
from .cli import main

if __name__ == '__main__':
    sys.exit(main())
