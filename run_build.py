#!/usr/bin/env python3
"""
Entry point for the MHTML Post Site builder.

Usage:
    python run_build.py <input_dir> <output_dir>

The builder will:
    - Decode every .mhtml archive in input_dir
    - Write one page per post, with its images and thumbnails
    - Write posts.json, newest post first

Output structure:
    output_dir/
        posts.json
        <slug>_<hash>.html
        <slug>_<hash>_images/001.jpeg, 001_thumbnail.jpeg, ...

Running it again with the same archives reproduces the same files.
"""

import logging
import sys
from pathlib import Path

# Add src to path to import the package
# This allows running the script from repository root
sys.path.insert(0, str(Path(__file__).parent / "src"))

from mhtml_site.builder import SiteBuilder
from mhtml_site.config import BuildConfig


def main():
    if len(sys.argv) != 3:
        print(__doc__)
        sys.exit(2)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    config = BuildConfig(input_dir=Path(sys.argv[1]), output_dir=Path(sys.argv[2]))
    result = SiteBuilder(config).build()
    print(f"Generated {result.num_pages} pages under {config.output_dir}")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\n⚠️  Build interrupted by user")
        sys.exit(130)
