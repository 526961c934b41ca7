"""
MHTML Post Site

This package turns archived web-page snapshots of forum posts (MHTML files)
into a static site: one self-contained page per post, local copies of the
post's images with thumbnails, and a sorted posts.json index.

Main components:
- parse_archive: Decode the multipart archive envelope
- extract_post: Pull author, images, emphasis and content out of the HTML
- resolve_post_date: Infer the original post date
- SiteBuilder: Process a directory of archives concurrently

Usage:
    from pathlib import Path
    from mhtml_site import BuildConfig, SiteBuilder

    result = SiteBuilder(BuildConfig(Path("archives"), Path("site"))).build()
"""

from .archive import parse_archive, read_archive
from .builder import SiteBuilder, sort_pages
from .config import BuildConfig, DateStrategy, FailurePolicy
from .dates import resolve_post_date
from .extractor import coalesce_emphasis, extract_post, lead_text
from .models import ArchiveDocument, ArchivePart, BuildResult, ExtractedPost, PageRecord

__all__ = [
    'SiteBuilder',
    'BuildConfig',
    'DateStrategy',
    'FailurePolicy',
    'ArchiveDocument',
    'ArchivePart',
    'ExtractedPost',
    'PageRecord',
    'BuildResult',
    'parse_archive',
    'read_archive',
    'extract_post',
    'coalesce_emphasis',
    'lead_text',
    'resolve_post_date',
    'sort_pages',
]

__version__ = '1.0.0'
