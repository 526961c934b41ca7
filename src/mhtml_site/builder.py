"""
Site builder: turns a directory of archived posts into a static site.

This module ties the pipeline together:
- Archive decoding and post extraction per input file
- Post date inference with the configured strategy
- Image materialization and thumbnails per post
- Bounded concurrency across input files
- A deterministic, sorted index for downstream rendering

Output structure:
    output/
        posts.json                        # Sorted page metadata
        <slug>_<hash>.html                # One page per post
        <slug>_<hash>_images/
            001.jpeg
            001_thumbnail.jpeg
            ...
"""

import asyncio
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import orjson
from tqdm import tqdm

from .archive import read_archive
from .config import ARCHIVE_SUFFIX, IMAGE_EXTENSIONS, INDEX_FILE, BuildConfig, FailurePolicy
from .dates import resolve_post_date
from .errors import ArchiveError, ThumbnailError
from .extractor import extract_post_from_part, lead_text
from .models import ArchiveDocument, BuildResult, ExtractedPost, FileFailure, PageRecord
from .render import render_post_html
from .thumbnail import create_thumbnail
from .utils import output_basename, write_bytes_atomic

logger = logging.getLogger(__name__)

# Failures a lenient build records instead of re-raising
RECOVERABLE_ERRORS = (ArchiveError, OSError)


def sort_pages(pages: Iterable[PageRecord]) -> List[PageRecord]:
    """
    Order pages for presentation: newest post first, then by title.

    Titles compare case-sensitively. Both sorts are stable, so the result
    does not depend on the order in which workers finished.
    """
    ordered = sorted(pages, key=lambda page: page.title)
    ordered.sort(key=lambda page: page.post_date, reverse=True)
    return ordered


class SiteBuilder:
    """
    Builds one page per archive file plus a sorted index.

    Each archive is handled by one task that decodes, extracts, resolves
    the date and writes its own files; tasks share nothing except the
    result they return. Every post writes into a directory keyed by a hash
    of its source URL, so concurrent tasks never touch the same path.

    Usage:
        builder = SiteBuilder(BuildConfig(Path("archives"), Path("site")))
        result = builder.build()
    """

    def __init__(self, config: BuildConfig):
        self.config = config

    def find_archives(self) -> List[Path]:
        """Archive files directly inside the input directory, sorted by name."""
        return sorted(
            path for path in self.config.input_dir.iterdir()
            if path.is_file() and path.name.endswith(ARCHIVE_SUFFIX)
        )

    def materialize_images(
        self,
        doc: ArchiveDocument,
        post: ExtractedPost,
        images_dir_name: str,
    ) -> Tuple[Dict[str, str], Dict[str, str]]:
        """
        Copy the post's images out of the archive and thumbnail them.

        Only parts of a supported image type whose location the post
        actually references are written. A part whose bytes cannot be
        decoded as an image is skipped and stays unlinked.

        Returns:
            Tuple of (location -> image path, location -> thumbnail path),
            both relative to the output directory
        """
        images_dir = self.config.output_dir / images_dir_name
        images_dir.mkdir(parents=True, exist_ok=True)
        referenced = set(post.image_urls)

        image_to_path: Dict[str, str] = {}
        image_to_thumbnail: Dict[str, str] = {}
        num_images = 0
        for part in doc.resource_parts:
            extension = IMAGE_EXTENSIONS.get(part.content_type)
            if extension is None or part.location not in referenced:
                continue

            number = num_images + 1
            thumbnail_name = f"{number:03d}_thumbnail.jpeg"
            try:
                create_thumbnail(part.data, images_dir / thumbnail_name)
            except ThumbnailError as e:
                logger.warning("Skipping image %s: %s", part.location, e)
                continue

            num_images = number
            filename = f"{number:03d}.{extension}"
            (images_dir / filename).write_bytes(part.data)
            image_to_path[part.location] = f"{images_dir_name}/{filename}"
            image_to_thumbnail[part.location] = f"{images_dir_name}/{thumbnail_name}"

        logger.debug("Wrote %d images to %s", num_images, images_dir)
        return image_to_path, image_to_thumbnail

    def process_archive(self, path: Path) -> PageRecord:
        """
        Turn one archive file into a page and its resources.

        Runs synchronously; the caller decides how many run at once.

        Raises:
            ArchiveError: The archive cannot be decoded or has no post
            OSError: Reading the archive or writing output failed
        """
        doc = read_archive(path)
        post = extract_post_from_part(doc.html_part)

        basename = output_basename(doc.subject, doc.source_location)
        page = PageRecord(
            title=doc.subject,
            scrape_date=doc.capture_time,
            post_date=resolve_post_date(
                self.config.date_strategy,
                post.raw_html,
                doc.subject,
                doc.capture_time,
                html_date=post.date,
            ),
            original_url=doc.source_location,
            output_file=f"{basename}.html",
            images_dir=f"{basename}_images",
            author=post.author,
        )

        image_to_path, image_to_thumbnail = self.materialize_images(doc, post, page.images_dir)
        # Follows image_urls, so an image shown twice gets two entries
        page.thumbnails = [
            image_to_thumbnail[url] for url in post.image_urls if url in image_to_thumbnail
        ]

        output_html = render_post_html(post, page, image_to_path)
        (self.config.output_dir / page.output_file).write_text(output_html, encoding="utf-8")

        page.lead_text = lead_text(post.html)
        page.emphasized_texts = post.emphasized_texts
        logger.debug("Built %s from %s", page.output_file, path.name)
        return page

    def write_index(self, pages: List[PageRecord]) -> Path:
        """Write the sorted page metadata as posts.json."""
        index_path = self.config.output_dir / INDEX_FILE
        write_bytes_atomic(
            index_path,
            orjson.dumps([page.to_dict() for page in pages], option=orjson.OPT_INDENT_2),
        )
        logger.info("Wrote index of %d pages to %s", len(pages), index_path)
        return index_path

    def collect(self, paths: List[Path], outcomes: List[object]) -> BuildResult:
        """
        Apply the failure policy to per-file outcomes.

        Outcomes are in input order, so "the first failure" is the same no
        matter which task finished first.
        """
        result = BuildResult()
        for path, outcome in zip(paths, outcomes):
            if isinstance(outcome, PageRecord):
                result.pages.append(outcome)
                continue
            if self.config.failure_policy == FailurePolicy.STRICT:
                logger.error("Failed to process %s: %s", path, outcome)
                raise outcome
            if not isinstance(outcome, RECOVERABLE_ERRORS):
                raise outcome
            logger.warning("Skipping %s: %s", path, outcome)
            result.failures.append(FileFailure(path=path, error=outcome))
        result.pages = sort_pages(result.pages)
        return result

    async def run(self, paths: Optional[List[Path]] = None) -> BuildResult:
        """
        Main entry point: process every archive, then sort and index.

        At most ``max_workers`` archives are processed at once, each in a
        worker thread. All dispatched tasks run to completion before the
        failure policy is applied.
        """
        if paths is None:
            paths = self.find_archives()
        self.config.output_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Building pages for %d archives in %s", len(paths), self.config.input_dir)

        semaphore = asyncio.Semaphore(self.config.max_workers)

        with tqdm(
            total=len(paths),
            desc="Building pages",
            disable=not self.config.show_progress,
        ) as pbar:
            async def process(path: Path) -> PageRecord:
                try:
                    async with semaphore:
                        return await asyncio.to_thread(self.process_archive, path)
                finally:
                    pbar.update(1)

            outcomes = await asyncio.gather(
                *[process(path) for path in paths],
                return_exceptions=True,
            )

        result = self.collect(paths, outcomes)
        self.write_index(result.pages)
        logger.info("Build complete: %d pages, %d failed", result.num_pages, len(result.failures))
        return result

    def build(self) -> BuildResult:
        """Synchronous wrapper around run()."""
        return asyncio.run(self.run())
