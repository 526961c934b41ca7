"""
Data models for MHTML Post Site.

This module defines typed data structures for the archive envelope, the
post extracted from it, and the page metadata handed to index rendering.
Using dataclasses provides clear structure, type hints, and easy JSON
serialization.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional


@dataclass(frozen=True)
class ArchivePart:
    """
    One part of an archive file.

    Attributes:
        content_type: MIME type declared by the part (e.g. "text/html")
        location: Original URL of the resource; unique within a document
        data: Payload after transfer decoding
    """
    content_type: str
    location: str
    data: bytes


@dataclass(frozen=True)
class ArchiveDocument:
    """
    One decoded archive file.

    Attributes:
        subject: Page title from the Subject header
        capture_time: When the page was captured, with its UTC offset
        source_location: Canonical URL the page was captured from
        parts: Decoded parts; parts[0] is the HTML post

    Example:
        doc = ArchiveDocument(
            subject="Fall colours 10/3/23",
            capture_time=datetime(2023, 10, 4, 9, 0, tzinfo=timezone.utc),
            source_location="https://groups.example.com/g/photos/c/abc",
            parts=[ArchivePart("text/html", "https://...", b"<html>...")]
        )
    """
    subject: str
    capture_time: datetime
    source_location: str
    parts: List[ArchivePart] = field(default_factory=list)

    @property
    def html_part(self) -> ArchivePart:
        """The part holding the post markup."""
        return self.parts[0]

    @property
    def resource_parts(self) -> List[ArchivePart]:
        """Every part after the HTML one (images and other resources)."""
        return self.parts[1:]


@dataclass
class ExtractedPost:
    """
    The semantic record pulled out of a post's HTML.

    Attributes:
        author: Value of the container's data-author attribute, if any
        date: Absolute date found in the markup, if any
        html: Content fragment with emphasis runs coalesced
        image_urls: img src values in document order, duplicates kept
        emphasized_texts: Unique emphasized text in first-seen order
        raw_html: The undecoded markup, for date strategies that scan it
    """
    author: Optional[str] = None
    date: Optional[date] = None
    html: str = ""
    image_urls: List[str] = field(default_factory=list)
    emphasized_texts: List[str] = field(default_factory=list)
    raw_html: str = ""


@dataclass
class PageRecord:
    """
    Metadata for one generated page, as written to the index.

    Attributes:
        title: Post title (archive subject)
        scrape_date: When the archive was captured
        post_date: Best guess as to when the post was originally made
        original_url: URL the post was captured from
        output_file: Page filename within the output directory
        images_dir: Resource directory name within the output directory
        author: Post author, if known
        lead_text: Tag-stripped preview of the post
        thumbnails: Thumbnail paths relative to the output directory
        emphasized_texts: Unique emphasized text in first-seen order
    """
    title: str
    scrape_date: datetime
    post_date: date
    original_url: str
    output_file: str = ""
    images_dir: str = ""
    author: Optional[str] = None
    lead_text: str = ""
    thumbnails: List[str] = field(default_factory=list)
    emphasized_texts: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert the record to a dictionary for JSON serialization.

        Dates are rendered in ISO 8601 so the index stays readable
        regardless of the serializer.
        """
        return {
            "title": self.title,
            "scrape_date": self.scrape_date.isoformat(),
            "post_date": self.post_date.isoformat(),
            "original_url": self.original_url,
            "output_file": self.output_file,
            "images_dir": self.images_dir,
            "author": self.author,
            "lead_text": self.lead_text,
            "thumbnails": list(self.thumbnails),
            "emphasized_texts": list(self.emphasized_texts),
        }


@dataclass
class FileFailure:
    """An archive that could not be turned into a page."""
    path: Path
    error: Exception

    def to_dict(self) -> dict:
        return {
            "path": str(self.path),
            "error_type": type(self.error).__name__,
            "error": str(self.error),
        }


@dataclass
class BuildResult:
    """Outcome of a site build: sorted pages plus per-file failures."""
    pages: List[PageRecord] = field(default_factory=list)
    failures: List[FileFailure] = field(default_factory=list)

    @property
    def num_pages(self) -> int:
        return len(self.pages)
