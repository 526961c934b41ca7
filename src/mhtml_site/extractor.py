"""
Structured post extraction from archived forum HTML.

The archived markup is not under our control; the post is located through
a handful of structural attributes:

    <section role="listitem" data-author="Jane Doe">
      ...
      <div role="region">            <- content fragment
        <p>Some <i>emphasis</i> and <img src="https://...&amp;w=800"></p>
      </div>
    </section>
"""

import html
import logging
import re
import string
from typing import List, Set, Tuple

import regex
from bs4 import BeautifulSoup
from bs4.formatter import HTMLFormatter

from .config import ELLIPSIS, LEAD_TEXT_MAX_LEN, MAX_EMPHASIS_LEN, MIN_EMPHASIS_LEN
from .dates import date_from_html
from .errors import (
    MissingListItemError,
    MissingRegionError,
    UnexpectedContentTypeError,
    snippet,
)
from .models import ArchivePart, ExtractedPost
from .utils import to_str

logger = logging.getLogger(__name__)

LISTITEM_SELECTOR = 'section[role="listitem"]'
REGION_SELECTOR = '[role="region"]'

TAG_PATTERN = re.compile(r"<[^>]+>")
WHITESPACE_PATTERN = re.compile(r"\s+")
SPACE_BEFORE_PUNCTUATION_PATTERN = re.compile(r" ([,.!:;?])")

# A run of one or more <i> elements joined only by whitespace or &nbsp;
EMPHASIS_RUN_PATTERN = re.compile(r"(?:<i>.*?</i>(?:\s|&nbsp;)*)+")
EMPHASIS_TAG_PATTERN = re.compile(r"</?i>")

# ASCII punctuation plus ASCII whitespace (space, \t, \n, \f, \r)
EMPHASIS_TRIM_CHARS = string.punctuation + " \t\n\x0c\r"

GRAPHEME_PATTERN = regex.compile(r"\X")


def _escape_markup(value: str) -> str:
    return (
        value.replace("&", "&amp;")
        .replace("\xa0", "&nbsp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
    )


# Serializes the way browsers do: &nbsp; stays an entity and void
# elements are written as <br>, not <br/>.
MARKUP_FORMATTER = HTMLFormatter(
    entity_substitution=_escape_markup,
    void_element_close_prefix=None,
)


def text_from_html(fragment: str) -> str:
    """
    Reduce an HTML fragment to plain text.

    Tags become spaces so visually separated text does not run together,
    whitespace runs collapse to one space, the space before , . ! : ; ?
    is dropped, entities are decoded and the ends trimmed.

    Example:
        text_from_html(" <p>Hi,</p><p>there<b>!</b>")
        # Returns: "Hi, there!"
    """
    stripped = TAG_PATTERN.sub(" ", fragment)
    compressed = WHITESPACE_PATTERN.sub(" ", stripped)
    despaced = SPACE_BEFORE_PUNCTUATION_PATTERN.sub(r"\1", compressed)
    return html.unescape(despaced).strip()


def lead_text(fragment: str, max_len: int = LEAD_TEXT_MAX_LEN) -> str:
    """
    Short plain-text preview of a post for index listings.

    Truncation counts grapheme clusters, so a combining sequence or an
    emoji with modifiers is never split. The ellipsis is appended only
    when something was actually cut, and is not counted toward max_len.
    """
    text = text_from_html(fragment)
    graphemes = GRAPHEME_PATTERN.findall(text)
    if len(graphemes) <= max_len:
        return text
    return "".join(graphemes[:max_len]).rstrip() + ELLIPSIS


def coalesce_emphasis(fragment: str) -> Tuple[str, List[str]]:
    """
    Merge adjacent <i> elements and collect their unique text.

    Every run of <i> elements separated only by whitespace or &nbsp;
    becomes a single <i> whose body is the run with the inner tags
    removed; whitespace is kept exactly as written. The plain text of
    each run, trimmed of ASCII punctuation and whitespace, is recorded
    once (first-seen order) when it is 3 to 50 UTF-8 bytes long.

    Args:
        fragment: HTML fragment to rewrite

    Returns:
        Tuple of (rewritten fragment, unique emphasized texts)

    Example:
        coalesce_emphasis("<i>hi</i> <i>there</i><br><i>hi there</i>")
        # Returns: ("<i>hi there</i><br><i>hi there</i>", ["hi there"])
    """
    texts: List[str] = []
    seen: Set[str] = set()

    def merge_run(match: "re.Match[str]") -> str:
        merged = "<i>{}</i>".format(EMPHASIS_TAG_PATTERN.sub("", match.group(0)))
        text = text_from_html(merged).strip(EMPHASIS_TRIM_CHARS)
        if MIN_EMPHASIS_LEN <= len(text.encode("utf-8")) <= MAX_EMPHASIS_LEN and text not in seen:
            seen.add(text)
            texts.append(text)
        return merged

    return EMPHASIS_RUN_PATTERN.sub(merge_run, fragment), texts


def extract_post(markup: bytes) -> ExtractedPost:
    """
    Extract the post record from the HTML part of an archive.

    Args:
        markup: Decoded bytes of the text/html part

    Returns:
        ExtractedPost with author, absolute date evidence, content
        fragment, image URLs and emphasized texts

    Raises:
        MissingListItemError: No section[role=listitem] in the document
        MissingRegionError: The listitem has no [role=region] element
    """
    raw_html = to_str(markup)
    soup = BeautifulSoup(raw_html, "lxml")

    section = soup.select_one(LISTITEM_SELECTOR)
    if section is None:
        raise MissingListItemError("Post has no section[role=listitem]", snippet(raw_html))

    region = section.select_one(REGION_SELECTOR)
    if region is None:
        raise MissingRegionError("Post has no [role=region]", snippet(section.decode()))

    # Archives double-escape query strings, so "&amp;" survives parsing.
    # Duplicates are kept; a page may legitimately show an image twice.
    image_urls = [
        img["src"].replace("&amp;", "&")
        for img in region.select("img[src]")
    ]

    content, emphasized = coalesce_emphasis(region.decode_contents(formatter=MARKUP_FORMATTER))
    logger.debug("Extracted post: %d images, %d emphasized texts", len(image_urls), len(emphasized))
    return ExtractedPost(
        author=section.get("data-author"),
        date=date_from_html(raw_html),
        html=content,
        image_urls=image_urls,
        emphasized_texts=emphasized,
        raw_html=raw_html,
    )


def extract_post_from_part(part: ArchivePart) -> ExtractedPost:
    """Extract the post from an archive part, which must be text/html."""
    if part.content_type != "text/html":
        raise UnexpectedContentTypeError(
            f"Expecting text/html, got {part.content_type}", part.location
        )
    return extract_post(part.data)
