"""
Utility functions for MHTML Post Site.

This module provides helpers for byte/text coercion, output naming and
file writing.
"""

import hashlib
import re
from pathlib import Path
from typing import Union

NON_SLUG_PATTERN = re.compile(r"[^a-z0-9_]")


def to_str(data: bytes) -> str:
    """
    Decode bytes as UTF-8 without ever failing.

    Archive payloads are expected to be UTF-8, but a stray invalid byte
    should not make a whole post unreadable, so invalid sequences are
    replaced with U+FFFD.
    """
    return data.decode("utf-8", errors="replace")


def flatten_title(title: str) -> str:
    """
    Turn a post title into a filesystem-friendly slug.

    Args:
        title: The post title (e.g., "Fall colours 10/3/23")

    Returns:
        Lowercase slug made of ASCII letters, digits and underscores
        Example: "fall_colours_10_3_23"

    Implementation details:
        - Slashes and spaces become underscores (dates in titles stay legible)
        - Every other character outside [A-Za-z0-9_] is dropped
        - The result is lower-cased

    Example:
        flatten_title("Tomatoes & Basil!")
        # Returns: "tomatoes__basil"
    """
    # -------------------------------------------------------
    # STEP 1: Map separators to underscores
    # -------------------------------------------------------
    flattened = title.replace("/", "_").replace(" ", "_")

    # -------------------------------------------------------
    # STEP 2: Drop anything that is not ASCII alphanumeric
    # -------------------------------------------------------
    # Lower-casing first means the pattern only needs lowercase letters;
    # non-ASCII letters are unaffected by lower() and are removed here.
    return NON_SLUG_PATTERN.sub("", flattened.lower())


def url_hash(url: str) -> str:
    """
    Stable 64-bit hash of a URL as 16 lowercase hex digits.

    BLAKE2b with an 8-byte digest is used instead of Python's built-in
    hash() because the latter is randomized per process, and output names
    must be identical across runs.

    Example:
        url_hash("https://groups.example.com/g/photos/c/abc")
        # Returns: "3f2a9c0d1b7e4a55" (always the same for this URL)
    """
    return hashlib.blake2b(url.encode("utf-8"), digest_size=8).hexdigest()


def output_basename(title: str, url: str) -> str:
    """
    Name shared by a post's page file and its resource directory.

    The hash keeps posts with identical titles apart; the slug keeps the
    output directory browsable.
    """
    return f"{flatten_title(title)}_{url_hash(url)}"


def write_bytes_atomic(path: Union[str, Path], data: bytes) -> None:
    """Write ``data`` to ``path`` via a temporary file and rename."""
    path = Path(path)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_bytes(data)
    tmp.replace(path)
