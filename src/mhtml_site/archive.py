"""
Decoder for single-file web page archives (MHTML).

An archive is a fixed-shape header block followed by parts separated by
a boundary token declared in that header:

    From: <Saved by Blink>
    Snapshot-Content-Location: https://groups.example.com/g/photos/c/abc
    Subject: Fall colours 10/3/23
    Date: Wed, 4 Oct 2023 09:12:44 -0700
    MIME-Version: 1.0
    Content-Type: multipart/related;
        type="text/html";
        boundary="----MultipartBoundary--abc----"

    ------MultipartBoundary--abc----
    Content-Type: text/html
    Content-ID: <frame-1@mhtml.blink>
    Content-Transfer-Encoding: quoted-printable
    Content-Location: https://groups.example.com/g/photos/c/abc

    <html>...
    ------MultipartBoundary--abc------

The header shape is rigid for this data source, so it is matched with one
anchored pattern rather than a general MIME parser.
"""

import logging
import re
from datetime import timezone
from email.errors import HeaderParseError
from email.header import decode_header, make_header
from email.utils import parsedate_to_datetime
from pathlib import Path
from typing import List, Union

from .encoding import decode_transfer
from .errors import (
    EmptyDocumentError,
    MalformedHeaderError,
    MalformedPartError,
    snippet,
)
from .models import ArchiveDocument, ArchivePart
from .utils import to_str

logger = logging.getLogger(__name__)

HEADER_PATTERN = re.compile(
    rb"""^From:\s[^\r\n]+\s*
Snapshot-Content-Location:\s(?P<location>[^\r\n]+)\s*
Subject:\s(?P<subject>[^\r\n]+)\s*
Date:\s(?P<date>[^\r\n]+)\s*
MIME-Version:\s[^\r\n]+\s*
Content-Type:\s[^\r\n]+\s*
\s+type=[^\r\n]+
\s+boundary="(?P<boundary>[^"]+)"
""",
    re.VERBOSE,
)

PART_HEADER_PATTERN = re.compile(
    rb"""^Content-Type:\s(?P<content_type>\S+)\s*
(?:Content-ID:\s\S+\s+)?
Content-Transfer-Encoding:\s(?P<encoding>\S+)\s*
Content-Location:\s(?P<location>\S+)\s*
""",
    re.VERBOSE,
)


def boundary_pattern(boundary: bytes) -> "re.Pattern[bytes]":
    """Delimiter for ``boundary``: the literal token, dash runs, line breaks."""
    return re.compile(rb"[\r\n]*-*" + re.escape(boundary) + rb"-*[\r\n]*")


def decode_subject(raw: str) -> str:
    """Decode RFC 2047 encoded words (=?utf-8?Q?...?=) in a subject."""
    try:
        return str(make_header(decode_header(raw)))
    except (HeaderParseError, LookupError, UnicodeDecodeError):
        logger.debug("Keeping undecodable subject as-is: %r", raw)
        return raw


def parse_part(fragment: bytes) -> ArchivePart:
    """Parse one boundary-delimited fragment into a decoded part."""
    match = PART_HEADER_PATTERN.match(fragment)
    if not match:
        raise MalformedPartError("Archive part doesn't have expected header", snippet(fragment))

    location = to_str(match.group("location"))
    encoding = to_str(match.group("encoding"))
    data = decode_transfer(encoding, fragment[match.end():])
    logger.debug("Decoded %s part %s (%d bytes)", encoding, location, len(data))
    return ArchivePart(
        content_type=to_str(match.group("content_type")),
        location=location,
        data=data,
    )


def parse_archive(contents: bytes) -> ArchiveDocument:
    """
    Parse a complete archive file.

    Args:
        contents: Raw bytes of the archive file

    Returns:
        ArchiveDocument with every part decoded, HTML part first

    Raises:
        MalformedHeaderError: Header block missing, reordered, or bad Date
        MalformedPartError: A part lacks the expected part header
        EmptyDocumentError: No parts between the boundaries
        DecodeError: A part payload could not be decoded
    """
    header = HEADER_PATTERN.match(contents)
    if not header:
        raise MalformedHeaderError("Archive doesn't have expected header", snippet(contents))

    raw_date = to_str(header.group("date")).strip()
    try:
        capture_time = parsedate_to_datetime(raw_date)
    except (TypeError, ValueError) as e:
        raise MalformedHeaderError("Archive has an unparseable Date header", raw_date) from e
    if capture_time.tzinfo is None:
        # "-0000" means "offset unknown"; read it as UTC
        capture_time = capture_time.replace(tzinfo=timezone.utc)

    source_location = to_str(header.group("location")).strip()

    body = contents[header.end():]
    delimiter = boundary_pattern(header.group("boundary"))
    parts: List[ArchivePart] = [
        parse_part(fragment)
        for fragment in delimiter.split(body)
        if fragment
    ]
    if not parts:
        raise EmptyDocumentError("Archive has no parts", source_location)
    return ArchiveDocument(
        subject=decode_subject(to_str(header.group("subject")).strip()),
        capture_time=capture_time,
        source_location=source_location,
        parts=parts,
    )


def read_archive(path: Union[str, Path]) -> ArchiveDocument:
    """Read and parse the archive file at ``path``."""
    return parse_archive(Path(path).read_bytes())
