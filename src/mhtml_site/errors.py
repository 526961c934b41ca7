"""
Exception hierarchy for MHTML Post Site.

Every failure raised while decoding or extracting a single archive derives
from ArchiveError, so the builder can treat "this file is unprocessable"
uniformly and apply its failure policy.
"""

from typing import Optional

# Number of bytes of offending input kept on an error for debugging
SNIPPET_LENGTH = 200


def snippet(data, length: int = SNIPPET_LENGTH) -> str:
    """Return a short printable prefix of ``data`` for error messages."""
    if isinstance(data, bytes):
        data = data[:length].decode("utf-8", errors="replace")
    else:
        data = data[:length]
    return data


class ArchiveError(Exception):
    """Base class for errors that make one archive file unprocessable."""

    def __init__(self, message: str, context: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            return f"{self.message}: <<{self.context}>>"
        return self.message


class ParseError(ArchiveError):
    """The multipart envelope does not have the expected shape."""


class MalformedHeaderError(ParseError):
    """The outer header block is missing, reordered or has a bad date."""


class MalformedPartError(ParseError):
    """A part does not start with the expected header lines."""


class EmptyDocumentError(ParseError):
    """The archive contains no parts at all."""


class DecodeError(ArchiveError):
    """A part payload could not be decoded."""


class MalformedPayloadError(DecodeError):
    """Invalid base64 alphabet/padding or an invalid quoted-printable escape."""


class UnsupportedEncodingError(DecodeError):
    """The part declares a transfer encoding this data source never uses."""


class ExtractError(ArchiveError):
    """The HTML part does not contain a recognisable post."""


class MissingListItemError(ExtractError):
    """No section[role=listitem] container in the HTML."""


class MissingRegionError(ExtractError):
    """The listitem container has no [role=region] element."""


class UnexpectedContentTypeError(ExtractError):
    """The first part is not text/html."""


class ThumbnailError(ArchiveError):
    """Image bytes could not be decoded into a thumbnail."""
