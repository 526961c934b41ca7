"""Content-transfer decoding for archive parts."""

import base64
import binascii
import re

from .errors import MalformedPayloadError, UnsupportedEncodingError, snippet

WHITESPACE_PATTERN = re.compile(rb"\s+")

# An "=" that starts neither a soft line break (possibly cut off by the
# boundary split) nor an uppercase hex octet
INVALID_QP_ESCAPE_PATTERN = re.compile(rb"=(?!\r?\n|\Z|[0-9A-F]{2})")


def decode_base64(payload: bytes) -> bytes:
    """Decode base64 that archives wrap at fixed column widths."""
    compact = WHITESPACE_PATTERN.sub(b"", payload)
    try:
        return base64.b64decode(compact, validate=True)
    except binascii.Error as e:
        raise MalformedPayloadError(f"Invalid base64 payload ({e})", snippet(compact)) from e


def decode_quoted_printable(payload: bytes) -> bytes:
    """Decode quoted-printable, rejecting any invalid or lowercase escape."""
    invalid = INVALID_QP_ESCAPE_PATTERN.search(payload)
    if invalid:
        start = invalid.start()
        raise MalformedPayloadError(
            f"Invalid quoted-printable escape at offset {start}",
            snippet(payload[start:], 20),
        )
    return binascii.a2b_qp(payload)


DECODERS = {
    "base64": decode_base64,
    "quoted-printable": decode_quoted_printable,
}


def decode_transfer(encoding: str, payload: bytes) -> bytes:
    """
    Decode a part payload according to its Content-Transfer-Encoding.

    Args:
        encoding: The encoding token from the part header
        payload: Raw bytes following the part header

    Returns:
        The original resource bytes

    Raises:
        MalformedPayloadError: The payload is not valid for its encoding
        UnsupportedEncodingError: The token is neither base64 nor
            quoted-printable; this data source never uses anything else
    """
    decoder = DECODERS.get(encoding)
    if decoder is None:
        raise UnsupportedEncodingError(f"Unknown transfer encoding {encoding!r}")
    return decoder(payload)
