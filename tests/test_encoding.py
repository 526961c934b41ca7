"""Tests for content-transfer decoding."""

import base64

import pytest

from mhtml_site.encoding import decode_transfer
from mhtml_site.errors import (
    ArchiveError,
    DecodeError,
    MalformedPayloadError,
    UnsupportedEncodingError,
)


class TestBase64:
    def test_wrapped_lines(self):
        data = bytes(range(256)) * 4
        wrapped = base64.encodebytes(data).replace(b"\n", b"\r\n")
        assert decode_transfer("base64", wrapped) == data

    def test_surrounding_whitespace(self):
        assert decode_transfer("base64", b"  aGVs\n bG8=\r\n\t") == b"hello"

    def test_invalid_alphabet(self):
        with pytest.raises(MalformedPayloadError):
            decode_transfer("base64", b"aGVs*bG8=")

    def test_bad_padding(self):
        with pytest.raises(MalformedPayloadError):
            decode_transfer("base64", b"aGVsbG8")


class TestQuotedPrintable:
    def test_escapes_and_soft_breaks(self):
        payload = b"<p class=3D\"a\">caf=C3=A9 and a long=\r\nline</p>"
        assert decode_transfer("quoted-printable", payload) == "<p class=\"a\">café and a longline</p>".encode()

    def test_trailing_equals_is_soft_break(self):
        assert decode_transfer("quoted-printable", b"abc=") == b"abc"

    def test_invalid_escape(self):
        with pytest.raises(MalformedPayloadError) as exc_info:
            decode_transfer("quoted-printable", b"price =ZZ dollars")
        assert "=ZZ" in str(exc_info.value)

    def test_lowercase_hex_rejected(self):
        with pytest.raises(MalformedPayloadError):
            decode_transfer("quoted-printable", b"a=3db")


class TestUnsupportedEncoding:
    def test_unknown_token(self):
        with pytest.raises(UnsupportedEncodingError) as exc_info:
            decode_transfer("7bit", b"plain")
        assert "7bit" in str(exc_info.value)

    def test_is_a_decode_error(self):
        with pytest.raises(DecodeError):
            decode_transfer("binary", b"")
        with pytest.raises(ArchiveError):
            decode_transfer("x-uuencode", b"")
