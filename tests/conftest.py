"""Configure test paths and shared archive fixtures."""
import base64
import io
import quopri
import sys
from pathlib import Path

import pytest
from PIL import Image

# Add src/ to path so tests can import the package
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

BOUNDARY = "----MultipartBoundary--v1BqsHuAZmCq7W9OM8cNEp8ndWBfTx0RoCEe1lFXg3----"
PAGE_URL = "https://groups.example.com/g/garden/c/AbC123"
IMAGE_URL = "https://lh3.example.com/photo1.jpg?w=800&h=600"
MISSING_IMAGE_URL = "https://lh3.example.com/not-archived.jpg"

POST_HTML = """<!DOCTYPE html>
<html><head><title>Tomatoes 7/19/23</title></head>
<body>
<div class="header">Garden group</div>
<section role="listitem" data-author="Jane Doe">
  <span class="zX2W9c">Jul 13, 2023, 7:31:18\u202fPM</span>
  <div role="region"><p>Look at <i>these</i> <i>tomatoes</i>! Grown with&nbsp;care.</p>
<p><img src="https://lh3.example.com/photo1.jpg?w=800&amp;amp;h=600" class="big"></p>
<p><img src="https://lh3.example.com/not-archived.jpg"></p>
<p><i>these tomatoes</i>, again: <img src="https://lh3.example.com/photo1.jpg?w=800&amp;amp;h=600"></p></div>
</section>
</body></html>
"""


def jpeg_bytes(width: int = 300, height: int = 200) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), "red").save(buf, format="JPEG")
    return buf.getvalue()


def make_part(content_type, location, payload, encoding=None, content_id=None) -> bytes:
    """Encode one part the way browsers write it (base64 for binaries)."""
    if encoding is None:
        encoding = "quoted-printable" if content_type.startswith("text/") else "base64"
    if encoding == "quoted-printable":
        body = quopri.encodestring(payload)
    elif encoding == "base64":
        body = base64.encodebytes(payload)
    else:
        body = payload
    lines = [f"Content-Type: {content_type}"]
    if content_id:
        lines.append(f"Content-ID: {content_id}")
    lines.append(f"Content-Transfer-Encoding: {encoding}")
    lines.append(f"Content-Location: {location}")
    return ("\r\n".join(lines) + "\r\n\r\n").encode() + body + b"\r\n"


def make_archive(
    parts,
    subject="Tomatoes 7/19/23",
    location=PAGE_URL,
    date="Fri, 21 Jul 2023 09:12:44 -0700",
    boundary=BOUNDARY,
) -> bytes:
    header = (
        "From: <Saved by Blink>\r\n"
        f"Snapshot-Content-Location: {location}\r\n"
        f"Subject: {subject}\r\n"
        f"Date: {date}\r\n"
        "MIME-Version: 1.0\r\n"
        "Content-Type: multipart/related;\r\n"
        '\ttype="text/html";\r\n'
        f'\tboundary="{boundary}"\r\n'
        "\r\n"
    ).encode()
    delimiter = f"--{boundary}\r\n".encode()
    body = b"".join(delimiter + part for part in parts)
    return header + body + f"--{boundary}--\r\n".encode()


def make_post_archive(html=POST_HTML, image=None, **kwargs) -> bytes:
    """A typical archive: the post HTML plus one archived JPEG."""
    parts = [
        make_part("text/html", kwargs.get("location", PAGE_URL), html.encode("utf-8"),
                  content_id="<frame-4A1B@mhtml.blink>"),
        make_part("image/jpeg", IMAGE_URL, jpeg_bytes() if image is None else image),
    ]
    return make_archive(parts, **kwargs)


@pytest.fixture
def post_archive() -> bytes:
    return make_post_archive()
