"""Thumbnail generation for archived images."""

import io
from pathlib import Path
from typing import Union

from PIL import Image, UnidentifiedImageError

from .config import THUMBNAIL_HEIGHT
from .errors import ThumbnailError


def create_thumbnail(
    data: bytes,
    thumbnail_path: Union[str, Path],
    height: int = THUMBNAIL_HEIGHT,
) -> None:
    """
    Write a JPEG thumbnail of ``data`` with a fixed height.

    The width follows the original aspect ratio. Transparency is dropped
    since the thumbnail is always saved as RGB JPEG.

    Raises:
        ThumbnailError: The bytes are not a decodable image
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            width = max(1, int(image.width / image.height * height))
            thumbnail = image.convert("RGB").resize((width, height), Image.Resampling.LANCZOS)
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        ZeroDivisionError,
    ) as e:
        raise ThumbnailError(f"Cannot create thumbnail ({e})", str(thumbnail_path)) from e
    thumbnail.save(thumbnail_path, format="JPEG")
