"""Configuration objects and constants for the site builder."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

# Worker pool size; one archive file per task
MAX_WORKERS = 5

# Height in pixels of generated thumbnails (width keeps the aspect ratio)
THUMBNAIL_HEIGHT = 150

# Maximum number of grapheme clusters in an index preview
LEAD_TEXT_MAX_LEN = 140
ELLIPSIS = "..."

# Bounds (in UTF-8 bytes) for recording emphasized text
MIN_EMPHASIS_LEN = 3
MAX_EMPHASIS_LEN = 50

ARCHIVE_SUFFIX = ".mhtml"
INDEX_FILE = "posts.json"

# Embedded resources we copy out of an archive, keyed by content type
IMAGE_EXTENSIONS = {
    "image/jpeg": "jpeg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}


class DateStrategy(str, Enum):
    """How a post's original date is inferred."""

    # Absolute "Jul 13, 2023, 7:31:18 PM" markup, then title, then capture date
    ABSOLUTE = "absolute"
    # "(N hours ago)" / "(N days ago)" relative to capture, then capture date
    RELATIVE = "relative"


class FailurePolicy(str, Enum):
    """What the builder does when a single archive cannot be processed."""

    # Re-raise the first failure once every dispatched task has finished
    STRICT = "strict"
    # Record the failure, leave the file out of the index and carry on
    LENIENT = "lenient"


@dataclass
class BuildConfig:
    """Top-level settings for one site build."""

    input_dir: Path
    output_dir: Path
    max_workers: int = MAX_WORKERS
    date_strategy: DateStrategy = DateStrategy.ABSOLUTE
    failure_policy: FailurePolicy = FailurePolicy.STRICT
    show_progress: bool = True
