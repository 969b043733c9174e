"""Local disk storage for the generated static site.

Everything lives under ``settings.site_root``:

    blog/data/blogs.json        post index (see post_index.py)
    blog/posts/{slug}.html      rendered posts
    blog/templates/*.html       page templates (hand-maintained)
    images/blog/*               uploaded covers and thumbnails
    sitemap.xml
"""

import logging
import os
import re
import tempfile
from datetime import datetime
from pathlib import Path, PurePosixPath, PureWindowsPath

from api.config import get_settings
from api.models.blog import Attachment, Template
from api.services.errors import StorageError

logger = logging.getLogger(__name__)

IMAGES_URL_PREFIX = "/images/blog"

_SAFE_PATH_SEGMENT_RE = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9._-]*$")
_WHITESPACE_RE = re.compile(r"\s+")
_UNSAFE_FILENAME_CHARS_RE = re.compile(r"[^A-Za-z0-9._-]")


def validate_path_segment(segment: str) -> str:
    """Validate a user-derived file name segment.

    Rejects inputs containing path traversal sequences (..), slashes,
    backslashes, or other unsafe characters. Returns the segment unchanged
    if valid; raises ValueError otherwise.
    """
    if not segment or ".." in segment or not _SAFE_PATH_SEGMENT_RE.match(segment):
        raise ValueError(f"Invalid path segment: {segment!r}")
    return segment


def sanitize_filename(filename: str) -> str:
    """Reduce an uploaded file's original name to a safe single segment."""
    # Browsers on Windows may send the full client path
    name = PureWindowsPath(PurePosixPath(filename).name).name
    name = _WHITESPACE_RE.sub("-", name.strip())
    name = _UNSAFE_FILENAME_CHARS_RE.sub("-", name).lstrip(".-")
    name = re.sub(r"\.{2,}", ".", name)
    return name or "upload"


def atomic_write_text(path: Path, text: str) -> None:
    """Write *text* to *path* so readers see either the old or new file.

    The content goes to a temp file in the same directory, which is then
    renamed over the target.
    """
    _atomic_write(path, text.encode("utf-8"))


def _atomic_write(path: Path, data: bytes) -> None:
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
    except OSError as e:
        logger.error("Failed to write %s: %s", path, e)
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise StorageError(f"Could not write {path.name}") from e


def save_attachment(attachment: Attachment, now: datetime) -> str:
    """Store an uploaded image and return its public URL path.

    File names are prefixed with the submission time in epoch milliseconds
    so repeated uploads of ``cover.jpg`` do not overwrite each other.
    """
    settings = get_settings()
    stamp = int(now.timestamp() * 1000)
    name = sanitize_filename(attachment.filename)
    # Same name in the same millisecond (cover and thumbnail from one file)
    while (settings.images_dir / f"{stamp}-{name}").exists():
        stamp += 1
    filename = validate_path_segment(f"{stamp}-{name}")
    _atomic_write(settings.images_dir / filename, attachment.content)
    logger.info("Saved %s upload as %s", attachment.field, filename)
    return f"{IMAGES_URL_PREFIX}/{filename}"


def read_template(template: Template) -> str:
    """Read the HTML of a page template."""
    path = get_settings().templates_dir / template.filename
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error("Could not read template %s: %s", path, e)
        raise StorageError(f"Template {template.value} is unavailable") from e


def write_post_html(slug: str, html: str) -> Path:
    """Write a rendered post to blog/posts/{slug}.html."""
    validate_path_segment(slug)
    path = get_settings().posts_dir / f"{slug}.html"
    atomic_write_text(path, html)
    return path


def write_sitemap(xml: str) -> Path:
    path = get_settings().sitemap_path
    atomic_write_text(path, xml)
    return path
