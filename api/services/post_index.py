"""JSON-backed blog post index (blog/data/blogs.json).

The index is an ordered list of posts, oldest first. It is read once and
rewritten once per publish; callers hold ``store.lock`` across that
read-modify-write cycle.
"""

import asyncio
import json
import logging
from pathlib import Path

from pydantic import ValidationError as ModelValidationError

from api.config import get_settings
from api.models.blog import Post
from api.services.errors import ConflictError, CorruptIndexError
from api.services.site_storage import atomic_write_text

logger = logging.getLogger(__name__)

# Lazy singleton — lives for the process lifetime
_store: "PostIndexStore | None" = None


class PostIndexStore:
    """Loads and persists the post index at *path*."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.lock = asyncio.Lock()

    def load(self) -> list[Post]:
        """Return the persisted posts, or an empty list if there are none.

        A file that is not a JSON list of records is logged and treated as
        empty, matching the behavior existing deployments rely on; the next
        successful publish overwrites it. Individual records that do not
        describe a post are logged and skipped, and the rest are kept.
        """
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            # Handle both list format and dict format ({"posts": [...]})
            if isinstance(data, dict):
                data = data.get("posts", [])
            if not isinstance(data, list):
                raise CorruptIndexError(f"expected a list, got {type(data).__name__}")
        except (OSError, ValueError, CorruptIndexError) as e:
            err = e if isinstance(e, CorruptIndexError) else CorruptIndexError(str(e))
            logger.error(
                "Blog index %s is unreadable, treating as empty: %s",
                self.path,
                err.message,
            )
            return []

        posts = []
        for position, record in enumerate(data):
            try:
                posts.append(Post.model_validate(record))
            except ModelValidationError as e:
                logger.error(
                    "Skipping invalid record %d in blog index %s: %s",
                    position,
                    self.path,
                    e,
                )
        return posts

    def append(self, index: list[Post], post: Post) -> list[Post]:
        """Return a new index with *post* added at the end.

        Raises ConflictError if a post with the same slug is already indexed.
        """
        self.check_available(index, post.slug)
        return [*index, post]

    def check_available(self, index: list[Post], slug: str) -> None:
        """Raise ConflictError if *slug* is already used in *index*."""
        if any(p.slug == slug for p in index):
            raise ConflictError(f"A post with slug '{slug}' already exists")

    def persist(self, index: list[Post]) -> None:
        """Replace the stored index with *index*."""
        data = json.dumps([p.model_dump(mode="json") for p in index], indent=2)
        atomic_write_text(self.path, data + "\n")
        logger.info("Wrote blog index with %d posts", len(index))


def get_post_index_store() -> PostIndexStore:
    """Return the shared index store for the configured site (lazy singleton)."""
    global _store
    if _store is None:
        _store = PostIndexStore(get_settings().blog_index_path)
    return _store
