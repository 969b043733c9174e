"""Title-to-slug conversion."""

import re

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def slugify(title: str) -> str:
    """Turn a post title into a URL-safe slug.

    ``"Hello, World!"`` becomes ``"hello-world"``. Titles with no ASCII
    letters or digits produce an empty string.
    """
    slug = _NON_ALNUM_RE.sub("-", title.lower())
    return slug.strip("-")
