"""Post page rendering: fills ``{{placeholder}}`` markers in a template.

Templates are plain HTML files maintained by hand. The renderer never
checks which markers a template contains; markers it has no value for are
left in the output as-is.
"""

import html
import re
from collections.abc import Iterable, Mapping

from api.models.blog import Post

_PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")


def render(template: str, fields: Mapping[str, str]) -> str:
    """Replace every ``{{name}}`` marker that has an entry in *fields*.

    Substitution is a single pass over the template, so values that happen
    to contain markers (e.g. a post explaining template syntax) are
    inserted literally.
    """

    def _substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in fields:
            return fields[name]
        return match.group(0)

    return _PLACEHOLDER_RE.sub(_substitute, template)


def render_tags(tags: Iterable[str]) -> str:
    """Render tags as space-separated ``<span class="tag">`` elements."""
    return " ".join(f'<span class="tag">{html.escape(tag)}</span>' for tag in tags)


def post_fields(post: Post, content_html: str) -> dict[str, str]:
    """Build the placeholder values for *post*.

    Text fields are HTML-escaped; *content_html* is already HTML and is
    inserted unchanged.
    """
    return {
        "title": html.escape(post.title),
        "description": html.escape(post.description),
        "date": post.date.isoformat(),
        "author": html.escape(post.author),
        "cover": html.escape(post.cover),
        "thumbnail": html.escape(post.thumbnail or post.cover),
        "content": content_html,
        "url": html.escape(post.url),
        "tags": render_tags(post.tags),
    }
