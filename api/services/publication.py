"""Post publication — validate, render, index, sitemap, then hand off to git.

One call to ``publish_post`` creates exactly one post. Everything that
reads or writes the index, the post HTML or the sitemap happens under the
index store's lock, so concurrent publishes cannot lose each other's
index entries.

There is no rollback: if a write fails after the post HTML is on disk,
the files already written stay there and a StorageError is raised.
"""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from api.config import get_settings
from api.models.blog import Attachment, NewPost, Post, PostSubmission, Template
from api.services.errors import ValidationError
from api.services.markdown_renderer import render_markdown
from api.services.post_index import PostIndexStore
from api.services.publisher import PublishNotifier
from api.services.site_storage import (
    read_template,
    save_attachment,
    write_post_html,
    write_sitemap,
)
from api.services.sitemap import generate_sitemap
from api.services.slug import slugify
from api.services.template_renderer import post_fields, render

logger = logging.getLogger(__name__)

POSTS_URL_PREFIX = "/blog/posts"

# Strong references to fire-and-forget notify tasks until they finish
_background_tasks: set[asyncio.Task[None]] = set()


@dataclass
class PublishResult:
    """Outcome of a successful publish."""

    post: Post
    files: list[Path] = field(default_factory=list)

    @property
    def url(self) -> str:
        return self.post.url

    @property
    def template(self) -> Template:
        return self.post.template


def _notify_done(task: asyncio.Task[None]) -> None:
    _background_tasks.discard(task)
    if not task.cancelled() and task.exception() is not None:
        logger.error("Publish notification failed", exc_info=task.exception())


def post_url(slug: str) -> str:
    return f"{POSTS_URL_PREFIX}/{slug}.html"


def parse_tags(raw: str) -> list[str]:
    """Split comma-separated tags, dropping blanks: ``"a, b,,"`` -> ``["a", "b"]``."""
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def _attachment_for(attachments: Sequence[Attachment], name: str) -> Attachment | None:
    for attachment in attachments:
        if attachment.field == name and attachment.content:
            return attachment
    return None


async def publish_post(
    submission: PostSubmission,
    attachments: Sequence[Attachment] = (),
    *,
    store: PostIndexStore,
    notifier: PublishNotifier | None = None,
    now: datetime | None = None,
) -> PublishResult:
    """Publish a new post and return where it lives.

    Raises:
        ValidationError: title or markdown missing, or the title has no
            characters usable in a slug.
        ConflictError: a post with the same slug is already indexed.
        StorageError: an upload, the template, or a site file could not be
            read or written.
    """
    settings = get_settings()
    now = now or datetime.now(timezone.utc)

    title = submission.title.strip()
    if not title or not submission.markdown.strip():
        raise ValidationError("Title & markdown required")

    slug = slugify(title)
    if not slug:
        raise ValidationError("Title must contain at least one letter or digit")

    template = Template.resolve(submission.template)
    requested = str(submission.template or "").strip()
    if requested and Template.lookup(requested) is None:
        logger.info(
            "Unknown template %r for %r, using %d",
            submission.template,
            slug,
            template.value,
        )

    async with store.lock:
        index = store.load()
        # Raises ConflictError before anything is written
        store.check_available(index, slug)
        template_html = read_template(template)

        cover_upload = _attachment_for(attachments, "cover")
        thumb_upload = _attachment_for(attachments, "thumbnail")
        cover = (
            save_attachment(cover_upload, now)
            if cover_upload
            else settings.default_cover
        )
        thumbnail = save_attachment(thumb_upload, now) if thumb_upload else cover

        post = NewPost(
            title=title,
            slug=slug,
            description=submission.description.strip() or title,
            author=submission.author.strip() or settings.default_author,
            date=now.date(),
            url=post_url(slug),
            cover=cover,
            thumbnail=thumbnail,
            tags=parse_tags(submission.tags),
            template=template,
        )

        content_html = render_markdown(submission.markdown)
        page = render(template_html, post_fields(post, content_html))
        html_path = write_post_html(slug, page)

        index = store.append(index, post)
        store.persist(index)

        sitemap_path = write_sitemap(generate_sitemap(index, settings.site_url))

    files = [html_path, store.path, sitemap_path]
    files.extend(
        settings.site_root / path.lstrip("/")
        for path in dict.fromkeys((cover, thumbnail))
        if path != settings.default_cover
    )
    logger.info("Published %s (template %d, %d posts)", post.url, template, len(index))

    if notifier is not None and notifier.enabled:
        task = asyncio.create_task(notifier.notify(files, title))
        _background_tasks.add(task)
        task.add_done_callback(_notify_done)

    return PublishResult(post=post, files=files)

