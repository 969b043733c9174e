"""Blog post endpoints."""

import logging

from fastapi import APIRouter, File, Form, HTTPException, Path, Query, UploadFile

from api.config import get_settings
from api.models.blog import (
    SLUG_PATTERN,
    Attachment,
    BlogIndex,
    Post,
    PostSubmission,
    PublishResponse,
)
from api.services.errors import ValidationError
from api.services.post_index import get_post_index_store
from api.services.publication import publish_post
from api.services.publisher import get_publish_notifier

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/blog", tags=["blog"])


async def _read_upload(field: str, upload: UploadFile | None) -> Attachment | None:
    """Read an optional multipart file into memory, up to the size limit."""
    if upload is None or not upload.filename:
        return None
    limit = get_settings().max_upload_bytes
    content = await upload.read(limit + 1)
    if len(content) > limit:
        raise ValidationError(f"The {field} image is larger than {limit} bytes")
    if not content:
        logger.info("Ignoring empty %s upload %r", field, upload.filename)
        return None
    return Attachment(field=field, filename=upload.filename, content=content)


@router.post("/create", response_model=PublishResponse)
async def create_blog_post(
    title: str = Form(default=""),
    markdown: str = Form(default=""),
    description: str = Form(default=""),
    author: str = Form(default=""),
    tags: str = Form(default=""),
    template: str = Form(default=""),
    cover: UploadFile | None = File(default=None),
    thumbnail: UploadFile | None = File(default=None),
):
    """Publish a new post: render its page, index it, refresh the sitemap.

    Missing title/markdown is a 400 and a duplicate slug a 409 (both via
    the PublishError handler in main).
    """
    submission = PostSubmission(
        title=title,
        markdown=markdown,
        description=description,
        author=author,
        tags=tags,
        template=template or None,
    )
    attachments = [
        a
        for a in [
            await _read_upload("cover", cover),
            await _read_upload("thumbnail", thumbnail),
        ]
        if a is not None
    ]

    result = await publish_post(
        submission,
        attachments,
        store=get_post_index_store(),
        notifier=get_publish_notifier(),
    )
    return PublishResponse(page=result.url, template=result.template)


@router.get("", response_model=BlogIndex)
async def list_blog_posts(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
):
    """Get the blog post index in publication order."""
    posts = get_post_index_store().load()
    return BlogIndex(posts=posts[offset : offset + limit], total=len(posts))


@router.get("/by-slug/{slug}", response_model=Post)
async def get_blog_post_by_slug(
    slug: str = Path(..., pattern=SLUG_PATTERN, max_length=200),
):
    """Get a single blog post's index record by its slug."""
    for post in get_post_index_store().load():
        if post.slug == slug:
            return post
    raise HTTPException(status_code=404, detail="Blog post not found")
