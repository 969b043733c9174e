"""Blog post data models."""

import datetime
from enum import IntEnum

from pydantic import BaseModel, Field, model_validator

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class Template(IntEnum):
    """Page templates a post can be rendered with, selected by number."""

    PRIMARY = 1
    SECONDARY = 2
    TERTIARY = 3

    @property
    def filename(self) -> str:
        if self is Template.PRIMARY:
            return "blog-template.html"
        return f"blog-template-{self.value}.html"

    @classmethod
    def lookup(cls, value: object) -> "Template | None":
        """Return the template named by *value*, or None if it names none.

        Accepts ints and numeric strings ("2", " 3 ", "02").
        """
        try:
            return cls(int(str(value).strip()))
        except (TypeError, ValueError):
            return None

    @classmethod
    def resolve(cls, value: object) -> "Template":
        """Return the template named by *value*, or PRIMARY if it names none."""
        return cls.lookup(value) or cls.PRIMARY


class Post(BaseModel):
    """A published post as recorded in the blog index.

    Records written by earlier versions of the publisher may carry slugs
    that would not be accepted today (e.g. ``""`` for an all-punctuation
    title), so the slug is not checked here. See NewPost.
    """

    title: str
    slug: str
    description: str
    author: str
    date: datetime.date
    url: str
    cover: str
    thumbnail: str | None = None
    tags: list[str] = []
    template: Template = Template.PRIMARY

    @model_validator(mode="after")
    def default_thumbnail(self) -> "Post":
        """Older index records have no thumbnail; they used the cover."""
        if not self.thumbnail:
            self.thumbnail = self.cover
        return self


class NewPost(Post):
    """A post being created now; title and slug must be well formed."""

    title: str = Field(..., min_length=1)
    slug: str = Field(..., pattern=SLUG_PATTERN)


class BlogIndex(BaseModel):
    """Blog post index."""

    posts: list[Post]
    total: int


class PostSubmission(BaseModel):
    """Raw form fields of a publish request, before validation."""

    title: str = ""
    markdown: str = ""
    description: str = ""
    author: str = ""
    tags: str = ""
    template: str | int | None = None


class Attachment(BaseModel):
    """An uploaded file: the form field it came from, its name and bytes."""

    field: str
    filename: str
    content: bytes


class PublishResponse(BaseModel):
    """Response after a successful publish."""

    success: bool = True
    page: str
    template: Template


class ErrorResponse(BaseModel):
    """Error payload returned for any failed publish."""

    success: bool = False
    error: str
    kind: str
