"""Blog post data models."""

from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CoverImage(BaseModel):
    """Cover image reference from the ``image`` front-matter field."""

    path: str
    alt: str = ""
    lqip: str | None = None
    # Path after media_subpath resolution; what a renderer should link to
    resolved: str | None = None


class Paragraph(BaseModel):
    kind: Literal["paragraph"] = "paragraph"
    text: str


class Heading(BaseModel):
    kind: Literal["heading"] = "heading"
    level: int = Field(..., ge=1, le=6)
    text: str


class CodeSample(BaseModel):
    """A fenced code block.

    ``code`` holds the exact text between the fences, including the final
    line ending, so samples can be written back byte for byte.
    """

    kind: Literal["code"] = "code"
    code: str
    language: str | None = None
    file: str | None = None
    hint: str | None = None
    fence: str = "```"


class ImageEmbed(BaseModel):
    kind: Literal["image"] = "image"
    path: str
    resolved: str
    alt: str = ""
    width: int | None = None
    height: int | None = None
    hint: str | None = None
    caption: str | None = None


class VideoEmbed(BaseModel):
    """An ``{% include embed/<provider>.html %}`` directive.

    Hosted providers carry ``video_id``; local files (provider ``video``)
    carry ``path`` and its ``resolved`` form instead.
    """

    kind: Literal["video"] = "video"
    provider: str
    video_id: str | None = None
    path: str | None = None
    resolved: str | None = None


class Link(BaseModel):
    kind: Literal["link"] = "link"
    text: str
    url: str


ContentBlock = Annotated[
    Union[Paragraph, Heading, CodeSample, ImageEmbed, VideoEmbed, Link],
    Field(discriminator="kind"),
]


def _as_label_list(value: Any) -> Any:
    # `categories: Blogging` is as common as the list form
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return value


class PostHeader(BaseModel):
    """Validated front matter of a post.

    ``title`` and ``published_at`` cannot be reassigned once the model
    exists; everything else may be edited in place.
    """

    model_config = ConfigDict(validate_assignment=True)

    title: str = Field(..., min_length=1, frozen=True)
    description: str = ""
    published_at: datetime = Field(..., frozen=True)
    updated_at: datetime | None = None
    categories: list[str] = []
    tags: list[str] = []
    media_base_path: str | None = None
    cover_image: CoverImage | None = None
    # Unrecognized front-matter keys, in source order
    extra: dict[str, Any] = {}

    @field_validator("published_at", "updated_at")
    @classmethod
    def _require_offset(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.utcoffset() is None:
            raise ValueError("timestamp must carry a UTC offset")
        return value

    @field_validator("categories", mode="before")
    @classmethod
    def _coerce_categories(cls, value: Any) -> Any:
        return _as_label_list(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _dedupe_tags(cls, value: Any) -> Any:
        value = _as_label_list(value)
        if isinstance(value, list):
            return list(dict.fromkeys(value))
        return value

    @property
    def published_at_utc(self) -> datetime:
        return self.published_at.astimezone(timezone.utc)


class Post(PostHeader):
    """A parsed post: header plus ordered body blocks."""

    body: list[ContentBlock] = []
    slug: str | None = None
    source: str | None = None

    def blocks_of(self, kind: str) -> list[Any]:
        """Return the body blocks of one kind, in document order."""
        return [block for block in self.body if block.kind == kind]
