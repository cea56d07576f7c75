"""Post index and batch failure models."""

from datetime import datetime

from pydantic import BaseModel

from blogdoc.models.post import CoverImage


class PostSummary(BaseModel):
    """Post metadata for index display."""

    slug: str
    title: str
    description: str
    published_at: datetime
    updated_at: datetime | None = None
    categories: list[str] = []
    tags: list[str] = []
    cover_image: CoverImage | None = None
    read_time_minutes: int | None = None
    code_samples: int = 0


class PostIndex(BaseModel):
    """Post index."""

    posts: list[PostSummary]
    total: int


class ParseFailure(BaseModel):
    """One document that failed to parse, and why."""

    source: str
    error: str
    message: str
    line: int | None = None


class FailureReport(BaseModel):
    failures: list[ParseFailure]
    total: int
