"""Whole-document parsing: front matter plus body, from text or file."""

import logging
import re
from pathlib import Path

from blogdoc.errors import PostParseError
from blogdoc.models.post import Post
from blogdoc.services.parsing import parse_front_matter_with_offset, segment_body_at

logger = logging.getLogger(__name__)

# Jekyll post file names: 2024-06-29-solid-principles.md
_POST_FILENAME_RE = re.compile(r"^\d{4}-\d{1,2}-\d{1,2}-(?P<slug>.+)$")
_SLUG_UNSAFE_RE = re.compile(r"[^a-z0-9]+")


def slug_from_filename(path: str | Path) -> str:
    """Derive a URL slug from a post file name, dropping any date prefix."""
    stem = Path(path).stem
    match = _POST_FILENAME_RE.match(stem)
    if match:
        stem = match.group("slug")
    return _SLUG_UNSAFE_RE.sub("-", stem.lower()).strip("-")


def parse_post(text: str, *, source: str | None = None, slug: str | None = None) -> Post:
    """Parse a raw document into a Post.

    Args:
        text: The whole document, front matter included.
        source: Name used in error messages (usually the file path).
        slug: Optional slug to attach to the result.

    Raises:
        PostParseError: Any subclass, with ``source`` and a document line set.
    """
    try:
        header, body, offset = parse_front_matter_with_offset(text)
    except PostParseError as exc:
        exc.with_location(source=source)
        raise

    blocks = segment_body_at(
        body, header.media_base_path, line_offset=offset, source=source
    )
    return Post(**header.model_dump(), body=blocks, slug=slug, source=source)


def parse_post_file(path: str | Path, *, encoding: str = "utf-8") -> Post:
    """Read a post file and parse it.

    Raises:
        OSError: If the file cannot be read.
        PostParseError: If the document is invalid.
    """
    path = Path(path)
    text = path.read_text(encoding=encoding)
    post = parse_post(text, source=str(path), slug=slug_from_filename(path))
    logger.debug("Parsed %s: %d blocks", path, len(post.body))
    return post
