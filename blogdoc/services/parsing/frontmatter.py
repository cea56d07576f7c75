"""Front-matter parser: the leading ``---`` YAML block of a post."""

import logging
import re
from typing import Any

import frontmatter
import yaml
from pydantic import ValidationError

from blogdoc.errors import (
    InvalidFrontMatterError,
    MissingFieldError,
    PostParseError,
    UnterminatedBlockError,
)
from blogdoc.models.post import CoverImage, PostHeader
from blogdoc.services.parsing.dates import parse_timestamp
from blogdoc.services.parsing.media import resolve_media_path

logger = logging.getLogger(__name__)

# Keys mapped onto PostHeader fields; anything else lands in ``extra``,
# keyed by its string form
KNOWN_KEYS = (
    "title",
    "description",
    "date",
    "last_modified_at",
    "categories",
    "tags",
    "media_subpath",
    "image",
)

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class FrontMatterLoader(yaml.SafeLoader):
    """SafeLoader that leaves timestamps as plain strings.

    PyYAML only recognizes ``-03:00`` style offsets and silently turns bare
    dates into ``date`` objects; the date parser wants the raw text.
    """


FrontMatterLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


class FrontMatterHandler(frontmatter.YAMLHandler):
    """YAML handler with strict delimiter lines.

    A delimiter must sit alone on its line, and only ``\\n`` ends a line.
    The block opens with ``---`` and closes with ``---`` or ``...``.
    """

    FM_BOUNDARY = re.compile(r"^(?:---|\.\.\.)[ \t]*\r?$", re.MULTILINE)
    OPENING = re.compile(r"---[ \t]*\r?$", re.MULTILINE)

    def detect(self, text: str) -> bool:
        return bool(self.OPENING.match(text))

    def load(self, fm: str, **kwargs: Any) -> Any:
        kwargs.setdefault("Loader", FrontMatterLoader)
        return super().load(fm, **kwargs)


handler = FrontMatterHandler()


def split_front_matter(text: str) -> tuple[str, str, int]:
    """Split a document into (YAML text, body text, body line offset).

    The offset is the number of document lines before the body, so body line
    ``n`` is document line ``n + offset``.

    Raises:
        MissingFieldError: If the document has no front matter at all.
        UnterminatedBlockError: If the block is opened but never closed.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    if not handler.detect(text):
        # No metadata block means no title either
        raise MissingFieldError("title", line=1)

    try:
        fm, content = handler.split(text)
    except ValueError:
        raise UnterminatedBlockError("front matter", line=1) from None

    # Both parts still start with the newline that ended the delimiter line
    offset = fm.count("\n") + 1
    return fm[1:], content.removeprefix("\n"), offset


def load_front_matter(yaml_text: str) -> dict[str, Any]:
    """Load the YAML mapping of a front-matter block."""
    try:
        data = handler.load(yaml_text)
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        # +2: the opening delimiter, and marks are 0-based
        line = mark.line + 2 if mark is not None else None
        raise InvalidFrontMatterError(f"front matter is not valid YAML: {exc}", line=line) from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidFrontMatterError(
            f"front matter must be a mapping, got {type(data).__name__}", line=2
        )
    return data


def _key_line(yaml_text: str, key: str) -> int | None:
    """Best-effort document line of a top-level key, for error reporting."""
    pattern = re.compile(rf"^{re.escape(key)}\s*:")
    for number, line in enumerate(yaml_text.split("\n"), start=2):
        if pattern.match(line):
            return number
    return None


def _cover_image(raw: Any, media_subpath: str | None) -> CoverImage | None:
    if raw is None:
        return None
    if isinstance(raw, str):
        raw = {"path": raw}
    if not isinstance(raw, dict) or not raw.get("path"):
        raise InvalidFrontMatterError("'image' must be a path or a mapping with 'path'")

    path = str(raw["path"])
    return CoverImage(
        path=path,
        alt=str(raw.get("alt") or ""),
        lqip=raw.get("lqip"),
        resolved=resolve_media_path(path, media_subpath),
    )


def build_header(data: dict[str, Any], yaml_text: str = "") -> PostHeader:
    """Validate a loaded front-matter mapping into a PostHeader.

    Raises:
        MissingFieldError: If ``title`` or ``date`` is absent or blank.
        MalformedDateError: If a timestamp lacks an offset or cannot be parsed.
        UnresolvableMediaReferenceError: If the cover image cannot be resolved.
        InvalidFrontMatterError: If a known field has the wrong shape.
    """
    title = data.get("title")
    if title is None or not str(title).strip():
        raise MissingFieldError("title", line=_key_line(yaml_text, "title"))
    if data.get("date") is None:
        raise MissingFieldError("date")

    try:
        published_at = parse_timestamp(data["date"], "date")
        updated_at = None
        if data.get("last_modified_at") is not None:
            updated_at = parse_timestamp(data["last_modified_at"], "last_modified_at")

        media_subpath = data.get("media_subpath")
        if media_subpath is not None:
            media_subpath = str(media_subpath)

        cover_image = _cover_image(data.get("image"), media_subpath)
    except PostParseError as exc:
        if exc.line is None:
            field = getattr(exc, "field", None) or "image"
            exc.line = _key_line(yaml_text, field)
        raise

    try:
        return PostHeader(
            title=str(title),
            description=str(data.get("description") or ""),
            published_at=published_at,
            updated_at=updated_at,
            categories=data.get("categories"),
            tags=data.get("tags"),
            media_base_path=media_subpath,
            cover_image=cover_image,
            extra={str(k): v for k, v in data.items() if k not in KNOWN_KEYS},
        )
    except ValidationError as exc:
        raise InvalidFrontMatterError(f"invalid front matter: {exc}") from exc


def parse_front_matter_with_offset(text: str) -> tuple[PostHeader, str, int]:
    """Like :func:`parse_front_matter`, also returning the body line offset."""
    yaml_text, body, offset = split_front_matter(text)
    header = build_header(load_front_matter(yaml_text), yaml_text)
    logger.debug("Parsed front matter for %r (%d extra keys)", header.title, len(header.extra))
    return header, body, offset


def parse_front_matter(text: str) -> tuple[PostHeader, str]:
    """Parse a document's front matter into a validated header.

    Args:
        text: Raw document text.

    Returns:
        Tuple of (header, remaining body text).
    """
    header, body, _ = parse_front_matter_with_offset(text)
    return header, body
