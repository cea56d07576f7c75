"""Body segmenter. Splits a post body into ordered content blocks.

One pass over the lines. Blank lines separate blocks; fences, headings,
image lines and embed directives also start a new block when they appear
inside a paragraph. Code samples are kept byte for byte.
"""

import logging
import re
from typing import Any

from blogdoc.errors import (
    PostParseError,
    UnresolvableMediaReferenceError,
    UnterminatedBlockError,
)
from blogdoc.models.post import (
    CodeSample,
    Heading,
    ImageEmbed,
    Link,
    Paragraph,
    VideoEmbed,
)
from blogdoc.services.parsing.media import resolve_media_path

logger = logging.getLogger(__name__)

FENCE_OPEN_RE = re.compile(r"^ {0,3}(?P<fence>`{3,}|~{3,})[ \t]*(?P<info>[^\r\n]*?)[ \t]*$")
FENCE_CLOSE_RE = re.compile(r"^ {0,3}(?P<fence>`{3,}|~{3,})[ \t]*$")
HEADING_RE = re.compile(r"^(?P<marks>#{1,6})[ \t]+(?P<text>.*?)(?:[ \t]+#+)?[ \t]*$")
IMAGE_RE = re.compile(
    r"^!\[(?P<alt>[^\]]*)\]\((?P<path>[^)\s]+)\)"
    r"(?:\{:[ \t]*(?P<attrs>[^}]*?)[ \t]*\})?[ \t]*$"
)
CAPTION_RE = re.compile(r"^_(?P<caption>[^_].*?)_[ \t]*$")
LINK_RE = re.compile(r"^\[(?P<text>[^\]]+)\]\((?P<url>[^)\s]+)\)[ \t]*$")
EMBED_OPEN_RE = re.compile(r"^\{%-?[ \t]*include[ \t]+embed/(?P<provider>[\w-]+)\.html\b")
EMBED_CLOSE = "%}"
IAL_RE = re.compile(r"^\{:[ \t]*(?P<attrs>.*?)[ \t]*\}[ \t]*$")

_ATTR_RE = re.compile(
    r"(?P<key>[\w-]+)=(?:\"(?P<dq>[^\"]*)\"|'(?P<sq>[^']*)'|(?P<bare>[^\s}]+))"
    r"|\.(?P<cls>[\w-]+)"
)
_PARAM_RE = re.compile(r"(?P<key>\w+)\s*=\s*(?:'(?P<sq>[^']*)'|\"(?P<dq>[^\"]*)\")")

# Providers embedded from a local file rather than by hosted id
FILE_PROVIDERS = frozenset({"video"})


_LINE_END_RE = re.compile(r"(?<=\n)")


def split_lines(text: str) -> list[str]:
    """Split *text* after each ``\\n``, keeping line endings.

    Unlike ``str.splitlines`` this leaves form feeds and Unicode line
    separators inside the line they appear in.
    """
    return [line for line in _LINE_END_RE.split(text) if line]


def parse_attributes(raw: str) -> tuple[dict[str, str], list[str]]:
    """Parse a kramdown attribute list body into (attributes, classes)."""
    attrs: dict[str, str] = {}
    classes: list[str] = []
    for match in _ATTR_RE.finditer(raw):
        if match.group("cls"):
            classes.append(match.group("cls"))
        else:
            value = match.group("dq")
            if value is None:
                value = match.group("sq")
            if value is None:
                value = match.group("bare")
            attrs[match.group("key")] = value
    return attrs, classes


def _int_or_none(value: str | None) -> int | None:
    if value is not None and value.isdigit():
        return int(value)
    return None


def _strip_eol(line: str) -> str:
    return line.rstrip("\r\n")


def _is_blank(line: str) -> bool:
    return not line.strip()


def _opens_fence(text: str) -> bool:
    match = FENCE_OPEN_RE.match(text)
    # A backtick fence may not carry backticks in its info string
    return bool(match) and not (
        match.group("fence")[0] == "`" and "`" in match.group("info")
    )


def _starts_block(line: str) -> bool:
    """True if *line* opens a block that interrupts a running paragraph."""
    text = _strip_eol(line)
    return (
        _opens_fence(text)
        or bool(HEADING_RE.match(text))
        or bool(IMAGE_RE.match(text))
        or bool(EMBED_OPEN_RE.match(text))
    )


def _read_code(lines: list[str], start: int) -> tuple[CodeSample, int]:
    opening = FENCE_OPEN_RE.match(_strip_eol(lines[start]))
    fence = opening.group("fence")
    info = opening.group("info").strip()
    language = info.split()[0] if info else None

    index = start + 1
    while index < len(lines):
        closing = FENCE_CLOSE_RE.match(_strip_eol(lines[index]))
        if (
            closing
            and closing.group("fence")[0] == fence[0]
            and len(closing.group("fence")) >= len(fence)
        ):
            break
        index += 1
    else:
        raise UnterminatedBlockError("code fence", line=start + 1)

    code = "".join(lines[start + 1 : index])
    index += 1

    file_label = None
    hint = None
    if index < len(lines):
        ial = IAL_RE.match(_strip_eol(lines[index]))
        if ial:
            attrs, classes = parse_attributes(ial.group("attrs"))
            file_label = attrs.get("file")
            hint = " ".join(classes) or None
            index += 1

    return (
        CodeSample(code=code, language=language, file=file_label, hint=hint, fence=fence),
        index,
    )


def _read_image(
    lines: list[str], start: int, media_subpath: str | None
) -> tuple[ImageEmbed, int]:
    match = IMAGE_RE.match(_strip_eol(lines[start]))
    index = start + 1

    attrs_raw = match.group("attrs")
    if attrs_raw is None and index < len(lines):
        ial = IAL_RE.match(_strip_eol(lines[index]))
        if ial:
            attrs_raw = ial.group("attrs")
            index += 1
    attrs, classes = parse_attributes(attrs_raw or "")

    caption = None
    if index < len(lines):
        caption_match = CAPTION_RE.match(_strip_eol(lines[index]))
        if caption_match:
            caption = caption_match.group("caption")
            index += 1

    path = match.group("path")
    try:
        resolved = resolve_media_path(path, media_subpath)
    except UnresolvableMediaReferenceError as exc:
        exc.line = start + 1
        raise

    image = ImageEmbed(
        path=path,
        resolved=resolved,
        alt=match.group("alt"),
        width=_int_or_none(attrs.get("width") or attrs.get("w")),
        height=_int_or_none(attrs.get("height") or attrs.get("h")),
        hint=" ".join(classes) or None,
        caption=caption,
    )
    return image, index


def _read_embed(
    lines: list[str], start: int, media_subpath: str | None
) -> tuple[VideoEmbed, int]:
    provider = EMBED_OPEN_RE.match(_strip_eol(lines[start])).group("provider")

    index = start
    while index < len(lines) and EMBED_CLOSE not in lines[index]:
        index += 1
    if index == len(lines):
        raise UnterminatedBlockError("embed directive", line=start + 1)

    directive = " ".join(_strip_eol(line).strip() for line in lines[start : index + 1])
    params: dict[str, Any] = {}
    for match in _PARAM_RE.finditer(directive):
        value = match.group("sq")
        params[match.group("key")] = value if value is not None else match.group("dq")

    if provider in FILE_PROVIDERS or "src" in params:
        src = params.get("src") or ""
        try:
            resolved = resolve_media_path(src, media_subpath)
        except UnresolvableMediaReferenceError as exc:
            exc.line = start + 1
            raise
        embed = VideoEmbed(provider=provider, path=src, resolved=resolved)
    else:
        video_id = (params.get("id") or "").strip()
        if not video_id:
            raise UnresolvableMediaReferenceError(
                "",
                media_subpath,
                reason=f"embed/{provider}.html has no video id",
                line=start + 1,
            )
        embed = VideoEmbed(provider=provider, video_id=video_id)

    return embed, index + 1


def segment_body(body: str, media_subpath: str | None = None) -> list[Any]:
    """Split *body* into content blocks in source order.

    Args:
        body: Post body (everything after the front matter).
        media_subpath: Base path for relative image and video references.

    Returns:
        List of ContentBlock models.

    Raises:
        UnterminatedBlockError: If a code fence or embed directive never closes.
        UnresolvableMediaReferenceError: If a media path cannot be resolved.
    """
    lines = split_lines(body)
    blocks: list[Any] = []
    index = 0

    while index < len(lines):
        line = lines[index]
        text = _strip_eol(line)

        if _is_blank(line):
            index += 1
            continue

        if _opens_fence(text):
            block, index = _read_code(lines, index)
            blocks.append(block)
            continue

        heading = HEADING_RE.match(text)
        if heading:
            blocks.append(Heading(level=len(heading.group("marks")), text=heading.group("text")))
            index += 1
            continue

        if IMAGE_RE.match(text):
            block, index = _read_image(lines, index, media_subpath)
            blocks.append(block)
            continue

        if EMBED_OPEN_RE.match(text):
            block, index = _read_embed(lines, index, media_subpath)
            blocks.append(block)
            continue

        link = LINK_RE.match(text)
        next_line = lines[index + 1] if index + 1 < len(lines) else ""
        if link and (_is_blank(next_line) or _starts_block(next_line)):
            blocks.append(Link(text=link.group("text"), url=link.group("url")))
            index += 1
            continue

        paragraph = [text]
        index += 1
        while (
            index < len(lines)
            and not _is_blank(lines[index])
            and not _starts_block(lines[index])
        ):
            paragraph.append(_strip_eol(lines[index]))
            index += 1
        blocks.append(Paragraph(text="\n".join(paragraph)))

    logger.debug("Segmented body into %d blocks", len(blocks))
    return blocks


def segment_body_at(
    body: str, media_subpath: str | None, *, line_offset: int, source: str | None = None
) -> list[Any]:
    """Segment *body* and report errors in whole-document line numbers."""
    try:
        return segment_body(body, media_subpath)
    except PostParseError as exc:
        exc.with_location(source=source, line_offset=line_offset)
        raise
