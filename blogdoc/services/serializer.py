"""Write a Post back out as a front-matter Markdown document.

The output parses back to an equal Post: code samples are emitted byte for
byte, and blocks are separated by blank lines so each one re-segments on
its own.
"""

import re
from typing import Any

from blogdoc.models.post import (
    CodeSample,
    Heading,
    ImageEmbed,
    Link,
    Paragraph,
    Post,
    VideoEmbed,
)
from blogdoc.services.parsing.dates import format_timestamp
from blogdoc.services.parsing.frontmatter import handler


def front_matter_data(post: Post) -> dict[str, Any]:
    """Build the ordered front-matter mapping for *post*."""
    data: dict[str, Any] = {"title": post.title}
    if post.description:
        data["description"] = post.description
    data["date"] = format_timestamp(post.published_at)
    if post.updated_at is not None:
        data["last_modified_at"] = format_timestamp(post.updated_at)
    if post.categories:
        data["categories"] = list(post.categories)
    if post.tags:
        data["tags"] = list(post.tags)
    if post.media_base_path is not None:
        data["media_subpath"] = post.media_base_path
    if post.cover_image is not None:
        image: dict[str, Any] = {"path": post.cover_image.path}
        if post.cover_image.alt:
            image["alt"] = post.cover_image.alt
        if post.cover_image.lqip:
            image["lqip"] = post.cover_image.lqip
        data["image"] = image
    data.update(post.extra)
    return data


def _classes(hint: str | None) -> list[str]:
    return [f".{name}" for name in (hint or "").split()]


def _quote(value: str) -> str:
    """Quote an attribute value so the attribute parser reads it back intact."""
    if '"' not in value:
        return f'"{value}"'
    if "'" not in value:
        return f"'{value}'"
    if value[0] not in "'\"" and not re.search(r"[\s}]", value):
        return value
    raise ValueError(f"attribute value cannot be quoted: {value!r}")


def _safe_fence(block: CodeSample) -> str:
    """Lengthen the fence if the code itself contains a closing-fence line."""
    fence = block.fence or "```"
    char = fence[0]
    longest = 0
    for match in re.finditer(rf"^ {{0,3}}({re.escape(char)}{{3,}})[ \t]*\r?$", block.code, re.M):
        longest = max(longest, len(match.group(1)))
    if longest >= len(fence):
        fence = char * (longest + 1)
    return fence


def render_block(block: Any) -> str:
    """Render one content block as Markdown source."""
    if isinstance(block, Paragraph):
        return block.text
    if isinstance(block, Heading):
        return f"{'#' * block.level} {block.text}"
    if isinstance(block, CodeSample):
        fence = _safe_fence(block)
        code = block.code
        if code and not code.endswith("\n"):
            code += "\n"
        text = f"{fence}{block.language or ''}\n{code}{fence}"
        attrs = ([f"file={_quote(block.file)}"] if block.file else []) + _classes(block.hint)
        if attrs:
            text += "\n{: " + " ".join(attrs) + " }"
        return text
    if isinstance(block, ImageEmbed):
        text = f"![{block.alt}]({block.path})"
        attrs = []
        if block.width is not None:
            attrs.append(f'width="{block.width}"')
        if block.height is not None:
            attrs.append(f'height="{block.height}"')
        attrs.extend(_classes(block.hint))
        if attrs:
            text += "{: " + " ".join(attrs) + " }"
        if block.caption:
            text += f"\n_{block.caption}_"
        return text
    if isinstance(block, VideoEmbed):
        if block.path is not None:
            return f"{{% include embed/{block.provider}.html src='{block.path}' %}}"
        return f"{{% include embed/{block.provider}.html id='{block.video_id}' %}}"
    if isinstance(block, Link):
        return f"[{block.text}]({block.url})"
    raise TypeError(f"Unknown content block: {type(block).__name__}")


def serialize_post(post: Post) -> str:
    """Serialize *post* to document text (front matter, blank line, body)."""
    header = handler.export(
        front_matter_data(post),
        sort_keys=False,
        default_flow_style=None,
        width=10_000,
    )
    body = "\n\n".join(render_block(block) for block in post.body)
    text = f"---\n{header}\n---\n"
    if body:
        text += f"\n{body}\n"
    return text
