"""Parsing services for post front matter, body blocks, dates and media paths."""

from blogdoc.services.parsing.dates import format_timestamp, parse_timestamp
from blogdoc.services.parsing.frontmatter import (
    FrontMatterLoader,
    build_header,
    load_front_matter,
    parse_front_matter,
    parse_front_matter_with_offset,
    split_front_matter,
)
from blogdoc.services.parsing.media import is_absolute_reference, resolve_media_path
from blogdoc.services.parsing.segmenter import (
    parse_attributes,
    segment_body,
    segment_body_at,
)

__all__ = [
    "FrontMatterLoader",
    "build_header",
    "format_timestamp",
    "is_absolute_reference",
    "load_front_matter",
    "parse_attributes",
    "parse_front_matter",
    "parse_front_matter_with_offset",
    "parse_timestamp",
    "resolve_media_path",
    "segment_body",
    "segment_body_at",
    "split_front_matter",
]
