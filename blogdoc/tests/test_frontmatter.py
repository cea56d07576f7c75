"""Tests for the front-matter parser."""

from datetime import datetime, timezone

import frontmatter
import pytest

from blogdoc.errors import (
    InvalidFrontMatterError,
    MalformedDateError,
    MissingFieldError,
    UnresolvableMediaReferenceError,
    UnterminatedBlockError,
)
from blogdoc.services.parsing import parse_front_matter, split_front_matter
from blogdoc.services.parsing.frontmatter import handler


def test_parses_header_and_returns_body(sample_post):
    header, body = parse_front_matter(sample_post)

    assert header.title == "SOLID Principles: Single Responsibility"
    assert header.description == "Why a class should have only one reason to change."
    assert header.categories == ["Software Design", "SOLID"]
    assert body.startswith("\n## What is SRP?")


def test_date_offset_is_honored(sample_post):
    header, _ = parse_front_matter(sample_post)

    assert header.published_at == datetime(2024, 6, 29, 15, 0, tzinfo=timezone.utc)
    assert header.published_at_utc.isoformat() == "2024-06-29T15:00:00+00:00"
    # Original offset kept for writing the document back
    assert header.published_at.utcoffset().total_seconds() == -3 * 3600


def test_tags_are_deduplicated_in_order(sample_post):
    header, _ = parse_front_matter(sample_post)
    assert header.tags == ["solid", "typescript"]


def test_cover_image_resolved_against_media_subpath(sample_post):
    header, _ = parse_front_matter(sample_post)

    assert header.media_base_path == "/assets/img/posts/solid"
    assert header.cover_image.path == "banner.png"
    assert header.cover_image.alt == "SOLID banner"
    assert header.cover_image.resolved == "/assets/img/posts/solid/banner.png"


def test_cover_image_as_plain_string(post_text):
    header, _ = parse_front_matter(post_text(image="/assets/cover.webp"))
    assert header.cover_image.path == "/assets/cover.webp"
    assert header.cover_image.resolved == "/assets/cover.webp"
    assert header.cover_image.alt == ""


def test_unknown_fields_preserved(sample_post, post_text):
    header, _ = parse_front_matter(sample_post)
    assert header.extra == {"pin": True}

    header, _ = parse_front_matter(post_text(math="true", toc="false", author="jdoe"))
    assert header.extra == {"math": True, "toc": False, "author": "jdoe"}


def test_scalar_categories_wrapped(post_text):
    header, _ = parse_front_matter(post_text(categories="Blogging"))
    assert header.categories == ["Blogging"]


def test_last_modified_at_parsed(post_text):
    header, _ = parse_front_matter(post_text(last_modified_at="2024-07-01 08:30:00 +0000"))
    assert header.updated_at == datetime(2024, 7, 1, 8, 30, tzinfo=timezone.utc)


def test_missing_title(post_text):
    with pytest.raises(MissingFieldError) as exc_info:
        parse_front_matter(post_text(title=None))
    assert exc_info.value.field == "title"


def test_blank_title_counts_as_missing(post_text):
    with pytest.raises(MissingFieldError) as exc_info:
        parse_front_matter(post_text(title='""'))
    assert exc_info.value.field == "title"
    assert exc_info.value.line == 2


def test_missing_date(post_text):
    with pytest.raises(MissingFieldError) as exc_info:
        parse_front_matter(post_text(date=None))
    assert exc_info.value.field == "date"


def test_document_without_front_matter_is_missing_title():
    with pytest.raises(MissingFieldError) as exc_info:
        parse_front_matter("# Just a heading\n\nSome text.\n")
    assert exc_info.value.field == "title"


@pytest.mark.parametrize(
    "value",
    [
        "2024-06-29 12:00:00",  # no offset
        "2024-06-29",
        "yesterday",
        "2024-13-01 10:00:00 +0000",
    ],
)
def test_malformed_dates(post_text, value):
    with pytest.raises(MalformedDateError) as exc_info:
        parse_front_matter(post_text(date=value))
    assert exc_info.value.field == "date"
    assert exc_info.value.line == 3


def test_unterminated_front_matter():
    with pytest.raises(UnterminatedBlockError) as exc_info:
        parse_front_matter("---\ntitle: Draft\ndate: 2024-06-29 12:00:00 -0300\n\nBody\n")
    assert exc_info.value.kind == "front matter"
    assert exc_info.value.line == 1


def test_invalid_yaml_reports_line():
    text = "---\ntitle: Fine\ndate: [unclosed\n---\n"
    with pytest.raises(InvalidFrontMatterError) as exc_info:
        parse_front_matter(text)
    assert exc_info.value.line is not None


def test_non_mapping_front_matter():
    with pytest.raises(InvalidFrontMatterError):
        parse_front_matter("---\n- just\n- a list\n---\n")


def test_relative_cover_without_subpath(post_text):
    with pytest.raises(UnresolvableMediaReferenceError) as exc_info:
        parse_front_matter(post_text(image="banner.png"))
    assert exc_info.value.path == "banner.png"


def test_split_reports_body_offset(post_text):
    yaml_text, body, offset = split_front_matter(post_text(body="Line one\n"))
    assert "title: A Post" in yaml_text
    assert body == "\nLine one\n"
    assert offset == 4


def test_byte_order_mark_is_ignored(post_text):
    header, _ = parse_front_matter("\ufeff" + post_text())
    assert header.title == "A Post"


def test_non_string_unknown_keys_kept_as_strings(post_text):
    header, _ = parse_front_matter(post_text(**{"2024": "note", "true": "yes", "7": "[a, b]"}))
    assert header.extra == {"2024": "note", "True": "yes", "7": ["a", "b"]}


def test_dots_close_the_block():
    text = "---\ntitle: Dotted\ndate: 2024-06-29 12:00:00 -0300\n...\n\nBody\n"
    yaml_text, body, offset = split_front_matter(text)
    assert yaml_text == "title: Dotted\ndate: 2024-06-29 12:00:00 -0300\n"
    assert body == "\nBody\n"
    assert offset == 4


def test_crlf_document():
    text = "---\r\ntitle: Windows\r\ndate: 2024-06-29 12:00:00 -0300\r\n---\r\n\r\nHello.\r\n"
    yaml_text, body, offset = split_front_matter(text)
    assert body == "\r\nHello.\r\n"
    assert offset == 4

    header, _ = parse_front_matter(text)
    assert header.title == "Windows"


def test_delimiter_must_stand_alone():
    with pytest.raises(MissingFieldError):
        parse_front_matter("--- title: Inline\n---\n")
    with pytest.raises(UnterminatedBlockError):
        parse_front_matter("---\ntitle: A\n--- not a delimiter\n")


def test_unicode_line_separator_does_not_end_a_line():
    with pytest.raises(UnterminatedBlockError):
        split_front_matter("---\ntitle: A\u2028---\nBody\n")


def test_handler_is_a_yaml_front_matter_handler():
    assert isinstance(handler, frontmatter.YAMLHandler)
    assert handler.detect("---\ntitle: A\n---\n")
    assert not handler.detect("title: A\n")
