"""Tests for editorial post warnings."""

from blogdoc.services.checks import post_warnings
from blogdoc.services.documents import parse_post


def test_clean_post_has_no_warnings(sample_post):
    assert post_warnings(parse_post(sample_post)) == []


def test_warnings_in_document_order(post_text):
    body = "# Title again\n\n```\nplain\n```\n\n![](/img/x.png)\n"
    post = parse_post(post_text(body=body, image="/img/cover.png"))

    assert post_warnings(post) == [
        "no description",
        "cover image /img/cover.png has no alt text",
        "block 1: level-1 heading 'Title again'",
        "block 2: code sample has no language tag",
        "block 3: image /img/x.png has no alt text",
    ]
