"""Shared fixtures for blogdoc tests."""

import pytest

SAMPLE_POST = """\
---
title: "SOLID Principles: Single Responsibility"
description: Why a class should have only one reason to change.
date: 2024-06-29 12:00:00 -0300
categories: [Software Design, SOLID]
tags: [solid, typescript, typescript]
media_subpath: /assets/img/posts/solid
image:
  path: banner.png
  alt: SOLID banner
pin: true
---

## What is SRP?

A class should have one, and only one, reason to change.
It keeps modules focused.

```typescript
class UserRepository {
\tsave(user: User): void {}
}
```
{: file="src/user.repository.ts" .nolineno }

![Diagram](diagram.png){: width="700" height="400" }
_Responsibilities split across classes_

{% include embed/youtube.html id='dQw4w9WgXcQ' %}

[Read the next part](/posts/open-closed/)
"""


def make_post(title="A Post", date="2024-06-29 12:00:00 -0300", body="Hello.\n", **fields):
    """Build a minimal document; extra keyword fields go into the front matter."""
    lines = ["---"]
    if title is not None:
        lines.append(f"title: {title}")
    if date is not None:
        lines.append(f"date: {date}")
    for key, value in fields.items():
        lines.append(f"{key}: {value}")
    lines.append("---")
    return "\n".join(lines) + "\n\n" + body


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Reset all module-level singletons and caches between tests."""
    yield

    # 1. Settings LRU cache
    from blogdoc.config import get_settings

    get_settings.cache_clear()

    # 2. Parsed-index cache
    import blogdoc.services.post_store as store_mod

    store_mod._cache = None

    # 3. Health check cache
    import blogdoc.main as main_mod

    main_mod._health_cache = None


@pytest.fixture
def content_dir(tmp_path):
    path = tmp_path / "_posts"
    path.mkdir()
    return path


@pytest.fixture
def mock_settings(monkeypatch, content_dir):
    """Provide a Settings object pointing at an empty temporary content dir."""
    from blogdoc.config import Settings, get_settings

    test_settings = Settings(
        content_dir=str(content_dir),
        post_glob="*.md",
        cache_ttl_seconds=60,
        max_parallel_parses=4,
    )

    get_settings.cache_clear()
    monkeypatch.setattr("blogdoc.config.get_settings", lambda: test_settings)

    # Modules that did `from blogdoc.config import get_settings` hold their
    # own binding, which the patch above does not reach
    for mod_path in [
        "blogdoc.main",
        "blogdoc.services.batch",
        "blogdoc.services.post_store",
    ]:
        monkeypatch.setattr(f"{mod_path}.get_settings", lambda: test_settings)

    return test_settings


@pytest.fixture
def write_post(content_dir):
    """Write a document into the content dir and return its path."""

    def _write(name, text):
        path = content_dir / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_post():
    """A complete post exercising every block kind."""
    return SAMPLE_POST


@pytest.fixture
def post_text():
    """Factory for minimal documents; see ``make_post``."""
    return make_post
