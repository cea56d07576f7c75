"""Post store: the parsed view of the configured content directory.

The whole directory is parsed as one batch and cached. The cache key is the
directory; the signature is every file's name, size and mtime, so edits
show up on the next request without waiting for the TTL.
"""

import logging
import re
from pathlib import Path

from blogdoc.config import get_settings
from blogdoc.models.batch import FailureReport, PostIndex, PostSummary
from blogdoc.models.post import Post
from blogdoc.services.batch import BatchReport, discover_posts, parse_batch
from blogdoc.services.cache import TTLCache

logger = logging.getLogger(__name__)

# Average adult reading speed used for read-time estimates
WORDS_PER_MINUTE = 180

_WORD_RE = re.compile(r"\S+")

# Lazy singleton; TTL comes from settings
_cache: TTLCache | None = None


def _get_cache() -> TTLCache:
    global _cache
    if _cache is None:
        _cache = TTLCache(ttl=get_settings().cache_ttl_seconds, max_size=8)
    return _cache


def _directory_signature(paths: list[Path]) -> tuple:
    signature = []
    for path in paths:
        try:
            stat = path.stat()
        except OSError:
            # Vanished between listing and stat; parse_batch will report it
            signature.append((str(path), None, None))
            continue
        signature.append((str(path), stat.st_size, stat.st_mtime_ns))
    return tuple(signature)


async def load_report() -> BatchReport:
    """Return the batch report for the content directory, parsing if needed.

    Raises:
        FileNotFoundError: If the content directory does not exist.
    """
    settings = get_settings()
    paths = discover_posts(settings.content_dir, settings.post_glob)
    signature = _directory_signature(paths)

    cache = _get_cache()
    cached = cache.get(settings.content_dir, signature)
    if cached is not None:
        return cached

    report = await parse_batch(paths)
    cache.set(settings.content_dir, report, signature)
    if report.failures:
        logger.warning(
            "%d of %d posts in %s failed to parse",
            len(report.failures),
            report.total,
            settings.content_dir,
        )
    return report


def estimate_read_time(post: Post) -> int:
    """Estimate reading time in minutes from prose and code word counts."""
    words = 0
    for block in post.body:
        if block.kind in ("paragraph", "heading"):
            words += len(_WORD_RE.findall(block.text))
        elif block.kind == "code":
            words += len(_WORD_RE.findall(block.code))
    return max(1, round(words / WORDS_PER_MINUTE))


def summarize(post: Post) -> PostSummary:
    return PostSummary(
        slug=post.slug or "",
        title=post.title,
        description=post.description,
        published_at=post.published_at,
        updated_at=post.updated_at,
        categories=post.categories,
        tags=post.tags,
        cover_image=post.cover_image,
        read_time_minutes=estimate_read_time(post),
        code_samples=len(post.blocks_of("code")),
    )


async def get_post_index(
    limit: int = 50,
    offset: int = 0,
    category: str | None = None,
    tag: str | None = None,
) -> PostIndex:
    """Return post summaries, newest first, optionally filtered."""
    report = await load_report()
    posts = report.posts
    if category is not None:
        posts = [p for p in posts if category in p.categories]
    if tag is not None:
        posts = [p for p in posts if tag in p.tags]

    page = posts[offset : offset + limit]
    return PostIndex(posts=[summarize(p) for p in page], total=len(posts))


async def get_post(slug: str) -> Post | None:
    """Return the parsed post with *slug*, or None."""
    report = await load_report()
    for post in report.posts:
        if post.slug == slug:
            return post
    return None


async def get_failures() -> FailureReport:
    """Return the documents that failed to parse, and why."""
    report = await load_report()
    return FailureReport(failures=report.failures, total=len(report.failures))


def check_content_dir() -> bool:
    """Lightweight check that the content directory exists."""
    return Path(get_settings().content_dir).is_dir()
