"""Batch parsing: many posts in, parsed posts and per-document failures out.

A bad document never aborts the batch: its error is logged and recorded in
the report while the remaining documents parse normally.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path

from blogdoc.config import get_settings
from blogdoc.errors import PostParseError, SlugConflictError
from blogdoc.models.batch import ParseFailure
from blogdoc.models.post import Post
from blogdoc.services.documents import parse_post_file

logger = logging.getLogger(__name__)


@dataclass
class BatchReport:
    """Outcome of a batch parse."""

    posts: list[Post] = field(default_factory=list)
    failures: list[ParseFailure] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.posts) + len(self.failures)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "parsed": len(self.posts),
            "failed": len(self.failures),
            "failures": [f.model_dump() for f in self.failures],
        }


def discover_posts(content_dir: str | Path, pattern: str = "*.md") -> list[Path]:
    """List post files in *content_dir* (recursively), sorted by path.

    Raises:
        FileNotFoundError: If the directory does not exist.
    """
    root = Path(content_dir)
    if not root.is_dir():
        raise FileNotFoundError(f"Content directory not found: {root}")
    return sorted(p for p in root.rglob(pattern) if p.is_file())


def failure_from_exception(source: str, exc: Exception) -> ParseFailure:
    """Describe a per-document failure for the batch report."""
    if isinstance(exc, PostParseError):
        return ParseFailure(
            source=source,
            error=type(exc).__name__,
            message=exc.message,
            line=exc.line,
        )
    return ParseFailure(source=source, error=type(exc).__name__, message=str(exc))


async def parse_batch(
    paths: list[Path], max_parallel: int | None = None
) -> BatchReport:
    """Parse *paths* concurrently in worker threads.

    Args:
        paths: Post files to parse.
        max_parallel: Concurrency cap. Defaults to ``max_parallel_parses``.

    Returns:
        Report with parsed posts (newest first) and per-document failures
        (in input order).
    """
    limit = max_parallel or get_settings().max_parallel_parses
    semaphore = asyncio.Semaphore(max(1, limit))

    async def _parse_one(path: Path) -> Post:
        async with semaphore:
            return await asyncio.to_thread(parse_post_file, path)

    results = await asyncio.gather(
        *[_parse_one(path) for path in paths],
        return_exceptions=True,
    )

    report = BatchReport()
    # Slug -> source of the first post that claimed it
    slugs: dict[str, str] = {}
    for path, result in zip(paths, results):
        if isinstance(result, Post) and result.slug is not None:
            taken_by = slugs.get(result.slug)
            if not result.slug or taken_by:
                result = SlugConflictError(result.slug, taken_by, source=str(path))
            else:
                slugs[result.slug] = str(path)
        if isinstance(result, Post):
            report.posts.append(result)
            continue
        if not isinstance(result, Exception):
            # CancelledError and friends are not document failures
            raise result
        failure = failure_from_exception(str(path), result)
        if isinstance(result, (PostParseError, OSError, UnicodeDecodeError)):
            logger.warning("Failed to parse %s: %s", path, result)
        else:
            logger.error("Unexpected error parsing %s: %s", path, result, exc_info=result)
        report.failures.append(failure)

    # Newest first, matching the site index
    report.posts.sort(key=lambda p: p.published_at_utc, reverse=True)

    logger.info(
        "Batch parse complete: %d parsed, %d failed", len(report.posts), len(report.failures)
    )
    return report


async def parse_directory(
    content_dir: str | Path, pattern: str = "*.md", max_parallel: int | None = None
) -> BatchReport:
    """Discover and parse every post under *content_dir*."""
    paths = discover_posts(content_dir, pattern)
    logger.info("Parsing %d posts from %s", len(paths), content_dir)
    return await parse_batch(paths, max_parallel=max_parallel)
