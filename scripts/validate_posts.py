#!/usr/bin/env python3
"""Validate every post in a content directory.

Usage:
    python -m scripts.validate_posts                  # Validate settings.content_dir
    python -m scripts.validate_posts _posts           # Validate a directory
    python -m scripts.validate_posts _posts --strict  # Warnings -> errors too
    python -m scripts.validate_posts _posts --json    # Machine-readable report
"""

import argparse
import asyncio
import json
import logging
import sys

from blogdoc.config import get_settings
from blogdoc.services.batch import parse_directory
from blogdoc.services.checks import post_warnings

logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def main() -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Validate blog post documents")
    parser.add_argument(
        "content_dir",
        nargs="?",
        default=settings.content_dir,
        help=f"Directory of posts (default: {settings.content_dir})",
    )
    parser.add_argument("--pattern", default=settings.post_glob, help="File glob")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat editorial warnings as errors (for CI)",
    )
    parser.add_argument("--json", action="store_true", help="Print a JSON report")
    args = parser.parse_args()

    try:
        report = asyncio.run(parse_directory(args.content_dir, args.pattern))
    except FileNotFoundError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2

    warnings: dict[str, list[str]] = {}
    for post in report.posts:
        items = post_warnings(post)
        if items:
            warnings[post.source] = items

    if args.json:
        print(json.dumps({**report.to_dict(), "warnings": warnings}, indent=2))
    else:
        if report.failures:
            print(f"Validation FAILED ({len(report.failures)} of {report.total} posts):\n")
            for failure in report.failures:
                where = failure.source if failure.line is None else f"{failure.source}:{failure.line}"
                print(f"  ✗ {where}: {failure.error}: {failure.message}")
        if warnings:
            print(f"\nWarnings ({sum(len(w) for w in warnings.values())}):\n")
            for source, items in warnings.items():
                for item in items:
                    print(f"  ⚠ {source}: {item}")
        if report.ok:
            print(f"\n✓ {len(report.posts)} posts parsed")

    if not report.ok or (args.strict and warnings):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
