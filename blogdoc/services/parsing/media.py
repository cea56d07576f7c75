"""Resolve image and video references against a post's media subpath."""

import posixpath
import re

from blogdoc.errors import UnresolvableMediaReferenceError

# scheme://, protocol-relative //host and inline data: URIs are already absolute
_ABSOLUTE_URL_RE = re.compile(r"^(?:[a-zA-Z][a-zA-Z0-9+.-]*://|//|data:)")


def is_absolute_reference(path: str) -> bool:
    """Return True for URLs and root-absolute paths."""
    return bool(_ABSOLUTE_URL_RE.match(path)) or path.startswith("/")


def resolve_media_path(path: str, media_subpath: str | None) -> str:
    """Resolve *path* the way the site resolves body media.

    Absolute references are returned unchanged. Relative ones are joined
    onto *media_subpath* and normalized.

    Raises:
        UnresolvableMediaReferenceError: If the path is empty, relative with
            no subpath, or climbs above the subpath.
    """
    path = path.strip()
    if not path:
        raise UnresolvableMediaReferenceError(
            path, media_subpath, reason="empty media reference"
        )
    if is_absolute_reference(path):
        return path
    if not media_subpath:
        raise UnresolvableMediaReferenceError(path, media_subpath)

    relative = posixpath.normpath(path)
    if relative == ".." or relative.startswith("../"):
        raise UnresolvableMediaReferenceError(path, media_subpath)

    base = media_subpath.rstrip("/") or "/"
    if _ABSOLUTE_URL_RE.match(base):
        # CDN-style subpath: keep the URL prefix intact
        return f"{base}/{relative}"
    return posixpath.join(base, relative)
