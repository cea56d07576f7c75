"""Post endpoints."""

import logging

from fastapi import APIRouter, HTTPException, Path, Query, Request

from blogdoc.models.batch import FailureReport, PostIndex
from blogdoc.models.post import Post
from blogdoc.services.documents import parse_post
from blogdoc.services.post_store import get_failures, get_post, get_post_index

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["posts"])

# Upper bound on documents accepted by the parse endpoint
MAX_DOCUMENT_BYTES = 1_000_000


def _content_unavailable(exc: FileNotFoundError) -> HTTPException:
    logger.error("Content directory unavailable: %s", exc)
    return HTTPException(status_code=503, detail="Content directory not available")


@router.get("", response_model=PostIndex)
async def list_posts(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    category: str | None = Query(default=None, max_length=200),
    tag: str | None = Query(default=None, max_length=200),
):
    """Get the post index, newest first."""
    try:
        return await get_post_index(limit=limit, offset=offset, category=category, tag=tag)
    except FileNotFoundError as exc:
        raise _content_unavailable(exc) from exc


@router.get("/failures", response_model=FailureReport)
async def list_failures():
    """List documents in the content directory that failed to parse."""
    try:
        return await get_failures()
    except FileNotFoundError as exc:
        raise _content_unavailable(exc) from exc


@router.post("/parse", response_model=Post)
async def parse_document(request: Request):
    """Parse a raw document sent as the request body.

    Parse errors are returned as 422 by the application error handler.
    """
    raw = await request.body()
    if len(raw) > MAX_DOCUMENT_BYTES:
        raise HTTPException(status_code=413, detail="Document too large")
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise HTTPException(status_code=400, detail="Document must be UTF-8") from exc
    return parse_post(text, source="<request>")


@router.get("/{slug}", response_model=Post)
async def get_post_by_slug(
    slug: str = Path(..., pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$", max_length=200),
):
    """Get a single parsed post by its slug."""
    try:
        post = await get_post(slug)
    except FileNotFoundError as exc:
        raise _content_unavailable(exc) from exc
    if post is None:
        raise HTTPException(status_code=404, detail="Post not found")
    return post
