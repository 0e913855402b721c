"""ETag support for downloadable templates."""

import hashlib

from fastapi import Request, status
from fastapi.responses import Response


def compute_etag(content: str | bytes) -> str:
    """Compute a weak ETag from content."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return f'W/"{hashlib.sha256(content).hexdigest()[:32]}"'


def _normalize(etag: str) -> str:
    etag = etag.strip()
    if etag.startswith("W/"):
        etag = etag[2:]
    return etag.strip('"')


def check_if_none_match(request: Request, etag: str) -> bool:
    """
    Check If-None-Match header against computed ETag.

    Returns True if client has a matching ETag (should return 304).
    """
    if_none_match = request.headers.get("If-None-Match")
    if not if_none_match:
        return False
    if if_none_match.strip() == "*":
        return True

    server_etag = _normalize(etag)
    return any(_normalize(candidate) == server_etag for candidate in if_none_match.split(","))


def create_not_modified_response(etag: str) -> Response:
    """Create 304 Not Modified response with ETag header."""
    return Response(
        status_code=status.HTTP_304_NOT_MODIFIED,
        headers={"ETag": etag},
    )
