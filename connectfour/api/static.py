"""Static file routes for the bundled browser client."""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse
from fastapi.responses import PlainTextResponse
from fastapi.responses import Response

import connectfour.runtime as runtime

INDEX_DOCUMENT = "index.html"
DEFAULT_CONTENT_TYPE = "application/octet-stream"
CONTENT_TYPES: dict[str, str] = {
    ".html": "text/html",
    ".js": "application/javascript",
    ".css": "text/css",
    ".json": "application/json",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
}

router = APIRouter()


def content_type_for(path: Path) -> str:
    return CONTENT_TYPES.get(path.suffix.lower(), DEFAULT_CONTENT_TYPE)


def resolve_asset(public_dir: Path, request_path: str) -> Path | None:
    """Map a decoded request path to a file inside `public_dir`.

    Returns None when the path escapes the root or is not a regular file.
    """
    relative = request_path.lstrip("/") or INDEX_DOCUMENT
    if "\x00" in relative:
        return None
    root = public_dir.resolve()
    candidate = (root / relative).resolve()
    if not candidate.is_relative_to(root):
        return None
    if not candidate.is_file():
        return None
    return candidate


@router.get("/{asset_path:path}", include_in_schema=False)
def serve_asset(asset_path: str) -> Response:
    """Serve one file from the public root, `/` being the index document."""
    asset = resolve_asset(runtime.settings.connectfour_public_dir, asset_path)
    if asset is None:
        return PlainTextResponse("Not found", status_code=404)
    return FileResponse(asset, media_type=content_type_for(asset))
