from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse
import os
from constants import STATIC_DIR
from logging_config import get_logger

logger = get_logger(__name__)

static_router = APIRouter(tags=["static"])

LONG_CACHE_EXTENSIONS = {".js", ".css"}
LONG_CACHE_HEADER = "public, max-age=2592000"


def resolve_static_path(static_dir: str, request_path: str):
    """Map a request path onto a file inside static_dir, or None if there is no such file."""
    relative = request_path.lstrip("/") or "index.html"
    try:
        root = os.path.realpath(static_dir)
        candidate = os.path.realpath(os.path.join(root, relative))
        if os.path.commonpath([root, candidate]) != root:
            return None
        if not os.path.isfile(candidate):
            return None
    except (ValueError, OSError) as e:
        # e.g. an encoded NUL byte in the path
        logger.debug(f"Unusable static path /{request_path}: {e}")
        return None
    return candidate


@static_router.api_route("/{full_path:path}", methods=["GET", "HEAD"], include_in_schema=False)
async def serve_static(full_path: str = ""):
    """Serve a file from the static directory.

    Unknown paths get index.html with a 200 so the single-page client can
    handle its own routes.
    """
    file_path = resolve_static_path(STATIC_DIR, full_path)
    if file_path is not None:
        headers = {}
        if os.path.splitext(file_path)[1] in LONG_CACHE_EXTENSIONS:
            headers["Cache-Control"] = LONG_CACHE_HEADER
        return FileResponse(file_path, headers=headers)

    index_path = os.path.join(STATIC_DIR, "index.html")
    if not os.path.isfile(index_path):
        logger.warning(f"Static fallback failed: {index_path} does not exist")
        raise HTTPException(status_code=404, detail="Not found")
    logger.debug(f"Static file not found for /{full_path}, serving index.html")
    return FileResponse(index_path, media_type="text/html")
