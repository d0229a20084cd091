"""httpx transport that serves ``file:`` URLs from the local filesystem."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from urllib.request import url2pathname

import httpx

logger = logging.getLogger(__name__)


def file_url_to_path(url: httpx.URL) -> Path:
    """Convert a ``file:`` URL into a local path, decoding percent-escapes once."""
    raw_path = url.raw_path.decode("ascii").partition("?")[0]
    return Path(url2pathname(raw_path))


def _error_response(status_code: int, message: str) -> httpx.Response:
    return httpx.Response(status_code, json={"result": "error", "message": message})


class LocalFileTransport(httpx.AsyncBaseTransport):
    """Answer GET requests for ``file:`` URLs with the file's bytes.

    Read failures are reported as HTTP-style error responses carrying a JSON
    error envelope, so they go through the same validation as API responses.
    """

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        if request.method != "GET":
            return _error_response(405, f"Method {request.method} not allowed for file URLs")

        path = file_url_to_path(request.url)
        logger.debug(f"Reading local file {path}")
        try:
            content = await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError:
            return _error_response(404, f"File not found: {path}")
        except PermissionError:
            return _error_response(403, f"Permission denied: {path}")
        except IsADirectoryError:
            return _error_response(400, f"Is a directory: {path}")

        return httpx.Response(
            200,
            headers={"content-type": "application/octet-stream"},
            content=content,
        )
