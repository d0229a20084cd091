"""Resolution of upload inputs into bytes."""

from __future__ import annotations

import inspect
import os
import re
from pathlib import Path

import httpx

from neocities_api._internal.http import fetch_response
from neocities_api.exceptions import InvalidUploadError
from neocities_api.models import FileData, FileSource, UploadableFile

_URL_PREFIX = re.compile(r"^(?:https?://|file:)", re.IGNORECASE)


def as_url(source: FileSource) -> httpx.URL:
    """Turn a path or URL reference into an absolute URL.

    Relative paths are resolved against the current working directory and
    returned as ``file:`` URLs.
    """
    if isinstance(source, httpx.URL):
        return source
    if isinstance(source, str) and _URL_PREFIX.match(source):
        return httpx.URL(source)
    path = Path(os.path.abspath(os.fspath(source)))
    return httpx.URL(path.as_uri())


def _to_bytes(data: FileData) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


async def get_file_data(client: httpx.AsyncClient, source: FileSource) -> bytes:
    """Fetch the bytes behind a local path or URL.

    Raises:
        FetchError: If the file cannot be read or the server answers with an error
    """
    request = httpx.Request("GET", as_url(source))
    response = await fetch_response(client, request)
    return response.content


async def resolve_file_data(client: httpx.AsyncClient, file: UploadableFile) -> bytes:
    """Return the bytes to upload for ``file``."""
    if file.data is not None and file.source is None:
        data = file.data
        if inspect.isawaitable(data):
            data = await data
        return _to_bytes(data)
    if file.source is not None and file.data is None:
        return await get_file_data(client, file.source)
    raise InvalidUploadError(
        f"Exactly one of data or source is required for {file.upload_path!r}"
    )
