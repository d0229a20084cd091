"""Neocities API - An async Python client for the Neocities REST API.

Example usage:
    from neocities_api import NeocitiesAPI, UploadableFile

    # Using context manager (recommended)
    async with NeocitiesAPI("api-key") as api:
        await api.upload([
            UploadableFile("index.html", source="public/index.html"),
            UploadableFile("robots.txt", data="User-agent: *\\n"),
        ])
        for entry in await api.list():
            print(entry.path, "(dir)" if entry.is_directory else entry.size)

    # Exchanging credentials for an API key
    api = await NeocitiesAPI.create_from_credentials("mysite", "password")
    info = await api.info()
    await api.aclose()
"""

from neocities_api._internal.http import create_http_client, create_request, fetch_response
from neocities_api._internal.sources import get_file_data
from neocities_api.client import NeocitiesAPI, get_token
from neocities_api.exceptions import (
    FetchError,
    InvalidUploadError,
    MalformedResponseError,
    NeocitiesError,
)
from neocities_api.models import (
    DirectoryEntry,
    FileEntry,
    FileSystemEntry,
    MessageResponse,
    SiteInfo,
    UploadableFile,
)
from neocities_api.routes import API_ORIGIN, APIRoute, resolve_url

__version__ = "0.1.0"

__all__ = [
    # Main client
    "NeocitiesAPI",
    "get_token",
    # Request pipeline
    "API_ORIGIN",
    "APIRoute",
    "resolve_url",
    "create_http_client",
    "create_request",
    "fetch_response",
    "get_file_data",
    # Models
    "DirectoryEntry",
    "FileEntry",
    "FileSystemEntry",
    "MessageResponse",
    "SiteInfo",
    "UploadableFile",
    # Exceptions
    "NeocitiesError",
    "FetchError",
    "MalformedResponseError",
    "InvalidUploadError",
]
