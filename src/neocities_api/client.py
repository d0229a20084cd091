"""Main NeocitiesAPI class for interacting with the Neocities API."""

from __future__ import annotations

import asyncio
import logging
import posixpath
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any, TypeVar

import httpx

from neocities_api._internal.http import (
    basic_authorization,
    build_request,
    create_http_client,
    create_request,
    fetch_response,
    read_envelope,
)
from neocities_api._internal.sources import resolve_file_data
from neocities_api.exceptions import MalformedResponseError
from neocities_api.models import FileSystemEntry, MessageResponse, SiteInfo, UploadableFile
from neocities_api.normalize import normalize_info, normalize_list_entry, normalize_message
from neocities_api.routes import API_ORIGIN, APIRoute

logger = logging.getLogger(__name__)

T = TypeVar("T")

UPLOAD_CONTENT_TYPE = "application/octet-stream"


def _normalize(response: httpx.Response, convert: Callable[[Mapping[str, Any]], T]) -> T:
    """Apply ``convert`` to the response envelope, reporting shape errors uniformly."""
    payload = read_envelope(response)
    try:
        return convert(payload)
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedResponseError(
            f"Unexpected response payload from {response.url}: {e}"
        ) from e


async def _gather_all_or_cancel(aws: list[Awaitable[T]]) -> list[T]:
    """Await all of ``aws`` concurrently; on the first failure cancel the rest."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        # Wait for cancelled tasks so none outlives the caller's client
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


def _read_api_key(payload: Mapping[str, Any]) -> str:
    token = payload.get("api_key")
    if not isinstance(token, str) or not token:
        raise MalformedResponseError("Token not found")
    return token


async def get_token(
    username: str,
    password: str,
    *,
    origin: str | httpx.URL = API_ORIGIN,
    http_client: httpx.AsyncClient | None = None,
) -> str:
    """Exchange account credentials for the account's API key.

    The key can also be found on the site settings page under "API Key".

    Args:
        username: Site name or account email
        password: Account password
        origin: Scheme and host of the service
        http_client: Client to send the request with; a temporary one is
            created when omitted

    Returns:
        The API key (token)

    Raises:
        FetchError: If the service rejects the credentials
        MalformedResponseError: If the response carries no key
    """
    request = build_request(
        APIRoute.KEY, basic_authorization(username, password), origin=origin
    )
    if http_client is None:
        async with create_http_client() as client:
            response = await fetch_response(client, request)
    else:
        response = await fetch_response(http_client, request)

    token = _read_api_key(read_envelope(response))
    logger.info(f"Obtained API key for {username}")
    return token


class NeocitiesAPI:
    """Client bound to one API key.

    The key is kept private; the object only exposes the API operations.

    Example (context manager - recommended):
        async with NeocitiesAPI(token) as api:
            await api.upload([UploadableFile("index.html", source="site/index.html")])

    Example (from credentials):
        api = await NeocitiesAPI.create_from_credentials("mysite", "password")
        info = await api.info()
        await api.aclose()
    """

    def __init__(
        self,
        token: str,
        *,
        origin: str | httpx.URL = API_ORIGIN,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            token: API key for the account
            origin: Scheme and host of the service
            http_client: Optional caller-owned client; it is not closed by aclose()
        """
        self._token = token
        self._origin = origin
        self._owns_client = http_client is None
        self._http = http_client if http_client is not None else create_http_client()

    @classmethod
    async def create_from_credentials(
        cls,
        username: str,
        password: str,
        *,
        origin: str | httpx.URL = API_ORIGIN,
        http_client: httpx.AsyncClient | None = None,
    ) -> NeocitiesAPI:
        """Obtain an API key with ``get_token`` and return a client bound to it."""
        owns_client = http_client is None
        client = http_client if http_client is not None else create_http_client()
        try:
            token = await get_token(username, password, origin=origin, http_client=client)
        except BaseException:
            if owns_client:
                await client.aclose()
            raise
        api = cls(token, origin=origin, http_client=client)
        api._owns_client = owns_client
        return api

    async def __aenter__(self) -> NeocitiesAPI:
        """Enter async context manager."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Exit async context manager."""
        await self.aclose()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(origin={str(self._origin)!r})"

    def _request(self, route: APIRoute, **kwargs: Any) -> httpx.Request:
        return create_request(self._token, route, origin=self._origin, **kwargs)

    async def delete(self, paths: Iterable[str]) -> MessageResponse:
        """Delete one or more paths (files or directories).

        Args:
            paths: Site paths to delete

        Returns:
            MessageResponse with the service's result and message

        Raises:
            FetchError: If the service rejects the request
        """
        paths = list(paths)
        request = self._request(
            APIRoute.DELETE,
            method="POST",
            data={"filenames[]": paths},
        )
        response = await fetch_response(self._http, request)
        result = _normalize(response, normalize_message)
        logger.info(f"Deleted {len(paths)} path(s): {result.message}")
        return result

    async def info(self, site_name: str | None = None) -> SiteInfo:
        """Get information about a site.

        Args:
            site_name: Site to look up; the account's own site when omitted

        Returns:
            SiteInfo with dates converted to UTC datetimes
        """
        params = {"sitename": site_name} if site_name is not None else None
        response = await fetch_response(self._http, self._request(APIRoute.INFO, params=params))
        return _normalize(response, lambda payload: normalize_info(payload["info"]))

    async def list(self, path: str | None = None) -> list[FileSystemEntry]:
        """List the files of the site.

        Args:
            path: Directory to list; the whole site (recursively) when omitted

        Returns:
            FileEntry and DirectoryEntry objects; branch on ``is_directory``
        """
        params = {"path": path} if path is not None else None
        response = await fetch_response(self._http, self._request(APIRoute.LIST, params=params))
        return _normalize(
            response,
            lambda payload: [normalize_list_entry(entry) for entry in payload["files"]],
        )

    async def upload(self, files: Iterable[UploadableFile]) -> MessageResponse:
        """Upload one or more files in a single multipart request.

        Sources are resolved concurrently; parts keep the order of ``files``.

        Args:
            files: Files to upload, each with its destination path

        Returns:
            MessageResponse with the service's result and message

        Raises:
            FetchError: If a source cannot be read or the service rejects the upload
        """
        files = list(files)
        contents = await _gather_all_or_cancel(
            [resolve_file_data(self._http, file) for file in files]
        )
        parts = [
            (
                file.upload_path,
                (posixpath.basename(file.upload_path), content, UPLOAD_CONTENT_TYPE),
            )
            for file, content in zip(files, contents)
        ]
        request = self._request(APIRoute.UPLOAD, method="POST", files=parts)
        response = await fetch_response(self._http, request)
        result = _normalize(response, normalize_message)
        logger.info(f"Uploaded {len(files)} file(s): {result.message}")
        return result

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this object created it."""
        if self._owns_client and not self._http.is_closed:
            await self._http.aclose()
