"""Request construction and response validation for the Neocities API."""

from __future__ import annotations

import base64
import logging
from typing import Any

import httpx

from neocities_api._internal.transports import LocalFileTransport
from neocities_api.exceptions import FetchError, MalformedResponseError
from neocities_api.routes import API_ORIGIN, APIRoute, resolve_url

logger = logging.getLogger(__name__)


def create_http_client(**kwargs: Any) -> httpx.AsyncClient:
    """Create an AsyncClient able to fetch ``file:`` URLs as well as HTTP(S).

    Keyword arguments are passed to ``httpx.AsyncClient``.
    """
    mounts = dict(kwargs.pop("mounts", None) or {})
    mounts.setdefault("file://", LocalFileTransport())
    return httpx.AsyncClient(mounts=mounts, **kwargs)


def basic_authorization(username: str, password: str) -> str:
    credentials = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {credentials}"


def build_request(
    route: APIRoute,
    authorization: str,
    *,
    params: Any = None,
    method: str = "GET",
    headers: Any = None,
    origin: str | httpx.URL = API_ORIGIN,
    **body: Any,
) -> httpx.Request:
    """Build a request for ``route`` with the given authorization header value."""
    request_headers = httpx.Headers(headers)
    # Replaces any caller-supplied value, whatever its casing
    request_headers["authorization"] = authorization
    return httpx.Request(
        method,
        resolve_url(route, origin),
        params=params,
        headers=request_headers,
        **body,
    )


def create_request(
    token: str,
    route: APIRoute,
    *,
    params: Any = None,
    method: str = "GET",
    headers: Any = None,
    origin: str | httpx.URL = API_ORIGIN,
    **body: Any,
) -> httpx.Request:
    """Build a bearer-authenticated request.

    Args:
        token: API key for the account
        route: Endpoint to target
        params: Query parameters, encoded into the URL (read operations)
        method: HTTP method
        headers: Extra headers; any ``authorization`` entry is overwritten
        origin: Scheme and host of the service
        **body: ``data=``/``files=``/``content=`` passed through to httpx
            (write operations)

    Returns:
        An unsent httpx.Request
    """
    return build_request(
        route,
        f"Bearer {token}",
        params=params,
        method=method,
        headers=headers,
        origin=origin,
        **body,
    )


async def copy_request(request: httpx.Request) -> httpx.Request:
    """Return a copy of ``request`` with its body buffered."""
    content = await request.aread()
    return httpx.Request(
        request.method,
        request.url,
        headers=request.headers,
        content=content,
    )


async def fetch_response(client: httpx.AsyncClient, request: httpx.Request) -> httpx.Response:
    """Send ``request`` and return the response if its status is 2xx.

    Raises:
        FetchError: If the response status is not a success status
    """
    retained = await copy_request(request)
    logger.debug(f"{request.method} {request.url}")
    response = await client.send(request)

    if not response.is_success:
        error = FetchError.from_json_message(response, request=retained)
        logger.warning(
            f"{request.method} {request.url} failed with status "
            f"{response.status_code}: {error.message}"
        )
        raise error

    return response


def read_envelope(response: httpx.Response) -> dict[str, Any]:
    """Decode a response body as a ``{"result": ..., ...}`` JSON object.

    Raises:
        MalformedResponseError: If the body is not such an object
    """
    try:
        payload = response.json()
    except ValueError as e:
        raise MalformedResponseError(
            f"Response from {response.url} is not valid JSON"
        ) from e

    if not isinstance(payload, dict) or not isinstance(payload.get("result"), str):
        raise MalformedResponseError(
            f"Response from {response.url} is not an API envelope: {payload!r}"
        )
    return payload
