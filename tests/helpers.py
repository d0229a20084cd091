"""Shared test helpers for neocities_api tests."""

from __future__ import annotations

from typing import Any

import httpx

from neocities_api import create_http_client

TOKEN = "test_token"

SITE_INFO = {
    "sitename": "example",
    "views": 1234,
    "hits": 5678,
    "created_at": "Mon, 01 Jan 2024 00:00:00 +0000",
    "last_updated": "Tue, 02 Jan 2024 12:30:00 -0500",
    "domain": None,
    "tags": ["art", "music"],
    "latest_ipfs_hash": None,
}

LIST_FILES = [
    {
        "path": "images",
        "is_directory": True,
        "updated_at": "Sat, 13 Feb 2016 03:04:00 -0000",
    },
    {
        "path": "index.html",
        "is_directory": False,
        "size": 1023,
        "updated_at": "Sat, 13 Feb 2016 03:04:00 -0000",
        "sha1_hash": "c8aac06f343c962a24a7eb111aad739ff48b7fb1",
    },
]


class MockService:
    """Fake Neocities server for use with httpx.MockTransport.

    Responses are registered per URL path; every request received is recorded.
    Unregistered paths answer 404 with an error envelope.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[str, tuple[int, dict[str, Any]]] = {}

    def respond(self, path: str, status_code: int = 200, **kwargs: Any) -> None:
        self._routes[path] = (status_code, kwargs)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status_code, kwargs = self._routes.get(
            request.url.path,
            (404, {"json": {"result": "error", "message": "Not found"}}),
        )
        return httpx.Response(status_code, **kwargs)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def client(self) -> httpx.AsyncClient:
        """Create a client whose HTTP(S) traffic goes to this service."""
        return create_http_client(transport=httpx.MockTransport(self))
