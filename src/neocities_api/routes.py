"""Neocities API endpoints."""

from __future__ import annotations

from enum import Enum

import httpx

API_ORIGIN = "https://neocities.org"


class APIRoute(str, Enum):
    """Fixed server-side paths targeted by the client."""

    DELETE = "/api/delete"
    INFO = "/api/info"
    KEY = "/api/key"
    LIST = "/api/list"
    UPLOAD = "/api/upload"


def resolve_url(route: APIRoute, origin: str | httpx.URL = API_ORIGIN) -> httpx.URL:
    """Return the absolute URL of ``route`` on ``origin``.

    Any path, query or fragment already present on ``origin`` is dropped.
    """
    return httpx.URL(origin).join(route.value)
