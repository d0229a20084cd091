"""Exception hierarchy for the neocities_api library."""

from __future__ import annotations

import json

import httpx

DEFAULT_FAILURE_MESSAGE = "Response not OK"


class NeocitiesError(Exception):
    """Base exception for all neocities_api errors."""

    pass


class FetchError(NeocitiesError):
    """Raised when a response comes back with a non-success status.

    The ``message`` attribute holds the service-supplied error text (or a
    generic fallback). ``str(error)`` appends the response URL, status and
    headers so the failure can be diagnosed without re-issuing the call.
    """

    def __init__(
        self,
        response: httpx.Response,
        message: str | None = None,
        *,
        request: httpx.Request | None = None,
    ) -> None:
        meta = self.describe_response(response)
        super().__init__(f"{message}\n\n{meta}" if message else meta)
        self.response = response
        self.request = request
        self.message = message

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @classmethod
    def from_json_message(
        cls,
        response: httpx.Response,
        *,
        request: httpx.Request | None = None,
        substitute_message: str = DEFAULT_FAILURE_MESSAGE,
    ) -> FetchError:
        """Build an error, preferring the ``message`` field of a JSON body."""
        message = substitute_message
        try:
            payload = response.json()
        except (ValueError, httpx.ResponseNotRead):
            # Body is not JSON
            payload = None
        if isinstance(payload, dict):
            candidate = payload.get("message")
            if isinstance(candidate, str) and candidate:
                message = candidate
        return cls(response, message, request=request)

    @staticmethod
    def describe_response(response: httpx.Response) -> str:
        """Render URL, status and sorted headers as indented JSON."""
        return json.dumps(
            {
                "url": str(response.url),
                "status": response.status_code,
                "headers": dict(sorted(response.headers.items())),
            },
            indent=2,
        )


class MalformedResponseError(NeocitiesError):
    """Raised when a response body does not have the expected shape."""

    pass


class InvalidUploadError(NeocitiesError, ValueError):
    """Raised when an upload entry supplies both or neither of data and source."""

    pass
