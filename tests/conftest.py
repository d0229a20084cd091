"""Pytest fixtures for neocities_api tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from helpers import MockService


@pytest.fixture
def service() -> MockService:
    """Create a fake Neocities server."""
    return MockService()


@pytest.fixture
def http_client(service: MockService) -> httpx.AsyncClient:
    """Create an AsyncClient routed to the fake server."""
    return service.client()


@pytest.fixture
def hello_file(tmp_path: Path) -> Path:
    """Create a small JSON file for source resolution tests."""
    path = tmp_path / "testdata" / "hello.json"
    path.parent.mkdir()
    path.write_text(json.dumps({"message": "hello world"}) + "\n")
    return path


@pytest.fixture
def patch_api_class() -> Any:
    """Patch NeocitiesAPI in the CLI module.

    Yields the object returned by ``async with NeocitiesAPI(...)``; its
    operations are AsyncMocks.
    """
    with patch("neocities_api.cli.NeocitiesAPI") as mock_class:
        api = MagicMock()
        api.info = AsyncMock()
        api.list = AsyncMock()
        api.upload = AsyncMock()
        api.delete = AsyncMock()
        mock_class.return_value.__aenter__.return_value = api
        mock_class.return_value.__aexit__.return_value = None
        api.mock_class = mock_class
        yield api
