"""Tests for upload functionality."""

from __future__ import annotations

import asyncio
import re
from pathlib import Path

import httpx
import pytest
from helpers import TOKEN, MockService

from neocities_api import (
    FetchError,
    InvalidUploadError,
    MessageResponse,
    NeocitiesAPI,
    UploadableFile,
)

UPLOAD_OK = {"result": "success", "message": "your file(s) have been successfully uploaded"}

_PART_NAME = re.compile(rb'Content-Disposition: form-data; name="([^"]*)"')


def _part_names(body: bytes) -> list[bytes]:
    return _PART_NAME.findall(body)


class TestUploadableFile:
    """Tests for the exactly-one payload rule."""

    def test_data_only_is_valid(self) -> None:
        """Test that data alone is accepted."""
        file = UploadableFile("a.txt", data="x")

        assert file.data == "x"
        assert file.source is None

    def test_source_only_is_valid(self) -> None:
        """Test that a source alone is accepted."""
        file = UploadableFile.from_source("a.txt", "local/a.txt")

        assert file.source == "local/a.txt"
        assert file.data is None

    def test_both_raise(self) -> None:
        """Test that supplying data and source raises InvalidUploadError."""
        with pytest.raises(InvalidUploadError, match="Both data and source"):
            UploadableFile("a.txt", data=b"x", source="a.txt")

    def test_neither_raises(self) -> None:
        """Test that supplying neither raises InvalidUploadError."""
        with pytest.raises(InvalidUploadError, match="No data or source"):
            UploadableFile("a.txt")

    def test_invalid_upload_error_is_value_error(self) -> None:
        """Test that the contract violation is also a ValueError."""
        with pytest.raises(ValueError):
            UploadableFile.from_data("a.txt", None)  # type: ignore[arg-type]


class TestUpload:
    """Tests for uploading files."""

    @pytest.mark.asyncio
    async def test_upload_two_files_in_order(
        self, service: MockService, http_client: httpx.AsyncClient
    ) -> None:
        """Test that each file becomes one part, keyed by upload path, in order."""
        service.respond("/api/upload", json=UPLOAD_OK)

        async with NeocitiesAPI(TOKEN, http_client=http_client) as api:
            result = await api.upload(
                [
                    UploadableFile("a.txt", data="x"),
                    UploadableFile("b.txt", data="y"),
                ]
            )

        assert result == MessageResponse(**UPLOAD_OK)
        request = service.last_request
        assert request.method == "POST"
        assert request.url.path == "/api/upload"
        assert request.headers["authorization"] == f"Bearer {TOKEN}"
        assert request.headers["content-type"].startswith("multipart/form-data; boundary=")
        body = request.content
        assert _part_names(body) == [b"a.txt", b"b.txt"]
        assert b'filename="a.txt"\r\nContent-Type: application/octet-stream\r\n\r\nx\r\n' in body
        assert b'filename="b.txt"\r\nContent-Type: application/octet-stream\r\n\r\ny\r\n' in body

    @pytest.mark.asyncio
    async def test_upload_nested_path(
        self, service: MockService, http_client: httpx.AsyncClient
    ) -> None:
        """Test that the field name keeps the full destination path."""
        service.respond("/api/upload", json=UPLOAD_OK)

        async with NeocitiesAPI(TOKEN, http_client=http_client) as api:
            await api.upload([UploadableFile("images/cat.png", data=b"\x89PNG")])

        body = service.last_request.content
        assert _part_names(body) == [b"images/cat.png"]
        assert b'filename="cat.png"' in body

    @pytest.mark.asyncio
    async def test_upload_mixed_sources(
        self,
        service: MockService,
        http_client: httpx.AsyncClient,
        hello_file: Path,
    ) -> None:
        """Test that local, remote and deferred inputs end up in one form."""
        service.respond("/remote/logo.svg", content=b"<svg/>")
        service.respond("/api/upload", json=UPLOAD_OK)

        async def deferred() -> bytes:
            return b"deferred"

        async with NeocitiesAPI(TOKEN, http_client=http_client) as api:
            await api.upload(
                [
                    UploadableFile("hello.json", source=hello_file),
                    UploadableFile("logo.svg", source="https://cdn.example.com/remote/logo.svg"),
                    UploadableFile("later.txt", data=deferred()),
                ]
            )

        body = service.last_request.content
        assert _part_names(body) == [b"hello.json", b"logo.svg", b"later.txt"]
        assert hello_file.read_bytes() in body
        assert b"<svg/>" in body
        assert b"deferred" in body

    @pytest.mark.asyncio
    async def test_upload_missing_source_sends_nothing(
        self,
        service: MockService,
        http_client: httpx.AsyncClient,
        tmp_path: Path,
    ) -> None:
        """Test that an unreadable source aborts before the upload request."""
        async with NeocitiesAPI(TOKEN, http_client=http_client) as api:
            with pytest.raises(FetchError) as exc_info:
                await api.upload(
                    [
                        UploadableFile("a.txt", data="x"),
                        UploadableFile("b.txt", source=tmp_path / "missing.txt"),
                    ]
                )

        assert exc_info.value.status_code == 404
        assert service.requests == []

    @pytest.mark.asyncio
    async def test_upload_failed_source_cancels_pending_reads(
        self,
        service: MockService,
        http_client: httpx.AsyncClient,
        tmp_path: Path,
    ) -> None:
        """Test that one failing source cancels the others before upload returns."""
        started = asyncio.Event()
        cancelled = asyncio.Event()

        async def never_ready() -> bytes:
            started.set()
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                cancelled.set()
                raise
            return b""

        async with NeocitiesAPI(TOKEN, http_client=http_client) as api:
            with pytest.raises(FetchError):
                await api.upload(
                    [
                        UploadableFile("slow.txt", data=never_ready()),
                        UploadableFile("b.txt", source=tmp_path / "missing.txt"),
                    ]
                )

        assert started.is_set()
        assert cancelled.is_set()
        assert service.requests == []

    @pytest.mark.asyncio
    async def test_upload_rejected_by_service(
        self, service: MockService, http_client: httpx.AsyncClient
    ) -> None:
        """Test that a service-side rejection surfaces its message."""
        service.respond(
            "/api/upload",
            400,
            json={
                "result": "error",
                "error_type": "invalid_file_type",
                "message": "exe is not a valid file type",
            },
        )

        async with NeocitiesAPI(TOKEN, http_client=http_client) as api:
            with pytest.raises(FetchError) as exc_info:
                await api.upload([UploadableFile("tool.exe", data=b"MZ")])

        assert exc_info.value.message == "exe is not a valid file type"
        assert exc_info.value.request is not None
        assert b"tool.exe" in exc_info.value.request.content
