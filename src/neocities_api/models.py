"""Data models for the neocities_api library."""

from __future__ import annotations

import os
from collections.abc import Awaitable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Union

import httpx

from neocities_api.exceptions import InvalidUploadError

FileData = Union[bytes, bytearray, memoryview, str]
FileSource = Union[str, os.PathLike, httpx.URL]


@dataclass(frozen=True)
class MessageResponse:
    """Envelope returned by the delete and upload endpoints."""

    result: str
    message: str


@dataclass(frozen=True)
class SiteInfo:
    """Metadata about a Neocities site."""

    sitename: str
    hits: int
    views: int
    created_at: datetime
    last_updated: datetime | None = None
    domain: str | None = None
    tags: list[str] = field(default_factory=list)
    latest_ipfs_hash: str | None = None


@dataclass(frozen=True)
class FileEntry:
    """A file stored on a site."""

    path: str
    size: int
    updated_at: datetime
    sha1_hash: str | None = None
    is_directory: Literal[False] = field(default=False, init=False)


@dataclass(frozen=True)
class DirectoryEntry:
    """A directory on a site."""

    path: str
    updated_at: datetime
    is_directory: Literal[True] = field(default=True, init=False)


FileSystemEntry = Union[FileEntry, DirectoryEntry]


@dataclass(frozen=True)
class UploadableFile:
    """A file to upload, given either as raw data or as a source reference.

    ``data`` may be bytes, text (sent as UTF-8) or an awaitable resolving to
    either. ``source`` is a local path (relative to the working directory or
    absolute), a ``file:``/``http(s):`` URL string, or an ``httpx.URL``.
    Exactly one of the two must be given.
    """

    upload_path: str
    data: FileData | Awaitable[FileData] | None = None
    source: FileSource | None = None

    def __post_init__(self) -> None:
        if self.data is None and self.source is None:
            raise InvalidUploadError(
                f"No data or source given for upload path {self.upload_path!r}"
            )
        if self.data is not None and self.source is not None:
            raise InvalidUploadError(
                f"Both data and source given for upload path {self.upload_path!r}"
            )

    @classmethod
    def from_data(
        cls, upload_path: str, data: FileData | Awaitable[FileData]
    ) -> UploadableFile:
        return cls(upload_path, data=data)

    @classmethod
    def from_source(cls, upload_path: str, source: FileSource) -> UploadableFile:
        return cls(upload_path, source=source)
