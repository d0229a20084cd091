"""Conversion of decoded API payloads into model objects.

The service reports timestamps as RFC 2822 strings such as
``"Mon, 01 Jan 2024 00:00:00 +0000"``. Every function here is pure: the decoded
payload is read, never modified, and a new object is returned.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

from neocities_api.models import (
    DirectoryEntry,
    FileEntry,
    FileSystemEntry,
    MessageResponse,
    SiteInfo,
)


_DAY_NAMES = frozenset({"Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"})


def parse_rfc2822(value: str) -> datetime:
    """Parse an RFC 2822 datetime string into a tz-aware UTC datetime.

    The zone must be a numeric offset or a zone name known to RFC 2822.
    ``-0000`` (no zone information) is read as UTC.

    Raises:
        ValueError: If the value is not a well-formed RFC 2822 datetime
    """
    if not isinstance(value, str) or not value:
        raise ValueError(f"RFC 2822 datetime must be a non-empty string, got {value!r}")
    day_name, has_day, _ = value.partition(",")
    if has_day and day_name.strip() not in _DAY_NAMES:
        raise ValueError(f"Invalid day name in RFC 2822 datetime: {value!r}")
    try:
        dt = parsedate_to_datetime(value)
    except (TypeError, IndexError) as e:
        raise ValueError(f"Invalid RFC 2822 datetime: {value!r}") from e
    # Missing, unknown and "-0000" zones all yield a naive datetime
    if dt.tzinfo is None:
        if not value.rstrip().endswith("-0000"):
            raise ValueError(f"Missing or unknown zone in RFC 2822 datetime: {value!r}")
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _require_mapping(raw: Any, what: str) -> None:
    if not isinstance(raw, Mapping):
        raise TypeError(f"{what} must be an object, got {raw!r}")


def normalize_info(raw: Mapping[str, Any]) -> SiteInfo:
    """Build a SiteInfo from the ``info`` object of an info response."""
    _require_mapping(raw, "info")
    last_updated = raw.get("last_updated")
    return SiteInfo(
        sitename=raw["sitename"],
        hits=int(raw["hits"]),
        views=int(raw["views"]),
        created_at=parse_rfc2822(raw["created_at"]),
        last_updated=parse_rfc2822(last_updated) if last_updated is not None else None,
        domain=raw.get("domain"),
        tags=list(raw.get("tags") or []),
        latest_ipfs_hash=raw.get("latest_ipfs_hash"),
    )


def normalize_list_entry(raw: Mapping[str, Any]) -> FileSystemEntry:
    """Build a FileEntry or DirectoryEntry from one element of ``files``."""
    _require_mapping(raw, "files entry")
    updated_at = parse_rfc2822(raw["updated_at"])
    is_directory = raw["is_directory"]
    if not isinstance(is_directory, bool):
        raise TypeError(f"is_directory must be a boolean, got {is_directory!r}")
    if is_directory:
        return DirectoryEntry(path=raw["path"], updated_at=updated_at)
    return FileEntry(
        path=raw["path"],
        size=int(raw["size"]),
        updated_at=updated_at,
        sha1_hash=raw.get("sha1_hash"),
    )


def normalize_message(raw: Mapping[str, Any]) -> MessageResponse:
    message = raw["message"]
    if not isinstance(message, str):
        raise TypeError(f"message must be a string, got {message!r}")
    return MessageResponse(result=raw["result"], message=message)
