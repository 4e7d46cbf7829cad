"""Recording model: the unit every resolution pass works on."""

import hashlib
from datetime import UTC, date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SourceTag(str, Enum):
    """Which ingestion path produced a recording."""

    CLOUD_API = "cloud-api"
    WEBHOOK = "webhook"
    FILE_STORE = "file-store"

    @property
    def letter(self) -> str:
        """Single-letter source code used in standardized names and folders."""
        return {
            SourceTag.CLOUD_API: "A",
            SourceTag.WEBHOOK: "B",
            SourceTag.FILE_STORE: "C",
        }[self]


def as_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime; naive values are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class Recording(BaseModel):
    """A session recording as seen by one source.

    Recordings are immutable. Anything derived from them (week numbers,
    match results) lives in separate value objects keyed by ``key``.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    primary_id: str | None = Field(
        default=None, description="Expected-unique recording id (UUID)"
    )
    secondary_id: str | None = Field(
        default=None, description="Meeting handle shared by repeated meetings"
    )
    title: str = Field(default="", description="Free-text topic or folder label")
    timestamp: datetime | None = Field(
        default=None, description="Session start, naive values treated as UTC"
    )
    duration_seconds: int = Field(default=0, ge=0)
    participants: tuple[str, ...] = Field(
        default=(), description="Display names in source order"
    )
    source_tag: SourceTag
    context_path: tuple[str, ...] = Field(
        default=(), description="Ancestor folder names (file-store only)"
    )
    description: str | None = Field(
        default=None, description="Optional agenda or notes text"
    )

    @property
    def key(self) -> str:
        """Primary id when present, otherwise a deterministic synthetic key."""
        if self.primary_id:
            return self.primary_id
        parts = [
            self.source_tag.value,
            self.secondary_id or "",
            self.timestamp.isoformat() if self.timestamp else "",
            self.title,
            "/".join(self.context_path),
        ]
        digest = hashlib.sha1("|".join(parts).encode("utf-8")).hexdigest()
        return f"synthetic:{digest[:16]}"

    @property
    def utc_timestamp(self) -> datetime | None:
        """Start time normalized to aware UTC."""
        if self.timestamp is None:
            return None
        return as_utc(self.timestamp)

    @property
    def session_date(self) -> date | None:
        """Calendar date (UTC) of the session start."""
        ts = self.utc_timestamp
        return ts.date() if ts else None

    @property
    def folder_name(self) -> str | None:
        """Last context path segment for file-store recordings."""
        if self.source_tag is SourceTag.FILE_STORE and self.context_path:
            return self.context_path[-1]
        return None
