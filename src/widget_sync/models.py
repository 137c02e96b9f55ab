from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator


class SyncTarget(BaseModel):
    name: str = Field(..., description="Widget name; matched case-insensitively.")
    source_url: str = Field(..., description="HTTP(S) endpoint serving text or an image.")

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Widget name is required.")
        return cleaned

    @field_validator("source_url")
    @classmethod
    def _must_be_http_url(cls, value: str) -> str:
        parsed = urlparse(value.strip())
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError("Source URL must be an absolute http(s) URL.")
        return value.strip()

    def matches(self, widget_name: str) -> bool:
        return widget_name.casefold() == self.name.casefold()


class WidgetKind(str, Enum):
    TEXT = "textarea"
    IMAGE = "image"
    UNKNOWN = "unknown"

    @classmethod
    def from_platform(cls, raw: object) -> "WidgetKind":
        if not isinstance(raw, str):
            return cls.UNKNOWN
        try:
            kind = cls(raw.lower())
        except ValueError:
            return cls.UNKNOWN
        return kind


@dataclass(slots=True)
class ImageData:
    url: str
    link_url: str = ""
    # Filled in by the platform when the image is rendered.
    width: int = 0
    height: int = 0


@dataclass(slots=True)
class Widget:
    name: str
    kind: WidgetKind
    id: str | None = None
    text: str | None = None
    images: list[ImageData] = field(default_factory=list)


@dataclass(slots=True)
class MediaAsset:
    media_id: str
    media_url: str


@dataclass(slots=True)
class FetchResult:
    status_code: int
    body: bytes = b""
    content_type: str | None = None
    last_modified: str | None = None

    @property
    def not_modified(self) -> bool:
        return self.status_code == 304

    @property
    def ok(self) -> bool:
        return self.status_code == 200

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def content_kind(self) -> WidgetKind | None:
        """Widget kind implied by the declared content type, if acceptable."""
        if not self.content_type:
            return None
        if self.content_type.startswith("text/plain"):
            return WidgetKind.TEXT
        if self.content_type.startswith("image/"):
            return WidgetKind.IMAGE
        return None


class OutcomeStatus(str, Enum):
    UPDATED = "updated"
    CREATED = "created"
    UNCHANGED = "unchanged"
    SKIPPED = "skipped"


class SkipReason(str, Enum):
    HTTP_ERROR = "http-error"
    INVALID_CONTENT_TYPE = "invalid-content-type"
    AMBIGUOUS_EXISTING = "ambiguous-existing"
    UNKNOWN_EXISTING_TYPE = "unknown-existing-type"
    UPLOAD_FAILED = "upload-failed"
    CREATE_FAILED = "create-failed"
    UPDATE_FAILED = "update-failed"


@dataclass(slots=True)
class SyncOutcome:
    status: OutcomeStatus
    reason: SkipReason | None = None
    widget_id: str | None = None

    @classmethod
    def skipped(cls, reason: SkipReason) -> "SyncOutcome":
        return cls(status=OutcomeStatus.SKIPPED, reason=reason)

    @property
    def committed(self) -> bool:
        return self.status in (OutcomeStatus.UPDATED, OutcomeStatus.CREATED)
