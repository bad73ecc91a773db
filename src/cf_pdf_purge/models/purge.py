from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator

PDF_MIME_TYPE = "application/pdf"


class PurgeStatus(Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


class ErrorKind(Enum):
    CONFIGURATION = "configuration"
    TRANSPORT = "transport"
    REJECTION = "rejection"


class ChangeEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    resource_id: int
    mime_type: str
    resource_url: str | None = None
    trigger_name: str

    @property
    def is_pdf(self) -> bool:
        return self.mime_type == PDF_MIME_TYPE


class PurgeRequest(BaseModel):
    """Deduplicated, non-empty URLs for a single purge call."""

    model_config = ConfigDict(frozen=True)

    urls: tuple[str, ...]

    @field_validator("urls", mode="before")
    @classmethod
    def _dedupe(cls, value: Iterable[str | None]) -> tuple[str, ...]:
        # order preserving
        return tuple(dict.fromkeys(u for u in value if u))

    @classmethod
    def from_urls(cls, urls: Iterable[str | None]) -> PurgeRequest:
        return cls(urls=urls)

    def __bool__(self) -> bool:
        return bool(self.urls)

    def payload(self) -> dict[str, list[str]]:
        return {"files": list(self.urls)}


class PurgeOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: PurgeStatus
    detail: str = ""
    error: ErrorKind | None = None

    @classmethod
    def success(cls) -> PurgeOutcome:
        return cls(status=PurgeStatus.SUCCESS)

    @classmethod
    def skipped(cls, reason: str) -> PurgeOutcome:
        return cls(status=PurgeStatus.SKIPPED, detail=reason)

    @classmethod
    def failed(cls, error: ErrorKind, detail: str) -> PurgeOutcome:
        return cls(status=PurgeStatus.FAILED, error=error, detail=detail)

    @property
    def ok(self) -> bool:
        return self.status is PurgeStatus.SUCCESS

    def __str__(self) -> str:
        if self.status is PurgeStatus.SUCCESS:
            return "Success"
        if self.status is PurgeStatus.SKIPPED:
            return f"Skipped({self.detail})"
        return f"Failed({self.error.value}: {self.detail})"


class ThrottleState(BaseModel):
    """Last notification time and when that record stops counting, in epoch seconds."""

    last_notified_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at
