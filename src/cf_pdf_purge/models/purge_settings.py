from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

DEFAULT_THROTTLE_MINUTES = 15

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")
_EMAIL_LOCAL_RE = re.compile(r"^[a-zA-Z0-9!#$%&'*+/=?^_`{|}~.-]+$")
_EMAIL_LABEL_RE = re.compile(r"^[a-zA-Z0-9-]+$")


class PurgeSettings(BaseModel):
    """Per-site settings for purging and failure notifications."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    zone_id: str = ""
    api_token: str = ""
    notify_email: str = ""
    enable_email: bool = True
    email_throttle_minutes: int = Field(default=DEFAULT_THROTTLE_MINUTES, ge=1)
    delete_settings_on_uninstall: bool = False

    @classmethod
    def defaults(cls, admin_email: str = "") -> PurgeSettings:
        return cls(notify_email=admin_email)

    @classmethod
    def from_stored(cls, saved: Any, admin_email: str = "") -> PurgeSettings:
        """
        Merge a stored record over the defaults.
        Anything that is not a mapping, or fails validation, yields the defaults.
        """
        defaults = cls.defaults(admin_email)
        if not isinstance(saved, Mapping):
            return defaults

        merged = defaults.model_dump()
        merged.update({k: v for k, v in saved.items() if k in cls.model_fields})
        merged["email_throttle_minutes"] = max(1, _to_int(merged["email_throttle_minutes"]))
        try:
            return cls.model_validate(merged)
        except ValidationError as e:
            # reset only the fields that failed
            for error in e.errors():
                if error["loc"]:
                    field = str(error["loc"][0])
                    merged[field] = getattr(defaults, field)
            return cls.model_validate(merged)

    @property
    def throttle_seconds(self) -> int:
        return max(1, self.email_throttle_minutes) * 60

    def has_credentials(self) -> bool:
        return bool(self.zone_id.strip() and self.api_token.strip())

    def to_display_dict(self) -> dict[str, Any]:
        """Settings with the API token masked."""
        result = self.model_dump()
        if self.api_token:
            result["api_token"] = "********"
        else:
            result["api_token"] = "(not set)"
        return result


def sanitize_text_field(value: Any) -> str:
    """Strip tags, collapse whitespace and trim."""
    if value is None:
        return ""
    text = _TAG_RE.sub("", str(value))
    return _WHITESPACE_RE.sub(" ", text).strip()


def sanitize_email(value: Any) -> str:
    """Returns the trimmed address, or an empty string if it doesn't look like one."""
    if value is None:
        return ""
    email = str(value).strip()

    if len(email) < 6 or email.count("@") != 1:
        return ""

    local, domain = email.split("@")
    if not local or not _EMAIL_LOCAL_RE.match(local):
        return ""

    labels = domain.strip(".").split(".")
    if len(labels) < 2:
        return ""
    for label in labels:
        if not label or not _EMAIL_LABEL_RE.match(label):
            return ""
        if label.startswith("-") or label.endswith("-"):
            return ""

    return f"{local}@{'.'.join(labels)}"


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        pass
    # leading digits, e.g. "30 minutes"
    match = re.match(r"^\s*([+-]?\d+)", str(value))
    return int(match.group(1)) if match else 0


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in ("", "0", "false", "off", "no")
    return bool(value)


def sanitize_settings(
    data: Any,
    current: PurgeSettings | None = None,
    admin_email: str = "",
) -> PurgeSettings:
    """
    Sanitize raw form/config input into a complete PurgeSettings.

    Missing keys fall back to defaults, a non-numeric throttle becomes 1,
    and anything that isn't a mapping returns the current settings unchanged.
    """
    out = current.model_copy() if current is not None else PurgeSettings.defaults(admin_email)

    if not isinstance(data, Mapping):
        return out

    return PurgeSettings(
        zone_id=sanitize_text_field(data.get("zone_id", "")),
        api_token=sanitize_text_field(data.get("api_token", "")),
        notify_email=sanitize_email(data.get("notify_email", admin_email)),
        enable_email=_to_bool(data.get("enable_email")),
        email_throttle_minutes=max(
            1, _to_int(data.get("email_throttle_minutes", DEFAULT_THROTTLE_MINUTES))
        ),
        delete_settings_on_uninstall=_to_bool(data.get("delete_settings_on_uninstall")),
    )
