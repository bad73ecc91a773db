"""Settings and throttle persistence."""
from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import keyring
from keyring.errors import PasswordDeleteError

from cf_pdf_purge.models.purge import ThrottleState
from cf_pdf_purge.models.purge_settings import PurgeSettings

logger = logging.getLogger(__name__)

SETTINGS_KEY = "cf_purge_pdf_settings"
THROTTLE_KEY = "cf_purge_pdf_last_email_ts"


class SettingsStore(Protocol):
    site: str

    def load(self) -> PurgeSettings:
        """Load settings, with defaults for anything missing or invalid."""

    def load_raw(self) -> Any:
        """The stored record as-is, or None."""

    def save(self, settings: PurgeSettings) -> None:
        ...

    def delete(self) -> None:
        ...


class ThrottleStore(Protocol):
    def get(self) -> ThrottleState | None:
        ...

    def set(self, state: ThrottleState) -> None:
        ...


class MemorySettingsStore:
    def __init__(
        self,
        saved: Any = None,
        admin_email: str = "",
        site: str = "default",
    ):
        self.saved = saved
        self.admin_email = admin_email
        self.site = site

    def load(self) -> PurgeSettings:
        return PurgeSettings.from_stored(self.saved, self.admin_email)

    def load_raw(self) -> Any:
        return self.saved

    def save(self, settings: PurgeSettings) -> None:
        self.saved = settings.model_dump()

    def delete(self) -> None:
        self.saved = None


class MemoryThrottleStore:
    def __init__(self, state: ThrottleState | None = None):
        self.state = state

    def get(self) -> ThrottleState | None:
        return self.state

    def set(self, state: ThrottleState) -> None:
        self.state = state


class KeyringSettingsStore:
    """Settings stored as a JSON blob in the system keyring, one entry per site."""

    def __init__(self, service: str, site: str = "default", admin_email: str = ""):
        self.service = service
        self.site = site
        self.admin_email = admin_email

    @property
    def username(self) -> str:
        return f"{self.site}:{SETTINGS_KEY}"

    def load_raw(self) -> Any:
        json_str = keyring.get_password(self.service, self.username)
        if json_str is None:
            return None
        try:
            return json.loads(json_str)
        except json.JSONDecodeError:
            logger.warning("Stored settings for site %r are not valid JSON", self.site)
            return None

    def load(self) -> PurgeSettings:
        return PurgeSettings.from_stored(self.load_raw(), self.admin_email)

    def save(self, settings: PurgeSettings) -> None:
        keyring.set_password(self.service, self.username, settings.model_dump_json())

    def delete(self) -> None:
        try:
            keyring.delete_password(self.service, self.username)
        except PasswordDeleteError:
            logger.debug("No stored settings for site %r", self.site)


class KeyringThrottleStore:
    def __init__(self, service: str, site: str = "default"):
        self.service = service
        self.site = site

    @property
    def username(self) -> str:
        return f"{self.site}:{THROTTLE_KEY}"

    def get(self) -> ThrottleState | None:
        json_str = keyring.get_password(self.service, self.username)
        if json_str is None:
            return None
        try:
            return ThrottleState.model_validate_json(json_str)
        except ValueError:
            return None

    def set(self, state: ThrottleState) -> None:
        keyring.set_password(self.service, self.username, state.model_dump_json())


__all__ = [
    "KeyringSettingsStore",
    "KeyringThrottleStore",
    "MemorySettingsStore",
    "MemoryThrottleStore",
    "SettingsStore",
    "ThrottleStore",
]
