"""Wires the purge core to a platform's hooks."""
from __future__ import annotations

from dataclasses import dataclass

import httpx

from cf_pdf_purge.cms import Clock, MediaLibrary, StaticSite
from cf_pdf_purge.dispatcher import HookDispatcher
from cf_pdf_purge.events import EventFilter
from cf_pdf_purge.mailer import Mailer, SmtpMailer
from cf_pdf_purge.models.settings import EnvSettings
from cf_pdf_purge.notifier import Notifier
from cf_pdf_purge.stores import (
    KeyringSettingsStore,
    KeyringThrottleStore,
    SettingsStore,
    ThrottleStore,
)
from cf_pdf_purge.utils.cf_cache import PurgeInvoker

HOOK_UPDATED_POST_META = "updated_post_meta"
HOOK_UPDATE_ATTACHMENT_METADATA = "wp_update_attachment_metadata"


@dataclass
class PurgeOnReplace:
    notifier: Notifier
    invoker: PurgeInvoker
    events: EventFilter

    @classmethod
    def create(
        cls,
        site: StaticSite,
        media: MediaLibrary,
        settings: SettingsStore,
        throttle: ThrottleStore,
        mailer: Mailer,
        client: httpx.Client | None = None,
        clock: Clock | None = None,
    ) -> PurgeOnReplace:
        notifier = Notifier(settings, throttle, mailer, site, clock=clock)
        invoker = PurgeInvoker(settings, notifier, site, media=media, client=client)
        return cls(notifier=notifier, invoker=invoker, events=EventFilter(media, invoker))

    @classmethod
    def from_env(cls, env: EnvSettings, media: MediaLibrary,
                 client: httpx.Client | None = None) -> PurgeOnReplace:
        return cls.create(
            site=site_from_env(env),
            media=media,
            settings=settings_store_from_env(env),
            throttle=KeyringThrottleStore(env.keyring_service, env.site_id),
            mailer=SmtpMailer.from_env(env),
            client=client,
        )

    def __enter__(self) -> PurgeOnReplace:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        self.invoker.close()

    def register(self, dispatcher: HookDispatcher) -> HookDispatcher:
        dispatcher.add_action(HOOK_UPDATED_POST_META, self.events.on_updated_post_meta)
        dispatcher.add_filter(
            HOOK_UPDATE_ATTACHMENT_METADATA, self.events.on_attachment_metadata_updated
        )
        return dispatcher


def site_from_env(env: EnvSettings) -> StaticSite:
    return StaticSite(name=env.site_name, url=env.site_url, admin_email=env.admin_email)


def settings_store_from_env(env: EnvSettings, site: str | None = None) -> KeyringSettingsStore:
    return KeyringSettingsStore(
        env.keyring_service, site or env.site_id, admin_email=env.admin_email
    )
