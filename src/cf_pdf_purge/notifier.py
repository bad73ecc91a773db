"""Throttled admin notifications for purge failures."""
from __future__ import annotations

import logging
from collections.abc import Iterable

from cf_pdf_purge.cms import Clock, Site, SystemClock
from cf_pdf_purge.mailer import Mailer
from cf_pdf_purge.models.purge import ThrottleState
from cf_pdf_purge.models.purge_settings import sanitize_email
from cf_pdf_purge.stores import SettingsStore, ThrottleStore

logger = logging.getLogger(__name__)

UNKNOWN_URL = "(unknown)"


def format_message(
    site_name: str,
    resource_id: int,
    trigger: str,
    urls: Iterable[str],
    detail: str,
    edit_link: str,
    resource_url: str | None = None,
) -> str:
    """Human readable failure report."""
    bullets = "\n- ".join(urls)
    return (
        f"Site: {site_name}\n"
        f"Trigger: {trigger}\n"
        f"Attachment ID: {resource_id}\n"
        f"Attachment edit link: {edit_link}\n"
        f"Attachment URL: {resource_url or UNKNOWN_URL}\n"
        f"Purged URLs:\n- {bullets}\n\n"
        f"Error/Detail:\n{detail}\n"
    )


class Notifier:
    def __init__(
        self,
        settings: SettingsStore,
        throttle: ThrottleStore,
        mailer: Mailer,
        site: Site,
        clock: Clock | None = None,
    ):
        self.settings = settings
        self.throttle = throttle
        self.mailer = mailer
        self.site = site
        self.clock = clock or SystemClock()

    @property
    def subject(self) -> str:
        return f"[{self.site.name}] Cloudflare PDF purge failed"

    def is_throttled(self, now: float, window: int) -> bool:
        state = self.throttle.get()
        if state is None or state.is_expired(now):
            return False
        return state.last_notified_at > 0 and (now - state.last_notified_at) < window

    def notify(self, message: str) -> bool:
        """
        Email the admin, at most once per throttle window.
        Never raises; returns whether a message was handed to the mailer.
        """
        try:
            return self._notify(message)
        except Exception:
            logger.exception("Failed to send purge failure notification")
            return False

    def _notify(self, message: str) -> bool:
        settings = self.settings.load()
        if not settings.enable_email:
            logger.debug("Failure emails disabled, not notifying")
            return False

        window = settings.throttle_seconds
        now = self.clock.now()
        if self.is_throttled(now, window):
            logger.info("Notification suppressed, last one sent under %d minutes ago",
                        window // 60)
            return False

        # recorded before sending so a broken mail transport can't cause a storm
        self.throttle.set(ThrottleState(last_notified_at=now, expires_at=now + window))

        to = sanitize_email(settings.notify_email) or self.site.admin_email
        if not self.mailer.send(to, self.subject, message):
            logger.warning("Mail delivery to %s failed", to)
        return True
