"""Cloudflare cache management."""
from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from urllib.parse import quote

import httpx

from cf_pdf_purge.cms import MediaLibrary, Site
from cf_pdf_purge.errors import CdnRejection, ConfigurationError, PurgeError, TransportError
from cf_pdf_purge.models.purge import PurgeOutcome, PurgeRequest
from cf_pdf_purge.models.purge_settings import PurgeSettings
from cf_pdf_purge.notifier import Notifier, format_message
from cf_pdf_purge.stores import SettingsStore

logger = logging.getLogger(__name__)

API_ROOT = "https://api.cloudflare.com/client/v4"
PURGE_TIMEOUT = 15.0


def purge_endpoint(zone_id: str) -> str:
    return f"{API_ROOT}/zones/{quote(zone_id, safe='')}/purge_cache"


def is_success(res: httpx.Response) -> bool:
    """2xx with a JSON object body whose `success` is truthy."""
    if not 200 <= res.status_code < 300:
        return False
    try:
        data = json.loads(res.text)
    except ValueError:
        return False
    if not isinstance(data, dict):
        return False
    success = data.get("success")
    # "0" counts as empty, as in PHP
    return bool(success) and success != "0"


def cache_purge(
    client: httpx.Client,
    settings: PurgeSettings,
    request: PurgeRequest,
    timeout: float = PURGE_TIMEOUT,
) -> httpx.Response:
    """
    Purge URLs from Cloudflare's cache.
    Raises a PurgeError subclass for anything other than a confirmed purge.
    """
    if not settings.has_credentials():
        raise ConfigurationError("Missing Cloudflare Zone ID or API Token in plugin settings.")

    headers = {
        "Authorization": f"Bearer {settings.api_token.strip()}",
    }
    try:
        res = client.post(
            purge_endpoint(settings.zone_id.strip()),
            headers=headers,
            json=request.payload(),
            timeout=timeout,
        )
    except httpx.TransportError as e:
        raise TransportError(str(e) or type(e).__name__) from e

    if not is_success(res):
        raise CdnRejection(res.status_code, res.text)
    return res


class PurgeInvoker:
    def __init__(
        self,
        settings: SettingsStore,
        notifier: Notifier,
        site: Site,
        media: MediaLibrary | None = None,
        client: httpx.Client | None = None,
        timeout: float = PURGE_TIMEOUT,
    ):
        self.settings = settings
        self.notifier = notifier
        self.site = site
        self.media = media
        self.client = client or httpx.Client()
        self.timeout = timeout

    def purge(self, urls: Iterable[str | None], resource_id: int, trigger: str) -> PurgeOutcome:
        request = PurgeRequest.from_urls(urls)
        if not request:
            logger.debug("Nothing to purge for attachment %d", resource_id)
            return PurgeOutcome.skipped("no urls")

        try:
            cache_purge(self.client, self.load_settings(), request, self.timeout)
        except PurgeError as e:
            logger.warning("Cloudflare purge failed for attachment %d (%s): %s",
                           resource_id, e.kind.value, e.detail)
            self.notifier.notify(self.format_failure(resource_id, trigger, request, e.detail))
            return PurgeOutcome.failed(e.kind, e.detail)

        logger.info("Purged %d url(s) for attachment %d", len(request.urls), resource_id)
        return PurgeOutcome.success()

    def load_settings(self) -> PurgeSettings:
        try:
            return self.settings.load()
        except Exception as e:
            logger.debug("Failed to load settings", exc_info=True)
            raise ConfigurationError(f"Couldn't load plugin settings: {e}") from e

    def close(self) -> None:
        self.client.close()

    def format_failure(
        self, resource_id: int, trigger: str, request: PurgeRequest, detail: str
    ) -> str:
        resource_url = None
        if self.media is not None:
            try:
                resource_url = self.media.get_attachment_url(resource_id)
            except Exception:
                logger.debug("Couldn't resolve url for attachment %d", resource_id,
                             exc_info=True)
        return format_message(
            site_name=self.site.name,
            resource_id=resource_id,
            trigger=trigger,
            urls=request.urls,
            detail=detail,
            edit_link=self.site.admin_url("post.php", post=resource_id, action="edit"),
            resource_url=resource_url,
        )
