"""Decides which platform change events need a purge."""
from __future__ import annotations

import logging
from typing import Any, TypeVar

from cf_pdf_purge.cms import MediaLibrary
from cf_pdf_purge.models.purge import ChangeEvent, PurgeOutcome
from cf_pdf_purge.utils.cf_cache import PurgeInvoker

logger = logging.getLogger(__name__)

T = TypeVar("T")

ATTACHED_FILE_META_KEY = "_wp_attached_file"
ATTACHMENT_POST_TYPE = "attachment"

TRIGGER_ATTACHED_FILE = f"updated_post_meta:{ATTACHED_FILE_META_KEY}"
TRIGGER_METADATA = "wp_update_attachment_metadata"


class EventFilter:
    def __init__(self, media: MediaLibrary, invoker: PurgeInvoker):
        self.media = media
        self.invoker = invoker

    def should_purge(self, event: ChangeEvent) -> str | None:
        """The url to purge for this event, or None when it isn't a resolvable PDF."""
        if not event.is_pdf:
            return None
        return event.resource_url or self.media.get_attachment_url(event.resource_id) or None

    def build_event(self, post_id: int, trigger: str) -> ChangeEvent:
        return ChangeEvent(
            resource_id=post_id,
            mime_type=self.media.get_mime_type(post_id) or "",
            resource_url=self.media.get_attachment_url(post_id),
            trigger_name=trigger,
        )

    def handle(self, event: ChangeEvent) -> PurgeOutcome:
        url = self.should_purge(event)
        if url is None:
            logger.debug("Ignoring %s for post %d (%s)",
                         event.trigger_name, event.resource_id, event.mime_type or "no mime")
            return PurgeOutcome.skipped("not a pdf with a url")
        return self.invoker.purge([url], event.resource_id, event.trigger_name)

    def on_updated_post_meta(
        self, meta_id: int, post_id: int, meta_key: str, meta_value: Any = None
    ) -> None:
        """Action for `updated_post_meta`, fires when an attachment's file is replaced."""
        if meta_key != ATTACHED_FILE_META_KEY:
            return
        try:
            if self.media.get_post_type(post_id) != ATTACHMENT_POST_TYPE:
                return
            self.handle(self.build_event(post_id, TRIGGER_ATTACHED_FILE))
        except Exception:
            logger.exception("Error handling %s for post %d", TRIGGER_ATTACHED_FILE, post_id)

    def on_attachment_metadata_updated(self, data: T, post_id: int) -> T:
        """Filter for `wp_update_attachment_metadata`, always returns `data` unchanged."""
        try:
            self.handle(self.build_event(post_id, TRIGGER_METADATA))
        except Exception:
            logger.exception("Error handling %s for post %d", TRIGGER_METADATA, post_id)
        return data
