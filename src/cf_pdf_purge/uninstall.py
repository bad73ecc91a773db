"""Settings cleanup on uninstall."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from cf_pdf_purge.stores import SettingsStore

logger = logging.getLogger(__name__)


def should_delete(store: SettingsStore) -> bool:
    saved = store.load_raw()
    if not isinstance(saved, Mapping):
        return False
    return bool(saved.get("delete_settings_on_uninstall"))


def uninstall(stores: Iterable[SettingsStore]) -> list[str]:
    """Delete stored settings for every site that opted in. Returns the sites cleaned."""
    deleted = []
    for store in stores:
        if should_delete(store):
            store.delete()
            deleted.append(store.site)
            logger.info("Deleted settings for site %r", store.site)
        else:
            logger.debug("Keeping settings for site %r", store.site)
    return deleted
