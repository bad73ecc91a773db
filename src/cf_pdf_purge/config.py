"""Configuration"""
from __future__ import annotations

import enum
from typing import Optional

import pyperclip
import rich
import typer
from typing_extensions import Annotated

from cf_pdf_purge.adapter import settings_store_from_env
from cf_pdf_purge.models.purge_settings import PurgeSettings, sanitize_settings
from cf_pdf_purge.models.settings import env
from cf_pdf_purge.stores import SettingsStore
from cf_pdf_purge.uninstall import uninstall as uninstall_sites

app = typer.Typer(no_args_is_help=True)
cp = rich.print


class SettingKey(enum.StrEnum):
    ZONE_ID = "zone_id"
    API_TOKEN = "api_token"
    NOTIFY_EMAIL = "notify_email"
    ENABLE_EMAIL = "enable_email"
    EMAIL_THROTTLE_MINUTES = "email_throttle_minutes"
    DELETE_SETTINGS_ON_UNINSTALL = "delete_settings_on_uninstall"


def get_store(site: str | None = None) -> SettingsStore:
    return settings_store_from_env(env, site)


SiteOption = Annotated[Optional[str], typer.Option("--site", help="Site id")]


@app.command(name="set")
def set_setting(
    key: SettingKey,
    value: Annotated[Optional[str], typer.Argument()] = None,
    site: SiteOption = None,
):
    """Set a setting. Omit the value to reset it to its default."""
    store = get_store(site)
    current = store.load()

    data = current.model_dump()
    if value is None:
        data[key.value] = getattr(PurgeSettings.defaults(env.admin_email), key.value)
    else:
        data[key.value] = value

    store.save(sanitize_settings(data, current, admin_email=env.admin_email))
    cp(f"{'Reset' if value is None else 'Saved'} key {repr(key.value)}")


@app.command(name="set-cp")
def set_cp_setting(key: SettingKey, site: SiteOption = None):
    """Set a setting from clipboard."""
    value = pyperclip.paste()
    if not value:
        cp("❌  Clipboard is empty.")
        raise SystemExit(1)

    store = get_store(site)
    current = store.load()
    data = current.model_dump()
    data[key.value] = value

    store.save(sanitize_settings(data, current, admin_email=env.admin_email))
    cp(f"Saved key {repr(key.value)} from clipboard ({len(value)} chars)")


@app.command()
def clear(site: SiteOption = None):
    """Delete all stored settings."""
    get_store(site).delete()
    cp("Cleared settings")


@app.command()
def show(site: SiteOption = None):
    """Show the current settings."""
    settings = get_store(site).load()
    rich.print_json(data=settings.to_display_dict())


@app.command()
def uninstall(
    sites: Annotated[Optional[list[str]], typer.Option("--site", help="Site ids")] = None,
):
    """Delete settings for sites that opted in with delete_settings_on_uninstall."""
    stores = [get_store(site) for site in (sites or [env.site_id])]
    deleted = uninstall_sites(stores)
    if deleted:
        cp(f"✅  Deleted settings for: {', '.join(deleted)}")
    else:
        cp("No settings deleted")
