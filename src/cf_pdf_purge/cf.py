"""Cloudflare purge commands."""
from typing import Annotated

import rich
import typer
from rich.markup import escape
from typer import Option

from cf_pdf_purge.adapter import (
    HOOK_UPDATE_ATTACHMENT_METADATA,
    HOOK_UPDATED_POST_META,
    PurgeOnReplace,
)
from cf_pdf_purge.cms import MediaLibrary, StaticMediaLibrary
from cf_pdf_purge.dispatcher import HookDispatcher
from cf_pdf_purge.events import ATTACHED_FILE_META_KEY
from cf_pdf_purge.models.purge import PDF_MIME_TYPE, PurgeStatus
from cf_pdf_purge.models.settings import env
from cf_pdf_purge.utils.spinners import spinner

app = typer.Typer(no_args_is_help=True)
cp = rich.print


def build_service(media: MediaLibrary) -> PurgeOnReplace:
    return PurgeOnReplace.from_env(env, media)


@app.command()
def purge(
    urls: list[str],
    resource_id: Annotated[int, Option("--id", help="Attachment id for reports")] = 0,
    trigger: Annotated[str, Option("--trigger")] = "manual",
):
    """Purge URLs from Cloudflare's cache."""
    with build_service(StaticMediaLibrary()) as service:
        with spinner(f"Purging {len(urls)} url(s) from Cloudflare's cache..."):
            outcome = service.invoker.purge(urls, resource_id, trigger)

    if outcome.status is PurgeStatus.FAILED:
        cp(f"❌  {escape(str(outcome))}")
        raise SystemExit(1)
    cp(f"✅  {escape(str(outcome))}")


@app.command()
def replace(
    post_id: int,
    url: Annotated[str, Option("--url", help="Attachment's public url")],
    mime: Annotated[str, Option("--mime")] = PDF_MIME_TYPE,
    metadata_hook: Annotated[
        bool, Option("--metadata", help=f"Dispatch {HOOK_UPDATE_ATTACHMENT_METADATA!r}")
    ] = False,
):
    """Simulate an attachment file replacement through the platform hooks."""
    media = StaticMediaLibrary()
    media.add(post_id, mime_type=mime, url=url)

    with build_service(media) as service:
        dispatcher = service.register(HookDispatcher())

        if metadata_hook:
            cp(f"Dispatching {HOOK_UPDATE_ATTACHMENT_METADATA!r} for post {post_id}")
            dispatcher.apply_filters(HOOK_UPDATE_ATTACHMENT_METADATA, {}, post_id)
        else:
            cp(f"Dispatching {HOOK_UPDATED_POST_META!r} for post {post_id}")
            dispatcher.do_action(HOOK_UPDATED_POST_META, 0, post_id, ATTACHED_FILE_META_KEY, url)
    cp("✅  Done")
