import logging

import typer
from rich.logging import RichHandler
from typing_extensions import Annotated

from cf_pdf_purge import cf, config
from cf_pdf_purge.models.settings import env

app = typer.Typer(no_args_is_help=True)
app.add_typer(cf.app, name="cf")
app.add_typer(config.app, name="settings")


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=verbose)],
        force=True,
    )
    # request lines from httpx are noise at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


@app.callback()
def main(verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False):
    """Purge replaced PDF attachments from Cloudflare."""
    setup_logging(verbose or env.verbose)
