"""CLI application for cluster-manager GCP resource tooling."""

import typer

from ocmops.cli.commands.gcp import gcp_app
from ocmops.cli.commands.idp import create_app
from ocmops.cli.commands.versions import list_app
from ocmops.cli.common.exits import die
from ocmops.cli.common.logs import configure_logging
from ocmops.cli.common.options import VerboseOpt
from ocmops.core.config import ConfigError, load_settings

app = typer.Typer(
    help="ocmops - cluster-manager GCP resource tooling",
    no_args_is_help=True,
)


@app.callback()
def _init(ctx: typer.Context, verbose: bool = VerboseOpt):
    """Load settings and set up logging once per invocation."""
    try:
        settings = load_settings()
    except ConfigError as exc:
        die(str(exc), code=2)
    configure_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = settings


app.add_typer(gcp_app, name="gcp", help="Create, inspect and delete GCP DNS zones.")
app.add_typer(create_app, name="create", help="Create cluster resources.")
app.add_typer(list_app, name="list", help="List cluster resources.")


if __name__ == "__main__":
    app()
