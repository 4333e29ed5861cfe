"""Commands for listing cluster versions."""

import typer

from ocmops.cli.common.context import OcmAppContext, build_ocm_context
from ocmops.cli.common.exits import exit_from_exc, warn_exit
from ocmops.cli.common.output import out
from ocmops.core.errors import ControlPlaneError
from ocmops.core.versions import get_enabled_versions

list_app = typer.Typer(help="List cluster resources.", no_args_is_help=True)


@list_app.callback()
def _list() -> None:
    """List cluster resources."""


@list_app.command("versions")
def list_versions_cmd(
    ctx: typer.Context,
    channel: str = typer.Option(
        "", "--channel", help="Y-stream update channel (e.g. stable-4.19)"
    ),
    channel_group: str = typer.Option(
        "", "--channel-group", help="Channel group (used when --channel is not set)"
    ),
    marketplace: str = typer.Option(
        "",
        "--gcp-marketplace",
        help="Only versions with GCP marketplace support ('true' or 'false')",
    ),
    search: str = typer.Option(
        "", "--search", help="Additional filter appended to the search expression"
    ),
    default_only: bool = typer.Option(
        False, "--default", help="Only print the default version"
    ),
):
    """List enabled cluster versions."""
    if marketplace not in ("", "true", "false"):
        out.error("--gcp-marketplace must be 'true' or 'false'")
        raise typer.Exit(2)

    appctx: OcmAppContext = build_ocm_context(ctx)

    try:
        with out.status("Loading versions..."):
            versions, default = get_enabled_versions(
                appctx.control_plane,
                channel=channel,
                channel_group=channel_group,
                gcp_marketplace_enabled=marketplace,
                additional_filters=search,
            )
    except ControlPlaneError as exc:
        exit_from_exc(exc, message=f"can't retrieve versions: {exc}")

    if default_only:
        if not default:
            warn_exit("No default version found", code=1)
        out.print(default)
        return

    if not versions:
        warn_exit("No versions found", code=0)

    out.versions_table(versions, default)
