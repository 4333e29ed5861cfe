"""Commands for adding identity providers to clusters."""

from __future__ import annotations

import typer

from ocmops.cli.common.context import OcmAppContext, build_ocm_context
from ocmops.cli.common.exits import die, exit_from_exc
from ocmops.cli.common.output import out
from ocmops.core.errors import ControlPlaneError, ValidationError
from ocmops.core.idp import (
    GOOGLE_REGISTRATION_URL,
    GoogleIdp,
    build_google_idp,
    redirect_uri,
)

create_app = typer.Typer(help="Create cluster resources.", no_args_is_help=True)
idp_app = typer.Typer(help="Add an identity provider to a cluster.", no_args_is_help=True)

create_app.add_typer(idp_app, name="idp")


@create_app.callback()
def _create() -> None:
    """Create cluster resources."""


@idp_app.callback()
def _idp() -> None:
    """Add an identity provider to a cluster."""


def _prompt_missing(idp: GoogleIdp, cluster: dict) -> GoogleIdp:
    """Walk the user through registering the application with Google."""
    out.info("To use Google as an identity provider, you must first register the application:")
    out.info(f"* Open the following URL: {GOOGLE_REGISTRATION_URL}")
    out.info("* Follow the instructions to register your application")
    out.info(
        "* When creating the OAuth client ID, use the following URL for the "
        f"Authorized redirect URI: {redirect_uri(cluster, idp.name)}"
    )

    client_id = idp.client_id or out.ask_text("Copy the Client ID provided by Google:")
    if not client_id:
        die("Expected a Google application Client ID", code=2)

    client_secret = idp.client_secret or out.ask_text(
        "Copy the Client Secret provided by Google:", secret=True
    )
    if not client_secret:
        die("Expected a Google application Client Secret", code=2)

    hosted_domain = idp.hosted_domain
    if idp.needs_hosted_domain and not hosted_domain:
        hosted_domain = out.ask_text("Hosted Domain to restrict users:")
        if not hosted_domain:
            die("Expected a valid Hosted Domain", code=2)

    return GoogleIdp(
        name=idp.name,
        client_id=client_id,
        client_secret=client_secret,
        hosted_domain=hosted_domain,
        mapping_method=idp.mapping_method,
    )


@idp_app.command("google")
def create_google_idp_cmd(
    ctx: typer.Context,
    cluster: str = typer.Option(..., "--cluster", "-c", help="ID of the cluster"),
    name: str = typer.Option("Google", "--name", help="Name of the identity provider"),
    client_id: str = typer.Option("", "--client-id", help="Client ID from the registered application"),
    client_secret: str = typer.Option(
        "", "--client-secret", help="Client Secret from the registered application"
    ),
    hosted_domain: str = typer.Option(
        "", "--hosted-domain", help="Restrict users to a Google Apps domain"
    ),
    mapping_method: str = typer.Option(
        "claim",
        "--mapping-method",
        help="How new identities are mapped to users (add, claim, generate, lookup)",
    ),
):
    """Add a Google identity provider to a cluster."""
    idp = GoogleIdp(
        name=name,
        client_id=client_id,
        client_secret=client_secret,
        hosted_domain=hosted_domain,
        mapping_method=mapping_method,
    )

    appctx: OcmAppContext = build_ocm_context(ctx)

    try:
        cluster_obj = appctx.control_plane.get_cluster(cluster)
    except ControlPlaneError as exc:
        exit_from_exc(exc, message=f"failed to get cluster '{cluster}': {exc}")

    if idp.missing_fields():
        idp = _prompt_missing(idp, cluster_obj)

    try:
        payload = build_google_idp(idp)
    except ValidationError as exc:
        exit_from_exc(exc, message=str(exc))

    cluster_id = str(cluster_obj.get("id") or cluster)
    try:
        with out.status("Adding identity provider..."):
            appctx.control_plane.add_identity_provider(cluster_id, payload)
    except ControlPlaneError as exc:
        exit_from_exc(exc, message=f"failed to add identity provider: {exc}")

    out.success(f"Identity Provider '{idp.name}' has been created on cluster '{cluster}'.")
