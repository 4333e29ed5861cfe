"""Application context management for the CLI."""

from dataclasses import dataclass

import typer

from ocmops.cli.common.exits import die
from ocmops.core.adapters.clouddns import CloudDnsAdapter
from ocmops.core.adapters.ocm import OcmAdapter
from ocmops.core.auth import AuthError, get_dns_service, get_ocm_client
from ocmops.core.config import ConfigError, Settings, load_settings


@dataclass
class OcmAppContext:
    """Application context holding settings and the control-plane adapter."""

    settings: Settings
    control_plane: OcmAdapter


@dataclass
class GcpAppContext:
    """Application context holding the control-plane and Cloud DNS adapters."""

    settings: Settings
    control_plane: OcmAdapter
    cloud: CloudDnsAdapter | None


def settings_from(ctx: typer.Context) -> Settings:
    """Return the settings loaded by the root command, loading them if absent."""
    if isinstance(ctx.obj, Settings):
        return ctx.obj
    try:
        return load_settings()
    except ConfigError as exc:
        die(str(exc), code=2)


def build_ocm_context(ctx: typer.Context) -> OcmAppContext:
    """Build the context for commands that only talk to the control plane."""
    settings = settings_from(ctx)
    try:
        client = get_ocm_client(settings)
    except AuthError as exc:
        die(str(exc), code=1)
    ctx.call_on_close(client.close)
    return OcmAppContext(settings=settings, control_plane=OcmAdapter(client))


def build_gcp_context(ctx: typer.Context, *, with_cloud: bool = True) -> GcpAppContext:
    """
    Build the context for dns-zone commands.

    Args:
        ctx: Current Typer context (settings are read from `ctx.obj`).
        with_cloud: Also authenticate against Cloud DNS.

    Returns:
        GcpAppContext: Context with configured adapters.
    """
    ocm = build_ocm_context(ctx)
    cloud = None
    if with_cloud:
        try:
            cloud = CloudDnsAdapter(get_dns_service())
        except AuthError as exc:
            die(str(exc), code=1)
    return GcpAppContext(
        settings=ocm.settings, control_plane=ocm.control_plane, cloud=cloud
    )
