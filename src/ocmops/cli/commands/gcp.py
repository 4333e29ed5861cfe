"""Commands for managing GCP DNS zones owned by the control plane."""

from __future__ import annotations

from urllib.parse import quote

import typer

from ocmops.cli.common.context import GcpAppContext, build_gcp_context
from ocmops.cli.common.exits import die, exit_from_exc, ok_exit, warn_exit
from ocmops.cli.common.options import (
    ColumnsOpt,
    ConfirmOpt,
    DomainPrefixOpt,
    InteractiveOpt,
    NetworkIdOpt,
    NetworkProjectIdOpt,
    NoHeadersOpt,
    ParameterOpt,
    ProjectIdOpt,
    SingleOpt,
)
from ocmops.cli.common.output import out
from ocmops.cli.common.parameters import parse_parameters
from ocmops.cli.tui import require_value
from ocmops.core.adapters.clouddns import CloudDnsAdapter
from ocmops.core.adapters.ocm import DNS_DOMAINS_PATH
from ocmops.core.dns import (
    CreateOutcome,
    CreateState,
    DeleteOutcome,
    DeleteState,
    DnsDomain,
    DnsZoneRequest,
    create_dns_zone,
    delete_dns_zone,
    find_zone,
    normalize_lookup_key,
)
from ocmops.core.errors import (
    CloudProviderError,
    ControlPlaneError,
    OcmOpsError,
    ValidationError,
)

ZoneIdArg = typer.Argument(..., metavar="ID|BASE_DOMAIN", help="ID or base domain of the DNS zone")

gcp_app = typer.Typer(help="Manage GCP resources.", no_args_is_help=True)
create_app = typer.Typer(help="Create GCP resources.", no_args_is_help=True)
delete_app = typer.Typer(help="Delete GCP resources.", no_args_is_help=True)
describe_app = typer.Typer(help="Show details of GCP resources.", no_args_is_help=True)
get_app = typer.Typer(help="Retrieve raw GCP resource data.", no_args_is_help=True)
list_app = typer.Typer(help="List GCP resources.", no_args_is_help=True)

gcp_app.add_typer(create_app, name="create")
gcp_app.add_typer(delete_app, name="delete")
gcp_app.add_typer(describe_app, name="describe")
gcp_app.add_typer(get_app, name="get")
gcp_app.add_typer(list_app, name="list")


def _describe(record: DnsDomain) -> None:
    out.kv(
        {
            "ID|BASE DOMAIN": record.id,
            "Domain Prefix": record.domain_prefix,
            "Project": record.project_id,
            "Network": record.network_id,
            "Zone Name": record.zone_name,
            "DNS Name": record.dns_name,
        }
    )


def _require_cloud(appctx: GcpAppContext) -> CloudDnsAdapter:
    if appctx.cloud is None:
        die("Cloud DNS client is not configured")
    return appctx.cloud


def _stop_error(state: CreateState | DeleteState, err: Exception | None) -> Exception:
    return err or OcmOpsError(f"dns-zone workflow stopped in state {state.value}")


def _report_create_failure(outcome: CreateOutcome) -> None:
    err = _stop_error(outcome.state, outcome.error)
    if outcome.state == CreateState.FAILED:
        exit_from_exc(err, message=f"failed to create dns-domain: {err}")
    if outcome.state != CreateState.ORPHANED or outcome.record is None:
        exit_from_exc(err, message=f"failed to create dns-zone: {err}")

    record_id = outcome.record.id
    out.error(f"failed to create dns-zone: {err}")
    out.error(
        f"failed to rollback dns-domain '{record_id}': {outcome.compensation_error}"
    )
    out.warn(
        f"dns-domain '{record_id}' was left behind. Remove it with:\n"
        f"  $ ocmops gcp delete dns-zone {record_id}"
    )
    raise typer.Exit(1) from err


def _report_delete_failure(outcome: DeleteOutcome) -> None:
    err = _stop_error(outcome.state, outcome.error)
    if outcome.state == DeleteState.NOT_FOUND:
        exit_from_exc(err, message=f"dns-zone '{outcome.key}' not found")
    if outcome.state != DeleteState.PARTIAL or outcome.record is None:
        exit_from_exc(err, message=f"failed to delete dns-zone: {err}")

    out.success(f"gcp dns-zone '{outcome.record.zone_name}' deleted successfully.")
    out.error(f"failed to delete dns-domain: {err}")
    out.warn(
        "The command can be run again safely:\n"
        f"  $ ocmops gcp delete dns-zone {outcome.record.id}"
    )
    raise typer.Exit(1) from err


@create_app.callback()
def _create() -> None:
    """Create GCP resources."""


@create_app.command("dns-zone")
def create_dns_zone_cmd(
    ctx: typer.Context,
    interactive: bool = InteractiveOpt,
    domain_prefix: str | None = DomainPrefixOpt,
    project_id: str | None = ProjectIdOpt,
    network_id: str | None = NetworkIdOpt,
    network_project_id: str | None = NetworkProjectIdOpt,
):
    """
    Create a DNS zone.

    DNS zone objects represent a Cloud DNS zone in GCP. The control-plane
    record is created first; if the Cloud DNS zone cannot be created the
    record is removed again.
    """
    request = DnsZoneRequest(
        domain_prefix=require_value(
            domain_prefix,
            interactive=interactive,
            flag="domain-prefix",
            message="DNS zone prefix:",
            help_text="The prefix for the DNS zone.",
        ),
        project_id=require_value(
            project_id,
            interactive=interactive,
            flag="project-id",
            message="Gcp Project ID:",
            help_text="The GCP Project Id that will be used by the DNS zone.",
        ),
        network_id=require_value(
            network_id,
            interactive=interactive,
            flag="network-id",
            message="Google cloud network ID:",
            help_text="The ID of the Shared VPC network used by the DNS zone.",
        ),
        network_project_id=require_value(
            network_project_id,
            interactive=interactive,
            flag="network-project-id",
            message="Gcp Project ID that is used as network project to VPC Network:",
            help_text="The ID of the GCP project that owns the VPC network.",
        ),
    )
    try:
        request.validate()
    except ValidationError as exc:
        exit_from_exc(exc, message=str(exc))

    appctx: GcpAppContext = build_gcp_context(ctx)
    cloud = _require_cloud(appctx)

    with out.status("Creating dns-zone..."):
        outcome = create_dns_zone(
            appctx.control_plane,
            cloud,
            request,
            retry_timeout=appctx.settings.retry_timeout,
        )

    if not outcome.ok:
        _report_create_failure(outcome)

    record = outcome.raise_for_state()
    out.success(f"dns-zone '{record.zone_name}' created")
    _describe(record)


@delete_app.callback()
def _delete() -> None:
    """Delete GCP resources."""


@delete_app.command("dns-zone")
def delete_dns_zone_cmd(
    ctx: typer.Context,
    zone_id: str = ZoneIdArg,
    confirm: bool = ConfirmOpt,
):
    """
    Delete a DNS zone.

    Removes the Cloud DNS zone and then the control-plane record. A zone that
    is already gone is not an error, so the command can be repeated.
    """
    try:
        key = normalize_lookup_key(zone_id)
    except ValidationError as exc:
        exit_from_exc(exc, message=str(exc))

    if confirm and not out.confirm(f"Delete dns-zone '{key}'?"):
        ok_exit("Cancelled")

    appctx: GcpAppContext = build_gcp_context(ctx)
    cloud = _require_cloud(appctx)

    with out.status("Deleting dns-zone..."):
        outcome = delete_dns_zone(appctx.control_plane, cloud, key)

    if not outcome.ok:
        _report_delete_failure(outcome)

    record = outcome.raise_for_state()
    if outcome.zone_existed:
        out.success(f"gcp dns-zone '{record.zone_name}' deleted successfully.")
    else:
        out.warn(f"gcp dns-zone '{record.zone_name}' was already absent.")
    out.success(f"dns-domain '{record.id}' deleted successfully.")


@describe_app.callback()
def _describe_group() -> None:
    """Show details of GCP resources."""


@describe_app.command("dns-zone")
def describe_dns_zone_cmd(
    ctx: typer.Context,
    zone_id: str = ZoneIdArg,
    verify: bool = typer.Option(
        False, "--verify", help="Also check that the zone exists in Cloud DNS"
    ),
):
    """Show details of a dns-zone."""
    try:
        key = normalize_lookup_key(zone_id)
    except ValidationError as exc:
        exit_from_exc(exc, message=str(exc))

    appctx: GcpAppContext = build_gcp_context(ctx, with_cloud=verify)

    try:
        record = appctx.control_plane.get_dns_domain(key)
    except ControlPlaneError as exc:
        exit_from_exc(exc, message=f"failed to get dns-domain: {exc}")

    _describe(record)

    if verify:
        try:
            zone = find_zone(_require_cloud(appctx), record)
        except CloudProviderError as exc:
            exit_from_exc(exc, message=f"failed to look up dns-zone: {exc}")
        out.kv({"Zone Status": "present" if zone else "missing"})
        if zone is None:
            raise typer.Exit(1)


@get_app.callback()
def _get() -> None:
    """Retrieve raw GCP resource data."""


@get_app.command("dns-zones", hidden=True)
@get_app.command("dns-zone")
def get_dns_zone_cmd(
    ctx: typer.Context,
    zone_id: str | None = typer.Argument(
        None, metavar="[ID|BASE_DOMAIN]", help="ID or base domain of the DNS zone"
    ),
    parameter: list[str] = ParameterOpt,
    single: bool = SingleOpt,
):
    """
    Retrieve DNS zone resource data.

    Prints the JSON returned by the control plane. Without an ID all DNS
    zone objects of the organization are returned.
    """
    try:
        params = parse_parameters(parameter)
    except ValueError as exc:
        exit_from_exc(exc, message=str(exc), code=2)

    path = DNS_DOMAINS_PATH
    if zone_id is not None:
        path = f"{DNS_DOMAINS_PATH}/{quote(zone_id, safe='')}"

    appctx: GcpAppContext = build_gcp_context(ctx, with_cloud=False)
    try:
        status, body = appctx.control_plane.get_raw(path, params)
    except ControlPlaneError as exc:
        exit_from_exc(exc, message=str(exc))

    if status == 404:
        die(f"dns-zone '{zone_id}' not found" if zone_id else "dns-zone not found")

    if status < 400:
        out.dump_json(body, single=single)
        return

    out.dump_json(body, single=single, stderr=True)
    die(f"request failed with status {status}")


@list_app.callback()
def _list() -> None:
    """List GCP resources."""


@list_app.command("dns-zones", hidden=True)
@list_app.command("dns-zone")
def list_dns_zone_cmd(
    ctx: typer.Context,
    columns: str = ColumnsOpt,
    no_headers: bool = NoHeadersOpt,
):
    """
    List DNS zones.

    Only DNS zone objects that belong to the caller's organization are shown.
    """
    paths = [c.strip() for c in columns.split(",") if c.strip()]
    if not paths:
        die("At least one column is required (--columns)", code=2)

    appctx: GcpAppContext = build_gcp_context(ctx, with_cloud=False)

    try:
        with out.status("Loading dns-zones..."):
            domains = appctx.control_plane.list_dns_domains()
    except ControlPlaneError as exc:
        exit_from_exc(exc, message=f"can't retrieve dns zones: {exc}")

    if not domains:
        warn_exit("No dns-zones found", code=0)

    out.dns_zones_table(domains, paths, show_header=not no_headers)
