import pytest
from typer.testing import CliRunner

from fakes import FakeCloud, FakeControlPlane
from ocmops.cli import cli as cli_module
from ocmops.cli.commands import gcp as gcp_module
from ocmops.cli.common.context import GcpAppContext
from ocmops.core.config import Settings
from ocmops.core.errors import CloudProviderError, ControlPlaneError

runner = CliRunner()


class _RawControlPlane(FakeControlPlane):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.raw_calls: list[tuple] = []
        self.raw_response: tuple[int, object] = (200, {"kind": "DNSDomainList", "items": []})

    def get_raw(self, path, params=()):
        self.raw_calls.append((path, list(params)))
        return self.raw_response


@pytest.fixture
def env(monkeypatch):
    for key in ("OCM_URL", "OCMOPS_LOG_LEVEL", "OCMOPS_HTTP_TIMEOUT", "OCMOPS_RETRY_TIMEOUT"):
        monkeypatch.delenv(key, raising=False)

    cp, cloud = _RawControlPlane(), FakeCloud()
    built: list[bool] = []

    def fake_context(ctx, *, with_cloud=True):
        built.append(with_cloud)
        return GcpAppContext(Settings(retry_timeout=0), cp, cloud if with_cloud else None)

    monkeypatch.setattr(gcp_module, "build_gcp_context", fake_context)
    return cp, cloud, built


CREATE_ARGS = [
    "gcp",
    "create",
    "dns-zone",
    "--domain-prefix",
    "my-domain",
    "--project-id",
    "my-project",
    "--network-id",
    "my-network",
    "--network-project-id",
    "net-project",
]


def test_create_dns_zone_prints_zone(env):
    cp, cloud, _ = env

    result = runner.invoke(cli_module.app, CREATE_ARGS)

    assert result.exit_code == 0, result.output
    assert "my-domain-abc123" in result.output
    assert "abc123" in cp.records
    assert ("my-project", "my-domain-abc123") in cloud.zones


def test_create_dns_zone_requires_flags_without_interactive(env):
    cp, _, built = env

    result = runner.invoke(cli_module.app, CREATE_ARGS[:5])

    assert result.exit_code == 2
    assert "project-id" in result.output
    assert built == []
    assert cp.calls == []


def test_create_dns_zone_rejects_invalid_prefix(env):
    _, _, built = env
    args = list(CREATE_ARGS)
    args[4] = "Bad_Prefix"

    result = runner.invoke(cli_module.app, args)

    assert result.exit_code == 2
    assert built == []


def test_create_dns_zone_reports_orphaned_record(env):
    cp, cloud, _ = env
    cloud.create_errors = [CloudProviderError("denied", status=403)]
    cp.delete_error = ControlPlaneError("api down", status=503)

    result = runner.invoke(cli_module.app, CREATE_ARGS)

    assert result.exit_code == 1
    assert "left behind" in result.output
    assert "abc123" in cp.records


def test_create_dns_zone_rolls_back_on_cloud_failure(env):
    cp, cloud, _ = env
    cloud.create_errors = [CloudProviderError("denied", status=403)]

    result = runner.invoke(cli_module.app, CREATE_ARGS)

    assert result.exit_code == 1
    assert "denied" in result.output
    assert cp.records == {}


def test_delete_dns_zone_can_be_repeated_until_not_found(env):
    cp, _, _ = env
    assert runner.invoke(cli_module.app, CREATE_ARGS).exit_code == 0

    first = runner.invoke(cli_module.app, ["gcp", "delete", "dns-zone", "abc123", "--no-confirm"])
    second = runner.invoke(cli_module.app, ["gcp", "delete", "dns-zone", "abc123", "--no-confirm"])

    assert first.exit_code == 0, first.output
    assert "deleted successfully" in first.output
    assert cp.records == {}
    assert second.exit_code == 1
    assert "not found" in second.output


def test_describe_dns_zone_with_verify(env):
    cp, cloud, built = env
    runner.invoke(cli_module.app, CREATE_ARGS)
    built.clear()

    present = runner.invoke(cli_module.app, ["gcp", "describe", "dns-zone", "abc123", "--verify"])
    cloud.zones.clear()
    missing = runner.invoke(cli_module.app, ["gcp", "describe", "dns-zone", "abc123", "--verify"])

    assert present.exit_code == 0, present.output
    assert "present" in present.output
    assert missing.exit_code == 1
    assert "missing" in missing.output
    assert built == [True, True]


def test_describe_unknown_dns_zone(env):
    result = runner.invoke(cli_module.app, ["gcp", "describe", "dns-zone", "nope"])

    assert result.exit_code == 1
    assert env[2] == [False]


def test_list_dns_zones_without_headers(env):
    runner.invoke(cli_module.app, CREATE_ARGS)

    result = runner.invoke(
        cli_module.app, ["gcp", "list", "dns-zones", "--no-headers", "--columns", "id,gcp.project_id"]
    )

    assert result.exit_code == 0, result.output
    assert "abc123" in result.output
    assert "my-project" in result.output
    assert "PROJECT" not in result.output


def test_list_dns_zones_when_empty(env):
    result = runner.invoke(cli_module.app, ["gcp", "list", "dns-zone"])

    assert result.exit_code == 0
    assert "No dns-zones found" in result.output


def test_get_dns_zone_passes_parameters(env):
    cp, _, _ = env

    result = runner.invoke(
        cli_module.app,
        ["gcp", "get", "dns-zone", "--parameter", "search=id = 'x'", "--single"],
    )

    assert result.exit_code == 0, result.output
    assert '"kind":"DNSDomainList"' in result.output
    assert cp.raw_calls == [
        ("/api/clusters_mgmt/v1/dns_domains", [("search", "id = 'x'")])
    ]


def test_get_dns_zone_rejects_malformed_parameter(env):
    result = runner.invoke(cli_module.app, ["gcp", "get", "dns-zone", "--parameter", "broken"])

    assert result.exit_code == 2
    assert env[2] == []


def test_get_dns_zone_not_found(env):
    cp, _, _ = env
    cp.raw_response = (404, {"reason": "missing"})

    result = runner.invoke(cli_module.app, ["gcp", "get", "dns-zone", "nope"])

    assert result.exit_code == 1
    assert "not found" in result.output


def test_delete_dns_zone_reports_cloud_failure_without_traceback(env):
    cp, cloud, _ = env
    runner.invoke(cli_module.app, CREATE_ARGS)
    cloud.delete_error = CloudProviderError("failed to delete dns-zone: timed out", status=None)

    result = runner.invoke(cli_module.app, ["gcp", "delete", "dns-zone", "abc123", "--no-confirm"])

    assert result.exit_code == 1
    assert "failed to delete dns-zone" in result.output
    assert not isinstance(result.exception, CloudProviderError)
    assert "abc123" in cp.records


def test_create_dns_zone_without_cloud_client(monkeypatch):
    monkeypatch.delenv("OCMOPS_LOG_LEVEL", raising=False)
    cp = _RawControlPlane()
    monkeypatch.setattr(
        gcp_module,
        "build_gcp_context",
        lambda ctx, *, with_cloud=True: GcpAppContext(Settings(), cp, None),
    )

    result = runner.invoke(cli_module.app, CREATE_ARGS)

    assert result.exit_code == 1
    assert "not configured" in result.output
    assert cp.calls == []
