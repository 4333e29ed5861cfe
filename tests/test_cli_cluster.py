import pytest
from typer.testing import CliRunner

from ocmops.cli import cli as cli_module
from ocmops.cli.commands import idp as idp_module
from ocmops.cli.commands import versions as versions_module
from ocmops.cli.common.context import OcmAppContext
from ocmops.core.config import Settings
from ocmops.core.versions import ClusterVersion

runner = CliRunner()

CLUSTER = {
    "id": "c1",
    "console": {"url": "https://console-openshift-console.apps.c1.example.com"},
}


class _ClusterControlPlane:
    def __init__(self):
        self.idps: list[tuple[str, dict]] = []
        self.searches: list[str] = []
        self.versions = [
            ClusterVersion("openshift-v4.16.2", default=True),
            ClusterVersion("openshift-v4.15.10"),
        ]

    def get_cluster(self, cluster_id):
        return CLUSTER

    def add_identity_provider(self, cluster_id, payload):
        self.idps.append((cluster_id, payload))
        return payload

    def list_versions(self, search):
        self.searches.append(search)
        return self.versions


@pytest.fixture
def cp(monkeypatch):
    monkeypatch.delenv("OCMOPS_LOG_LEVEL", raising=False)
    control_plane = _ClusterControlPlane()

    def fake_context(ctx):
        return OcmAppContext(Settings(), control_plane)

    monkeypatch.setattr(idp_module, "build_ocm_context", fake_context)
    monkeypatch.setattr(versions_module, "build_ocm_context", fake_context)
    return control_plane


def test_create_google_idp_with_all_flags(cp):
    result = runner.invoke(
        cli_module.app,
        [
            "create", "idp", "google",
            "--cluster", "c1",
            "--client-id", "id",
            "--client-secret", "secret",
            "--hosted-domain", "https://example.com",
        ],
    )

    assert result.exit_code == 0, result.output
    cluster_id, payload = cp.idps[0]
    assert cluster_id == "c1"
    assert payload["type"] == "GoogleIdentityProvider"
    assert payload["google"]["hosted_domain"] == "example.com"


def test_create_google_idp_rejects_bad_hosted_domain(cp):
    result = runner.invoke(
        cli_module.app,
        [
            "create", "idp", "google",
            "-c", "c1",
            "--client-id", "id",
            "--client-secret", "secret",
            "--hosted-domain", "not a domain",
        ],
    )

    assert result.exit_code == 2
    assert cp.idps == []


def test_list_versions_marks_default(cp):
    result = runner.invoke(cli_module.app, ["list", "versions", "--channel", "stable-4.16"])

    assert result.exit_code == 0, result.output
    assert "4.15.10" in result.output
    assert "4.16.2" in result.output
    assert cp.searches == ["enabled = 'true' AND channel_group = 'stable'"]


def test_list_versions_default_only(cp):
    result = runner.invoke(cli_module.app, ["list", "versions", "--default"])

    assert result.exit_code == 0
    assert "4.16.2" in result.output
    assert "4.15.10" not in result.output


def test_list_versions_rejects_bad_marketplace_flag(cp):
    result = runner.invoke(cli_module.app, ["list", "versions", "--gcp-marketplace", "maybe"])

    assert result.exit_code == 2
    assert cp.searches == []
