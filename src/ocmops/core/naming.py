"""Deterministic names for cloud resources backing control-plane records.

Every physical name is recomputed from the owning record (domain prefix and
the id the control plane assigned), never stored. A later process that only
holds the record id can therefore always locate what an earlier create made,
so these functions must keep producing identical output for identical input.
"""

from __future__ import annotations

_COMPUTE_API = "https://compute.googleapis.com/compute/v1"


def zone_name(domain_prefix: str, record_id: str) -> str:
    """Return the Cloud DNS managed-zone name (dots are not allowed there)."""
    return f"{domain_prefix}.{record_id}".replace(".", "-")


def dns_name(domain_prefix: str, record_id: str) -> str:
    """Return the fully-qualified DNS name served by the zone."""
    return f"{domain_prefix}.{record_id}."


def network_resource_id(project_id: str, network_id: str) -> str:
    """Return the network URL expected by the zone's visibility config."""
    return f"{_COMPUTE_API}/projects/{project_id}/global/networks/{network_id}"


def service_account_resource_id(account_id: str, project_id: str) -> str:
    """Return the fully-qualified IAM service account resource name."""
    return (
        f"projects/{project_id}/serviceAccounts/"
        f"{account_id}@{project_id}.iam.gserviceaccount.com"
    )
