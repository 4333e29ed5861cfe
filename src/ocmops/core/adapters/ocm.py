from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any
from urllib.parse import quote

import httpx

from ocmops.core.dns import DnsDomain, DnsZoneRequest
from ocmops.core.errors import ControlPlaneError, RecordNotFoundError
from ocmops.core.versions import ClusterVersion

API_ROOT = "/api/clusters_mgmt/v1"
DNS_DOMAINS_PATH = f"{API_ROOT}/dns_domains"
PAGE_SIZE = 100


def _error_reason(response: httpx.Response) -> str:
    """Return the `reason` of an API error body, or the raw status line."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("reason"):
        return str(body["reason"])
    return f"status {response.status_code}"


def _json(response: httpx.Response, what: str) -> dict[str, Any]:
    """Decode a successful response body, which must be a JSON object."""
    try:
        body = response.json()
    except ValueError as exc:
        raise ControlPlaneError(
            f"failed to {what}: invalid response body", status=response.status_code
        ) from exc
    if not isinstance(body, dict):
        raise ControlPlaneError(
            f"failed to {what}: invalid response body", status=response.status_code
        )
    return body


def _to_dns_domain(data: dict[str, Any]) -> DnsDomain:
    if not data.get("id"):
        raise ControlPlaneError("dns-domain in response has no id")
    gcp = data.get("gcp") or {}
    return DnsDomain(
        id=str(data["id"]),
        domain_prefix=str(gcp.get("domain_prefix") or ""),
        project_id=str(gcp.get("project_id") or ""),
        network_id=str(gcp.get("network_id") or ""),
        cloud_provider=str((data.get("cloud_provider") or {}).get("id") or "gcp"),
        cluster_arch=str(data.get("cluster_arch") or "classic"),
        href=data.get("href"),
    )


class OcmAdapter:
    """Adapter around the clusters-management REST API (dns domains, clusters, versions)."""

    def __init__(self, client: httpx.Client) -> None:
        self.client = client

    def _send(self, method: str, path: str, what: str, **kwargs: Any) -> httpx.Response:
        """Send a request and translate failures into control-plane errors."""
        try:
            response = self.client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise ControlPlaneError(f"failed to {what}: {exc}") from exc
        if response.status_code == 404:
            raise RecordNotFoundError(
                f"failed to {what}: {_error_reason(response)}", status=404
            )
        if response.is_error:
            raise ControlPlaneError(
                f"failed to {what}: {_error_reason(response)}",
                status=response.status_code,
            )
        return response

    def _pages(
        self, path: str, what: str, params: dict[str, Any] | None = None
    ) -> Iterator[dict[str, Any]]:
        """Yield items from every page of a collection."""
        page = 1
        while True:
            query = dict(params or {}, page=page, size=PAGE_SIZE)
            body = _json(self._send("GET", path, what, params=query), what)
            items = body.get("items") or []
            yield from items
            # A short page is the last one.
            if len(items) < PAGE_SIZE:
                return
            page += 1

    def create_dns_domain(self, request: DnsZoneRequest) -> DnsDomain:
        """Create a dns-domain record; the control plane assigns its id."""
        body = {
            "cloud_provider": {"kind": "CloudProviderLink", "id": "gcp"},
            "cluster_arch": "classic",
            "gcp": {
                "domain_prefix": request.domain_prefix,
                "project_id": request.project_id,
                "network_id": request.network_id,
            },
        }
        what = "create dns-domain"
        response = self._send("POST", DNS_DOMAINS_PATH, what, json=body)
        return _to_dns_domain(_json(response, what))

    def get_dns_domain(self, id_or_key: str) -> DnsDomain:
        """Return a dns-domain by id (which is also its base domain)."""
        path = f"{DNS_DOMAINS_PATH}/{quote(id_or_key, safe='')}"
        what = f"get dns-domain '{id_or_key}'"
        return _to_dns_domain(_json(self._send("GET", path, what), what))

    def delete_dns_domain(self, domain_id: str) -> None:
        """Delete a dns-domain; a missing record raises RecordNotFoundError."""
        path = f"{DNS_DOMAINS_PATH}/{quote(domain_id, safe='')}"
        self._send("DELETE", path, f"delete dns-domain '{domain_id}'")

    def list_dns_domains(self) -> list[DnsDomain]:
        """List all dns-domains visible to the caller's organization."""
        return [
            _to_dns_domain(item)
            for item in self._pages(DNS_DOMAINS_PATH, "retrieve dns zones")
        ]

    def get_raw(
        self, path: str, params: Sequence[tuple[str, str]] = ()
    ) -> tuple[int, Any]:
        """
        GET a path and return `(status, body)` without interpreting errors.

        The body is decoded JSON when possible, otherwise text.
        """
        try:
            response = self.client.get(path, params=list(params))
        except httpx.HTTPError as exc:
            raise ControlPlaneError(f"can't send request: {exc}") from exc
        try:
            return response.status_code, response.json()
        except ValueError:
            return response.status_code, response.text

    def get_cluster(self, cluster_id: str) -> dict[str, Any]:
        """Return the raw cluster object."""
        path = f"{API_ROOT}/clusters/{quote(cluster_id, safe='')}"
        what = f"get cluster '{cluster_id}'"
        return _json(self._send("GET", path, what), what)

    def add_identity_provider(
        self, cluster_id: str, payload: dict[str, Any]
    ) -> dict[str, Any]:
        """Add an identity provider to a cluster and return the created object."""
        path = f"{API_ROOT}/clusters/{quote(cluster_id, safe='')}/identity_providers"
        what = f"add identity provider to cluster '{cluster_id}'"
        return _json(self._send("POST", path, what, json=payload), what)

    def list_versions(self, search: str) -> list[ClusterVersion]:
        """List cluster versions matching a search expression."""
        return [
            ClusterVersion(
                id=str(item.get("id") or ""),
                enabled=bool(item.get("enabled")),
                default=bool(item.get("default")),
            )
            for item in self._pages(
                f"{API_ROOT}/versions", "retrieve versions", {"search": search}
            )
        ]
