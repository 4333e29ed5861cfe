from __future__ import annotations

from typing import Any

import httplib2
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError

from ocmops.core.dns import ZONE_DESCRIPTION, ManagedZone
from ocmops.core.errors import CloudNotFoundError, CloudProviderError

# Failures below the HTTP layer: DNS, sockets, timeouts, token refresh.
_TRANSPORT_ERRORS = (httplib2.HttpLib2Error, OSError, GoogleAuthError)


def _cloud_error(exc: HttpError, what: str) -> CloudProviderError:
    """Translate a Google API error, keeping the HTTP status."""
    status = getattr(exc.resp, "status", None)
    reason = getattr(exc, "reason", None) or str(exc)
    cls = CloudNotFoundError if status == 404 else CloudProviderError
    return cls(f"failed to {what}: {reason}", status=status)


def _execute(request, what: str) -> Any:
    """Run a discovery request, raising CloudProviderError on any failure."""
    try:
        return request.execute()
    except HttpError as exc:
        raise _cloud_error(exc, what) from exc
    except _TRANSPORT_ERRORS as exc:
        raise CloudProviderError(f"failed to {what}: {exc}", status=None) from exc


def _to_zone(data: dict[str, Any]) -> ManagedZone:
    networks = (data.get("privateVisibilityConfig") or {}).get("networks") or []
    return ManagedZone(
        name=str(data.get("name") or ""),
        dns_name=str(data.get("dnsName") or ""),
        visibility=str(data.get("visibility") or "public"),
        network_urls=tuple(
            str(n["networkUrl"]) for n in networks if n.get("networkUrl")
        ),
        description=str(data.get("description") or ""),
    )


class CloudDnsAdapter:
    """Adapter around the Cloud DNS v1 managed zones API."""

    def __init__(self, service) -> None:
        self.service = service

    def create_zone(
        self, project_id: str, zone_name: str, dns_name: str, network_url: str
    ) -> ManagedZone:
        """Create a private managed zone visible to one network."""
        body = {
            "name": zone_name,
            "description": ZONE_DESCRIPTION,
            "dnsName": dns_name,
            "visibility": "private",
            "privateVisibilityConfig": {"networks": [{"networkUrl": network_url}]},
        }
        request = self.service.managedZones().create(project=project_id, body=body)
        return _to_zone(_execute(request, f"create dns-zone '{zone_name}'"))

    def delete_zone(self, project_id: str, zone_name: str) -> None:
        """Delete a managed zone; a missing zone raises CloudNotFoundError."""
        request = self.service.managedZones().delete(
            project=project_id, managedZone=zone_name
        )
        _execute(request, f"delete dns-zone '{zone_name}'")

    def list_zones(
        self, project_id: str, dns_name: str | None = None
    ) -> list[ManagedZone]:
        """List managed zones in a project, optionally filtered by DNS name."""
        zones_api = self.service.managedZones()
        kwargs: dict[str, Any] = {"project": project_id}
        if dns_name:
            kwargs["dnsName"] = dns_name

        zones: list[ManagedZone] = []
        request = zones_api.list(**kwargs)
        while request is not None:
            response = _execute(request, f"list dns-zones in '{project_id}'")
            zones.extend(_to_zone(z) for z in response.get("managedZones", []))
            request = zones_api.list_next(
                previous_request=request, previous_response=response
            )
        return zones
