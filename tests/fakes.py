"""In-memory collaborators for the dns-zone workflows."""

from __future__ import annotations

from ocmops.core.dns import DnsDomain, DnsZoneRequest, ManagedZone
from ocmops.core.errors import CloudNotFoundError, CloudProviderError, RecordNotFoundError


class FakeControlPlane:
    def __init__(self, ids=("abc123",), create_error=None, delete_error=None):
        self.records: dict[str, DnsDomain] = {}
        self.calls: list[str] = []
        self._ids = iter(ids)
        self.create_error = create_error
        self.delete_error = delete_error

    def create_dns_domain(self, request: DnsZoneRequest) -> DnsDomain:
        self.calls.append("create_dns_domain")
        if self.create_error:
            raise self.create_error
        record = DnsDomain(
            id=next(self._ids),
            domain_prefix=request.domain_prefix,
            project_id=request.project_id,
            network_id=request.network_id,
        )
        self.records[record.id] = record
        return record

    def get_dns_domain(self, id_or_key: str) -> DnsDomain:
        self.calls.append(f"get_dns_domain:{id_or_key}")
        if id_or_key not in self.records:
            raise RecordNotFoundError(f"dns-domain '{id_or_key}' not found", status=404)
        return self.records[id_or_key]

    def delete_dns_domain(self, domain_id: str) -> None:
        self.calls.append(f"delete_dns_domain:{domain_id}")
        if self.delete_error:
            raise self.delete_error
        if domain_id not in self.records:
            raise RecordNotFoundError(f"dns-domain '{domain_id}' not found", status=404)
        del self.records[domain_id]

    def list_dns_domains(self) -> list[DnsDomain]:
        return list(self.records.values())


class FakeCloud:
    def __init__(self, create_errors=(), delete_error=None, lost_responses=()):
        self.zones: dict[tuple[str, str], ManagedZone] = {}
        self.calls: list[str] = []
        self.create_errors = list(create_errors)
        # Raised after the zone was stored, like a response lost in transit.
        self.lost_responses = list(lost_responses)
        self.delete_error = delete_error

    def create_zone(self, project_id, zone_name, dns_name, network_url) -> ManagedZone:
        self.calls.append(f"create_zone:{project_id}:{zone_name}")
        if self.create_errors:
            raise self.create_errors.pop(0)
        if (project_id, zone_name) in self.zones:
            raise CloudProviderError(f"zone '{zone_name}' already exists", status=409)
        zone = ManagedZone(name=zone_name, dns_name=dns_name, network_urls=(network_url,))
        self.zones[(project_id, zone_name)] = zone
        if self.lost_responses:
            raise self.lost_responses.pop(0)
        return zone

    def delete_zone(self, project_id, zone_name) -> None:
        self.calls.append(f"delete_zone:{project_id}:{zone_name}")
        if self.delete_error:
            raise self.delete_error
        if (project_id, zone_name) not in self.zones:
            raise CloudNotFoundError(f"zone '{zone_name}' not found", status=404)
        del self.zones[(project_id, zone_name)]

    def list_zones(self, project_id, dns_name=None) -> list[ManagedZone]:
        return [
            zone
            for (project, _), zone in self.zones.items()
            if project == project_id and (dns_name is None or zone.dns_name == dns_name)
        ]
