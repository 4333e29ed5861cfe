"""DNS zone provisioning across the control plane and Cloud DNS.

A DNS zone is owned by two systems: the control plane keeps a dns-domain
record (the source of truth, whose id it assigns), and Cloud DNS hosts the
managed zone derived from it. This module creates and destroys the pair as a
single logical unit:

- create: record first, then zone; if the zone fails the record is rolled
  back, and a failed rollback is reported together with the original error.
- delete: zone first (a missing zone counts as deleted), then record, so the
  zone is never left without the record needed to address it.

Each workflow is an explicit state machine whose terminal state is returned
as an outcome value. The module is free of SDK and CLI concerns; both
collaborators are injected.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Protocol

from ocmops.core import naming
from ocmops.core.errors import (
    CloudNotFoundError,
    CloudProviderError,
    CompensationFailure,
    ControlPlaneError,
    OcmOpsError,
    RecordNotFoundError,
    ValidationError,
)
from ocmops.core.retry import retry_with_backoff_and_timeout

logger = logging.getLogger(__name__)

PROVIDER_GCP = "gcp"
CLUSTER_ARCH_CLASSIC = "classic"
ZONE_DESCRIPTION = "Cloud DNS Zone created by OCM"

_DOMAIN_PREFIX_RE = re.compile(r"^[a-z](?:[a-z0-9-]{0,13}[a-z0-9])?$")
_RESOURCE_ID_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._:-]*$")
_ALREADY_EXISTS = 409


@dataclass(frozen=True)
class DnsZoneRequest:
    """
    Caller input for creating a DNS zone.

    Attributes:
        domain_prefix: User-chosen prefix, unique per organization.
        project_id: GCP project that hosts the managed zone.
        network_id: Shared VPC network the private zone is visible to.
        network_project_id: GCP project that owns the network.
    """

    domain_prefix: str
    project_id: str
    network_id: str
    network_project_id: str

    def validate(self) -> None:
        """Reject malformed input before anything is sent upstream."""
        if not _DOMAIN_PREFIX_RE.match(self.domain_prefix):
            raise ValidationError(
                f"Invalid domain prefix '{self.domain_prefix}': it must consist of "
                "lowercase alphanumeric characters or '-', start with a letter, "
                "end with an alphanumeric character and be at most 15 characters."
            )
        for label, value in (
            ("project id", self.project_id),
            ("network id", self.network_id),
            ("network project id", self.network_project_id),
        ):
            if not _RESOURCE_ID_RE.match(value):
                raise ValidationError(f"Invalid {label} '{value}'.")

    @property
    def network_url(self) -> str:
        """Network reference for the zone's private visibility config."""
        return naming.network_resource_id(self.network_project_id, self.network_id)


@dataclass(frozen=True)
class DnsDomain:
    """
    A dns-domain record held by the control plane.

    The id is always assigned by the control plane and is the only handle
    needed to find the record and, through it, the managed zone.
    """

    id: str
    domain_prefix: str
    project_id: str
    network_id: str
    cloud_provider: str = PROVIDER_GCP
    cluster_arch: str = CLUSTER_ARCH_CLASSIC
    href: str | None = None

    @property
    def zone_name(self) -> str:
        return naming.zone_name(self.domain_prefix, self.id)

    @property
    def dns_name(self) -> str:
        return naming.dns_name(self.domain_prefix, self.id)

    def to_dict(self) -> dict[str, object]:
        """Return the record in the control plane's JSON shape."""
        return {
            "kind": "DNSDomain",
            "id": self.id,
            "href": self.href,
            "cloud_provider": {"kind": "CloudProviderLink", "id": self.cloud_provider},
            "cluster_arch": self.cluster_arch,
            "gcp": {
                "domain_prefix": self.domain_prefix,
                "project_id": self.project_id,
                "network_id": self.network_id,
            },
        }


@dataclass(frozen=True)
class ManagedZone:
    """A Cloud DNS managed zone."""

    name: str
    dns_name: str
    visibility: str = "private"
    network_urls: tuple[str, ...] = ()
    description: str = ""


class ControlPlane(Protocol):
    """Operations on dns-domain records in the control plane."""

    def create_dns_domain(self, request: DnsZoneRequest) -> DnsDomain:
        """Create a record and return it with its assigned id."""
        ...

    def get_dns_domain(self, id_or_key: str) -> DnsDomain:
        """Return a record, raising RecordNotFoundError if it is absent."""
        ...

    def delete_dns_domain(self, domain_id: str) -> None:
        """Delete a record; deleting a missing record is an error."""
        ...


class CloudDns(Protocol):
    """Operations on managed zones in Cloud DNS."""

    def create_zone(
        self, project_id: str, zone_name: str, dns_name: str, network_url: str
    ) -> ManagedZone:
        """Create a private managed zone."""
        ...

    def delete_zone(self, project_id: str, zone_name: str) -> None:
        """Delete a zone, raising CloudNotFoundError if it is absent."""
        ...

    def list_zones(
        self, project_id: str, dns_name: str | None = None
    ) -> list[ManagedZone]:
        """List zones in a project, optionally filtered by DNS name."""
        ...


class CreateState(str, Enum):
    """
    States of the create workflow.

    Values:
        INIT: Nothing has been created yet.
        RECORD_CREATED: The control-plane record exists, the zone does not.
        ROLLING_BACK: The zone failed and the record is being removed.
        DONE: Record and zone both exist.
        CLEAN: The zone failed and the record was removed again.
        ORPHANED: The zone failed and removing the record failed too.
        FAILED: The record could not be created; nothing exists.
    """

    INIT = "INIT"
    RECORD_CREATED = "RECORD_CREATED"
    ROLLING_BACK = "ROLLING_BACK"
    DONE = "DONE"
    CLEAN = "CLEAN"
    ORPHANED = "ORPHANED"
    FAILED = "FAILED"


class DeleteState(str, Enum):
    """
    States of the delete workflow.

    Values:
        INIT: The record has not been looked up yet.
        RESOLVED: The record was found.
        ZONE_DELETED: The zone is gone (deleted now or already absent).
        DONE: Zone and record are both gone.
        NOT_FOUND: No record matches the given id or key.
        FAILED: Lookup or zone deletion failed; nothing was removed.
        PARTIAL: The zone is gone but the record could not be deleted.
    """

    INIT = "INIT"
    RESOLVED = "RESOLVED"
    ZONE_DELETED = "ZONE_DELETED"
    DONE = "DONE"
    NOT_FOUND = "NOT_FOUND"
    FAILED = "FAILED"
    PARTIAL = "PARTIAL"


_CREATE_TERMINAL = {
    CreateState.DONE,
    CreateState.CLEAN,
    CreateState.ORPHANED,
    CreateState.FAILED,
}
_DELETE_TERMINAL = {
    DeleteState.DONE,
    DeleteState.NOT_FOUND,
    DeleteState.FAILED,
    DeleteState.PARTIAL,
}


@dataclass(frozen=True)
class CreateOutcome:
    """Where a create workflow ended, with everything needed to report it."""

    state: CreateState
    record: DnsDomain | None = None
    zone: ManagedZone | None = None
    error: Exception | None = None
    compensation_error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.state == CreateState.DONE

    def raise_for_state(self) -> DnsDomain:
        """Return the created record, or raise the error(s) that stopped it."""
        if self.state == CreateState.DONE and self.record is not None:
            return self.record
        if (
            self.state == CreateState.ORPHANED
            and self.record is not None
            and self.error is not None
            and self.compensation_error is not None
        ):
            raise CompensationFailure(
                self.error, self.compensation_error, record_id=self.record.id
            ) from self.error
        if self.error is not None:
            raise self.error
        raise OcmOpsError(f"dns-zone creation stopped in state {self.state.value}")


@dataclass(frozen=True)
class DeleteOutcome:
    """Where a delete workflow ended."""

    state: DeleteState
    key: str
    record: DnsDomain | None = None
    zone_existed: bool | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.state == DeleteState.DONE

    def raise_for_state(self) -> DnsDomain:
        """Return the deleted record, or raise the error that stopped it."""
        if self.state == DeleteState.DONE and self.record is not None:
            return self.record
        if self.error is not None:
            raise self.error
        raise OcmOpsError(f"dns-zone deletion stopped in state {self.state.value}")


def _record_of(outcome: CreateOutcome | DeleteOutcome) -> DnsDomain:
    """Return the record a step works on; every step after the first has one."""
    if outcome.record is None:
        raise OcmOpsError(f"no dns-domain record in state {outcome.state.value}")
    return outcome.record


def normalize_lookup_key(id_or_key: str) -> str:
    """Accept a record id or base domain, with or without the trailing dot."""
    key = id_or_key.strip().rstrip(".")
    if not key:
        raise ValidationError("Expected the ID or base domain of the DNS zone.")
    return key


@dataclass
class DnsZoneSaga:
    """
    Runs create/delete workflows against the two injected collaborators.

    When `retry_timeout` is set, transient Cloud DNS failures during zone
    creation are retried with backoff for at most that many seconds before
    the workflow rolls back.
    """

    control_plane: ControlPlane
    cloud: CloudDns
    retry_timeout: float | None = None
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def create(self, request: DnsZoneRequest) -> CreateOutcome:
        """Create the record and the zone, rolling back the record on failure."""
        request.validate()
        steps = {
            CreateState.INIT: self._create_record,
            CreateState.RECORD_CREATED: self._create_zone,
            CreateState.ROLLING_BACK: self._roll_back,
        }
        outcome = CreateOutcome(CreateState.INIT)
        while outcome.state not in _CREATE_TERMINAL:
            outcome = steps[outcome.state](request, outcome)
            logger.debug("dns-zone create: %s", outcome.state.value)
        return outcome

    def delete(self, id_or_key: str) -> DeleteOutcome:
        """Delete the zone, then the record it was derived from."""
        steps = {
            DeleteState.INIT: self._resolve_record,
            DeleteState.RESOLVED: self._delete_zone,
            DeleteState.ZONE_DELETED: self._delete_record,
        }
        outcome = DeleteOutcome(DeleteState.INIT, key=normalize_lookup_key(id_or_key))
        while outcome.state not in _DELETE_TERMINAL:
            outcome = steps[outcome.state](outcome)
            logger.debug("dns-zone delete: %s", outcome.state.value)
        return outcome

    def _create_record(
        self, request: DnsZoneRequest, outcome: CreateOutcome
    ) -> CreateOutcome:
        try:
            record = self.control_plane.create_dns_domain(request)
        except ControlPlaneError as exc:
            return replace(outcome, state=CreateState.FAILED, error=exc)
        logger.info("dns-domain '%s' created", record.id)
        return replace(outcome, state=CreateState.RECORD_CREATED, record=record)

    def _create_zone(
        self, request: DnsZoneRequest, outcome: CreateOutcome
    ) -> CreateOutcome:
        record = _record_of(outcome)
        try:
            zone = self._submit_zone(
                project_id=record.project_id,
                zone_name=naming.zone_name(record.domain_prefix, record.id),
                dns_name=naming.dns_name(record.domain_prefix, record.id),
                network_url=request.network_url,
            )
        except Exception as exc:  # noqa: BLE001 - any failure must roll back
            logger.warning("dns-zone for '%s' failed, rolling back: %s", record.id, exc)
            return replace(outcome, state=CreateState.ROLLING_BACK, error=exc)
        logger.info("gcp dns-zone '%s' created", zone.name)
        return replace(outcome, state=CreateState.DONE, zone=zone)

    def _roll_back(
        self, request: DnsZoneRequest, outcome: CreateOutcome
    ) -> CreateOutcome:
        record = _record_of(outcome)
        try:
            self.control_plane.delete_dns_domain(record.id)
        except Exception as exc:  # noqa: BLE001 - reported alongside the original
            logger.error("rollback of dns-domain '%s' failed: %s", record.id, exc)
            return replace(
                outcome, state=CreateState.ORPHANED, compensation_error=exc
            )
        logger.info("dns-domain '%s' rolled back", record.id)
        return replace(outcome, state=CreateState.CLEAN)

    def _existing_zone(
        self, project_id: str, zone_name: str, dns_name: str
    ) -> ManagedZone | None:
        for zone in self.cloud.list_zones(project_id, dns_name=dns_name):
            if zone.name == zone_name:
                return zone
        return None

    def _submit_zone(
        self, *, project_id: str, zone_name: str, dns_name: str, network_url: str
    ) -> ManagedZone:
        if self.retry_timeout is None:
            return self.cloud.create_zone(project_id, zone_name, dns_name, network_url)

        created: list[ManagedZone] = []
        attempts = 0

        def attempt() -> tuple[bool, Exception | None]:
            nonlocal attempts
            attempts += 1
            try:
                created.append(
                    self.cloud.create_zone(project_id, zone_name, dns_name, network_url)
                )
            except CloudProviderError as exc:
                # A retried create may conflict with the zone an earlier
                # attempt created before its response was lost.
                if attempts > 1 and exc.status == _ALREADY_EXISTS:
                    zone = self._existing_zone(project_id, zone_name, dns_name)
                    if zone is not None:
                        logger.info("gcp dns-zone '%s' already created", zone_name)
                        created.append(zone)
                        return False, None
                return exc.transient, exc
            return False, None

        retry_with_backoff_and_timeout(
            attempt, self.retry_timeout, logger, sleep=self.sleep
        )
        return created[0]

    def _resolve_record(self, outcome: DeleteOutcome) -> DeleteOutcome:
        try:
            record = self.control_plane.get_dns_domain(outcome.key)
        except RecordNotFoundError as exc:
            return replace(outcome, state=DeleteState.NOT_FOUND, error=exc)
        except ControlPlaneError as exc:
            return replace(outcome, state=DeleteState.FAILED, error=exc)
        return replace(outcome, state=DeleteState.RESOLVED, record=record)

    def _delete_zone(self, outcome: DeleteOutcome) -> DeleteOutcome:
        record = _record_of(outcome)
        zone_name = naming.zone_name(record.domain_prefix, record.id)
        try:
            self.cloud.delete_zone(record.project_id, zone_name)
        except CloudNotFoundError:
            logger.info("gcp dns-zone '%s' already absent", zone_name)
            return replace(outcome, state=DeleteState.ZONE_DELETED, zone_existed=False)
        except Exception as exc:  # noqa: BLE001 - the record must stay
            logger.error("deleting gcp dns-zone '%s' failed: %s", zone_name, exc)
            return replace(outcome, state=DeleteState.FAILED, error=exc)
        logger.info("gcp dns-zone '%s' deleted successfully.", zone_name)
        return replace(outcome, state=DeleteState.ZONE_DELETED, zone_existed=True)

    def _delete_record(self, outcome: DeleteOutcome) -> DeleteOutcome:
        record = _record_of(outcome)
        try:
            self.control_plane.delete_dns_domain(record.id)
        except Exception as exc:  # noqa: BLE001 - zone is gone, report partial
            return replace(outcome, state=DeleteState.PARTIAL, error=exc)
        logger.info("dns-domain '%s' deleted successfully.", record.id)
        return replace(outcome, state=DeleteState.DONE)


def create_dns_zone(
    control_plane: ControlPlane,
    cloud: CloudDns,
    request: DnsZoneRequest,
    *,
    retry_timeout: float | None = None,
) -> CreateOutcome:
    """
    Create a dns-domain record and its managed zone as one unit.

    Args:
        control_plane: Adapter for dns-domain records.
        cloud: Adapter for Cloud DNS managed zones.
        request: Validated-on-entry creation input.
        retry_timeout: Optional budget in seconds for retrying transient
            Cloud DNS failures before rolling back.

    Returns:
        The terminal CreateOutcome (DONE, FAILED, CLEAN or ORPHANED).

    Raises:
        ValidationError: If the request is malformed; nothing is called.
    """
    saga = DnsZoneSaga(control_plane, cloud, retry_timeout=retry_timeout)
    return saga.create(request)


def delete_dns_zone(
    control_plane: ControlPlane, cloud: CloudDns, id_or_key: str
) -> DeleteOutcome:
    """
    Delete a managed zone and then its dns-domain record.

    Safe to repeat: a zone that is already gone counts as deleted, so a run
    that stopped in PARTIAL can simply be invoked again.
    """
    return DnsZoneSaga(control_plane, cloud).delete(id_or_key)


def find_zone(cloud: CloudDns, record: DnsDomain) -> ManagedZone | None:
    """Return the managed zone backing a record, or None if it is missing."""
    zones = cloud.list_zones(record.project_id, dns_name=record.dns_name)
    return zones[0] if zones else None
