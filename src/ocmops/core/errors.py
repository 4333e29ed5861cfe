"""Error kinds raised by the core provisioning logic.

Adapters translate upstream failures (HTTP errors from the control plane,
Google API errors from Cloud DNS) into these types so the saga and the CLI
never have to inspect SDK-specific exceptions.
"""

from __future__ import annotations


class OcmOpsError(RuntimeError):
    """Base class for all ocmops domain errors."""


class ValidationError(OcmOpsError):
    """Raised when caller input is malformed, before any external call."""


class ControlPlaneError(OcmOpsError):
    """Raised when a control-plane record operation fails."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class RecordNotFoundError(ControlPlaneError):
    """Raised when the requested control-plane record does not exist."""


class CloudProviderError(OcmOpsError):
    """Raised when a cloud-provider resource operation fails."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status

    @property
    def transient(self) -> bool:
        """True for throttling and server-side failures worth retrying."""
        return self.status == 429 or (self.status is not None and self.status >= 500)


class CloudNotFoundError(CloudProviderError):
    """Raised when the addressed cloud resource does not exist."""


class CompensationFailure(OcmOpsError):
    """
    Raised when rolling back a partially created resource also fails.

    Carries both the original failure and the rollback failure, plus the id
    of the control-plane record left behind, so it can be cleaned up by hand.
    """

    def __init__(
        self,
        primary: Exception,
        compensation: Exception,
        *,
        record_id: str,
    ) -> None:
        super().__init__(
            f"{primary}; rollback of dns-domain '{record_id}' also failed: "
            f"{compensation}"
        )
        self.primary = primary
        self.compensation = compensation
        self.record_id = record_id


class RetryTimeoutError(OcmOpsError):
    """Raised when the retrier gives up because its deadline elapsed."""

    def __init__(
        self, timeout_seconds: float, last_error: Exception | None = None
    ) -> None:
        super().__init__(f"Timeout occurred after {timeout_seconds:g} seconds")
        self.timeout_seconds = timeout_seconds
        self.last_error = last_error
