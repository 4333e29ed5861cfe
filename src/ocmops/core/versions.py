"""Enabled cluster version lookup.

Versions are stored by the control plane with an ``openshift-v`` prefix
(e.g. ``openshift-v4.6.0-rc.4-candidate``). This module builds the search
filter, collects the enabled versions and the default one, and sorts them in
version order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from packaging.version import InvalidVersion, Version

PREFIX = "openshift-v"


@dataclass(frozen=True)
class ClusterVersion:
    """A cluster version as listed by the control plane."""

    id: str
    enabled: bool = True
    default: bool = False


class VersionsAdapter(Protocol):
    """Interface for listing cluster versions."""

    def list_versions(self, search: str) -> list[ClusterVersion]:
        """Return every version matching the search expression."""
        ...


def drop_openshift_prefix(value: str) -> str:
    """Return the version id without the ``openshift-v`` prefix."""
    return value[len(PREFIX) :] if value.startswith(PREFIX) else value


def ensure_openshift_prefix(value: str) -> str:
    """Return the version id with the ``openshift-v`` prefix."""
    return value if value.startswith(PREFIX) else PREFIX + value


def build_search(
    channel: str = "",
    channel_group: str = "",
    gcp_marketplace_enabled: str = "",
    additional_filters: str = "",
) -> str:
    """
    Build the search expression for enabled versions.

    A channel such as ``stable-4.19`` takes precedence over `channel_group`;
    the versions API only filters on channel group, so the group is taken
    from the part of the channel before the first ``-``.
    """
    search = "enabled = 'true'"
    if gcp_marketplace_enabled:
        search = f"{search} AND gcp_marketplace_enabled = '{gcp_marketplace_enabled}'"

    group = channel.split("-", 1)[0] if channel else channel_group
    if group:
        search = f"{search} AND channel_group = '{group}'"

    if additional_filters:
        search = f"{search} {additional_filters}"
    return search


def _version_key(value: str) -> tuple[int, Version | None, str]:
    try:
        return 0, Version(value), value
    except InvalidVersion:
        # Unparsable ids sort after every parsable one, as plain strings.
        return 1, None, value


def sort_versions(versions: list[str]) -> list[str]:
    """Sort parsable ids in version order, then the rest lexicographically."""
    return sorted(versions, key=_version_key)


def get_enabled_versions(
    adapter: VersionsAdapter,
    channel: str = "",
    channel_group: str = "",
    gcp_marketplace_enabled: str = "",
    additional_filters: str = "",
) -> tuple[list[str], str]:
    """
    Return the enabled versions and the default version.

    Returned ids have the ``openshift-v`` prefix removed and are sorted in
    version order. The default version is an empty string if none is marked.
    """
    search = build_search(
        channel, channel_group, gcp_marketplace_enabled, additional_filters
    )
    versions: list[str] = []
    default = ""
    for version in adapter.list_versions(search):
        short = drop_openshift_prefix(version.id)
        if version.enabled:
            versions.append(short)
        if version.default:
            default = short
    return sort_versions(versions), default
