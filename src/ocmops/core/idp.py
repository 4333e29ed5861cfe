"""Google identity provider configuration for clusters."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

from ocmops.core.errors import ValidationError

GOOGLE_REGISTRATION_URL = "https://console.developers.google.com/projectcreate"
MAPPING_METHODS = ("add", "claim", "generate", "lookup")

_HOSTNAME_RE = re.compile(
    r"^(?=.{1,253}$)[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)*$"
)


@dataclass(frozen=True)
class GoogleIdp:
    """Settings for a Google identity provider."""

    name: str
    client_id: str
    client_secret: str
    hosted_domain: str = ""
    mapping_method: str = "claim"

    @property
    def needs_hosted_domain(self) -> bool:
        """Every mapping method except `lookup` restricts users by domain."""
        return self.mapping_method != "lookup"

    def missing_fields(self) -> list[str]:
        """Return the names of the values the user still has to supply."""
        missing = [
            label
            for label, value in (
                ("client_id", self.client_id),
                ("client_secret", self.client_secret),
            )
            if not value
        ]
        if self.needs_hosted_domain and not self.hosted_domain:
            missing.append("hosted_domain")
        return missing


def cluster_oauth_url(cluster: Mapping[str, Any]) -> str:
    """
    Return the OAuth server URL of a cluster.

    Hosted control planes serve OAuth next to the API server; classic
    clusters serve it next to the console.
    """
    if (cluster.get("hypershift") or {}).get("enabled"):
        api_url = (cluster.get("api") or {}).get("url") or ""
        return api_url.replace("api.", "oauth.", 1).replace(":6443", ":443", 1)
    console_url = (cluster.get("console") or {}).get("url") or ""
    return console_url.replace("console-openshift-console", "oauth-openshift", 1)


def redirect_uri(cluster: Mapping[str, Any], idp_name: str) -> str:
    """Return the authorized redirect URI to register with Google."""
    return f"{cluster_oauth_url(cluster)}/oauth2callback/{idp_name}"


def parse_hosted_domain(value: str) -> str:
    """Return the hostname of a hosted domain given as a URL or a bare host."""
    raw = value.strip()
    host = urlsplit(raw).hostname if "://" in raw else raw
    if not host or not _HOSTNAME_RE.match(host):
        raise ValidationError(f"Expected a valid Hosted Domain: '{value}'")
    return host


def build_google_idp(idp: GoogleIdp) -> dict[str, Any]:
    """Build the identity provider payload for the control plane."""
    if not idp.name:
        raise ValidationError("Expected an identity provider name")
    if idp.mapping_method not in MAPPING_METHODS:
        raise ValidationError(
            f"Invalid mapping method '{idp.mapping_method}'. "
            f"Expected one of: {', '.join(MAPPING_METHODS)}"
        )
    if not idp.client_id:
        raise ValidationError("Expected a Google application Client ID")
    if not idp.client_secret:
        raise ValidationError("Expected a Google application Client Secret")

    google: dict[str, Any] = {
        "client_id": idp.client_id,
        "client_secret": idp.client_secret,
    }
    if idp.hosted_domain:
        google["hosted_domain"] = parse_hosted_domain(idp.hosted_domain)

    return {
        "kind": "IdentityProvider",
        "type": "GoogleIdentityProvider",
        "name": idp.name,
        "mapping_method": idp.mapping_method,
        "google": google,
    }
