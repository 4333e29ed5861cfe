"""Client construction for the control plane and Cloud DNS.

This module centralizes creation of the two upstream clients: an httpx client
bound to the control-plane API root with the bearer token, and a Cloud DNS
discovery resource using Application Default Credentials.
"""

from __future__ import annotations

import google.auth
import httpx
from google.auth.exceptions import DefaultCredentialsError
from googleapiclient.discovery import build

from ocmops.core.config import TOKEN_ENV, Settings


class AuthError(RuntimeError):
    """Raised when a client cannot be authenticated."""


def get_ocm_client(settings: Settings) -> httpx.Client:
    """
    Create an httpx client for the control-plane API.

    The token is taken from settings as-is; obtaining or refreshing it is
    left to the user's usual login tooling.
    """
    if not settings.token:
        raise AuthError(
            "Not logged in to the control plane.\n"
            f"Export an access token with:\n  $ export {TOKEN_ENV}=$(ocm token)"
        )
    return httpx.Client(
        base_url=settings.api_url,
        headers={
            "Authorization": f"Bearer {settings.token}",
            "Accept": "application/json",
        },
        timeout=settings.http_timeout,
    )


def get_dns_service():
    """Create a Cloud DNS v1 API resource using default credentials."""
    try:
        credentials, _ = google.auth.default(
            scopes=["https://www.googleapis.com/auth/cloud-platform"]
        )
    except DefaultCredentialsError as exc:
        raise AuthError(
            "Google Cloud authentication failed. Re-authenticate with:\n"
            "  $ gcloud auth application-default login"
        ) from exc
    return build("dns", "v1", credentials=credentials, cache_discovery=False)
