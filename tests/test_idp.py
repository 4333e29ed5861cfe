import pytest

from ocmops.core.errors import ValidationError
from ocmops.core.idp import (
    GoogleIdp,
    build_google_idp,
    cluster_oauth_url,
    parse_hosted_domain,
    redirect_uri,
)

CLASSIC = {
    "id": "c1",
    "console": {"url": "https://console-openshift-console.apps.c1.example.com"},
    "api": {"url": "https://api.c1.example.com:6443"},
}
HOSTED = {
    "id": "c2",
    "hypershift": {"enabled": True},
    "api": {"url": "https://api.c2.example.com:6443"},
}


def test_oauth_url_for_classic_cluster():
    assert cluster_oauth_url(CLASSIC) == "https://oauth-openshift.apps.c1.example.com"


def test_oauth_url_for_hosted_control_plane():
    assert cluster_oauth_url(HOSTED) == "https://oauth.c2.example.com:443"


def test_redirect_uri_appends_callback_path():
    assert redirect_uri(CLASSIC, "Google") == (
        "https://oauth-openshift.apps.c1.example.com/oauth2callback/Google"
    )


@pytest.mark.parametrize(
    "value,expected",
    [
        ("https://example.com", "example.com"),
        ("https://corp.example.com/path", "corp.example.com"),
        ("example.com", "example.com"),
    ],
)
def test_parse_hosted_domain(value: str, expected: str):
    assert parse_hosted_domain(value) == expected


@pytest.mark.parametrize("value", ["", "https://", "not a domain", "-bad.com"])
def test_parse_hosted_domain_rejects_invalid_input(value: str):
    with pytest.raises(ValidationError, match="Hosted Domain"):
        parse_hosted_domain(value)


def test_missing_fields_depend_on_mapping_method():
    assert GoogleIdp("g", "", "", mapping_method="lookup").missing_fields() == [
        "client_id",
        "client_secret",
    ]
    assert GoogleIdp("g", "id", "secret").missing_fields() == ["hosted_domain"]
    assert GoogleIdp("g", "id", "secret", hosted_domain="example.com").missing_fields() == []


def test_build_google_idp_payload():
    payload = build_google_idp(
        GoogleIdp("Google", "id", "secret", hosted_domain="https://example.com")
    )

    assert payload == {
        "kind": "IdentityProvider",
        "type": "GoogleIdentityProvider",
        "name": "Google",
        "mapping_method": "claim",
        "google": {
            "client_id": "id",
            "client_secret": "secret",
            "hosted_domain": "example.com",
        },
    }


def test_build_google_idp_without_hosted_domain_for_lookup():
    payload = build_google_idp(GoogleIdp("Google", "id", "secret", mapping_method="lookup"))

    assert "hosted_domain" not in payload["google"]


def test_build_google_idp_rejects_unknown_mapping_method():
    with pytest.raises(ValidationError, match="mapping method"):
        build_google_idp(GoogleIdp("Google", "id", "secret", mapping_method="merge"))


def test_build_google_idp_requires_credentials():
    with pytest.raises(ValidationError, match="Client ID"):
        build_google_idp(GoogleIdp("Google", "", "secret"))
