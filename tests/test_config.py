import pytest

from ocmops.core.config import ConfigError, Settings, load_settings


def test_defaults_when_environment_is_empty():
    assert load_settings({}) == Settings()


def test_reads_and_sanitizes_values():
    settings = load_settings(
        {
            "OCM_URL": "https://api.stage.example.com/?o=1",
            "OCM_TOKEN": "  tok  ",
            "OCMOPS_HTTP_TIMEOUT": "5",
            "OCMOPS_RETRY_TIMEOUT": "120.5",
            "OCMOPS_LOG_LEVEL": "debug",
        }
    )

    assert settings.api_url == "https://api.stage.example.com"
    assert settings.token == "tok"
    assert settings.http_timeout == 5.0
    assert settings.retry_timeout == 120.5
    assert settings.log_level == "DEBUG"


def test_blank_token_is_treated_as_missing():
    assert load_settings({"OCM_TOKEN": "   "}).token is None


@pytest.mark.parametrize(
    "env,match",
    [
        ({"OCMOPS_RETRY_TIMEOUT": "soon"}, "OCMOPS_RETRY_TIMEOUT"),
        ({"OCMOPS_HTTP_TIMEOUT": "-1"}, "must not be negative"),
        ({"OCMOPS_LOG_LEVEL": "chatty"}, "log level"),
    ],
)
def test_invalid_values_raise_config_error(env, match):
    with pytest.raises(ConfigError, match=match):
        load_settings(env)
