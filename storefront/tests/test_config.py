"""
Config defaults, environment overrides and validation.
"""
import pytest
from unittest.mock import patch

from storefront.config import Config, config
from storefront.errors import ConfigError


def test_config_is_instance():
    assert isinstance(config, Config)


def test_defaults():
    with patch.dict("os.environ", {}, clear=True):
        defaults = Config()

    assert defaults.API_ENDPOINT == "http://localhost:8082/api/v1"
    assert defaults.REQUEST_TIMEOUT == 30
    assert defaults.MAX_RETRIES == 2
    assert defaults.RETRY_BACKOFF == 1.5
    assert defaults.SEARCH_DEBOUNCE_MS == 300
    assert defaults.DEBUG is False
    assert defaults.LOG_LEVEL == "INFO"
    assert defaults.has_sentry is False
    defaults.validate()


def test_environment_overrides():
    env = {
        "API_ENDPOINT": "https://shop.example/api/v1/",
        "SEARCH_DEBOUNCE_MS": "150",
        "MAX_RETRIES": "0",
        "SENTRY_DSN": "https://key@sentry.example/1",
        "DEBUG": "True"
    }
    with patch.dict("os.environ", env, clear=True):
        custom = Config()

    assert custom.API_ENDPOINT == "https://shop.example/api/v1"
    assert custom.SEARCH_DEBOUNCE_MS == 150
    assert custom.MAX_RETRIES == 0
    assert custom.has_sentry is True
    assert custom.DEBUG is True


@pytest.mark.parametrize("env", [
    {"API_ENDPOINT": "ftp://shop.example"},
    {"SEARCH_DEBOUNCE_MS": "-1"},
    {"MAX_RETRIES": "-1"},
    {"REQUEST_TIMEOUT": "0"},
])
def test_validate_rejects(env):
    with patch.dict("os.environ", env, clear=True):
        bad = Config()

    with pytest.raises(ConfigError):
        bad.validate()


def test_validate_rejects_empty_endpoint():
    with patch.dict("os.environ", {"API_ENDPOINT": "/"}, clear=True):
        bad = Config()

    with pytest.raises(ConfigError):
        bad.validate()
