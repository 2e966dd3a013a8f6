"""
Where: services/binder/tests/test_config_defaults.py
What: Validate default BinderConfig values and environment overrides.
Why: Keep config defaults stable as environment defaults evolve.
"""

import pytest
from pydantic import ValidationError

from services.binder.config import BinderConfig

SECRET = "test-session-secret-key-must-be-32-chars"


def _set_required_env(monkeypatch) -> None:
    monkeypatch.setenv("SESSION_SECRET_KEY", SECRET)


def test_defaults(monkeypatch):
    _set_required_env(monkeypatch)
    monkeypatch.delenv("DEFAULT_REQUEST_ATTRIBUTES", raising=False)
    monkeypatch.delenv("HEADER_KEY_HYPHENATE", raising=False)

    config = BinderConfig(_env_file=None)

    assert config.SESSION_COOKIE_NAME == "session"
    assert config.DEFAULT_REQUEST_ATTRIBUTES == {"customAttribute": "DefaultCustomAttribute"}
    assert config.HEADER_KEY_HYPHENATE is True


def test_default_request_attributes_from_json_env(monkeypatch):
    _set_required_env(monkeypatch)
    monkeypatch.setenv("DEFAULT_REQUEST_ATTRIBUTES", '{"tenant": "acme"}')

    config = BinderConfig(_env_file=None)

    assert config.DEFAULT_REQUEST_ATTRIBUTES == {"tenant": "acme"}


def test_session_secret_is_required(monkeypatch):
    monkeypatch.delenv("SESSION_SECRET_KEY", raising=False)

    with pytest.raises(ValidationError):
        BinderConfig(_env_file=None)


def test_short_session_secret_is_rejected(monkeypatch):
    monkeypatch.setenv("SESSION_SECRET_KEY", "too-short")

    with pytest.raises(ValidationError):
        BinderConfig(_env_file=None)


def test_logging_path_is_not_a_setting(monkeypatch):
    _set_required_env(monkeypatch)
    monkeypatch.setenv("LOG_CONFIG_PATH", "/tmp/binder-logging.yml")

    config = BinderConfig(_env_file=None)

    # Read by setup_logging from the environment only.
    assert "LOG_CONFIG_PATH" not in BinderConfig.model_fields
    assert not hasattr(config, "LOG_CONFIG_PATH")
