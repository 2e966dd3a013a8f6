"""
Where: services/binder/tests/test_logging_config.py
What: Unit tests for binder logging configuration.
Why: Validate LOG_CONFIG_PATH overrides for binder logs.
"""

from services.binder.core import logging_config


def test_setup_logging_uses_default_config_path(monkeypatch):
    captured = {}
    monkeypatch.delenv("LOG_CONFIG_PATH", raising=False)
    monkeypatch.setattr(
        logging_config, "common_setup_logging", lambda path: captured.setdefault("path", path)
    )

    logging_config.setup_logging()

    assert captured["path"] == "config/binder_log.yaml"


def test_setup_logging_prefers_log_config_path(monkeypatch):
    captured = {}
    monkeypatch.setenv("LOG_CONFIG_PATH", "/tmp/binder-logging.yml")
    monkeypatch.setattr(
        logging_config, "common_setup_logging", lambda path: captured.setdefault("path", path)
    )

    logging_config.setup_logging()

    assert captured["path"] == "/tmp/binder-logging.yml"
