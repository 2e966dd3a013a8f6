import logging
import json
from services.common.core import logging_config, request_context


def _record(msg="Test message", **extra):
    record = logging.LogRecord(
        name="test_logger",
        level=logging.INFO,
        pathname="test_path.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_custom_json_formatter_includes_request_id():
    """Ensure the formatter includes the RequestID from context."""
    req_id_str = request_context.generate_request_id()

    # Act.
    formatter = logging_config.CustomJsonFormatter()
    log_json = json.loads(formatter.format(_record()))

    # Assert.
    assert log_json["message"] == "Test message"
    assert log_json["level"] == "INFO"
    assert log_json["logger"] == "test_logger"
    assert log_json.get("request_id") == req_id_str

    request_context.clear_request_id()


def test_custom_json_formatter_includes_extra_fields():
    """Ensure `extra=` fields are emitted and non-JSON values are stringified."""
    request_context.clear_request_id()

    formatter = logging_config.CustomJsonFormatter()
    log_json = json.loads(formatter.format(_record(code="BIND_MISSING_VALUE", target_type=int)))

    assert log_json["code"] == "BIND_MISSING_VALUE"
    assert log_json["target_type"] == str(int)
    assert "request_id" not in log_json
    assert "pathname" not in log_json


def test_setup_logging_applies_yaml_config(tmp_path, monkeypatch):
    """Ensure ${LOG_LEVEL} is substituted before dictConfig is applied."""
    config_file = tmp_path / "logging.yml"
    config_file.write_text(
        "version: 1\n"
        "disable_existing_loggers: false\n"
        "loggers:\n"
        "  logging_config_test:\n"
        "    level: ${LOG_LEVEL}\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("LOG_LEVEL", "WARNING")

    logging_config.setup_logging(str(config_file))

    assert logging.getLogger("logging_config_test").level == logging.WARNING


def test_setup_logging_falls_back_without_config_file(tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    logging_config.setup_logging(str(tmp_path / "missing.yml"))

    assert calls == [{"level": "DEBUG"}]
