"""Structured Logging — JSON formatter extras and API log redaction."""

import json
import logging

from resilient_aws.config import Settings
from resilient_aws.infrastructure.observability import (
    REDACTED,
    JSONFormatter,
    make_api_log_message,
    redact,
    setup_logging_from_settings,
)


def _record(**extra):
    record = logging.LogRecord(
        "resilient_aws.test", logging.DEBUG, __file__, 1, "attempt failed", None, None,
    )
    for k, v in extra.items():
        setattr(record, k, v)
    return record


def test_json_formatter_includes_core_fields():
    out = json.loads(JSONFormatter().format(_record()))
    assert out["level"] == "DEBUG"
    assert out["logger"] == "resilient_aws.test"
    assert out["message"] == "attempt failed"
    assert "timestamp" in out


def test_json_formatter_surfaces_retry_extras():
    out = json.loads(JSONFormatter().format(
        _record(operation="RunTask", attempt=2, error_code="ThrottlingException"),
    ))
    assert out["operation"] == "RunTask"
    assert out["attempt"] == 2
    assert out["error_code"] == "ThrottlingException"
    assert "resource_id" not in out


def test_redact_replaces_secret_fields_recursively():
    params = {
        "Name": "db-password",
        "SecretString": "hunter2",
        "Nested": [{"SecretBinary": b"\x00"}],
    }
    assert redact(params) == {
        "Name": "db-password",
        "SecretString": REDACTED,
        "Nested": [{"SecretBinary": REDACTED}],
    }
    assert params["SecretString"] == "hunter2"


def test_api_log_message_shape():
    msg = make_api_log_message("CreateSecret", {"Name": "n", "SecretString": "v"})
    assert msg == {
        "operation": "CreateSecret",
        "api_input": {"Name": "n", "SecretString": REDACTED},
    }


def test_setup_logging_from_settings_applies_level_and_format(monkeypatch):
    monkeypatch.setattr(logging.root, "handlers", [])
    monkeypatch.setattr(logging.root, "level", logging.WARNING)

    setup_logging_from_settings(Settings(_env_file=None, log_level="DEBUG", log_format="text"))

    assert logging.root.level == logging.DEBUG
    assert len(logging.root.handlers) == 1
    assert not isinstance(logging.root.handlers[0].formatter, JSONFormatter)


def test_setup_logging_from_settings_defaults_to_json(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOG_FORMAT", raising=False)
    monkeypatch.setattr(logging.root, "handlers", [])
    monkeypatch.setattr(logging.root, "level", logging.WARNING)

    setup_logging_from_settings(Settings(_env_file=None))

    assert logging.root.level == logging.INFO
    assert isinstance(logging.root.handlers[0].formatter, JSONFormatter)
