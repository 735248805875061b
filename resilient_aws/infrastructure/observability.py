"""Structured Logging — JSON formatter, setup, and API call log payloads.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (operation, attempt, error_code, resource_id) surfaced when present
    - Secret values never appear in API log payloads
"""

import json
import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from resilient_aws.config import Settings, get_settings

REDACTED = "<redacted>"
_SENSITIVE_KEYS = frozenset({"SecretString", "SecretBinary"})

_EXTRA_KEYS = (
    "operation", "attempt", "error_code", "resource_id", "service", "api_input",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure root logging. Call once at process start."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))


def setup_logging_from_settings(settings: Settings | None = None):
    """Configure root logging from `log_level` and `log_format` in Settings."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)


def redact(params: Any) -> Any:
    """Copy of `params` with secret payload fields replaced."""
    if isinstance(params, Mapping):
        return {
            k: REDACTED if k in _SENSITIVE_KEYS else redact(v)
            for k, v in params.items()
        }
    if isinstance(params, (list, tuple)):
        return [redact(v) for v in params]
    return params


def make_api_log_message(operation: str, params: Mapping[str, Any]) -> dict:
    """Logging `extra` payload describing one AWS API call."""
    return {"operation": operation, "api_input": redact(dict(params))}
