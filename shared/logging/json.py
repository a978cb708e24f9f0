"""JSON logging utilities.

One CustomJsonFormatter and one configure_logging for every entry point.
Records are emitted as a single JSON object per line; keys matching any of
the configured redaction patterns are masked recursively.
"""

from __future__ import annotations

import json
import logging
import os
import socket
import traceback
from datetime import datetime, timezone
from typing import Iterable

from .logger import mark_configured

REDACTED = "[REDACTED]"

# LogRecord attributes that carry no information once formatted
_DROP_FIELDS = ("args", "msg", "exc_info", "exc_text", "stack_info", "created", "msecs")

TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s %(message)s"


class SensitiveDataFilter:
    def __init__(self, patterns: Iterable[str]):
        self.patterns = [p.lower() for p in patterns]

    def _is_sensitive(self, key: str) -> bool:
        lk = key.lower()
        return any(p in lk for p in self.patterns)

    def filter(self, data: dict) -> dict:
        out = {}
        for k, v in data.items():
            if self._is_sensitive(k):
                out[k] = REDACTED
            elif isinstance(v, dict):
                out[k] = self.filter(v)
            else:
                out[k] = v
        return out


class CustomJsonFormatter(logging.Formatter):  # type: ignore[misc]
    def __init__(
        self,
        service: str,
        environment: str,
        redaction_patterns: Iterable[str],
    ):
        super().__init__()
        self.hostname = socket.gethostname()
        self.pid = os.getpid()
        self.service_name = service
        self.environment = environment
        self.sensitive_filter = SensitiveDataFilter(redaction_patterns)

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        data = {k: v for k, v in record.__dict__.items() if k not in _DROP_FIELDS}
        data["message"] = record.getMessage()
        data["timestamp"] = datetime.now(timezone.utc).isoformat()
        data["service"] = self.service_name
        data["hostname"] = self.hostname
        data["pid"] = self.pid
        data["environment"] = self.environment
        if record.exc_info:
            data["exception"] = self.format_exception(record.exc_info)
        data = self.sensitive_filter.filter(data)
        return json.dumps(data, default=str)

    @staticmethod
    def format_exception(exc_info):  # type: ignore[override]
        et, ev, tb = exc_info
        return {
            "type": et.__name__,
            "message": str(ev),
            "stack": traceback.format_tb(tb),
        }


def configure_logging(
    service: str,
    environment: str,
    level: str,
    redaction_patterns: Iterable[str],
    json_output: bool = True,
):
    """Install exactly one stream handler on the root logger.

    With json_output=False a plain text formatter is used instead, which is
    easier to read when running the console by hand.
    """
    handler = logging.StreamHandler()
    if json_output:
        handler.setFormatter(
            CustomJsonFormatter(service, environment, redaction_patterns)
        )
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    root = logging.getLogger()
    root.handlers = [handler]  # deterministic single handler
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    mark_configured()
    return root


__all__ = [
    "CustomJsonFormatter",
    "configure_logging",
    "SensitiveDataFilter",
    "REDACTED",
]
