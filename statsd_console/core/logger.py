from __future__ import annotations

import logging
from typing import Iterable

from shared.constants import Environment
from shared.logging.json import configure_logging as _shared_configure_logging

from .config import settings


class RedactingFilter(logging.Filter):
    """Mask whole log lines whose rendered message mentions a sensitive word."""

    def __init__(self, patterns: Iterable[str]):
        super().__init__()
        self.patterns = [p.lower() for p in patterns]

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        msg = record.getMessage().lower()
        if any(p in msg for p in self.patterns):
            record.msg = "[REDACTED SENSITIVE LOG CONTENT]"
            record.args = ()
        return True


_configured = False


def configure_logging(level: str | None = None, force: bool = False):
    global _configured
    if _configured and not force:
        return
    environment = Environment.parse(settings.app_environment)
    root = _shared_configure_logging(
        service=settings.otel_service_name,
        level=level or settings.app_log_level,
        environment=environment.value,
        redaction_patterns=settings.app_log_redaction_patterns,
        json_output=environment.wants_json_logs,
    )
    # Attach at root so it applies to every handler
    for h in root.handlers:
        h.addFilter(RedactingFilter(settings.app_log_redaction_patterns))
    _configured = True


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name)
