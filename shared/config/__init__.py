"""Shared configuration base classes.

Provides common configuration patterns so the console and the daemon that
embeds it read their settings the same way.
"""

from pydantic_settings import BaseSettings


class BaseLoggingConfig(BaseSettings):
    """Common logging configuration."""

    app_log_level: str = "INFO"
    app_log_redaction_patterns: list[str] = [
        "password",
        "token",
        "secret",
        "authorization",
        "cookie",
    ]
    app_environment: str = "production"


class BaseServiceConfig(BaseLoggingConfig):
    """Base configuration for a runnable component.

    Components should inherit from this and add their own specific settings.
    The otel_service_name should be overridden by each component.
    """

    otel_service_name: str = "unknown"  # Should be overridden by component


__all__ = ["BaseLoggingConfig", "BaseServiceConfig"]
