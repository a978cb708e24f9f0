"""Shared utilities and components for the console and its embedding daemon."""

from .config import BaseLoggingConfig, BaseServiceConfig
from .constants import ConsoleCommands, Environment

__all__ = [
    "Environment",
    "ConsoleCommands",
    "BaseServiceConfig",
    "BaseLoggingConfig",
]
