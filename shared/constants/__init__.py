from .commands import ConsoleCommands
from .environments import Environment

__all__ = ["ConsoleCommands", "Environment"]
