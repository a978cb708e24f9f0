from .server import ConsoleServer, parse_address
from .session import ConsoleSession

__all__ = ["ConsoleServer", "ConsoleSession", "parse_address"]
