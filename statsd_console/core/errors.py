class ConsoleError(Exception):
    """Base class for errors that escape the console subsystem."""


class BindError(ConsoleError):
    """The listening address is invalid, already in use, or not permitted."""

    def __init__(self, addr: str, reason: str):
        super().__init__(f"cannot listen on {addr!r}: {reason}")
        self.addr = addr
        self.reason = reason


class AcceptError(ConsoleError):
    """Accepting a connection failed; the server stops."""
