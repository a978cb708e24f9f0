"""TCP listener that turns each accepted connection into a ConsoleSession."""

from __future__ import annotations

import asyncio
import socket
from typing import Any, Optional, Set, Tuple

from statsd_console.core.config import DEFAULT_CONSOLE_ADDR, settings
from statsd_console.core.errors import AcceptError, BindError
from statsd_console.core.logger import get_logger
from statsd_console.metrics.aggregator import MetricAggregator

from .session import ConsoleSession

logger = get_logger("console.server")


def parse_address(addr: str) -> Tuple[str, int]:
    """Split "host:port", ":port" or "[v6host]:port" into (host, port).

    An empty host means all interfaces. Raises BindError when the address
    cannot be used.
    """
    host, sep, port_text = addr.rpartition(":")
    if not sep:
        raise BindError(addr, "missing port")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    elif ":" in host:
        raise BindError(addr, "too many colons")
    try:
        port = int(port_text)
    except ValueError:
        raise BindError(addr, f"invalid port {port_text!r}") from None
    if not 0 <= port <= 65535:
        raise BindError(addr, f"port {port} out of range")
    return host, port


def bind_listener(addr: str, backlog: int = 100) -> socket.socket:
    """Create a non-blocking listening TCP socket for addr."""
    host, port = parse_address(addr)
    try:
        infos = socket.getaddrinfo(
            host or None, port, type=socket.SOCK_STREAM, flags=socket.AI_PASSIVE
        )
    except socket.gaierror as e:
        raise BindError(addr, str(e)) from e
    family, socktype, proto, _, sockaddr = infos[0]
    sock = socket.socket(family, socktype, proto)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind(sockaddr)
        sock.listen(backlog)
        sock.setblocking(False)
    except OSError as e:
        sock.close()
        raise BindError(addr, e.strerror or str(e)) from e
    return sock


class ConsoleServer:
    """Accepts console connections on `addr` for one shared aggregator.

    Every connection gets its own task; the accept loop never waits on a
    session. The server itself has no retry policy: a failure to bind or to
    accept ends it.
    """

    def __init__(
        self,
        aggregator: MetricAggregator,
        addr: Optional[str] = None,
        prompt: Optional[str] = None,
        max_line_bytes: Optional[int] = None,
    ):
        self.aggregator = aggregator
        self.addr = addr if addr is not None else settings.console_addr
        self.prompt = prompt
        self.max_line_bytes = max_line_bytes or settings.console_max_line_bytes
        self.ready = asyncio.Event()
        self.address: Any = None
        self._sessions: Set[asyncio.Task] = set()
        self._serve_task: Optional[asyncio.Task] = None
        self._closing = False

    async def listen_and_serve(self) -> None:
        """Bind self.addr (or DEFAULT_CONSOLE_ADDR when empty) and serve."""
        addr = self.addr or DEFAULT_CONSOLE_ADDR
        listener = bind_listener(addr, settings.console_listen_backlog)
        await self.serve(listener)

    async def serve(self, listener: socket.socket) -> None:
        """Accept connections on listener until close() or an accept failure.

        The listener is closed on return. Raises AcceptError if accepting
        fails; returns normally after close().
        """
        loop = asyncio.get_running_loop()
        listener.setblocking(False)
        self._serve_task = asyncio.current_task()
        self.address = listener.getsockname()
        self.ready.set()
        logger.info("console_listening", extra={"address": str(self.address)})
        try:
            while True:
                try:
                    conn, _ = await loop.sock_accept(listener)
                except OSError as e:
                    logger.error("console_accept_failed", extra={"error": str(e)})
                    raise AcceptError(str(e)) from e
                await self._spawn(conn)
        except asyncio.CancelledError:
            if not self._closing:
                raise
            logger.info("console_server_closed", extra={"address": str(self.address)})
        finally:
            listener.close()
            self.ready.clear()

    async def _spawn(self, conn: socket.socket) -> None:
        reader, writer = await asyncio.open_connection(
            sock=conn, limit=self.max_line_bytes
        )
        session = ConsoleSession(reader, writer, self.aggregator, prompt=self.prompt)
        task = asyncio.create_task(session.serve())
        self._sessions.add(task)
        task.add_done_callback(self._sessions.discard)

    @property
    def active_sessions(self) -> int:
        return len(self._sessions)

    def close(self) -> None:
        """Stop accepting and cancel every live session."""
        self._closing = True
        if self._serve_task is not None and not self._serve_task.done():
            self._serve_task.cancel()
        for task in list(self._sessions):
            task.cancel()

    async def wait_closed(self) -> None:
        """Wait for sessions cancelled by close() to finish closing sockets."""
        if self._sessions:
            await asyncio.gather(*self._sessions, return_exceptions=True)
