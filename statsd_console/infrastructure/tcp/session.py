"""One console connection: read a line, dispatch it, write the answer, repeat."""

from __future__ import annotations

import asyncio
from typing import Any, Optional

from statsd_console.core.config import settings
from statsd_console.core.logger import get_logger
from statsd_console.domain.models import CommandResult
from statsd_console.metrics.aggregator import MetricAggregator
from statsd_console.services.commands import COMMAND_TABLE, dispatch

from .line_parser import parse_line
from .metrics import (
    ACTIVE_SESSIONS,
    COMMAND_LATENCY_SECONDS,
    COMMANDS_TOTAL,
    SESSIONS_TOTAL,
    UNKNOWN_COMMANDS_TOTAL,
)

logger = get_logger("console.session")


class ConsoleSession:
    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        aggregator: MetricAggregator,
        prompt: Optional[str] = None,
    ):
        self.reader = reader
        self.writer = writer
        self.aggregator = aggregator
        self.prompt = settings.console_prompt if prompt is None else prompt
        self.peer: Any = writer.get_extra_info("peername")
        self.commands_run = 0

    async def serve(self) -> None:
        """Run the read-eval-print loop until EOF, an I/O error, or `quit`.

        The socket is always closed on return. I/O failures end only this
        session and are not re-raised.
        """
        SESSIONS_TOTAL.inc()
        ACTIVE_SESSIONS.inc()
        logger.info("console_session_opened", extra={"peer": str(self.peer)})
        reason = "eof"
        try:
            await self._write(self.prompt)
            while True:
                line = await self._read_line()
                if line is None:
                    break
                tokens = parse_line(line)
                if not tokens:
                    await self._write(self.prompt)
                    continue
                result = self._execute(tokens)
                if result.close:
                    await self._write(result.text)
                    reason = "quit"
                    break
                await self._write(result.text + self.prompt)
        except asyncio.LimitOverrunError as e:
            reason = "line_too_long"
            logger.info(
                "console_line_too_long",
                extra={"peer": str(self.peer), "buffered": e.consumed},
            )
        except OSError as e:  # ConnectionResetError, BrokenPipeError, ...
            reason = "io_error"
            logger.debug(
                "console_session_io_error",
                extra={"peer": str(self.peer), "error": str(e)},
            )
        finally:
            await self._close()
            ACTIVE_SESSIONS.dec()
            logger.info(
                "console_session_closed",
                extra={
                    "peer": str(self.peer),
                    "reason": reason,
                    "commands_run": self.commands_run,
                },
            )

    async def _read_line(self) -> Optional[bytes]:
        """Next newline-terminated line, or None at end of stream.

        A trailing fragment without a newline counts as end of stream.
        """
        try:
            return await self.reader.readuntil(b"\n")
        except asyncio.IncompleteReadError:
            return None

    def _execute(self, tokens: list[str]) -> CommandResult:
        name = tokens[0]
        if name in COMMAND_TABLE:
            COMMANDS_TOTAL.labels(command=name).inc()
        else:
            UNKNOWN_COMMANDS_TOTAL.inc()
            logger.info(
                "console_unknown_command",
                extra={"peer": str(self.peer), "command": name},
            )
        with COMMAND_LATENCY_SECONDS.time():
            result = dispatch(self.aggregator, tokens)
        self.commands_run += 1
        logger.debug(
            "console_command",
            extra={
                "peer": str(self.peer),
                "command": name,
                "arg_count": len(tokens) - 1,
            },
        )
        return result

    async def _write(self, text: str) -> None:
        self.writer.write(text.encode("utf-8"))
        await self.writer.drain()

    async def _close(self) -> None:
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except OSError as e:
            logger.debug(
                "console_session_close_error",
                extra={"peer": str(self.peer), "error": str(e)},
            )
