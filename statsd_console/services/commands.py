"""Built-in console commands.

The command set is closed: `ConsoleCommand` enumerates every name the
console understands and `COMMAND_TABLE` maps each one to its handler. The
table is built once at import and shared read-only by every session.

Handlers take the aggregator explicitly plus the argument tokens, and always
return a CommandResult; they never raise. Every handler except `help` and
`quit` holds the aggregator lock while it touches aggregate state, and
releases it before returning.
"""

from __future__ import annotations

import json
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional, Sequence

from shared.constants import ConsoleCommands
from statsd_console.domain.models import CommandResult
from statsd_console.metrics.aggregator import MetricAggregator

Handler = Callable[[MetricAggregator, Sequence[str]], CommandResult]

HELP_TEXT = "Commands: " + ", ".join(ConsoleCommands.help_order()) + "\n"
GOODBYE_TEXT = "goodbye\n"
UNRECOGNIZED_TEXT = "unrecognized command\n"

_NEVER = "never"


class ConsoleCommand(str, Enum):
    HELP = ConsoleCommands.HELP
    STATS = ConsoleCommands.STATS
    COUNTERS = ConsoleCommands.COUNTERS
    TIMERS = ConsoleCommands.TIMERS
    GAUGES = ConsoleCommands.GAUGES
    DEL_COUNTERS = ConsoleCommands.DEL_COUNTERS
    DEL_TIMERS = ConsoleCommands.DEL_TIMERS
    DEL_GAUGES = ConsoleCommands.DEL_GAUGES
    QUIT = ConsoleCommands.QUIT


def _format_time(value: Optional[datetime]) -> str:
    return value.isoformat() if value is not None else _NEVER


def _dump(mapping: Mapping) -> str:
    return json.dumps(mapping, sort_keys=True, default=str) + "\n"


def _help(aggregator: MetricAggregator, args: Sequence[str]) -> CommandResult:
    return CommandResult(text=HELP_TEXT)


def _quit(aggregator: MetricAggregator, args: Sequence[str]) -> CommandResult:
    return CommandResult(text=GOODBYE_TEXT, close=True)


def _stats(aggregator: MetricAggregator, args: Sequence[str]) -> CommandResult:
    with aggregator.lock:
        stats = aggregator.stats
        text = (
            f"Invalid messages received: {stats.bad_lines}\n"
            f"Last message received: {_format_time(stats.last_message)}\n"
            f"Last flush to backend: {_format_time(stats.last_flush)}\n"
            f"Last error from backend: {stats.last_flush_error}\n"
        )
    return CommandResult(text=text)


def _counters(aggregator: MetricAggregator, args: Sequence[str]) -> CommandResult:
    with aggregator.lock:
        text = _dump(aggregator.counters)
    return CommandResult(text=text)


def _timers(aggregator: MetricAggregator, args: Sequence[str]) -> CommandResult:
    with aggregator.lock:
        text = _dump(aggregator.timers)
    return CommandResult(text=text)


def _gauges(aggregator: MetricAggregator, args: Sequence[str]) -> CommandResult:
    with aggregator.lock:
        text = _dump(aggregator.gauges)
    return CommandResult(text=text)


def _deleter(collection: str) -> Handler:
    """Build a handler deleting named entries from one aggregator mapping.

    The reported count is the number of names given, whether or not each was
    present.
    """

    def handler(aggregator: MetricAggregator, args: Sequence[str]) -> CommandResult:
        with aggregator.lock:
            mapping: Dict = getattr(aggregator, collection)
            for name in args:
                mapping.pop(name, None)
        return CommandResult(text=f"deleted {len(args)} {collection}\n")

    handler.__name__ = f"_del{collection}"
    return handler


COMMAND_TABLE: Mapping[str, Handler] = MappingProxyType(
    {
        ConsoleCommand.HELP.value: _help,
        ConsoleCommand.STATS.value: _stats,
        ConsoleCommand.COUNTERS.value: _counters,
        ConsoleCommand.TIMERS.value: _timers,
        ConsoleCommand.GAUGES.value: _gauges,
        ConsoleCommand.DEL_COUNTERS.value: _deleter("counters"),
        ConsoleCommand.DEL_TIMERS.value: _deleter("timers"),
        ConsoleCommand.DEL_GAUGES.value: _deleter("gauges"),
        ConsoleCommand.QUIT.value: _quit,
    }
)


def lookup(name: str) -> Optional[Handler]:
    """Exact, case-sensitive lookup; None for unknown names."""
    return COMMAND_TABLE.get(name)


def dispatch(aggregator: MetricAggregator, tokens: Sequence[str]) -> CommandResult:
    """Run the command named by tokens[0] with the remaining tokens as args."""
    handler = lookup(tokens[0])
    if handler is None:
        return CommandResult(text=UNRECOGNIZED_TEXT)
    return handler(aggregator, tokens[1:])
