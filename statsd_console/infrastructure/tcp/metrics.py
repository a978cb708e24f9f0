from shared.metrics import get_counter, get_gauge, get_histogram

_SERVICE = "console"

# Sessions
SESSIONS_TOTAL = get_counter(
    "sessions_total", "Console connections accepted.", service=_SERVICE
)
ACTIVE_SESSIONS = get_gauge(
    "active_sessions", "Console sessions currently open.", service=_SERVICE
)

# Commands
COMMANDS_TOTAL = get_counter(
    "commands_total",
    "Console commands dispatched, by command name.",
    service=_SERVICE,
    labelnames=("command",),
)
UNKNOWN_COMMANDS_TOTAL = get_counter(
    "unknown_commands_total",
    "Console lines whose first token matched no command.",
    service=_SERVICE,
)
COMMAND_LATENCY_SECONDS = get_histogram(
    "command_latency_seconds",
    "Time spent executing a console command (lock wait included).",
    service=_SERVICE,
    buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
)
