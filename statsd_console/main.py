from __future__ import annotations

import argparse
import asyncio
import signal
import sys
from typing import Optional

from prometheus_client import start_http_server

from statsd_console.core.config import settings
from statsd_console.core.errors import ConsoleError
from statsd_console.core.logger import configure_logging, get_logger
from statsd_console.infrastructure.tcp.server import ConsoleServer
from statsd_console.metrics.aggregator import MetricAggregator

logger = get_logger("console.main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="statsd-console",
        description="Administrative console for the metrics aggregator",
    )
    parser.add_argument(
        "--addr",
        default=None,
        help=f"Listen address (default: {settings.console_addr!r})",
    )
    parser.add_argument(
        "--metrics-port",
        type=int,
        default=None,
        help=f"Prometheus metrics port (default: {settings.metrics_port})",
    )
    parser.add_argument(
        "--no-metrics",
        action="store_true",
        help="Do not expose the Prometheus metrics endpoint",
    )
    parser.add_argument("--log-level", default=None, help="Override app_log_level")
    return parser


async def run(
    aggregator: Optional[MetricAggregator] = None,
    addr: Optional[str] = None,
    metrics_port: Optional[int] = None,
) -> None:
    """Serve the console until a signal arrives or the listener fails.

    An embedding daemon passes its own aggregator; otherwise an empty one is
    created, which is mostly useful for poking at the console by hand.
    """
    aggregator = aggregator or MetricAggregator()
    server = ConsoleServer(aggregator, addr=addr)

    if metrics_port is not None:
        start_http_server(metrics_port)
        logger.info("metrics_listening", extra={"port": metrics_port})

    loop = asyncio.get_running_loop()

    # First signal closes the server gently, a second one cancels everything
    state = {"signalled": False}

    def _on_signal(signum, frame):  # noqa: D401
        if not state["signalled"]:
            logger.info("signal_received", extra={"signal": signum, "action": "close"})
            loop.call_soon_threadsafe(server.close)
            state["signalled"] = True
        else:
            logger.warning(
                "second_signal_exit", extra={"signal": signum, "action": "cancel"}
            )
            for task in asyncio.all_tasks(loop):
                loop.call_soon_threadsafe(task.cancel)

    for sig in (signal.SIGINT, signal.SIGTERM):
        signal.signal(sig, _on_signal)

    logger.info("console_starting", extra={"addr": server.addr})
    try:
        await server.listen_and_serve()
    finally:
        logger.info("console_stopping", extra={"sessions": server.active_sessions})
        server.close()
        await server.wait_closed()


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=args.log_level, force=args.log_level is not None)
    metrics_port = None
    if settings.metrics_enabled and not args.no_metrics:
        metrics_port = args.metrics_port or settings.metrics_port
    try:
        asyncio.run(run(addr=args.addr, metrics_port=metrics_port))
    except KeyboardInterrupt:  # noqa: PIE786
        logger.info("keyboard_interrupt_shutdown")
    except asyncio.CancelledError:
        logger.info("console_cancelled")
    except ConsoleError as e:
        logger.error("console_fatal", extra={"error": str(e)})
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
