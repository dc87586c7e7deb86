"""HTTP response-framing oracle: fixed routes with standard and malformed framings."""

import logging
import signal
import sys

from wire_oracle.bootstrap.config import ServerConfig, parse_cli_args
from wire_oracle.bootstrap.logging_setup import configure_logging
from wire_oracle.domain.correlation_id import CorrelationLoggerAdapter
from wire_oracle.lifecycle.state import ServerLifecycle
from wire_oracle.transport.accept_loop import run_server

SERVER_LOGGER = CorrelationLoggerAdapter(logging.getLogger("wire_oracle.server"), {})


def main() -> None:
    """Start the oracle and serve until SIGTERM or SIGINT."""
    args = parse_cli_args(sys.argv[1:])
    configure_logging(args.log_level, args.log_destination, args.log_json)

    config = ServerConfig(
        socket_timeout=args.socket_timeout,
        shutdown_grace_seconds=args.shutdown_grace_seconds,
    )
    lifecycle = ServerLifecycle()

    def shutdown_handler(signum: int, _frame) -> None:
        SERVER_LOGGER.info(
            "Received shutdown signal",
            extra={"event": "signal_received", "signal": signum},
        )
        lifecycle.begin_draining()

    signal.signal(signal.SIGTERM, shutdown_handler)
    signal.signal(signal.SIGINT, shutdown_handler)

    SERVER_LOGGER.info(
        "Starting framing oracle",
        extra={
            "event": "server_starting",
            "host": args.host,
            "port": args.port,
            "log_destination": args.log_destination,
            "log_level": args.log_level,
            "tls": bool(args.cert and args.key),
            "socket_timeout": config.socket_timeout,
            "shutdown_grace_seconds": config.shutdown_grace_seconds,
        },
    )
    run_server(args, config, lifecycle)


if __name__ == "__main__":
    main()
