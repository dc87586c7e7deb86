"""Main connection acceptance loop."""

import argparse
import logging
import socket
import threading

from wire_oracle.bootstrap.config import ServerConfig
from wire_oracle.bootstrap.socket_factory import (
    create_server_socket,
    tune_client_socket,
)
from wire_oracle.domain.correlation_id import CorrelationLoggerAdapter
from wire_oracle.domain.response_builders import draining_response
from wire_oracle.lifecycle.state import ServerLifecycle
from wire_oracle.pipeline.io import send_response
from wire_oracle.pipeline.router import ROUTE_TABLE
from wire_oracle.transport.context import WorkerContext
from wire_oracle.transport.worker import handle_client

ACCEPT_LOGGER = CorrelationLoggerAdapter(
    logging.getLogger("wire_oracle.transport.accept"), {}
)


def _spawn_worker(
    client_socket: socket.socket,
    client_address: tuple[str, int],
    handler_context: WorkerContext,
) -> threading.Thread:
    if ACCEPT_LOGGER.logger.isEnabledFor(logging.DEBUG):
        ACCEPT_LOGGER.debug(
            "Client connection accepted",
            extra={
                "event": "client_accepted",
                "client": f"{client_address[0]}:{client_address[1]}",
            },
        )
    try:
        tune_client_socket(client_socket)
    except OSError as error:
        ACCEPT_LOGGER.warning(
            "Could not disable Nagle on client socket",
            extra={
                "event": "socket_tuning_failed",
                "client": f"{client_address[0]}:{client_address[1]}",
                "error_type": type(error).__name__,
            },
        )

    thread = threading.Thread(
        target=handle_client,
        args=(client_socket, client_address, handler_context),
        daemon=False,
    )
    thread.start()
    return thread


def run_server(
    args: argparse.Namespace, config: ServerConfig, lifecycle: ServerLifecycle
) -> None:
    """Accept connections until draining starts, then wait for workers."""

    server_socket = create_server_socket(args)

    ACCEPT_LOGGER.info(
        "Server listening for connections",
        extra={
            "event": "server_listening",
            "host": args.host,
            "port": args.port,
            "tls": bool(args.cert and args.key),
        },
    )
    for route in ROUTE_TABLE:
        ACCEPT_LOGGER.debug(
            "Route registered",
            extra={
                "event": "route_registered",
                "method": route.method,
                "route": route.path,
                "strategy": route.strategy.value,
            },
        )

    handler_context = WorkerContext(lifecycle=lifecycle, config=config)

    try:
        while True:
            try:
                client_socket, client_address = server_socket.accept()
            except socket.timeout:
                if lifecycle.should_stop():
                    break
                continue
            except OSError as error:
                if lifecycle.should_stop():
                    break
                ACCEPT_LOGGER.error(
                    "Socket accept failed",
                    extra={"event": "accept_error", "error_type": type(error).__name__},
                )
                continue

            if lifecycle.is_draining():
                send_response(client_socket, draining_response())
                client_socket.close()
                continue

            _spawn_worker(client_socket, client_address, handler_context)
    finally:
        server_socket.close()
        ACCEPT_LOGGER.info(
            "Waiting for active connections to complete",
            extra={
                "event": "shutdown_waiting",
                "grace_seconds": config.shutdown_grace_seconds,
            },
        )
        lifecycle.wait_for_workers(config.shutdown_grace_seconds)
        ACCEPT_LOGGER.info(
            "Server shutdown complete", extra={"event": "server_stopped"}
        )
