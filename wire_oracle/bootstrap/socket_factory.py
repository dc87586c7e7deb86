"""Listening socket creation and optional TLS wrapping."""

import argparse
import logging
import socket
import ssl
import sys

from wire_oracle.domain.correlation_id import CorrelationLoggerAdapter

SOCKET_LOGGER = CorrelationLoggerAdapter(
    logging.getLogger("wire_oracle.bootstrap.socket"), {}
)

ACCEPT_POLL_SECONDS = 0.5


def create_server_socket(args: argparse.Namespace) -> socket.socket:
    """Bind the listener; wrap it in TLS when both --cert and --key are given."""
    server_socket = socket.create_server((args.host, args.port), reuse_port=True)
    server_socket.settimeout(ACCEPT_POLL_SECONDS)
    if args.cert and args.key:
        try:
            tls_context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
            tls_context.load_cert_chain(args.cert, args.key)
            server_socket = tls_context.wrap_socket(server_socket, server_side=True)
        except (ssl.SSLError, FileNotFoundError) as error:
            SOCKET_LOGGER.critical(
                "Failed to load TLS certificates",
                extra={"event": "tls_setup_failed", "error": str(error)},
            )
            sys.exit(1)
    return server_socket


def tune_client_socket(client_socket: socket.socket) -> None:
    """Disable Nagle so every flushed chunk leaves as its own segment."""
    client_socket.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
