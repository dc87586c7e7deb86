"""Worker thread logic for handling individual client connections."""

import logging
import socket
import threading
from typing import Optional

from wire_oracle.domain.correlation_id import (
    CorrelationLoggerAdapter,
    clear_correlation_id,
    generate_correlation_id,
    set_correlation_id,
)
from wire_oracle.domain.http_types import HttpRequest
from wire_oracle.domain.response_builders import (
    bad_request_response,
    draining_response,
    entity_too_large_response,
    method_not_allowed_response,
    not_found_response,
)
from wire_oracle.handlers.framing_handlers import handle_route
from wire_oracle.lifecycle.state import ServerLifecycle
from wire_oracle.pipeline.io import (
    RequestEntityTooLarge,
    receive_request,
    send_response,
)
from wire_oracle.pipeline.router import allowed_methods, match_route
from wire_oracle.transport.context import WorkerContext

WORKER_LOGGER = CorrelationLoggerAdapter(
    logging.getLogger("wire_oracle.transport.worker"), {}
)


def _read_request(
    client_socket: socket.socket, buffer: bytes, client_addr_str: str
) -> tuple[Optional[HttpRequest], bytes]:
    """Read the next request, answering framing errors with 4xx and ``None``."""
    try:
        return receive_request(client_socket, buffer)
    except RequestEntityTooLarge:
        WORKER_LOGGER.warning(
            "Request body size exceeded limit",
            extra={"event": "body_size_exceeded", "client": client_addr_str},
        )
        send_response(client_socket, entity_too_large_response())
    except ValueError as error:
        WORKER_LOGGER.warning(
            "Malformed request received",
            extra={
                "event": "malformed_request",
                "client": client_addr_str,
                "error": str(error),
            },
        )
        send_response(client_socket, bad_request_response())
    return None, b""


def _process_request(
    request: HttpRequest, context: WorkerContext, client_socket: socket.socket
) -> bool:
    """Dispatch one request and return True when the connection must close."""
    route = match_route(request.method, request.path, context.routes)
    if route is not None:
        return handle_route(route, request, client_socket)

    methods = allowed_methods(request.path, context.routes)
    if methods:
        response = method_not_allowed_response(request, methods)
    else:
        response = not_found_response(request)
    send_response(client_socket, response)
    return response.close_connection


def _cleanup_worker(
    lifecycle: Optional[ServerLifecycle],
    thread: threading.Thread,
    client_socket: socket.socket,
    client_addr_str: str,
) -> None:
    if lifecycle is not None:
        lifecycle.cleanup_worker(thread)

    try:
        client_socket.shutdown(socket.SHUT_WR)
    except OSError:
        pass
    client_socket.close()

    WORKER_LOGGER.debug(
        "Socket closed", extra={"event": "socket_closed", "client": client_addr_str}
    )
    clear_correlation_id()


def handle_client(
    client_socket: socket.socket,
    client_address: tuple[str, int],
    context: WorkerContext,
) -> None:
    """Serve requests on one connection until either side closes it."""
    buffer = b""
    current_thread = threading.current_thread()
    lifecycle = context.lifecycle
    client_addr_str = f"{client_address[0]}:{client_address[1]}"

    if lifecycle is not None:
        lifecycle.register_worker(current_thread)
    if context.config is not None:
        client_socket.settimeout(context.config.socket_timeout)

    try:
        while True:
            set_correlation_id(generate_correlation_id())

            if lifecycle is not None and lifecycle.is_draining():
                send_response(client_socket, draining_response())
                break

            request, buffer = _read_request(client_socket, buffer, client_addr_str)
            if request is None:
                break

            WORKER_LOGGER.debug(
                "Request line parsed",
                extra={
                    "event": "request_line_parsed",
                    "method": request.method,
                    "route": request.path,
                },
            )

            if _process_request(request, context, client_socket):
                break
            clear_correlation_id()
    except (BrokenPipeError, ConnectionResetError) as error:
        WORKER_LOGGER.debug(
            "Client disconnected mid-response",
            extra={
                "event": "client_disconnected",
                "client": client_addr_str,
                "error_type": type(error).__name__,
            },
        )
    except (TimeoutError, OSError) as error:
        WORKER_LOGGER.error(
            "Error handling client connection",
            extra={
                "event": "connection_error",
                "client": client_addr_str,
                "error_type": type(error).__name__,
            },
        )
    except Exception as error:  # pylint: disable=broad-except
        WORKER_LOGGER.error(
            "Unexpected error in worker",
            extra={
                "event": "worker_error",
                "client": client_addr_str,
                "error_type": type(error).__name__,
                "error": str(error),
            },
            exc_info=True,
        )
    finally:
        _cleanup_worker(lifecycle, current_thread, client_socket, client_addr_str)

