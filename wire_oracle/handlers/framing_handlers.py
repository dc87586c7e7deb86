"""Write the response for a matched route using its framing strategy."""

import logging
import socket
import time

from wire_oracle.domain.correlation_id import CorrelationLoggerAdapter
from wire_oracle.domain.framing import ChunkPlan, chunk_plan, response_payload
from wire_oracle.domain.http_types import HttpRequest, should_close
from wire_oracle.domain.response_builders import TEXT_PLAIN, text_response
from wire_oracle.pipeline.io import ResponseStream, send_response
from wire_oracle.pipeline.router import RouteDescriptor

FRAMING_LOGGER = CorrelationLoggerAdapter(
    logging.getLogger("wire_oracle.handlers.framing"), {}
)


def stream_chunks(
    stream: ResponseStream,
    plan: ChunkPlan,
    payload: bytes,
    close_connection: bool,
) -> None:
    """Send the head, each chunk and the terminator as separate flushed writes.

    The delay follows every chunk, so the terminator also arrives on its own.
    """
    headers = {**TEXT_PLAIN, "Transfer-Encoding": "chunked"}
    if close_connection:
        headers["Connection"] = "close"
    stream.write_head("HTTP/1.1 200 OK", headers)
    stream.flush()

    for frame in plan.frames(payload):
        stream.write(frame)
        stream.flush()
        time.sleep(plan.delay_seconds)

    stream.write(plan.terminator)
    stream.flush()


def handle_route(
    route: RouteDescriptor, request: HttpRequest, client_socket: socket.socket
) -> bool:
    """Respond to ``request`` and return True when the connection must close."""
    strategy = route.strategy
    payload = response_payload(strategy, request.body)
    plan = chunk_plan(strategy)

    if plan is None:
        response = text_response(payload, request)
        send_response(client_socket, response)
        return response.close_connection

    close_connection = strategy.is_malformed or should_close(
        request.headers, request.version
    )
    stream = ResponseStream(client_socket)
    started = time.monotonic()
    stream_chunks(stream, plan, payload, close_connection)

    FRAMING_LOGGER.info(
        "Chunked response sent",
        extra={
            "event": "chunked_response_sent",
            "route": route.path,
            "strategy": strategy.value,
            "chunk_count": plan.count,
            "bytes_out": stream.bytes_written,
            "duration_ms": round((time.monotonic() - started) * 1000, 1),
        },
    )
    return close_connection
