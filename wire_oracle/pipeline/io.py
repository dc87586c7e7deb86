"""HTTP request reading and response writing over raw sockets."""

import logging
import socket
import urllib.parse
from typing import Optional, Tuple

from wire_oracle.bootstrap.config import HEADER_DELIMITER, MAX_BODY_BYTES
from wire_oracle.domain.correlation_id import (
    CorrelationLoggerAdapter,
    set_correlation_id,
)
from wire_oracle.domain.http_types import HttpRequest, HttpResponse

IO_LOGGER = CorrelationLoggerAdapter(logging.getLogger("wire_oracle.pipeline.io"), {})

CRLF = b"\r\n"
RECV_SIZE = 4096


class RequestEntityTooLarge(Exception):
    """Raised when a request body exceeds configured limits."""


class _ClientClosed(Exception):
    """The peer closed the connection before a full request arrived."""


def parse_headers(lines: list[str]) -> dict[str, str]:
    """Convert raw header lines into a lowercase-keyed dictionary."""
    parsed = {}
    for line in lines:
        name, separator, value = line.partition(":")
        if not separator or not name or name != name.strip():
            continue
        parsed[name.lower()] = value.strip()
    return parsed


def parse_request_line(request_line: str) -> Tuple[str, str, str]:
    """Return the method, the raw path and the version, dropping any query.

    The path is not percent-decoded; routes match on the exact bytes sent.
    """
    try:
        method, target, version = request_line.split(" ", 2)
    except ValueError as exc:
        raise ValueError("Invalid request line") from exc
    if not method or not target or not version.startswith("HTTP/"):
        raise ValueError("Invalid request line")

    return method, urllib.parse.urlsplit(target).path, version


def determine_content_length(headers: dict[str, str]) -> int:
    """Validate and return the declared Content-Length, zero when absent."""
    header_value = headers.get("content-length")
    if header_value is None:
        return 0
    try:
        content_length = int(header_value)
    except ValueError as exc:
        raise ValueError("Invalid Content-Length") from exc
    if content_length < 0:
        raise ValueError("Negative Content-Length")
    if content_length > MAX_BODY_BYTES:
        raise RequestEntityTooLarge
    return content_length


def _recv_more(client_socket: socket.socket, buffer: bytes) -> bytes:
    chunk = client_socket.recv(RECV_SIZE)
    if not chunk:
        raise _ClientClosed
    return buffer + chunk


def _read_line(client_socket: socket.socket, buffer: bytes) -> Tuple[bytes, bytes]:
    while CRLF not in buffer:
        buffer = _recv_more(client_socket, buffer)
    line, remainder = buffer.split(CRLF, 1)
    return line, remainder


def _read_exact(
    client_socket: socket.socket, buffer: bytes, length: int
) -> Tuple[bytes, bytes]:
    while len(buffer) < length:
        buffer = _recv_more(client_socket, buffer)
    return buffer[:length], buffer[length:]


def _read_chunked_body(
    client_socket: socket.socket, buffer: bytes
) -> Tuple[bytes, bytes]:
    """Decode a chunked request body, discarding chunk extensions and trailers."""
    body = bytearray()
    while True:
        size_line, buffer = _read_line(client_socket, buffer)
        size_text = size_line.split(b";", 1)[0].strip()
        try:
            size = int(size_text, 16)
        except ValueError as exc:
            raise ValueError("Invalid chunk size") from exc
        if size < 0 or size_text.startswith((b"-", b"+")):
            raise ValueError("Invalid chunk size")

        if size == 0:
            while True:
                trailer_line, buffer = _read_line(client_socket, buffer)
                if not trailer_line:
                    return bytes(body), buffer

        if len(body) + size > MAX_BODY_BYTES:
            raise RequestEntityTooLarge
        data, buffer = _read_exact(client_socket, buffer, size + len(CRLF))
        if data[size:] != CRLF:
            raise ValueError("Missing CRLF after chunk data")
        body += data[:size]


def receive_request(
    client_socket: socket.socket, buffer: bytes
) -> Tuple[Optional[HttpRequest], bytes]:
    """Read one complete request, body included.

    Returns ``(None, b"")`` when the client goes away first. Raises
    ``ValueError`` for malformed framing and :class:`RequestEntityTooLarge`
    when the body exceeds ``MAX_BODY_BYTES``.
    """
    try:
        while HEADER_DELIMITER not in buffer:
            buffer = _recv_more(client_socket, buffer)

        header_block, remainder = buffer.split(HEADER_DELIMITER, 1)
        header_lines = header_block.decode("iso-8859-1").split("\r\n")
        method, path, version = parse_request_line(header_lines[0])
        headers = parse_headers(header_lines[1:])

        incoming_correlation_id = headers.get("x-request-id")
        if incoming_correlation_id:
            set_correlation_id(incoming_correlation_id)

        transfer_encoding = headers.get("transfer-encoding", "").lower()
        if transfer_encoding == "chunked":
            body, leftover = _read_chunked_body(client_socket, remainder)
        elif transfer_encoding:
            raise ValueError(f"Unsupported Transfer-Encoding: {transfer_encoding}")
        else:
            content_length = determine_content_length(headers)
            body, leftover = _read_exact(client_socket, remainder, content_length)
    except _ClientClosed:
        return None, b""

    IO_LOGGER.debug(
        "Parsed request",
        extra={"method": method, "route": path, "bytes_in": len(body)},
    )
    return HttpRequest(method, path, headers, body, version), leftover


class ResponseStream:
    """Per-request writer whose bytes reach the socket only on :meth:`flush`.

    Chunked strategies call ``flush`` once per chunk so that every chunk
    leaves as its own transport write.
    """

    def __init__(self, client_socket: socket.socket) -> None:
        self._socket = client_socket
        self._pending = bytearray()
        self.headers_sent = False
        self.bytes_written = 0

    def write_head(self, status_line: str, headers: dict[str, str]) -> None:
        if self.headers_sent:
            raise RuntimeError("Response head already written")
        lines = [status_line]
        lines.extend(f"{name}: {value}" for name, value in headers.items())
        self.write("\r\n".join(lines).encode("iso-8859-1") + HEADER_DELIMITER)
        self.headers_sent = True

    def write(self, data: bytes) -> None:
        self._pending += data

    def flush(self) -> None:
        if not self._pending:
            return
        self._socket.sendall(self._pending)
        self.bytes_written += len(self._pending)
        self._pending.clear()


def send_response(client_socket: socket.socket, response: HttpResponse) -> None:
    """Serialize and send a fixed-length response in a single write."""
    headers = dict(response.headers)
    headers["Content-Length"] = str(len(response.body))
    if response.close_connection:
        headers["Connection"] = "close"

    stream = ResponseStream(client_socket)
    stream.write_head(response.status_line, headers)
    stream.write(response.body)
    stream.flush()
    IO_LOGGER.debug(
        "Sent response",
        extra={"status": response.status_line, "bytes_out": stream.bytes_written},
    )
