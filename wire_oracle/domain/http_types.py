"""Shared HTTP type definitions to avoid circular imports."""

from dataclasses import dataclass


@dataclass
class HttpRequest:
    """Represents a parsed HTTP request."""

    method: str
    path: str
    headers: dict[str, str]
    body: bytes
    version: str = "HTTP/1.1"


@dataclass
class HttpResponse:
    """A fixed-length response written in one piece."""

    status_line: str
    headers: dict[str, str]
    body: bytes
    close_connection: bool


def should_close(headers: dict[str, str], version: str = "HTTP/1.1") -> bool:
    """Determine whether the connection should be closed after responding.

    HTTP/1.1 persists unless the client sends ``Connection: close``; HTTP/1.0
    closes unless the client asks for ``Connection: keep-alive``.
    """
    connection = headers.get("connection", "").lower()
    if version == "HTTP/1.0":
        return connection != "keep-alive"
    return connection == "close"
