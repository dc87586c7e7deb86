"""Pure builders for the oracle's fixed-length responses."""

from typing import Iterable

from wire_oracle.domain.http_types import HttpRequest, HttpResponse, should_close

TEXT_PLAIN = {"Content-Type": "text/plain"}


def _closes(request: HttpRequest) -> bool:
    return should_close(request.headers, request.version)


def text_response(payload: bytes, request: HttpRequest) -> HttpResponse:
    """Return a 200 text/plain response delimited by Content-Length."""
    return HttpResponse("HTTP/1.1 200 OK", dict(TEXT_PLAIN), payload, _closes(request))


def not_found_response(request: HttpRequest) -> HttpResponse:
    return HttpResponse("HTTP/1.1 404 Not Found", {}, b"", _closes(request))


def method_not_allowed_response(
    request: HttpRequest, allowed_methods: Iterable[str]
) -> HttpResponse:
    """Produce a 405 response enumerating the methods the path accepts."""
    headers = {"Allow": ", ".join(sorted(allowed_methods))}
    return HttpResponse(
        "HTTP/1.1 405 Method Not Allowed", headers, b"", _closes(request)
    )


def bad_request_response() -> HttpResponse:
    """Produce a 400 response; the request could not be framed, so close."""
    return HttpResponse("HTTP/1.1 400 Bad Request", {}, b"", True)


def entity_too_large_response() -> HttpResponse:
    """Produce a 413 response that always closes the connection."""
    return HttpResponse("HTTP/1.1 413 Payload Too Large", {}, b"", True)


def draining_response() -> HttpResponse:
    """Produce a 503 response indicating the server is draining."""
    return HttpResponse(
        "HTTP/1.1 503 Service Unavailable",
        dict(TEXT_PLAIN),
        b"draining",
        True,
    )
