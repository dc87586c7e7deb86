"""Byte-level checks of chunked framing as it appears on the wire."""

from __future__ import annotations

import socket

import pytest

from tests.conftest import ServerProcessInfo
from tests.utils.http import (
    IncompleteMessage,
    build_request,
    decode_chunked_lenient,
    read_http_response,
    send_raw,
)

pytestmark = pytest.mark.integration

HELLO_LINE = b"Hello, world!\r\n"


def _connect(server_process: ServerProcessInfo) -> socket.socket:
    return socket.create_connection(
        (server_process["host"], server_process["port"]), timeout=5
    )


def _request(server_process: ServerProcessInfo, method: str, path: str, **kwargs):
    return build_request(
        method, path, server_process["host"], server_process["port"], **kwargs
    )


def test_post_chunked_wire_format(server_process: ServerProcessInfo) -> None:
    capture = send_raw(
        server_process["host"],
        server_process["port"],
        _request(
            server_process, "POST", "/post-chunked", body=b"B", connection="close"
        ),
    )
    status_line, headers, body = capture.split_head()

    assert status_line == "HTTP/1.1 200 OK"
    assert headers["transfer-encoding"] == "chunked"
    assert "content-length" not in headers
    assert body == b"3\r\nB\r\n\r\n" * 10 + b"0\r\n\r\n"


def test_chunks_arrive_across_several_reads(server_process: ServerProcessInfo) -> None:
    capture = send_raw(
        server_process["host"],
        server_process["port"],
        _request(server_process, "GET", "/get-chunked-wo-trailer"),
    )
    assert len(capture.reads) > 1


def test_strict_decoder_rejects_lf_only_framing(
    server_process: ServerProcessInfo,
) -> None:
    with _connect(server_process) as sock:
        sock.sendall(_request(server_process, "GET", "/get-chunked-lf-only"))
        with pytest.raises(ValueError):
            read_http_response(sock)


def test_lenient_decoder_recovers_lf_only_body(
    server_process: ServerProcessInfo,
) -> None:
    capture = send_raw(
        server_process["host"],
        server_process["port"],
        _request(server_process, "GET", "/get-chunked-lf-only"),
    )
    status_line, headers, body = capture.split_head()

    assert status_line == "HTTP/1.1 200 OK"
    assert headers["connection"] == "close"
    assert b"\r\n0" not in body
    assert body.endswith(b"\n0\n\n")
    decoded, sizes = decode_chunked_lenient(body)
    assert decoded == HELLO_LINE * 10
    assert sizes == [15] * 10 + [0]


def test_strict_decoder_reports_missing_final_crlf(
    server_process: ServerProcessInfo,
) -> None:
    with _connect(server_process) as sock:
        sock.sendall(_request(server_process, "GET", "/get-chunked-wo-trailer"))
        with pytest.raises(IncompleteMessage):
            read_http_response(sock)


def test_lenient_decoder_still_reports_missing_final_crlf(
    server_process: ServerProcessInfo,
) -> None:
    capture = send_raw(
        server_process["host"],
        server_process["port"],
        _request(server_process, "GET", "/get-chunked-wo-trailer"),
    )
    _, _, body = capture.split_head()

    assert body.startswith(b"f\r\n" + HELLO_LINE + b"\r\n")
    assert body.endswith(b"\r\n0\r\n")
    with pytest.raises(IncompleteMessage):
        decode_chunked_lenient(body)


def test_drip_sends_one_hundred_chunks(server_process: ServerProcessInfo) -> None:
    with _connect(server_process) as sock:
        sock.sendall(_request(server_process, "POST", "/post", body=b"x"))
        response = read_http_response(sock)

    assert response.chunk_sizes == [3] * 100 + [0]
    assert response.body == b"x\r\n" * 100
