from __future__ import annotations

import socket

import pytest

from tests.utils.http import build_request, read_http_response, read_until_close

pytestmark = pytest.mark.integration


def test_multiple_requests_share_connection(server_process):
    host = server_process["host"]
    port = server_process["port"]

    with socket.create_connection((host, port), timeout=5) as client:
        client.sendall(build_request("GET", "/get", host, port))
        first = read_http_response(client)
        assert first.body == b"Hello, world!"

        client.sendall(build_request("POST", "/post-chunked", host, port, b"two"))
        second = read_http_response(client)
        assert second.body == b"two\r\n" * 10

        client.sendall(
            build_request(
                "POST", "/post-length", host, port, b"end", connection="close"
            )
        )
        final = read_http_response(client)
        assert final.body == b"end"
        assert final.headers["connection"] == "close"

        client.settimeout(1)
        remaining = client.recv(1)
        assert remaining == b""


def test_malformed_route_ends_keep_alive(server_process):
    host = server_process["host"]
    port = server_process["port"]

    with socket.create_connection((host, port), timeout=5) as client:
        client.sendall(build_request("GET", "/get-chunked-lf-only", host, port))
        capture = read_until_close(client)

    _, headers, body = capture.split_head()
    assert headers["connection"] == "close"
    assert body.endswith(b"\n0\n\n")


def test_http10_connection_closes_without_keep_alive(server_process):
    host = server_process["host"]
    port = server_process["port"]

    with socket.create_connection((host, port), timeout=5) as client:
        client.sendall(b"GET /get HTTP/1.0\r\n\r\n")
        capture = read_until_close(client)

    _, headers, body = capture.split_head()
    assert headers["connection"] == "close"
    assert body == b"Hello, world!"
