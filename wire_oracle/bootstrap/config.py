"""Oracle configuration and CLI argument parsing."""

import argparse
import os
from dataclasses import dataclass


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value is not None else default


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


MAX_BODY_BYTES = _env_int("WIRE_ORACLE_MAX_BODY_BYTES", 5 * 1024 * 1024)
CHUNK_DELAY_MS = _env_int("WIRE_ORACLE_CHUNK_DELAY_MS", 10)
DRIP_DELAY_MS = _env_int("WIRE_ORACLE_DRIP_DELAY_MS", 10)
DEFAULT_SOCKET_TIMEOUT = _env_int("WIRE_ORACLE_SOCKET_TIMEOUT", 60)
DEFAULT_SHUTDOWN_GRACE_SECONDS = _env_int("WIRE_ORACLE_SHUTDOWN_GRACE_SECONDS", 30)
DEFAULT_LOG_JSON = _env_bool("WIRE_ORACLE_LOG_JSON", True)

HEADER_DELIMITER = b"\r\n\r\n"


@dataclass
class ServerConfig:
    """Server configuration including timeouts and shutdown settings."""

    socket_timeout: int
    shutdown_grace_seconds: int


def parse_cli_args(argv: list[str]) -> argparse.Namespace:
    """Return parsed CLI arguments for the framing oracle."""
    parser = argparse.ArgumentParser(description="HTTP response-framing oracle")
    parser.add_argument("--host", default="localhost")
    parser.add_argument("--port", type=int, default=4221)
    parser.add_argument("--cert", help="Path to TLS certificate file")
    parser.add_argument("--key", help="Path to TLS private key file")
    default_log_level = os.getenv("WIRE_ORACLE_LOG_LEVEL", "INFO").upper()
    default_destination = os.getenv("WIRE_ORACLE_LOG_DESTINATION", "stdout")
    parser.add_argument(
        "--log-level",
        default=default_log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
    )
    parser.add_argument(
        "--log-destination",
        default=default_destination,
        help="stdout or a file path",
    )
    parser.add_argument(
        "--log-json",
        action=argparse.BooleanOptionalAction,
        default=DEFAULT_LOG_JSON,
        help="Emit structured JSON log lines",
    )
    parser.add_argument(
        "--socket-timeout",
        type=int,
        default=DEFAULT_SOCKET_TIMEOUT,
        help="Socket timeout in seconds for request processing",
    )
    parser.add_argument(
        "--shutdown-grace-seconds",
        type=int,
        default=DEFAULT_SHUTDOWN_GRACE_SECONDS,
        help="Grace period in seconds for graceful shutdown",
    )
    return parser.parse_args(argv)
