"""Response framing strategies and their byte-exact chunk layouts.

Each strategy fixes the payload, the number of chunks and the delimiters, so a
given request always produces the same byte stream. Two strategies are
deliberately non-conformant and must stay that way:

* ``CHUNKED_LF_ONLY`` uses a bare ``\\n`` everywhere ``\\r\\n`` belongs.
* ``CHUNKED_WITHOUT_TRAILER`` ends with ``0\\r\\n`` and omits the final empty line.
"""

import enum
from dataclasses import dataclass
from typing import Iterator, Optional

from wire_oracle.bootstrap.config import CHUNK_DELAY_MS, DRIP_DELAY_MS

HELLO_WORLD = b"Hello, world!"
CRLF = b"\r\n"
LF = b"\n"


class FramingStrategy(enum.Enum):
    FIXED_BODY = "fixed-body"
    ECHO_LENGTH = "echo-length"
    ECHO_CHUNKED = "echo-chunked"
    CHUNKED_LF_ONLY = "chunked-lf-only"
    CHUNKED_WITHOUT_TRAILER = "chunked-without-trailer"
    DRIP_ECHO = "drip-echo"

    @property
    def echoes_body(self) -> bool:
        return self in {
            FramingStrategy.ECHO_LENGTH,
            FramingStrategy.ECHO_CHUNKED,
            FramingStrategy.DRIP_ECHO,
        }

    @property
    def is_chunked(self) -> bool:
        return self in CHUNK_PLANS

    @property
    def is_malformed(self) -> bool:
        """True for strategies a strict chunked decoder must reject."""
        return self in {
            FramingStrategy.CHUNKED_LF_ONLY,
            FramingStrategy.CHUNKED_WITHOUT_TRAILER,
        }


@dataclass(frozen=True)
class ChunkPlan:
    """Layout of one chunked response: repeat ``count`` frames, then ``terminator``."""

    count: int
    line_end: bytes
    terminator: bytes
    delay_seconds: float

    def frame(self, payload: bytes) -> bytes:
        size_line = f"{len(payload):x}".encode("ascii")
        return size_line + self.line_end + payload + self.line_end

    def frames(self, payload: bytes) -> Iterator[bytes]:
        for _ in range(self.count):
            yield self.frame(payload)

    def wire_body(self, payload: bytes) -> bytes:
        """Every byte after the response head, as it appears on the wire."""
        return b"".join(self.frames(payload)) + self.terminator


_CHUNK_DELAY = CHUNK_DELAY_MS / 1000
_DRIP_DELAY = DRIP_DELAY_MS / 1000

CHUNK_PLANS: dict[FramingStrategy, ChunkPlan] = {
    FramingStrategy.ECHO_CHUNKED: ChunkPlan(10, CRLF, b"0\r\n\r\n", _CHUNK_DELAY),
    FramingStrategy.CHUNKED_LF_ONLY: ChunkPlan(10, LF, b"0\n\n", _CHUNK_DELAY),
    FramingStrategy.CHUNKED_WITHOUT_TRAILER: ChunkPlan(
        10, CRLF, b"0\r\n", _CHUNK_DELAY
    ),
    FramingStrategy.DRIP_ECHO: ChunkPlan(100, CRLF, b"0\r\n\r\n", _DRIP_DELAY),
}


def chunk_plan(strategy: FramingStrategy) -> Optional[ChunkPlan]:
    return CHUNK_PLANS.get(strategy)


def response_payload(strategy: FramingStrategy, request_body: bytes = b"") -> bytes:
    """Return the bytes a strategy sends as a whole body or as each chunk.

    Chunked strategies append CRLF to their payload so the decoded body is a
    run of CRLF-terminated lines.
    """
    base = request_body if strategy.echoes_body else HELLO_WORLD
    if strategy.is_chunked:
        return base + CRLF
    return base


def expected_body(strategy: FramingStrategy, request_body: bytes = b"") -> bytes:
    """The body a lenient decoder reconstructs for ``strategy``."""
    payload = response_payload(strategy, request_body)
    plan = chunk_plan(strategy)
    if plan is None:
        return payload
    return payload * plan.count
