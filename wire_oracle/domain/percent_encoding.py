"""RFC 3986 percent-encoding used as the expected-value oracle for URL tests."""

import re
import urllib.parse

UNRESERVED = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_.~"
)

_BROKEN_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class InvalidPercentEncoding(ValueError):
    """Raised when an encoded string has a broken escape or is not UTF-8."""


def encode(raw: str) -> str:
    """Percent-encode every UTF-8 byte of ``raw`` outside the unreserved set.

    Space becomes ``%20`` rather than ``+`` and hex digits are uppercase, so
    ``encode("a b/ü")`` is ``"a%20b%2F%C3%BC"``.
    """
    return urllib.parse.quote(raw, safe="", encoding="utf-8", errors="strict")


def decode(encoded: str) -> str:
    """Invert :func:`encode`.

    ``+`` is also accepted as a space, matching legacy form encoding. Raises
    :class:`InvalidPercentEncoding` for a ``%`` without two hex digits after it
    or when the decoded bytes are not valid UTF-8.
    """
    broken = _BROKEN_ESCAPE.search(encoded)
    if broken is not None:
        offset = broken.start()
        raise InvalidPercentEncoding(
            f"invalid escape at offset {offset}: {encoded[offset:offset + 3]!r}"
        )
    raw_bytes = urllib.parse.unquote_to_bytes(encoded.replace("+", " "))
    try:
        return raw_bytes.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidPercentEncoding("decoded bytes are not valid UTF-8") from exc
