"""Emit pytest source text with encode/decode round-trip cases for the corpus."""

from typing import Iterable

from wire_oracle.fixtures.corpus import CorpusEntry

DEFAULT_TARGET_MODULE = "wire_oracle.domain.percent_encoding"

_HEADER = '''"""Percent-encoding round-trip cases generated by make_fixtures.py."""

from {module} import {encode_name} as encode
from {module} import {decode_name} as decode
'''

_CASE = '''

def test_encode_{index}():
    assert encode({raw!r}) == {encoded!r}


def test_decode_{index}():
    assert decode({encoded!r}) == {raw!r}
'''


def _check_dotted_name(name: str) -> None:
    if not name or not all(part.isidentifier() for part in name.split(".")):
        raise ValueError(f"not an importable name: {name!r}")


def render_test_module(
    entries: Iterable[CorpusEntry],
    target_module: str = DEFAULT_TARGET_MODULE,
    encode_name: str = "encode",
    decode_name: str = "decode",
) -> str:
    """Return the source of a test module asserting both directions per entry.

    String literals go through ``repr`` so escapes and astral characters
    survive the trip into Python source unchanged.
    """
    _check_dotted_name(target_module)
    for name in (encode_name, decode_name):
        if not name.isidentifier():
            raise ValueError(f"not an identifier: {name!r}")

    parts = [
        _HEADER.format(
            module=target_module, encode_name=encode_name, decode_name=decode_name
        )
    ]
    for index, entry in enumerate(entries):
        parts.append(_CASE.format(index=index, raw=entry.raw, encoded=entry.encoded))
    return "".join(parts)
