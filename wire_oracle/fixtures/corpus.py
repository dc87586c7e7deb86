"""Fixed string corpus for percent-encoding round-trip fixtures."""

from dataclasses import dataclass
from typing import Iterable

from wire_oracle.domain.percent_encoding import encode

CORPUS_STRINGS: tuple[str, ...] = (
    "test some sting",
    "this is.. ?",
    "where is %user% ! ? ? ?",
    "@#$%^&*((((((*&^%$#%user%!?   sad ??",
    "-----^-",
    " ^-",
    " ^-some",
    "All_to_659811165565659449",
    "test: string",
    "trailing space ",
    " ",
    "http://example.com/путь/😀?q=Größe & more",
)


@dataclass(frozen=True)
class CorpusEntry:
    """A raw string paired with its canonical percent-encoded form."""

    raw: str
    encoded: str


def build_corpus(strings: Iterable[str] = CORPUS_STRINGS) -> tuple[CorpusEntry, ...]:
    return tuple(CorpusEntry(raw, encode(raw)) for raw in strings)
