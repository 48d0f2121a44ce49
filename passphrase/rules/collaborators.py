"""Narrow interfaces to the services a few rules consult."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Protocol, Set, runtime_checkable

from passphrase.utils import read_lines


@runtime_checkable
class PhraseDictionary(Protocol):
    """Answer whether a phrase appears in a corpus of known weak phrases."""

    def __contains__(self, phrase: object) -> bool:
        ...


@runtime_checkable
class KeyboardGraph(Protocol):
    """Answer whether a word is a predictable key sequence."""

    def is_sequence(self, word: str) -> bool:
        ...


@runtime_checkable
class DirectoryLookup(Protocol):
    """Fetch a user's display name.

    Implementations that call remote services must bound their own latency;
    the engine imposes no timeout.
    """

    def display_name(self, username: str) -> Optional[str]:
        ...


def normalize_phrase(phrase: str) -> str:
    """Lowercase and collapse whitespace so lookups ignore formatting."""

    return " ".join(phrase.lower().split())


class WordListDictionary:
    """Exact-match phrase dictionary held in memory."""

    def __init__(self, phrases: Iterable[str] = ()) -> None:
        self._phrases: Set[str] = {normalize_phrase(phrase) for phrase in phrases}

    @classmethod
    def from_file(cls, path: Path) -> "WordListDictionary":
        """Load one phrase per line, ignoring blanks and ``#`` comments."""

        return cls(read_lines(path))

    def __contains__(self, phrase: object) -> bool:
        if not isinstance(phrase, str):
            return False
        return normalize_phrase(phrase) in self._phrases

    def __len__(self) -> int:
        return len(self._phrases)
