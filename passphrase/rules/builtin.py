"""Predicates shipped with the package, available to rule definition files."""

from __future__ import annotations

import re
from itertools import groupby
from typing import Any, Dict, List

from . import Predicate, Verdict
from .collaborators import DirectoryLookup, KeyboardGraph, PhraseDictionary
from .registry import predicate

WORDS_KEY = "words"
# Display-name fragments shorter than this are too common to reject on.
MINIMUM_NAME_PART = 3


def _count(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
    return value


def _compile(pattern: Any, ignore_case: bool) -> "re.Pattern[str]":
    if not isinstance(pattern, str):
        raise ValueError(f"pattern must be a string, got {pattern!r}")
    try:
        return re.compile(pattern, re.IGNORECASE if ignore_case else 0)
    except re.error as exc:
        raise ValueError(f"invalid pattern {pattern!r}: {exc}") from exc


def words_of(context, data: Dict[str, Any]) -> List[str]:
    """Return the words stored by ``split_words``, splitting on demand."""

    words = data.get(WORDS_KEY)
    if words is None:
        words = context.as_text().split()
    return words


@predicate("split_words")
def split_words() -> Predicate:
    """Store the whitespace-separated words for later rules."""

    def check(context, data):
        context.set_data(WORDS_KEY, context.as_text().split())
        return Verdict.PASS

    return check


@predicate("min_length")
def min_length(minimum: int) -> Predicate:
    """Require at least ``minimum`` characters."""

    minimum = _count("minimum", minimum)
    return lambda context, data: context.as_length() >= minimum


@predicate("max_length")
def max_length(maximum: int) -> Predicate:
    """Reject passphrases longer than ``maximum`` characters."""

    maximum = _count("maximum", maximum)
    return lambda context, data: context.as_length() <= maximum


@predicate("accept_length")
def accept_length(minimum: int) -> Predicate:
    """Accept outright once the passphrase reaches ``minimum`` characters."""

    minimum = _count("minimum", minimum)

    def check(context, data):
        return Verdict.ACCEPT if context.as_length() >= minimum else Verdict.PASS

    return check


@predicate("min_words")
def min_words(minimum: int) -> Predicate:
    """Require at least ``minimum`` whitespace-separated words."""

    minimum = _count("minimum", minimum)
    return lambda context, data: len(words_of(context, data)) >= minimum


@predicate("min_unique_characters")
def min_unique_characters(minimum: int) -> Predicate:
    """Require at least ``minimum`` distinct characters."""

    minimum = _count("minimum", minimum)
    return lambda context, data: len(set(context.as_text())) >= minimum


@predicate("max_repeated_characters")
def max_repeated_characters(maximum: int) -> Predicate:
    """Reject runs of one character longer than ``maximum``."""

    maximum = _count("maximum", maximum)

    def check(context, data):
        return all(len(list(run)) <= maximum for _, run in groupby(context.as_text()))

    return check


def _character_classes(text: str) -> int:
    classes = set()
    for char in text:
        if char.islower():
            classes.add("lower")
        elif char.isupper():
            classes.add("upper")
        elif char.isdigit():
            classes.add("digit")
        else:
            classes.add("other")
    return len(classes)


@predicate("min_character_classes")
def min_character_classes(minimum: int) -> Predicate:
    """Require ``minimum`` of: lowercase, uppercase, digits, other characters."""

    minimum = _count("minimum", minimum)
    return lambda context, data: _character_classes(context.as_text()) >= minimum


@predicate("forbid_pattern")
def forbid_pattern(pattern: str, ignore_case: bool = False) -> Predicate:
    """Reject passphrases matching the regular expression ``pattern``."""

    compiled = _compile(pattern, ignore_case)
    return lambda context, data: compiled.search(context.as_text()) is None


@predicate("require_pattern")
def require_pattern(pattern: str, ignore_case: bool = False) -> Predicate:
    """Reject passphrases that do not match the regular expression ``pattern``."""

    compiled = _compile(pattern, ignore_case)
    return lambda context, data: compiled.search(context.as_text()) is not None


@predicate("not_username")
def not_username() -> Predicate:
    """Reject passphrases containing the username."""

    def check(context, data):
        if not context.username:
            return Verdict.PASS
        return context.username.lower() not in context.as_text().lower()

    return check


@predicate("not_display_name")
def not_display_name(directory: DirectoryLookup) -> Predicate:
    """Reject passphrases containing part of the user's display name."""

    def check(context, data):
        if not context.username:
            return Verdict.PASS
        display_name = directory.display_name(context.username)
        if not display_name:
            return Verdict.PASS
        text = context.as_text().lower()
        parts = [part.lower() for part in re.split(r"[\s,.]+", display_name) if len(part) >= MINIMUM_NAME_PART]
        return not any(part in text for part in parts)

    return check


@predicate("not_in_dictionary")
def not_in_dictionary(dictionary: PhraseDictionary) -> Predicate:
    """Reject phrases found in the weak-phrase dictionary."""

    return lambda context, data: context.as_text() not in dictionary


@predicate("not_keyboard_sequence")
def not_keyboard_sequence(keyboard: KeyboardGraph) -> Predicate:
    """Reject passphrases with a word that is a predictable key sequence."""

    def check(context, data):
        return not any(keyboard.is_sequence(word) for word in words_of(context, data))

    return check
