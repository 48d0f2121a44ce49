"""Outcome codes and messages reserved by the engine."""

from __future__ import annotations

from http import HTTPStatus

SUCCESS_CODE = int(HTTPStatus.OK)
SUCCESS_MESSAGE = "acceptable"

# Policy rules must never reuse this code.
RULE_ERROR_CODE = 550
RULE_ERROR_MESSAGE = "rule error"

MESSAGE_PREFIX = "Passphrase"
RESERVED_CODES = frozenset({SUCCESS_CODE, RULE_ERROR_CODE})


def is_reserved(code: int | None) -> bool:
    """Return True when ``code`` belongs to the engine rather than a rule."""

    return code in RESERVED_CODES
