"""Exception types raised by the passphrase engine and rule loader."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional


class PassphraseError(Exception):
    """Base class for engine failures that are not policy outcomes."""


class RuleSetLoadError(PassphraseError):
    """A rule definition source could not be turned into a RuleSet."""

    def __init__(self, path: Optional[Path | str], cause: Any) -> None:
        self.path = str(path) if path is not None else None
        self.cause = cause
        where = self.path or "<inline rules>"
        super().__init__(f"Failed to load rules from {where}: {cause}")


class RuleError(PassphraseError):
    """A rule predicate raised while evaluating a passphrase.

    The engine never raises this; it records one on the context so operators
    can inspect the underlying cause while callers only see the generic
    rule-error outcome.
    """

    def __init__(self, rule: Any, cause: BaseException) -> None:
        self.rule = rule
        self.cause = cause
        super().__init__(f"Rule {getattr(rule, 'label', rule)!s} raised {cause!r}")


class PreconditionViolation(PassphraseError, ValueError):
    """The engine was invoked on a context that is not ready for evaluation."""
