"""Passphrase strength checking against an ordered chain of rules."""

from importlib.metadata import version, PackageNotFoundError

from .context import PassphraseContext
from .engine import validate, validate_passphrase
from .errors import PassphraseError, PreconditionViolation, RuleError, RuleSetLoadError
from .result import Outcome
from .rules import Rule, RuleSet, Verdict

try:
    __version__ = version("passphrase-policy")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0-dev"

__all__ = [
    "__version__",
    "Outcome",
    "PassphraseContext",
    "PassphraseError",
    "PreconditionViolation",
    "Rule",
    "RuleError",
    "RuleSet",
    "RuleSetLoadError",
    "Verdict",
    "validate",
    "validate_passphrase",
]
