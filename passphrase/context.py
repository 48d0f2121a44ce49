"""Per-request evaluation state shared by the engine and rule predicates."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .errors import RuleError
from .result import Outcome
from .rules import RuleSet
from .rules.loader import resolve_ruleset

logger = logging.getLogger(__name__)

_MISSING = object()


class PassphraseContext:
    """Carry one passphrase check through a ruleset.

    The context owns the passphrase, the optional username, a scratch map
    rules use to hand derived data to later rules, and the outcome of the
    most recent evaluation. It is not safe to share across threads; build
    one per in-flight check or call :meth:`reset` between checks.

    ``ruleset`` may be a :class:`RuleSet`, a path to a rule definition file,
    or omitted to load the process-wide default file.
    """

    def __init__(
        self,
        passphrase: Optional[str] = None,
        username: Optional[str] = None,
        ruleset: Union[RuleSet, Path, str, None] = None,
        data: Optional[Dict[str, Any]] = None,
        code: Optional[int] = None,
        message: Optional[str] = None,
    ) -> None:
        self.passphrase = passphrase
        self.username = username
        self.ruleset = resolve_ruleset(ruleset)
        self.code = code
        self.message = message
        self.error: Optional[RuleError] = None
        self._data: Dict[str, Any] = dict(data or {})
        logger.debug("initialized context with %s", self.ruleset)

    # ------------------------------------------------------------------
    # Scratch data
    # ------------------------------------------------------------------
    def get_data(self, key: Any = _MISSING) -> Any:
        """Return one scratch entry, or the whole map when no key is given."""

        if key is _MISSING:
            return self._data
        return self._data.get(key)

    def set_data(self, key: str, value: Any) -> None:
        self._data[key] = value

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------
    def as_text(self) -> str:
        """Return the passphrase itself ("" when unset)."""

        return self.passphrase if self.passphrase is not None else ""

    def as_length(self) -> int:
        """Return the passphrase length, 0 when unset."""

        return len(self.passphrase) if self.passphrase is not None else 0

    # ------------------------------------------------------------------
    # Outcome
    # ------------------------------------------------------------------
    @property
    def outcome(self) -> Outcome:
        return Outcome(self.code, self.message)

    def clear_outcome(self) -> None:
        self.code = None
        self.message = None
        self.error = None

    def reset(self, passphrase: Optional[str] = None) -> None:
        """Prepare the context for another passphrase from the same client."""

        self.clear_outcome()
        self._data.clear()
        self.passphrase = passphrase

    def __repr__(self) -> str:
        # Never include the passphrase itself.
        return (
            f"PassphraseContext(username={self.username!r}, length={self.as_length()}, "
            f"code={self.code!r}, message={self.message!r})"
        )
