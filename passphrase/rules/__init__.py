"""Rule and RuleSet data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from passphrase.errors import RuleSetLoadError
from passphrase.status import is_reserved

if TYPE_CHECKING:
    from passphrase.context import PassphraseContext

Predicate = Callable[["PassphraseContext", Dict[str, Any]], Any]
TestGenerator = Callable[["PassphraseContext"], Iterable[str]]
TestExamples = Union[str, Tuple[str, ...], TestGenerator]

SPEC_FIELDS = frozenset({"code", "message", "disabled", "test", "validate", "name"})


class Verdict(Enum):
    """Return values a predicate can use to steer evaluation.

    ``FAIL`` is falsy and ``PASS`` truthy, so plain booleans mean the same
    thing. Only ``ACCEPT`` stops evaluation with the success outcome, and it
    is recognised by identity, never by value.
    """

    FAIL = 0
    PASS = 1
    ACCEPT = -1

    def __bool__(self) -> bool:
        return self is not Verdict.FAIL


@dataclass(frozen=True)
class Rule:
    """One policy check in a ruleset."""

    code: Optional[int] = None
    message: Optional[str] = None
    disabled: bool = False
    test: Optional[TestExamples] = None
    validate: Optional[Predicate] = field(default=None, compare=False)
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.code is not None:
            if isinstance(self.code, bool) or not isinstance(self.code, int):
                raise TypeError(f"rule code must be an integer, got {self.code!r}")
            if is_reserved(self.code):
                raise ValueError(f"rule code {self.code} is reserved by the engine")
        if self.message is not None and not isinstance(self.message, str):
            raise TypeError(f"rule message must be a string, got {self.message!r}")
        if self.name is not None and not isinstance(self.name, str):
            raise TypeError(f"rule name must be a string, got {self.name!r}")
        if self.validate is not None and not callable(self.validate):
            raise TypeError("rule validate must be callable")
        if isinstance(self.test, list):
            object.__setattr__(self, "test", tuple(self.test))
        if not isinstance(self.disabled, bool):
            raise TypeError(f"rule disabled flag must be a boolean, got {self.disabled!r}")

    @classmethod
    def from_spec(cls, spec: Union["Rule", Mapping[str, Any]]) -> "Rule":
        """Build a rule from a specification record."""

        if isinstance(spec, Rule):
            return spec
        if not isinstance(spec, Mapping):
            raise TypeError(f"rule specification must be a mapping, got {type(spec).__name__}")
        unknown = set(spec) - SPEC_FIELDS
        if unknown:
            raise ValueError(f"unknown rule fields: {', '.join(sorted(unknown))}")
        return cls(**dict(spec))

    @property
    def evaluable(self) -> bool:
        return self.validate is not None and not self.disabled

    @property
    def label(self) -> str:
        if self.name:
            return self.name
        if self.message:
            return self.message
        return "[message not available]"

    def test_passphrases(self, context: "PassphraseContext") -> List[str]:
        """Return the example passphrases this rule is expected to reject."""

        if self.test is None:
            return []
        if isinstance(self.test, str):
            return [self.test]
        if callable(self.test):
            return [str(item) for item in self.test(context)]
        return list(self.test)


class RuleSet:
    """An ordered, read-only collection of rules."""

    def __init__(self, rules: Iterable[Rule] = (), source: Optional[Union[Path, str]] = None) -> None:
        self._rules: Tuple[Rule, ...] = tuple(rules)
        self._source = str(source) if source is not None else None

    @classmethod
    def from_specs(
        cls,
        specs: Iterable[Union[Rule, Mapping[str, Any]]],
        source: Optional[Union[Path, str]] = None,
    ) -> "RuleSet":
        """Build a ruleset from rules or rule specification records."""

        if isinstance(specs, (str, bytes, Mapping)):
            raise RuleSetLoadError(source, "rule specifications must be an ordered list")
        rules = []
        for index, spec in enumerate(specs):
            try:
                rules.append(Rule.from_spec(spec))
            except (TypeError, ValueError) as exc:
                raise RuleSetLoadError(source, f"rule {index}: {exc}") from exc
        return cls(rules, source=source)

    @property
    def rules(self) -> Tuple[Rule, ...]:
        return self._rules

    @property
    def source(self) -> Optional[str]:
        return self._source

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __getitem__(self, index: int) -> Rule:
        return self._rules[index]

    def __repr__(self) -> str:
        where = self._source or "inline"
        return f"RuleSet({len(self._rules)} rules from {where})"


__all__ = ["Predicate", "Rule", "RuleSet", "Verdict"]
