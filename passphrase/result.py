"""Outcome records produced by the engine and helpers to report them."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Sequence, Tuple

from .status import MESSAGE_PREFIX, RULE_ERROR_CODE, SUCCESS_CODE, SUCCESS_MESSAGE


@dataclass(frozen=True)
class Outcome:
    """The code/message pair left on a context by one evaluation."""

    code: Optional[int]
    message: Optional[str]

    @classmethod
    def success(cls) -> "Outcome":
        return cls(SUCCESS_CODE, SUCCESS_MESSAGE)

    @property
    def accepted(self) -> bool:
        return self.code == SUCCESS_CODE

    @property
    def is_rule_error(self) -> bool:
        return self.code == RULE_ERROR_CODE

    def status_line(self) -> str:
        """Render the outcome the way HTTP-style front ends report it."""

        code = "" if self.code is None else str(self.code)
        if self.message is None:
            return f"{code} {MESSAGE_PREFIX}".strip()
        return f"{code} {MESSAGE_PREFIX} {self.message}".strip()

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


@dataclass
class CheckedPassphrase:
    """One passphrase submitted through the command line and its outcome."""

    label: str
    outcome: Outcome

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {"passphrase": self.label}
        data.update(self.outcome.to_dict())
        return data


@dataclass
class BatchResult:
    """Collect outcomes for several passphrases checked against one ruleset."""

    checked: List[CheckedPassphrase] = field(default_factory=list)

    def add(self, label: str, outcome: Outcome) -> None:
        self.checked.append(CheckedPassphrase(label=label, outcome=outcome))

    @property
    def accepted(self) -> int:
        return sum(1 for item in self.checked if item.outcome.accepted)

    @property
    def rejected(self) -> int:
        return sum(
            1 for item in self.checked if not item.outcome.accepted and not item.outcome.is_rule_error
        )

    @property
    def errors(self) -> int:
        return sum(1 for item in self.checked if item.outcome.is_rule_error)

    @property
    def passed(self) -> bool:
        return self.rejected == 0 and self.errors == 0

    def as_rows(self) -> List[Tuple[str, int]]:
        return [("ACCEPTED", self.accepted), ("REJECTED", self.rejected), ("ERROR", self.errors)]

    def to_dict(self) -> Dict[str, object]:
        return {
            "summary": dict((name.lower(), count) for name, count in self.as_rows()),
            "results": [item.to_dict() for item in self.checked],
            "passed": self.passed,
        }

    def exit_code(self) -> int:
        if self.errors:
            return 2
        if self.rejected:
            return 1
        return 0


def mask(passphrase: str, visible: int = 2) -> str:
    """Hide most of a passphrase so reports never echo it in full."""

    if len(passphrase) <= visible:
        return "*" * len(passphrase)
    return passphrase[:visible] + "*" * (len(passphrase) - visible)


def format_summary_table(rows: Sequence[Tuple[str, int]], title: str, passed: bool) -> str:
    """Create the fixed-width count table shared by the console reports."""

    lines: List[str] = []
    lines.append(title)
    lines.append("=" * 40)
    header = f"{'Outcome':<10} | {'Count':>5}"
    lines.append(header)
    lines.append("-" * len(header))
    for name, count in rows:
        lines.append(f"{name:<10} | {count:>5}")
    lines.append("-" * len(header))
    lines.append(f"Status    : {'PASS' if passed else 'FAIL'}")
    return "\n".join(lines)


def format_batch(result: BatchResult) -> str:
    """Summarize a batch followed by one status line per passphrase."""

    lines = [format_summary_table(result.as_rows(), "Passphrase Check", result.passed)]
    if result.checked:
        lines.append("")
        for item in result.checked:
            lines.append(f"{item.label}: {item.outcome.status_line()}")
    return "\n".join(lines)
