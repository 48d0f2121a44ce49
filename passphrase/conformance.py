"""Check that every rule rejects the example passphrases it documents."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .context import PassphraseContext
from .engine import validate
from .result import Outcome, format_summary_table
from .rules import RuleSet

logger = logging.getLogger(__name__)


@dataclass
class ConformanceCase:
    """One example passphrase run through the whole ruleset."""

    rule: str
    index: int
    passphrase: Optional[str]
    expected: Optional[int]
    outcome: Optional[Outcome] = None
    error: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.error is None and self.outcome is not None and self.outcome.code == self.expected

    def to_dict(self) -> Dict[str, object]:
        return {
            "rule": self.rule,
            "index": self.index,
            "passphrase": self.passphrase,
            "expected": self.expected,
            "outcome": self.outcome.to_dict() if self.outcome else None,
            "error": self.error,
            "passed": self.passed,
        }


@dataclass
class ConformanceReport:
    """Collect the cases produced by :func:`run_conformance`."""

    cases: List[ConformanceCase] = field(default_factory=list)

    @property
    def failures(self) -> List[ConformanceCase]:
        return [case for case in self.cases if not case.passed]

    @property
    def passed(self) -> bool:
        return not self.failures

    def as_rows(self) -> List[Tuple[str, int]]:
        failed = len(self.failures)
        return [("PASSED", len(self.cases) - failed), ("FAILED", failed)]

    def to_dict(self) -> Dict[str, object]:
        return {
            "summary": dict((name.lower(), count) for name, count in self.as_rows()),
            "cases": [case.to_dict() for case in self.cases],
            "passed": self.passed,
        }

    def exit_code(self) -> int:
        return 0 if self.passed else 1


def run_conformance(ruleset: RuleSet, username: Optional[str] = None) -> ConformanceReport:
    """Feed each enabled rule's test passphrases through the full ruleset.

    A case passes when the outcome code equals the rule's own code.
    """

    report = ConformanceReport()
    for index, rule in enumerate(ruleset):
        if not rule.evaluable or rule.test is None:
            continue
        try:
            examples = rule.test_passphrases(PassphraseContext(username=username, ruleset=ruleset))
        except Exception as exc:
            logger.exception("test generator for rule %s raised", rule.label)
            report.cases.append(
                ConformanceCase(rule=rule.label, index=index, passphrase=None, expected=rule.code, error=repr(exc))
            )
            continue

        for example in examples:
            context = PassphraseContext(passphrase=example, username=username, ruleset=ruleset)
            outcome = validate(context)
            case = ConformanceCase(
                rule=rule.label, index=index, passphrase=example, expected=rule.code, outcome=outcome
            )
            if not case.passed:
                logger.debug("rule %s: %r produced %s", rule.label, example, outcome.status_line())
            report.cases.append(case)
    return report


def format_report(report: ConformanceReport) -> str:
    """Summarize a conformance run with a line per failing case."""

    lines = [format_summary_table(report.as_rows(), "Rule Self-Test", report.passed)]
    if report.failures:
        lines.append("")
        lines.append("Failures")
        lines.append("-" * 40)
        for case in report.failures:
            if case.error is not None:
                lines.append(f"[{case.index}] {case.rule}: test generator failed: {case.error}")
                continue
            got = case.outcome.status_line() if case.outcome else "no outcome"
            lines.append(f"[{case.index}] {case.rule}: {case.passphrase!r} expected {case.expected}, got {got}")
    return "\n".join(lines)
