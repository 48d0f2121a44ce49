"""Command-line entry point for checking passphrases against a ruleset."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional, TextIO

from .conformance import format_report, run_conformance
from .context import PassphraseContext
from .engine import validate
from .errors import RuleSetLoadError
from .result import BatchResult, format_batch, mask
from .rules import RuleSet
from .rules.collaborators import WordListDictionary
from .rules.loader import RuleSource, default_rules_path
from .rules.registry import available

LOAD_ERROR_EXIT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Check passphrase strength against a configurable rule chain",
    )
    parser.add_argument(
        "passphrases",
        nargs="*",
        help="Passphrases to check. Read one per line from stdin when omitted.",
    )
    parser.add_argument(
        "--rules",
        "-r",
        dest="rules_path",
        default=None,
        help=f"Rule definition file (defaults to $PASSPHRASE_RULES or {default_rules_path()}).",
    )
    parser.add_argument(
        "--username",
        "-u",
        default=None,
        help="Username made available to rules.",
    )
    parser.add_argument(
        "--dictionary",
        default=None,
        help="Weak-phrase list, one phrase per line, for the not_in_dictionary predicate.",
    )
    parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Report format (defaults to text).",
    )
    parser.add_argument(
        "--out",
        "--output",
        dest="output_path",
        type=str,
        default=None,
        help="Path to write a JSON report.",
    )
    parser.add_argument(
        "--test",
        action="store_true",
        help="Run each rule's example passphrases and check they are rejected with its code.",
    )
    parser.add_argument(
        "--list-predicates",
        action="store_true",
        help="List the predicates rule files can refer to and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log rule loading and evaluation to stderr.",
    )
    return parser


def load_rules(rules_path: Optional[str], dictionary_path: Optional[str] = None) -> RuleSet:
    services = {}
    if dictionary_path:
        try:
            services["dictionary"] = WordListDictionary.from_file(Path(dictionary_path))
        except (OSError, UnicodeDecodeError) as exc:
            raise RuleSetLoadError(dictionary_path, exc) from exc
    return RuleSource(**services).load(rules_path or default_rules_path())


def read_passphrases(stream: TextIO) -> List[str]:
    return [line.rstrip("\r\n") for line in stream if line.rstrip("\r\n")]


def run_check(ruleset: RuleSet, passphrases: Iterable[str], username: Optional[str] = None) -> BatchResult:
    result = BatchResult()
    context = PassphraseContext(username=username, ruleset=ruleset)
    for passphrase in passphrases:
        context.reset(passphrase)
        result.add(mask(passphrase), validate(context))
    return result


def write_output(text: str, payload: dict, output_path: Optional[str], report_format: str) -> None:
    rendered = json.dumps(payload, indent=2)
    if report_format == "json":
        print(rendered)
    else:
        print(text)

    if output_path:
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(rendered, encoding="utf-8")
        if report_format != "json":
            print(f"\nReport written to {output_path}")


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.list_predicates:
        for name, summary in available().items():
            print(f"{name:<26} {summary}")
        return 0

    try:
        ruleset = load_rules(args.rules_path, args.dictionary)
    except RuleSetLoadError as exc:
        sys.stderr.write(f"{exc}\n")
        return LOAD_ERROR_EXIT

    if args.test:
        report = run_conformance(ruleset, username=args.username)
        write_output(format_report(report), report.to_dict(), args.output_path, args.format)
        return report.exit_code()

    passphrases = args.passphrases or read_passphrases(sys.stdin)
    result = run_check(ruleset, passphrases, username=args.username)
    write_output(format_batch(result), result.to_dict(), args.output_path, args.format)
    return result.exit_code()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
