"""Load rulesets from YAML rule definition files."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

import yaml

from passphrase.errors import RuleSetLoadError
from passphrase.utils import read_yaml_file

from . import Predicate, Rule, RuleSet
from . import builtin  # noqa: F401  registers the shipped predicates
from .registry import build_predicate

logger = logging.getLogger(__name__)

DEFAULT_RULES_FILE = "/etc/passphrase_rules.yaml"
RULES_ENV_VAR = "PASSPHRASE_RULES"
EXAMPLE_RULES_FILE = Path(__file__).resolve().parent.parent / "data" / "passphrase_rules.yaml"

DOCUMENT_KEYS = frozenset({"constants", "rules"})
CONSTANT_PREFIX = "$"


def default_rules_path() -> Path:
    """Return the rules file used when a caller supplies none."""

    return Path(os.environ.get(RULES_ENV_VAR) or DEFAULT_RULES_FILE)


class RuleSource:
    """Turn rule definition files into rulesets.

    Collaborators passed here (``dictionary``, ``keyboard``, ``directory``)
    are handed to the predicates that ask for them; rule files can only name
    predicates and give them plain data parameters.
    """

    def __init__(self, **services: Any) -> None:
        self._services: Dict[str, Any] = services

    def load(self, path: Union[Path, str]) -> RuleSet:
        path = Path(path)
        logger.debug("loading rules from %s", path)
        try:
            document = read_yaml_file(path)
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            raise RuleSetLoadError(path, exc) from exc

        try:
            specs = self._parse_document(document)
        except (KeyError, TypeError, ValueError) as exc:
            raise RuleSetLoadError(path, exc) from exc

        ruleset = RuleSet.from_specs(specs, source=path)
        logger.debug("loaded %d rules from %s", len(ruleset), path)
        return ruleset

    def _parse_document(self, document: Any) -> List[Dict[str, Any]]:
        constants: Mapping[str, Any] = {}
        if isinstance(document, Mapping):
            unknown = set(document) - DOCUMENT_KEYS
            if unknown:
                raise ValueError(f"unknown top-level keys: {', '.join(sorted(map(str, unknown)))}")
            constants = document.get("constants") or {}
            if not isinstance(constants, Mapping):
                raise TypeError("constants must be a mapping")
            document = document.get("rules")
        if not isinstance(document, list):
            raise TypeError("rule definitions must be an ordered list of rules")

        specs = []
        for index, record in enumerate(document):
            if not isinstance(record, Mapping):
                raise TypeError(f"rule {index}: expected a mapping, got {type(record).__name__}")
            spec = dict(record)
            if "test" in spec:
                spec["test"] = self._parse_test(spec["test"], index)
            if spec.get("validate") is not None:
                spec["validate"] = self._build_validate(spec["validate"], constants, index)
            specs.append(spec)
        return specs

    def _parse_test(self, test: Any, index: int) -> Any:
        if test is None or isinstance(test, str):
            return test
        if isinstance(test, list) and all(isinstance(item, str) for item in test):
            return tuple(test)
        raise TypeError(f"rule {index}: test must be a string or a list of strings")

    def _build_validate(self, spec: Any, constants: Mapping[str, Any], index: int) -> Predicate:
        if isinstance(spec, str):
            name, params = spec, {}
        elif isinstance(spec, Mapping) and len(spec) == 1:
            name, params = next(iter(spec.items()))
            params = params or {}
            if not isinstance(params, Mapping):
                raise TypeError(f"rule {index}: parameters for {name!r} must be a mapping")
        else:
            raise TypeError(f"rule {index}: validate must be a predicate name or a single-key mapping")

        try:
            resolved = {key: _substitute(value, constants) for key, value in params.items()}
            return build_predicate(name, resolved, self._services)
        except (KeyError, ValueError) as exc:
            raise ValueError(f"rule {index}: {exc.args[0] if exc.args else exc}") from exc


def _substitute(value: Any, constants: Mapping[str, Any]) -> Any:
    if isinstance(value, str) and value.startswith(CONSTANT_PREFIX):
        name = value[len(CONSTANT_PREFIX):]
        if name not in constants:
            raise KeyError(f"undefined constant {name!r}")
        return constants[name]
    if isinstance(value, list):
        return [_substitute(item, constants) for item in value]
    return value


def load_ruleset(path: Union[Path, str, None] = None, **services: Any) -> RuleSet:
    """Load ``path`` (or the default rules file) into a ruleset."""

    return RuleSource(**services).load(path if path is not None else default_rules_path())


def resolve_ruleset(ruleset: Union[RuleSet, Path, str, None]) -> RuleSet:
    """Return ``ruleset`` as-is, or load it from a path or the default file."""

    if isinstance(ruleset, RuleSet):
        return ruleset
    if ruleset is None:
        logger.debug("autoconstructing ruleset with default file")
        return load_ruleset()
    if isinstance(ruleset, (str, Path)):
        return load_ruleset(ruleset)
    raise TypeError(f"ruleset must be a RuleSet or a path, got {type(ruleset).__name__}")
