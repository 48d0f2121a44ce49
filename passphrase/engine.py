"""Evaluate a passphrase against the rules attached to its context."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .context import PassphraseContext
from .errors import PreconditionViolation, RuleError
from .result import Outcome
from .rules import RuleSet, Verdict
from .status import RULE_ERROR_CODE, RULE_ERROR_MESSAGE, SUCCESS_CODE, SUCCESS_MESSAGE

logger = logging.getLogger(__name__)


def validate(context: PassphraseContext) -> Outcome:
    """Run the context's ruleset in order and record the outcome on it.

    Each enabled rule's predicate is called with the context and its
    scratch map. A falsy return stops evaluation with that rule's code and
    message unless the predicate already set its own. ``Verdict.ACCEPT``
    stops evaluation with the success outcome. An exception stops
    evaluation with the reserved rule-error outcome; the cause is logged
    and kept on ``context.error`` but never copied into the message.
    """

    if context.passphrase is None:
        raise PreconditionViolation("passphrase must be set before validation")
    if not isinstance(context.ruleset, RuleSet):
        raise PreconditionViolation("context has no ruleset attached")

    context.clear_outcome()

    rules = context.ruleset.rules
    logger.debug("invoking %d rules", len(rules))
    for rule in rules:
        if not rule.evaluable:
            continue

        logger.debug("invoking rule: %s", rule.label)
        try:
            status = rule.validate(context, context.get_data())
            accepted = status is Verdict.ACCEPT
            passed = accepted or bool(status)
        except Exception as exc:
            logger.exception("rule %s raised during evaluation", rule.label)
            context.error = RuleError(rule, exc)
            context.code = RULE_ERROR_CODE
            context.message = RULE_ERROR_MESSAGE
            return context.outcome

        if accepted:
            logger.debug("rule %s accepted the passphrase outright", rule.label)
            break

        if not passed:
            if context.message is None:
                context.message = rule.message
            if context.code is None:
                context.code = rule.code
            if context.code is None:
                logger.warning("rule %s failed without a code", rule.label)
            return context.outcome

    context.code = SUCCESS_CODE
    context.message = SUCCESS_MESSAGE
    return context.outcome


def validate_passphrase(
    passphrase: str,
    username: Optional[str] = None,
    ruleset: Union[RuleSet, Path, str, None] = None,
    data: Optional[Dict[str, Any]] = None,
) -> Dict[str, object]:
    """Check one passphrase and return ``{"code": ..., "message": ...}``.

    This is the shape transport wrappers expose; it never carries rule
    error details.
    """

    logger.debug("validating supplied passphrase")
    context = PassphraseContext(passphrase=passphrase, username=username, ruleset=ruleset, data=data)
    return validate(context).to_dict()
