"""Named predicate factories that rule definition files refer to."""

from __future__ import annotations

import inspect
from typing import Any, Callable, Dict, Mapping, Optional

from . import Predicate

COLLABORATORS = ("dictionary", "keyboard", "directory")

PredicateFactory = Callable[..., Predicate]

PREDICATES: Dict[str, PredicateFactory] = {}


def predicate(name: str) -> Callable[[PredicateFactory], PredicateFactory]:
    """Register ``factory`` under ``name``.

    A factory takes the rule's parameters as keyword arguments and returns
    the predicate. Parameters named after a collaborator are filled in from
    the services handed to :func:`build_predicate` instead of the rule file.
    """

    def register(factory: PredicateFactory) -> PredicateFactory:
        if name in PREDICATES:
            raise ValueError(f"predicate {name!r} is already registered")
        PREDICATES[name] = factory
        return factory

    return register


def build_predicate(
    name: str,
    params: Optional[Mapping[str, Any]] = None,
    services: Optional[Mapping[str, Any]] = None,
) -> Predicate:
    """Instantiate the registered predicate ``name``.

    Raises ``KeyError`` for unknown names and ``ValueError`` for bad or
    missing parameters and collaborators.
    """

    try:
        factory = PREDICATES[name]
    except KeyError:
        raise KeyError(f"unknown predicate {name!r}") from None

    kwargs = dict(params or {})
    services = services or {}
    signature = inspect.signature(factory)
    for collaborator in COLLABORATORS:
        if collaborator in kwargs:
            raise ValueError(f"{collaborator!r} cannot be set from a rule definition")
        if collaborator not in signature.parameters:
            continue
        if services.get(collaborator) is None:
            raise ValueError(f"predicate {name!r} requires a {collaborator} collaborator")
        kwargs[collaborator] = services[collaborator]

    try:
        signature.bind(**kwargs)
    except TypeError as exc:
        raise ValueError(f"bad parameters for predicate {name!r}: {exc}") from exc
    return factory(**kwargs)


def available() -> Dict[str, str]:
    """Return registered names with the first line of their documentation."""

    summaries = {}
    for name, factory in sorted(PREDICATES.items()):
        doc = inspect.getdoc(factory) or ""
        summaries[name] = doc.splitlines()[0] if doc else ""
    return summaries
