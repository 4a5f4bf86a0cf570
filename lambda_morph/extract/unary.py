"""One-argument idioms: Predicate, Function and Consumer shapes.

The kind follows the declared interface where it names one of the
three, otherwise the method's return type decides: ``boolean`` reads as
a predicate, ``void`` as a consumer, anything else as a function.
``void`` bodies use the single-statement rule, the rest the single
``return`` rule.
"""

from __future__ import annotations

import logging

from lambda_morph.core.ir import IdiomKind, TransformationUnit
from lambda_morph.core.reduce import ReductionRule
from lambda_morph.extract.anonymous import AnonymousClass, find_anonymous_classes, parse_parameters
from lambda_morph.extract.base import build_unit

logger = logging.getLogger(__name__)

_INTERFACE_KINDS: dict[str, IdiomKind] = {
    "Predicate": IdiomKind.PREDICATE,
    "Function": IdiomKind.FUNCTION,
    "Consumer": IdiomKind.CONSUMER,
}

_DESCRIPTIONS: dict[IdiomKind, str] = {
    IdiomKind.PREDICATE: "Custom predicate test",
    IdiomKind.FUNCTION: "Custom mapping function",
    IdiomKind.CONSUMER: "Custom consumer action",
}


def classify_unary(anon: AnonymousClass) -> IdiomKind:
    """Pick the unary kind from the interface name, then the return type."""
    simple_name = anon.interface.rsplit(".", 1)[-1]
    if simple_name in _INTERFACE_KINDS:
        return _INTERFACE_KINDS[simple_name]
    if anon.return_type == "boolean":
        return IdiomKind.PREDICATE
    if anon.return_type == "void":
        return IdiomKind.CONSUMER
    return IdiomKind.FUNCTION


class UnaryMatcher:
    """Anonymous one-argument implementation -> Predicate/Function/Consumer unit."""

    def match(self, source: str) -> TransformationUnit | None:
        for anon in find_anonymous_classes(source):
            params = parse_parameters(anon.params_text)
            if params is None or len(params) != 1:
                continue
            kind = classify_unary(anon)
            rule = ReductionRule.STATEMENT if anon.return_type == "void" else ReductionRule.RETURN
            logger.debug("unary %s matched %s.%s", kind.value, anon.interface, anon.method_name)
            return build_unit(
                anon,
                kind=kind,
                params=params,
                rule=rule,
                description=_DESCRIPTIONS[kind],
            )
        return None

    def describe(self) -> str:
        return "new <Interface><TypeArgs>() { <ret> <method>(<T> x) { ... } }; -> x -> ..."
