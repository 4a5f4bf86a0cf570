"""Binary-comparison idiom: two typed parameters.

  new Comparator<Player>() {
      @Override
      public int compare(Player p1, Player p2) {
          return Integer.compare(p2.getScore(), p1.getScore());
      }
  };

becomes ``(p1, p2) -> Integer.compare(p2.getScore(), p1.getScore())``.

Every two-argument implementation is a COMPARATOR unit: the kind names
the binary shape, and the description names the actual interface
(``BinaryOperator``, ``BiConsumer``...). ``void`` bodies use the
single-statement rule, the rest the single ``return`` rule.
"""

from __future__ import annotations

import logging

from lambda_morph.core.ir import IdiomKind, TransformationUnit
from lambda_morph.core.reduce import ReductionRule
from lambda_morph.extract.anonymous import AnonymousClass, find_anonymous_classes, parse_parameters
from lambda_morph.extract.base import build_unit

logger = logging.getLogger(__name__)


def describe_binary(anon: AnonymousClass) -> str:
    simple_name = anon.interface.rsplit(".", 1)[-1]
    if simple_name == "Comparator":
        return "Custom comparator logic"
    return f"Two-argument {simple_name} implementation"


class BinaryComparisonMatcher:
    """Anonymous two-argument implementation -> Comparator unit."""

    def match(self, source: str) -> TransformationUnit | None:
        for anon in find_anonymous_classes(source):
            params = parse_parameters(anon.params_text)
            if params is None or len(params) != 2:
                continue
            rule = ReductionRule.STATEMENT if anon.return_type == "void" else ReductionRule.RETURN
            logger.debug("binary comparison matched %s.%s", anon.interface, anon.method_name)
            return build_unit(
                anon,
                kind=IdiomKind.COMPARATOR,
                params=params,
                rule=rule,
                description=describe_binary(anon),
            )
        return None

    def describe(self) -> str:
        return (
            "new <Interface><TypeArgs>() { <ret> <method>(<T1> a, <T2> b) { ... } }; "
            "-> (a, b) -> ..."
        )
