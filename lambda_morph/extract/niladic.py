"""Zero-argument idioms.

NiladicActionMatcher handles ``void`` methods such as ``Runnable.run``;
the body reduces when it holds exactly one statement. SupplierMatcher
handles value-returning zero-argument methods such as ``Supplier.get``
and reduces a lone ``return`` statement.
"""

from __future__ import annotations

import logging

from lambda_morph.core.ir import IdiomKind, TransformationUnit
from lambda_morph.core.reduce import ReductionRule
from lambda_morph.extract.anonymous import find_anonymous_classes, parse_parameters
from lambda_morph.extract.base import build_unit

logger = logging.getLogger(__name__)


class NiladicActionMatcher:
    """``new X() { void m() { ... } };`` -> Runnable unit."""

    def match(self, source: str) -> TransformationUnit | None:
        for anon in find_anonymous_classes(source):
            if anon.type_args or anon.return_type != "void":
                continue
            if parse_parameters(anon.params_text) != []:
                continue
            logger.debug("niladic action matched %s.%s", anon.interface, anon.method_name)
            return build_unit(
                anon,
                kind=IdiomKind.RUNNABLE,
                params=[],
                rule=ReductionRule.STATEMENT,
                description="Custom runnable task",
            )
        return None

    def describe(self) -> str:
        return "new <Interface>() { void <method>() { ... } }; -> () -> ..."


class SupplierMatcher:
    """``new X<T>() { T m() { return ...; } };`` -> Supplier unit."""

    def match(self, source: str) -> TransformationUnit | None:
        for anon in find_anonymous_classes(source):
            if anon.return_type == "void":
                continue
            if parse_parameters(anon.params_text) != []:
                continue
            logger.debug("supplier matched %s.%s", anon.interface, anon.method_name)
            return build_unit(
                anon,
                kind=IdiomKind.SUPPLIER,
                params=[],
                rule=ReductionRule.RETURN,
                description="Custom value supplier",
            )
        return None

    def describe(self) -> str:
        return "new <Interface><TypeArgs>() { <ret> <method>() { return ...; } }; -> () -> ..."
