"""Extractor: run the registered idiom matchers in priority order.

The first matcher that fits wins. No match is a normal outcome
(``None``) that callers handle by leaving their previous output alone.
"""

from __future__ import annotations

import logging

from lambda_morph.core.ir import TransformationUnit
from lambda_morph.exceptions import UnrecognizedSnippetError
from lambda_morph.extract.base import IdiomMatcher
from lambda_morph.extract.binary import BinaryComparisonMatcher
from lambda_morph.extract.niladic import NiladicActionMatcher, SupplierMatcher
from lambda_morph.extract.unary import UnaryMatcher

logger = logging.getLogger(__name__)

# Priority order; extend by appending matchers
DEFAULT_MATCHERS: tuple[IdiomMatcher, ...] = (
    BinaryComparisonMatcher(),
    NiladicActionMatcher(),
    UnaryMatcher(),
    SupplierMatcher(),
)


class Extractor:
    """Ordered collection of idiom matchers."""

    def __init__(self, matchers: tuple[IdiomMatcher, ...] | None = None) -> None:
        self.matchers = tuple(matchers) if matchers is not None else DEFAULT_MATCHERS

    def extract(self, source: str) -> TransformationUnit | None:
        """Decompose ``source`` into a unit, or None when nothing fits."""
        for matcher in self.matchers:
            unit = matcher.match(source)
            if unit is not None:
                logger.debug("%s recognized %s idiom", type(matcher).__name__, unit.kind.value)
                return unit
        logger.debug("no idiom recognized in %d chars of source", len(source))
        return None

    def describe(self) -> list[str]:
        return [m.describe() for m in self.matchers]


_default_extractor = Extractor()


def extract(source: str) -> TransformationUnit | None:
    """Extract with the default matcher set."""
    return _default_extractor.extract(source)


def extract_or_raise(source: str) -> TransformationUnit:
    """Like extract(), but raise UnrecognizedSnippetError on no match."""
    unit = extract(source)
    if unit is None:
        raise UnrecognizedSnippetError(source)
    return unit
