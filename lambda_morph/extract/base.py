"""Matcher protocol: every idiom matcher is str -> TransformationUnit | None, never raises."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from lambda_morph.core.ir import (
    Boilerplate,
    CoreLogic,
    IdiomKind,
    Parameter,
    TransformationUnit,
)
from lambda_morph.core.reduce import ReductionRule, reduction_for
from lambda_morph.extract.anonymous import AnonymousClass


@runtime_checkable
class IdiomMatcher(Protocol):
    """Protocol for all idiom matchers in the extractor."""

    def match(self, source: str) -> TransformationUnit | None:
        """Return the unit for the first fitting implementation, or None.

        A structural mismatch (including a malformed parameter list) is
        a None result, not an exception.
        """
        ...

    def describe(self) -> str:
        """Human-readable description of the idiom shape."""
        ...


def build_unit(
    anon: AnonymousClass,
    kind: IdiomKind,
    params: list[Parameter],
    rule: ReductionRule,
    description: str = "",
) -> TransformationUnit:
    """Assemble a unit from scanned spans.

    Context is trimmed; a non-empty leading context gets one trailing
    space for display. The trailing context keeps the terminator so the
    surrounding statement stays intact around the lambda.
    """
    before = anon.prefix.strip()
    body = anon.body.strip()
    return TransformationUnit(
        kind=kind,
        description=description,
        context_before=before + " " if before else "",
        context_after=anon.suffix.strip(),
        boilerplate=Boilerplate(
            start=anon.boilerplate_start,
            end=anon.boilerplate_end,
        ),
        core=CoreLogic(params=params, body=body),
        final=reduction_for(body, rule),
    )
