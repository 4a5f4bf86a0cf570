"""Invariant checks for transformation units.

Each check returns a list of violation strings; an empty list means the
unit passes. The model validator on TransformationUnit already blocks
the arity and duplicate-name cases, the checks here also cover units
that arrive through model_construct() or hand-built library data.
"""

from __future__ import annotations

from lambda_morph.core.ir import IDIOM_ARITY, TransformationUnit
from lambda_morph.core.tokens import TokenKind, significant, tokenize


def check_arity(unit: TransformationUnit) -> list[str]:
    """Parameter count must match the idiom."""
    expected = IDIOM_ARITY[unit.kind]
    if len(unit.core.params) != expected:
        return [
            f"{unit.kind.value}: expected {expected} parameter(s), "
            f"found {len(unit.core.params)}"
        ]
    return []


def check_unique_names(unit: TransformationUnit) -> list[str]:
    """Parameter names are unique and non-empty."""
    violations: list[str] = []
    names = unit.core.names
    if any(not n for n in names):
        violations.append(f"{unit.kind.value}: empty parameter name in {names}")
    dupes = sorted({n for n in names if names.count(n) > 1})
    if dupes:
        violations.append(f"{unit.kind.value}: duplicate parameter names {dupes}")
    return violations


def check_body_braced(unit: TransformationUnit) -> list[str]:
    """The body keeps its braces exactly as written."""
    sig = significant(tokenize(unit.core.body))
    if not sig or sig[0].kind != TokenKind.LBRACE or sig[-1].kind != TokenKind.RBRACE:
        return [f"{unit.kind.value}: body is not wrapped in braces: {unit.core.body!r}"]
    return []


def check_reduction_consistent(unit: TransformationUnit) -> list[str]:
    """An irreducible body is carried through unchanged; a reduced one is bare."""
    violations: list[str] = []
    final = unit.final
    if not final.can_reduce:
        if final.reduced_expression != unit.core.body:
            violations.append(
                f"{unit.kind.value}: can_reduce=False but reduced expression "
                f"differs from the body"
            )
        return violations

    sig = significant(tokenize(final.reduced_expression))
    if not sig:
        violations.append(f"{unit.kind.value}: can_reduce=True with empty expression")
        return violations
    if sig[0].kind == TokenKind.LBRACE and sig[-1].kind == TokenKind.RBRACE:
        violations.append(f"{unit.kind.value}: reduced expression still braced")
    if sig[0].is_word("return"):
        violations.append(f"{unit.kind.value}: reduced expression still starts with return")
    if sig[-1].kind == TokenKind.SEMI:
        violations.append(f"{unit.kind.value}: reduced expression still ends with ';'")
    return violations


def check_boilerplate(unit: TransformationUnit) -> list[str]:
    """Boilerplate start opens with ``new``; end closes the class body."""
    violations: list[str] = []
    start = significant(tokenize(unit.boilerplate.start))
    if not start or not start[0].is_word("new"):
        violations.append(f"{unit.kind.value}: boilerplate start does not begin with 'new'")
    end = significant(tokenize(unit.boilerplate.end))
    if not end or end[-1].kind != TokenKind.RBRACE:
        violations.append(f"{unit.kind.value}: boilerplate end does not close the class")
    return violations


def validate_unit(unit: TransformationUnit) -> list[str]:
    """Run all invariant checks on one unit."""
    violations: list[str] = []
    violations.extend(check_arity(unit))
    violations.extend(check_unique_names(unit))
    violations.extend(check_body_braced(unit))
    violations.extend(check_reduction_consistent(unit))
    violations.extend(check_boilerplate(unit))
    return violations


def validate_all(units: list[TransformationUnit]) -> list[str]:
    """Run invariant checks on a list of units."""
    violations: list[str] = []
    for unit in units:
        violations.extend(validate_unit(unit))
    return violations
