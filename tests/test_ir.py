"""Tests for core IR types."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from lambda_morph.core.ir import (
    IDIOM_ARITY,
    Boilerplate,
    CoreLogic,
    IdiomKind,
    Parameter,
    Reduction,
    TransformationUnit,
)


def _unit(kind: IdiomKind, params: list[Parameter], body: str = "{ return x; }") -> TransformationUnit:
    return TransformationUnit(
        kind=kind,
        boilerplate=Boilerplate(start="new X() {\n    public Object m", end="\n}"),
        core=CoreLogic(params=params, body=body),
        final=Reduction(reduced_expression="x", can_reduce=True),
    )


class TestIdiomArity:
    def test_every_kind_has_arity(self) -> None:
        assert set(IDIOM_ARITY) == set(IdiomKind)

    def test_values(self) -> None:
        assert IDIOM_ARITY[IdiomKind.COMPARATOR] == 2
        assert IDIOM_ARITY[IdiomKind.RUNNABLE] == 0
        assert IDIOM_ARITY[IdiomKind.SUPPLIER] == 0
        assert IDIOM_ARITY[IdiomKind.PREDICATE] == 1


class TestUnitValidation:
    def test_arity_mismatch_rejected(self) -> None:
        with pytest.raises(ValidationError, match="parameter"):
            _unit(IdiomKind.COMPARATOR, [Parameter(type="T", name="a")])

    def test_duplicate_names_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Duplicate"):
            _unit(
                IdiomKind.COMPARATOR,
                [Parameter(type="T", name="a"), Parameter(type="T", name="a")],
            )

    def test_runnable_without_params(self) -> None:
        unit = _unit(IdiomKind.RUNNABLE, [])
        assert unit.arity == 0
        assert unit.core.params == ()


class TestUnitImmutability:
    def test_frozen_field(self, comparator_unit: TransformationUnit) -> None:
        with pytest.raises(ValidationError):
            comparator_unit.kind = IdiomKind.RUNNABLE  # type: ignore[misc]

    def test_frozen_nested(self, comparator_unit: TransformationUnit) -> None:
        with pytest.raises(ValidationError):
            comparator_unit.core.body = "{ }"  # type: ignore[misc]

    def test_params_are_a_tuple(self, comparator_unit: TransformationUnit) -> None:
        params = comparator_unit.core.params
        assert isinstance(params, tuple)
        with pytest.raises(AttributeError):
            params.append(Parameter(type="String", name="c"))  # type: ignore[attr-defined]

    def test_list_input_is_frozen(self) -> None:
        names = [Parameter(type="T", name="a")]
        core = CoreLogic(params=names, body="{}")
        names.append(Parameter(type="T", name="b"))
        assert core.names == ["a"]

    def test_structural_equality(self, comparator_unit: TransformationUnit) -> None:
        copy = TransformationUnit.model_validate(comparator_unit.model_dump())
        assert copy == comparator_unit


class TestRendering:
    def test_typed_params(self, comparator_unit: TransformationUnit) -> None:
        assert comparator_unit.core.typed_params == "(String a, String b)"

    def test_lambda_head_shapes(self) -> None:
        assert CoreLogic(params=[], body="{}").lambda_head == "()"
        assert CoreLogic(params=[Parameter(type="T", name="x")], body="{}").lambda_head == "x"
        two = CoreLogic(
            params=[Parameter(type="T", name="a"), Parameter(type="T", name="b")], body="{}",
        )
        assert two.lambda_head == "(a, b)"

    def test_untyped_parameter_str(self) -> None:
        assert str(Parameter(name="x")) == "x"
        assert str(Parameter(type="int", name="x")) == "int x"

    def test_lambda_expression(self, comparator_unit: TransformationUnit) -> None:
        assert comparator_unit.lambda_expression == "(a, b) -> a.length() - b.length()"

    def test_render_source(self, comparator_unit: TransformationUnit) -> None:
        assert comparator_unit.render_source() == (
            "words.sort(new Comparator<String>() {\n    public int compare"
            "(String a, String b) { return a.length() - b.length(); }\n});"
        )

    def test_render_lambda(self, comparator_unit: TransformationUnit) -> None:
        assert comparator_unit.render_lambda() == "words.sort((a, b) -> a.length() - b.length());"

    def test_irreducible_lambda_keeps_block(self, irreducible_unit: TransformationUnit) -> None:
        assert irreducible_unit.lambda_expression == "() -> { prepare(); execute(); }"
