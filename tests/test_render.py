"""Tests for per-stage frame rendering."""

from __future__ import annotations

import pytest

from lambda_morph.core.ir import TransformationUnit
from lambda_morph.extract.extractor import extract
from lambda_morph.sequencer.render import Effect, Role, render_frame, split_body
from lambda_morph.sequencer.stages import STAGE_ORDER, Stage


def _roles(unit: TransformationUnit, stage: Stage) -> list[Role]:
    return [s.role for s in render_frame(unit, stage).visible_segments]


class TestSplitBody:
    def test_pieces_concatenate_back(self) -> None:
        body = "{\n    return a.length() - b.length();\n}"
        parts = split_body(body)
        assert parts is not None
        assert parts.return_keyword == "return "
        assert parts.expression == "a.length() - b.length()"
        assert parts.terminator == ";"
        joined = parts.brace_open + parts.return_keyword + parts.expression + parts.terminator + parts.brace_close
        assert joined == body

    def test_statement_body(self) -> None:
        parts = split_body('{ System.out.println("hi"); }')
        assert parts is not None
        assert parts.return_keyword == ""
        assert parts.expression == 'System.out.println("hi")'

    def test_unbraced(self) -> None:
        assert split_body("x + 1") is None


class TestEndpoints:
    def test_initial_is_source(self, comparator_unit: TransformationUnit) -> None:
        assert render_frame(comparator_unit, Stage.INITIAL).text == comparator_unit.render_source()

    def test_done_is_lambda(self, comparator_unit: TransformationUnit) -> None:
        assert render_frame(comparator_unit, Stage.DONE).text == comparator_unit.render_lambda()

    def test_irreducible_endpoints(self, irreducible_unit: TransformationUnit) -> None:
        assert render_frame(irreducible_unit, Stage.INITIAL).text == irreducible_unit.render_source()
        assert render_frame(irreducible_unit, Stage.DONE).text == irreducible_unit.render_lambda()

    def test_extracted_runnable(self, runnable_hi: str) -> None:
        unit = extract(runnable_hi)
        assert unit is not None
        assert render_frame(unit, Stage.INITIAL).text == runnable_hi
        assert render_frame(unit, Stage.EXECUTE_IMPLOSION).text == '() -> System.out.println("hi");'


class TestStageEffects:
    def test_context_fades(self, comparator_unit: TransformationUnit) -> None:
        frame = render_frame(comparator_unit, Stage.FADE_CONTEXT)
        (before,) = [s for s in frame.segments if s.role == Role.CONTEXT_BEFORE]
        assert Effect.FADED in before.effects
        assert before.visible

    def test_boilerplate_gone_after_shatter(self, comparator_unit: TransformationUnit) -> None:
        assert Role.BOILERPLATE_START in _roles(comparator_unit, Stage.ISOLATE_BOILERPLATE)
        roles = _roles(comparator_unit, Stage.SHATTER_BOILERPLATE)
        assert Role.BOILERPLATE_START not in roles
        assert Role.BOILERPLATE_END not in roles

    def test_arrow_appears(self, comparator_unit: TransformationUnit) -> None:
        assert Role.ARROW not in _roles(comparator_unit, Stage.PREPARE_ARROW_MORPH)
        assert Role.ARROW in _roles(comparator_unit, Stage.EXECUTE_ARROW_MORPH)

    def test_types_flagged_then_removed(self, comparator_unit: TransformationUnit) -> None:
        scan = render_frame(comparator_unit, Stage.SCAN_TYPES)
        types = [s for s in scan.segments if s.role == Role.PARAM_TYPE]
        assert len(types) == 2
        assert all(Effect.SCANLINE in s.effects and Effect.FLAGGED in s.effects for s in types)
        assert Role.PARAM_TYPE not in _roles(comparator_unit, Stage.FADE_OUT_TYPES)
        assert render_frame(comparator_unit, Stage.FADE_OUT_TYPES).text == (
            "words.sort((a, b) -> { return a.length() - b.length(); });"
        )

    def test_implosion(self, comparator_unit: TransformationUnit) -> None:
        prepare = render_frame(comparator_unit, Stage.PREPARE_IMPLOSION)
        ret = [s for s in prepare.segments if s.role == Role.RETURN_KEYWORD]
        assert ret and Effect.IMPLODING in ret[0].effects
        assert render_frame(comparator_unit, Stage.EXECUTE_IMPLOSION).text == (
            comparator_unit.render_lambda()
        )

    def test_single_parameter_drops_parens(self, predicate_short: str) -> None:
        unit = extract(predicate_short)
        assert unit is not None
        assert Role.PAREN_OPEN in _roles(unit, Stage.PREPARE_ARROW_MORPH)
        assert Role.PAREN_OPEN not in _roles(unit, Stage.EXECUTE_ARROW_MORPH)
        assert render_frame(unit, Stage.EXECUTE_IMPLOSION).text == unit.render_lambda()

    def test_assembly_and_glow(self, comparator_unit: TransformationUnit) -> None:
        assert _roles(comparator_unit, Stage.PREPARE_LAMBDA_ASSEMBLY) == [
            Role.CONTEXT_BEFORE, Role.LAMBDA, Role.CONTEXT_AFTER,
        ]
        glow = render_frame(comparator_unit, Stage.FINAL_GLOW)
        (lam,) = [s for s in glow.segments if s.role == Role.LAMBDA]
        assert Effect.GLOW in lam.effects
        assert Effect.ASSEMBLED in lam.effects


class TestIrreducible:
    def test_implosion_changes_nothing(self, irreducible_unit: TransformationUnit) -> None:
        texts = {
            render_frame(irreducible_unit, stage).text
            for stage in (Stage.FADE_OUT_TYPES, Stage.PREPARE_IMPLOSION, Stage.EXECUTE_IMPLOSION)
        }
        assert len(texts) == 1

    def test_body_stays_whole(self, irreducible_unit: TransformationUnit) -> None:
        frame = render_frame(irreducible_unit, Stage.EXECUTE_IMPLOSION)
        bodies = [s for s in frame.visible_segments if s.role == Role.BODY]
        assert [s.text for s in bodies] == [irreducible_unit.core.body]
        assert Role.RETURN_KEYWORD not in [s.role for s in frame.segments]


class TestPurity:
    @pytest.mark.parametrize("stage", STAGE_ORDER)
    def test_same_input_same_frame(self, comparator_unit: TransformationUnit, stage: Stage) -> None:
        before = comparator_unit.model_dump()
        assert render_frame(comparator_unit, stage) == render_frame(comparator_unit, stage)
        assert comparator_unit.model_dump() == before

    @pytest.mark.parametrize("stage", STAGE_ORDER)
    def test_frame_metadata(self, comparator_unit: TransformationUnit, stage: Stage) -> None:
        frame = render_frame(comparator_unit, stage)
        assert frame.stage == stage
        assert frame.description
