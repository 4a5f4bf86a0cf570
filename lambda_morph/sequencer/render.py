"""Per-stage rendering of a unit as styled text segments.

render_frame() is pure: the same unit and stage always give the same
frame, and the unit is never touched. Renderers (terminal, Markdown)
decide how effects look; this module only decides which pieces are
visible and which effects apply at each stage.

Until PREPARE_LAMBDA_ASSEMBLY the frame is the anonymous implementation
cut into pieces that fade, shatter and implode. From there on it is the
assembled lambda between the surrounding context.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from lambda_morph.core.ir import TransformationUnit
from lambda_morph.core.tokens import TokenKind, significant, tokenize
from lambda_morph.sequencer.stages import Cue, Stage, cue_for, describe, reached


class Role(str, enum.Enum):
    CONTEXT_BEFORE = "context_before"
    BOILERPLATE_START = "boilerplate_start"
    PAREN_OPEN = "paren_open"
    PARAM_TYPE = "param_type"
    PARAM_NAME = "param_name"
    PARAM_SEP = "param_sep"
    PAREN_CLOSE = "paren_close"
    GAP = "gap"
    ARROW = "arrow"
    BRACE_OPEN = "brace_open"
    RETURN_KEYWORD = "return_keyword"
    BODY = "body"
    TERMINATOR = "terminator"
    BRACE_CLOSE = "brace_close"
    BOILERPLATE_END = "boilerplate_end"
    CONTEXT_AFTER = "context_after"
    LAMBDA = "lambda"


class Effect(str, enum.Enum):
    FADED = "faded"
    HIGHLIGHT = "highlight"
    SHATTERED = "shattered"
    FLAGGED = "flagged"
    SCANLINE = "scanline"
    IMPLODING = "imploding"
    ASSEMBLED = "assembled"
    GLOW = "glow"


@dataclass(frozen=True)
class Segment:
    """One piece of rendered text."""

    role: Role
    text: str
    visible: bool = True
    effects: tuple[Effect, ...] = ()


@dataclass(frozen=True)
class Frame:
    """Everything a renderer needs for one stage."""

    stage: Stage
    description: str
    cue: Cue | None
    segments: tuple[Segment, ...]

    @property
    def visible_segments(self) -> list[Segment]:
        return [s for s in self.segments if s.visible]

    @property
    def text(self) -> str:
        """Concatenated visible text."""
        return "".join(s.text for s in self.visible_segments)


@dataclass(frozen=True)
class BodyParts:
    """A reducible body cut so the pieces concatenate back to it."""

    brace_open: str
    return_keyword: str
    expression: str
    terminator: str
    brace_close: str


def split_body(body: str) -> BodyParts | None:
    """Cut ``{ return expr; }`` into its pieces, verbatim.

    None when the body is not a single braced statement.
    """
    tokens = tokenize(body)
    sig = significant(tokens)
    if len(sig) < 3 or sig[0].kind != TokenKind.LBRACE or sig[-1].kind != TokenKind.RBRACE:
        return None
    inner = sig[1:-1]
    has_return = inner[0].is_word("return")
    has_semi = inner[-1].kind == TokenKind.SEMI
    expr = inner[1 if has_return else 0:len(inner) - (1 if has_semi else 0)]
    if not expr:
        return None
    close = sig[-1]
    tail_start = inner[-1].end if has_semi else expr[-1].end
    return BodyParts(
        brace_open=body[:inner[0].start],
        return_keyword=body[inner[0].start:expr[0].start] if has_return else "",
        expression=body[expr[0].start:expr[-1].end],
        terminator=body[expr[-1].end:tail_start],
        brace_close=body[tail_start:close.end] + body[close.end:],
    )


def _effects(*pairs: tuple[bool, Effect]) -> tuple[Effect, ...]:
    return tuple(effect for on, effect in pairs if on)


def _morph_segments(unit: TransformationUnit, stage: Stage) -> list[Segment]:
    faded_context = reached(stage, Stage.FADE_CONTEXT)
    isolated = reached(stage, Stage.ISOLATE_BOILERPLATE)
    shattered = reached(stage, Stage.SHATTER_BOILERPLATE)
    arrow = reached(stage, Stage.EXECUTE_ARROW_MORPH)
    scanning = reached(stage, Stage.SCAN_TYPES)
    types_gone = reached(stage, Stage.FADE_OUT_TYPES)
    can_reduce = unit.final.can_reduce
    implode_soon = can_reduce and reached(stage, Stage.PREPARE_IMPLOSION)
    imploded = can_reduce and reached(stage, Stage.EXECUTE_IMPLOSION)

    context_fx = _effects((faded_context, Effect.FADED))
    core_fx = _effects((isolated, Effect.HIGHLIGHT))
    boilerplate = dict(
        visible=not shattered,
        effects=_effects((isolated, Effect.FADED), (shattered, Effect.SHATTERED)),
    )
    # A single parameter drops its parentheses; () and (a, b) keep them
    keep_parens = unit.arity != 1 or not arrow

    segments: list[Segment] = [
        Segment(Role.CONTEXT_BEFORE, unit.context_before, effects=context_fx),
        Segment(Role.BOILERPLATE_START, unit.boilerplate.start, **boilerplate),
        Segment(Role.PAREN_OPEN, "(", visible=keep_parens, effects=core_fx),
    ]
    type_fx = _effects(
        (isolated, Effect.HIGHLIGHT),
        (scanning, Effect.FLAGGED),
        (stage == Stage.SCAN_TYPES, Effect.SCANLINE),
    )
    for i, param in enumerate(unit.core.params):
        if i:
            segments.append(Segment(Role.PARAM_SEP, ", ", effects=core_fx))
        if param.type:
            segments.append(
                Segment(Role.PARAM_TYPE, f"{param.type} ", visible=not types_gone, effects=type_fx)
            )
        segments.append(Segment(Role.PARAM_NAME, param.name, effects=core_fx))
    segments.append(Segment(Role.PAREN_CLOSE, ")", visible=keep_parens, effects=core_fx))
    segments.append(Segment(Role.GAP, " ", visible=not arrow))
    segments.append(Segment(Role.ARROW, " -> ", visible=arrow, effects=core_fx))

    parts = split_body(unit.core.body) if can_reduce else None
    if parts is None:
        segments.append(Segment(Role.BODY, unit.core.body, effects=core_fx))
    else:
        ceremony = dict(
            visible=not imploded,
            effects=_effects((isolated, Effect.HIGHLIGHT), (implode_soon, Effect.IMPLODING)),
        )
        segments.extend([
            Segment(Role.BRACE_OPEN, parts.brace_open, **ceremony),
            Segment(Role.RETURN_KEYWORD, parts.return_keyword, **ceremony),
            Segment(Role.BODY, parts.expression, effects=core_fx),
            Segment(Role.TERMINATOR, parts.terminator, **ceremony),
            Segment(Role.BRACE_CLOSE, parts.brace_close, **ceremony),
        ])

    segments.append(Segment(Role.BOILERPLATE_END, unit.boilerplate.end, **boilerplate))
    segments.append(Segment(Role.CONTEXT_AFTER, unit.context_after, effects=context_fx))
    return segments


def _assembled_segments(unit: TransformationUnit, stage: Stage) -> list[Segment]:
    lambda_fx = _effects(
        (reached(stage, Stage.ASSEMBLE_FINAL_LAMBDA), Effect.ASSEMBLED),
        (reached(stage, Stage.FINAL_GLOW), Effect.GLOW),
    )
    return [
        Segment(Role.CONTEXT_BEFORE, unit.context_before, effects=(Effect.FADED,)),
        Segment(Role.LAMBDA, unit.lambda_expression, effects=lambda_fx),
        Segment(Role.CONTEXT_AFTER, unit.context_after, effects=(Effect.FADED,)),
    ]


def render_frame(unit: TransformationUnit, stage: Stage) -> Frame:
    """Render ``unit`` as it appears during ``stage``."""
    if reached(stage, Stage.PREPARE_LAMBDA_ASSEMBLY):
        segments = _assembled_segments(unit, stage)
    else:
        segments = _morph_segments(unit, stage)
    return Frame(
        stage=stage,
        description=describe(stage),
        cue=cue_for(stage),
        segments=tuple(segments),
    )
