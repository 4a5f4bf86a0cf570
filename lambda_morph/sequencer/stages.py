"""Stage machine for the anonymous-class -> lambda morph.

Fourteen stages in a fixed linear order. Each stage has a hold duration,
an optional cue for the audio/visual hook and a static description,
all stored in STAGE_TABLE and checked for completeness when the table
is built.

Transitions:
  INITIAL -> FADE_CONTEXT -> ISOLATE_BOILERPLATE -> SHATTER_BOILERPLATE
  -> PREPARE_ARROW_MORPH -> EXECUTE_ARROW_MORPH -> SCAN_TYPES
  -> FADE_OUT_TYPES -> PREPARE_IMPLOSION -> EXECUTE_IMPLOSION
  -> PREPARE_LAMBDA_ASSEMBLY -> ASSEMBLE_FINAL_LAMBDA -> FINAL_GLOW -> DONE
  DONE -> DONE
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field

from lambda_morph.exceptions import StageTableError


class Stage(str, enum.Enum):
    INITIAL = "Initial"
    FADE_CONTEXT = "FadeContext"
    ISOLATE_BOILERPLATE = "IsolateBoilerplate"
    SHATTER_BOILERPLATE = "ShatterBoilerplate"
    PREPARE_ARROW_MORPH = "PrepareArrowMorph"
    EXECUTE_ARROW_MORPH = "ExecuteArrowMorph"
    SCAN_TYPES = "ScanTypes"
    FADE_OUT_TYPES = "FadeOutTypes"
    PREPARE_IMPLOSION = "PrepareImplosion"
    EXECUTE_IMPLOSION = "ExecuteImplosion"
    PREPARE_LAMBDA_ASSEMBLY = "PrepareLambdaAssembly"
    ASSEMBLE_FINAL_LAMBDA = "AssembleFinalLambda"
    FINAL_GLOW = "FinalGlow"
    DONE = "Done"


class Cue(str, enum.Enum):
    """Opaque tags handed to the cue hook."""

    HUM = "hum"
    CRACK = "crack"
    MERGE = "merge"
    FIZZ = "fizz"
    SWOOSH = "swoosh"


STAGE_ORDER: tuple[Stage, ...] = (
    Stage.INITIAL,
    Stage.FADE_CONTEXT,
    Stage.ISOLATE_BOILERPLATE,
    Stage.SHATTER_BOILERPLATE,
    Stage.PREPARE_ARROW_MORPH,
    Stage.EXECUTE_ARROW_MORPH,
    Stage.SCAN_TYPES,
    Stage.FADE_OUT_TYPES,
    Stage.PREPARE_IMPLOSION,
    Stage.EXECUTE_IMPLOSION,
    Stage.PREPARE_LAMBDA_ASSEMBLY,
    Stage.ASSEMBLE_FINAL_LAMBDA,
    Stage.FINAL_GLOW,
    Stage.DONE,
)

INITIAL_STAGE = STAGE_ORDER[0]
TERMINAL_STAGE = STAGE_ORDER[-1]

# Total transition function, saturating at DONE
STAGE_TRANSITIONS: dict[Stage, Stage] = {
    **{a: b for a, b in zip(STAGE_ORDER, STAGE_ORDER[1:])},
    TERMINAL_STAGE: TERMINAL_STAGE,
}

_STAGE_POSITION: dict[Stage, int] = {s: i for i, s in enumerate(STAGE_ORDER)}


class StageSpec(BaseModel):
    """Hold duration, cue and description for one stage."""

    model_config = {"frozen": True, "extra": "forbid"}

    hold_ms: int = Field(gt=0)
    cue: Cue | None = None
    description: str = Field(min_length=1)


def build_stage_table(entries: dict[Stage, StageSpec]) -> dict[Stage, StageSpec]:
    """Validate that every stage has exactly one spec, in stage order.

    Raises StageTableError for a missing or unknown stage; a table that
    builds is safe to index with any Stage.
    """
    missing = [s.value for s in STAGE_ORDER if s not in entries]
    if missing:
        raise StageTableError(f"Stage table missing entries for {missing}", stages=missing)
    unknown = [str(s) for s in entries if s not in _STAGE_POSITION]
    if unknown:
        raise StageTableError(f"Stage table has unknown stages {unknown}", stages=unknown)
    return {s: entries[s] for s in STAGE_ORDER}


STAGE_TABLE: dict[Stage, StageSpec] = build_stage_table({
    Stage.INITIAL: StageSpec(
        hold_ms=100, description="Initializing morph sequence...",
    ),
    Stage.FADE_CONTEXT: StageSpec(
        hold_ms=1000,
        description="Fading out surrounding code to focus on the core logic.",
    ),
    Stage.ISOLATE_BOILERPLATE: StageSpec(
        hold_ms=1000, cue=Cue.HUM,
        description="Highlighting the verbose boilerplate syntax.",
    ),
    Stage.SHATTER_BOILERPLATE: StageSpec(
        hold_ms=1500, cue=Cue.CRACK,
        description="Shattering the unnecessary ceremony code.",
    ),
    Stage.PREPARE_ARROW_MORPH: StageSpec(
        hold_ms=800, description="Preparing to forge the lambda arrow '->'.",
    ),
    Stage.EXECUTE_ARROW_MORPH: StageSpec(
        hold_ms=800, cue=Cue.MERGE,
        description="The lambda arrow is born from the old syntax.",
    ),
    Stage.SCAN_TYPES: StageSpec(
        hold_ms=1000, description="Scanning for redundant type definitions.",
    ),
    Stage.FADE_OUT_TYPES: StageSpec(
        hold_ms=800, cue=Cue.FIZZ,
        description="Compiler inference makes explicit types unnecessary.",
    ),
    Stage.PREPARE_IMPLOSION: StageSpec(
        hold_ms=800,
        description="Identifying single-line return that can be simplified.",
    ),
    Stage.EXECUTE_IMPLOSION: StageSpec(
        hold_ms=1000, cue=Cue.SWOOSH,
        description="Imploding brackets, return statement, and semicolon.",
    ),
    Stage.PREPARE_LAMBDA_ASSEMBLY: StageSpec(
        hold_ms=800, description="The essential components are all that remain.",
    ),
    Stage.ASSEMBLE_FINAL_LAMBDA: StageSpec(
        hold_ms=1200, description="Assembling the final, elegant lambda expression.",
    ),
    Stage.FINAL_GLOW: StageSpec(
        hold_ms=1000, cue=Cue.HUM,
        description="Morph complete. Behold the power of lambdas.",
    ),
    Stage.DONE: StageSpec(
        hold_ms=1500, description="Ready for the next transformation.",
    ),
})


def advance(stage: Stage) -> Stage:
    """Next stage; DONE maps to itself."""
    return STAGE_TRANSITIONS[stage]


def reached(stage: Stage, threshold: Stage) -> bool:
    """Whether ``stage`` is at or past ``threshold`` in the fixed order."""
    return _STAGE_POSITION[stage] >= _STAGE_POSITION[threshold]


def describe(stage: Stage) -> str:
    return STAGE_TABLE[stage].description


def cue_for(stage: Stage) -> Cue | None:
    return STAGE_TABLE[stage].cue


def hold_seconds(stage: Stage, time_scale: float = 1.0) -> float:
    """Hold duration of ``stage`` in seconds, scaled."""
    return STAGE_TABLE[stage].hold_ms * time_scale / 1000.0


def timeline(time_scale: float = 1.0) -> list[tuple[Stage, float]]:
    """(stage, entry time in ms) for one full run."""
    entries: list[tuple[Stage, float]] = []
    elapsed = 0.0
    for stage in STAGE_ORDER:
        entries.append((stage, elapsed))
        elapsed += STAGE_TABLE[stage].hold_ms * time_scale
    return entries


def total_duration_ms(time_scale: float = 1.0) -> float:
    """Time from entering INITIAL until the completion hook fires."""
    return sum(spec.hold_ms for spec in STAGE_TABLE.values()) * time_scale


def stage_at(elapsed_ms: float, time_scale: float = 1.0) -> Stage:
    """The stage a run shows ``elapsed_ms`` after it started."""
    current = INITIAL_STAGE
    for stage, entered in timeline(time_scale):
        if elapsed_ms < entered:
            break
        current = stage
    return current
