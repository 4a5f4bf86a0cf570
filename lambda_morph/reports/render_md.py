"""Markdown walkthrough generator."""

from __future__ import annotations

from lambda_morph.core.ir import TransformationUnit
from lambda_morph.sequencer.render import Frame
from lambda_morph.sequencer.runner import iter_events
from lambda_morph.sequencer.stages import STAGE_TABLE, total_duration_ms


def _effects_line(frame: Frame) -> str:
    effects = sorted({e.value for s in frame.visible_segments for e in s.effects})
    return ", ".join(effects) if effects else "none"


def render_walkthrough(unit: TransformationUnit, time_scale: float = 1.0) -> str:
    """Render every stage of a morph run as a Markdown document."""
    lines: list[str] = []

    title = unit.description or f"{unit.kind.value} morph"
    lines.append(f"# {title}")
    lines.append("")
    lines.append(f"**Idiom:** {unit.kind.value}")
    lines.append(f"**Parameters:** {unit.arity}")
    lines.append(f"**Reducible:** {'yes' if unit.final.can_reduce else 'no'}")
    lines.append(f"**Run length:** {total_duration_ms(time_scale) / 1000:.1f}s")
    lines.append("")

    lines.append("## Before")
    lines.append("")
    lines.append("```java")
    lines.append(unit.render_source())
    lines.append("```")
    lines.append("")

    lines.append("## Stages")
    lines.append("")
    lines.append("| # | Stage | Hold (ms) | Cue | Description |")
    lines.append("|---|-------|-----------|-----|-------------|")
    for i, (stage, spec) in enumerate(STAGE_TABLE.items(), 1):
        cue = spec.cue.value if spec.cue is not None else "-"
        lines.append(
            f"| {i} | {stage.value} | {spec.hold_ms * time_scale:g} | {cue} | {spec.description} |"
        )
    lines.append("")

    for i, event in enumerate(iter_events(unit), 1):
        frame = event.frame
        lines.append(f"### {i}. {event.stage.value}")
        lines.append("")
        lines.append(f"_{event.description}_")
        lines.append("")
        if event.cue is not None:
            lines.append(f"Cue: `{event.cue.value}`")
            lines.append("")
        lines.append(f"Effects: {_effects_line(frame)}")
        lines.append("")
        lines.append("```java")
        lines.append(frame.text)
        lines.append("```")
        lines.append("")

    lines.append("## After")
    lines.append("")
    lines.append("```java")
    lines.append(unit.render_lambda())
    lines.append("```")
    if not unit.final.can_reduce:
        lines.append("")
        lines.append(
            "The body has more than one statement, so it keeps its braces "
            "and the lambda wraps the block unchanged."
        )
    lines.append("")

    return "\n".join(lines)
