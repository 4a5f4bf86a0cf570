"""Rich terminal rendering for frames, stage tables and cues."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from lambda_morph.core.ir import TransformationUnit
from lambda_morph.sequencer.render import Effect, Frame, Role
from lambda_morph.sequencer.runner import StageEvent
from lambda_morph.sequencer.stages import STAGE_TABLE, Cue, total_duration_ms

# Later entries win when a segment carries several effects
EFFECT_STYLES: dict[Effect, str] = {
    Effect.FADED: "dim",
    Effect.HIGHLIGHT: "bold cyan",
    Effect.FLAGGED: "bold yellow",
    Effect.SCANLINE: "reverse yellow",
    Effect.IMPLODING: "bold magenta",
    Effect.SHATTERED: "strike red",
    Effect.ASSEMBLED: "bold green",
    Effect.GLOW: "bold bright_green",
}

ROLE_STYLES: dict[Role, str] = {
    Role.BOILERPLATE_START: "blue",
    Role.BOILERPLATE_END: "blue",
    Role.PARAM_TYPE: "yellow",
    Role.ARROW: "bold magenta",
    Role.RETURN_KEYWORD: "magenta",
    Role.LAMBDA: "green",
}


def frame_to_text(frame: Frame) -> Text:
    """Styled rich Text for the visible segments of a frame."""
    text = Text()
    for segment in frame.visible_segments:
        style = ROLE_STYLES.get(segment.role, "")
        for effect in EFFECT_STYLES:
            if effect in segment.effects:
                style = EFFECT_STYLES[effect]
        text.append(segment.text, style=style or None)
    return text


def render_event(event: StageEvent, console: Console | None = None) -> None:
    """Print one stage event as a panel."""
    if console is None:
        console = Console()

    subtitle = event.description
    if event.cue is not None:
        subtitle = f"{subtitle}  [dim]({event.cue.value})[/dim]"
    console.print(
        Panel(
            frame_to_text(event.frame),
            title=f"[bold]{event.stage.value}[/bold]",
            subtitle=subtitle,
            expand=False,
        )
    )


def render_unit_summary(unit: TransformationUnit, console: Console | None = None) -> None:
    """Print the decomposition of a unit."""
    if console is None:
        console = Console()

    table = Table(title=f"{unit.kind.value} ({unit.arity} parameter(s))", show_header=False)
    table.add_column("Part", style="bold")
    table.add_column("Value")
    if unit.description:
        table.add_row("Description", Text(unit.description))
    table.add_row("Boilerplate start", Text(unit.boilerplate.start))
    table.add_row("Parameters", Text(unit.core.typed_params))
    table.add_row("Body", Text(unit.core.body))
    table.add_row("Boilerplate end", Text(unit.boilerplate.end))
    table.add_row("Reducible", "yes" if unit.final.can_reduce else "no")
    table.add_row("Lambda", Text(unit.lambda_expression, style="bold green"))
    console.print(table)


def render_stage_table(time_scale: float = 1.0, console: Console | None = None) -> None:
    """Print the static stage table."""
    if console is None:
        console = Console()

    table = Table(title="Morph Stages")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Stage")
    table.add_column("Hold (ms)", justify="right")
    table.add_column("Cue")
    table.add_column("Description", style="dim")

    for i, (stage, spec) in enumerate(STAGE_TABLE.items(), 1):
        table.add_row(
            str(i),
            stage.value,
            f"{spec.hold_ms * time_scale:g}",
            spec.cue.value if spec.cue is not None else "",
            spec.description,
        )

    console.print(table)
    console.print(f"Total run length: {total_duration_ms(time_scale) / 1000:.1f}s")


class ConsoleCueHook:
    """Cue hook that prints each cue as it fires."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def __call__(self, cue: Cue) -> None:
        self.console.print(f"[dim italic]~ {cue.value} ~[/dim italic]")
