"""CLI entry point using Typer."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import typer

app = typer.Typer(name="lambda-morph", help="Anonymous class to lambda morph visualizer")
export_app = typer.Typer(help="Export utilities")
app.add_typer(export_app, name="export")


@app.callback()
def main(
    log_level: str = typer.Option(None, "--log-level", help="Override LAMBDA_MORPH_LOG_LEVEL"),
) -> None:
    """Configure logging once for every command."""
    from rich.console import Console
    from rich.logging import RichHandler

    from lambda_morph.config import MorphConfig

    level = (log_level or MorphConfig().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_time=False, show_path=False)],
    )


def _read_source(snippet: str | None, file: Path | None) -> str:
    """Snippet text from --file, the argument, stdin ("-"), or the workbench default."""
    from lambda_morph.library.examples import DEFAULT_WORKBENCH_SNIPPET

    if file is not None:
        return file.read_text()
    if snippet == "-":
        return sys.stdin.read()
    if snippet:
        return snippet
    return DEFAULT_WORKBENCH_SNIPPET


def _extract_or_exit(source: str):
    from lambda_morph.exceptions import UnrecognizedSnippetError
    from lambda_morph.extract.extractor import extract_or_raise

    try:
        return extract_or_raise(source)
    except UnrecognizedSnippetError as e:
        typer.echo(e.message, err=True)
        raise typer.Exit(code=1)


def _pick_example(kind: str | None, seed: int | None):
    from lambda_morph.config import MorphConfig
    from lambda_morph.core.ir import IdiomKind
    from lambda_morph.exceptions import ExampleNotFoundError
    from lambda_morph.library.examples import ExamplePicker

    if seed is None:
        seed = MorphConfig().example_seed
    try:
        idiom = IdiomKind(kind) if kind else None
    except ValueError:
        choices = ", ".join(k.value for k in IdiomKind)
        typer.echo(f"Unknown kind '{kind}'. Choose from: {choices}", err=True)
        raise typer.Exit(code=2)
    try:
        return ExamplePicker(seed=seed).pick(idiom)
    except ExampleNotFoundError as e:
        typer.echo(e.message, err=True)
        raise typer.Exit(code=1)


@app.command("extract")
def extract_cmd(
    snippet: str = typer.Argument(None, help="Snippet text, or '-' for stdin"),
    file: Path = typer.Option(None, "--file", "-f", help="Read the snippet from a file"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    output: Path = typer.Option(None, "--output", "-o", help="Also write the unit as JSON"),
) -> None:
    """Decompose a snippet into boilerplate, core logic and lambda."""
    from lambda_morph.core.serialize import export_unit
    from lambda_morph.reports.render_live import render_unit_summary

    unit = _extract_or_exit(_read_source(snippet, file))

    if json_output:
        typer.echo(unit.model_dump_json(indent=2))
    else:
        render_unit_summary(unit)

    if output is not None:
        export_unit(unit, output)
        typer.echo(f"Written to {output}")


@app.command("morph")
def morph_cmd(
    snippet: str = typer.Argument(None, help="Snippet text, or '-' for stdin"),
    file: Path = typer.Option(None, "--file", "-f", help="Read the snippet from a file"),
    example: bool = typer.Option(False, "--example", help="Morph a curated example instead"),
    kind: str = typer.Option(None, "--kind", help="Restrict --example to one idiom kind"),
    time_scale: float = typer.Option(None, "--time-scale", min=0.0, help="Hold multiplier, 0 for no waiting"),
    record_cues: Path = typer.Option(None, "--record-cues", help="Write each fired cue as a WAV file here"),
) -> None:
    """Play the staged morph in the terminal."""
    import asyncio

    from rich.console import Console

    from lambda_morph.audio.hooks import SoundBankCueHook, WavRecorder
    from lambda_morph.config import MorphConfig
    from lambda_morph.reports.render_live import ConsoleCueHook, render_event
    from lambda_morph.sequencer.runner import MorphSequencer

    config = MorphConfig()
    if example:
        unit = _pick_example(kind, None)
    else:
        unit = _extract_or_exit(_read_source(snippet, file))

    console = Console()
    hooks = [ConsoleCueHook(console)]
    recorder = None
    if record_cues is not None:
        recorder = WavRecorder(record_cues)
        hooks.append(SoundBankCueHook(recorder, config.sample_rate, config.cue_volume))

    def fire_cue(cue) -> None:
        for hook in hooks:
            hook(cue)

    sequencer = MorphSequencer(
        on_stage=lambda event: render_event(event, console),
        cue_hook=fire_cue,
        time_scale=config.time_scale if time_scale is None else time_scale,
    )
    completed = asyncio.run(sequencer.run(unit))
    if not completed:
        typer.echo("Morph interrupted", err=True)
        raise typer.Exit(code=1)
    if recorder is not None:
        typer.echo(f"Recorded {len(recorder.paths)} cue(s) to {record_cues}")


@app.command("example")
def example_cmd(
    kind: str = typer.Option(None, "--kind", help="Idiom kind, e.g. Comparator"),
    seed: int = typer.Option(None, "--seed", help="Random seed for the picker"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show a random curated example and its lambda."""
    from lambda_morph.reports.render_live import render_unit_summary

    unit = _pick_example(kind, seed)
    if json_output:
        typer.echo(unit.model_dump_json(indent=2))
        return
    typer.echo(unit.render_source())
    typer.echo("")
    render_unit_summary(unit)


@app.command("stages")
def stages_cmd(
    time_scale: float = typer.Option(1.0, "--time-scale", min=0.0, help="Hold multiplier"),
) -> None:
    """Print the stage table."""
    from lambda_morph.reports.render_live import render_stage_table

    render_stage_table(time_scale)


@app.command("walkthrough")
def walkthrough_cmd(
    snippet: str = typer.Argument(None, help="Snippet text, or '-' for stdin"),
    file: Path = typer.Option(None, "--file", "-f", help="Read the snippet from a file"),
    output: Path = typer.Option(None, "--output", "-o", help="Write Markdown here instead of stdout"),
) -> None:
    """Render every stage of the morph as Markdown."""
    from lambda_morph.reports.render_md import render_walkthrough

    unit = _extract_or_exit(_read_source(snippet, file))
    md = render_walkthrough(unit)
    if output is None:
        typer.echo(md)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(md)
    typer.echo(f"Written to {output}")


@export_app.command("sounds")
def export_sounds(
    directory: Path = typer.Argument(Path("artifacts/sounds"), help="Output directory"),
) -> None:
    """Write one WAV file per cue."""
    from lambda_morph.audio.synth import get_sound_bank
    from lambda_morph.config import MorphConfig

    config = MorphConfig()
    paths = get_sound_bank(config.sample_rate, config.cue_volume).export(directory)
    for path in paths:
        typer.echo(str(path))


@export_app.command("library")
def export_library(
    output: Path = typer.Argument(Path("artifacts/library.json"), help="Output JSON file"),
) -> None:
    """Write the curated example library as JSON."""
    from lambda_morph.core.serialize import export_units
    from lambda_morph.library.examples import ALL_EXAMPLES

    export_units(ALL_EXAMPLES, output)
    typer.echo(f"Exported {len(ALL_EXAMPLES)} examples to {output}")


if __name__ == "__main__":
    app()
