"""MorphSequencer: drives one unit through the stage machine on a timer.

One asyncio task per run. The task enters a stage, notifies listeners,
fires the stage's cue, holds for the stage's duration and advances,
until DONE's hold elapses and the completion hook fires once.

Starting a new run (or cancelling) bumps the generation counter and
cancels the old task. Every wake-up re-checks the generation, so a
superseded run that still wakes up does nothing observable.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterator

from lambda_morph.core.ir import TransformationUnit
from lambda_morph.sequencer.render import Frame, render_frame
from lambda_morph.sequencer.stages import (
    INITIAL_STAGE,
    STAGE_ORDER,
    TERMINAL_STAGE,
    Cue,
    Stage,
    advance,
    cue_for,
    describe,
    hold_seconds,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StageEvent:
    """What listeners see on every stage change."""

    run_id: int
    stage: Stage
    description: str
    cue: Cue | None
    frame: Frame


StageListener = Callable[[StageEvent], None]
CueHook = Callable[[Cue], None]
CompletionHook = Callable[[], None]
Sleep = Callable[[float], Awaitable[None]]


def make_event(unit: TransformationUnit, stage: Stage, run_id: int = 0) -> StageEvent:
    return StageEvent(
        run_id=run_id,
        stage=stage,
        description=describe(stage),
        cue=cue_for(stage),
        frame=render_frame(unit, stage),
    )


def iter_events(unit: TransformationUnit, run_id: int = 0) -> Iterator[StageEvent]:
    """Every stage of one run, in order, without waiting."""
    for stage in STAGE_ORDER:
        yield make_event(unit, stage, run_id)


class MorphSequencer:
    """Timer-driven stage sequencer with generation-guarded cancellation.

    Must be started from inside a running event loop.
    """

    def __init__(
        self,
        on_stage: StageListener | None = None,
        on_complete: CompletionHook | None = None,
        cue_hook: CueHook | None = None,
        time_scale: float = 1.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if time_scale < 0:
            raise ValueError(f"time_scale must be >= 0, got {time_scale}")
        self.on_stage = on_stage
        self.on_complete = on_complete
        self.cue_hook = cue_hook
        self.time_scale = time_scale
        self._sleep = sleep
        self._generation = 0
        self._task: asyncio.Task | None = None
        self._unit: TransformationUnit | None = None
        self._stage: Stage | None = None
        self._last_completed: int | None = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def unit(self) -> TransformationUnit | None:
        return self._unit

    @property
    def current_stage(self) -> Stage | None:
        return self._stage

    @property
    def description(self) -> str:
        return describe(self._stage) if self._stage is not None else ""

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(
        self,
        unit: TransformationUnit,
        on_complete: CompletionHook | None = None,
    ) -> int:
        """Begin a fresh run at INITIAL, superseding any active run.

        Returns the run id carried by this run's events.
        """
        self.cancel()
        run_id = self._generation
        self._unit = unit
        self._stage = None
        hook = on_complete if on_complete is not None else self.on_complete
        self._task = asyncio.create_task(
            self._run(run_id, unit, hook), name=f"morph-run-{run_id}",
        )
        logger.debug("morph run %d started (%s)", run_id, unit.kind.value)
        return run_id

    def cancel(self) -> None:
        """Invalidate the active run, if any."""
        self._generation += 1
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            logger.debug("morph run %d superseded", self._generation - 1)

    async def wait(self) -> None:
        """Wait until the active run completes or is cancelled.

        An exception raised by a stage listener or the completion hook
        ends the run and is re-raised here.
        """
        task = self._task
        if task is not None:
            await asyncio.wait({task})
            if not task.cancelled():
                task.result()

    async def run(
        self,
        unit: TransformationUnit,
        on_complete: CompletionHook | None = None,
    ) -> bool:
        """Start a run and wait for it. True if it reached completion."""
        run_id = self.start(unit, on_complete)
        await self.wait()
        return self._last_completed == run_id

    def _is_current(self, run_id: int) -> bool:
        return run_id == self._generation

    async def _run(
        self,
        run_id: int,
        unit: TransformationUnit,
        on_complete: CompletionHook | None,
    ) -> None:
        stage = INITIAL_STAGE
        while True:
            if not self._is_current(run_id):
                return
            self._enter(run_id, unit, stage)
            await self._sleep(hold_seconds(stage, self.time_scale))
            if not self._is_current(run_id):
                return
            if stage == TERMINAL_STAGE:
                break
            stage = advance(stage)

        self._last_completed = run_id
        logger.info("morph run %d complete (%s)", run_id, unit.kind.value)
        if on_complete is not None:
            on_complete()

    def _enter(self, run_id: int, unit: TransformationUnit, stage: Stage) -> None:
        self._stage = stage
        event = make_event(unit, stage, run_id)
        if self.on_stage is not None:
            self.on_stage(event)
            # The listener may have started or cancelled a run
            if not self._is_current(run_id):
                return
        if event.cue is not None and self.cue_hook is not None:
            try:
                self.cue_hook(event.cue)
            except Exception:
                logger.warning("cue hook failed for %s", event.cue.value, exc_info=True)
