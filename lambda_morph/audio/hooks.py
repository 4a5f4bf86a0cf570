"""Cue hooks backed by the shared sound bank."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import numpy as np

from lambda_morph.audio.synth import SoundBank, get_sound_bank, to_wav_bytes
from lambda_morph.sequencer.stages import Cue

logger = logging.getLogger(__name__)

Player = Callable[[Cue, np.ndarray, int], None]


class SoundBankCueHook:
    """Looks up the cue's samples and hands them to a player.

    The bank is fetched on the first cue, so a run that never fires a
    cue never renders any audio.
    """

    def __init__(
        self,
        player: Player,
        sample_rate: int = 22050,
        volume: float = 1.0,
    ) -> None:
        self.player = player
        self.sample_rate = sample_rate
        self.volume = volume
        self._bank: SoundBank | None = None

    @property
    def bank(self) -> SoundBank:
        if self._bank is None:
            self._bank = get_sound_bank(self.sample_rate, self.volume)
        return self._bank

    def __call__(self, cue: Cue) -> None:
        self.player(cue, self.bank.samples(cue), self.bank.sample_rate)


class WavRecorder:
    """Player that writes every fired cue to a numbered WAV file."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self.paths: list[Path] = []

    def __call__(self, cue: Cue, samples: np.ndarray, sample_rate: int) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / f"{len(self.paths) + 1:02d}-{cue.value}.wav"
        path.write_bytes(to_wav_bytes(samples, sample_rate))
        self.paths.append(path)
        logger.debug("recorded cue %s to %s", cue.value, path)
