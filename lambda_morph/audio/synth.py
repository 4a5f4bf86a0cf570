"""Cue sound synthesis.

Each cue has a short oscillator recipe (waveform, frequency curve, gain
envelope). The SoundBank renders all of them on first use and keeps
them for the life of the process; get_sound_bank() is the shared,
lazily-built instance.

Samples are float32 in [-1, 1]; to_wav_bytes() converts to 16-bit PCM.
"""

from __future__ import annotations

import io
import logging
import wave
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

import numpy as np

from lambda_morph.sequencer.stages import Cue

logger = logging.getLogger(__name__)

# Fixed seed so the crack burst sounds the same on every run
_CRACK_SEED = 1729


@dataclass(frozen=True)
class ToneRecipe:
    """One oscillator: waveform, frequency sweep and gain envelope."""

    waveform: str  # sine | square | sawtooth | triangle
    freq_start: float
    freq_end: float
    sweep: str  # exponential | linear
    sweep_seconds: float
    gain_start: float
    gain_end: float
    envelope: str  # exponential | linear
    duration: float
    offset: float = 0.0


def _crack_recipes() -> tuple[ToneRecipe, ...]:
    rng = np.random.default_rng(_CRACK_SEED)
    return tuple(
        ToneRecipe(
            waveform="sawtooth",
            freq_start=f, freq_end=f, sweep="linear", sweep_seconds=0.05,
            gain_start=0.2, gain_end=0.0001, envelope="exponential",
            duration=0.05, offset=i * 0.01,
        )
        for i, f in enumerate(500 + rng.random(10) * 2000)
    )


RECIPES: dict[Cue, tuple[ToneRecipe, ...]] = {
    Cue.HUM: (
        ToneRecipe("sine", 80, 80, "linear", 0.5, 0.1, 0.0001, "exponential", 0.5),
    ),
    Cue.CRACK: _crack_recipes(),
    Cue.SWOOSH: (
        ToneRecipe("sine", 2000, 200, "exponential", 0.2, 0.2, 0.0001, "exponential", 0.2),
    ),
    Cue.FIZZ: (
        ToneRecipe("square", 1200, 1200, "linear", 0.15, 0.1, 0.0, "linear", 0.15),
    ),
    Cue.MERGE: (
        ToneRecipe("triangle", 440, 880, "linear", 0.1, 0.3, 0.0001, "exponential", 0.2),
    ),
}


def _ramp(start: float, end: float, t: np.ndarray, span: float, shape: str) -> np.ndarray:
    """Value ramp from start to end over ``span`` seconds, then held."""
    frac = np.clip(t / span, 0.0, 1.0) if span > 0 else np.ones_like(t)
    if shape == "exponential" and start > 0 and end > 0:
        return start * (end / start) ** frac
    return start + (end - start) * frac


def _oscillate(waveform: str, phase: np.ndarray) -> np.ndarray:
    cycles = phase / (2 * np.pi)
    if waveform == "sine":
        return np.sin(phase)
    if waveform == "square":
        return np.sign(np.sin(phase))
    saw = 2.0 * (cycles - np.floor(cycles + 0.5))
    if waveform == "sawtooth":
        return saw
    if waveform == "triangle":
        return 2.0 * np.abs(saw) - 1.0
    raise ValueError(f"Unknown waveform '{waveform}'")


def render_tone(recipe: ToneRecipe, sample_rate: int) -> np.ndarray:
    """Samples for one recipe, without its offset."""
    n = max(int(round(recipe.duration * sample_rate)), 1)
    t = np.arange(n) / sample_rate
    freq = _ramp(recipe.freq_start, recipe.freq_end, t, recipe.sweep_seconds, recipe.sweep)
    phase = 2 * np.pi * np.cumsum(freq) / sample_rate
    gain = _ramp(recipe.gain_start, recipe.gain_end, t, recipe.duration, recipe.envelope)
    return (_oscillate(recipe.waveform, phase) * gain).astype(np.float32)


def synthesize(cue: Cue, sample_rate: int = 22050, volume: float = 1.0) -> np.ndarray:
    """Mix all recipes of a cue into one buffer."""
    recipes = RECIPES[cue]
    total = max(r.offset + r.duration for r in recipes)
    out = np.zeros(int(round(total * sample_rate)) + 1, dtype=np.float32)
    for recipe in recipes:
        tone = render_tone(recipe, sample_rate)
        start = int(round(recipe.offset * sample_rate))
        stop = min(start + len(tone), len(out))
        out[start:stop] += tone[:stop - start]
    return np.clip(out * volume, -1.0, 1.0)


def to_wav_bytes(samples: np.ndarray, sample_rate: int) -> bytes:
    """Encode float samples as mono 16-bit PCM WAV."""
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype("<i2")
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        wav.writeframes(pcm.tobytes())
    return buf.getvalue()


class SoundBank:
    """Rendered samples for every cue at one sample rate and volume."""

    def __init__(self, sample_rate: int = 22050, volume: float = 1.0) -> None:
        self.sample_rate = sample_rate
        self.volume = volume
        self._samples: dict[Cue, np.ndarray] = {
            cue: synthesize(cue, sample_rate, volume) for cue in Cue
        }
        logger.debug("sound bank rendered at %d Hz", sample_rate)

    def samples(self, cue: Cue) -> np.ndarray:
        return self._samples[cue]

    def duration(self, cue: Cue) -> float:
        return len(self._samples[cue]) / self.sample_rate

    def wav_bytes(self, cue: Cue) -> bytes:
        return to_wav_bytes(self._samples[cue], self.sample_rate)

    def export(self, directory: str | Path) -> list[Path]:
        """Write one ``<cue>.wav`` per cue. Returns the written paths."""
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        paths: list[Path] = []
        for cue in Cue:
            path = directory / f"{cue.value}.wav"
            path.write_bytes(self.wav_bytes(cue))
            paths.append(path)
        return paths


@lru_cache(maxsize=None)
def get_sound_bank(sample_rate: int = 22050, volume: float = 1.0) -> SoundBank:
    """Shared SoundBank, built on first request and reused afterwards."""
    return SoundBank(sample_rate, volume)
