"""Tests for cue synthesis and the sound-bank cue hooks."""

from __future__ import annotations

import io
import wave
from pathlib import Path

import numpy as np
import pytest

from lambda_morph.audio.hooks import SoundBankCueHook, WavRecorder
from lambda_morph.audio.synth import (
    RECIPES,
    SoundBank,
    ToneRecipe,
    get_sound_bank,
    render_tone,
    synthesize,
    to_wav_bytes,
)
from lambda_morph.sequencer.stages import Cue

RATE = 8000


class TestSynthesize:
    def test_every_cue_has_a_recipe(self) -> None:
        assert set(RECIPES) == set(Cue)

    @pytest.mark.parametrize("cue", list(Cue))
    def test_samples_in_range(self, cue: Cue) -> None:
        samples = synthesize(cue, RATE)
        assert samples.dtype == np.float32
        assert len(samples) > 0
        assert np.all(np.abs(samples) <= 1.0)
        assert np.max(np.abs(samples)) > 0

    def test_deterministic(self) -> None:
        np.testing.assert_array_equal(synthesize(Cue.CRACK, RATE), synthesize(Cue.CRACK, RATE))

    def test_crack_is_ten_bursts(self) -> None:
        assert len(RECIPES[Cue.CRACK]) == 10
        assert all(500 <= r.freq_start <= 2500 for r in RECIPES[Cue.CRACK])

    def test_volume_scales(self) -> None:
        full = synthesize(Cue.HUM, RATE, volume=1.0)
        half = synthesize(Cue.HUM, RATE, volume=0.5)
        np.testing.assert_allclose(half, full * 0.5, atol=1e-6)

    def test_durations(self) -> None:
        assert len(synthesize(Cue.SWOOSH, RATE)) == pytest.approx(0.2 * RATE, abs=2)
        assert len(synthesize(Cue.HUM, RATE)) == pytest.approx(0.5 * RATE, abs=2)

    def test_linear_envelope_reaches_zero(self) -> None:
        recipe = ToneRecipe("square", 1200, 1200, "linear", 0.15, 0.1, 0.0, "linear", 0.15)
        tone = render_tone(recipe, RATE)
        assert abs(tone[-1]) < 0.01
        assert np.max(np.abs(tone[:10])) == pytest.approx(0.1, abs=0.01)

    def test_unknown_waveform(self) -> None:
        recipe = ToneRecipe("organ", 440, 440, "linear", 0.1, 0.1, 0.0, "linear", 0.1)
        with pytest.raises(ValueError, match="organ"):
            render_tone(recipe, RATE)


class TestWav:
    def test_header(self) -> None:
        data = to_wav_bytes(synthesize(Cue.FIZZ, RATE), RATE)
        assert data[:4] == b"RIFF"
        with wave.open(io.BytesIO(data)) as wav:
            assert wav.getnchannels() == 1
            assert wav.getsampwidth() == 2
            assert wav.getframerate() == RATE

    def test_bank_export(self, tmp_path: Path) -> None:
        paths = SoundBank(RATE).export(tmp_path / "sounds")
        assert sorted(p.name for p in paths) == sorted(f"{c.value}.wav" for c in Cue)
        assert all(p.stat().st_size > 44 for p in paths)


class TestSoundBank:
    def test_shared_instance(self) -> None:
        assert get_sound_bank(RATE) is get_sound_bank(RATE)
        assert get_sound_bank(RATE) is not get_sound_bank(RATE * 2)

    def test_duration(self) -> None:
        bank = get_sound_bank(RATE)
        assert bank.duration(Cue.FIZZ) == pytest.approx(0.15, abs=0.01)


class TestCueHooks:
    def test_hook_feeds_player(self) -> None:
        played: list[tuple[Cue, int, int]] = []
        hook = SoundBankCueHook(lambda cue, samples, rate: played.append((cue, len(samples), rate)), RATE)
        hook(Cue.MERGE)
        assert played[0][0] == Cue.MERGE
        assert played[0][1] == len(get_sound_bank(RATE).samples(Cue.MERGE))
        assert played[0][2] == RATE

    def test_bank_fetched_lazily(self) -> None:
        hook = SoundBankCueHook(lambda *args: None, RATE)
        assert hook._bank is None
        hook(Cue.HUM)
        assert hook._bank is get_sound_bank(RATE, 1.0)

    def test_recorder_numbers_files(self, tmp_path: Path) -> None:
        recorder = WavRecorder(tmp_path)
        hook = SoundBankCueHook(recorder, RATE)
        hook(Cue.HUM)
        hook(Cue.CRACK)
        assert [p.name for p in recorder.paths] == ["01-hum.wav", "02-crack.wav"]
        assert all(p.exists() for p in recorder.paths)
