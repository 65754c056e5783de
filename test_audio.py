"""Tone synthesis and the fire-and-forget emitter."""

import pygame
import pytest

from audio import WAVEFORMS, ToneEmitter, tone_samples


@pytest.mark.parametrize("waveform", WAVEFORMS)
def test_tone_length_and_range(waveform):
    samples = tone_samples(440, 100, waveform, sample_rate=8000, volume=0.5)
    assert len(samples) == 800
    assert max(abs(s) for s in samples) <= 32767 * 0.5 + 1
    assert any(s != 0 for s in samples)


def test_stereo_duplicates_each_frame():
    samples = tone_samples(440, 10, "sine", sample_rate=8000, channels=2)
    assert len(samples) == 160
    assert all(samples[i] == samples[i + 1] for i in range(0, len(samples), 2))


def test_edges_fade_to_silence():
    samples = tone_samples(440, 50, "square", sample_rate=8000)
    assert samples[0] == 0
    assert samples[-1] == 0


def test_empty_tone():
    assert len(tone_samples(440, 0)) == 0
    assert len(tone_samples(0, 100)) == 0


def test_unknown_waveform_rejected():
    with pytest.raises(ValueError):
        tone_samples(440, 100, "noise")


def test_play_swallows_unknown_waveform():
    ToneEmitter().play(440, 50, "noise")


def test_play_swallows_mixer_failure(monkeypatch):
    def broken_init(*args, **kwargs):
        raise pygame.error("no audio device")

    monkeypatch.setattr(pygame.mixer, "get_init", lambda: None)
    monkeypatch.setattr(pygame.mixer, "init", broken_init)
    emitter = ToneEmitter()
    emitter.play(440, 50, "sine")
    assert emitter._cache == {}


def test_disabled_emitter_does_nothing(monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("mixer touched")

    monkeypatch.setattr(pygame.mixer, "init", fail)
    monkeypatch.setattr(pygame.mixer, "get_init", fail)
    ToneEmitter(enabled=False).play(440, 50, "sine")


def test_play_caches_sounds(monkeypatch):
    played = []

    class FakeSound:
        def __init__(self, buffer):
            self.buffer = buffer

        def play(self):
            played.append(self)

    monkeypatch.setattr(pygame.mixer, "get_init", lambda: (22050, -16, 1))
    monkeypatch.setattr(pygame.mixer, "Sound", FakeSound)
    emitter = ToneEmitter()
    emitter.play(440, 20, "triangle")
    emitter.play(440, 20, "triangle")
    assert len(played) == 2
    assert played[0] is played[1]
    assert len(played[0].buffer) == 2 * int(22050 * 0.02)
