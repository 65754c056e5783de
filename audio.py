"""
Synthesized audio cues.

Short tones are generated as 16-bit PCM and played through
``pygame.mixer.Sound(buffer=...)``, so games need no sound assets. Audio is
cosmetic: if the mixer cannot start (no output device, the browser has not
seen a user gesture yet) cues are skipped without telling the caller.
"""

import logging
import math
from array import array

logger = logging.getLogger(__name__)

WAVEFORMS = ("sine", "square", "triangle", "sawtooth")
DEFAULT_SAMPLE_RATE = 22050


def _wave(waveform, phase):
    # phase in [0, 1)
    if waveform == "sine":
        return math.sin(2.0 * math.pi * phase)
    if waveform == "square":
        return 1.0 if phase < 0.5 else -1.0
    if waveform == "triangle":
        return 4.0 * phase - 1.0 if phase < 0.5 else 3.0 - 4.0 * phase
    return 2.0 * phase - 1.0


def tone_samples(frequency_hz, duration_ms, waveform="square", sample_rate=DEFAULT_SAMPLE_RATE,
                 volume=0.5, channels=1):
    """Return an ``array('h')`` of interleaved samples for one tone.

    A short linear fade at both ends avoids clicks.
    """
    if waveform not in WAVEFORMS:
        raise ValueError("unknown waveform: %r" % (waveform,))
    frames = int(sample_rate * max(0, duration_ms) / 1000.0)
    buf = array("h")
    if frames <= 0 or frequency_hz <= 0:
        return buf
    amp = 32767 * max(0.0, min(1.0, volume))
    fade = max(1, min(frames // 10, int(sample_rate * 0.005)))
    step = float(frequency_hz) / sample_rate
    for i in range(frames):
        env_gain = min(1.0, i / fade, (frames - 1 - i) / fade)
        sample = int(amp * env_gain * _wave(waveform, (i * step) % 1.0))
        for _ in range(channels):
            buf.append(sample)
    return buf


class ToneEmitter:
    """Fire-and-forget tone player."""

    def __init__(self, enabled=True, volume=0.4):
        self.enabled = enabled
        self.volume = volume
        self._cache = {}

    def _mixer(self):
        import pygame

        if not pygame.mixer.get_init():
            try:
                pygame.mixer.init()
            except Exception as e:
                logger.debug("audio unavailable: %s", e)
                return None
        return pygame.mixer

    def play(self, frequency_hz, duration_ms, waveform="square"):
        """Start a tone and return immediately; failures are silent."""
        if not self.enabled:
            return
        try:
            mixer = self._mixer()
            if mixer is None:
                return
            key = (frequency_hz, duration_ms, waveform)
            sound = self._cache.get(key)
            if sound is None:
                rate, _, channels = mixer.get_init()
                pcm = tone_samples(
                    frequency_hz, duration_ms, waveform,
                    sample_rate=rate, volume=self.volume, channels=channels,
                )
                sound = mixer.Sound(buffer=pcm.tobytes())
                self._cache[key] = sound
            sound.play()
        except Exception as e:
            logger.debug("tone %s Hz skipped: %s", frequency_hz, e)
