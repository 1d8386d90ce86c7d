"""logic/cues.py — Audio cues derived from consecutive states.

The simulation never plays sound.  After each tick the run controller
compares the previous and next state and emits ``SoundCue`` events;
whatever ``AudioCueSink`` was injected plays them.

    step     the player moved (random, ``step_chance`` of ticks)
    hide     the player just got behind a tree
    danger   detection rose past ``DANGER_THRESHOLD``
    caught   the run was lost this tick
    escape   the run was won this tick
"""

from __future__ import annotations
import array
import math
import random

import pygame

from core.constants import DANGER_THRESHOLD
from core.events import SoundCue
from core.tuning import get as _tun
from components.state import SimState, Phase


def cues_for(prev: SimState, nxt: SimState,
             rng: random.Random | None = None) -> list[SoundCue]:
    rng = rng or random
    cues: list[SoundCue] = []
    if nxt.moved and rng.random() < _tun("audio", "step_chance", 0.3):
        cues.append(SoundCue("step"))
    if nxt.hidden and not prev.hidden:
        cues.append(SoundCue("hide"))
    if nxt.detection_level > DANGER_THRESHOLD >= prev.detection_level:
        cues.append(SoundCue("danger"))
    if nxt.phase is Phase.LOST and prev.phase is not Phase.LOST:
        cues.append(SoundCue("caught"))
    elif nxt.phase is Phase.WON and prev.phase is not Phase.WON:
        cues.append(SoundCue("escape"))
    return cues


class AudioCueSink:
    """Plays named cues.  The base sink is silent."""

    def play(self, name: str) -> None:
        pass

    def on_cue(self, event: SoundCue) -> None:
        """``EventBus`` handler for ``SoundCue``."""
        self.play(event.name)


class RecordingCueSink(AudioCueSink):
    """Keeps every cue it was asked to play (headless runs, tests)."""

    def __init__(self):
        self.played: list[str] = []

    def play(self, name: str) -> None:
        self.played.append(name)


# name → (frequency Hz, seconds, wave, gain)
_TONES = {
    "step":   (150.0, 0.05, "square", 0.10),
    "hide":   (200.0, 0.20, "sine", 0.15),
    "danger": (800.0, 0.15, "saw", 0.20),
    "caught": (100.0, 0.50, "saw", 0.30),
    "escape": (600.0, 0.40, "sine", 0.20),
}


class ToneCueSink(AudioCueSink):
    """Short decaying tones through ``pygame.mixer``.

    If the mixer can't start (no audio device, headless CI) the sink
    stays silent.
    """

    def __init__(self, sample_rate: int = 22050):
        self.sample_rate = sample_rate
        self._sounds: dict[str, pygame.mixer.Sound] = {}
        self.enabled = bool(_tun("audio", "enabled", True))
        if not self.enabled:
            return
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init(frequency=sample_rate, size=-16, channels=1)
            rate, size, channels = pygame.mixer.get_init()
            for name, spec in _TONES.items():
                self._sounds[name] = pygame.mixer.Sound(
                    buffer=_tone(rate, *spec, channels=channels, size=size))
        except (pygame.error, ValueError) as ex:
            print(f"[AUDIO] mixer unavailable, cues muted: {ex}")
            self.enabled = False
            self._sounds.clear()

    def play(self, name: str) -> None:
        if not self.enabled:
            return
        snd = self._sounds.get(name)
        if snd is not None:
            snd.set_volume(float(_tun("audio", "volume", 0.5)))
            snd.play()


# mixer sample size (as in pygame.mixer.get_init) → (array typecode, peak, zero level)
_SAMPLE_FORMATS = {
    -8:  ("b", 127, 0),
    8:   ("B", 127, 128),
    -16: ("h", 32767, 0),
    16:  ("H", 32767, 32768),
    -32: ("i", 2147483647, 0),
    32:  ("f", 1.0, 0.0),
}


def _tone(rate: int, freq: float, seconds: float, wave: str, gain: float,
          channels: int = 1, size: int = -16) -> bytes:
    """Interleaved samples in the mixer's *size* format, fading to 1 % of *gain*."""
    if size not in _SAMPLE_FORMATS:
        raise ValueError(f"unsupported mixer sample size {size}")
    code, peak, zero = _SAMPLE_FORMATS[size]
    n = max(1, int(rate * seconds))
    decay = math.log(0.01 / gain) / n if gain > 0.01 else 0.0
    out = array.array(code)
    for i in range(n):
        phase = (i * freq / rate) % 1.0
        if wave == "square":
            v = 1.0 if phase < 0.5 else -1.0
        elif wave == "saw":
            v = 2.0 * phase - 1.0
        else:
            v = math.sin(2.0 * math.pi * phase)
        sample = zero + peak * gain * math.exp(decay * i) * v
        if code != "f":
            sample = int(sample)
        out.extend([sample] * channels)
    return out.tobytes()
