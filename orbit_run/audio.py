"""Synthesized sound cues and background loop.

Every sound is generated with numpy and handed to ``pygame.sndarray``; there
are no audio files. If the mixer cannot start (no device, dummy driver quirks)
the board goes silent and every cue becomes a no-op.
"""

from __future__ import annotations

import logging
import math

import numpy as np
import pygame

from .config import MUSIC_VOLUME, SAMPLE_RATE, SFX_VOLUME

logger = logging.getLogger(__name__)


def synthesize(
    freq: float,
    duration: float,
    shape: str = "sine",
    volume: float = 1.0,
    sample_rate: int = SAMPLE_RATE,
) -> np.ndarray:
    """One tone as float32 samples in [-volume, volume] with an exponential tail."""
    samples = max(1, int(sample_rate * duration))
    t = np.arange(samples, dtype=np.float32) / sample_rate
    phase = 2.0 * math.pi * freq * t
    if shape == "square":
        wave = np.sign(np.sin(phase))
    elif shape == "sawtooth":
        wave = 2.0 * (t * freq - np.floor(0.5 + t * freq))
    else:
        wave = np.sin(phase)
    # Ramp down to ~1% like an exponential gain envelope
    envelope = np.exp(np.linspace(0.0, math.log(0.01), samples, dtype=np.float32))
    return (wave * envelope * volume).astype(np.float32)


def mix(*waves: np.ndarray) -> np.ndarray:
    """Sum waves of differing lengths, padding the shorter ones with silence."""
    out = np.zeros(max(len(w) for w in waves), dtype=np.float32)
    for w in waves:
        out[: len(w)] += w
    return out


class SoundBoard:
    """Audio collaborator: flip/game-over/win cues plus a looping music bed."""

    def __init__(self) -> None:
        self.available = False
        self.muted = False
        self.music_on = False
        self.sample_rate = SAMPLE_RATE
        self.channels = 1
        self.sounds: dict[str, pygame.mixer.Sound] = {}
        self.music: pygame.mixer.Sound | None = None
        self._music_channel: pygame.mixer.Channel | None = None
        try:
            if pygame.mixer.get_init() is None:
                pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1)
            self.sample_rate, _size, self.channels = pygame.mixer.get_init()
            self._build_sounds()
            self.available = True
        except (pygame.error, ValueError, TypeError):
            logger.warning("Audio unavailable, continuing without sound", exc_info=True)

    def _to_sound(self, wave: np.ndarray, volume: float) -> pygame.mixer.Sound:
        peak = float(np.max(np.abs(wave))) or 1.0
        pcm = (wave / peak * 32767 * volume).astype(np.int16)
        if self.channels > 1:
            pcm = np.repeat(pcm[:, None], self.channels, axis=1)
        return pygame.sndarray.make_sound(np.ascontiguousarray(pcm))

    def _build_sounds(self) -> None:
        sr = self.sample_rate
        self.sounds["flip"] = self._to_sound(
            mix(synthesize(600, 0.1, "sine", 1.0, sr), synthesize(800, 0.05, "square", 0.5, sr)),
            SFX_VOLUME,
        )
        self.sounds["game_over"] = self._to_sound(
            mix(synthesize(150, 0.5, "sawtooth", 1.0, sr), synthesize(100, 0.8, "square", 1.0, sr)),
            SFX_VOLUME,
        )
        # Arpeggio, one note every 100 ms
        gap = int(sr * 0.1)
        notes = [synthesize(f, 0.2, "sine", 1.0, sr) for f in (440, 554, 659, 880)]
        win = np.zeros(gap * 3 + len(notes[-1]), dtype=np.float32)
        for i, note in enumerate(notes):
            win[i * gap : i * gap + len(note)] += note
        self.sounds["win"] = self._to_sound(win, SFX_VOLUME)

        # Slow two-voice drone loop for the background
        bar = [
            mix(synthesize(f, 1.0, "sine", 0.7, sr), synthesize(f * 2, 1.0, "sine", 0.3, sr))
            for f in (110, 131, 98, 123)
        ]
        self.music = self._to_sound(np.concatenate(bar), MUSIC_VOLUME)

    def _play(self, name: str) -> None:
        if not self.available or self.muted:
            return
        sound = self.sounds.get(name)
        if sound is None:
            return
        try:
            sound.play()
        except pygame.error:
            logger.warning("Could not play %s", name, exc_info=True)

    def on_flip(self) -> None:
        self._play("flip")

    def on_game_over(self) -> None:
        self._play("game_over")

    def on_win(self) -> None:
        self._play("win")

    def set_music(self, on: bool) -> None:
        self.music_on = bool(on)
        self._sync_music()

    def toggle_mute(self) -> bool:
        self.muted = not self.muted
        self._sync_music()
        return self.muted

    def _sync_music(self) -> None:
        if not self.available or self.music is None:
            return
        want = self.music_on and not self.muted
        playing = self._music_channel is not None and self._music_channel.get_busy()
        try:
            if want and not playing:
                self._music_channel = self.music.play(loops=-1)
            elif not want and playing:
                self.music.stop()
                self._music_channel = None
        except pygame.error:
            logger.warning("Background music toggle failed", exc_info=True)
