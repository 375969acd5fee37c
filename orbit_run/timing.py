"""Frame timing: monotonic frame deltas with a hard upper bound."""

from __future__ import annotations

import pygame

from .config import FPS, MAX_FRAME_DT


def clamp_dt(dt: float, max_dt: float = MAX_FRAME_DT) -> float:
    """Bound a frame delta to [0, max_dt] so a stall never turns into a huge step."""
    return max(0.0, min(dt, max_dt))


class FrameTimer:
    """Wraps pygame's clock and hands out clamped deltas in seconds."""

    def __init__(self, fps: int = FPS) -> None:
        self.fps = fps
        self.clock = pygame.time.Clock()
        self.elapsed = 0.0

    def tick(self) -> float:
        dt = clamp_dt(self.clock.tick(self.fps) / 1000.0)
        self.elapsed += dt
        return dt
