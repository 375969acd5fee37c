"""Screens, score text and transient full-screen effects.

The world only ever toggles screens and triggers effects; this module owns
their timers and draws them over the finished frame.
"""

from __future__ import annotations

import random

import pygame

from .config import (
    HINT_COLOR,
    SHAKE_MAGNITUDE,
    TEXT_ALERT,
    TEXT_COLOR,
    TEXT_DIM,
)
from .utils import invert_surface

SCREENS = ("start", "game_over", "reveal")


class Presentation:
    def __init__(self) -> None:
        self.font_huge = pygame.font.SysFont(None, 96)
        self.font_big = pygame.font.SysFont(None, 64)
        self.font_small = pygame.font.SysFont(None, 28)
        self.visible: set[str] = {"start"}
        self.score = 0.0
        self.final_score = 0.0
        self.best_score = 0.0
        self.score_visible = True
        self.muted = False
        self.clear_effects()

    # Screen toggles

    def show_screen(self, name: str) -> None:
        if name not in SCREENS:
            raise ValueError(f"unknown screen {name!r}")
        self.visible.add(name)
        if name == "reveal":
            # Overlay replaces the held white flash
            self._flash_left = 0.0

    def hide_screen(self, name: str) -> None:
        self.visible.discard(name)

    def is_visible(self, name: str) -> bool:
        return name in self.visible

    def set_score(self, score: float) -> None:
        self.score = score

    def set_final_score(self, score: float) -> None:
        self.final_score = score

    def set_best_score(self, score: float) -> None:
        self.best_score = score

    def set_score_visible(self, visible: bool) -> None:
        self.score_visible = bool(visible)

    # Transient effects

    def shake(self, duration: float) -> None:
        self._shake_left = max(self._shake_left, duration)

    def flash(self, color: tuple[int, int, int], duration: float) -> None:
        self._flash_color = color
        self._flash_total = max(0.0001, duration)
        self._flash_left = duration

    def invert(self, duration: float) -> None:
        self._invert_left = max(self._invert_left, duration)

    def clear_effects(self) -> None:
        self._shake_left = 0.0
        self._flash_color = (255, 255, 255)
        self._flash_total = 1.0
        self._flash_left = 0.0
        self._invert_left = 0.0

    @property
    def shaking(self) -> bool:
        return self._shake_left > 0.0

    @property
    def inverted(self) -> bool:
        return self._invert_left > 0.0

    def update(self, dt: float) -> None:
        self._shake_left = max(0.0, self._shake_left - dt)
        self._flash_left = max(0.0, self._flash_left - dt)
        self._invert_left = max(0.0, self._invert_left - dt)

    def shake_offset(self) -> tuple[int, int]:
        if not self.shaking:
            return 0, 0
        return (
            random.randint(-SHAKE_MAGNITUDE, SHAKE_MAGNITUDE),
            random.randint(-SHAKE_MAGNITUDE, SHAKE_MAGNITUDE),
        )

    # Drawing

    def apply_post_effects(self, surf: pygame.Surface) -> None:
        if self.inverted:
            invert_surface(surf)

    def draw(self, surf: pygame.Surface) -> None:
        w, h = surf.get_size()
        if self._flash_left > 0.0:
            # Fades over the last half second, held solid before that
            a = int(200 * min(1.0, self._flash_left / min(0.5, self._flash_total)))
            overlay = pygame.Surface((w, h), pygame.SRCALPHA)
            overlay.fill((*self._flash_color, a))
            surf.blit(overlay, (0, 0))

        if self.score_visible:
            score_text = self.font_big.render(f"Score: {int(self.score)}", True, TEXT_COLOR)
            surf.blit(score_text, score_text.get_rect(midtop=(w // 2, 20)))

        if self.muted:
            mute_text = self.font_small.render("muted (M)", True, TEXT_DIM)
            surf.blit(mute_text, mute_text.get_rect(topright=(w - 16, 16)))

        if "start" in self.visible:
            self._draw_panel(
                surf,
                "ORBIT RUN",
                [
                    "Click or tap to launch",
                    "Tap to reverse your orbit, dodge the aliens",
                    "M to mute, Esc to quit",
                ],
                HINT_COLOR,
            )
        if "game_over" in self.visible:
            self._draw_panel(
                surf,
                "GAME OVER",
                [
                    f"Score: {int(self.final_score)}",
                    f"Best: {int(self.best_score)}",
                    "Click to try again, R for menu",
                ],
                TEXT_ALERT,
            )
        if "reveal" in self.visible:
            self._draw_panel(
                surf,
                "SURPRISE!",
                [
                    "You survived long enough to crack the egg.",
                    "The aliens have filed a formal complaint.",
                    "Press R to return to the menu",
                ],
                TEXT_ALERT,
            )

    def draw_hint(self, surf: pygame.Surface, x: float, y: float) -> None:
        hint = self.font_small.render("CLICK ME!", True, HINT_COLOR)
        surf.blit(hint, hint.get_rect(center=(int(x), int(y))))

    def _draw_panel(self, surf: pygame.Surface, title: str, lines: list[str], title_color: tuple[int, int, int]) -> None:
        w, h = surf.get_size()
        shade = pygame.Surface((w, h), pygame.SRCALPHA)
        shade.fill((0, 0, 0, 150))
        surf.blit(shade, (0, 0))
        title_s = self.font_huge.render(title, True, title_color)
        surf.blit(title_s, title_s.get_rect(center=(w // 2, h // 2 - 60)))
        y = h // 2
        for line in lines:
            text = self.font_small.render(line, True, TEXT_DIM)
            surf.blit(text, text.get_rect(center=(w // 2, y)))
            y += 34
