"""Game loop, input mapping, and rendering composition for Orbit Run."""

from __future__ import annotations

import logging
import sys

import pygame

from .assets import CentralBody
from .audio import SoundBoard
from .config import (
    COL_BG,
    COL_ORBIT_GUIDE,
    SPECIAL_REST_SIZE,
    WINDOW_HEIGHT,
    WINDOW_WIDTH,
)
from .presentation import Presentation
from .timing import FrameTimer
from .world import GameState, Viewport, World

logger = logging.getLogger(__name__)


class Game:
    """Top-level controller: owns the window, routes input, updates and draws."""

    def __init__(self, width: int = WINDOW_WIDTH, height: int = WINDOW_HEIGHT) -> None:
        pygame.init()
        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        pygame.display.set_caption("Orbit Run")
        self.timer = FrameTimer()
        self.font_mark = pygame.font.SysFont(None, 90, bold=True)

        self.sound = SoundBoard()
        self.presentation = Presentation()
        self.planet = CentralBody()
        self.planet.load()

        self.world = World(Viewport(width, height), audio=self.sound, presentation=self.presentation)
        self.frame = pygame.Surface((width, height))

    def handle_input(self, event: pygame.event.Event) -> None:
        if event.type == pygame.MOUSEBUTTONDOWN:
            # Touch screens also synthesize mouse clicks; FINGERDOWN covers those
            if event.button == 1 and not getattr(event, "touch", False):
                self.world.tap(*event.pos)
        elif event.type == pygame.FINGERDOWN:
            # Finger coordinates are normalized to the window
            self.world.tap(event.x * self.world.viewport.width, event.y * self.world.viewport.height)
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_SPACE:
                self.world.tap(*pygame.mouse.get_pos())
            elif event.key == pygame.K_r:
                self.world.request_reset()
            elif event.key == pygame.K_m:
                self.presentation.muted = self.sound.toggle_mute()
            elif event.key == pygame.K_ESCAPE:
                pygame.event.post(pygame.event.Event(pygame.QUIT))
        elif event.type == pygame.VIDEORESIZE:
            logger.info("Window resized to %dx%d", event.w, event.h)
            self.screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
            self.world.request_resize(event.w, event.h)

    def update(self, dt: float) -> None:
        self.world.update(dt)
        self.presentation.update(dt)

    def draw(self) -> None:
        world = self.world
        vp = world.viewport
        if self.frame.get_size() != (vp.width, vp.height):
            self.frame = pygame.Surface((vp.width, vp.height))
        surf = self.frame

        surf.fill(COL_BG)
        for star in world.stars:
            star.draw(surf)
        self.planet.draw(surf, vp.center_x, vp.center_y)
        # Faint orbit guide
        pygame.draw.circle(surf, COL_ORBIT_GUIDE, (int(vp.center_x), int(vp.center_y)), int(vp.orbit_radius), 1)

        for obs in world.obstacles:
            obs.draw(surf, world.game_time)
        if world.state is GameState.SPECIAL_INTERACTION and world.special_item is not None:
            item = world.special_item
            item.draw(surf, self.font_mark)
            if item.resting:
                self.presentation.draw_hint(surf, item.x, item.y + SPECIAL_REST_SIZE[1] + 30)
        if world.state in (GameState.PLAYING, GameState.REVEAL):
            world.player.draw(surf)
        for p in world.particles:
            p.draw(surf)
        for s in world.shards:
            s.draw(surf)

        self.presentation.draw(surf)
        self.presentation.apply_post_effects(surf)

        self.screen.fill((0, 0, 0))
        self.screen.blit(surf, self.presentation.shake_offset())
        pygame.display.flip()

    def run(self) -> None:
        while True:
            dt = self.timer.tick()
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    pygame.quit()
                    sys.exit(0)
                self.handle_input(event)

            self.update(dt)
            self.draw()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    Game().run()
