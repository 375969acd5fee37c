"""Simulation state, per-frame step and the game-state machine for Orbit Run.

``World`` owns every entity collection and all run-level counters. Input
handlers never touch those directly: they queue a tap, a reset or a resize,
and the queue is drained at the start of the next :meth:`World.update`.
Audio and presentation are optional collaborators that the world notifies on
transitions; their failures are logged and otherwise ignored.
"""

from __future__ import annotations

import logging
import random
from enum import Enum, auto
from typing import Any

from .config import (
    BURST_RED,
    BURST_WHITE,
    CHAOS_PERIOD,
    CHAOS_SPAWN_SCALE,
    DIFFICULTY_STEP,
    DOUBLE_SPAWN_CHANCE,
    DOUBLE_SPAWN_DELAY,
    DOUBLE_SPAWN_MIN_CHAOS,
    EGG_SHELL,
    FLASH_DURATION,
    FLASH_RED,
    FLASH_WHITE,
    GAME_OVER_BURST,
    MAX_PARTICLES,
    MAX_SHARDS,
    OBSTACLE_SPAWN_DISTANCE_FACTOR,
    ORBIT_RADIUS_FACTOR,
    PLAYER_BASE_SPEED,
    PLAYER_SPEED_STEP,
    REVEAL_INVERT_DELAY,
    REVEAL_INVERT_DURATION,
    REVEAL_OVERLAY_DELAY,
    REVEAL_PARTICLE_BURST,
    REVEAL_SHARD_BURST,
    REVEAL_THRESHOLD,
    SCORE_RATE,
    SHAKE_DURATION,
    SPAWN_CHANCE,
    SPAWN_INTERVAL,
    SPAWN_JITTER,
    SPECIAL_DISTANCE_FACTOR,
    STAR_COUNT,
)
from .entities import BackgroundStar, Obstacle, Particle, Player, Shard, SpecialItem
from .scheduler import EffectScheduler
from .timing import clamp_dt
from .utils import circle_circle_collision

logger = logging.getLogger(__name__)


class GameState(Enum):
    MENU = auto()
    PLAYING = auto()
    GAMEOVER = auto()
    SPECIAL_INTERACTION = auto()
    REVEAL = auto()


def spawn_interval(chaos_level: int) -> float:
    """Nominal seconds between spawn attempts at the given chaos level."""
    return SPAWN_INTERVAL / (1.0 + chaos_level * CHAOS_SPAWN_SCALE)


class Viewport:
    """Canvas dimensions plus the orbit geometry derived from them."""

    def __init__(self, width: int, height: int) -> None:
        self.resize(width, height)

    def resize(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self.center_x = self.width / 2.0
        self.center_y = self.height / 2.0
        self.orbit_radius = min(self.width, self.height) * ORBIT_RADIUS_FACTOR
        self.spawn_distance = max(self.width, self.height) * OBSTACLE_SPAWN_DISTANCE_FACTOR
        self.special_spawn_distance = max(self.width, self.height) * SPECIAL_DISTANCE_FACTOR

    def contains(self, x: float, y: float) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height


class World:
    """Single owner of all mutable game state."""

    def __init__(self, viewport: Viewport, audio: Any = None, presentation: Any = None) -> None:
        self.viewport = viewport
        self.audio = audio
        self.presentation = presentation
        self.state = GameState.MENU
        self.effects = EffectScheduler()
        self.stars: list[BackgroundStar] = []
        self.best_score = 0.0

        # Pending input commands, drained at the start of each update
        self._taps: list[tuple[float, float]] = []
        self._reset_requested = False
        self._resize_to: tuple[int, int] | None = None

        self.reseed_stars()
        self._clear_run()

    # --- Input commands ---

    def tap(self, x: float, y: float) -> None:
        """Queue a pointer/tap; its meaning depends on the state when processed."""
        self._taps.append((float(x), float(y)))

    def request_reset(self) -> None:
        self._reset_requested = True

    def request_resize(self, width: int, height: int) -> None:
        self._resize_to = (int(width), int(height))

    # --- Frame step ---

    def update(self, dt: float) -> None:
        dt = clamp_dt(dt)
        self._apply_commands()

        # Bursts keep animating in every state
        for p in self.particles:
            p.update(dt)
        self.particles = [p for p in self.particles if p.alive]
        for s in self.shards:
            s.update(dt)
        self.shards = [s for s in self.shards if s.alive]

        self.effects.advance(dt, self.state)

        if self.state is GameState.PLAYING:
            self._step_playing(dt)
        elif self.state is GameState.SPECIAL_INTERACTION and self.special_item is not None:
            self.special_item.update(dt, self.viewport.center_x, self.viewport.center_y)

        # Hard caps, oldest entries go first
        if len(self.particles) > MAX_PARTICLES:
            del self.particles[: len(self.particles) - MAX_PARTICLES]
        if len(self.shards) > MAX_SHARDS:
            del self.shards[: len(self.shards) - MAX_SHARDS]

    def _apply_commands(self) -> None:
        if self._resize_to is not None:
            self.viewport.resize(*self._resize_to)
            self._resize_to = None
            self.reseed_stars()

        taps, self._taps = self._taps, []
        for x, y in taps:
            self._dispatch_tap(x, y)

        if self._reset_requested:
            self._reset_requested = False
            if self.state in (GameState.GAMEOVER, GameState.REVEAL):
                self.reset_to_menu()

    def _dispatch_tap(self, x: float, y: float) -> None:
        if self.state is GameState.MENU:
            self.start_game()
        elif self.state is GameState.PLAYING:
            self.player.flip_direction()
            self._notify(self.audio, "on_flip")
        elif self.state is GameState.GAMEOVER:
            self.start_game()
        elif self.state is GameState.SPECIAL_INTERACTION:
            # Off-canvas coordinates and misses fail quietly
            if self.special_item is not None and self.viewport.contains(x, y) and self.special_item.hit_test(x, y):
                self.trigger_reveal()
        # REVEAL ignores taps

    def _step_playing(self, dt: float) -> None:
        vp = self.viewport
        self.player.update(dt, vp.center_x, vp.center_y, vp.orbit_radius)

        self.score += SCORE_RATE * dt
        self.game_time += dt
        self._notify(self.presentation, "set_score", self.score)

        if self.score >= REVEAL_THRESHOLD and not self.special_spawned:
            self.enter_special_interaction()
            return

        # Chaos progression every CHAOS_PERIOD seconds
        level = int(self.game_time // CHAOS_PERIOD)
        if level > self.chaos_level:
            gained = level - self.chaos_level
            self.chaos_level = level
            self.difficulty_multiplier += DIFFICULTY_STEP * gained
            self.player.angular_speed += PLAYER_SPEED_STEP * gained
            logger.info("Chaos level up: %d (difficulty x%.1f)", self.chaos_level, self.difficulty_multiplier)

        self._run_spawn_policy(dt)

        for obs in self.obstacles:
            obs.update(dt, vp.center_x, vp.center_y, self.game_time)
            if circle_circle_collision(self.player.x, self.player.y, self.player.radius, obs.x, obs.y, obs.radius):
                self.trigger_game_over()
                return

        self.obstacles = [o for o in self.obstacles if not o.is_consumed()]

    def _run_spawn_policy(self, dt: float) -> None:
        self.spawn_timer += dt
        if self.spawn_timer <= spawn_interval(self.chaos_level):
            return
        # Occasionally skip a beat, or double up once things get chaotic
        if random.random() < SPAWN_CHANCE:
            self.spawn_obstacle()
        if self.chaos_level > DOUBLE_SPAWN_MIN_CHAOS and random.random() < DOUBLE_SPAWN_CHANCE:
            self.effects.schedule(DOUBLE_SPAWN_DELAY, self.spawn_obstacle, tag=GameState.PLAYING, label="double spawn")
        self.spawn_timer = random.uniform(-SPAWN_JITTER, SPAWN_JITTER)

    def spawn_obstacle(self) -> Obstacle:
        obs = Obstacle.spawn(self.viewport.spawn_distance, self.difficulty_multiplier)
        obs.place(self.viewport.center_x, self.viewport.center_y)
        self.obstacles.append(obs)
        return obs

    # --- Transitions ---

    def start_game(self) -> None:
        """MENU/GAMEOVER -> PLAYING with a fresh run."""
        self._clear_run()
        self.state = GameState.PLAYING
        logger.info("Game started")
        self._notify(self.audio, "set_music", True)
        for screen in ("start", "game_over", "reveal"):
            self._notify(self.presentation, "hide_screen", screen)
        self._notify(self.presentation, "set_score_visible", True)
        self._notify(self.presentation, "set_score", self.score)

    def trigger_game_over(self) -> None:
        if self.state is not GameState.PLAYING:
            return
        self.state = GameState.GAMEOVER
        self.final_score = self.score
        self.best_score = max(self.best_score, self.score)
        logger.info("Game over at score %d", int(self.final_score))

        for _ in range(GAME_OVER_BURST):
            color = BURST_RED if random.random() > 0.5 else BURST_WHITE
            self.particles.append(Particle(self.player.x, self.player.y, color))

        self._notify(self.audio, "on_game_over")
        self._notify(self.audio, "set_music", False)
        self._notify(self.presentation, "shake", SHAKE_DURATION)
        self._notify(self.presentation, "flash", FLASH_RED, FLASH_DURATION)
        self._notify(self.presentation, "set_final_score", self.final_score)
        self._notify(self.presentation, "set_best_score", self.best_score)
        self._notify(self.presentation, "show_screen", "game_over")

    def enter_special_interaction(self) -> None:
        if self.special_spawned or self.state is not GameState.PLAYING:
            return
        self.special_spawned = True
        self.state = GameState.SPECIAL_INTERACTION
        self.obstacles.clear()
        self.special_item = SpecialItem.spawn(self.viewport.special_spawn_distance)
        self.special_item.place(self.viewport.center_x, self.viewport.center_y)
        logger.info("Special item spawned at score %.1f", self.score)

    def trigger_reveal(self) -> None:
        if self.state is not GameState.SPECIAL_INTERACTION or self.special_item is None:
            return
        item, self.special_item = self.special_item, None
        self.state = GameState.REVEAL
        logger.info("Reveal triggered")

        for _ in range(REVEAL_PARTICLE_BURST):
            self.particles.append(Particle(item.x, item.y, BURST_WHITE))
        for _ in range(REVEAL_SHARD_BURST):
            self.shards.append(Shard(item.x, item.y, EGG_SHELL))

        self._notify(self.audio, "on_win")
        self._notify(self.presentation, "shake", SHAKE_DURATION)
        self._notify(self.presentation, "flash", FLASH_WHITE, REVEAL_OVERLAY_DELAY)
        self._notify(self.presentation, "set_score_visible", False)
        self.effects.schedule(
            REVEAL_INVERT_DELAY,
            lambda: self._notify(self.presentation, "invert", REVEAL_INVERT_DURATION),
            tag=GameState.REVEAL,
            label="reveal invert",
        )
        self.effects.schedule(REVEAL_OVERLAY_DELAY, self._show_reveal_overlay, tag=GameState.REVEAL, label="reveal overlay")

    def _show_reveal_overlay(self) -> None:
        self.reveal_overlay_shown = True
        self._notify(self.presentation, "show_screen", "reveal")

    def reset_to_menu(self) -> None:
        """GAMEOVER/REVEAL -> MENU, dropping everything from the last run."""
        self._clear_run()
        self.state = GameState.MENU
        logger.info("Reset to menu")
        self._notify(self.audio, "set_music", False)
        self._notify(self.presentation, "clear_effects")
        self._notify(self.presentation, "hide_screen", "game_over")
        self._notify(self.presentation, "hide_screen", "reveal")
        self._notify(self.presentation, "show_screen", "start")
        self._notify(self.presentation, "set_score_visible", True)
        self._notify(self.presentation, "set_score", self.score)

    # --- Helpers ---

    def reseed_stars(self) -> None:
        self.stars = [BackgroundStar(self.viewport.width, self.viewport.height) for _ in range(STAR_COUNT)]

    def _clear_run(self) -> None:
        self.score = 0.0
        self.final_score = 0.0
        self.game_time = 0.0
        self.chaos_level = 0
        self.difficulty_multiplier = 1.0
        self.spawn_timer = 0.0
        self.player = Player(angular_speed=PLAYER_BASE_SPEED)
        self.player.place(self.viewport.center_x, self.viewport.center_y, self.viewport.orbit_radius)
        self.obstacles: list[Obstacle] = []
        self.special_item: SpecialItem | None = None
        self.particles: list[Particle] = []
        self.shards: list[Shard] = []
        self.special_spawned = False
        self.reveal_overlay_shown = False
        self.effects.clear()

    def _notify(self, target: Any, method: str, *args: Any) -> None:
        """Fire-and-forget call into a collaborator; failures never reach the game."""
        if target is None:
            return
        try:
            getattr(target, method)(*args)
        except Exception:
            logger.warning("%s.%s failed", type(target).__name__, method, exc_info=True)
