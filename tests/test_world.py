import math
import random

import pytest

from orbit_run.config import (
    MAX_PARTICLES,
    MAX_SHARDS,
    PLAYER_BASE_SPEED,
    REVEAL_OVERLAY_DELAY,
    REVEAL_SHARD_BURST,
)
from orbit_run.entities import Obstacle, Particle, Shard
from orbit_run.world import GameState, Viewport, World, spawn_interval


class Recorder:
    """Collaborator double that records every call it receives."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def __getattr__(self, name: str):
        def record(*args):
            self.calls.append((name, *args))

        return record

    def names(self) -> list[str]:
        return [c[0] for c in self.calls]


class Exploding:
    def __getattr__(self, name: str):
        def boom(*args):
            raise RuntimeError(f"{name} exploded")

        return boom


@pytest.fixture
def world() -> World:
    random.seed(1234)
    return World(Viewport(800, 600), audio=Recorder(), presentation=Recorder())


def playing(world: World) -> World:
    world.tap(400, 300)
    world.update(0.0)
    assert world.state is GameState.PLAYING
    # Keep the spawn policy quiet unless a test wants it
    world.spawn_timer = -1000.0
    return world


def test_starts_in_menu(world: World) -> None:
    assert world.state is GameState.MENU
    assert world.score == 0.0
    assert len(world.stars) > 0


def test_tap_in_menu_starts_game(world: World) -> None:
    world.tap(10, 10)
    world.update(0.016)
    assert world.state is GameState.PLAYING
    assert "set_music" in world.audio.names()
    assert ("hide_screen", "start") in world.presentation.calls


def test_tap_while_playing_flips_direction(world: World) -> None:
    playing(world)
    assert world.player.direction == 1
    world.tap(10, 10)
    world.update(0.0)
    assert world.player.direction == -1
    assert "on_flip" in world.audio.names()


def test_input_is_queued_until_update(world: World) -> None:
    world.tap(10, 10)
    assert world.state is GameState.MENU
    world.update(0.0)
    assert world.state is GameState.PLAYING


def test_score_accrues_while_playing(world: World) -> None:
    playing(world)
    last = world.score
    for _ in range(20):
        world.update(0.016)
        assert world.score >= last
        last = world.score
    assert math.isclose(world.score, 10 * 0.016 * 20)


def test_dt_is_clamped(world: World) -> None:
    playing(world)
    world.update(5.0)
    assert math.isclose(world.score, 1.0)
    assert math.isclose(world.game_time, 0.1)


def test_score_crossing_threshold_enters_special_interaction(world: World) -> None:
    playing(world)
    world.obstacles.append(Obstacle(distance=500.0, angle=1.0, speed=10.0, radius=15.0))
    world.score = 499.9
    world.update(0.02)
    assert math.isclose(world.score, 500.1)
    assert world.state is GameState.SPECIAL_INTERACTION
    assert world.obstacles == []
    assert world.special_item is not None


def test_reveal_threshold_fires_once(world: World) -> None:
    playing(world)
    world.score = 499.9
    world.update(0.02)
    item = world.special_item
    frozen = world.score
    for _ in range(50):
        world.update(0.05)
        assert world.state is GameState.SPECIAL_INTERACTION
        assert world.special_item is item
        assert world.score == frozen
    assert world.obstacles == []
    # Calling the transition again is a no-op
    world.enter_special_interaction()
    assert world.special_item is item


def test_collision_scenario_ends_run(world: World) -> None:
    playing(world)
    world.viewport.orbit_radius = 100.0
    world.player.angle = 0.0
    vp = world.viewport
    world.obstacles.append(Obstacle(distance=105.0, angle=0.0, speed=1.0, radius=15.0))
    world.update(0.0)
    assert world.player.x == pytest.approx(vp.center_x + 100.0)
    assert world.state is GameState.GAMEOVER
    assert world.final_score == world.score
    assert 0 < len(world.particles) <= MAX_PARTICLES
    assert "on_game_over" in world.audio.names()
    assert ("show_screen", "game_over") in world.presentation.calls


def test_simulation_frozen_after_game_over(world: World) -> None:
    playing(world)
    world.score = 42.0
    world.trigger_game_over()
    obstacles = list(world.obstacles)
    for _ in range(10):
        world.update(0.05)
    assert world.score == 42.0
    assert world.obstacles == obstacles
    # Death burst keeps animating and fades out
    for _ in range(40):
        world.update(0.1)
    assert world.particles == []


def test_game_over_is_idempotent(world: World) -> None:
    playing(world)
    world.trigger_game_over()
    count = len(world.particles)
    world.trigger_game_over()
    assert len(world.particles) == count
    assert world.audio.names().count("on_game_over") == 1


def test_tap_after_game_over_restarts(world: World) -> None:
    playing(world)
    world.score = 120.0
    world.trigger_game_over()
    world.tap(10, 10)
    world.update(0.0)
    assert world.state is GameState.PLAYING
    assert world.score == 0.0
    assert world.best_score == 120.0


def test_reset_after_game_over(world: World) -> None:
    playing(world)
    world.score = 321.0
    world.game_time = 35.0
    world.chaos_level = 3
    world.difficulty_multiplier = 1.6
    world.spawn_obstacle()
    world.shards.append(Shard(0.0, 0.0, (255, 255, 255)))
    world.trigger_game_over()
    world.request_reset()
    world.update(0.0)
    assert world.state is GameState.MENU
    assert world.score == 0.0
    assert world.game_time == 0.0
    assert world.chaos_level == 0
    assert world.difficulty_multiplier == 1.0
    assert world.obstacles == []
    assert world.particles == []
    assert world.shards == []
    assert world.special_item is None
    assert not world.special_spawned
    assert ("show_screen", "start") in world.presentation.calls


def test_reset_ignored_while_playing(world: World) -> None:
    playing(world)
    world.request_reset()
    world.update(0.0)
    assert world.state is GameState.PLAYING


def test_chaos_level_up(world: World) -> None:
    playing(world)
    world.game_time = 9.99
    world.update(0.02)
    assert world.chaos_level == 1
    assert world.difficulty_multiplier == pytest.approx(1.2)
    assert world.player.angular_speed == pytest.approx(PLAYER_BASE_SPEED + 0.1)


def test_spawn_interval_shrinks_with_chaos() -> None:
    assert spawn_interval(0) == pytest.approx(0.8)
    assert spawn_interval(2) == pytest.approx(0.4)
    assert spawn_interval(4) < spawn_interval(3)


def test_spawn_policy_spawns_and_resets_timer(world: World, monkeypatch: pytest.MonkeyPatch) -> None:
    playing(world)
    monkeypatch.setattr(random, "random", lambda: 0.0)
    world.spawn_timer = 1.0
    world.update(0.001)
    assert len(world.obstacles) == 1
    assert -0.1 <= world.spawn_timer <= 0.1
    # Chaos 0 never double spawns
    assert len(world.effects) == 0


def test_spawn_policy_can_skip(world: World, monkeypatch: pytest.MonkeyPatch) -> None:
    playing(world)
    monkeypatch.setattr(random, "random", lambda: 0.95)
    world.spawn_timer = 1.0
    world.update(0.001)
    assert world.obstacles == []


def test_double_spawn_fires_after_delay(world: World, monkeypatch: pytest.MonkeyPatch) -> None:
    playing(world)
    world.chaos_level = 3
    world.game_time = 30.0
    monkeypatch.setattr(random, "random", lambda: 0.0)
    world.spawn_timer = 1.0
    world.update(0.001)
    assert len(world.obstacles) == 1
    assert len(world.effects) == 1
    world.spawn_timer = -1000.0
    world.update(0.1)
    assert len(world.obstacles) == 1
    world.update(0.15)
    assert len(world.obstacles) == 2


def test_double_spawn_dropped_after_game_over(world: World) -> None:
    playing(world)
    world.effects.schedule(0.2, world.spawn_obstacle, tag=GameState.PLAYING)
    world.trigger_game_over()
    for _ in range(5):
        world.update(0.1)
    assert world.obstacles == []
    assert len(world.effects) == 0


def test_consumed_obstacles_are_removed(world: World) -> None:
    playing(world)
    # Opposite side of the orbit from the player, already inside the planet
    world.obstacles.append(Obstacle(distance=31.0, angle=math.pi, speed=100.0, radius=15.0))
    world.update(0.02)
    assert world.obstacles == []
    assert world.state is GameState.PLAYING


def test_particle_cap_truncates_oldest(world: World) -> None:
    world.particles = [Particle(0.0, 0.0, (255, 255, 255), vx=0.0, vy=0.0, decay=0.1) for _ in range(250)]
    newest = world.particles[-1]
    oldest = world.particles[0]
    world.shards = [Shard(0.0, 0.0, (255, 255, 255), decay=0.1) for _ in range(MAX_SHARDS + 10)]
    world.update(0.01)
    assert len(world.particles) == MAX_PARTICLES
    assert len(world.shards) == MAX_SHARDS
    assert newest in world.particles
    assert oldest not in world.particles


def test_particles_removed_exactly_when_life_runs_out(world: World) -> None:
    p = Particle(0.0, 0.0, (255, 255, 255), vx=0.0, vy=0.0, decay=1.0)
    world.particles = [p]
    world.update(0.05)
    assert p in world.particles
    assert p.life == pytest.approx(0.95)
    p.life = 0.05
    world.update(0.05)
    assert p not in world.particles


def enter_special(world: World, settle: bool = True) -> World:
    playing(world)
    world.score = 499.99
    world.update(0.01)
    assert world.state is GameState.SPECIAL_INTERACTION
    if settle:
        # Let the egg drift in and come to rest at the center
        for _ in range(100):
            world.update(0.05)
        assert world.special_item.resting
    return world


def test_special_item_drifts_to_center(world: World) -> None:
    enter_special(world, settle=False)
    assert not world.special_item.resting
    for _ in range(100):
        world.update(0.05)
    item = world.special_item
    assert item.resting
    assert (item.x, item.y) == (world.viewport.center_x, world.viewport.center_y)


def test_missed_tap_does_nothing(world: World) -> None:
    enter_special(world)
    world.tap(5, 5)
    world.tap(-50, -50)
    world.tap(10_000, 300)
    world.update(0.0)
    assert world.state is GameState.SPECIAL_INTERACTION


def test_hit_test_triggers_reveal(world: World) -> None:
    enter_special(world)
    item = world.special_item
    world.tap(item.x, item.y)
    world.update(0.0)
    assert world.state is GameState.REVEAL
    assert world.special_item is None
    assert len(world.particles) == MAX_PARTICLES
    assert len(world.shards) == REVEAL_SHARD_BURST
    assert "on_win" in world.audio.names()
    assert ("set_score_visible", False) in world.presentation.calls
    assert not world.reveal_overlay_shown

    steps = int(REVEAL_OVERLAY_DELAY / 0.1) + 2
    for _ in range(steps):
        world.update(0.1)
    assert world.reveal_overlay_shown
    assert ("show_screen", "reveal") in world.presentation.calls
    assert "invert" in world.presentation.names()


def test_taps_ignored_during_reveal(world: World) -> None:
    enter_special(world)
    item = world.special_item
    world.tap(item.x, item.y)
    world.update(0.0)
    world.tap(400, 300)
    world.update(0.0)
    assert world.state is GameState.REVEAL


def test_reset_before_overlay_cancels_it(world: World) -> None:
    enter_special(world)
    item = world.special_item
    world.tap(item.x, item.y)
    world.update(0.0)
    world.request_reset()
    world.update(0.0)
    assert world.state is GameState.MENU
    for _ in range(40):
        world.update(0.1)
    assert not world.reveal_overlay_shown
    assert ("show_screen", "reveal") not in world.presentation.calls


def test_resize_recomputes_geometry(world: World) -> None:
    world.request_resize(1000, 400)
    assert world.viewport.width == 800
    world.update(0.0)
    assert world.viewport.width == 1000
    assert world.viewport.center_x == 500.0
    assert world.viewport.orbit_radius == pytest.approx(140.0)
    assert all(0 <= s.x <= 1000 and 0 <= s.y <= 400 for s in world.stars)


def test_collaborator_failures_do_not_block_transitions() -> None:
    world = World(Viewport(800, 600), audio=Exploding(), presentation=Exploding())
    world.tap(10, 10)
    world.update(0.0)
    assert world.state is GameState.PLAYING
    world.tap(10, 10)
    world.update(0.0)
    assert world.player.direction == -1
    world.trigger_game_over()
    assert world.state is GameState.GAMEOVER


def test_world_without_collaborators() -> None:
    world = World(Viewport(640, 480))
    world.tap(1, 1)
    world.update(0.016)
    assert world.state is GameState.PLAYING
