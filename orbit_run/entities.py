"""Game entities and their renderers.

Contains the orbiting player craft, inbound obstacles, the one-off special
item, cosmetic particles/shards, and the static star field. Everything that
lives on the orbit plane keeps polar state (distance, angle) and derives its
screen position from the viewport center handed in on each update.
"""

from __future__ import annotations

import math
import random
from collections import deque

import pygame

from .config import (
    CONSUMED_DISTANCE,
    EGG_MARK,
    EGG_SHELL,
    FLAME_INNER,
    FLAME_OUTER,
    OBSTACLE_COLORS,
    OBSTACLE_MIN_RADIUS,
    OBSTACLE_RADIUS_JITTER,
    OBSTACLE_SPEED_BASE,
    OBSTACLE_SPEED_JITTER,
    PLAYER_BASE_SPEED,
    PLAYER_COLOR,
    PLAYER_HULL,
    PLAYER_RADIUS,
    SPECIAL_HIT_RADIUS,
    SPECIAL_RADIUS,
    SPECIAL_REST_SIZE,
    SPECIAL_SPEED,
    STAR_CULL_ALPHA,
    TRAIL_LIFETIME,
    TRAIL_MAX_POINTS,
)
from .utils import (
    TAU,
    clamp,
    egg_surface,
    point_in_circle,
    polar_to_cartesian,
    radial_glow_surface,
    rotate_points,
    scale_color,
)


def _blit_glow(surf: pygame.Surface, x: float, y: float, radius: float, color: tuple[int, int, int], strength: float) -> None:
    glow = radial_glow_surface(max(2, int(radius)), color, strength)
    surf.blit(glow, glow.get_rect(center=(int(x), int(y))), special_flags=pygame.BLEND_RGB_ADD)


class Particle:
    """Cosmetic spark: ballistic motion with a linear fade from life 1 to 0."""

    min_speed = 50.0
    max_speed = 150.0
    min_decay = 1.0
    max_decay = 3.0

    def __init__(
        self,
        x: float,
        y: float,
        color: tuple[int, int, int],
        vx: float | None = None,
        vy: float | None = None,
        decay: float | None = None,
    ) -> None:
        self.x = float(x)
        self.y = float(y)
        self.color = color
        if vx is None or vy is None:
            a = random.uniform(0.0, TAU)
            s = random.uniform(self.min_speed, self.max_speed)
            vx, vy = math.cos(a) * s, math.sin(a) * s
        self.vx = float(vx)
        self.vy = float(vy)
        self.life = 1.0
        self.decay = random.uniform(self.min_decay, self.max_decay) if decay is None else float(decay)

    @property
    def alive(self) -> bool:
        return self.life > 0.0

    def update(self, dt: float) -> None:
        self.x += self.vx * dt
        self.y += self.vy * dt
        self.life -= self.decay * dt

    def draw(self, surf: pygame.Surface) -> None:
        if not self.alive:
            return
        a = int(255 * clamp(self.life, 0.0, 1.0))
        s = pygame.Surface((4, 4), pygame.SRCALPHA)
        pygame.draw.circle(s, (*self.color, a), (2, 2), 2)
        surf.blit(s, (int(self.x) - 2, int(self.y) - 2))


class Shard(Particle):
    """Spinning triangular fragment of the egg shell."""

    min_speed = 100.0
    max_speed = 300.0
    min_decay = 0.5
    max_decay = 2.0

    def __init__(
        self,
        x: float,
        y: float,
        color: tuple[int, int, int],
        vx: float | None = None,
        vy: float | None = None,
        decay: float | None = None,
        angular_velocity: float | None = None,
    ) -> None:
        super().__init__(x, y, color, vx, vy, decay)
        self.rotation = random.uniform(0.0, TAU)
        self.angular_velocity = random.uniform(-5.0, 5.0) if angular_velocity is None else float(angular_velocity)
        self.size = random.uniform(3.0, 8.0)

    def update(self, dt: float) -> None:
        super().update(dt)
        self.rotation += self.angular_velocity * dt

    def draw(self, surf: pygame.Surface) -> None:
        if not self.alive:
            return
        size = self.size
        half = int(size) + 2
        local = [(0.0, -size), (size * 0.8, size), (-size * 0.8, size)]
        pts = rotate_points(local, self.rotation, half, half)
        s = pygame.Surface((half * 2, half * 2), pygame.SRCALPHA)
        a = int(255 * clamp(self.life, 0.0, 1.0))
        pygame.draw.polygon(s, (*self.color, a), pts)
        surf.blit(s, (int(self.x) - half, int(self.y) - half))


class BackgroundStar:
    """Static decorative point; only moves when the field is reseeded."""

    def __init__(self, width: int, height: int) -> None:
        self.reset(width, height)

    def reset(self, width: int, height: int) -> None:
        self.x = random.uniform(0, width)
        self.y = random.uniform(0, height)
        self.size = random.uniform(0.0, 1.5)
        self.alpha = random.uniform(0.1, 0.6)

    @property
    def visible(self) -> bool:
        return self.alpha >= STAR_CULL_ALPHA

    def draw(self, surf: pygame.Surface) -> None:
        # Faint stars are skipped outright
        if not self.visible:
            return
        c = int(255 * self.alpha)
        side = max(1, round(self.size))
        surf.fill((c, c, c), pygame.Rect(int(self.x), int(self.y), side, side))


class Player:
    """The orbiting craft.

    Position is never integrated: it is recomputed from ``angle`` and the
    current orbit radius on every update, so it cannot drift off the orbit.
    """

    def __init__(self, angle: float = 0.0, angular_speed: float = PLAYER_BASE_SPEED) -> None:
        self.angle = float(angle)
        self.radius = PLAYER_RADIUS
        self.direction = 1
        self.angular_speed = float(angular_speed)
        # Each point is [x, y, age]
        self.trail: deque[list[float]] = deque(maxlen=TRAIL_MAX_POINTS)
        self.x = 0.0
        self.y = 0.0

    @property
    def heading(self) -> float:
        """Facing angle: tangent to the orbit in the direction of travel."""
        return self.angle + self.direction * math.pi / 2.0

    def flip_direction(self) -> None:
        self.direction = -self.direction

    def place(self, cx: float, cy: float, orbit_radius: float) -> None:
        self.x, self.y = polar_to_cartesian(cx, cy, orbit_radius, self.angle)

    def update(self, dt: float, cx: float, cy: float, orbit_radius: float) -> None:
        self.angle = (self.angle + self.direction * self.angular_speed * dt) % TAU
        self.place(cx, cy, orbit_radius)

        # Engine wake: bounded-age queue of recent positions
        for point in self.trail:
            point[2] += dt
        self.trail.append([self.x, self.y, 0.0])
        while self.trail and self.trail[0][2] >= TRAIL_LIFETIME:
            self.trail.popleft()

    def draw(self, surf: pygame.Surface) -> None:
        r = float(self.radius)
        if len(self.trail) > 1:
            pts = [(int(px), int(py)) for (px, py, _age) in self.trail]
            pygame.draw.lines(surf, scale_color(PLAYER_COLOR, 0.3), False, pts, max(1, int(r * 0.5)))

        _blit_glow(surf, self.x, self.y, r * 2.5, PLAYER_COLOR, 0.45)

        heading = self.heading
        flicker = random.uniform(0.8, 1.2)
        outer_flame = [(-r * 0.8, 0.0), (-r * 2.0 * flicker, r * 0.3), (-r * 2.0 * flicker, -r * 0.3)]
        inner_flame = [(-r * 0.8, 0.0), (-r * 1.5 * flicker, r * 0.15), (-r * 1.5 * flicker, -r * 0.15)]
        hull = [(r * 1.5, 0.0), (-r, r * 0.8), (-r * 0.5, 0.0), (-r, -r * 0.8)]

        pygame.draw.polygon(surf, FLAME_OUTER, rotate_points(outer_flame, heading, self.x, self.y))
        pygame.draw.polygon(surf, FLAME_INNER, rotate_points(inner_flame, heading, self.x, self.y))
        hull_pts = rotate_points(hull, heading, self.x, self.y)
        pygame.draw.polygon(surf, PLAYER_HULL, hull_pts)
        pygame.draw.polygon(surf, PLAYER_COLOR, hull_pts, 2)
        # Cockpit
        wx, wy = rotate_points([(r * 0.2, 0.0)], heading, self.x, self.y)[0]
        pygame.draw.circle(surf, (255, 255, 255), (int(wx), int(wy)), max(2, int(r * 0.2)))


class Obstacle:
    """An alien drifting straight in towards the central body."""

    def __init__(
        self,
        distance: float,
        angle: float,
        speed: float,
        radius: float,
        color: tuple[int, int, int] = OBSTACLE_COLORS[0],
    ) -> None:
        self.distance = float(distance)
        self.angle = float(angle)
        self.speed = float(speed)
        self.radius = float(radius)
        self.color = color
        self.wobble_phase = random.uniform(0.0, TAU)
        self.rotation = self.angle + math.pi
        self.x = 0.0
        self.y = 0.0

    @classmethod
    def spawn(cls, spawn_distance: float, difficulty: float) -> Obstacle:
        """Random obstacle on the spawn ring, sped up by the difficulty multiplier."""
        return cls(
            distance=spawn_distance,
            angle=random.uniform(0.0, TAU),
            speed=(OBSTACLE_SPEED_BASE + random.uniform(0.0, OBSTACLE_SPEED_JITTER)) * difficulty,
            radius=OBSTACLE_MIN_RADIUS + random.uniform(0.0, OBSTACLE_RADIUS_JITTER),
            color=random.choice(OBSTACLE_COLORS),
        )

    def place(self, cx: float, cy: float) -> None:
        self.x, self.y = polar_to_cartesian(cx, cy, self.distance, self.angle)

    def update(self, dt: float, cx: float, cy: float, t: float = 0.0) -> None:
        self.distance -= self.speed * dt
        # Face the planet with a slight sway
        self.rotation = self.angle + math.pi + math.sin(t * 5.0 + self.wobble_phase) * 0.3
        self.place(cx, cy)

    def is_consumed(self) -> bool:
        return self.distance < CONSUMED_DISTANCE

    def draw(self, surf: pygame.Surface, t: float = 0.0) -> None:
        r = self.radius
        pulse = 1.0 + math.sin(t * 10.0 + self.wobble_phase) * 0.05

        # Dome over the top, then a wiggling fringe of tentacles underneath
        outline = [(math.cos(math.pi + math.pi * i / 10) * r, math.sin(math.pi + math.pi * i / 10) * r) for i in range(11)]
        tentacles = 3
        segment = r * 2.0 / tentacles
        for i in range(tentacles + 1):
            wiggle = math.sin(t * 15.0 + i + self.wobble_phase) * 3.0
            outline.append((r - segment * i, r * 0.5 + wiggle))

        _blit_glow(surf, self.x, self.y, r * 2.2, self.color, 0.35)
        pygame.draw.polygon(surf, self.color, rotate_points(outline, self.rotation, self.x, self.y, pulse))

        eyes = rotate_points([(-r * 0.4, -r * 0.1), (r * 0.4, -r * 0.1)], self.rotation, self.x, self.y, pulse)
        shine = rotate_points([(-r * 0.4, -r * 0.2), (r * 0.4, -r * 0.2)], self.rotation, self.x, self.y, pulse)
        for (ex, ey), (sx, sy) in zip(eyes, shine):
            pygame.draw.circle(surf, (0, 0, 0), (int(ex), int(ey)), max(2, int(r * 0.25)))
            pygame.draw.circle(surf, (220, 220, 220), (int(sx), int(sy)), max(1, int(r * 0.08)))


class SpecialItem:
    """The egg: spawned once, drifts in to rest at the center, cracked by a tap.

    Unlike obstacles it is never consumed by reaching the center; only a
    successful :meth:`hit_test` ends it.
    """

    def __init__(
        self,
        distance: float,
        angle: float,
        speed: float = SPECIAL_SPEED,
        radius: float = SPECIAL_RADIUS,
    ) -> None:
        self.distance = float(distance)
        self.start_distance = max(float(distance), 1.0)
        self.angle = float(angle)
        self.speed = float(speed)
        self.radius = float(radius)
        self.color = EGG_SHELL
        self.age = 0.0
        self.x = 0.0
        self.y = 0.0

    @classmethod
    def spawn(cls, spawn_distance: float) -> SpecialItem:
        return cls(distance=spawn_distance, angle=random.uniform(0.0, TAU))

    @property
    def resting(self) -> bool:
        return self.distance <= 0.0

    def place(self, cx: float, cy: float) -> None:
        self.x, self.y = polar_to_cartesian(cx, cy, self.distance, self.angle)

    def update(self, dt: float, cx: float, cy: float) -> None:
        self.distance = max(0.0, self.distance - self.speed * dt)
        self.age += dt
        self.place(cx, cy)

    def hit_test(self, px: float, py: float, hit_radius: float = SPECIAL_HIT_RADIUS) -> bool:
        return point_in_circle(px, py, self.x, self.y, hit_radius)

    def draw(self, surf: pygame.Surface, font: pygame.font.Font | None = None) -> None:
        # Grows from a small shell into the big resting egg as it closes in
        progress = 1.0 - self.distance / self.start_distance
        rest_w, rest_h = SPECIAL_REST_SIZE
        pulse = 1.0 + math.sin(self.age * 5.0) * 0.05
        half_w = (self.radius * 0.8 + (rest_w - self.radius * 0.8) * progress) * pulse
        half_h = (self.radius + (rest_h - self.radius) * progress) * pulse

        _blit_glow(surf, self.x, self.y, half_h * 1.6, (255, 255, 255), 0.3)
        egg = pygame.transform.smoothscale(egg_surface(rest_w, rest_h), (max(2, int(half_w * 2)), max(2, int(half_h * 2))))
        surf.blit(egg, egg.get_rect(center=(int(self.x), int(self.y))))
        if font is not None:
            mark = font.render("?", True, EGG_MARK)
            mark = pygame.transform.rotozoom(mark, 0.0, clamp(half_h / rest_h, 0.3, 1.2))
            surf.blit(mark, mark.get_rect(center=(int(self.x), int(self.y))))
