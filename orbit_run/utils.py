"""Geometry, color and procedural surface helpers used across the game."""

from __future__ import annotations

import math
from functools import lru_cache
from typing import Sequence

import numpy as np
import pygame

TAU = math.pi * 2.0


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp a numeric value into the inclusive range [lo, hi]."""
    return max(lo, min(hi, value))


def polar_to_cartesian(cx: float, cy: float, distance: float, angle: float) -> tuple[float, float]:
    """Screen position of a point at (distance, angle) around center (cx, cy)."""
    return cx + math.cos(angle) * distance, cy + math.sin(angle) * distance


def circle_circle_collision(
    ax: float,
    ay: float,
    ar: float,
    bx: float,
    by: float,
    br: float,
) -> bool:
    """True if the two circles overlap (centers closer than the sum of radii)."""
    return math.hypot(ax - bx, ay - by) < ar + br


def point_in_circle(px: float, py: float, cx: float, cy: float, r: float) -> bool:
    return math.hypot(px - cx, py - cy) < r


def rotate_points(
    points: Sequence[tuple[float, float]],
    angle: float,
    ox: float = 0.0,
    oy: float = 0.0,
    scale: float = 1.0,
) -> list[tuple[float, float]]:
    """Rotate local points by angle (radians), scale them, then offset to (ox, oy)."""
    ca, sa = math.cos(angle), math.sin(angle)
    return [
        (ox + (px * ca - py * sa) * scale, oy + (px * sa + py * ca) * scale)
        for (px, py) in points
    ]


def scale_color(color: tuple[int, int, int], factor: float) -> tuple[int, int, int]:
    """Scale an RGB color by factor, clamped to [0,255]."""
    r, g, b = color
    return (
        int(clamp(r * factor, 0, 255)),
        int(clamp(g * factor, 0, 255)),
        int(clamp(b * factor, 0, 255)),
    )


@lru_cache(maxsize=64)
def radial_glow_surface(radius: int, color: tuple[int, int, int], strength: float = 0.6) -> pygame.Surface:
    """Build a soft radial glow meant to be blitted with BLEND_RGB_ADD.

    Stands in for canvas-style shadow blur: black at the rim, ``color * strength``
    at the center with a quadratic falloff.
    """
    size = max(2, int(radius) * 2)
    axis = np.linspace(-1.0, 1.0, size, dtype=np.float32)
    X, Y = np.meshgrid(axis, axis, indexing="ij")  # surfarray arrays are (w, h)
    falloff = np.clip(1.0 - np.sqrt(X * X + Y * Y), 0.0, 1.0) ** 2 * strength
    rgb = np.stack([falloff * c for c in color], axis=-1)
    return pygame.surfarray.make_surface(np.clip(rgb, 0, 255).astype(np.uint8))


# Radial gradient stops for the egg shell, light source top-left
_EGG_STOPS = np.array([0.0, 0.3, 0.9, 1.0], dtype=np.float32)
_EGG_COLORS = np.array(
    [
        (255, 255, 255),
        (255, 251, 229),
        (230, 216, 179),
        (194, 178, 128),
    ],
    dtype=np.float32,
)


@lru_cache(maxsize=32)
def egg_surface(half_w: int, half_h: int) -> pygame.Surface:
    """Shaded egg: an ellipse filled with an off-center radial gradient."""
    half_w = max(2, int(half_w))
    half_h = max(2, int(half_h))
    w, h = half_w * 2, half_h * 2
    xs = np.arange(w, dtype=np.float32) - half_w + 0.5
    ys = np.arange(h, dtype=np.float32) - half_h + 0.5
    X, Y = np.meshgrid(xs, ys, indexing="ij")

    # Gradient measured from a highlight up and to the left of center
    lx, ly = -0.28 * half_w, -0.22 * half_h
    reach = 0.9 * max(half_w, half_h)
    t = np.clip(np.hypot(X - lx, Y - ly) / reach, 0.0, 1.0)
    rgb = np.stack([np.interp(t, _EGG_STOPS, _EGG_COLORS[:, i]) for i in range(3)], axis=-1)

    # Ellipse mask with a one pixel soft edge
    q = np.sqrt((X / half_w) ** 2 + (Y / half_h) ** 2)
    alpha = np.clip((1.0 - q) * min(half_w, half_h), 0.0, 1.0) * 255.0

    surf = pygame.Surface((w, h), pygame.SRCALPHA)
    pixels = pygame.surfarray.pixels3d(surf)
    pixels[...] = rgb.astype(np.uint8)
    del pixels
    alphas = pygame.surfarray.pixels_alpha(surf)
    alphas[...] = alpha.astype(np.uint8)
    del alphas
    return surf


def invert_surface(surf: pygame.Surface) -> None:
    """Invert the RGB channels of surf in place."""
    pixels = pygame.surfarray.pixels3d(surf)
    np.subtract(255, pixels, out=pixels)
    del pixels
