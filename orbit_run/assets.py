"""The decorative central body: an optional image with a drawn fallback."""

from __future__ import annotations

import logging
import os

import pygame

from .config import (
    ASSET_DIR,
    PLANET_FALLBACK,
    PLANET_FALLBACK_RADIUS,
    PLANET_FALLBACK_RIM,
    PLANET_GLOW,
    PLANET_IMAGE,
    PLANET_WIDTH,
)
from .utils import radial_glow_surface

logger = logging.getLogger(__name__)


class CentralBody:
    def __init__(self) -> None:
        self.image: pygame.Surface | None = None
        self.loaded = False

    def load(self, path: str | None = None) -> bool:
        """Try to load the planet image; on failure keep drawing the fallback."""
        path = path or os.path.join(ASSET_DIR, PLANET_IMAGE)
        try:
            raw = pygame.image.load(path)
            if pygame.display.get_surface() is not None:
                raw = raw.convert_alpha()
            scale = PLANET_WIDTH / max(1, raw.get_width())
            size = (PLANET_WIDTH, max(1, int(raw.get_height() * scale)))
            self.image = pygame.transform.smoothscale(raw, size)
        except (pygame.error, OSError, ValueError):
            logger.error("Failed to load %s, using fallback planet", path)
            self.image = None
            self.loaded = False
            return False
        self.loaded = True
        return True

    def draw(self, surf: pygame.Surface, cx: float, cy: float) -> None:
        center = (int(cx), int(cy))
        if self.loaded and self.image is not None:
            glow = radial_glow_surface(PLANET_WIDTH, PLANET_GLOW, 0.35)
            surf.blit(glow, glow.get_rect(center=center), special_flags=pygame.BLEND_RGB_ADD)
            surf.blit(self.image, self.image.get_rect(center=center))
            return
        # Fallback: golden disc with a darker rim
        pygame.draw.circle(surf, PLANET_FALLBACK, center, PLANET_FALLBACK_RADIUS)
        pygame.draw.circle(surf, PLANET_FALLBACK_RIM, center, PLANET_FALLBACK_RADIUS, 5)
