# src/game/entities.py
from __future__ import annotations
import random
from dataclasses import dataclass
from typing import List, Tuple

import pygame

from .config import (
    MOUNTAINS, TREES, ORNAMENT_COLORS, FRAME_MS, ObstacleKind
)
from .slope import Slope


@dataclass
class Obstacle:
    """A catalog item sliding left along the slope. x is the horizontal centre."""
    kind: ObstacleKind
    x: float
    size: float
    rotation: float
    aspect: float = 1.0   # image width / height; 1.0 until the image is known

    def dimensions(self) -> Tuple[float, float]:
        """On-screen (w, h) fitted into `size`, preserving the image aspect ratio."""
        if self.aspect >= 1.0:
            return self.size, self.size / self.aspect
        return self.size * self.aspect, self.size

    def hitbox(self, slope: Slope) -> pygame.Rect:
        w, h = self.dimensions()
        bottom = slope.height_at(self.x)
        return pygame.Rect(round(self.x - w / 2), round(bottom - h), round(w), round(h))


@dataclass
class Present:
    """The goal. Only exists once the run is close to the end."""
    x: float
    size: float

    def hitbox(self, slope: Slope) -> pygame.Rect:
        bottom = slope.height_at(self.x)
        return pygame.Rect(round(self.x - self.size / 2), round(bottom - self.size),
                           round(self.size), round(self.size))


@dataclass
class Particle:
    """Short-lived boost cloud. Velocities are per 60 Hz tick."""
    x: float
    y: float
    vx: float
    vy: float
    radius: float
    opacity: float = 1.0
    age_ms: float = 0.0

    def update(self, dt_ms: float, lifetime_ms: float) -> bool:
        """Age and drift; returns False once past its lifetime."""
        k = dt_ms / FRAME_MS
        self.age_ms += dt_ms
        self.x += self.vx * k
        self.y += self.vy * k
        self.radius *= 1.0 + 0.02 * k
        self.opacity = max(0.0, 1.0 - self.age_ms / lifetime_ms)
        return self.age_ms <= lifetime_ms


# -------------------- Background decoration --------------------

@dataclass(frozen=True)
class Mountain:
    x: float          # base px
    width: float
    height: float
    cap_depth: float  # snow cap depth as a fraction of height

@dataclass(frozen=True)
class Tree:
    x: float
    size: float
    # (dx, dy, color index) in fractions of `size`, measured from the tree's top centre
    ornaments: Tuple[Tuple[float, float, int], ...]


def build_decoration(seed: int) -> Tuple[List[Mountain], List[Tree]]:
    """
    Background elements from the static layout tables. Each element gets its own
    RNG seeded from the world seed and its index, so decoration never changes
    between frames and is reproducible per seed.
    """
    mountains: List[Mountain] = []
    for i, (x, w, h) in enumerate(MOUNTAINS):
        rng = random.Random(seed * 7919 + i)
        mountains.append(Mountain(float(x), float(w), float(h), rng.uniform(0.18, 0.32)))

    trees: List[Tree] = []
    for i, (x, size) in enumerate(TREES):
        rng = random.Random(seed * 104729 + i)
        n = rng.randint(2, 5)
        ornaments = tuple(
            (rng.uniform(-0.3, 0.3), rng.uniform(0.25, 0.9), rng.randrange(len(ORNAMENT_COLORS)))
            for _ in range(n)
        )
        trees.append(Tree(float(x), float(size), ornaments))
    return mountains, trees


def wrap_x(base_x: float, offset: float, wrap_width: float,
           element_width: float, viewport_width: float) -> float:
    """
    Screen x of a repeating element scrolled by `offset`.
    Result always lies in (viewport_width - wrap_width, viewport_width].
    """
    if wrap_width <= 0:
        return base_x - offset
    x = (base_x - offset) % wrap_width
    if x < -element_width:
        x += wrap_width
    if x > viewport_width:
        x -= wrap_width
    return x
