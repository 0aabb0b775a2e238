# src/game/level.py
from __future__ import annotations
import logging
import random
from enum import Enum
from typing import Callable, List, Optional, Sequence

import pygame

from .config import OBSTACLE_BASE_SIZE, ObstacleKind, Viewport
from .entities import Obstacle
from .player import Player
from .slope import Slope

logger = logging.getLogger(__name__)


class Contact(str, Enum):
    NONE = "none"
    CLEARED = "cleared"   # overlapping, but high enough to count as jumped over
    HIT = "hit"


def classify_contact(player_box: pygame.Rect, obstacle_box: pygame.Rect,
                     clearance_fraction: float) -> Contact:
    """
    Rect vs rect with the clearance rule: needs horizontal AND vertical overlap,
    and the player's bottom must be below the clearance line, which sits
    `clearance_fraction` of the obstacle height down from its top.
    """
    if player_box.right <= obstacle_box.left or player_box.left >= obstacle_box.right:
        return Contact.NONE
    if player_box.bottom <= obstacle_box.top or player_box.top >= obstacle_box.bottom:
        return Contact.NONE
    clearance_line = obstacle_box.top + obstacle_box.height * clearance_fraction
    if player_box.bottom <= clearance_line:
        return Contact.CLEARED
    return Contact.HIT


class ObstacleField:
    """
    Distance-driven obstacle stream scrolling left.
    A new obstacle appears every time the travelled distance crosses a threshold
    drawn uniformly from [min_spacing, max_spacing]; the RNG is injected so a
    fixed seed gives a fixed sequence.
    """
    def __init__(self, rng: random.Random, catalog: Sequence[ObstacleKind],
                 min_spacing: float, max_spacing: float,
                 aspect_of: Optional[Callable[[ObstacleKind], Optional[float]]] = None):
        self.rng = rng
        self.catalog = tuple(catalog)
        self.min_spacing = float(min_spacing)
        self.max_spacing = float(max_spacing)
        self.aspect_of = aspect_of
        self.obstacles: List[Obstacle] = []
        self.spawned = 0
        self.enabled = True
        self.next_spawn_at = self._draw_threshold(0.0)

    def _draw_threshold(self, distance: float) -> float:
        return distance + self.rng.uniform(self.min_spacing, self.max_spacing)

    def maybe_spawn(self, distance: float, viewport: Viewport) -> int:
        """Spawn for every threshold crossed by `distance`. Returns how many appeared."""
        if not self.enabled:
            return 0
        n = 0
        while distance >= self.next_spawn_at:
            if self.catalog:
                self._spawn(viewport)
                n += 1
            self.next_spawn_at = self._draw_threshold(distance)
        return n

    def _spawn(self, viewport: Viewport):
        kind = self.rng.choice(self.catalog)
        size = OBSTACLE_BASE_SIZE * kind.size_multiplier * viewport.scale
        aspect = None
        if self.aspect_of is not None:
            aspect = self.aspect_of(kind)
        ob = Obstacle(
            kind=kind,
            x=viewport.width + size,   # just past the right edge
            size=size,
            rotation=kind.rotation,
            aspect=aspect if aspect else 1.0,
        )
        self.obstacles.append(ob)
        self.spawned += 1
        logger.debug("spawned %s at distance threshold %.0f", kind.name, self.next_spawn_at)

    def scroll(self, dx: float):
        """Move everything left by dx px and release what left the screen."""
        for ob in self.obstacles:
            ob.x -= dx
        self.obstacles = [ob for ob in self.obstacles if ob.x > -ob.size]

    def resolve(self, player: Player, slope: Slope, clearance_fraction: float) -> Optional[Obstacle]:
        """
        Collision pass in spawn order. Returns the first obstacle hit, if any.
        Cleared obstacles met on the way down become a surface to ride on.
        """
        for ob in self.obstacles:
            box = ob.hitbox(slope)
            c = classify_contact(player.hitbox, box, clearance_fraction)
            if c is Contact.HIT:
                return ob
            if c is Contact.CLEARED and player.is_jumping and player.vy >= 0.0:
                player.ride(box.top)
        return None

    def rescale(self, ratio: float):
        for ob in self.obstacles:
            ob.x *= ratio
            ob.size *= ratio
