# src/env/observations.py
from __future__ import annotations
from typing import Optional, Tuple
import numpy as np

from src.game.boost import BoostMeter
from src.game.config import GameMode
from src.game.entities import Obstacle
from src.game.world import World

OBS_SIZE = 10
OBS_LOW = np.array([0.0, -1.0] + [0.0] * (OBS_SIZE - 2), dtype=np.float32)
OBS_HIGH = np.ones(OBS_SIZE, dtype=np.float32)

def _clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else (1.0 if x > 1.0 else x)

def _next_obstacle(world: World) -> Optional[Obstacle]:
    """Closest obstacle whose right edge is still ahead of the player's hitbox left edge."""
    left = world.player.hitbox.left
    best: Optional[Obstacle] = None
    for ob in world.obstacles:
        w, _ = ob.dimensions()
        if ob.x + w / 2 < left:
            continue
        if best is None or ob.x < best.x:
            best = ob
    return best

def _ahead(world: World, x: Optional[float]) -> float:
    """Horizontal gap from the player to x, as a fraction of the viewport (1.0 = none in sight)."""
    if x is None:
        return 1.0
    return _clamp01((x - world.player.center_x) / float(world.viewport.width))

def build_observation(world: World) -> np.ndarray:
    """
    Returns a fixed (10,) float32 vector:
      [ height_above_slope, vy, jumping, riding, boosting, boost_ready,
        progress, next_obstacle_dx, next_obstacle_h, present_dx ]
    - height_above_slope in [0,1], 1 = apex of a full jump
    - vy in [-1,1], scaled by the jump power
    - flags are 0.0/1.0
    - dx values in [0,1] of the viewport width; 1.0 when nothing is ahead
    - next_obstacle_h relative to the player's height, clipped to [0,1]
    """
    p = world.player
    ground = world.slope.height_at(p.x)
    jp = abs(p.jump_power) or 1.0
    apex = (jp * jp) / (2.0 * p.gravity) if p.gravity > 0 else 1.0

    status, _ = world.boost.meter(world.clock_ms, world.config)
    ob = _next_obstacle(world)
    if ob is not None:
        _, h = ob.dimensions()
        ob_dx, ob_h = _ahead(world, ob.x), _clamp01(h / p.height)
    else:
        ob_dx, ob_h = 1.0, 0.0

    present_dx = 1.0
    if world.config.mode is GameMode.PRESENT and world.present is not None:
        present_dx = _ahead(world, world.present.x)

    feats = [
        _clamp01((ground - p.y) / apex),
        max(-1.0, min(1.0, p.vy / jp)),
        1.0 if p.is_jumping else 0.0,
        1.0 if p.is_on_obstacle else 0.0,
        1.0 if status is BoostMeter.BOOSTING else 0.0,
        1.0 if status is BoostMeter.READY else 0.0,
        world.progress,
        ob_dx,
        ob_h,
        present_dx,
    ]
    return np.asarray(feats, dtype=np.float32)

def bounds() -> Tuple[np.ndarray, np.ndarray]:
    return OBS_LOW.copy(), OBS_HIGH.copy()
