# src/game/world.py
from __future__ import annotations
import logging
import random
from dataclasses import replace
from enum import Enum
from typing import Callable, Dict, List, Optional

from .boost import BoostState
from .config import (
    PLAYER_X, PRESENT_SIZE, UNITS_PER_METER, GameConfig, GameMode, ObstacleKind, Viewport
)
from .entities import Mountain, Obstacle, Present, Tree, build_decoration
from .level import ObstacleField
from .player import Player
from .slope import Slope

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    PLAYING = "playing"
    WON = "won"
    GAME_OVER = "game_over"


class Control(str, Enum):
    JUMP = "jump"
    BOOST = "boost"
    RESTART = "restart"


class World:
    """
    The whole mutable game state. `update` (src.game.update) is the only thing
    that advances it per tick; input handlers below only do the immediate jump
    and boost bookkeeping; the renderer reads it.
    """

    def __init__(self,
                 config: Optional[GameConfig] = None,
                 viewport: Optional[Viewport] = None,
                 seed: Optional[int] = None,
                 aspect_of: Optional[Callable[[ObstacleKind], Optional[float]]] = None):
        if seed is None:
            seed = random.randrange(0, 2**32 - 1)
        self.config = config or GameConfig()
        self.viewport = viewport or Viewport()
        self.seed = seed
        self.aspect_of = aspect_of
        # in-memory only, one best per mode, survives restarts
        self.high_scores: Dict[GameMode, float] = {m: 0.0 for m in GameMode}

        self.mountains: List[Mountain] = []
        self.trees: List[Tree] = []
        self.reset()

    # -------------------- Lifecycle --------------------

    def reset(self):
        """Fresh run with the current seed: every piece of run state back to its initial value."""
        cfg = self.config
        self.rng = random.Random(self.seed)
        # separate stream so boost clouds never shift the obstacle sequence
        self.fx_rng = random.Random(self.seed ^ 0x5F3759DF)
        self.mountains, self.trees = build_decoration(self.seed)
        self.slope = Slope(self.viewport.ground_y, self.viewport.center_x, cfg.slope_grade)

        self.clock_ms = 0.0
        self.tick = 0
        self.phase = Phase.PLAYING
        self.phase_entered_tick = 0
        self.win_started_at: Optional[float] = None
        self.game_over_started_at: Optional[float] = None
        self.crashed_into: Optional[Obstacle] = None

        self.scroll_offset = 0.0
        self.distance = 0.0
        self.last_milestone = 0
        self.milestone_tick: Optional[int] = None

        self.field = ObstacleField(self.rng, cfg.catalog, cfg.spawn_min_spacing,
                                   cfg.spawn_max_spacing, aspect_of=self.aspect_of)
        self.present: Optional[Present] = None

        ground = self.slope.height_at(PLAYER_X * self.viewport.scale)
        self.player = Player.spawn(self.viewport, ground,
                                   gravity=cfg.gravity, jump_power=cfg.jump_power)
        self.boost = BoostState()

    def restart(self, seed: Optional[int] = None):
        """Back to PLAYING. Same layout unless a new seed is given."""
        if seed is not None:
            self.seed = seed
        logger.info("restart (seed=%s, mode=%s)", self.seed, self.config.mode.value)
        self.reset()

    def set_mode(self, mode: GameMode):
        """Takes effect from the next reset."""
        self.config = replace(self.config, mode=GameMode(mode))

    # -------------------- Queries --------------------

    @property
    def obstacles(self) -> List[Obstacle]:
        return self.field.obstacles

    @property
    def ticks_in_phase(self) -> int:
        return self.tick - self.phase_entered_tick

    @property
    def meters(self) -> float:
        return self.distance / UNITS_PER_METER

    @property
    def total_meters(self) -> float:
        return self.config.total_distance / UNITS_PER_METER

    @property
    def progress(self) -> float:
        """Fraction of the run done; 0 in endless mode."""
        if self.config.mode is GameMode.ENDLESS:
            return 0.0
        return min(1.0, self.distance / self.config.total_distance)

    @property
    def high_score(self) -> float:
        """Best distance for the current mode."""
        return self.high_scores[self.config.mode]

    @high_score.setter
    def high_score(self, value: float):
        self.high_scores[self.config.mode] = value

    @property
    def present_size(self) -> float:
        return PRESENT_SIZE * self.viewport.scale

    # -------------------- Phase transitions --------------------

    def enter_won(self) -> bool:
        if self.phase is not Phase.PLAYING:
            return False
        self.phase = Phase.WON
        self.phase_entered_tick = self.tick
        self.win_started_at = self.clock_ms
        self.high_score = max(self.high_score, self.distance)
        logger.info("present reached at %.0fm", self.meters)
        return True

    def enter_game_over(self, obstacle: Optional[Obstacle] = None) -> bool:
        if self.phase is not Phase.PLAYING:
            return False
        self.phase = Phase.GAME_OVER
        self.phase_entered_tick = self.tick
        self.game_over_started_at = self.clock_ms
        self.crashed_into = obstacle
        self.high_score = max(self.high_score, self.distance)
        logger.info("crashed into %s at %.0fm",
                    obstacle.kind.name if obstacle is not None else "?", self.meters)
        return True

    # -------------------- Viewport --------------------

    def resize(self, width: int, height: int):
        """Recompute every scale-dependent value, keeping positions proportional."""
        old = self.viewport
        new = Viewport(int(width), int(height))
        if new == old:
            return
        ratio = new.scale / old.scale if old.scale else 1.0
        p = self.player
        height_above = self.slope.height_at(p.x) - p.y

        self.viewport = new
        self.slope = Slope(new.ground_y, new.center_x, self.config.slope_grade)
        p.rescale(old, new, self.config.gravity, self.config.jump_power)
        if p.is_jumping:
            p.y = self.slope.height_at(p.x) - height_above * ratio
        else:
            p.y = self.slope.height_at(p.x)

        self.scroll_offset *= ratio
        self.field.rescale(ratio)
        if self.present is not None:
            self.present.x *= ratio
            self.present.size *= ratio
        for part in self.boost.particles:
            part.x *= ratio
            part.y *= ratio
        logger.debug("viewport %dx%d -> %dx%d (scale %.3f)",
                     old.width, old.height, new.width, new.height, new.scale)


# -------------------- Input --------------------

def press_jump(world: World) -> bool:
    if world.phase is not Phase.PLAYING:
        return False
    return world.player.try_jump()


def press_boost(world: World) -> bool:
    """One press of the boost control; the second press of a double tap may trigger it."""
    if world.phase is not Phase.PLAYING:
        return False
    cfg = world.config
    if not world.boost.tap(world.clock_ms, cfg):
        return False
    p = world.player
    world.boost.emit_burst(p.x, p.y - p.height * 0.4, world.viewport.scale, world.fx_rng, cfg)
    logger.info("boost at %.0fm", world.meters)
    return True


def press_restart(world: World) -> bool:
    if world.phase is not Phase.GAME_OVER:
        return False
    world.restart()
    return True


def handle_control(world: World, control: Control) -> bool:
    if control is Control.JUMP:
        return press_jump(world)
    if control is Control.BOOST:
        return press_boost(world)
    if control is Control.RESTART:
        return press_restart(world)
    return False
