# src/game/boost.py
from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .config import GameConfig
from .entities import Particle

logger = logging.getLogger(__name__)

# slack for the float world clock (60 Hz ticks are not exact in binary)
CLOCK_EPS_MS = 1e-6


class BoostMeter(str, Enum):
    BOOSTING = "boosting"
    READY = "ready"
    COOLDOWN = "cooldown"


@dataclass
class BoostState:
    """
    Double-tap speed boost with a cooldown. All timestamps are world-clock ms.
    Only the scroll speed multiplier depends on it; gravity and jump do not.
    """
    is_boosting: bool = False
    boost_started_at: Optional[float] = None
    last_boost_at: Optional[float] = None
    last_tap_at: Optional[float] = None
    particles: List[Particle] = field(default_factory=list)

    def cooldown_elapsed(self, now: float, cfg: GameConfig) -> bool:
        return self.last_boost_at is None or (now - self.last_boost_at) >= cfg.boost_cooldown_ms - CLOCK_EPS_MS

    def tap(self, now: float, cfg: GameConfig) -> bool:
        """
        Register one press of the boost control.
        Two presses within `double_tap_ms` trigger a boost when the cooldown is over.
        Returns True when this press triggered it.
        """
        is_double = self.last_tap_at is not None and (now - self.last_tap_at) <= cfg.double_tap_ms
        if is_double and self.cooldown_elapsed(now, cfg):
            self.is_boosting = True
            self.boost_started_at = now
            self.last_boost_at = now
            self.last_tap_at = None
            logger.debug("boost triggered at t=%.0fms", now)
            return True
        self.last_tap_at = now
        return False

    def expire(self, now: float, cfg: GameConfig):
        """
        Called after the clock has advanced, so `now` is the end of the tick about
        to run. Every tick ending within (start, start + duration] stays boosted.
        """
        if self.is_boosting and self.boost_started_at is not None:
            if now - self.boost_started_at > cfg.boost_duration_ms + CLOCK_EPS_MS:
                self.is_boosting = False

    def speed_multiplier(self, cfg: GameConfig) -> float:
        return cfg.boost_multiplier if self.is_boosting else 1.0

    def emit_burst(self, x: float, y: float, scale: float, rng: random.Random, cfg: GameConfig):
        """Clouds puffing out behind the skier, drifting left and up."""
        for _ in range(cfg.particle_burst):
            self.particles.append(Particle(
                x=x + rng.uniform(-6.0, 6.0) * scale,
                y=y + rng.uniform(-8.0, 4.0) * scale,
                vx=-rng.uniform(1.0, 3.5) * scale,
                vy=-rng.uniform(0.2, 1.2) * scale,
                radius=rng.uniform(5.0, 10.0) * scale,
            ))

    def update_particles(self, dt_ms: float, cfg: GameConfig):
        self.particles = [p for p in self.particles if p.update(dt_ms, cfg.particle_lifetime_ms)]

    def meter(self, now: float, cfg: GameConfig) -> Tuple[BoostMeter, float]:
        """
        HUD state plus a fill fraction in [0, 1]:
        remaining boost while boosting, recharge progress while cooling down.
        """
        if self.is_boosting and self.boost_started_at is not None:
            left = 1.0 - (now - self.boost_started_at) / cfg.boost_duration_ms
            return BoostMeter.BOOSTING, max(0.0, min(1.0, left))
        if self.cooldown_elapsed(now, cfg):
            return BoostMeter.READY, 1.0
        done = (now - self.last_boost_at) / cfg.boost_cooldown_ms
        return BoostMeter.COOLDOWN, max(0.0, min(1.0, done))
