# src/game/update.py
from __future__ import annotations
import logging

from .config import FRAME_MS, GameMode
from .entities import Present
from .world import Phase, World

logger = logging.getLogger(__name__)


def update(world: World, dt_ms: float = FRAME_MS) -> Phase:
    """
    Advance the world by exactly one tick and return the phase afterwards.

    Order while PLAYING:
      boost expiry -> speed multiplier -> scroll -> distance -> particles
      -> present (may win) -> player physics -> obstacles + collisions (may lose)
    Outside PLAYING only the clock and the particles move, for the end-screen animations.
    """
    world.clock_ms += dt_ms
    world.tick += 1
    cfg = world.config

    if world.phase is not Phase.PLAYING:
        world.boost.update_particles(dt_ms, cfg)
        return world.phase

    boost = world.boost
    boost.expire(world.clock_ms, cfg)
    mult = boost.speed_multiplier(cfg)

    step_units = cfg.base_scroll_speed * mult
    step_px = step_units * world.viewport.scale
    world.scroll_offset += step_px
    _advance_distance(world, step_units)

    boost.update_particles(dt_ms, cfg)

    if cfg.mode is GameMode.PRESENT and _update_present(world, step_px):
        return world.phase

    player = world.player
    player.update_physics(world.slope.height_at(player.x))

    field = world.field
    field.maybe_spawn(world.distance, world.viewport)
    field.scroll(step_px)
    hit = field.resolve(player, world.slope, cfg.clearance_fraction)
    if hit is not None:
        world.enter_game_over(hit)
    return world.phase


def _advance_distance(world: World, step_units: float):
    cfg = world.config
    if cfg.mode is GameMode.ENDLESS:
        world.distance += step_units
        reached = int(world.distance // cfg.milestone_every)
        if reached > world.last_milestone:
            world.last_milestone = reached
            world.milestone_tick = world.tick
            logger.info("milestone %.0fm", world.meters)
    else:
        world.distance = min(cfg.total_distance, world.distance + step_units)
    if world.distance > world.high_score:
        world.high_score = world.distance


def _update_present(world: World, step_px: float) -> bool:
    """Reveal, scroll and pick up the present. Returns True when the run is won."""
    cfg = world.config
    vp = world.viewport
    present = world.present
    if present is None:
        if world.distance < cfg.present_reveal_at * cfg.total_distance:
            return False
        size = world.present_size
        present = world.present = Present(x=vp.width + size, size=size)
        # nothing else spawns once the goal is on its way
        world.field.enabled = False
        logger.info("present revealed at %.0fm", world.meters)
    else:
        present.x -= step_px
        if present.x < -present.size:
            # missed it: it comes around again
            present.x = vp.width + present.size

    if present.hitbox(world.slope).colliderect(world.player.hitbox):
        return world.enter_won()
    return False
