# src/tests/boost_tests.py
from __future__ import annotations

from src.game.boost import BoostMeter, BoostState
from src.game.config import GameConfig, Viewport
from src.game.update import update
from src.game.world import World, press_boost

DT = 10.0   # ms per tick, keeps the clock on exact integers


def make_world() -> World:
    cfg = GameConfig(catalog=(), boost_duration_ms=100.0, boost_cooldown_ms=500.0,
                     double_tap_ms=300.0, particle_lifetime_ms=200.0)
    return World(cfg, Viewport(800, 400), seed=2)


def advance(w: World, ticks: int):
    for _ in range(ticks):
        update(w, DT)


def test_single_tap_does_nothing():
    w = make_world()
    assert not press_boost(w)
    assert not w.boost.is_boosting


def test_taps_too_far_apart():
    w = make_world()
    press_boost(w)
    advance(w, 31)           # 310 ms later
    assert not press_boost(w), "taps 310 ms apart are not a double tap"
    assert not w.boost.is_boosting


def test_double_tap_boosts_for_exact_duration():
    w = make_world()
    press_boost(w)
    advance(w, 20)
    gravity, jump = w.player.gravity, w.player.jump_power
    assert press_boost(w), "second tap within 300 ms must boost"
    assert w.boost.boost_started_at == w.clock_ms == w.boost.last_boost_at

    steps = []
    for _ in range(13):
        before = w.distance
        update(w, DT)
        steps.append(w.distance - before)
    assert steps[:10] == [12.5] * 10, f"boosted ticks wrong: {steps}"
    assert steps[10:] == [5.0] * 3, "boost must revert after its duration"
    assert not w.boost.is_boosting
    assert (w.player.gravity, w.player.jump_power) == (gravity, jump), "boost only changes speed"


def test_default_boost_lasts_its_full_duration():
    # 60 Hz ticks: 1500 ms is exactly 90 frames
    w = World(GameConfig(catalog=()), Viewport(800, 400), seed=2)
    for _ in range(7):
        update(w)
    press_boost(w)
    assert press_boost(w)
    boosted = 0
    for _ in range(120):
        before = w.distance
        update(w)
        if w.distance - before > w.config.base_scroll_speed:
            boosted += 1
    assert boosted == 90, f"{boosted} boosted ticks, expected 90"
    assert not w.boost.is_boosting


def test_cooldown_blocks_until_elapsed():
    w = make_world()
    press_boost(w)
    assert press_boost(w)
    start = w.clock_ms
    advance(w, 20)           # +200 ms: boost over, cooldown still running
    assert not press_boost(w)
    assert not press_boost(w), "cooldown not elapsed"
    assert w.boost.meter(w.clock_ms, w.config)[0] is BoostMeter.COOLDOWN

    advance(w, 40)           # +600 ms since the boost
    assert w.clock_ms - start >= 500.0
    assert w.boost.meter(w.clock_ms, w.config)[0] is BoostMeter.READY
    assert not press_boost(w)
    assert press_boost(w), "cooldown elapsed: double tap boosts again"


def test_particles_burst_and_expire():
    w = make_world()
    press_boost(w)
    press_boost(w)
    assert len(w.boost.particles) == w.config.particle_burst
    advance(w, 10)
    assert all(0.0 < p.opacity < 1.0 for p in w.boost.particles), "particles fade with age"
    advance(w, 11)           # 210 ms > 200 ms lifetime
    assert w.boost.particles == []


def test_meter_fractions():
    cfg = GameConfig(boost_duration_ms=100.0, boost_cooldown_ms=500.0)
    b = BoostState()
    assert b.meter(0.0, cfg) == (BoostMeter.READY, 1.0)
    b.tap(0.0, cfg)
    assert b.tap(10.0, cfg)
    assert b.meter(60.0, cfg) == (BoostMeter.BOOSTING, 0.5)
    b.expire(110.0, cfg)
    assert b.is_boosting, "the tick ending exactly at the duration is still boosted"
    b.expire(120.0, cfg)
    assert not b.is_boosting
    status, frac = b.meter(260.0, cfg)
    assert status is BoostMeter.COOLDOWN and abs(frac - 0.5) < 1e-9


def main():
    test_single_tap_does_nothing()
    test_taps_too_far_apart()
    test_double_tap_boosts_for_exact_duration()
    test_default_boost_lasts_its_full_duration()
    test_cooldown_blocks_until_elapsed()
    test_particles_burst_and_expire()
    test_meter_fractions()
    print("✓ boost tests ok")

if __name__ == "__main__":
    main()
