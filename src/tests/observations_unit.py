# src/tests/observations_unit.py
import random

import numpy as np

from src.env.observations import OBS_SIZE, bounds, build_observation
from src.game.config import DEFAULT_CATALOG, GameConfig, Viewport
from src.game.entities import Obstacle
from src.game.update import update
from src.game.world import World, Phase, press_boost, press_jump


def make_world(**cfg) -> World:
    cfg.setdefault("catalog", ())
    return World(GameConfig(**cfg), Viewport(800, 400), seed=8)


def test_fresh_world_vector():
    w = make_world()
    obs = build_observation(w)
    assert isinstance(obs, np.ndarray) and obs.dtype == np.float32 and obs.shape == (OBS_SIZE,), "Shape/dtype mismatch"
    # grounded, still, ready to boost, nothing in sight
    expected = [0.0, 0.0, 0.0, 0.0, 0.0, 1.0, 0.0, 1.0, 0.0, 1.0]
    assert np.allclose(obs, expected), f"unexpected start vector {obs}"


def test_next_obstacle_distance_and_height():
    w = make_world()
    p = w.player
    w.field.obstacles.append(Obstacle(DEFAULT_CATALOG[0], p.center_x + 200.0, 40.0, 0.0))
    obs = build_observation(w)
    assert abs(obs[7] - 0.25) < 1e-6, "dx is a fraction of the viewport width"
    assert abs(obs[8] - 40.0 / p.height) < 1e-6, "height relative to the skier"

    # behind the player: ignored
    w.field.obstacles[0].x = p.hitbox.left - 100.0
    assert build_observation(w)[7] == 1.0


def test_jump_and_boost_flags():
    w = make_world()
    press_jump(w)
    press_boost(w)
    press_boost(w)
    for _ in range(5):
        update(w)
    obs = build_observation(w)
    assert 0.0 < obs[0] <= 1.0, "airborne height out of range"
    assert -1.0 <= obs[1] < 0.0, "still rising: vy normalised negative"
    assert obs[2] == 1.0 and obs[4] == 1.0 and obs[5] == 0.0


def test_stays_within_bounds():
    low, high = bounds()
    w = World(GameConfig(total_distance=6000.0), Viewport(800, 400), seed=3)
    rng = random.Random(0)
    for _ in range(3000):
        if rng.random() < 0.05:
            press_jump(w)
        if rng.random() < 0.02:
            press_boost(w)
            press_boost(w)
        update(w)
        obs = build_observation(w)
        assert np.all(obs >= low) and np.all(obs <= high), f"out of bounds at tick {w.tick}: {obs}"
        if w.phase is not Phase.PLAYING:
            break


def main():
    test_fresh_world_vector()
    test_next_obstacle_distance_and_height()
    test_jump_and_boost_flags()
    test_stays_within_bounds()
    print("✓ observations unit sanity passed")

if __name__ == "__main__":
    main()
