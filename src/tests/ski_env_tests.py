# src/tests/ski_env_tests.py
"""
Quick tests for SkiEnv (Gymnasium environment).

Usage (from repo root):
  python -m src.tests.ski_env_tests
  python -m src.tests.ski_env_tests --render
  python -m src.tests.ski_env_tests --no-api-check --no-determinism
  pytest src/tests/ski_env_tests.py
"""

from __future__ import annotations
import argparse
import sys
from typing import List, Tuple

import numpy as np
from gymnasium.utils.env_checker import check_env

from src.env.ski_env import SkiEnv, WIN_REWARD
from src.game.config import GameConfig


def api_check(frame_skip: int) -> None:
    """Verify Gym API contract (spaces, step/reset signatures, types)."""
    env = SkiEnv(frame_skip=frame_skip)
    try:
        check_env(env, skip_render_check=True)
    finally:
        env.close()
    print("✓ API check ok")


def smoke_test(steps: int, seed: int, frame_skip: int) -> None:
    """Short random rollout: no crashes, obs in space, reward type, proper terminations."""
    env = SkiEnv(frame_skip=frame_skip)
    try:
        obs, info = env.reset(seed=seed)
        assert env.observation_space.contains(obs), "Initial observation not in space"
        assert info["seed"] == seed

        env.action_space.seed(seed)
        for t in range(steps):
            a = env.action_space.sample()
            obs, r, term, trunc, info = env.step(a)
            assert isinstance(r, float), "Reward must be a float"
            assert env.observation_space.contains(obs), f"Step {t}: observation out of bounds"
            if term:
                assert info["phase"] in ("won", "game_over"), "terminated while still playing"
            if term or trunc:
                break
    finally:
        env.close()
    print("✓ Smoke test ok")


def determinism_test(steps: int, seed: int, frame_skip: int) -> None:
    """Same seed + same action sequence => identical obs/reward/terminal flags."""
    def rollout(seed_val: int, action_seq: List[int]) -> List[Tuple[np.ndarray, float, bool, bool]]:
        env = SkiEnv(frame_skip=frame_skip)
        traj: List[Tuple[np.ndarray, float, bool, bool]] = []
        try:
            obs, _ = env.reset(seed=seed_val)
            for a in action_seq:
                obs, r, term, trunc, _ = env.step(int(a))
                traj.append((obs.copy(), float(r), bool(term), bool(trunc)))
                if term or trunc:
                    break
        finally:
            env.close()
        return traj

    # Fixed action sequence using a local RNG (not numpy global)
    rng = np.random.RandomState(42)
    action_seq = [int(rng.randint(0, 3)) for _ in range(steps)]

    t1 = rollout(seed, action_seq)
    t2 = rollout(seed, action_seq)

    assert len(t1) == len(t2), "Determinism: trajectory length mismatch"
    for i, ((o1, r1, te1, tr1), (o2, r2, te2, tr2)) in enumerate(zip(t1, t2)):
        if not np.allclose(o1, o2):
            raise AssertionError(f"Determinism: obs mismatch at step {i}")
        if not (r1 == r2 and te1 == te2 and tr1 == tr2):
            raise AssertionError(f"Determinism: transition mismatch at step {i}")

    print("✓ Determinism ok")


def unseeded_reset_test(seed: int) -> None:
    """Seeded reset followed by plain resets draws the same world seeds every time."""
    def seeds() -> List[int]:
        env = SkiEnv()
        try:
            env.reset(seed=seed)
            return [env.reset()[1]["seed"] for _ in range(3)]
        finally:
            env.close()

    first, second = seeds(), seeds()
    assert first == second, f"plain resets not reproducible: {first} vs {second}"
    assert len(set(first)) == 3, "each plain reset should get a fresh world seed"
    print("✓ Unseeded resets ok")


def win_reward_test() -> None:
    """Empty slope: NOOP rides straight into the present and gets the bonus."""
    env = SkiEnv(frame_skip=4, time_limit_seconds=None,
                 config=GameConfig(catalog=(), total_distance=1000.0))
    try:
        env.reset(seed=0)
        total, term, info = 0.0, False, {}
        for _ in range(200):
            _, r, term, trunc, info = env.step(0)
            total += r
            if term or trunc:
                break
        assert term and info["phase"] == "won", f"expected a win, got {info.get('phase')}"
        assert total > WIN_REWARD
    finally:
        env.close()
    print("✓ Win reward ok")


def rgb_array_test() -> None:
    env = SkiEnv(render_mode="rgb_array")
    try:
        env.reset(seed=1)
        env.step(0)
        frame = env.render()
        assert frame.shape == (env.viewport.height, env.viewport.width, 3)
        assert frame.dtype == np.uint8
    finally:
        env.close()
    print("✓ rgb_array ok")


def render_demo(steps: int, seed: int, frame_skip: int) -> None:
    """Open a window and run a short NOOP demo so you can visually verify behavior."""
    env = SkiEnv(render_mode="human", frame_skip=frame_skip)
    try:
        obs, info = env.reset(seed=seed)
        for _ in range(steps):
            obs, r, term, trunc, info = env.step(0)
            if term or trunc:
                break
    finally:
        env.close()
    print("✓ Render demo finished")


# pytest entry points
def test_api():
    api_check(frame_skip=4)

def test_smoke():
    smoke_test(steps=300, seed=123, frame_skip=4)

def test_determinism():
    determinism_test(steps=300, seed=123, frame_skip=4)

def test_unseeded_reset():
    unseeded_reset_test(seed=123)

def test_win_reward():
    win_reward_test()

def test_rgb_array():
    rgb_array_test()


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--seed", type=int, default=123, help="Episode seed for tests")
    ap.add_argument("--steps", type=int, default=300, help="Max decision steps per test")
    ap.add_argument("--frame-skip", type=int, default=4, help="Sim frames per decision step")
    ap.add_argument("--render", action="store_true", help="Run a short visual demo")
    ap.add_argument("--no-api-check", action="store_true", help="Skip Gym API compliance check")
    ap.add_argument("--no-smoke", action="store_true", help="Skip smoke test")
    ap.add_argument("--no-determinism", action="store_true", help="Skip determinism test")
    args = ap.parse_args()

    try:
        if not args.no_api_check:
            api_check(frame_skip=args.frame_skip)
        if not args.no_smoke:
            smoke_test(steps=args.steps, seed=args.seed, frame_skip=args.frame_skip)
        if not args.no_determinism:
            determinism_test(steps=args.steps, seed=args.seed, frame_skip=args.frame_skip)
        unseeded_reset_test(seed=args.seed)
        win_reward_test()
        rgb_array_test()
        if args.render:
            render_demo(steps=min(args.steps, 600), seed=args.seed, frame_skip=args.frame_skip)
    except AssertionError as e:
        print(f"✗ Test failed: {e}", file=sys.stderr)
        sys.exit(1)
    else:
        print("🎉 All selected tests passed")


if __name__ == "__main__":
    main()
