# /experiments/sanity_rollout.py
"""
Sanity rollouts for SkiEnv:
- Runs RANDOM and/or TINY-HEURISTIC policies over fixed seeds
- Writes an episodes CSV for notebook analysis
- Saves per-episode action sequences (and optionally observations) for exact replay

Usage examples (from repo root):
  # Run both policies over 20 default seeds, frame_skip=4, save traces:
  python -m experiments.sanity_rollout --policies both --save-traces

  # Only heuristic, custom seeds, also save observations for deeper debugging:
  python -m experiments.sanity_rollout --policies heuristic --seeds 111,222,333 --save-traces --save-obs

  # Endless mode, fewer steps and no traces:
  python -m experiments.sanity_rollout --policies random --mode endless --steps 300 --out-dir /tmp/sanity
"""

from __future__ import annotations
import argparse
import csv
from pathlib import Path
from typing import List, Tuple, Optional

import numpy as np

from src.env.ski_env import SkiEnv
from src.game.config import FPS, GameMode


# ------------------------ Policies ------------------------

def random_policy_init(action_seed: int):
    rng = np.random.RandomState(action_seed)
    def act(_obs: np.ndarray) -> int:
        # mostly NOOP so random runs don't jump constantly
        return int(rng.choice(3, p=[0.8, 0.15, 0.05]))
    return act

def tiny_heuristic_policy_init(jump_at: float = 0.12, boost_clear: float = 0.6):
    """
    Very small rule:
      - Jump when on the ground (or riding) and the next obstacle is within `jump_at` of the screen.
      - Otherwise boost when it is ready and nothing is closer than `boost_clear`.
    """
    def act(obs: np.ndarray) -> int:
        jumping, riding, ready = obs[2], obs[3], obs[5]
        ob_dx, ob_h = obs[7], obs[8]
        can_jump = jumping == 0.0 or riding == 1.0
        if can_jump and ob_h > 0.0 and ob_dx <= jump_at:
            return 1
        if ready == 1.0 and ob_dx >= boost_clear:
            return 2
        return 0
    return act


# ------------------------ Rollout core ------------------------

def ensure_dir(p: Path):
    p.mkdir(parents=True, exist_ok=True)

def write_episode_row(csv_path: Path, header: List[str], row: List):
    exists = csv_path.exists()
    with csv_path.open("a", newline="") as f:
        w = csv.writer(f)
        if not exists:
            w.writerow(header)
        w.writerow(row)

def run_one_episode(policy_name: str,
                    seed: int,
                    frame_skip: int,
                    steps_limit: int,
                    mode: str,
                    save_traces: bool,
                    save_obs: bool,
                    out_dir: Path) -> Tuple[int, float, float, str, bool, Optional[str], float]:
    """
    Returns: (ep_len, ret_sum, meters, phase, truncated, crashed_into, boost_ratio)
    Also writes traces to disk if requested.
    """
    env = SkiEnv(frame_skip=frame_skip, mode=mode)

    if policy_name == "random":
        # Make action RNG seed a function of seed for determinism
        action_seed = 10_000 + seed
        policy = random_policy_init(action_seed)
    elif policy_name == "heuristic":
        action_seed = -1
        policy = tiny_heuristic_policy_init()
    else:
        raise ValueError("Unknown policy")

    actions: List[int] = []
    obs_list: List[np.ndarray] = []

    ret_sum = 0.0
    boost_count = 0
    ep_len = 0
    trunc = False
    info: dict = {}

    try:
        obs, info = env.reset(seed=seed)
        if save_obs:
            obs_list.append(obs.copy())

        for t in range(steps_limit):
            a = policy(obs)
            actions.append(int(a))

            obs, r, term, trunc, info = env.step(a)
            ret_sum += float(r)
            ep_len += 1
            boost_count += int(bool(info.get("boosting", False)))

            if save_obs:
                obs_list.append(obs.copy())

            if term or trunc:
                break

        meters = float(info.get("meters", 0.0))
        phase = str(info.get("phase", "playing"))
        crashed_into = info.get("crashed_into")
        boost_ratio = boost_count / max(1, ep_len)

    finally:
        env.close()

    if save_traces:
        trace_dir = out_dir / "traces" / policy_name
        ensure_dir(trace_dir)
        np.save(trace_dir / f"{seed}_actions.npy", np.asarray(actions, dtype=np.int8))
        if save_obs:
            np.save(trace_dir / f"{seed}_obs.npy", np.asarray(obs_list, dtype=np.float32))

        meta_lines = [
            f"seed={seed}",
            f"frame_skip={frame_skip}",
            f"mode={mode}",
            f"policy={policy_name}",
            f"action_rng_seed={action_seed}",
            f"steps_limit={steps_limit}",
        ]
        (trace_dir / f"{seed}_meta.txt").write_text("\n".join(meta_lines), encoding="utf-8")

    return ep_len, ret_sum, meters, phase, bool(trunc), crashed_into, boost_ratio


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--policies", type=str, default="both",
                    choices=["random", "heuristic", "both"],
                    help="Which policy to run")
    ap.add_argument("--seeds", type=str, default="",
                    help="Comma-separated seeds. If empty, uses 20 defaults: 101..120")
    ap.add_argument("--frame-skip", type=int, default=4,
                    help="Sim frames per decision step")
    ap.add_argument("--mode", type=str, default=GameMode.PRESENT.value,
                    choices=[m.value for m in GameMode])
    ap.add_argument("--steps", type=int, default=10_000,
                    help="Hard cap on decision steps (env may truncate earlier)")
    ap.add_argument("--out-dir", type=str, default="experiments/runs",
                    help="Directory to store episodes.csv and traces/")
    ap.add_argument("--save-traces", action="store_true",
                    help="Save action sequences (and optional obs) for replay")
    ap.add_argument("--save-obs", action="store_true",
                    help="Also save observations per step (larger files)")
    args = ap.parse_args()

    out_dir = Path(args.out_dir)
    ensure_dir(out_dir)

    if args.seeds.strip():
        seeds = [int(s) for s in args.seeds.split(",") if s.strip()]
    else:
        seeds = list(range(101, 121))

    episodes_csv = out_dir / "episodes.csv"
    header = [
        "env_name", "mode",
        "policy_name", "seed",
        "frame_skip", "sim_fps", "decision_hz",
        "episode_len_decisions", "return_sum", "meters",
        "phase", "truncated", "crashed_into",
        "boost_ratio"
    ]
    env_name = "SkiEnv"
    decision_hz = FPS / max(1, args.frame_skip)

    to_run = ["random", "heuristic"] if args.policies == "both" else [args.policies]

    print(f"Running policies={to_run} on {len(seeds)} seeds "
          f"(mode={args.mode}, frame_skip={args.frame_skip}, decision_hz≈{decision_hz:.1f})")
    print(f"Writing summaries to {episodes_csv} and traces under {out_dir}/traces/")

    for policy_name in to_run:
        for seed in seeds:
            ep_len, ret_sum, meters, phase, truncated, crashed_into, b_ratio = run_one_episode(
                policy_name=policy_name,
                seed=seed,
                frame_skip=args.frame_skip,
                steps_limit=args.steps,
                mode=args.mode,
                save_traces=args.save_traces,
                save_obs=args.save_obs,
                out_dir=out_dir
            )

            row = [
                env_name, args.mode,
                policy_name, seed,
                args.frame_skip, FPS, decision_hz,
                ep_len, f"{ret_sum:.1f}", f"{meters:.1f}",
                phase, int(truncated), (crashed_into or ""),
                f"{b_ratio:.3f}",
            ]
            write_episode_row(episodes_csv, header, row)

            print(f"[{policy_name}] seed={seed}  len={ep_len}  dist={meters:.0f}m  "
                  f"ret={ret_sum:.1f}  phase={phase} trunc={truncated}  hit={crashed_into}")

    print("✓ Sanity rollouts complete")


if __name__ == "__main__":
    main()
