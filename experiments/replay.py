# experiments/replay.py
"""
Replay tool for SkiEnv: quick command cheat sheet

# Typical usage (run from REPO ROOT so `src/...` imports work)

# Replay a HEURISTIC episode by seed (uses actions at experiments/runs/traces/heuristic/<seed>_actions.npy)
python -m experiments.replay --policy heuristic --seed 105

# Replay a RANDOM episode by seed
python -m experiments.replay --policy random --seed 112

# Replay by pointing directly to a specific actions file (bypasses --policy/--seed lookup)
python -m experiments.replay --trace experiments/runs/traces/heuristic/105_actions.npy --frame-skip 4

# Slow the display to ~decision rate (~15 fps) for readability
python -m experiments.replay --policy heuristic --seed 105 --slow

# Arguments
--policy {random,heuristic,rl}   # which trace subfolder to use (ignored if --trace is provided)
--seed INT                       # episode seed to locate the trace (required unless --trace)
--trace PATH                     # explicit path to a 1D *_actions.npy file
--out-dir PATH                   # base folder containing runs/ (default: experiments/runs)
--frame-skip INT                 # sim frames per decision; default from meta, else 4
--mode {present,endless}         # default from meta, else present
--slow                           # limit display to ~15 fps for readability

# Controls during replay
SPACE = pause/resume
N     = single step (when paused)
R     = restart episode
ESC   = quit

# Notes
- Deterministic: given the same seed, frame_skip, mode and action sequence, replay matches the recorded run.
- Expected trace layout from sanity rollouts: experiments/runs/traces/<policy>/<seed>_actions.npy
"""

from __future__ import annotations
import argparse
from pathlib import Path
from typing import Optional, List

import numpy as np
import pygame

from src.env.ski_env import SkiEnv
from src.game.config import GameMode

DEFAULT_OUT_DIR = "experiments/runs"
ACTION_NAMES = {0: "NOOP", 1: "JUMP", 2: "BOOST"}

def _find_trace(out_dir: Path, policy: str, seed: int) -> Path:
    p = out_dir / "traces" / policy / f"{seed}_actions.npy"
    if not p.exists():
        raise FileNotFoundError(f"Trace not found: {p}")
    return p

def _read_meta(out_dir: Path, policy: str, seed: int) -> dict:
    meta_path = out_dir / "traces" / policy / f"{seed}_meta.txt"
    meta = {}
    if meta_path.exists():
        for line in meta_path.read_text(encoding="utf-8").splitlines():
            if "=" in line:
                k, v = line.split("=", 1)
                meta[k.strip()] = v.strip()
    return meta

def _draw_overlay(env: SkiEnv, step_idx: int, action: Optional[int]):
    # Debug panel over the env's own frame
    surf = pygame.display.get_surface()
    if surf is None or env.world is None:
        return
    font = pygame.font.SysFont("jetbrainsmono", 14)
    world = env.world
    obs = env._get_obs()

    lines: List[str] = []
    lines.append(f"Step={step_idx}  Action={ACTION_NAMES.get(action, '-')}")
    hit = world.crashed_into.kind.name if world.crashed_into is not None else "-"
    lines.append(f"Dist={world.meters:.0f}m  Phase={world.phase.value}  Hit={hit}")
    lines.append(f"h={obs[0]:.2f}  vy={obs[1]:+.2f}  jump={int(obs[2])} ride={int(obs[3])}")
    lines.append(f"boost={int(obs[4])} ready={int(obs[5])}  progress={obs[6]:.2f}")
    lines.append(f"next ob dx={obs[7]:.2f} h={obs[8]:.2f}  present dx={obs[9]:.2f}")

    panel_w = 380
    panel_h = 18 * (len(lines) + 1)
    top = world.viewport.height - panel_h - 12
    panel = pygame.Surface((panel_w, panel_h), pygame.SRCALPHA)
    panel.fill((10, 20, 35, 160))
    surf.blit(panel, (12, top))

    for i, txt in enumerate(lines):
        surf.blit(font.render(txt, True, (210, 230, 255)), (20, top + 6 + i * 18))

    pygame.display.flip()

def replay_episode(
    seed: int,
    actions: np.ndarray,
    frame_skip: int,
    mode: str = GameMode.PRESENT.value,
    slow: bool = False
):
    """
    Replays an episode deterministically using SkiEnv with on-screen overlay.
    Controls:
      SPACE: pause/resume   N: single-step when paused
      R: restart episode    ESC: quit
    """
    env = SkiEnv(render_mode="human", frame_skip=frame_skip, mode=mode, time_limit_seconds=None)
    obs, info = env.reset(seed=seed)

    paused = False
    single = False
    step_idx = 0
    action: Optional[int] = None
    clock = pygame.time.Clock()

    try:
        running = True
        while running and step_idx < len(actions):
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_SPACE:
                        paused = not paused
                    elif event.key == pygame.K_n and paused:
                        single = True
                    elif event.key == pygame.K_r:
                        obs, info = env.reset(seed=seed)
                        step_idx = 0
                        paused = False

            if paused and not single:
                env.render()
                _draw_overlay(env, step_idx, action=None)
                clock.tick(30)
                continue
            single = False

            action = int(actions[step_idx])
            obs, r, term, trunc, info = env.step(action)
            _draw_overlay(env, step_idx, action)
            step_idx += 1

            clock.tick(15 if slow else 60)

            if term or trunc:
                # let the end screen play a little
                pygame.time.delay(600)
                break
    finally:
        env.close()

def main():
    ap = argparse.ArgumentParser(description="Replay a recorded SkiEnv episode with overlay.")
    ap.add_argument("--seed", type=int, help="Episode seed")
    ap.add_argument("--policy", type=str, default="random",
                    help="Trace subfolder name, e.g. random / heuristic / rl")
    ap.add_argument("--trace", type=str, default="",
                    help="Optional explicit path to a .npy action file")
    ap.add_argument("--out-dir", type=str, default=DEFAULT_OUT_DIR,
                    help="Base directory where experiments/runs live")
    ap.add_argument("--frame-skip", type=int, default=-1,
                    help="Override frame_skip. If <0, use meta or default=4")
    ap.add_argument("--mode", type=str, default="",
                    help="Override mode (present / endless). If empty, use meta or present")
    ap.add_argument("--slow", action="store_true", help="Slow display (~15 fps) for readability")
    args = ap.parse_args()

    out_dir = Path(args.out_dir)

    if args.trace:
        trace_path = Path(args.trace)
        if not trace_path.exists():
            raise FileNotFoundError(f"Trace file not found: {trace_path}")
        # seed is the file name prefix: <seed>_actions.npy
        if args.seed is None:
            try:
                args.seed = int(trace_path.stem.split("_")[0])
            except ValueError:
                raise SystemExit(f"Cannot infer seed from {trace_path.name}; pass --seed")
        meta = {}
    else:
        if args.seed is None:
            raise SystemExit("Please provide --seed or --trace")
        trace_path = _find_trace(out_dir, args.policy, args.seed)
        meta = _read_meta(out_dir, args.policy, args.seed)

    actions = np.load(trace_path)
    if actions.ndim != 1:
        raise ValueError(f"Expected 1D action array, got shape {actions.shape}")

    fs = args.frame_skip if args.frame_skip >= 0 else int(meta.get("frame_skip", 4))
    mode = args.mode or meta.get("mode", GameMode.PRESENT.value)

    print(f"Replaying seed={args.seed}  policy={args.policy}  steps={len(actions)}  "
          f"frame_skip={fs}  mode={mode}")
    print("Controls: SPACE pause/resume | N step (when paused) | R restart | ESC quit")

    replay_episode(seed=args.seed, actions=actions, frame_skip=fs, mode=mode, slow=args.slow)

if __name__ == "__main__":
    main()
