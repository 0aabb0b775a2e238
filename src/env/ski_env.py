# src/env/ski_env.py
from __future__ import annotations
from typing import Optional, Dict, Any
import numpy as np
import gymnasium as gym
import pygame

from src.game.config import BASE_WIDTH, BASE_HEIGHT, FPS, FRAME_MS, GameConfig, GameMode, Viewport
from src.game.canvas import PygameCanvas
from src.game.render import render
from src.game.update import update
from src.game.world import World, Phase, press_jump, press_boost
from src.env.observations import build_observation, bounds

WIN_REWARD = 10.0
CRASH_REWARD = -1.0


class SkiEnv(gym.Env):
    """
    Christmas Slope Gymnasium environment (vector observations).
    - Simulation at 60 Hz (internal), one world tick per frame.
    - Agent acts every `frame_skip` frames (default 4) -> 15 decisions/sec.
    - Actions: 0 = NOOP, 1 = JUMP, 2 = BOOST (a full double tap).
    - Observation: shape (10,), float32 (see observations.build_observation).
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 4,
                 time_limit_seconds: Optional[float] = 120.0,
                 mode: str = GameMode.PRESENT.value,
                 config: Optional[GameConfig] = None):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        assert render_mode is None or render_mode in self.metadata["render_modes"]
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)
        self.config = config or GameConfig(mode=GameMode(mode))
        self.viewport = Viewport(BASE_WIDTH, BASE_HEIGHT)

        self.sim_fps = FPS
        self.dt_ms = FRAME_MS

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            self.time_limit_decisions = int(self.sim_fps * time_limit_seconds / self.frame_skip)

        # --- Gym spaces ---
        self.action_space = gym.spaces.Discrete(3)
        low, high = bounds()
        self.observation_space = gym.spaces.Box(low=low, high=high, dtype=np.float32)

        # --- Runtime state ---
        self.world: Optional[World] = None
        self.timestep: int = 0
        self.current_seed: Optional[int] = None

        # Rendering
        self.screen = None
        self.clock = None
        self.canvas: Optional[PygameCanvas] = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)

        # Seed given -> strict reproducibility; otherwise draw the world seed from
        # np_random so a seeded env followed by plain resets still replays.
        if seed is None:
            seed = int(self.np_random.integers(2**31))
        self.world = World(self.config, self.viewport, seed=int(seed))
        self.current_seed = self.world.seed
        self.timestep = 0

        obs = self._get_obs()
        info = {"seed": self.current_seed, "distance": self.world.distance}
        if self.render_mode == "human":
            self.render()
        return obs, info

    def step(self, action: int):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.world is not None
        world = self.world

        if action == 1:
            press_jump(world)
        elif action == 2:
            press_boost(world)
            press_boost(world)

        start = world.distance
        for _ in range(self.frame_skip):
            if update(world, self.dt_ms) is not Phase.PLAYING:
                break

        # Reward: ~1.0 per decision at base speed, plus terminal bonus/penalty
        reward = (world.distance - start) / (self.config.base_scroll_speed * self.frame_skip)
        if world.phase is Phase.GAME_OVER:
            reward += CRASH_REWARD
        elif world.phase is Phase.WON:
            reward += WIN_REWARD

        self.timestep += 1
        terminated = world.phase is not Phase.PLAYING
        truncated = False
        if (self.time_limit_decisions is not None) and (self.timestep >= self.time_limit_decisions):
            truncated = True

        obs = self._get_obs()
        info = {
            "distance": world.distance,
            "meters": world.meters,
            "timestep": self.timestep,
            "seed": self.current_seed,
            "phase": world.phase.value,
            "boosting": world.boost.is_boosting,
            "obstacles_spawned": world.field.spawned,
            "riding": world.player.is_on_obstacle,
            "crashed_into": world.crashed_into.kind.name if world.crashed_into is not None else None,
        }

        if self.render_mode == "human":
            self.render()

        return obs, float(reward), terminated, truncated, info

    # -------------------- Helpers --------------------

    def _get_obs(self) -> np.ndarray:
        assert self.world is not None
        return build_observation(self.world)

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.world is None:
            return None

        if self.screen is None:
            pygame.init()
            size = (self.viewport.width, self.viewport.height)
            if self.render_mode == "human":
                self.screen = pygame.display.set_mode(size)
                pygame.display.set_caption("Christmas Slope - Gym Env")
                self.clock = pygame.time.Clock()
            else:
                self.screen = pygame.Surface(size)
            self.canvas = PygameCanvas(self.screen)

        if self.render_mode == "human":
            # Pump minimal event queue so the OS doesn't think we're hung
            pygame.event.pump()

        self.canvas.execute(render(self.world))

        if self.render_mode == "human":
            pygame.display.flip()
            if self.clock is not None:
                self.clock.tick(self.metadata.get("render_fps", 60))
            return None

        # (H, W, 3) uint8 array
        arr = pygame.surfarray.array3d(self.screen)  # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.screen is not None:
            if self.render_mode == "human":
                pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.clock = None
            self.canvas = None
