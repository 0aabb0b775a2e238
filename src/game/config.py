# src/game/config.py
from __future__ import annotations
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

# --- Display ---
BASE_WIDTH = 800            # design resolution; everything scales against it
BASE_HEIGHT = 400
WIDTH = 960
HEIGHT = 540
FPS = 60
FRAME_MS = 1000.0 / FPS

# --- World / Physics (per tick, at scale 1.0) ---
SLOPE_GRADE = 0.20          # rise over run of the ground line
GROUND_MARGIN = 80          # ground baseline sits this far above the bottom edge
BASE_SCROLL_SPEED = 5.0     # px per tick
GRAVITY = 0.5               # px per tick^2
JUMP_POWER = -12.0          # px per tick, negative = up

# --- Player ---
PLAYER_X = 150              # fixed lane (left edge of sprite)
PLAYER_SPRITE_W = 20        # in pixel-art cells
PLAYER_SPRITE_H = 22
PLAYER_HITBOX_INSET = 0.25  # fraction of sprite width trimmed on each side
PLAYER_HITBOX_H = 0.8       # fraction of sprite height used by the hitbox

# --- Progress ---
TOTAL_DISTANCE = 30000.0    # distance units (base px); 10 units = 1 m on the HUD
UNITS_PER_METER = 10.0
PRESENT_REVEAL_AT = 0.90    # fraction of total distance
PRESENT_SIZE = 50
MILESTONE_EVERY = 5000.0    # endless mode banner cadence

# --- Obstacles ---
SPAWN_MIN_SPACING = 600.0   # distance units between spawns
SPAWN_MAX_SPACING = 1200.0
OBSTACLE_BASE_SIZE = 40
CLEARANCE_FRACTION = 0.30   # measured down from the obstacle top

# --- Boost ---
BOOST_MULTIPLIER = 2.5
BOOST_DURATION_MS = 1500.0
BOOST_COOLDOWN_MS = 5000.0
DOUBLE_TAP_MS = 300.0
PARTICLE_BURST = 8
PARTICLE_LIFETIME_MS = 700.0

SEED_DEFAULT = 12345

# --- Colors (RGB) ---
COLOR_SKY = (135, 206, 235)
COLOR_SNOW = (255, 255, 255)
COLOR_GROUND_LINE = (204, 204, 204)
COLOR_GROUND = (232, 232, 232)
COLOR_MOUNTAIN = (160, 160, 160)
COLOR_TREE = (34, 139, 34)
COLOR_TRUNK = (139, 69, 19)
COLOR_HELMET = (230, 57, 70)
COLOR_JACKET = (69, 123, 157)
COLOR_PANTS = (43, 45, 66)
COLOR_SKIN = (253, 191, 111)
COLOR_SKI = (29, 53, 87)
COLOR_ROCK = (110, 110, 120)
COLOR_PRESENT = (200, 30, 45)
COLOR_RIBBON = (255, 215, 0)
COLOR_CLOUD = (170, 190, 120)
COLOR_FG = (30, 40, 60)
COLOR_DANGER = (255, 86, 110)
COLOR_ACCENT = (120, 200, 255)
COLOR_OVERLAY = (10, 20, 35)
ORNAMENT_COLORS = ((230, 57, 70), (255, 215, 0), (120, 200, 255), (255, 255, 255))


class GameMode(str, Enum):
    PRESENT = "present"     # reach the present at the end of the run
    ENDLESS = "endless"     # survive as long as possible


@dataclass(frozen=True)
class ObstacleKind:
    """Catalog entry. `image` is an asset key; `shape` is drawn when it isn't loaded."""
    name: str
    image: Optional[str]
    size_multiplier: float = 1.0
    rotation: float = 0.0
    shape: str = "rock"


DEFAULT_CATALOG: Tuple[ObstacleKind, ...] = (
    ObstacleKind("rock", "obstacles/rock.png", 1.0, 0.0, "rock"),
    ObstacleKind("snowman", "obstacles/snowman.png", 1.5, 0.0, "snowman"),
    ObstacleKind("log", "obstacles/log.png", 1.2, -11.3, "log"),
    ObstacleKind("stump", "obstacles/stump.png", 0.9, 0.0, "stump"),
)

# Background decoration, in base px: (x, width, height) / (x, size)
MOUNTAINS: Tuple[Tuple[int, int, int], ...] = (
    (0, 200, 120), (250, 180, 100), (500, 220, 140),
    (750, 190, 110), (1000, 210, 130), (1300, 185, 105),
)
TREES: Tuple[Tuple[int, int], ...] = (
    (100, 40), (300, 50), (500, 35), (700, 45), (900, 40),
    (1100, 55), (1300, 42), (1500, 48), (1700, 38), (1900, 52),
)
MOUNTAIN_PARALLAX = 0.3
MOUNTAIN_WRAP_EXTRA = 400   # base px added to the viewport width for the wrap window
TREE_WRAP_EXTRA = 600


@dataclass(frozen=True)
class GameConfig:
    """Everything a run is parameterised by. Defaults mirror the constants above."""
    mode: GameMode = GameMode.PRESENT
    slope_grade: float = SLOPE_GRADE
    base_scroll_speed: float = BASE_SCROLL_SPEED
    gravity: float = GRAVITY
    jump_power: float = JUMP_POWER
    total_distance: float = TOTAL_DISTANCE
    present_reveal_at: float = PRESENT_REVEAL_AT
    spawn_min_spacing: float = SPAWN_MIN_SPACING
    spawn_max_spacing: float = SPAWN_MAX_SPACING
    clearance_fraction: float = CLEARANCE_FRACTION
    boost_multiplier: float = BOOST_MULTIPLIER
    boost_duration_ms: float = BOOST_DURATION_MS
    boost_cooldown_ms: float = BOOST_COOLDOWN_MS
    double_tap_ms: float = DOUBLE_TAP_MS
    particle_burst: int = PARTICLE_BURST
    particle_lifetime_ms: float = PARTICLE_LIFETIME_MS
    milestone_every: float = MILESTONE_EVERY
    catalog: Tuple[ObstacleKind, ...] = field(default=DEFAULT_CATALOG)

    def __post_init__(self):
        if self.base_scroll_speed <= 0:
            raise ValueError("base_scroll_speed must be > 0")
        if self.total_distance <= 0:
            raise ValueError("total_distance must be > 0")
        if self.spawn_min_spacing <= 0 or self.spawn_min_spacing > self.spawn_max_spacing:
            raise ValueError(
                f"invalid spawn spacing [{self.spawn_min_spacing}, {self.spawn_max_spacing}]"
            )
        for name in ("present_reveal_at", "clearance_fraction"):
            v = getattr(self, name)
            if not 0.0 <= v <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {v}")
        if self.boost_multiplier < 1.0:
            raise ValueError("boost_multiplier must be >= 1")
        # accept a plain string for the mode (CLI)
        object.__setattr__(self, "mode", GameMode(self.mode))
        object.__setattr__(self, "catalog", tuple(self.catalog))


@dataclass(frozen=True)
class Viewport:
    """Screen size plus the values derived from its uniform scale factor."""
    width: int = WIDTH
    height: int = HEIGHT

    @property
    def scale(self) -> float:
        return min(self.width / BASE_WIDTH, self.height / BASE_HEIGHT)

    @property
    def ground_y(self) -> float:
        return self.height - GROUND_MARGIN * self.scale

    @property
    def center_x(self) -> float:
        return self.width / 2

    @property
    def pixel_size(self) -> int:
        return max(4, int(math.floor(4 * self.scale)))
