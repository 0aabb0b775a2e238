# src/game/render.py
"""
World -> list of draw commands.

Nothing here touches pygame surfaces: the commands are plain frozen records
that `canvas.PygameCanvas` (or a test) consumes. The world is only read.
End-screen animations are staged from `world.ticks_in_phase`, never wall time.
"""
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .boost import BoostMeter
from .config import (
    MOUNTAIN_PARALLAX, MOUNTAIN_WRAP_EXTRA, TREE_WRAP_EXTRA, UNITS_PER_METER, FPS,
    ORNAMENT_COLORS, GameMode,
    COLOR_SKY, COLOR_SNOW, COLOR_GROUND, COLOR_GROUND_LINE, COLOR_MOUNTAIN, COLOR_TREE,
    COLOR_TRUNK, COLOR_HELMET, COLOR_JACKET, COLOR_PANTS, COLOR_SKIN, COLOR_SKI,
    COLOR_ROCK, COLOR_PRESENT, COLOR_RIBBON, COLOR_CLOUD, COLOR_FG, COLOR_DANGER,
    COLOR_ACCENT, COLOR_OVERLAY, Viewport,
)
from .entities import Obstacle, wrap_x
from .world import Phase, World

Color = Tuple[int, int, int]
Point = Tuple[float, float]

PLAYER_HAT = "player/santa_hat.png"
INSTRUCTIONS_TICKS = 4 * FPS
MILESTONE_TICKS = 90

TEXT = {
    "jump": "Press W or UP to jump",
    "boost": "Double tap D or -> for Boost",
    "progress": "Distance till present",
    "boosting": "BOOSTING!",
    "ready": "BOOST READY!",
    "cooldown": "Recharging...",
    "game_over": "GAME OVER",
    "crashed": "You hit an obstacle!",
    "restart": "Press SPACE to restart",
    "won": "MERRY CHRISTMAS!",
    "won_sub": "You reached the present!",
    "quit": "Press ESC to quit",
    "milestone": "Milestone Reached!",
    "to_menu": "Press ENTER for MENU",
    "title": "Christmas Slope",
    "subtitle": "Choose your mode",
    "present_mode": "PRESENT MODE",
    "present_desc": "Much to win, nothing to lose",
    "endless_mode": "ENDLESS MODE",
    "endless_desc": "Much to lose, nothing to win",
    "menu_hint": "W / S to choose, ENTER to start",
}


@dataclass(frozen=True)
class RectCmd:
    x: float
    y: float
    w: float
    h: float
    color: Color
    alpha: int = 255

@dataclass(frozen=True)
class PolygonCmd:
    points: Tuple[Point, ...]
    color: Color
    alpha: int = 255

@dataclass(frozen=True)
class CircleCmd:
    x: float
    y: float
    r: float
    color: Color
    alpha: int = 255

@dataclass(frozen=True)
class ImageCmd:
    key: str
    x: float
    y: float
    w: float
    h: float
    rotation: float = 0.0
    alpha: int = 255

@dataclass(frozen=True)
class TextCmd:
    text: str
    x: float
    y: float
    size: int
    color: Color
    align: str = "left"    # "left" | "center"
    alpha: int = 255

DrawCommand = Union[RectCmd, PolygonCmd, CircleCmd, ImageCmd, TextCmd]


def _loaded(assets, key: Optional[str]) -> bool:
    return bool(key) and assets is not None and assets.is_loaded(key)

def _fade(t: int, start: int, length: int) -> float:
    """0 before `start`, ramps to 1 over `length` ticks."""
    if t < start:
        return 0.0
    return min(1.0, (t - start) / max(1, length))


def render(world: World, assets=None) -> List[DrawCommand]:
    vp = world.viewport
    out: List[DrawCommand] = [RectCmd(0, 0, vp.width, vp.height, COLOR_SKY)]
    _draw_mountains(world, out)
    _draw_ground(world, out)
    _draw_trees(world, out)
    for ob in world.obstacles:
        _draw_obstacle(world, ob, assets, out)
    if world.present is not None:
        _draw_present(world, out)
    for p in world.boost.particles:
        out.append(CircleCmd(p.x, p.y, p.radius, COLOR_CLOUD, int(200 * p.opacity)))
    _draw_skier(world, assets, out)
    _draw_hud(world, out)
    if world.phase is Phase.GAME_OVER:
        _draw_game_over(world, out)
    elif world.phase is Phase.WON:
        _draw_won(world, out)
    return out


# -------------------- Background --------------------

def _draw_mountains(world: World, out: List[DrawCommand]):
    vp = world.viewport
    s = vp.scale
    offset = world.scroll_offset * MOUNTAIN_PARALLAX
    wrap = vp.width + MOUNTAIN_WRAP_EXTRA * s
    base_y = vp.ground_y - 50 * s
    for m in world.mountains:
        w, h = m.width * s, m.height * s
        mx = wrap_x(m.x * s, offset, wrap, w, vp.width)
        peak = (mx + w / 2, base_y - h)
        out.append(PolygonCmd(((mx, base_y), peak, (mx + w, base_y)), COLOR_MOUNTAIN))
        cap = h * m.cap_depth
        half = w / 2 * m.cap_depth
        out.append(PolygonCmd(((peak[0] - half, peak[1] + cap), peak,
                               (peak[0] + half, peak[1] + cap)), COLOR_SNOW))

def _draw_ground(world: World, out: List[DrawCommand]):
    vp = world.viewport
    slope = world.slope
    left, right = slope.height_at(0), slope.height_at(vp.width)
    out.append(PolygonCmd(((0, left), (vp.width, right), (vp.width, vp.height), (0, vp.height)),
                          COLOR_SNOW))
    ps = vp.pixel_size
    step = ps * 2
    for i in range(0, int(vp.width), step):
        phase = (i + world.scroll_offset) % (ps * 4)
        shade = COLOR_GROUND_LINE if phase < step else COLOR_GROUND
        out.append(RectCmd(i, slope.height_at(i), step, ps, shade))

def _draw_trees(world: World, out: List[DrawCommand]):
    vp = world.viewport
    s = vp.scale
    wrap = vp.width + TREE_WRAP_EXTRA * s
    for tree in world.trees:
        size = tree.size * s
        tx = wrap_x(tree.x * s, world.scroll_offset, wrap, size, vp.width)
        cx = tx + size / 2
        base = world.slope.height_at(cx)
        out.append(RectCmd(cx - 4 * s, base - 12 * s, 8 * s, 14 * s, COLOR_TRUNK))
        for i in range(3):
            lw = size - i * 8 * s
            ly = base - 20 * s - i * 12 * s
            out.append(RectCmd(cx - lw / 2, ly, lw, 16 * s, COLOR_TREE))
        top = base - 44 * s
        for dx, dy, ci in tree.ornaments:
            out.append(CircleCmd(cx + dx * size, top + dy * 36 * s, 2 * s, ORNAMENT_COLORS[ci]))


# -------------------- Entities --------------------

def _draw_obstacle(world: World, ob: Obstacle, assets, out: List[DrawCommand]):
    box = ob.hitbox(world.slope)
    if _loaded(assets, ob.kind.image):
        out.append(ImageCmd(ob.kind.image, box.x, box.y, box.w, box.h, ob.rotation))
        return
    # image not ready: flat silhouette of the same footprint
    x, y, w, h = box.x, box.y, box.w, box.h
    shape = ob.kind.shape
    if shape == "snowman":
        r1, r2 = w * 0.5, w * 0.33
        out.append(CircleCmd(x + w / 2, y + h - r1, r1, COLOR_SNOW))
        out.append(CircleCmd(x + w / 2, y + h - 2 * r1 - r2 * 0.7, r2, COLOR_SNOW))
        out.append(CircleCmd(x + w / 2 + r2 * 0.4, y + h - 2 * r1 - r2 * 0.8, max(1.0, r2 * 0.15), COLOR_FG))
    elif shape == "log":
        out.append(RectCmd(x, y + h * 0.35, w, h * 0.65, COLOR_TRUNK))
        out.append(RectCmd(x, y + h * 0.35, w, h * 0.12, COLOR_SNOW))
    elif shape == "stump":
        out.append(RectCmd(x + w * 0.15, y + h * 0.2, w * 0.7, h * 0.8, COLOR_TRUNK))
        out.append(RectCmd(x + w * 0.1, y + h * 0.1, w * 0.8, h * 0.15, COLOR_SNOW))
    else:
        out.append(PolygonCmd(((x, y + h), (x + w * 0.2, y + h * 0.2), (x + w * 0.6, y),
                               (x + w, y + h * 0.45), (x + w, y + h)), COLOR_ROCK))

def _draw_present(world: World, out: List[DrawCommand]):
    box = world.present.hitbox(world.slope)
    out.append(RectCmd(box.x, box.y, box.w, box.h, COLOR_PRESENT))
    out.append(RectCmd(box.x + box.w * 0.42, box.y, box.w * 0.16, box.h, COLOR_RIBBON))
    out.append(RectCmd(box.x, box.y + box.h * 0.42, box.w, box.h * 0.16, COLOR_RIBBON))
    out.append(CircleCmd(box.x + box.w * 0.4, box.y - box.h * 0.08, box.w * 0.12, COLOR_RIBBON))
    out.append(CircleCmd(box.x + box.w * 0.6, box.y - box.h * 0.08, box.w * 0.12, COLOR_RIBBON))

def _draw_skier(world: World, assets, out: List[DrawCommand]):
    p = world.player
    c = p.width / 20     # one sprite cell
    x, top = p.x, p.y - p.height
    out.append(RectCmd(x + 7 * c, top, 6 * c, 3 * c, COLOR_HELMET))
    out.append(RectCmd(x + 8 * c, top + 3 * c, 4 * c, 3 * c, COLOR_SKIN))
    out.append(RectCmd(x + 6 * c, top + 6 * c, 8 * c, 7 * c, COLOR_JACKET))
    out.append(RectCmd(x + 7 * c, top + 13 * c, 6 * c, 6 * c, COLOR_PANTS))
    out.append(RectCmd(x - c, top + 19 * c, 22 * c, 2 * c, COLOR_SKI))
    out.append(RectCmd(x + 21 * c, top + 18 * c, c, c, COLOR_SKI))
    if _loaded(assets, PLAYER_HAT):
        out.append(ImageCmd(PLAYER_HAT, x + 6 * c, top - 4 * c, 9 * c, 6 * c))


# -------------------- HUD / overlays --------------------

def _draw_hud(world: World, out: List[DrawCommand]):
    vp = world.viewport
    s = vp.scale
    size = max(12, int(16 * s))
    margin = 12 * s

    if world.config.mode is GameMode.PRESENT:
        total = world.total_meters
        done = math.floor(world.meters)
        bar_w = vp.width * 0.4
        out.append(TextCmd(TEXT["progress"], margin, margin, size, COLOR_FG))
        out.append(RectCmd(margin, margin + size * 1.4, bar_w, 10 * s, COLOR_OVERLAY, 120))
        out.append(RectCmd(margin, margin + size * 1.4, bar_w * world.progress, 10 * s, COLOR_PRESENT))
        out.append(TextCmd(f"{done}m / {int(total)}m  ({int(total - done)}m remaining)",
                           margin, margin + size * 1.4 + 14 * s, size, COLOR_FG))
    else:
        out.append(TextCmd(f"Distance: {math.floor(world.meters)}m", margin, margin, size, COLOR_FG))
        best = math.floor(world.high_score / UNITS_PER_METER)
        out.append(TextCmd(f"Best: {best}m", margin, margin + size * 1.4, size, COLOR_FG))
        _draw_milestone(world, out)

    status, frac = world.boost.meter(world.clock_ms, world.config)
    label = {BoostMeter.BOOSTING: TEXT["boosting"], BoostMeter.READY: TEXT["ready"],
             BoostMeter.COOLDOWN: TEXT["cooldown"]}[status]
    mw = 140 * s
    mx = vp.width - mw - margin
    color = COLOR_ACCENT if status is BoostMeter.READY else (COLOR_CLOUD if status is BoostMeter.BOOSTING else COLOR_FG)
    out.append(TextCmd(label, mx, margin, size, color))
    out.append(RectCmd(mx, margin + size * 1.4, mw, 8 * s, COLOR_OVERLAY, 120))
    out.append(RectCmd(mx, margin + size * 1.4, mw * frac, 8 * s, color))

    if world.phase is Phase.PLAYING and world.tick < INSTRUCTIONS_TICKS:
        a = int(255 * (1.0 - _fade(world.tick, INSTRUCTIONS_TICKS - FPS, FPS)))
        out.append(TextCmd(TEXT["jump"], vp.width / 2, vp.height * 0.3, size, COLOR_FG, "center", a))
        out.append(TextCmd(TEXT["boost"], vp.width / 2, vp.height * 0.3 + size * 1.5, size,
                           COLOR_FG, "center", a))

def _draw_milestone(world: World, out: List[DrawCommand]):
    if world.milestone_tick is None:
        return
    t = world.tick - world.milestone_tick
    if t >= MILESTONE_TICKS:
        return
    vp = world.viewport
    a = int(255 * (1.0 - _fade(t, MILESTONE_TICKS // 2, MILESTONE_TICKS // 2)))
    meters = int(world.last_milestone * world.config.milestone_every / UNITS_PER_METER)
    big = max(18, int(36 * vp.scale * (1.0 + 0.3 * _fade(t, 0, 12))))
    out.append(TextCmd(f"{meters}m!", vp.width / 2, vp.height * 0.22, big, COLOR_PRESENT, "center", a))
    out.append(TextCmd(TEXT["milestone"], vp.width / 2, vp.height * 0.22 + big * 1.2,
                       max(12, int(16 * vp.scale)), COLOR_FG, "center", a))

def _staggered(lines: Sequence[Tuple[str, int, Color]], t: int, x: float, y0: float,
               first: int, gap: int, shake: float, out: List[DrawCommand]):
    """Reveal one line every `gap` ticks after `first`, each fading in over 15 ticks."""
    y = y0
    for i, (text, size, color) in enumerate(lines):
        a = _fade(t, first + i * gap, 15)
        if a > 0.0:
            dx = shake if i == 0 else 0.0
            out.append(TextCmd(text, x + dx, y, size, color, "center", int(255 * a)))
        y += size * 1.5

def _draw_game_over(world: World, out: List[DrawCommand]):
    vp = world.viewport
    s = vp.scale
    t = world.ticks_in_phase
    out.append(RectCmd(0, 0, vp.width, vp.height, COLOR_DANGER, int(110 * (1.0 - _fade(t, 0, 12)))))
    out.append(RectCmd(0, 0, vp.width, vp.height, COLOR_OVERLAY, int(170 * _fade(t, 0, 30))))
    shake = math.sin(t * 1.7) * 10 * s * (1.0 - _fade(t, 0, 30))
    if world.config.mode is GameMode.ENDLESS:
        dist = f"Distance: {math.floor(world.meters)}m   Best: {math.floor(world.high_score / UNITS_PER_METER)}m"
    else:
        dist = f"Distance: {math.floor(world.meters)}m of {int(world.total_meters)}m"
    lines = [
        (TEXT["game_over"], max(24, int(48 * s)), COLOR_DANGER),
        (TEXT["crashed"], max(14, int(20 * s)), COLOR_SNOW),
        (dist, max(14, int(20 * s)), COLOR_SNOW),
        (TEXT["restart"], max(12, int(16 * s)), COLOR_ACCENT),
        (TEXT["to_menu"], max(12, int(16 * s)), COLOR_ACCENT),
    ]
    _staggered(lines, t, vp.width / 2, vp.height * 0.3, 10, 20, shake, out)

def _draw_won(world: World, out: List[DrawCommand]):
    vp = world.viewport
    s = vp.scale
    t = world.ticks_in_phase
    out.append(RectCmd(0, 0, vp.width, vp.height, COLOR_OVERLAY, int(190 * _fade(t, 0, 60))))
    lines = [
        (TEXT["won"], max(24, int(44 * s)), COLOR_RIBBON),
        (TEXT["won_sub"], max(14, int(22 * s)), COLOR_SNOW),
        (f"{int(world.total_meters)}m on the slope", max(14, int(20 * s)), COLOR_SNOW),
        (TEXT["to_menu"], max(12, int(16 * s)), COLOR_ACCENT),
        (TEXT["quit"], max(12, int(16 * s)), COLOR_ACCENT),
    ]
    _staggered(lines, t, vp.width / 2, vp.height * 0.25, 30, 40, 0.0, out)


# -------------------- Mode menu --------------------

MENU_CHOICES = (
    (GameMode.PRESENT, "present_mode", "present_desc"),
    (GameMode.ENDLESS, "endless_mode", "endless_desc"),
)

def render_menu(vp: Viewport, selected: GameMode,
                high_scores: Optional[Dict[GameMode, float]] = None) -> List[DrawCommand]:
    """Mode picker drawn over a frozen scene. The highlighted card is `selected`."""
    s = vp.scale
    cx = vp.width / 2
    out: List[DrawCommand] = [RectCmd(0, 0, vp.width, vp.height, COLOR_OVERLAY, 190)]
    out.append(TextCmd(TEXT["title"], cx, vp.height * 0.12, max(24, int(40 * s)), COLOR_RIBBON, "center"))
    out.append(TextCmd(TEXT["subtitle"], cx, vp.height * 0.26, max(14, int(20 * s)), COLOR_SNOW, "center"))

    card_w, card_h = 260 * s, 110 * s
    gap = 30 * s
    x = cx - card_w - gap / 2
    y = vp.height * 0.4
    for i, (mode, title, desc) in enumerate(MENU_CHOICES):
        left = x + i * (card_w + gap)
        active = mode is selected
        out.append(RectCmd(left, y, card_w, card_h, COLOR_ACCENT if active else COLOR_FG, 230 if active else 140))
        out.append(TextCmd(f"{i + 1}. {TEXT[title]}", left + card_w / 2, y + 16 * s, max(14, int(22 * s)),
                           COLOR_OVERLAY if active else COLOR_SNOW, "center"))
        out.append(TextCmd(TEXT[desc], left + card_w / 2, y + 52 * s, max(12, int(14 * s)),
                           COLOR_OVERLAY if active else COLOR_SNOW, "center"))
        if high_scores:
            best = math.floor(high_scores.get(mode, 0.0) / UNITS_PER_METER)
            out.append(TextCmd(f"Best: {best}m", left + card_w / 2, y + 80 * s, max(12, int(14 * s)),
                               COLOR_OVERLAY if active else COLOR_SNOW, "center"))
    out.append(TextCmd(TEXT["menu_hint"], cx, y + card_h + 30 * s, max(12, int(16 * s)), COLOR_SNOW, "center"))
    return out
