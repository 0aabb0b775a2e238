# src/game/slope.py
from __future__ import annotations

from .config import SLOPE_GRADE


def ground_height_at(x: float, base_ground_y: float, center_x: float,
                     grade: float = SLOPE_GRADE) -> float:
    """
    Screen y of the snow line at horizontal position x.
    Affine in x: equals base_ground_y at the viewport centre and drops
    `grade` px (downward on screen) per px to the right.
    """
    return base_ground_y - (center_x - x) * grade


class Slope:
    """Binds the ground function to the current viewport so callers only pass x."""

    def __init__(self, base_ground_y: float, center_x: float, grade: float = SLOPE_GRADE):
        self.base_ground_y = float(base_ground_y)
        self.center_x = float(center_x)
        self.grade = float(grade)

    def height_at(self, x: float) -> float:
        return ground_height_at(x, self.base_ground_y, self.center_x, self.grade)

    def __repr__(self) -> str:
        return f"Slope(base={self.base_ground_y:.1f}, center={self.center_x:.1f}, grade={self.grade})"
