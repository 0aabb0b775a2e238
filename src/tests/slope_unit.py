# src/tests/slope_unit.py
import math

import pytest

from src.game.config import GameConfig, GameMode, Viewport, SLOPE_GRADE
from src.game.slope import Slope, ground_height_at


def test_ground_is_affine_with_grade():
    base, center = 320.0, 400.0
    xs = [-250.0, 0.0, 13.5, 150.0, 400.0, 799.0, 1600.0]
    for x1, x2 in zip(xs, xs[1:]):
        rise = ground_height_at(x2, base, center) - ground_height_at(x1, base, center)
        assert math.isclose(rise / (x2 - x1), SLOPE_GRADE), f"slope between {x1} and {x2} is not the grade"


def test_ground_at_center_is_baseline():
    vp = Viewport(800, 400)
    s = Slope(vp.ground_y, vp.center_x, 0.2)
    assert s.height_at(vp.center_x) == vp.ground_y
    assert s.height_at(150.0) == pytest.approx(270.0)
    # downhill to the right: larger screen y
    assert s.height_at(700.0) > s.height_at(100.0)


def test_viewport_derived_values():
    vp = Viewport(800, 400)
    assert vp.scale == 1.0 and vp.ground_y == 320.0 and vp.pixel_size == 4
    wide = Viewport(1600, 500)
    assert wide.scale == 1.25, "scale uses the tighter axis"
    assert wide.pixel_size == 5
    assert wide.ground_y == 500 - 80 * 1.25


def test_config_validation():
    with pytest.raises(ValueError):
        GameConfig(spawn_min_spacing=1300.0, spawn_max_spacing=1200.0)
    with pytest.raises(ValueError):
        GameConfig(clearance_fraction=1.5)
    with pytest.raises(ValueError):
        GameConfig(base_scroll_speed=0.0)
    assert GameConfig(mode="endless").mode is GameMode.ENDLESS


def main():
    test_ground_is_affine_with_grade()
    test_ground_at_center_is_baseline()
    test_viewport_derived_values()
    test_config_validation()
    print("✓ slope unit sanity passed")

if __name__ == "__main__":
    main()
