# src/tests/collision_tests.py
from __future__ import annotations
import pygame

from src.game.config import DEFAULT_CATALOG, GameConfig, Viewport
from src.game.entities import Obstacle
from src.game.level import Contact, classify_contact
from src.game.update import update
from src.game.world import World, Phase, press_jump

ROCK = DEFAULT_CATALOG[0]


def make_world() -> World:
    # scale 1.0: player hitbox is x 170..210, y 200..270 while grounded
    return World(GameConfig(catalog=()), Viewport(800, 400), seed=5)


def test_clearance_line_rule():
    ob = pygame.Rect(170, 238, 40, 40)          # clearance line at 238 + 12 = 250
    assert classify_contact(pygame.Rect(170, 200, 40, 70), ob, 0.3) is Contact.HIT
    assert classify_contact(pygame.Rect(170, 170, 40, 70), ob, 0.3) is Contact.CLEARED
    assert classify_contact(pygame.Rect(170, 180, 40, 70), ob, 0.3) is Contact.CLEARED, "on the line counts as cleared"
    assert classify_contact(pygame.Rect(170, 181, 40, 70), ob, 0.3) is Contact.HIT
    # fully above: no vertical overlap at all
    assert classify_contact(pygame.Rect(170, 100, 40, 70), ob, 0.3) is Contact.NONE
    # side by side: no horizontal overlap
    assert classify_contact(pygame.Rect(210, 200, 40, 70), ob, 0.3) is Contact.NONE


def test_hit_ends_run_on_that_tick():
    w = make_world()
    ob = Obstacle(ROCK, w.player.center_x, 40.0, 0.0)
    w.field.obstacles.append(ob)
    update(w)
    assert w.phase is Phase.GAME_OVER, "overlap below the clearance line must end the run"
    assert w.game_over_started_at == w.clock_ms
    assert w.ticks_in_phase == 0
    assert w.crashed_into is ob


def test_first_collision_wins():
    w = make_world()
    first = Obstacle(ROCK, w.player.center_x, 40.0, 0.0)
    second = Obstacle(ROCK, w.player.center_x + 5, 40.0, 0.0)
    w.field.obstacles.extend([first, second])
    update(w)
    assert w.crashed_into is first


def test_high_jump_clears_and_rides():
    w = make_world()
    p = w.player
    w.field.obstacles.append(Obstacle(ROCK, p.center_x, 40.0, 0.0))
    # falling onto the rock: feet a few px into its top after this tick's gravity
    p.is_jumping = True
    p.vy = 0.0
    p.y = 240.0
    update(w)
    assert w.phase is Phase.PLAYING, "cleared obstacle must not end the run"
    assert p.is_on_obstacle, "descending onto a cleared obstacle should ride it"
    top = w.field.obstacles[0].hitbox(w.slope).top
    assert p.y == top and p.vy == 0.0
    assert press_jump(w), "riding grants a new jump"
    assert p.vy == p.jump_power


def test_no_checks_after_game_over():
    w = make_world()
    w.field.obstacles.append(Obstacle(ROCK, w.player.center_x, 40.0, 0.0))
    update(w)
    started = w.game_over_started_at
    for _ in range(10):
        update(w)
    assert w.phase is Phase.GAME_OVER and w.game_over_started_at == started


def main():
    test_clearance_line_rule()
    test_hit_ends_run_on_that_tick()
    test_first_collision_wins()
    test_high_jump_clears_and_rides()
    test_no_checks_after_game_over()
    print("✓ collision tests ok")

if __name__ == "__main__":
    main()
