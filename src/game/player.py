# src/game/player.py
from __future__ import annotations
import pygame
from dataclasses import dataclass
from .config import (
    PLAYER_X, PLAYER_SPRITE_W, PLAYER_SPRITE_H, PLAYER_HITBOX_INSET, PLAYER_HITBOX_H,
    GRAVITY, JUMP_POWER, Viewport
)

@dataclass
class Player:
    """
    Skier on a fixed lane; the world scrolls left underneath.
    - y is the feet line in screen coordinates (grows downward)
    - vy < 0 means moving up
    - while not jumping, y is pinned to the slope
    """
    x: float
    y: float
    vy: float
    width: float
    height: float
    gravity: float = GRAVITY
    jump_power: float = JUMP_POWER
    is_jumping: bool = False
    is_on_obstacle: bool = False   # riding an obstacle top: may jump again

    @classmethod
    def spawn(cls, viewport: Viewport, ground_y: float,
              gravity: float = GRAVITY, jump_power: float = JUMP_POWER) -> "Player":
        s = viewport.pixel_size
        return cls(
            x=PLAYER_X * viewport.scale,
            y=ground_y,
            vy=0.0,
            width=PLAYER_SPRITE_W * s,
            height=PLAYER_SPRITE_H * s,
            gravity=gravity * viewport.scale,
            jump_power=jump_power * viewport.scale,
        )

    @property
    def hitbox(self) -> pygame.Rect:
        """Horizontally inset box under the sprite, bottom on the feet line."""
        inset = self.width * PLAYER_HITBOX_INSET
        w = self.width - 2 * inset
        h = self.height * PLAYER_HITBOX_H
        bottom = round(self.y)
        return pygame.Rect(round(self.x + inset), bottom - round(h), round(w), round(h))

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    def can_jump(self) -> bool:
        return (not self.is_jumping) or self.is_on_obstacle

    def try_jump(self) -> bool:
        """Start a jump if grounded or riding an obstacle. Returns True if performed."""
        if not self.can_jump():
            return False
        self.vy = self.jump_power
        self.is_jumping = True
        self.is_on_obstacle = False
        return True

    def update_physics(self, ground_y: float) -> bool:
        """
        One tick of vertical motion against the slope at the player's x.
        Returns True on the tick the player lands.
        """
        # riding only holds while the collision pass keeps re-confirming it
        self.is_on_obstacle = False

        if not self.is_jumping:
            self.y = ground_y
            self.vy = 0.0
            return False

        self.vy += self.gravity
        self.y += self.vy

        if self.y >= ground_y:
            self.y = ground_y
            self.vy = 0.0
            self.is_jumping = False
            return True
        return False

    def ride(self, surface_y: float):
        """Rest on top of an obstacle that was cleared on the way down."""
        self.y = surface_y
        self.vy = 0.0
        self.is_on_obstacle = True

    def rescale(self, old: Viewport, new: Viewport, gravity: float, jump_power: float):
        """Keep the feel constant across viewport sizes: every length follows the scale."""
        ratio = new.scale / old.scale if old.scale else 1.0
        s = new.pixel_size
        self.x = PLAYER_X * new.scale
        self.width = PLAYER_SPRITE_W * s
        self.height = PLAYER_SPRITE_H * s
        self.gravity = gravity * new.scale
        self.jump_power = jump_power * new.scale
        self.vy *= ratio
