# src/game/canvas.py
from __future__ import annotations
from typing import Dict, Iterable, Optional

import pygame

from .render import CircleCmd, DrawCommand, ImageCmd, PolygonCmd, RectCmd, TextCmd


class PygameCanvas:
    """Executes draw commands on a pygame surface."""

    def __init__(self, surface: pygame.Surface, assets=None, font_name: str = "jetbrainsmono"):
        self.surface = surface
        self.assets = assets
        self.font_name = font_name
        self._fonts: Dict[int, pygame.font.Font] = {}

    def _font(self, size: int) -> pygame.font.Font:
        if size not in self._fonts:
            if not pygame.font.get_init():
                pygame.font.init()
            self._fonts[size] = pygame.font.SysFont(self.font_name, size)
        return self._fonts[size]

    def execute(self, commands: Iterable[DrawCommand]):
        for cmd in commands:
            if isinstance(cmd, RectCmd):
                self._rect(cmd)
            elif isinstance(cmd, PolygonCmd):
                self._polygon(cmd)
            elif isinstance(cmd, CircleCmd):
                self._circle(cmd)
            elif isinstance(cmd, ImageCmd):
                self._image(cmd)
            elif isinstance(cmd, TextCmd):
                self._text(cmd)

    def _rect(self, cmd: RectCmd):
        if cmd.alpha <= 0 or cmd.w <= 0 or cmd.h <= 0:
            return
        r = pygame.Rect(int(cmd.x), int(cmd.y), max(1, int(cmd.w)), max(1, int(cmd.h)))
        if cmd.alpha >= 255:
            pygame.draw.rect(self.surface, cmd.color, r)
            return
        panel = pygame.Surface(r.size, pygame.SRCALPHA)
        panel.fill((*cmd.color, cmd.alpha))
        self.surface.blit(panel, r.topleft)

    def _polygon(self, cmd: PolygonCmd):
        if cmd.alpha <= 0 or len(cmd.points) < 3:
            return
        if cmd.alpha >= 255:
            pygame.draw.polygon(self.surface, cmd.color, cmd.points)
            return
        xs = [p[0] for p in cmd.points]
        ys = [p[1] for p in cmd.points]
        x0, y0 = min(xs), min(ys)
        layer = pygame.Surface((int(max(xs) - x0) + 1, int(max(ys) - y0) + 1), pygame.SRCALPHA)
        pygame.draw.polygon(layer, (*cmd.color, cmd.alpha), [(x - x0, y - y0) for x, y in cmd.points])
        self.surface.blit(layer, (int(x0), int(y0)))

    def _circle(self, cmd: CircleCmd):
        if cmd.alpha <= 0 or cmd.r <= 0:
            return
        if cmd.alpha >= 255:
            pygame.draw.circle(self.surface, cmd.color, (int(cmd.x), int(cmd.y)), int(cmd.r))
            return
        r = int(cmd.r)
        layer = pygame.Surface((2 * r + 1, 2 * r + 1), pygame.SRCALPHA)
        pygame.draw.circle(layer, (*cmd.color, cmd.alpha), (r, r), r)
        self.surface.blit(layer, (int(cmd.x) - r, int(cmd.y) - r))

    def _image(self, cmd: ImageCmd):
        surf: Optional[pygame.Surface] = self.assets.surface(cmd.key) if self.assets is not None else None
        if surf is None or cmd.w <= 0 or cmd.h <= 0:
            return   # not loaded yet: skip, never wait
        img = pygame.transform.scale(surf, (int(cmd.w), int(cmd.h)))
        if cmd.rotation:
            img = pygame.transform.rotate(img, -cmd.rotation)
        if cmd.alpha < 255:
            img.set_alpha(cmd.alpha)
        center = (int(cmd.x + cmd.w / 2), int(cmd.y + cmd.h / 2))
        self.surface.blit(img, img.get_rect(center=center))

    def _text(self, cmd: TextCmd):
        if cmd.alpha <= 0:
            return
        img = self._font(cmd.size).render(cmd.text, True, cmd.color)
        if cmd.alpha < 255:
            img.set_alpha(cmd.alpha)
        x = cmd.x - img.get_width() / 2 if cmd.align == "center" else cmd.x
        self.surface.blit(img, (int(x), int(cmd.y)))
