# src/game/menu.py
from __future__ import annotations
import logging
from enum import Enum
from typing import List, Optional

from pygame import K_1, K_2, K_DOWN, K_KP_ENTER, K_RETURN, K_SPACE, K_UP, K_m, K_n, K_s, K_w

from .config import FRAME_MS, GameMode
from .render import DrawCommand, render, render_menu
from .update import update
from .world import Phase, World, handle_control

logger = logging.getLogger(__name__)

MENU_MODES = (GameMode.PRESENT, GameMode.ENDLESS)
START_KEYS = (K_RETURN, K_KP_ENTER, K_SPACE)
MENU_KEYS = (K_RETURN, K_KP_ENTER, K_m)


class Screen(str, Enum):
    MENU = "menu"
    GAME = "game"


class Shell:
    """
    App-level screens on top of the world: the mode menu and the game itself.
    The world's own phases are untouched; the menu only picks a mode and
    restarts. While the menu is up the world is frozen.
    """

    def __init__(self, world: World, keymap: dict, show_menu: bool = True):
        self.world = world
        self.keymap = keymap
        self.screen = Screen.GAME
        self.selected = MENU_MODES.index(world.config.mode)
        if show_menu:
            self.open_menu()

    @property
    def in_menu(self) -> bool:
        return self.screen is Screen.MENU

    @property
    def selected_mode(self) -> GameMode:
        return MENU_MODES[self.selected]

    def open_menu(self):
        self.screen = Screen.MENU
        self.selected = MENU_MODES.index(self.world.config.mode)

    def start(self, mode: Optional[GameMode] = None):
        """Leave the menu into a fresh run of `mode` (the highlighted one by default)."""
        mode = mode or self.selected_mode
        self.world.set_mode(mode)
        self.world.restart()
        self.screen = Screen.GAME
        logger.info("menu -> %s", mode.value)

    def handle_key(self, key: int, new_seed: Optional[int] = None) -> bool:
        """Route one key press. Returns True when it did something."""
        if self.in_menu:
            return self._menu_key(key)

        phase = self.world.phase
        if phase is not Phase.PLAYING and key in MENU_KEYS:
            self.open_menu()
            return True
        if key in self.keymap:
            return handle_control(self.world, self.keymap[key])
        if key == K_n and phase is Phase.GAME_OVER:
            # same mode, fresh layout
            self.world.restart(seed=new_seed)
            return True
        return False

    def _menu_key(self, key: int) -> bool:
        if key in (K_UP, K_w):
            self.selected = (self.selected - 1) % len(MENU_MODES)
        elif key in (K_DOWN, K_s):
            self.selected = (self.selected + 1) % len(MENU_MODES)
        elif key == K_1:
            self.start(GameMode.PRESENT)
        elif key == K_2:
            self.start(GameMode.ENDLESS)
        elif key in START_KEYS:
            self.start()
        else:
            return False
        return True

    def tick(self, dt_ms: float = FRAME_MS):
        if not self.in_menu:
            update(self.world, dt_ms)

    def frame(self, assets=None) -> List[DrawCommand]:
        cmds = render(self.world, assets)
        if self.in_menu:
            cmds.extend(render_menu(self.world.viewport, self.selected_mode, self.world.high_scores))
        return cmds
