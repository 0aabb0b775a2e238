# src/game/game.py
import sys, argparse, logging
import pygame
from pygame import K_SPACE, K_ESCAPE, K_w, K_UP, K_d, K_RIGHT
from .config import WIDTH, HEIGHT, FPS, FRAME_MS, SEED_DEFAULT, GameConfig, GameMode, Viewport
from .assets import AssetStore, catalog_keys
from .canvas import PygameCanvas
from .menu import Shell
from .render import PLAYER_HAT
from .world import World, Control

logger = logging.getLogger(__name__)

KEYMAP = {
    K_w: Control.JUMP, K_UP: Control.JUMP,
    K_d: Control.BOOST, K_RIGHT: Control.BOOST,
    K_SPACE: Control.RESTART,
}

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Christmas Slope: jump the obstacles, reach the present.")
    p.add_argument("--seed", type=int, default=None,
                   help="Run seed. Omit for SEED_DEFAULT, use -1 for random each launch.")
    p.add_argument("--mode", choices=[m.value for m in GameMode], default=GameMode.PRESENT.value,
                   help="Mode highlighted in the menu (or played directly with --no-menu)")
    p.add_argument("--no-menu", action="store_true", help="Skip the mode menu at launch")
    p.add_argument("--width", type=int, default=WIDTH)
    p.add_argument("--height", type=int, default=HEIGHT)
    p.add_argument("--assets", type=str, default="assets", help="Directory holding the images")
    p.add_argument("--log-level", type=str, default="INFO")
    return p.parse_args(argv)

def resolve_seed(seed):
    # None -> SEED_DEFAULT; -1 -> random (World draws one)
    if seed is None:
        return SEED_DEFAULT
    if seed == -1:
        return None
    return seed

def run(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    pygame.init()
    pygame.display.set_caption("Christmas Slope")
    screen = pygame.display.set_mode((args.width, args.height), pygame.RESIZABLE)
    clock = pygame.time.Clock()

    config = GameConfig(mode=GameMode(args.mode))
    assets = AssetStore(args.assets)
    ready = assets.load_all(catalog_keys(config.catalog) + [PLAYER_HAT])
    logger.info("assets ready: %d", ready)

    world = World(config, Viewport(args.width, args.height), seed=resolve_seed(args.seed),
                  aspect_of=assets.aspect_of)
    shell = Shell(world, KEYMAP, show_menu=not args.no_menu)
    canvas = PygameCanvas(screen, assets)
    logger.info("start seed=%s mode=%s", world.seed, config.mode.value)

    while True:
        clock.tick(FPS)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit(); sys.exit()
            if event.type == pygame.VIDEORESIZE:
                screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                canvas.surface = screen
                world.resize(event.w, event.h)
            if event.type == pygame.KEYDOWN:
                if event.key == K_ESCAPE:
                    pygame.quit(); sys.exit()
                # N on game over restarts with a NEW RANDOM seed
                shell.handle_key(event.key, new_seed=pygame.time.get_ticks() ^ world.seed)

        # fixed step: one update, one render per frame (world frozen under the menu)
        shell.tick(FRAME_MS)
        canvas.execute(shell.frame(assets))
        pygame.display.flip()

if __name__ == "__main__":
    run()
