# src/tests/assets_unit.py
import random
import tempfile
from pathlib import Path

import pygame

from src.game.assets import AssetStore, catalog_keys
from src.game.config import DEFAULT_CATALOG, Viewport
from src.game.level import ObstacleField


def test_missing_image_stays_unloaded():
    store = AssetStore(Path(tempfile.mkdtemp()))
    assert not store.load("obstacles/rock.png")
    assert not store.is_loaded("obstacles/rock.png")
    assert store.surface("obstacles/rock.png") is None
    assert store.aspect_of(DEFAULT_CATALOG[0]) is None
    # retried later: still a clean miss, never raises
    assert store.load_all(catalog_keys(DEFAULT_CATALOG)) == 0


def test_loaded_image_aspect_feeds_spawner():
    root = Path(tempfile.mkdtemp())
    rock = DEFAULT_CATALOG[0]
    (root / "obstacles").mkdir()
    pygame.image.save(pygame.Surface((60, 30)), str(root / rock.image))

    store = AssetStore(root)
    assert store.load_all(catalog_keys(DEFAULT_CATALOG)) == 1
    assert store.is_loaded(rock.image)
    assert store.aspect_of(rock) == 2.0

    field = ObstacleField(random.Random(1), (rock,), 600.0, 1200.0, aspect_of=store.aspect_of)
    field.maybe_spawn(1200.0, Viewport(800, 400))
    w, h = field.obstacles[0].dimensions()
    assert w == 2 * h, "spawned obstacle keeps the image aspect ratio"


def test_catalog_keys():
    keys = catalog_keys(DEFAULT_CATALOG)
    assert len(keys) == len(DEFAULT_CATALOG)
    assert all(k.startswith("obstacles/") for k in keys)


def main():
    test_missing_image_stays_unloaded()
    test_loaded_image_aspect_feeds_spawner()
    test_catalog_keys()
    print("✓ assets unit sanity passed")

if __name__ == "__main__":
    main()
