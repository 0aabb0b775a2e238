# src/game/assets.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Optional

import pygame

from .config import ObstacleKind

logger = logging.getLogger(__name__)

DEFAULT_ASSET_DIR = Path("assets")


@dataclass
class ImageAsset:
    path: Path
    surface: Optional[pygame.Surface] = None
    loaded: bool = False

    @property
    def aspect(self) -> Optional[float]:
        """width / height of the image, None until loaded."""
        if not self.loaded or self.surface is None:
            return None
        w, h = self.surface.get_size()
        return w / h if h else None


class AssetStore:
    """
    Image handles keyed by relative path. Anything missing or broken stays
    `loaded=False` forever; callers check the flag and skip the draw.
    """

    def __init__(self, root: Path = DEFAULT_ASSET_DIR):
        self.root = Path(root)
        self.images: Dict[str, ImageAsset] = {}

    def register(self, key: str) -> ImageAsset:
        if key not in self.images:
            self.images[key] = ImageAsset(self.root / key)
        return self.images[key]

    def load(self, key: str) -> bool:
        asset = self.register(key)
        if asset.loaded:
            return True
        try:
            surf = pygame.image.load(str(asset.path))
        except (pygame.error, FileNotFoundError) as e:
            logger.warning("image %s not loaded: %s", asset.path, e)
            return False
        # convert_alpha needs a display surface; keep the raw surface otherwise
        if pygame.display.get_init() and pygame.display.get_surface() is not None:
            surf = surf.convert_alpha()
        asset.surface = surf
        asset.loaded = True
        return True

    def load_all(self, keys: Iterable[str]) -> int:
        """Load every key; returns how many are ready."""
        return sum(1 for k in keys if self.load(k))

    def is_loaded(self, key: str) -> bool:
        asset = self.images.get(key)
        return asset is not None and asset.loaded

    def surface(self, key: str) -> Optional[pygame.Surface]:
        asset = self.images.get(key)
        return asset.surface if asset is not None and asset.loaded else None

    def aspect(self, key: Optional[str]) -> Optional[float]:
        if not key:
            return None
        asset = self.images.get(key)
        return asset.aspect if asset is not None else None

    def aspect_of(self, kind: ObstacleKind) -> Optional[float]:
        return self.aspect(kind.image)


def catalog_keys(catalog: Iterable[ObstacleKind]) -> list:
    return [k.image for k in catalog if k.image]
