from __future__ import annotations

import logging
from typing import Any

from blockmatch.config import GameConfig, ImageAsset
from blockmatch.constants import BACKGROUND_ASSET_KIND

logger = logging.getLogger(__name__)


class TextureCache:
    """Loads configured image assets on first use and shares them across frames.

    Names without a configured file, or whose file is missing or unreadable,
    are remembered as misses so the renderer falls back to flat colours
    without hitting the disk every frame.
    """

    def __init__(self, config: GameConfig):
        self._config = config
        self._assets: dict[str, ImageAsset] = {image.name: image for image in config.images}
        self._textures: dict[str, Any] = {}
        self._missing: set[str] = set()

    def texture_for(self, arcade_module, name: str | None):
        if not name:
            return None
        cached = self._textures.get(name)
        if cached is not None:
            return cached
        if name in self._missing:
            return None
        asset = self._assets.get(name)
        if asset is None or not asset.path:
            self._missing.add(name)
            return None
        path = self._config.asset_path(asset.path)
        if not path.exists():
            logger.warning("Image %s not found at %s; drawing a colour instead", name, path)
            self._missing.add(name)
            return None
        try:
            texture = arcade_module.load_texture(path)
        except OSError as exc:
            logger.warning("Cannot load image %s from %s: %s", name, path, exc)
            self._missing.add(name)
            return None
        self._textures[name] = texture
        return texture

    def background(self, arcade_module) -> tuple[ImageAsset | None, Any]:
        """Return the first background asset and its texture (None when it cannot be drawn)."""
        for image in self._config.images:
            if image.kind == BACKGROUND_ASSET_KIND:
                return image, self.texture_for(arcade_module, image.name)
        return None, None
