from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pyray as rl

from .assets import SPRITE_NAMES, AssetLoadError, require_asset_path
from .console import ConsoleLog


@dataclass(slots=True)
class TextureAsset:
    name: str
    path: Path
    texture: rl.Texture2D

    @property
    def width(self) -> int:
        return int(self.texture.width)

    @property
    def height(self) -> int:
        return int(self.texture.height)

    def unload(self) -> None:
        rl.unload_texture(self.texture)


@dataclass(slots=True)
class TextureCache:
    assets_dir: Path
    textures: dict[str, TextureAsset] = field(default_factory=dict)

    def get(self, name: str) -> TextureAsset | None:
        return self.textures.get(name)

    def get_or_load(self, name: str) -> TextureAsset:
        existing = self.textures.get(name)
        if existing is not None:
            return existing
        path = require_asset_path(self.assets_dir, name)
        texture = rl.load_texture(str(path))
        if int(texture.id) <= 0:
            raise AssetLoadError(name, path, reason="texture upload failed")
        rl.set_texture_filter(texture, rl.TEXTURE_FILTER_BILINEAR)
        asset = TextureAsset(name=name, path=path, texture=texture)
        self.textures[name] = asset
        return asset

    def load_all(self, names: tuple[str, ...] = SPRITE_NAMES, *, log: ConsoleLog | None = None) -> None:
        for name in names:
            self.get_or_load(name)
        if log is not None:
            log.log(f"assets: textures loaded {len(self.textures)}/{len(names)} from {self.assets_dir}")

    def unload(self) -> None:
        for asset in self.textures.values():
            asset.unload()
        self.textures.clear()
