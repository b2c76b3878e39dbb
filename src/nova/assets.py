from __future__ import annotations

from pathlib import Path

from PIL import Image

from .geom import Vec2

PLAYER_IMAGE = "/player.png"
PLAYER_BULLET_IMAGE = "/player_bullet.png"
ENEMY_BULLET_SLOW_IMAGE = "/enemy_bullet_slow.png"
ENEMY_BULLET_FAST_IMAGE = "/enemy_bullet_fast.png"
INVADER1_IMAGE = "/invader1.png"
INVADER2_IMAGE = "/invader2.png"
INVADER3_IMAGE = "/invader3.png"
SHIELD_IMAGE = "/shield.png"

PLAYER_SHOOT_SOUND = "/player_shoot_sound.wav"
HIT_SOUND = "/hit.wav"

SPRITE_NAMES: tuple[str, ...] = (
    PLAYER_IMAGE,
    PLAYER_BULLET_IMAGE,
    ENEMY_BULLET_SLOW_IMAGE,
    ENEMY_BULLET_FAST_IMAGE,
    INVADER1_IMAGE,
    INVADER2_IMAGE,
    INVADER3_IMAGE,
    SHIELD_IMAGE,
)

SOUND_NAMES: tuple[str, ...] = (
    PLAYER_SHOOT_SOUND,
    HIT_SOUND,
)


class AssetLoadError(FileNotFoundError):
    def __init__(self, name: str, path: Path | None = None, reason: str | None = None) -> None:
        self.name = name
        self.path = path
        detail = f"asset {name!r}"
        if path is not None:
            detail += f" ({path})"
        detail += f": {reason or 'not found'}"
        super().__init__(detail)


def resolve_asset_path(assets_dir: Path, name: str) -> Path:
    """Map an asset name like `/player.png` onto a file under `assets_dir`."""
    rel = name.replace("\\", "/").lstrip("/")
    if not rel:
        raise AssetLoadError(name, reason="empty asset name")
    return assets_dir / rel


def require_asset_path(assets_dir: Path, name: str) -> Path:
    path = resolve_asset_path(assets_dir, name)
    if not path.is_file():
        raise AssetLoadError(name, path)
    return path


def read_sprite_sizes(assets_dir: Path, names: tuple[str, ...] = SPRITE_NAMES) -> dict[str, Vec2]:
    """Read sprite dimensions without creating a GPU context."""
    sizes: dict[str, Vec2] = {}
    for name in names:
        path = require_asset_path(assets_dir, name)
        try:
            with Image.open(path) as img:
                width, height = img.size
        except OSError as exc:
            raise AssetLoadError(name, path, reason=str(exc)) from exc
        sizes[name] = Vec2(float(width), float(height))
    return sizes
