from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from construct import Byte, Bytes, Float32l, Int32ul, Struct

GALACTIC_CFG_NAME = "galactic.cfg"
GALACTIC_CFG_SIZE = 0x40
RESERVED_SIZE = 0x1C

# Raylib `KeyboardKey` codes.
KEY_SPACE = 32
KEY_RIGHT = 262
KEY_LEFT = 263

DEFAULT_SCREEN_WIDTH = 650
DEFAULT_SCREEN_HEIGHT = 700
DEFAULT_FPS_LIMIT = 60
MIN_SCREEN_DIMENSION = 200

GALACTIC_CFG_STRUCT = Struct(
    "sound_disable" / Byte,
    "windowed_flag" / Byte,
    "padding" / Bytes(2),
    "screen_width" / Int32ul,
    "screen_height" / Int32ul,
    "fps_limit" / Int32ul,
    "sfx_volume" / Float32l,
    "keybind_left" / Int32ul,
    "keybind_right" / Int32ul,
    "keybind_fire" / Int32ul,
    "rng_seed" / Int32ul,
    "reserved" / Bytes(RESERVED_SIZE),
)


@dataclass(slots=True)
class GalacticConfig:
    path: Path
    data: dict

    @property
    def sound_disable(self) -> bool:
        return int(self.data["sound_disable"]) != 0

    @sound_disable.setter
    def sound_disable(self, value: bool) -> None:
        self.data["sound_disable"] = 1 if value else 0

    @property
    def screen_width(self) -> int:
        return int(self.data["screen_width"])

    @screen_width.setter
    def screen_width(self, value: int) -> None:
        self.data["screen_width"] = int(value)

    @property
    def screen_height(self) -> int:
        return int(self.data["screen_height"])

    @screen_height.setter
    def screen_height(self, value: int) -> None:
        self.data["screen_height"] = int(value)

    @property
    def fps_limit(self) -> int:
        return int(self.data["fps_limit"])

    @fps_limit.setter
    def fps_limit(self, value: int) -> None:
        self.data["fps_limit"] = int(value)

    @property
    def sfx_volume(self) -> float:
        return float(self.data["sfx_volume"])

    @sfx_volume.setter
    def sfx_volume(self, value: float) -> None:
        volume = float(value)
        if volume < 0.0:
            volume = 0.0
        if volume > 1.0:
            volume = 1.0
        self.data["sfx_volume"] = volume

    @property
    def rng_seed(self) -> int:
        return int(self.data["rng_seed"])

    @rng_seed.setter
    def rng_seed(self, value: int) -> None:
        self.data["rng_seed"] = int(value) & 0xFFFFFFFF

    def keybinds(self) -> tuple[int, int, int]:
        """Return `(left, right, fire)` raylib key codes."""
        return (
            int(self.data["keybind_left"]),
            int(self.data["keybind_right"]),
            int(self.data["keybind_fire"]),
        )

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_bytes(GALACTIC_CFG_STRUCT.build(self.data))


def default_galactic_cfg_data() -> dict:
    data = GALACTIC_CFG_STRUCT.parse(bytes(GALACTIC_CFG_SIZE))
    config = GalacticConfig(path=Path("<memory>"), data=data)
    config.sound_disable = False
    config.data["windowed_flag"] = 1
    config.screen_width = DEFAULT_SCREEN_WIDTH
    config.screen_height = DEFAULT_SCREEN_HEIGHT
    config.fps_limit = DEFAULT_FPS_LIMIT
    config.sfx_volume = 1.0
    config.data["keybind_left"] = KEY_LEFT
    config.data["keybind_right"] = KEY_RIGHT
    config.data["keybind_fire"] = KEY_SPACE
    # 0 means "seed from the wall clock" when a session starts.
    config.rng_seed = 0
    return data


def load_galactic_cfg(path: Path) -> GalacticConfig:
    data = path.read_bytes()
    if len(data) != GALACTIC_CFG_SIZE:
        raise ValueError(f"{path} has unexpected size {len(data)} (expected {GALACTIC_CFG_SIZE})")
    return GalacticConfig(path=path, data=GALACTIC_CFG_STRUCT.parse(data))


def ensure_galactic_cfg(base_dir: Path) -> GalacticConfig:
    path = base_dir / GALACTIC_CFG_NAME
    if not path.exists():
        config = GalacticConfig(path=path, data=default_galactic_cfg_data())
        config.save()
        return config

    config = load_galactic_cfg(path)
    dirty = False
    if config.screen_width < MIN_SCREEN_DIMENSION:
        config.screen_width = DEFAULT_SCREEN_WIDTH
        dirty = True
    if config.screen_height < MIN_SCREEN_DIMENSION:
        config.screen_height = DEFAULT_SCREEN_HEIGHT
        dirty = True
    if config.fps_limit <= 0:
        config.fps_limit = DEFAULT_FPS_LIMIT
        dirty = True
    left, right, fire = config.keybinds()
    if left == 0 and right == 0 and fire == 0:
        defaults = default_galactic_cfg_data()
        for key in ("keybind_left", "keybind_right", "keybind_fire"):
            config.data[key] = defaults[key]
        dirty = True
    if dirty:
        config.save()
    return config


def config_summary(config: GalacticConfig) -> dict[str, object]:
    left, right, fire = config.keybinds()
    return {
        "path": str(config.path),
        "sound_disable": bool(config.sound_disable),
        "windowed": bool(int(config.data["windowed_flag"])),
        "screen_width": config.screen_width,
        "screen_height": config.screen_height,
        "fps_limit": config.fps_limit,
        "sfx_volume": round(config.sfx_volume, 3),
        "keybind_left": left,
        "keybind_right": right,
        "keybind_fire": fire,
        "rng_seed": config.rng_seed,
    }
