from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pyray as rl

from .assets import SOUND_NAMES, AssetLoadError, require_asset_path
from .config import GalacticConfig
from .console import ConsoleLog


@dataclass(slots=True)
class AudioState:
    ready: bool
    sfx_enabled: bool
    sfx_volume: float
    sounds: dict[str, rl.Sound] = field(default_factory=dict)
    missing: set[str] = field(default_factory=set)
    played: int = 0


def _disabled_state(volume: float) -> AudioState:
    return AudioState(ready=False, sfx_enabled=False, sfx_volume=volume)


def init_audio_state(config: GalacticConfig, assets_dir: Path, log: ConsoleLog) -> AudioState:
    volume = float(config.sfx_volume)
    if config.sound_disable:
        log.log("audio: disabled (sfx)")
        log.flush()
        return _disabled_state(volume)

    # Missing sound files are fatal before we touch the device.
    paths = {name: require_asset_path(assets_dir, name) for name in SOUND_NAMES}

    if not rl.is_audio_device_ready():
        rl.init_audio_device()
    if not rl.is_audio_device_ready():
        log.log("audio: device init failed")
        log.flush()
        return _disabled_state(volume)

    state = AudioState(ready=True, sfx_enabled=True, sfx_volume=volume)
    for name, path in paths.items():
        sound = rl.load_sound(str(path))
        if int(sound.frameCount) <= 0:
            raise AssetLoadError(name, path, reason="sound decode failed")
        rl.set_sound_volume(sound, state.sfx_volume)
        state.sounds[name] = sound
    log.log(f"audio: sfx loaded {len(state.sounds)}/{len(SOUND_NAMES)} from {assets_dir}")
    log.flush()
    return state


def play_sfx(state: AudioState | None, name: str | None) -> None:
    """Start a sound and return immediately; mixing happens on raylib's audio thread."""
    if state is None or not state.ready or not state.sfx_enabled:
        return
    if not name:
        return
    sound = state.sounds.get(name)
    if sound is None:
        state.missing.add(name)
        return
    rl.play_sound(sound)
    state.played += 1


def shutdown_audio(state: AudioState) -> None:
    if not state.ready:
        return
    for sound in state.sounds.values():
        rl.stop_sound(sound)
        rl.unload_sound(sound)
    state.sounds.clear()
    state.missing.clear()
    state.ready = False
    rl.close_audio_device()
