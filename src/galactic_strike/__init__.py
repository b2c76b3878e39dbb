from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("galactic-strike")
except PackageNotFoundError:  # pragma: no cover
    # Allow running from source (e.g. `PYTHONPATH=src`) without installed package metadata.
    __version__ = "0.0.0+dev"

__all__ = [
    "actors",
    "audio_router",
    "collisions",
    "formation",
    "hud",
    "input_state",
    "render",
    "replay",
    "sim",
    "world",
]
