from __future__ import annotations

from .codec import ReplayCodecError, dump_replay, load_replay, load_replay_file, save_replay_file
from .recorder import ReplayRecorder
from .types import FORMAT_VERSION, Replay, ReplayHeader

__all__ = [
    "FORMAT_VERSION",
    "Replay",
    "ReplayCodecError",
    "ReplayHeader",
    "ReplayRecorder",
    "dump_replay",
    "load_replay",
    "load_replay_file",
    "save_replay_file",
]
