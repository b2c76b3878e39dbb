from __future__ import annotations

import gzip
import zlib
from pathlib import Path

import msgspec

from .types import FORMAT_VERSION, INPUT_FLAGS_MASK, Replay

_GZIP_MAGIC = b"\x1f\x8b"
_REPLAY_DECODER = msgspec.json.Decoder(type=Replay)


class ReplayCodecError(ValueError):
    pass


def _is_gzip(data: bytes) -> bool:
    return data.startswith(_GZIP_MAGIC)


def _validate(replay: Replay) -> Replay:
    if int(replay.v) != FORMAT_VERSION:
        raise ReplayCodecError(f"unsupported replay version: {replay.v}")
    if int(replay.header.tick_rate) <= 0:
        raise ReplayCodecError(f"replay tick_rate must be positive, got {replay.header.tick_rate}")
    if int(replay.header.width) <= 0 or int(replay.header.height) <= 0:
        raise ReplayCodecError(f"replay window must be positive, got {replay.header.width}x{replay.header.height}")
    for tick_idx, flags in enumerate(replay.inputs):
        if int(flags) & ~INPUT_FLAGS_MASK:
            raise ReplayCodecError(f"replay input tick {tick_idx} has unknown flags: {flags:#x}")
    return replay


def dump_replay(replay: Replay) -> bytes:
    """Serialize a replay as a gzipped JSON blob.

    The gzip header is written with mtime=0 for stable content hashing.
    """

    raw = msgspec.json.encode(replay)
    return gzip.compress(raw, compresslevel=9, mtime=0)


def load_replay(data: bytes) -> Replay:
    if _is_gzip(data):
        try:
            data = gzip.decompress(data)
        except (OSError, EOFError, zlib.error) as exc:
            raise ReplayCodecError(f"corrupt replay archive: {exc}") from exc
    try:
        replay = _REPLAY_DECODER.decode(data)
    except msgspec.DecodeError as exc:
        raise ReplayCodecError(f"invalid replay: {exc}") from exc
    return _validate(replay)


def save_replay_file(path: Path, replay: Replay) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(dump_replay(replay))


def load_replay_file(path: Path) -> Replay:
    path = Path(path)
    return load_replay(path.read_bytes())
