from __future__ import annotations

import msgspec
from nova.geom import Vec2

from ..actors import SpriteSizes
from ..constants import TICK_RATE, WINDOW_HEIGHT, WINDOW_WIDTH
from ..input_state import FIRE_FLAG, LEFT_FLAG, RIGHT_FLAG, InputState

FORMAT_VERSION = 1
INPUT_FLAGS_MASK = LEFT_FLAG | RIGHT_FLAG | FIRE_FLAG


def _default_game_version() -> str:
    from .. import __version__

    return str(__version__)


class ReplayHeader(msgspec.Struct, forbid_unknown_fields=True):
    seed: int
    tick_rate: int = TICK_RATE
    width: int = WINDOW_WIDTH
    height: int = WINDOW_HEIGHT
    # Unscaled `[w, h]` per sprite name; the hitboxes depend on them.
    sprite_sizes: dict[str, list[float]] = msgspec.field(default_factory=dict)
    game_version: str = msgspec.field(default_factory=_default_game_version)

    def sizes(self) -> SpriteSizes:
        parsed = {name: Vec2(float(wh[0]), float(wh[1])) for name, wh in self.sprite_sizes.items() if len(wh) >= 2}
        return SpriteSizes.from_mapping(parsed)


class Replay(msgspec.Struct, forbid_unknown_fields=True):
    v: int
    header: ReplayHeader
    # One packed `InputState` byte per tick.
    inputs: list[int] = msgspec.field(default_factory=list)
    final_fingerprint: str | None = None

    @property
    def tick_count(self) -> int:
        return len(self.inputs)

    def input_at(self, tick_index: int) -> InputState:
        return InputState.unpack(self.inputs[tick_index])

    def game_version_note(self, current_version: str | None = None) -> str | None:
        """Why playback under `current_version` may diverge, or `None` when the builds agree."""
        expected = _default_game_version() if current_version is None else str(current_version)
        got = str(self.header.game_version)
        if not got:
            return f"replay is missing game_version (current={expected!r})"
        if got != expected:
            return f"replay game_version mismatch (replay={got!r}, current={expected!r})"
        return None
