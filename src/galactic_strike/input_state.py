from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

LEFT_FLAG = 1 << 0
RIGHT_FLAG = 1 << 1
FIRE_FLAG = 1 << 2


class Key(IntEnum):
    LEFT = 0
    RIGHT = 1
    FIRE = 2


@dataclass(slots=True)
class InputState:
    """Latched left/right/fire flags; set on key-down, cleared on key-up."""

    left: bool = False
    right: bool = False
    fire: bool = False

    def key_down(self, key: Key) -> None:
        self._set(key, True)

    def key_up(self, key: Key) -> None:
        self._set(key, False)

    def _set(self, key: Key, value: bool) -> None:
        if key is Key.LEFT:
            self.left = value
        elif key is Key.RIGHT:
            self.right = value
        elif key is Key.FIRE:
            self.fire = value
        else:
            raise ValueError(f"unknown key: {key!r}")

    def move_axis(self) -> float:
        """Sum of held directions; both held cancel to zero."""
        axis = 0.0
        if self.right:
            axis += 1.0
        if self.left:
            axis -= 1.0
        return axis

    def pack(self) -> int:
        flags = 0
        if self.left:
            flags |= LEFT_FLAG
        if self.right:
            flags |= RIGHT_FLAG
        if self.fire:
            flags |= FIRE_FLAG
        return int(flags)

    @classmethod
    def unpack(cls, flags: int) -> InputState:
        flags = int(flags)
        return cls(
            left=bool(flags & LEFT_FLAG),
            right=bool(flags & RIGHT_FLAG),
            fire=bool(flags & FIRE_FLAG),
        )
