from __future__ import annotations

"""Actor record shared by every entity in the playfield.

Behaviour is looked up from the tag (speed, score, sprite) instead of living on
subclasses, so the per-tick loops stay flat over plain records.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import IntEnum

from nova.assets import (
    ENEMY_BULLET_FAST_IMAGE,
    ENEMY_BULLET_SLOW_IMAGE,
    INVADER1_IMAGE,
    INVADER2_IMAGE,
    INVADER3_IMAGE,
    PLAYER_BULLET_IMAGE,
    PLAYER_IMAGE,
    SHIELD_IMAGE,
)
from nova.geom import Rect, Vec2

from .constants import (
    BULLET_LIFE,
    DEAD_HP,
    ENEMY_BULLET_SPEED_FAST,
    ENEMY_BULLET_SPEED_SLOW,
    ENEMY_LIFE,
    ENEMY_SCALE,
    PLAYER_BULLET_SPEED,
    PLAYER_LIFE,
    SHIELD_LIFE,
)


class ActorTag(IntEnum):
    PLAYER = 0
    PLAYER_BULLET = 1
    ENEMY_BULLET_SLOW = 2
    ENEMY_BULLET_FAST = 3
    ENEMY_A = 4
    ENEMY_B = 5
    ENEMY_C = 6
    # Reserved bonus enemy: scored but never spawned.
    ENEMY_E = 7
    SHIELD = 8


ENEMY_TAGS = frozenset({ActorTag.ENEMY_A, ActorTag.ENEMY_B, ActorTag.ENEMY_C, ActorTag.ENEMY_E})
ENEMY_BULLET_TAGS = frozenset({ActorTag.ENEMY_BULLET_SLOW, ActorTag.ENEMY_BULLET_FAST})
BULLET_TAGS = ENEMY_BULLET_TAGS | {ActorTag.PLAYER_BULLET}

BULLET_SPEED_BY_TAG: dict[ActorTag, float] = {
    ActorTag.PLAYER_BULLET: PLAYER_BULLET_SPEED,
    ActorTag.ENEMY_BULLET_SLOW: ENEMY_BULLET_SPEED_SLOW,
    ActorTag.ENEMY_BULLET_FAST: ENEMY_BULLET_SPEED_FAST,
}

KILL_SCORE_BY_TAG: dict[ActorTag, int] = {
    ActorTag.ENEMY_A: 50,
    ActorTag.ENEMY_B: 100,
    ActorTag.ENEMY_C: 150,
    ActorTag.ENEMY_E: 250,
}

IMAGE_BY_TAG: dict[ActorTag, str] = {
    ActorTag.PLAYER: PLAYER_IMAGE,
    ActorTag.PLAYER_BULLET: PLAYER_BULLET_IMAGE,
    ActorTag.ENEMY_BULLET_SLOW: ENEMY_BULLET_SLOW_IMAGE,
    ActorTag.ENEMY_BULLET_FAST: ENEMY_BULLET_FAST_IMAGE,
    ActorTag.ENEMY_A: INVADER1_IMAGE,
    ActorTag.ENEMY_B: INVADER2_IMAGE,
    ActorTag.ENEMY_C: INVADER3_IMAGE,
    ActorTag.SHIELD: SHIELD_IMAGE,
}

# Top row first.
ENEMY_TAG_BY_ROW: tuple[ActorTag, ...] = (
    ActorTag.ENEMY_C,
    ActorTag.ENEMY_B,
    ActorTag.ENEMY_B,
    ActorTag.ENEMY_A,
    ActorTag.ENEMY_A,
)

DEFAULT_SPRITE_SIZES: dict[str, Vec2] = {
    PLAYER_IMAGE: Vec2(52.0, 32.0),
    PLAYER_BULLET_IMAGE: Vec2(6.0, 18.0),
    ENEMY_BULLET_SLOW_IMAGE: Vec2(8.0, 20.0),
    ENEMY_BULLET_FAST_IMAGE: Vec2(8.0, 20.0),
    INVADER1_IMAGE: Vec2(48.0, 32.0),
    INVADER2_IMAGE: Vec2(44.0, 32.0),
    INVADER3_IMAGE: Vec2(32.0, 32.0),
    SHIELD_IMAGE: Vec2(88.0, 64.0),
}


@dataclass(frozen=True, slots=True)
class SpriteSizes:
    """Unscaled sprite dimensions keyed by asset name."""

    by_name: Mapping[str, Vec2] = field(default_factory=lambda: dict(DEFAULT_SPRITE_SIZES))

    @classmethod
    def from_mapping(cls, sizes: Mapping[str, Vec2]) -> SpriteSizes:
        merged = dict(DEFAULT_SPRITE_SIZES)
        merged.update(sizes)
        return cls(by_name=merged)

    def for_tag(self, tag: ActorTag) -> Vec2:
        name = IMAGE_BY_TAG.get(tag)
        if name is None:
            # ENEMY_E has no sprite of its own.
            name = INVADER3_IMAGE
        size = self.by_name.get(name)
        if size is None:
            size = DEFAULT_SPRITE_SIZES[name]
        return size

    def enemy_cell(self, scale: float = ENEMY_SCALE) -> Vec2:
        """Largest scaled enemy footprint; used as the formation grid pitch."""
        widths = [self.for_tag(tag).x for tag in ENEMY_TAG_BY_ROW]
        heights = [self.for_tag(tag).y for tag in ENEMY_TAG_BY_ROW]
        return Vec2(max(widths) * scale, max(heights) * scale)

    def to_dict(self) -> dict[str, list[float]]:
        return {name: [size.x, size.y] for name, size in sorted(self.by_name.items())}


@dataclass(slots=True)
class Actor:
    tag: ActorTag
    position: Vec2 = field(default_factory=Vec2)
    direction: Vec2 = field(default_factory=Vec2)
    size: Vec2 = field(default_factory=Vec2)
    scale: Vec2 = field(default_factory=lambda: Vec2(1.0, 1.0))
    hp: float = 1.0

    @property
    def alive(self) -> bool:
        return self.hp > 0.0

    def kill(self) -> None:
        self.hp = DEAD_HP

    def rect(self) -> Rect:
        return Rect.from_center_size(self.position, self.size)

    def edge_points(self) -> tuple[Vec2, Vec2]:
        """Centers of the top and bottom edges; the points a bullet hits with."""
        half_h = self.size.y * 0.5
        return (
            self.position.offset(dy=-half_h),
            self.position.offset(dy=half_h),
        )

    def move(self, delta: Vec2) -> None:
        self.position = self.position + delta


def bullet_speed(tag: ActorTag) -> float:
    speed = BULLET_SPEED_BY_TAG.get(tag)
    if speed is None:
        raise ValueError(f"not a bullet tag: {tag!r}")
    return speed


def kill_score(tag: ActorTag) -> int:
    return KILL_SCORE_BY_TAG.get(tag, 0)


def bullet_hits(bullet: Actor, target: Rect) -> bool:
    top, bottom = bullet.edge_points()
    return target.contains(top) or target.contains(bottom)


def create_player(sizes: SpriteSizes, position: Vec2) -> Actor:
    return Actor(
        tag=ActorTag.PLAYER,
        position=position,
        direction=Vec2(),
        size=sizes.for_tag(ActorTag.PLAYER),
        hp=PLAYER_LIFE,
    )


def create_player_bullet(sizes: SpriteSizes, position: Vec2) -> Actor:
    return Actor(
        tag=ActorTag.PLAYER_BULLET,
        position=position,
        direction=Vec2(0.0, -1.0),
        size=sizes.for_tag(ActorTag.PLAYER_BULLET),
        hp=BULLET_LIFE,
    )


def create_enemy_bullet(sizes: SpriteSizes, position: Vec2, *, fast: bool) -> Actor:
    tag = ActorTag.ENEMY_BULLET_FAST if fast else ActorTag.ENEMY_BULLET_SLOW
    return Actor(
        tag=tag,
        position=position,
        direction=Vec2(0.0, 1.0),
        size=sizes.for_tag(tag),
        hp=BULLET_LIFE,
    )


def create_enemy(sizes: SpriteSizes, tag: ActorTag, position: Vec2, direction: Vec2) -> Actor:
    if tag not in ENEMY_TAGS:
        raise ValueError(f"not an enemy tag: {tag!r}")
    return Actor(
        tag=tag,
        position=position,
        direction=direction,
        # The hitbox follows the drawn (scaled) sprite.
        size=sizes.for_tag(tag) * ENEMY_SCALE,
        scale=Vec2(ENEMY_SCALE, ENEMY_SCALE),
        hp=ENEMY_LIFE,
    )


def create_shield(sizes: SpriteSizes, position: Vec2) -> Actor:
    return Actor(
        tag=ActorTag.SHIELD,
        position=position,
        size=sizes.for_tag(ActorTag.SHIELD),
        hp=SHIELD_LIFE,
    )
