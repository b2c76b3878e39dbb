from __future__ import annotations

"""World-to-screen projection and draw enumeration.

The draw list is plain data so it can be built and checked without a window;
`RaylibRenderer` is the only consumer that touches the GPU.
"""

from dataclasses import dataclass
from typing import TypeAlias

from nova.geom import Vec2

from ..actors import IMAGE_BY_TAG, Actor
from ..world import World

SPRITE_ANCHOR = Vec2(0.5, 0.5)


@dataclass(frozen=True, slots=True)
class SpriteDraw:
    name: str
    position: Vec2
    scale: Vec2
    offset: Vec2 = SPRITE_ANCHOR


@dataclass(frozen=True, slots=True)
class TextDraw:
    text: str
    position: Vec2
    size: int
    offset: Vec2 = SPRITE_ANCHOR


DrawOp: TypeAlias = SpriteDraw | TextDraw


def world_to_screen(window: Vec2, point: Vec2) -> Vec2:
    """World origin is the window center, +y down in both spaces."""
    return point + window * 0.5


def _sprite(world: World, actor: Actor) -> SpriteDraw | None:
    name = IMAGE_BY_TAG.get(actor.tag)
    if name is None or not actor.alive:
        return None
    return SpriteDraw(name=name, position=world_to_screen(world.window, actor.position), scale=actor.scale)


def build_draw_list(world: World) -> list[DrawOp]:
    ops: list[DrawOp] = []
    layers = (world.shields, world.enemies, world.player_bullets, world.enemy_bullets, [world.player])
    for actors in layers:
        for actor in actors:
            op = _sprite(world, actor)
            if op is not None:
                ops.append(op)
    for entry in world.hud.texts.values():
        ops.append(TextDraw(text=entry.text, position=world_to_screen(world.window, entry.position), size=entry.size))
    return ops
