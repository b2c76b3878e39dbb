from __future__ import annotations

import hashlib
import random
import struct

from ..actors import Actor
from ..formation import FormationController
from ..world import World

_U8 = struct.Struct("<B")
_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_F32 = struct.Struct("<f")


def _h_u8(h: "hashlib._Hash", value: int) -> None:
    h.update(_U8.pack(int(value) & 0xFF))


def _h_u16(h: "hashlib._Hash", value: int) -> None:
    h.update(_U16.pack(int(value) & 0xFFFF))


def _h_u32(h: "hashlib._Hash", value: int) -> None:
    h.update(_U32.pack(int(value) & 0xFFFF_FFFF))


def _h_f32(h: "hashlib._Hash", value: float) -> None:
    h.update(_F32.pack(float(value)))


def _hash_actors(h: "hashlib._Hash", actors: list[Actor]) -> None:
    _h_u16(h, len(actors))
    for actor in actors:
        _h_u8(h, int(actor.tag))
        _h_f32(h, actor.position.x)
        _h_f32(h, actor.position.y)
        _h_f32(h, actor.direction.x)
        _h_f32(h, actor.direction.y)
        _h_f32(h, actor.hp)


def _hash_formation(h: "hashlib._Hash", formation: FormationController) -> None:
    for row in formation.alive:
        mask = 0
        for col_idx, cell in enumerate(row):
            if cell:
                mask |= 1 << col_idx
        _h_u16(h, mask)
    _h_f32(h, formation.tick_time)
    _h_f32(h, formation.outer_timer)
    _h_f32(h, formation.inner_timer)
    _h_f32(h, formation.shot_interval)
    _h_f32(h, formation.since_last_shot)
    _h_u8(h, 1 if formation.cascading else 0)
    _h_u8(h, formation.row_cursor)
    h.update(formation.last_collision.value.encode("ascii"))


def _hash_rng(h: "hashlib._Hash", rng: random.Random) -> None:
    _version, internal, _gauss = rng.getstate()
    for value in internal:
        _h_u32(h, int(value))


def world_fingerprint(world: World) -> str:
    """Return a stable hex digest of the simulation state.

    Floats are packed as float32 so harmless float64 noise does not show up
    as a mismatch.
    """

    h = hashlib.blake2b(digest_size=8)
    _h_u32(h, world.tick_index)
    _h_u32(h, world.score)
    _h_u32(h, world.max_score)
    _h_f32(h, world.shot_cooldown)
    _hash_actors(h, [world.player])
    _hash_actors(h, world.shields)
    _hash_actors(h, world.enemies)
    _hash_actors(h, world.player_bullets)
    _hash_actors(h, world.enemy_bullets)
    _hash_formation(h, world.formation)
    _hash_rng(h, world.rng)
    return h.hexdigest()
