from __future__ import annotations

import math

import pytest

from nova.assets import INVADER3_IMAGE, PLAYER_IMAGE
from nova.geom import Rect, Vec2

from galactic_strike.actors import (
    ActorTag,
    SpriteSizes,
    bullet_hits,
    bullet_speed,
    create_enemy,
    create_enemy_bullet,
    create_player,
    create_player_bullet,
    kill_score,
)
from galactic_strike.constants import ENEMY_SCALE


def test_bullet_speed_lookup_by_tag() -> None:
    assert bullet_speed(ActorTag.PLAYER_BULLET) == 750.0
    assert bullet_speed(ActorTag.ENEMY_BULLET_SLOW) == 350.0
    assert bullet_speed(ActorTag.ENEMY_BULLET_FAST) == 550.0
    with pytest.raises(ValueError):
        bullet_speed(ActorTag.SHIELD)


def test_kill_scores_include_reserved_enemy() -> None:
    assert kill_score(ActorTag.ENEMY_A) == 50
    assert kill_score(ActorTag.ENEMY_B) == 100
    assert kill_score(ActorTag.ENEMY_C) == 150
    assert kill_score(ActorTag.ENEMY_E) == 250
    assert kill_score(ActorTag.SHIELD) == 0


def test_bullet_directions() -> None:
    sizes = SpriteSizes()

    assert create_player_bullet(sizes, Vec2()).direction == Vec2(0.0, -1.0)
    assert create_enemy_bullet(sizes, Vec2(), fast=False).direction == Vec2(0.0, 1.0)
    assert create_enemy_bullet(sizes, Vec2(), fast=True).tag is ActorTag.ENEMY_BULLET_FAST


def test_enemy_hitbox_follows_scaled_sprite() -> None:
    sizes = SpriteSizes.from_mapping({INVADER3_IMAGE: Vec2(40.0, 30.0)})

    enemy = create_enemy(sizes, ActorTag.ENEMY_C, Vec2(), Vec2(1.0, 0.0))

    assert math.isclose(enemy.size.x, 40.0 * ENEMY_SCALE)
    assert math.isclose(enemy.size.y, 30.0 * ENEMY_SCALE)
    assert enemy.scale == Vec2(ENEMY_SCALE, ENEMY_SCALE)
    assert sizes.for_tag(ActorTag.PLAYER) == SpriteSizes().for_tag(ActorTag.PLAYER)


def test_create_enemy_rejects_non_enemy_tag() -> None:
    with pytest.raises(ValueError):
        create_enemy(SpriteSizes(), ActorTag.SHIELD, Vec2(), Vec2(1.0, 0.0))


def test_player_starts_with_three_lives() -> None:
    player = create_player(SpriteSizes(), Vec2(0.0, 262.5))

    assert player.hp == 3.0
    assert player.alive
    player.kill()
    assert player.hp == -1.0
    assert not player.alive


def test_bullet_hits_uses_edge_centers() -> None:
    bullet = create_player_bullet(SpriteSizes(), Vec2(0.0, 0.0))
    top, bottom = bullet.edge_points()

    assert top == Vec2(0.0, -9.0)
    assert bottom == Vec2(0.0, 9.0)
    # Overlaps the bullet's flank but neither edge center.
    assert not bullet_hits(bullet, Rect(x=1.0, y=-20.0, w=10.0, h=40.0))
    assert bullet_hits(bullet, Rect(x=-5.0, y=8.0, w=10.0, h=10.0))
    assert bullet_hits(bullet, Rect(x=-5.0, y=-19.0, w=10.0, h=10.0))


def test_sprite_sizes_to_dict_roundtrips_through_mapping() -> None:
    sizes = SpriteSizes.from_mapping({PLAYER_IMAGE: Vec2(60.0, 40.0)})

    raw = sizes.to_dict()

    assert raw[PLAYER_IMAGE] == [60.0, 40.0]
    rebuilt = SpriteSizes.from_mapping({name: Vec2(wh[0], wh[1]) for name, wh in raw.items()})
    assert rebuilt.for_tag(ActorTag.PLAYER) == Vec2(60.0, 40.0)
