from __future__ import annotations

import random

import pytest

from nova.geom import Vec2

from galactic_strike.actors import (
    ActorTag,
    SpriteSizes,
    create_enemy_bullet,
    create_player,
    create_player_bullet,
    create_shield,
)
from galactic_strike.collisions import resolve_collisions
from galactic_strike.formation import FormationController, spawn_formation

WINDOW = Vec2(650.0, 700.0)
SIZES = SpriteSizes()
PLAYER_POS = Vec2(0.0, 262.5)
TOP_MIDDLE_ENEMY = Vec2(0.0, -210.0)


def _scene(*, shield_hp: float | None = None):
    enemies = spawn_formation(SIZES, WINDOW)
    formation = FormationController(rng=random.Random(0))
    shield = create_shield(SIZES, Vec2(0.0, 200.0))
    if shield_hp is not None:
        shield.hp = shield_hp
    return {
        "player": create_player(SIZES, PLAYER_POS),
        "player_bullets": [],
        "enemy_bullets": [],
        "enemies": enemies,
        "shields": [shield],
        "formation": formation,
    }


def test_player_bullet_kills_enemy_and_marks_cell() -> None:
    scene = _scene()
    scene["player_bullets"].append(create_player_bullet(SIZES, TOP_MIDDLE_ENEMY.offset(dy=5.0)))

    report = resolve_collisions(**scene)

    assert len(report.kills) == 1
    kill = report.kills[0]
    assert (kill.row, kill.col, kill.enemy_index) == (0, 5, 5)
    assert kill.tag is ActorTag.ENEMY_C
    assert report.score_delta == 150
    assert not scene["enemies"][5].alive
    assert not scene["player_bullets"][0].alive
    assert scene["formation"].alive[0][5] is False


def test_two_bullets_on_one_enemy_kill_it_once() -> None:
    scene = _scene()
    scene["player_bullets"].append(create_player_bullet(SIZES, TOP_MIDDLE_ENEMY))
    scene["player_bullets"].append(create_player_bullet(SIZES, TOP_MIDDLE_ENEMY))

    report = resolve_collisions(**scene)

    assert len(report.kills) == 1
    assert scene["player_bullets"][0].alive is False
    assert scene["player_bullets"][1].alive is True
    assert scene["formation"].alive_count() == 54


def test_bullet_spent_on_enemy_cannot_cancel_enemy_bullet() -> None:
    scene = _scene()
    scene["player_bullets"].append(create_player_bullet(SIZES, TOP_MIDDLE_ENEMY))
    scene["enemy_bullets"].append(create_enemy_bullet(SIZES, TOP_MIDDLE_ENEMY, fast=False))

    report = resolve_collisions(**scene)

    assert len(report.kills) == 1
    assert report.clashes == []
    assert scene["enemy_bullets"][0].alive


def test_opposing_bullets_cancel_each_other() -> None:
    scene = _scene()
    scene["player_bullets"].append(create_player_bullet(SIZES, Vec2(300.0, 0.0)))
    scene["enemy_bullets"].append(create_enemy_bullet(SIZES, Vec2(300.0, 0.0), fast=True))

    report = resolve_collisions(**scene)

    assert len(report.clashes) == 1
    assert not scene["player_bullets"][0].alive
    assert not scene["enemy_bullets"][0].alive


def test_enemy_bullet_damages_player() -> None:
    scene = _scene()
    scene["enemy_bullets"].append(create_enemy_bullet(SIZES, PLAYER_POS, fast=False))

    report = resolve_collisions(**scene)

    assert len(report.player_hits) == 1
    assert scene["player"].hp == 2.0
    assert not scene["enemy_bullets"][0].alive


def test_player_bullet_chips_shield() -> None:
    scene = _scene()
    scene["player_bullets"].append(create_player_bullet(SIZES, Vec2(0.0, 200.0)))

    report = resolve_collisions(**scene)

    assert [hit.from_player for hit in report.shield_hits] == [True]
    assert report.shields_touched() == [0]
    assert scene["shields"][0].hp == 4.0
    assert not scene["player_bullets"][0].alive


def test_emptied_shield_stops_blocking_within_the_pass() -> None:
    scene = _scene(shield_hp=1.0)
    for _ in range(3):
        scene["enemy_bullets"].append(create_enemy_bullet(SIZES, Vec2(0.0, 200.0), fast=False))

    report = resolve_collisions(**scene)

    assert len(report.shield_hits) == 1
    assert scene["shields"][0].hp == 0.0
    assert [bullet.alive for bullet in scene["enemy_bullets"]] == [False, True, True]


def test_dead_bullets_are_ignored() -> None:
    scene = _scene()
    bullet = create_player_bullet(SIZES, TOP_MIDDLE_ENEMY)
    bullet.kill()
    scene["player_bullets"].append(bullet)

    report = resolve_collisions(**scene)

    assert report.kills == []
    assert scene["enemies"][5].alive


def test_mask_and_enemy_list_must_agree() -> None:
    scene = _scene()
    scene["enemies"] = scene["enemies"][:-1]

    with pytest.raises(ValueError):
        resolve_collisions(**scene)
