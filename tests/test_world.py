from __future__ import annotations

import math

import pytest

from nova.assets import HIT_SOUND, PLAYER_SHOOT_SOUND
from nova.geom import Vec2

from galactic_strike.actors import ActorTag, create_enemy_bullet, create_player_bullet
from galactic_strike.hud import HudTag
from galactic_strike.input_state import InputState
from galactic_strike.sim.fingerprint import world_fingerprint
from galactic_strike.world import World, is_off_screen, mark_off_screen, player_spawn_position, shield_positions

IDLE = InputState()
FIRE = InputState(fire=True)


def test_build_places_everyone() -> None:
    world = World.build(seed=1)

    assert world.player.position == Vec2(0.0, 262.5)
    assert world.player.hp == 3.0
    assert len(world.enemies) == 55
    assert [round(shield.position.x, 2) for shield in world.shields] == [-185.71, 0.0, 185.71]
    assert all(shield.position.y == 200.0 for shield in world.shields)
    assert world.shield_slots == [0, 1, 2]
    assert world.hud.text(HudTag.SCORE) == "Score: 0"
    assert world.hud.text(HudTag.MAX_SCORE) == "Max score: 0"
    assert world.hud.text(HudTag.PLAYER_LIFE) == "Life: 3"
    assert world.hud.text(HudTag.SHIELD_HP_2) == "5"


def test_build_rejects_empty_window() -> None:
    with pytest.raises(ValueError):
        World.build(width=0, height=700, seed=1)


def test_spawn_helpers_scale_with_window() -> None:
    window = Vec2(800.0, 800.0)

    assert player_spawn_position(window) == Vec2(0.0, 300.0)
    assert [pos.y for pos in shield_positions(window)] == [800.0 / 3.5] * 3


def test_held_fire_respects_cooldown() -> None:
    world = World.build(seed=1)

    shots = [world.step(FIRE).player_shots for _ in range(180)]

    assert sum(shots) == 6
    assert [idx for idx, fired in enumerate(shots) if fired] == [0, 30, 60, 90, 120, 150]


def test_shot_plays_sound() -> None:
    world = World.build(seed=1)

    events = world.step(FIRE)

    assert events.sfx == [PLAYER_SHOOT_SOUND]


def test_player_bullet_flies_straight_up() -> None:
    world = World.build(seed=1)
    world.player.position = Vec2(290.0, 262.5)

    world.step(FIRE)
    for _ in range(39):
        world.step(IDLE)

    assert len(world.player_bullets) == 1
    bullet = world.player_bullets[0]
    assert bullet.position.x == 290.0
    assert math.isclose(bullet.position.y, -247.5, abs_tol=1e-6)


def test_player_bullet_is_reaped_off_screen() -> None:
    world = World.build(seed=1)
    world.player.position = Vec2(300.0, 262.5)
    world.step(FIRE)

    for _ in range(60):
        world.step(IDLE)

    assert world.player_bullets == []


def test_kill_scores_and_speeds_up_formation() -> None:
    world = World.build(seed=1)
    world.player_bullets.append(create_player_bullet(world.sizes, Vec2(0.0, -205.0)))

    events = world.step(IDLE)

    assert world.score == 150
    assert world.max_score == 0
    assert world.kills_total == 1
    assert len(world.enemies) == 54
    assert world.formation.alive[0][5] is False
    assert math.isclose(world.formation.tick_time, 1.6)
    assert world.hud.text(HudTag.SCORE) == "Score: 150"
    assert HIT_SOUND in events.sfx
    assert [kill.tag for kill in events.kills] == [ActorTag.ENEMY_C]


def test_enemy_bullet_costs_a_life() -> None:
    world = World.build(seed=1)
    world.enemy_bullets.append(create_enemy_bullet(world.sizes, world.player.position, fast=False))

    events = world.step(IDLE)

    assert events.player_hits == 1
    assert world.player.hp == 2.0
    assert world.hud.text(HudTag.PLAYER_LIFE) == "Life: 2"
    assert events.match_reset is False


def test_losing_last_life_resets_the_match() -> None:
    world = World.build(seed=1)
    world.score = 400
    world.max_score = 100
    for _ in range(3):
        world.enemy_bullets.append(create_enemy_bullet(world.sizes, world.player.position, fast=False))

    events = world.step(IDLE)

    assert events.match_reset is True
    assert world.match_resets == 1
    assert world.max_score == 400
    assert world.score == 0
    assert world.player.hp == 3.0
    assert len(world.enemies) == 55
    assert world.formation.alive_count() == 55
    assert world.enemy_bullets == []
    assert world.hud.text(HudTag.MAX_SCORE) == "Max score: 400"
    assert world.hud.text(HudTag.SCORE) == "Score: 0"


def test_reset_is_idempotent() -> None:
    once = World.build(seed=5)
    twice = World.build(seed=5)

    once.reset_match()
    twice.reset_match()
    twice.reset_match()

    assert world_fingerprint(once) == world_fingerprint(twice)


def test_shields_are_not_rebuilt_on_reset() -> None:
    world = World.build(seed=1)
    world.shields[1].hp = 2.0

    world.reset_match()

    assert world.shields[1].hp == 2.0
    assert world.hud.text(HudTag.SHIELD_HP_2) == "2"


def test_shield_absorbs_hits_then_disappears() -> None:
    world = World.build(seed=1)
    target = world.shields[0].position

    world.enemy_bullets.append(create_enemy_bullet(world.sizes, target, fast=False))
    world.step(IDLE)
    assert world.shields[0].hp == 4.0
    assert world.hud.text(HudTag.SHIELD_HP_1) == "4"

    for _ in range(4):
        world.enemy_bullets.append(create_enemy_bullet(world.sizes, target, fast=False))
    events = world.step(IDLE)

    assert events.shield_hits == 4
    assert world.shield_slots == [1, 2]
    assert len(world.shields) == 2
    assert world.hud.get(HudTag.SHIELD_HP_1) is None
    assert world.hud.text(HudTag.SHIELD_HP_2) == "5"

    world.enemy_bullets.append(create_enemy_bullet(world.sizes, target, fast=False))
    world.step(IDLE)
    assert len(world.enemy_bullets) == 1


def test_bullets_cancel_mid_air() -> None:
    world = World.build(seed=1)
    world.player_bullets.append(create_player_bullet(world.sizes, Vec2(300.0, 0.0)))
    world.enemy_bullets.append(create_enemy_bullet(world.sizes, Vec2(300.0, 0.0), fast=True))

    world.step(IDLE)

    assert world.player_bullets == []
    assert world.enemy_bullets == []


def test_formation_reaching_player_line_resets_the_match() -> None:
    world = World.build(seed=1)
    for enemy in world.enemies:
        enemy.move(Vec2(0.0, 290.0))
    world.formation.bounds_dirty = True

    events = world.step(IDLE)

    assert events.invaded is True
    assert events.match_reset is True
    assert math.isclose(world.enemies[0].position.y, -210.0)


def test_both_directions_held_keep_player_still() -> None:
    world = World.build(seed=1)

    for _ in range(30):
        world.step(InputState(left=True, right=True))

    assert world.player.position.x == 0.0


def test_player_is_clamped_to_the_window() -> None:
    world = World.build(seed=1)

    for _ in range(240):
        world.step(InputState(right=True))

    assert math.isclose(world.player.position.x, 325.0 - 26.0)


def test_off_screen_marking_is_idempotent() -> None:
    world = World.build(seed=1)
    bullet = create_player_bullet(world.sizes, Vec2(0.0, -400.0))

    assert is_off_screen(bullet, world.window)
    mark_off_screen(bullet, world.window)
    mark_off_screen(bullet, world.window)

    assert bullet.hp == -1.0


def test_long_run_keeps_world_consistent() -> None:
    world = World.build(seed=11)
    tick_time = world.formation.tick_time

    for tick in range(3000):
        phase = (tick // 240) % 3
        inputs = InputState(left=phase == 0, right=phase == 2, fire=True)
        events = world.step(inputs)

        assert all(actor.alive for actor in world.actors())
        assert world.formation.alive_count() == len(world.enemies)
        directions = {enemy.direction for enemy in world.enemies}
        assert len(directions) <= 1
        half_w = world.player.size.x / 2.0
        assert -325.0 + half_w <= world.player.position.x <= 325.0 - half_w
        if events.match_reset:
            tick_time = world.formation.tick_time
        assert world.formation.tick_time <= tick_time
        tick_time = world.formation.tick_time
        for slot, hp in enumerate(world.shield_hps()):
            tag = (HudTag.SHIELD_HP_1, HudTag.SHIELD_HP_2, HudTag.SHIELD_HP_3)[slot]
            assert (world.hud.get(tag) is not None) == (hp > 0.0)

    assert world.tick_index == 3000


def test_same_seed_same_run() -> None:
    a = World.build(seed=42)
    b = World.build(seed=42)

    for tick in range(900):
        inputs = InputState(left=tick % 200 < 100, fire=True)
        a.step(inputs)
        b.step(inputs)

    assert world_fingerprint(a) == world_fingerprint(b)
    assert a.summary() == b.summary()
