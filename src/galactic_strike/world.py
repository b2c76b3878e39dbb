from __future__ import annotations

import random
from dataclasses import dataclass, field

from nova.assets import HIT_SOUND, PLAYER_SHOOT_SOUND
from nova.geom import Vec2
from nova.math import clamp

from .actors import (
    Actor,
    ActorTag,
    SpriteSizes,
    bullet_speed,
    create_enemy_bullet,
    create_player,
    create_player_bullet,
    create_shield,
)
from .collisions import CollisionReport, EnemyKill, resolve_collisions
from .constants import (
    DT_TICK,
    ENEMY_BULLET_SPAWN_OFFSET_Y,
    PLAYER_BULLET_SPAWN_OFFSET_Y,
    PLAYER_SHOT_TIME,
    PLAYER_SPEED,
    SHIELD_COUNT,
    TIMER_EPSILON,
    WINDOW_HEIGHT,
    WINDOW_WIDTH,
)
from .formation import FormationController, WallSide, spawn_formation
from .hud import Hud, shield_x_offsets
from .input_state import InputState
from .trace_log import trace_event


@dataclass(slots=True)
class TickEvents:
    sfx: list[str] = field(default_factory=list)
    player_shots: int = 0
    enemy_shots: int = 0
    kills: list[EnemyKill] = field(default_factory=list)
    player_hits: int = 0
    shield_hits: int = 0
    wall_bounce: WallSide = WallSide.NONE
    invaded: bool = False
    match_reset: bool = False


def player_spawn_position(window: Vec2) -> Vec2:
    return Vec2(0.0, window.y / 2.0 - window.y / 8.0)


def shield_positions(window: Vec2) -> list[Vec2]:
    y = window.y / 3.5
    return [Vec2(x, y) for x in shield_x_offsets(window)[:SHIELD_COUNT]]


def is_off_screen(actor: Actor, window: Vec2) -> bool:
    half_w = window.x / 2.0
    half_h = window.y / 2.0
    pos = actor.position
    return pos.x < -half_w or pos.x > half_w or pos.y < -half_h or pos.y > half_h


def mark_off_screen(actor: Actor, window: Vec2) -> None:
    if is_off_screen(actor, window):
        actor.kill()


def _reap(actors: list[Actor]) -> list[Actor]:
    # Stable: enemies must keep row-major order.
    return [actor for actor in actors if actor.alive]


@dataclass(slots=True)
class World:
    window: Vec2
    sizes: SpriteSizes
    rng: random.Random
    player: Actor
    formation: FormationController
    hud: Hud
    enemies: list[Actor] = field(default_factory=list)
    player_bullets: list[Actor] = field(default_factory=list)
    enemy_bullets: list[Actor] = field(default_factory=list)
    shields: list[Actor] = field(default_factory=list)
    # HUD slot (0..2) of each surviving shield, parallel to `shields`.
    shield_slots: list[int] = field(default_factory=list)
    score: int = 0
    max_score: int = 0
    shot_cooldown: float = 0.0
    tick_index: int = 0
    kills_total: int = 0
    match_resets: int = 0

    @classmethod
    def build(
        cls,
        *,
        width: int = WINDOW_WIDTH,
        height: int = WINDOW_HEIGHT,
        sizes: SpriteSizes | None = None,
        seed: int | None = None,
        rng: random.Random | None = None,
    ) -> World:
        if int(width) <= 0 or int(height) <= 0:
            raise ValueError(f"window must have a positive size, got {width}x{height}")
        window = Vec2(float(width), float(height))
        if sizes is None:
            sizes = SpriteSizes()
        if rng is None:
            rng = random.Random(seed)
        shields = [create_shield(sizes, pos) for pos in shield_positions(window)]
        world = cls(
            window=window,
            sizes=sizes,
            rng=rng,
            player=create_player(sizes, player_spawn_position(window)),
            formation=FormationController(rng=rng),
            hud=Hud(window=window),
            enemies=spawn_formation(sizes, window),
            shields=shields,
            shield_slots=list(range(len(shields))),
        )
        world.refresh_hud()
        return world

    def shield_hps(self) -> list[float]:
        hps = [0.0] * SHIELD_COUNT
        for slot, shield in zip(self.shield_slots, self.shields):
            hps[slot] = shield.hp
        return hps

    def refresh_hud(self) -> None:
        self.hud.refresh(
            score=self.score,
            max_score=self.max_score,
            player_hp=self.player.hp,
            shield_hps=self.shield_hps(),
        )

    def actors(self) -> list[Actor]:
        return [self.player, *self.shields, *self.enemies, *self.player_bullets, *self.enemy_bullets]

    def reset_match(self) -> None:
        """Start a new match; the best score and the shields carry over."""
        self.player_bullets.clear()
        self.enemy_bullets.clear()
        self.player = create_player(self.sizes, player_spawn_position(self.window))
        self.enemies = spawn_formation(self.sizes, self.window)
        self.formation.reset()
        self.max_score = max(self.max_score, self.score)
        self.score = 0
        self.shot_cooldown = 0.0
        self.refresh_hud()

    def _move_player(self, inputs: InputState, dt: float) -> None:
        player = self.player
        player.direction = Vec2(inputs.move_axis(), 0.0)
        x = player.position.x + player.direction.x * PLAYER_SPEED * dt
        half_w = player.size.x / 2.0
        x = clamp(x, -self.window.x / 2.0 + half_w, self.window.x / 2.0 - half_w)
        player.position = player.position.with_x(x)

    def _player_shoot(self, inputs: InputState, dt: float, events: TickEvents) -> None:
        self.shot_cooldown -= dt
        if inputs.fire and self.shot_cooldown <= TIMER_EPSILON:
            spawn = self.player.position.offset(dy=PLAYER_BULLET_SPAWN_OFFSET_Y)
            self.player_bullets.append(create_player_bullet(self.sizes, spawn))
            self.shot_cooldown = PLAYER_SHOT_TIME
            events.player_shots += 1
            events.sfx.append(PLAYER_SHOOT_SOUND)
        elif self.shot_cooldown < 0.0:
            self.shot_cooldown = 0.0

    def _advance_bullets(self, dt: float) -> None:
        for bullets in (self.player_bullets, self.enemy_bullets):
            for bullet in bullets:
                if not bullet.alive:
                    continue
                bullet.move(bullet.direction * (bullet_speed(bullet.tag) * dt))
                mark_off_screen(bullet, self.window)

    def _enemy_shoot(self, dt: float, events: TickEvents) -> None:
        shooter_index = self.formation.schedule_shot(self.enemies, dt)
        if shooter_index is None:
            return
        shooter = self.enemies[shooter_index]
        spawn = shooter.position.offset(dy=ENEMY_BULLET_SPAWN_OFFSET_Y)
        fast = shooter.tag is ActorTag.ENEMY_C
        self.enemy_bullets.append(create_enemy_bullet(self.sizes, spawn, fast=fast))
        events.enemy_shots += 1
        trace_event(self.tick_index, "enemy_shot", shooter=shooter_index, fast=fast)

    def _apply_report(self, report: CollisionReport, events: TickEvents) -> None:
        for kill in report.kills:
            events.sfx.append(HIT_SOUND)
            trace_event(self.tick_index, "kill", row=kill.row, col=kill.col, tag=kill.tag.name, score=kill.score)
        if report.kills:
            self.score += report.score_delta
            self.kills_total += len(report.kills)
            self.hud.set_score(self.score)
            events.kills.extend(report.kills)

        if report.player_hits:
            self.hud.set_player_life(self.player.hp)
            events.player_hits += len(report.player_hits)
            trace_event(self.tick_index, "player_hit", hits=len(report.player_hits), hp=self.player.hp)

        for shield_idx in report.shields_touched():
            shield = self.shields[shield_idx]
            slot = self.shield_slots[shield_idx]
            self.hud.set_shield_hp(slot, shield.hp)
            trace_event(self.tick_index, "shield_hit", shield=slot, hp=shield.hp)
        events.shield_hits += len(report.shield_hits)

    def _reap_dead(self) -> None:
        self.player_bullets = _reap(self.player_bullets)
        self.enemy_bullets = _reap(self.enemy_bullets)
        self.enemies = _reap(self.enemies)
        kept = [(slot, shield) for slot, shield in zip(self.shield_slots, self.shields) if shield.alive]
        self.shield_slots = [slot for slot, _ in kept]
        self.shields = [shield for _, shield in kept]

    def _invaded(self) -> bool:
        """True once the formation's lowest row reaches the player's line.

        The arcade rules this game follows never end a match this way; the
        invaded reset is an addition so a formation that marches off the bottom
        of the playfield does not leave the match running forever.
        """
        if not self.enemies:
            return False
        if self.formation.bounds_dirty or self.formation.bounds is None:
            self.formation.recompute_bounds(self.enemies)
        bounds = self.formation.bounds
        return bounds is not None and bounds.bottom >= self.player.rect().top

    def step(self, inputs: InputState, dt: float = DT_TICK) -> TickEvents:
        """Advance the world by one fixed tick."""
        events = TickEvents()

        self._move_player(inputs, dt)
        self._player_shoot(inputs, dt, events)
        self._advance_bullets(dt)

        cascade_done = self.formation.update(self.enemies, dt)
        if cascade_done or self.formation.bounds_dirty:
            self.formation.recompute_bounds(self.enemies)
        events.wall_bounce = self.formation.apply_wall_collision(self.enemies, self.window)
        if events.wall_bounce is not WallSide.NONE:
            trace_event(self.tick_index, "wall_bounce", side=events.wall_bounce.value)

        self._enemy_shoot(dt, events)

        report = resolve_collisions(
            player=self.player,
            player_bullets=self.player_bullets,
            enemy_bullets=self.enemy_bullets,
            enemies=self.enemies,
            shields=self.shields,
            formation=self.formation,
        )
        self._apply_report(report, events)
        self._reap_dead()

        if self._invaded():
            events.invaded = True
            self.player.hp = 0.0
        if self.player.hp <= 0.0:
            trace_event(
                self.tick_index,
                "match_reset",
                score=self.score,
                max_score=max(self.max_score, self.score),
                invaded=events.invaded,
            )
            self.reset_match()
            self.match_resets += 1
            events.match_reset = True

        self.tick_index += 1
        return events

    def summary(self) -> dict[str, object]:
        return {
            "tick": int(self.tick_index),
            "score": int(self.score),
            "max_score": int(self.max_score),
            "kills": int(self.kills_total),
            "player_hp": float(self.player.hp),
            "enemies": len(self.enemies),
            "shields": {int(slot): float(shield.hp) for slot, shield in zip(self.shield_slots, self.shields)},
            "match_resets": int(self.match_resets),
        }
