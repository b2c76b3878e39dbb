from __future__ import annotations

"""Bullet collision resolution.

Each pass only reads actor state while testing and records what it found in a
buffer; the buffer is applied once the pass is over. Player bullets resolve
first, so a player bullet spent on an enemy cannot also cancel an enemy bullet
in the same tick.
"""

from dataclasses import dataclass, field

from .actors import Actor, ActorTag, bullet_hits, kill_score
from .formation import FormationController


@dataclass(frozen=True, slots=True)
class EnemyKill:
    bullet_index: int
    enemy_index: int
    row: int
    col: int
    tag: ActorTag
    score: int


@dataclass(frozen=True, slots=True)
class PlayerHit:
    bullet_index: int


@dataclass(frozen=True, slots=True)
class BulletClash:
    enemy_bullet_index: int
    player_bullet_index: int


@dataclass(frozen=True, slots=True)
class ShieldHit:
    bullet_index: int
    shield_index: int
    from_player: bool


@dataclass(slots=True)
class CollisionReport:
    kills: list[EnemyKill] = field(default_factory=list)
    player_hits: list[PlayerHit] = field(default_factory=list)
    clashes: list[BulletClash] = field(default_factory=list)
    shield_hits: list[ShieldHit] = field(default_factory=list)

    @property
    def score_delta(self) -> int:
        return sum(kill.score for kill in self.kills)

    def shields_touched(self) -> list[int]:
        return sorted({hit.shield_index for hit in self.shield_hits})


def _first_shield_hit(bullet: Actor, shields: list[Actor], pending: dict[int, int]) -> int | None:
    for shield_idx, shield in enumerate(shields):
        # Shields already emptied by earlier hits in this pass stop blocking.
        if shield.hp - float(pending.get(shield_idx, 0)) <= 0.0:
            continue
        if bullet_hits(bullet, shield.rect()):
            return shield_idx
    return None


def _player_bullet_pass(
    player_bullets: list[Actor],
    enemies: list[Actor],
    shields: list[Actor],
    cells: list[tuple[int, int]],
) -> tuple[list[EnemyKill], list[ShieldHit]]:
    kills: list[EnemyKill] = []
    shield_hits: list[ShieldHit] = []
    claimed_enemies: set[int] = set()
    pending_shield: dict[int, int] = {}

    for bullet_idx, bullet in enumerate(player_bullets):
        if not bullet.alive:
            continue
        hit_enemy = None
        for enemy_idx, enemy in enumerate(enemies):
            if enemy_idx in claimed_enemies or not enemy.alive:
                continue
            if bullet_hits(bullet, enemy.rect()):
                hit_enemy = enemy_idx
                break
        if hit_enemy is not None:
            claimed_enemies.add(hit_enemy)
            enemy = enemies[hit_enemy]
            row, col = cells[hit_enemy]
            kills.append(
                EnemyKill(
                    bullet_index=bullet_idx,
                    enemy_index=hit_enemy,
                    row=row,
                    col=col,
                    tag=enemy.tag,
                    score=kill_score(enemy.tag),
                )
            )
            continue

        shield_idx = _first_shield_hit(bullet, shields, pending_shield)
        if shield_idx is not None:
            pending_shield[shield_idx] = pending_shield.get(shield_idx, 0) + 1
            shield_hits.append(ShieldHit(bullet_index=bullet_idx, shield_index=shield_idx, from_player=True))
    return kills, shield_hits


def _enemy_bullet_pass(
    enemy_bullets: list[Actor],
    player: Actor,
    player_bullets: list[Actor],
    shields: list[Actor],
) -> tuple[list[PlayerHit], list[BulletClash], list[ShieldHit]]:
    player_hits: list[PlayerHit] = []
    clashes: list[BulletClash] = []
    shield_hits: list[ShieldHit] = []
    claimed_player_bullets: set[int] = set()
    pending_shield: dict[int, int] = {}
    player_rect = player.rect()

    for bullet_idx, bullet in enumerate(enemy_bullets):
        if not bullet.alive:
            continue
        if player.alive and bullet_hits(bullet, player_rect):
            player_hits.append(PlayerHit(bullet_index=bullet_idx))
            continue

        clash = None
        for pb_idx, player_bullet in enumerate(player_bullets):
            if pb_idx in claimed_player_bullets or not player_bullet.alive:
                continue
            if bullet_hits(bullet, player_bullet.rect()):
                clash = pb_idx
                break
        if clash is not None:
            claimed_player_bullets.add(clash)
            clashes.append(BulletClash(enemy_bullet_index=bullet_idx, player_bullet_index=clash))
            continue

        shield_idx = _first_shield_hit(bullet, shields, pending_shield)
        if shield_idx is not None:
            pending_shield[shield_idx] = pending_shield.get(shield_idx, 0) + 1
            shield_hits.append(ShieldHit(bullet_index=bullet_idx, shield_index=shield_idx, from_player=False))
    return player_hits, clashes, shield_hits


def _apply_shield_hits(hits: list[ShieldHit], bullets: list[Actor], shields: list[Actor]) -> None:
    for hit in hits:
        bullets[hit.bullet_index].kill()
        shield = shields[hit.shield_index]
        shield.hp -= 1.0


def resolve_collisions(
    *,
    player: Actor,
    player_bullets: list[Actor],
    enemy_bullets: list[Actor],
    enemies: list[Actor],
    shields: list[Actor],
    formation: FormationController,
) -> CollisionReport:
    """Run both bullet passes and apply their damage.

    Score, HUD text and sounds are left to the caller, driven by the report.
    """
    report = CollisionReport()
    cells = formation.enemy_cells()
    if len(cells) != len(enemies):
        raise ValueError(f"alive mask tracks {len(cells)} enemies but {len(enemies)} are listed")

    kills, player_shield_hits = _player_bullet_pass(player_bullets, enemies, shields, cells)
    for kill in kills:
        player_bullets[kill.bullet_index].kill()
        enemies[kill.enemy_index].kill()
        formation.mark_dead(kill.row, kill.col)
    _apply_shield_hits(player_shield_hits, player_bullets, shields)
    report.kills.extend(kills)
    report.shield_hits.extend(player_shield_hits)

    player_hits, clashes, enemy_shield_hits = _enemy_bullet_pass(enemy_bullets, player, player_bullets, shields)
    for hit in player_hits:
        enemy_bullets[hit.bullet_index].kill()
        player.hp -= 1.0
    for clash in clashes:
        enemy_bullets[clash.enemy_bullet_index].kill()
        player_bullets[clash.player_bullet_index].kill()
    _apply_shield_hits(enemy_shield_hits, enemy_bullets, shields)
    report.player_hits.extend(player_hits)
    report.clashes.extend(clashes)
    report.shield_hits.extend(enemy_shield_hits)
    return report
