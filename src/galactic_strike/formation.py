from __future__ import annotations

"""Enemy formation scheduling.

The live enemies are kept as a flat row-major list next to a rows x columns
alive mask. Row slices of the flat list are derived by prefix-summing the mask,
so every removal from the list must be a stable partition.
"""

import random
from dataclasses import dataclass, field
from enum import Enum

from nova.geom import Bounds, Vec2

from .actors import ENEMY_TAG_BY_ROW, Actor, SpriteSizes, create_enemy
from .constants import (
    ENEMY_CASCADE_DIVISIONS,
    ENEMY_COLUMNS,
    ENEMY_HORIZONTAL_SPACING,
    ENEMY_JUMP,
    ENEMY_KILL_SPEEDUP,
    ENEMY_ROWS,
    ENEMY_SCALE,
    ENEMY_SHOT_INTERVAL_MAX,
    ENEMY_SHOT_INTERVAL_MIN,
    ENEMY_START_SHOT_TIMER,
    ENEMY_START_TICK,
    ENEMY_VERTICAL_SPACING,
)

MARCH_RIGHT = Vec2(1.0, 0.0)
MARCH_LEFT = Vec2(-1.0, 0.0)
MARCH_DOWN = Vec2(0.0, 1.0)

# A bounce pushes the formation back flush with the wall; float noise in that
# correction must not read as a second crossing.
WALL_EPSILON = 1e-6


class WallSide(Enum):
    NONE = "none"
    LEFT = "left"
    RIGHT = "right"


def spawn_formation(
    sizes: SpriteSizes,
    window: Vec2,
    *,
    rows: int = ENEMY_ROWS,
    columns: int = ENEMY_COLUMNS,
) -> list[Actor]:
    """Build the full grid in row-major order, top row first, marching right."""
    cell = sizes.enemy_cell(ENEMY_SCALE)
    pitch_x = cell.x + ENEMY_HORIZONTAL_SPACING
    pitch_y = cell.y + ENEMY_VERTICAL_SPACING
    top = -window.y / 2.0 + window.y / 5.0
    enemies: list[Actor] = []
    for row in range(rows):
        tag = ENEMY_TAG_BY_ROW[min(row, len(ENEMY_TAG_BY_ROW) - 1)]
        y = top + pitch_y * float(row)
        for col in range(columns):
            x = (float(col) - (columns - 1) / 2.0) * pitch_x
            enemies.append(create_enemy(sizes, tag, Vec2(x, y), MARCH_RIGHT))
    return enemies


def _full_mask(rows: int, columns: int) -> list[list[bool]]:
    return [[True] * columns for _ in range(rows)]


def _shot_interval(rng: random.Random) -> float:
    # Half-open [min, max).
    span = ENEMY_SHOT_INTERVAL_MAX - ENEMY_SHOT_INTERVAL_MIN
    return ENEMY_SHOT_INTERVAL_MIN + span * rng.random()


@dataclass(slots=True)
class FormationController:
    rng: random.Random = field(default_factory=random.Random)
    rows: int = ENEMY_ROWS
    columns: int = ENEMY_COLUMNS
    alive: list[list[bool]] = field(default_factory=list)
    tick_time: float = ENEMY_START_TICK
    outer_timer: float = 0.0
    inner_timer: float = 0.0
    shot_interval: float = ENEMY_START_SHOT_TIMER
    since_last_shot: float = 0.0
    last_collision: WallSide = WallSide.NONE
    cascading: bool = False
    row_cursor: int = ENEMY_ROWS
    bounds: Bounds | None = None
    bounds_dirty: bool = True

    def __post_init__(self) -> None:
        if int(self.rows) <= 0 or int(self.columns) <= 0:
            raise ValueError(f"formation must have rows and columns, got {self.rows}x{self.columns}")
        if not self.alive:
            self.alive = _full_mask(self.rows, self.columns)
        self.row_cursor = int(self.rows)

    def reset(self) -> None:
        self.alive = _full_mask(self.rows, self.columns)
        self.tick_time = ENEMY_START_TICK
        self.outer_timer = 0.0
        self.inner_timer = 0.0
        self.shot_interval = ENEMY_START_SHOT_TIMER
        self.since_last_shot = 0.0
        self.last_collision = WallSide.NONE
        self.cascading = False
        self.row_cursor = int(self.rows)
        self.bounds = None
        self.bounds_dirty = True

    def alive_count(self) -> int:
        return sum(1 for row in self.alive for cell in row if cell)

    def row_offsets(self) -> list[int]:
        """Cumulative enemy counts per mask row; an empty row is a zero-width slice.

        Row `r` of the flat list is `enemies[offsets[r] : offsets[r + 1]]`.
        """
        offsets = [0]
        for row in self.alive:
            offsets.append(offsets[-1] + sum(1 for cell in row if cell))
        return offsets

    def _populated_at_or_above(self, cursor: int) -> int:
        """Walk a 1-based row cursor upward past empty rows; 0 when none are left."""
        while cursor > 0 and not any(self.alive[cursor - 1]):
            cursor -= 1
        return cursor

    def enemy_cells(self) -> list[tuple[int, int]]:
        """`(row, col)` of every live enemy, in flat-list order."""
        return [
            (row_idx, col_idx)
            for row_idx, row in enumerate(self.alive)
            for col_idx, cell in enumerate(row)
            if cell
        ]

    def mark_dead(self, row: int, col: int) -> None:
        if not self.alive[row][col]:
            return
        self.alive[row][col] = False
        self.tick_time *= ENEMY_KILL_SPEEDUP
        self.bounds_dirty = True

    def recompute_bounds(self, enemies: list[Actor]) -> Bounds | None:
        self.bounds = Bounds.union(enemy.rect() for enemy in enemies if enemy.alive)
        self.bounds_dirty = False
        return self.bounds

    def update(self, enemies: list[Actor], dt: float) -> bool:
        """Advance the march timers by one tick.

        Returns True on the tick a cascade completes, when the formation has
        taken a full step and its bounds should be refreshed.
        """
        if not enemies or self.alive_count() == 0:
            return False

        if not self.cascading:
            self.outer_timer += dt
            if self.outer_timer > self.tick_time:
                self.cascading = True
                self.inner_timer = 0.0
                self.row_cursor = int(self.rows)
            return False

        self.inner_timer += dt
        if self.inner_timer <= self.tick_time / float(ENEMY_CASCADE_DIVISIONS):
            return False

        # The cursor names a mask row, so rows emptied mid-cascade are skipped
        # without shifting the rows that still have to move.
        cursor = self._populated_at_or_above(self.row_cursor)
        if cursor > 0:
            offsets = self.row_offsets()
            for enemy in enemies[offsets[cursor - 1] : offsets[cursor]]:
                enemy.move(enemy.direction * ENEMY_JUMP)
            cursor = self._populated_at_or_above(cursor - 1)
        self.inner_timer = 0.0
        self.row_cursor = cursor

        if self.row_cursor > 0:
            return False
        self.cascading = False
        self.outer_timer = 0.0
        self.inner_timer = 0.0
        self.row_cursor = int(self.rows)
        return True

    def apply_wall_collision(self, enemies: list[Actor], window: Vec2) -> WallSide:
        """Bounce off a side wall at the end of a cascade.

        Returns the wall that was hit this tick, or `WallSide.NONE`.
        """
        if not enemies or self.bounds is None:
            return WallSide.NONE
        if self.outer_timer != 0.0 or self.inner_timer != 0.0:
            return WallSide.NONE

        half_w = window.x / 2.0
        bounds = self.bounds
        if bounds.right - half_w > WALL_EPSILON:
            overshoot = bounds.right - half_w
            for enemy in enemies:
                enemy.direction = MARCH_LEFT
                enemy.move(MARCH_LEFT * overshoot)
                enemy.direction = MARCH_DOWN
            self.last_collision = WallSide.RIGHT
            self.bounds_dirty = True
            return WallSide.RIGHT
        if -half_w - bounds.left > WALL_EPSILON:
            overshoot = -half_w - bounds.left
            for enemy in enemies:
                enemy.direction = MARCH_RIGHT
                enemy.move(MARCH_RIGHT * overshoot)
                enemy.direction = MARCH_DOWN
            self.last_collision = WallSide.LEFT
            self.bounds_dirty = True
            return WallSide.LEFT
        if self.last_collision is WallSide.RIGHT:
            for enemy in enemies:
                enemy.direction = MARCH_LEFT
            self.last_collision = WallSide.NONE
        elif self.last_collision is WallSide.LEFT:
            for enemy in enemies:
                enemy.direction = MARCH_RIGHT
            self.last_collision = WallSide.NONE
        return WallSide.NONE

    def select_shooter(self) -> int:
        """Flat index of the bottom-most live enemy in a random live column."""
        bottom_by_column: dict[int, int] = {}
        flat = 0
        for row in self.alive:
            for col_idx, cell in enumerate(row):
                if cell:
                    bottom_by_column[col_idx] = flat
                    flat += 1
        if not bottom_by_column:
            raise ValueError("no live enemies to select a shooter from")
        columns = sorted(bottom_by_column)
        column = columns[self.rng.randrange(len(columns))]
        return bottom_by_column[column]

    def schedule_shot(self, enemies: list[Actor], dt: float) -> int | None:
        """Tick the shot timer; returns the shooter's flat index when a shot is due."""
        if not enemies or self.alive_count() == 0:
            return None
        self.since_last_shot += dt
        if self.cascading:
            return None
        if self.since_last_shot <= self.shot_interval:
            return None
        shooter = self.select_shooter()
        self.since_last_shot = 0.0
        self.shot_interval = _shot_interval(self.rng)
        return shooter
