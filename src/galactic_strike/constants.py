from __future__ import annotations

TICK_RATE = 60
DT_TICK = 1.0 / float(TICK_RATE)

# Timer comparisons absorb float drift from summing 1/60 steps.
TIMER_EPSILON = 1e-9

WINDOW_WIDTH = 650
WINDOW_HEIGHT = 700

PLAYER_LIFE = 3.0
PLAYER_SPEED = 100.0
PLAYER_SHOT_TIME = 0.5
PLAYER_BULLET_SPEED = 750.0
PLAYER_BULLET_SPAWN_OFFSET_Y = -10.0

BULLET_LIFE = 1.0
ENEMY_LIFE = 1.0

ENEMY_BULLET_SPEED_SLOW = 350.0
ENEMY_BULLET_SPEED_FAST = 550.0
ENEMY_BULLET_SPAWN_OFFSET_Y = 35.0

ENEMY_ROWS = 5
ENEMY_COLUMNS = 11
ENEMY_HORIZONTAL_SPACING = 20.0
ENEMY_VERTICAL_SPACING = 20.0
ENEMY_SCALE = 0.7
ENEMY_START_TICK = 2.0
ENEMY_START_SHOT_TIMER = 3.0
ENEMY_SHOT_INTERVAL_MIN = 0.5
ENEMY_SHOT_INTERVAL_MAX = 3.0
ENEMY_JUMP = 10.0
ENEMY_CASCADE_DIVISIONS = 5
ENEMY_KILL_SPEEDUP = 0.8

SHIELD_LIFE = 5.0
SHIELD_COUNT = 3

DEAD_HP = -1.0
