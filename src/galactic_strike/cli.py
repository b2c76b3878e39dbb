from __future__ import annotations

import json
from enum import Enum
from pathlib import Path

import typer

from nova.assets import AssetLoadError
from nova.config import GALACTIC_CFG_STRUCT, config_summary, ensure_galactic_cfg

from .constants import TICK_RATE, WINDOW_HEIGHT, WINDOW_WIDTH
from .input_state import Key
from .paths import DEFAULT_ASSETS_DIR, default_runtime_dir

app = typer.Typer(add_completion=False)


class MoveChoice(str, Enum):
    NONE = "none"
    LEFT = "left"
    RIGHT = "right"


@app.command("run")
def cmd_run(
    width: int | None = typer.Option(None, help="window width (default: use galactic.cfg)"),
    height: int | None = typer.Option(None, help="window height (default: use galactic.cfg)"),
    fps: int | None = typer.Option(None, help="target fps (default: use galactic.cfg)"),
    seed: int | None = typer.Option(None, help="rng seed (default: galactic.cfg, 0 there means wall clock)"),
    base_dir: Path = typer.Option(default_runtime_dir(), "--base-dir", help="base path for runtime files"),
    assets_dir: Path = typer.Option(DEFAULT_ASSETS_DIR, "--assets-dir", help="directory holding the sprites and sounds"),
    record: Path | None = typer.Option(None, "--record", help="save a replay of the session on exit"),
    trace: bool = typer.Option(False, "--trace", help="write a gameplay event trace under base-dir/logs"),
) -> None:
    """Open the game window."""
    from .game import GameConfig, run_game

    config = GameConfig(
        base_dir=base_dir,
        assets_dir=assets_dir,
        width=width,
        height=height,
        fps=fps,
        seed=seed,
        record_path=record,
        trace=bool(trace),
    )
    try:
        run_game(config)
    except AssetLoadError as exc:
        typer.echo(f"asset load failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc


@app.command("simulate")
def cmd_simulate(
    seed: int = typer.Option(0, help="rng seed"),
    seconds: float = typer.Option(10.0, help="simulated time in seconds"),
    hold_fire: bool = typer.Option(False, "--hold-fire", help="keep the fire latch held"),
    move: MoveChoice = typer.Option(MoveChoice.NONE, "--move", help="keep a direction latch held"),
    width: int = typer.Option(WINDOW_WIDTH, help="playfield width"),
    height: int = typer.Option(WINDOW_HEIGHT, help="playfield height"),
    record: Path | None = typer.Option(None, "--record", help="save the run as a replay"),
    json_output: bool = typer.Option(False, "--json", help="print the summary as JSON"),
) -> None:
    """Run the simulation headlessly with held inputs and print the outcome."""
    from .replay import ReplayHeader, ReplayRecorder, save_replay_file
    from .sim.fingerprint import world_fingerprint
    from .sim.session import GameSession

    if seconds < 0.0:
        typer.echo(f"seconds must be non-negative, got {seconds}", err=True)
        raise typer.Exit(code=1)

    recorder = None
    if record is not None:
        recorder = ReplayRecorder(ReplayHeader(seed=int(seed), width=int(width), height=int(height)))
    session = GameSession.build(seed=int(seed), width=int(width), height=int(height), recorder=recorder)
    if hold_fire:
        session.inputs.key_down(Key.FIRE)
    if move is MoveChoice.LEFT:
        session.inputs.key_down(Key.LEFT)
    elif move is MoveChoice.RIGHT:
        session.inputs.key_down(Key.RIGHT)

    ticks = int(round(float(seconds) * TICK_RATE))
    for _ in range(ticks):
        session.step()

    world = session.world
    fingerprint = world_fingerprint(world)
    if recorder is not None and record is not None:
        save_replay_file(record, recorder.finish(final_fingerprint=fingerprint))

    summary = dict(world.summary())
    summary["fingerprint"] = fingerprint
    if json_output:
        typer.echo(json.dumps(summary, sort_keys=True))
        return
    typer.echo(f"ticks: {world.tick_index}")
    typer.echo(f"score: {world.score}")
    typer.echo(f"max score: {world.max_score}")
    typer.echo(f"kills: {world.kills_total}")
    typer.echo(f"player hp: {world.player.hp:g}")
    typer.echo(f"match resets: {world.match_resets}")
    typer.echo(f"fingerprint: {fingerprint}")
    if record is not None:
        typer.echo(f"replay: {record}")


@app.command("replay-play")
def cmd_replay_play(
    replay_file: Path = typer.Argument(..., help="replay file path (.replay.gz)"),
) -> None:
    """Re-run a replay headlessly and check its final fingerprint."""
    from .replay import ReplayCodecError, load_replay_file
    from .replay.runner import run_replay

    if not replay_file.is_file():
        typer.echo(f"replay file not found: {replay_file}", err=True)
        raise typer.Exit(code=1)
    try:
        replay = load_replay_file(replay_file)
    except ReplayCodecError as exc:
        typer.echo(f"invalid replay: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    result = run_replay(replay, warn_version=False)
    if result.version_note is not None:
        typer.echo(f"warning: {result.version_note}; playback may diverge", err=True)
    typer.echo(f"ticks: {result.ticks}")
    typer.echo(f"score: {result.score}")
    typer.echo(f"max score: {result.max_score}")
    typer.echo(f"kills: {result.kills}")
    typer.echo(f"fingerprint: {result.fingerprint}")
    if result.matches is None:
        typer.echo("fingerprint check: skipped (replay has none)")
        return
    if not result.matches:
        typer.echo(f"fingerprint mismatch: expected {result.expected_fingerprint}", err=True)
        raise typer.Exit(code=1)
    typer.echo("fingerprint check: ok")


@app.command("config")
def cmd_config(
    base_dir: Path = typer.Option(default_runtime_dir(), "--base-dir", help="base path for runtime files"),
    json_output: bool = typer.Option(False, "--json", help="print the typed values as JSON"),
) -> None:
    """Create galactic.cfg if needed and print its values."""
    try:
        config = ensure_galactic_cfg(base_dir)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    if json_output:
        typer.echo(json.dumps(config_summary(config), sort_keys=True))
        return
    typer.echo(f"path: {config.path}")
    typer.echo(f"screen: {config.screen_width}x{config.screen_height}")
    typer.echo("fields:")
    for sub in GALACTIC_CFG_STRUCT.subcons:
        name = sub.name
        if not name:
            continue
        typer.echo(f"{name}: {_format_cfg_value(config.data[name])}")


def _format_cfg_value(value: object) -> str:
    if isinstance(value, (bytes, bytearray)):
        return f"0x{bytes(value).hex()} (len={len(value)})"
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def main(argv: list[str] | None = None) -> None:
    app(prog_name="galactic-strike", args=argv)


if __name__ == "__main__":
    main()
