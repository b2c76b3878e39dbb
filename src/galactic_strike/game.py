from __future__ import annotations

import datetime as dt
import faulthandler
import time
import traceback
from dataclasses import dataclass, field
from pathlib import Path

from nova.app import run_view
from nova.assets import read_sprite_sizes
from nova.config import GalacticConfig, ensure_galactic_cfg
from nova.console import ConsoleLog

from . import __version__
from .actors import SpriteSizes
from .game_view import GameView
from .paths import DEFAULT_ASSETS_DIR, default_runtime_dir
from .replay import ReplayHeader, ReplayRecorder, save_replay_file
from .sim.fingerprint import world_fingerprint
from .sim.session import GameSession
from .trace_log import close_trace_log, init_trace_log, trace_requested

WINDOW_TITLE = "Galactic strike"


@dataclass(frozen=True, slots=True)
class GameConfig:
    base_dir: Path = field(default_factory=default_runtime_dir)
    assets_dir: Path = DEFAULT_ASSETS_DIR
    width: int | None = None
    height: int | None = None
    fps: int | None = None
    seed: int | None = None
    record_path: Path | None = None
    trace: bool = False


def resolve_seed(seed: int | None, cfg: GalacticConfig) -> int:
    """CLI seed wins, then the config seed; 0 means seed from the wall clock."""
    if seed is not None:
        return int(seed) & 0xFFFFFFFF
    if cfg.rng_seed != 0:
        return int(cfg.rng_seed)
    return time.time_ns() & 0xFFFFFFFF


def run_game(config: GameConfig) -> None:
    base_dir = config.base_dir
    base_dir.mkdir(parents=True, exist_ok=True)
    crash_path = base_dir / "crash.log"
    crash_file = crash_path.open("a", encoding="utf-8", buffering=1)
    faulthandler.enable(crash_file)
    crash_file.write(f"\n[{dt.datetime.now().isoformat()}] run_game start\n")
    tracing = trace_requested(config.trace)
    log = ConsoleLog(base_dir, echo=tracing)
    session: GameSession | None = None
    try:
        cfg = ensure_galactic_cfg(base_dir)
        width = cfg.screen_width if config.width is None else int(config.width)
        height = cfg.screen_height if config.height is None else int(config.height)
        fps = cfg.fps_limit if config.fps is None else int(config.fps)
        seed = resolve_seed(config.seed, cfg)

        # Hitboxes come from the real sprite sizes; a missing sprite is fatal here.
        sizes = SpriteSizes.from_mapping(read_sprite_sizes(config.assets_dir))
        log.log(f"galactic: boot {__version__} {width}x{height} fps={fps} seed={seed}")
        log.log(f"assets: {config.assets_dir}")

        recorder = None
        if config.record_path is not None:
            header = ReplayHeader(seed=seed, width=width, height=height, sprite_sizes=sizes.to_dict())
            recorder = ReplayRecorder(header)
        if tracing:
            trace_path = init_trace_log(base_dir=base_dir, seed=seed, width=width, height=height, build_id=__version__)
            log.log(f"trace: {trace_path}")
        log.flush()

        session = GameSession.build(seed=seed, width=width, height=height, sizes=sizes, recorder=recorder)
        view = GameView(session=session, config=cfg, assets_dir=config.assets_dir, log=log)
        run_view(view, width=width, height=height, title=WINDOW_TITLE, fps=fps)

        if recorder is not None and config.record_path is not None:
            replay = recorder.finish(final_fingerprint=world_fingerprint(session.world))
            save_replay_file(config.record_path, replay)
            log.log(f"replay: saved {replay.tick_count} ticks to {config.record_path}")
        log.log(f"galactic: exit score={session.world.score} max_score={session.world.max_score}")
    except Exception:
        crash_file.write("python exception:\n")
        crash_file.write(traceback.format_exc())
        crash_file.write("\n")
        crash_file.flush()
        raise
    finally:
        log.flush()
        close_trace_log(summary=None if session is None else session.world.summary())
        faulthandler.disable()
        crash_file.close()
