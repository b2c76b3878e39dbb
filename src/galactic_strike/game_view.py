from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pyray as rl

from nova.audio import AudioState, init_audio_state, shutdown_audio
from nova.config import GalacticConfig
from nova.console import ConsoleLog
from nova.textures import TextureCache

from .audio_router import AudioRouter
from .input_state import Key
from .render.raylib_renderer import RaylibRenderer
from .render.view import build_draw_list
from .sim.session import GameSession

PAUSE_KEY = int(rl.KeyboardKey.KEY_P)
PAUSED_TEXT = "Paused"
PAUSED_TEXT_SIZE = 32


@dataclass(slots=True)
class GameView:
    session: GameSession
    config: GalacticConfig
    assets_dir: Path
    log: ConsoleLog
    router: AudioRouter = field(default_factory=AudioRouter)
    textures: TextureCache | None = None
    renderer: RaylibRenderer | None = None
    audio: AudioState | None = None
    paused: bool = False
    close_requested: bool = False

    def open(self) -> None:
        # Textures need the GL context `run_view` has just created.
        self.textures = TextureCache(self.assets_dir)
        self.textures.load_all(log=self.log)
        self.renderer = RaylibRenderer(self.textures)
        self.audio = init_audio_state(self.config, self.assets_dir, self.log)
        self.router.audio = self.audio
        window = self.session.world.window
        self.log.log(f"game: session open {int(window.x)}x{int(window.y)}")
        self.log.flush()

    def _key_bindings(self) -> tuple[tuple[int, Key], ...]:
        left, right, fire = self.config.keybinds()
        return ((left, Key.LEFT), (right, Key.RIGHT), (fire, Key.FIRE))

    def handle_input(self) -> None:
        if rl.is_key_pressed(PAUSE_KEY):
            self.paused = not self.paused
            self.log.log("game: paused" if self.paused else "game: resumed")
        inputs = self.session.inputs
        for code, key in self._key_bindings():
            if rl.is_key_pressed(code):
                inputs.key_down(key)
            if rl.is_key_released(code):
                inputs.key_up(key)

    def update(self, dt: float) -> None:
        self.handle_input()
        if self.paused:
            return
        ticks = self.session.advance(dt)
        self.router.route_all(ticks)
        for events in ticks:
            if events.match_reset:
                world = self.session.world
                self.log.log(f"game: match reset max_score={world.max_score} resets={world.match_resets}")

    def draw(self) -> None:
        if self.renderer is None:
            return
        self.renderer.draw(build_draw_list(self.session.world))
        if self.paused:
            width = rl.measure_text(PAUSED_TEXT, PAUSED_TEXT_SIZE)
            x = (rl.get_screen_width() - width) // 2
            y = (rl.get_screen_height() - PAUSED_TEXT_SIZE) // 2
            rl.draw_text(PAUSED_TEXT, int(x), int(y), PAUSED_TEXT_SIZE, rl.WHITE)

    def close(self) -> None:
        if self.textures is not None:
            self.textures.unload()
        if self.audio is not None:
            shutdown_audio(self.audio)
        self.log.flush()
