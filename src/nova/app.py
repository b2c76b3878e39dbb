from __future__ import annotations

from typing import Protocol

import pyray as rl


class View(Protocol):
    def update(self, dt: float) -> None: ...

    def draw(self) -> None: ...


def _call_optional(view: object, name: str) -> object:
    fn = getattr(view, name, None)
    if callable(fn):
        return fn()
    return None


def run_view(
    view: View,
    *,
    width: int = 650,
    height: int = 700,
    title: str = "Galactic strike",
    fps: int = 60,
    clear_color: tuple[int, int, int, int] = (26, 51, 77, 255),
) -> None:
    """Run a Raylib window around a view until the window or the view asks to close."""
    rl.init_window(int(width), int(height), title)
    rl.set_target_fps(int(fps))
    background = rl.Color(*clear_color)
    try:
        _call_optional(view, "open")
        while not rl.window_should_close():
            if bool(getattr(view, "close_requested", False)):
                break
            dt = rl.get_frame_time()
            view.update(dt)
            rl.begin_drawing()
            rl.clear_background(background)
            view.draw()
            rl.end_drawing()
    finally:
        _call_optional(view, "close")
        rl.close_window()
