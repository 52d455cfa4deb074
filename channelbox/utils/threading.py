from __future__ import annotations

import threading
from typing import Callable

from kivy.clock import Clock
from loguru import logger


def on_main_thread(fn: Callable[[], None]) -> None:
    """Run ``fn`` on the next frame of the Kivy event loop."""
    Clock.schedule_once(lambda *_: fn(), 0)


def run_in_thread(
    fn: Callable[[], None],
    name: str = "channelbox-worker",
) -> threading.Thread:
    def _runner():
        try:
            fn()
        except Exception as e:  # noqa: BLE001
            logger.opt(exception=e).error(f"{name} failed")

    t = threading.Thread(target=_runner, name=name, daemon=True)
    t.start()
    return t
