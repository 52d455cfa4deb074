from __future__ import annotations

import os
import sys
import signal
import traceback
from datetime import datetime
from pathlib import Path
import faulthandler

from loguru import logger

from channelbox.config import is_android, load_settings
from channelbox.utils.log import setup_logging


SETTINGS = load_settings()


def _crash_dir() -> Path:
    return SETTINGS.crash_dir


def _copy_to_android_downloads(p: Path, name: str) -> None:
    try:
        from androidstorage4kivy import SharedStorage  # type: ignore
        from jnius import autoclass  # type: ignore

        Environment = autoclass("android.os.Environment")
        ss = SharedStorage()
        collection = getattr(Environment, "DIRECTORY_DOWNLOADS", None)
        ss.copy_to_shared(
            str(p),
            collection=collection,
            filepath=os.path.join("crash_logs", name),
        )
    except Exception:  # noqa: BLE001
        logger.warning("Could not copy crash log to shared storage")


def _write_crash_log(text: str) -> str | None:
    try:
        base = _crash_dir()
        base.mkdir(parents=True, exist_ok=True)
        name = f"channelbox_crash_{datetime.now().strftime('%Y%m%d_%H%M%S')}.txt"
        p = base / name
        p.write_text(text, encoding="utf-8")
        if is_android():
            _copy_to_android_downloads(p, name)
        return str(p)
    except Exception:  # noqa: BLE001
        return None


def _setup_faulthandler() -> None:
    try:
        base = _crash_dir()
        base.mkdir(parents=True, exist_ok=True)
        f = open(base / "channelbox_faulthandler.txt", "a", encoding="utf-8")
        f.write(f"\n=== START {datetime.now().isoformat()} ===\n")
        f.flush()
        faulthandler.enable(file=f, all_threads=True)
        for sig in ("SIGABRT", "SIGILL", "SIGFPE", "SIGSEGV", "SIGBUS"):
            signum = getattr(signal, sig, None)
            if signum is None:
                continue
            try:
                faulthandler.register(signum, file=f, all_threads=True)
            except (AttributeError, RuntimeError, ValueError):
                pass
    except OSError:
        logger.warning("faulthandler log unavailable")


def _excepthook(exc_type, exc, tb):
    text = "".join(traceback.format_exception(exc_type, exc, tb))
    _write_crash_log(text)
    logger.opt(exception=(exc_type, exc, tb)).critical("Unhandled exception")
    sys.__excepthook__(exc_type, exc, tb)


setup_logging(SETTINGS.log_dir, SETTINGS.log_level)
sys.excepthook = _excepthook
_setup_faulthandler()

from kivy.lang import Builder
from kivy.clock import Clock
from kivy.uix.label import Label
from kivy.uix.screenmanager import Screen
from kivy.uix.screenmanager import ScreenManager

from kivymd.app import MDApp

from channelbox.player import ChannelPlayer
from channelbox.services.hls import HlsEngineFactory
from channelbox.services.iptv import IPTVService
from channelbox.ui.screens import KivyRenderer
from channelbox.ui.video import VideoTarget, provider_reads_hls
from channelbox.utils.threading import on_main_thread, run_in_thread


class Root(ScreenManager):
    pass


class ChannelBoxApp(MDApp):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.settings = SETTINGS
        self.iptv = IPTVService(user_agent=SETTINGS.user_agent, timeout_s=SETTINGS.request_timeout_s)
        self.player: ChannelPlayer | None = None

    def build(self):
        self.title = "ChannelBox"
        self.theme_cls.primary_palette = "Blue"
        self.theme_cls.theme_style = "Dark"

        try:
            kv_path = os.path.join(os.path.dirname(__file__), "channelbox", "ui", "channelbox.kv")
            Builder.load_file(kv_path)
            root = Root()

            Clock.schedule_once(lambda *_: self._wire(root), 0)
            return root
        except Exception:  # noqa: BLE001
            err = traceback.format_exc()
            _write_crash_log(err)
            logger.error(err)
            root = Root()
            scr = Screen(name="error")
            scr.add_widget(Label(text=err))
            root.add_widget(scr)
            root.current = "error"
            return root

    def _wire(self, root: Root):
        video = root.get_screen("player").ids.video
        engines = HlsEngineFactory(
            user_agent=SETTINGS.user_agent,
            timeout_s=SETTINGS.request_timeout_s,
            dispatch=on_main_thread,
            supported=provider_reads_hls,
        )
        self.player = ChannelPlayer(
            renderer=KivyRenderer(root),
            target=VideoTarget(video),
            engines=engines,
            iptv=self.iptv,
        )
        self.load_channels()

    def load_channels(self) -> None:
        self.root.get_screen("channels").show_message("Loading channels...")
        self.player.load(
            SETTINGS.playlist_url,
            run_async=lambda fn: run_in_thread(fn, name="playlist-fetch"),
            dispatch=on_main_thread,
        )

    def on_stop(self):
        if self.player is not None:
            self.player.close()


if __name__ == "__main__":
    try:
        ChannelBoxApp().run()
    except Exception:  # noqa: BLE001
        _write_crash_log(traceback.format_exc())
        raise
