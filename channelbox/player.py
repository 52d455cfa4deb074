from __future__ import annotations

from datetime import datetime
from typing import Protocol

from loguru import logger

from channelbox.app_state import AppState
from channelbox.models import ChannelEntry, SessionState
from channelbox.playback import EngineFactory, PlaybackSession, RenderTarget, Runner, call_now
from channelbox.services.iptv import IPTVService
from channelbox.services.m3u import parse_m3u


LOAD_FAILED_MESSAGE = "Failed to load channels. Please try again later."
NO_MATCHES_MESSAGE = "No channels found matching your search."


def entry_row(entry: ChannelEntry) -> dict:
    """List row data for one entry, as the renderer lays it out."""
    return {
        "text": entry.name,
        "secondary_text": f"{entry.category}  {entry.quality}".strip(),
        "logo": entry.logo_url,
    }


class Renderer(Protocol):
    def show_categories(self, categories: list[str]) -> None: ...

    def show_entries(self, entries: list[ChannelEntry]) -> None: ...

    def show_session(self, state: SessionState, entry: ChannelEntry | None, message: str) -> None: ...

    def show_load_error(self, message: str) -> None: ...


class ChannelPlayer:
    """Routes user intents to the catalog and the playback session.

    Everything here runs on the UI thread except the fetch inside ``load``,
    whose result comes back through ``ingest`` or ``report_load_failure``.
    """

    def __init__(
        self,
        renderer: Renderer,
        target: RenderTarget,
        engines: EngineFactory | None = None,
        iptv: IPTVService | None = None,
    ):
        self.renderer = renderer
        self.iptv = iptv or IPTVService()
        self.state = AppState()
        self.session = PlaybackSession(target, engines=engines, listener=self._on_session)

    @property
    def catalog(self):
        return self.state.catalog

    def load(self, url: str, run_async: Runner = call_now, dispatch: Runner = call_now) -> None:
        """Fetch the playlist on ``run_async`` and hand the result back through ``dispatch``."""
        self.state.source_url = url

        def _work() -> None:
            try:
                text = self.iptv.fetch_text(url)
            except Exception as e:  # noqa: BLE001
                dispatch(lambda err=e: self.report_load_failure(err))
                return
            dispatch(lambda: self.ingest(text))

        run_async(_work)

    def ingest(self, text: str) -> None:
        parsed = parse_m3u(text)
        self.catalog.set_catalog(parsed.entries, parsed.categories)
        self.state.loaded_at = datetime.now()
        self.state.load_error = ""
        self.renderer.show_categories(self.catalog.categories)
        self.renderer.show_entries(self.catalog.view)

    def report_load_failure(self, error: Exception) -> None:
        logger.error(f"Error loading channels: {error}")
        self.state.load_error = LOAD_FAILED_MESSAGE
        self.renderer.show_load_error(LOAD_FAILED_MESSAGE)

    def search(self, text: str) -> list[ChannelEntry]:
        view = self.catalog.filter_by_search(text)
        self.renderer.show_entries(view)
        return view

    def select_category(self, label: str) -> list[ChannelEntry]:
        view = self.catalog.filter_by_category(label)
        self.renderer.show_entries(view)
        return view

    def play(self, entry: ChannelEntry) -> None:
        self.session.play(entry)

    def close(self) -> None:
        self.session.close()

    def _on_session(self, state: SessionState, entry: ChannelEntry | None, message: str) -> None:
        self.renderer.show_session(state, entry, message)
