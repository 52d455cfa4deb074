from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Protocol

from loguru import logger

from channelbox.models import ChannelEntry, SessionState


HLS_MIME = "application/vnd.apple.mpegurl"
HLS_MARKER = ".m3u8"

STREAM_ERROR_MESSAGE = "Unable to play this stream. The channel may be offline or geo-blocked."


Runner = Callable[[Callable[[], None]], None]


def call_now(fn: Callable[[], None]) -> None:
    fn()


class PlaybackBlocked(Exception):
    """Raised by a render target when the platform refuses to start playback."""


class EngineEventKind(str, Enum):
    MANIFEST_PARSED = "manifestParsed"
    ERROR = "error"


@dataclass(frozen=True)
class EngineEvent:
    kind: EngineEventKind
    detail: dict[str, Any] = field(default_factory=dict)


class Subscription:
    def __init__(self, handler: Callable[[EngineEvent], None]):
        self._handler: Callable[[EngineEvent], None] | None = handler

    @property
    def active(self) -> bool:
        return self._handler is not None

    def cancel(self) -> None:
        self._handler = None

    def deliver(self, event: EngineEvent) -> None:
        handler = self._handler
        if handler is not None:
            handler(event)


class RenderTarget(Protocol):
    source: str

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def can_play_type(self, mime_type: str) -> str: ...


class StreamEngine(Protocol):
    def load_source(self, url: str) -> None: ...

    def attach_media(self, target: RenderTarget) -> None: ...

    def subscribe(self, handler: Callable[[EngineEvent], None]) -> Subscription: ...

    def destroy(self) -> None: ...


class EngineFactory(Protocol):
    def is_supported(self) -> bool: ...

    def create(self) -> StreamEngine: ...


StateListener = Callable[[SessionState, Optional[ChannelEntry], str], None]


def is_adaptive(url: str) -> bool:
    return HLS_MARKER in url


class PlaybackSession:
    """Binds one selected channel to the render target and, for HLS, an engine.

    IDLE -> ATTACHING -> PLAYING, with ERROR reachable from either of the
    middle states. Only ``close()`` leaves ERROR.
    """

    def __init__(
        self,
        target: RenderTarget,
        engines: EngineFactory | None = None,
        listener: StateListener | None = None,
    ):
        self.target = target
        self.engines = engines
        self._listener = listener
        self.state = SessionState.IDLE
        self.active_entry: ChannelEntry | None = None
        self.engine: StreamEngine | None = None
        self._subscription: Subscription | None = None

    @property
    def error_message(self) -> str:
        return STREAM_ERROR_MESSAGE if self.state is SessionState.ERROR else ""

    def _set_state(self, state: SessionState) -> None:
        if state is self.state:
            return
        logger.debug(f"Session {self.state.value} -> {state.value}")
        self.state = state
        if self._listener:
            self._listener(state, self.active_entry, self.error_message)

    def play(self, entry: ChannelEntry) -> None:
        if self.state is not SessionState.IDLE or self.engine is not None:
            self.close()

        self.active_entry = entry
        self._set_state(SessionState.ATTACHING)
        logger.info(f"Playing {entry.name!r} ({entry.stream_url})")

        try:
            self._attach(entry)
        except Exception:  # noqa: BLE001
            logger.exception(f"Error playing channel {entry.name!r}")
            self._fail()

    def _attach(self, entry: ChannelEntry) -> None:
        url = entry.stream_url
        self.target.source = url

        if not is_adaptive(url):
            self._start()
            return

        if self.engines is not None and self.engines.is_supported():
            engine = self.engines.create()
            self.engine = engine
            self._subscription = engine.subscribe(self._on_engine_event)
            engine.load_source(url)
            engine.attach_media(self.target)
            return

        if self.target.can_play_type(HLS_MIME):
            self._start()
            return

        logger.warning(f"No HLS support available for {url}")
        self._fail()

    def _start(self) -> None:
        self._set_state(SessionState.PLAYING)
        try:
            self.target.play()
        except PlaybackBlocked as e:
            logger.warning(f"Auto-play prevented: {e}")

    def _fail(self) -> None:
        self._set_state(SessionState.ERROR)

    def _on_engine_event(self, event: EngineEvent) -> None:
        if self.engine is None:
            return

        if event.kind is EngineEventKind.ERROR:
            logger.error(f"HLS error: {event.detail}")
            if self.state in (SessionState.ATTACHING, SessionState.PLAYING):
                self._fail()
        elif event.kind is EngineEventKind.MANIFEST_PARSED:
            if self.state is not SessionState.ATTACHING:
                return
            try:
                self._start()
            except Exception:  # noqa: BLE001
                logger.exception("Error starting playback after manifest load")
                self._fail()

    def close(self) -> None:
        if self.state is SessionState.IDLE and self.engine is None:
            return

        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

        if self.engine is not None:
            engine = self.engine
            self.engine = None
            try:
                engine.destroy()
            except Exception:  # noqa: BLE001
                logger.exception("Engine teardown failed")

        self.target.pause()
        self.target.source = ""
        self.active_entry = None
        self._set_state(SessionState.IDLE)
