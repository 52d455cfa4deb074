"""Test doubles for the render target, streaming engine and renderer."""

from channelbox.models import ChannelEntry
from channelbox.playback import EngineEvent, EngineEventKind, PlaybackBlocked, Subscription


class FakeTarget:
    def __init__(self, native_hls: bool = False, block_autoplay: bool = False):
        self.source = ""
        self.native_hls = native_hls
        self.block_autoplay = block_autoplay
        self.play_calls = 0
        self.pause_calls = 0

    def play(self) -> None:
        self.play_calls += 1
        if self.block_autoplay:
            raise PlaybackBlocked("NotAllowedError")

    def pause(self) -> None:
        self.pause_calls += 1

    def can_play_type(self, mime_type: str) -> str:
        return "maybe" if self.native_hls else ""


class FakeEngine:
    def __init__(self):
        self.subscriptions: list[Subscription] = []
        self.loaded: str | None = None
        self.attached = None
        self.destroyed = False

    def subscribe(self, handler):
        sub = Subscription(handler)
        self.subscriptions.append(sub)
        return sub

    def load_source(self, url: str) -> None:
        self.loaded = url

    def attach_media(self, target) -> None:
        self.attached = target

    def destroy(self) -> None:
        self.destroyed = True

    def emit(self, kind: EngineEventKind, **detail) -> None:
        for sub in self.subscriptions:
            sub.deliver(EngineEvent(kind, detail))


class FakeFactory:
    def __init__(self, supported: bool = True):
        self.supported = supported
        self.created: list[FakeEngine] = []

    def is_supported(self) -> bool:
        return self.supported

    def create(self) -> FakeEngine:
        engine = FakeEngine()
        self.created.append(engine)
        return engine


class RecordingRenderer:
    def __init__(self):
        self.categories: list[list[str]] = []
        self.views: list[list[ChannelEntry]] = []
        self.sessions: list[tuple] = []
        self.load_errors: list[str] = []

    def show_categories(self, categories):
        self.categories.append(list(categories))

    def show_entries(self, entries):
        self.views.append(list(entries))

    def show_session(self, state, entry, message):
        self.sessions.append((state, entry, message))

    def show_load_error(self, message):
        self.load_errors.append(message)

