from __future__ import annotations

import re
import threading
from typing import Callable
from urllib.parse import urljoin

import requests
from loguru import logger

from channelbox.playback import (
    EngineEvent,
    EngineEventKind,
    RenderTarget,
    Runner,
    Subscription,
    call_now,
)
from channelbox.services.iptv import DEFAULT_USER_AGENT


_STREAM_INF = "#EXT-X-STREAM-INF"
_BANDWIDTH_RE = re.compile(r"BANDWIDTH=(\d+)")


def _spawn(fn: Callable[[], None]) -> None:
    threading.Thread(target=fn, daemon=True).start()


def parse_variants(text: str, base_url: str) -> list[tuple[int, str]]:
    """Return ``(bandwidth, absolute_uri)`` for each variant in a master playlist."""
    variants: list[tuple[int, str]] = []
    lines = [ln.strip() for ln in text.splitlines()]
    for i, ln in enumerate(lines):
        if not ln.startswith(_STREAM_INF):
            continue
        uri = next((x for x in lines[i + 1:] if x and not x.startswith("#")), None)
        if uri is None:
            continue
        m = _BANDWIDTH_RE.search(ln)
        variants.append((int(m.group(1)) if m else 0, urljoin(base_url, uri)))
    return variants


class HlsEngine:
    """Resolves an HLS manifest to a playable rendition for the render target.

    The manifest is fetched on a worker (``run_async``); events go back to
    subscribers through ``dispatch`` so the UI can hop onto its own thread.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout_s: int = 15,
        run_async: Runner = _spawn,
        dispatch: Runner = call_now,
    ):
        if session is None:
            session = requests.Session()
            session.headers.update({"User-Agent": DEFAULT_USER_AGENT})
        self.session = session
        self.timeout_s = timeout_s
        self._run_async = run_async
        self._dispatch = dispatch
        self._subscriptions: list[Subscription] = []
        self._source: str | None = None
        self._target: RenderTarget | None = None
        self._started = False
        self._destroyed = False
        self.levels: list[tuple[int, str]] = []

    def subscribe(self, handler: Callable[[EngineEvent], None]) -> Subscription:
        sub = Subscription(handler)
        self._subscriptions.append(sub)
        return sub

    def load_source(self, url: str) -> None:
        self._source = url
        self._maybe_start()

    def attach_media(self, target: RenderTarget) -> None:
        self._target = target
        self._maybe_start()

    def destroy(self) -> None:
        self._destroyed = True
        for sub in self._subscriptions:
            sub.cancel()
        self._subscriptions.clear()
        self._target = None

    def _maybe_start(self) -> None:
        if self._started or self._destroyed or not self._source or self._target is None:
            return
        self._started = True
        url = self._source
        self._run_async(lambda: self._load_manifest(url))

    def _load_manifest(self, url: str) -> None:
        try:
            self._resolve(url)
        except Exception as e:  # noqa: BLE001
            logger.exception(f"Manifest load crashed for {url}")
            self._emit_error("otherError", "internalException", str(e))

    def _resolve(self, url: str) -> None:
        try:
            r = self.session.get(url, timeout=self.timeout_s, allow_redirects=True)
            r.raise_for_status()
        except requests.RequestException as e:
            self._emit_error("networkError", "manifestLoadError", str(e))
            return

        text = r.text or ""
        first = next((ln.strip() for ln in text.splitlines() if ln.strip()), "")
        if not first.startswith("#EXTM3U"):
            self._emit_error("mediaError", "manifestParsingError", "no EXTM3U header")
            return

        base = r.url or url
        self.levels = parse_variants(text, base)
        stream_url = self.levels[0][1] if self.levels else base
        logger.debug(f"Manifest {url}: {len(self.levels)} levels, using {stream_url}")
        self._dispatch(lambda: self._on_manifest(stream_url))

    def _on_manifest(self, stream_url: str) -> None:
        if self._destroyed or self._target is None:
            return
        self._target.source = stream_url
        self._emit(EngineEvent(EngineEventKind.MANIFEST_PARSED, {"levels": len(self.levels)}))

    def _emit_error(self, error_type: str, details: str, reason: str) -> None:
        event = EngineEvent(
            EngineEventKind.ERROR,
            {"type": error_type, "details": details, "reason": reason, "fatal": True},
        )
        self._dispatch(lambda: self._emit(event))

    def _emit(self, event: EngineEvent) -> None:
        if self._destroyed:
            return
        for sub in list(self._subscriptions):
            sub.deliver(event)


class HlsEngineFactory:
    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout_s: int = 15,
        run_async: Runner = _spawn,
        dispatch: Runner = call_now,
        supported: Callable[[], bool] | None = None,
    ):
        self.user_agent = user_agent
        self._supported = supported
        self.timeout_s = timeout_s
        self.run_async = run_async
        self.dispatch = dispatch

    def is_supported(self) -> bool:
        # the resolved rendition is still an HLS media playlist, so the
        # render target has to read HLS itself
        if self._supported is None:
            return True
        return bool(self._supported())

    def create(self) -> HlsEngine:
        session = requests.Session()
        session.headers.update({"User-Agent": self.user_agent})
        return HlsEngine(
            session=session,
            timeout_s=self.timeout_s,
            run_async=self.run_async,
            dispatch=self.dispatch,
        )
