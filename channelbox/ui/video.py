from __future__ import annotations

from kivy.core.video import Video as CoreVideo
from kivy.uix.video import Video

from channelbox.playback import HLS_MIME


def provider_reads_hls() -> bool:
    # ffpyplayer goes through ffmpeg, which reads HLS on its own
    provider = getattr(CoreVideo, "__name__", "") if CoreVideo else ""
    return "FFPy" in provider


class VideoTarget:
    """Render target backed by a Kivy ``Video`` widget."""

    def __init__(self, video: Video):
        self.video = video

    @property
    def source(self) -> str:
        return self.video.source or ""

    @source.setter
    def source(self, url: str) -> None:
        if not url:
            self.video.state = "stop"
            self.video.unload()
        self.video.source = url or ""

    def play(self) -> None:
        self.video.state = "play"

    def pause(self) -> None:
        if self.video.state == "play":
            self.video.state = "pause"

    def can_play_type(self, mime_type: str) -> str:
        if mime_type == HLS_MIME and provider_reads_hls():
            return "maybe"
        return ""
