from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger


DEFAULT_PLAYLIST_URL = "https://iptv-org.github.io/iptv/index.m3u"


def is_android() -> bool:
    return bool(os.environ.get("ANDROID_PRIVATE") or os.environ.get("ANDROID_ARGUMENT"))


def default_data_dir() -> Path:
    if is_android():
        p = os.environ.get("ANDROID_PRIVATE")
        if p:
            return Path(p)
    return Path.home() / ".channelbox"


@dataclass
class Settings:
    playlist_url: str = DEFAULT_PLAYLIST_URL
    request_timeout_s: int = 15
    user_agent: str = "ChannelBox/1.0"
    log_level: str = "INFO"
    data_dir: Path = field(default_factory=default_data_dir)

    @property
    def log_dir(self) -> Path:
        return self.data_dir / "logs"

    @property
    def crash_dir(self) -> Path:
        return self.data_dir / "crash_logs"


def _env_int(env: dict[str, str], key: str, default: int) -> int:
    raw = (env.get(key) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"{key}={raw!r} is not a number, using {default}")
        return default
    if value <= 0:
        logger.warning(f"{key}={raw!r} must be positive, using {default}")
        return default
    return value


def load_settings(env: dict[str, str] | None = None) -> Settings:
    env = dict(os.environ) if env is None else env
    s = Settings()

    url = (env.get("CHANNELBOX_PLAYLIST_URL") or "").strip()
    if url:
        s.playlist_url = url
    s.request_timeout_s = _env_int(env, "CHANNELBOX_TIMEOUT", s.request_timeout_s)

    ua = (env.get("CHANNELBOX_USER_AGENT") or "").strip()
    if ua:
        s.user_agent = ua

    level = (env.get("CHANNELBOX_LOG_LEVEL") or "").strip().upper()
    if level:
        s.log_level = level

    data_dir = (env.get("CHANNELBOX_DATA_DIR") or "").strip()
    if data_dir:
        s.data_dir = Path(data_dir).expanduser()

    return s
