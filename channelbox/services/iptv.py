from __future__ import annotations

import requests
from loguru import logger


DEFAULT_USER_AGENT = "ChannelBox/1.0"


class IPTVService:
    def __init__(self, user_agent: str = DEFAULT_USER_AGENT, timeout_s: int = 15):
        self.timeout_s = timeout_s
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    def fetch_text(self, url: str) -> str:
        logger.debug(f"Fetching playlist {url}")
        r = self.session.get(url, timeout=self.timeout_s, allow_redirects=True)
        r.raise_for_status()
        r.encoding = r.encoding or "utf-8"
        return r.text
