from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


DEFAULT_CATEGORY = "General"
UNDEFINED_CATEGORY = "Undefined"


@dataclass(frozen=True)
class ChannelEntry:
    name: str
    stream_url: str
    quality: str = ""
    category: str = DEFAULT_CATEGORY
    logo_url: str = ""
    external_id: str = ""


def make_entry(
    name: str,
    stream_url: str | None,
    quality: str = "",
    category: str = DEFAULT_CATEGORY,
    logo_url: str = "",
    external_id: str = "",
    fallback_name: str = "",
) -> ChannelEntry | None:
    """Build an entry, or return None when there is nothing to play."""
    url = (stream_url or "").strip()
    if not url:
        return None

    display = (name or "").strip() or (fallback_name or "").strip() or url
    return ChannelEntry(
        name=display,
        stream_url=url,
        quality=quality or "",
        category=category,
        logo_url=logo_url or "",
        external_id=external_id or "",
    )


@dataclass
class ParsedPlaylist:
    entries: list[ChannelEntry] = field(default_factory=list)
    categories: dict[str, None] = field(default_factory=dict)

    def category_list(self) -> list[str]:
        return sorted(self.categories)


class SessionState(str, Enum):
    IDLE = "idle"
    ATTACHING = "attaching"
    PLAYING = "playing"
    ERROR = "error"
