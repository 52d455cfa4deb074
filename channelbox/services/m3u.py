from __future__ import annotations

import re

from loguru import logger

from channelbox.models import (
    DEFAULT_CATEGORY,
    UNDEFINED_CATEGORY,
    ParsedPlaylist,
    make_entry,
)


EXTINF_PREFIX = "#EXTINF:"

_ATTR_RES = {
    key: re.compile(rf'{re.escape(key)}="([^"]*)"')
    for key in ("tvg-id", "tvg-name", "tvg-logo", "group-title")
}
_QUALITY_RE = re.compile(r"\((\d+p)\)")


def _attr(line: str, key: str) -> str | None:
    m = _ATTR_RES[key].search(line)
    return m.group(1) if m else None


def parse_extinf(line: str) -> dict[str, str]:
    """Pull the channel fields out of one ``#EXTINF:`` line.

    Missing attributes come back as empty strings, except ``group-title``
    which defaults to ``General``. The display name is whatever follows the
    last comma, minus a ``(720p)`` style marker.
    """
    group = _attr(line, "group-title")
    info = {
        "external_id": _attr(line, "tvg-id") or "",
        "tvg_name": _attr(line, "tvg-name") or "",
        "logo_url": _attr(line, "tvg-logo") or "",
        "category": DEFAULT_CATEGORY if group is None else group,
        "name": "",
        "quality": "",
        "declared_group": "" if group is None else group,
    }

    if "," in line:
        tail = line.rsplit(",", 1)[1]
        qm = _QUALITY_RE.search(tail)
        if qm:
            info["quality"] = qm.group(1)
            tail = tail[: qm.start()] + tail[qm.end():]
        info["name"] = tail.strip()

    return info


def parse_m3u(text: str) -> ParsedPlaylist:
    lines = [ln.strip("\ufeff").strip() for ln in (text or "").split("\n")]
    result = ParsedPlaylist()

    for i, ln in enumerate(lines):
        if not ln.startswith(EXTINF_PREFIX):
            continue

        url = lines[i + 1] if i + 1 < len(lines) else ""
        if not url or url.startswith("#"):
            continue

        info = parse_extinf(ln)
        entry = make_entry(
            name=info["name"],
            stream_url=url,
            quality=info["quality"],
            category=info["category"],
            logo_url=info["logo_url"],
            external_id=info["external_id"],
            fallback_name=info["tvg_name"],
        )
        if entry is None:
            continue

        result.entries.append(entry)
        group = info["declared_group"]
        if group and group != UNDEFINED_CATEGORY:
            result.categories.setdefault(group, None)

    logger.info(f"Loaded {len(result.entries)} channels")
    return result
