from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from channelbox.catalog import Catalog


@dataclass
class AppState:
    catalog: Catalog = field(default_factory=Catalog)
    source_url: str = ""
    loaded_at: datetime | None = None
    load_error: str = ""

    @property
    def loaded(self) -> bool:
        return self.loaded_at is not None
