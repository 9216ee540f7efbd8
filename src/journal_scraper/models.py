from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from journal_scraper.utils.datetime_utils import to_utc


@dataclass(frozen=True, slots=True)
class Article:
    title: str
    url: str
    first_seen: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "first_seen", to_utc(self.first_seen))
