"""Sportsbook line models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class BookmakerLine:
    """Home-team point spread quoted by one allow-listed book."""

    book: str
    home_line: float
    last_update: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "book": self.book,
            "homeLine": self.home_line,
            "last_update": self.last_update,
        }


@dataclass
class OddsResult:
    """Consensus line for a matched event, or absence with a note."""

    event_title: Optional[str] = None
    consensus: Optional[float] = None
    lines: list[BookmakerLine] = field(default_factory=list)
    note: Optional[str] = None

    @property
    def matched(self) -> bool:
        return self.event_title is not None

    @staticmethod
    def unavailable(note: str) -> OddsResult:
        return OddsResult(note=note)
