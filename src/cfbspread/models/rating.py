"""Team power rating model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class TeamRating:
    """FPI rating for one team/season. value=None이면 note에 사유."""

    team: str
    year: int
    value: Optional[float] = None
    note: Optional[str] = None

    @property
    def available(self) -> bool:
        return self.value is not None

    @staticmethod
    def unavailable(team: str, year: int, note: str) -> TeamRating:
        return TeamRating(team=team, year=year, value=None, note=note)
