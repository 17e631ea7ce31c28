"""Model spread output models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

PICKEM = "Pick'em"


@dataclass(frozen=True)
class ModelSpread:
    """Home-perspective model spread. spread > 0 → home favored."""

    spread: float
    fav: str
    fav_abs: str
    pick_line: str


@dataclass(frozen=True)
class ConsensusComparison:
    """Model spread vs. the market consensus home line."""

    book_line: Optional[float]
    edge: Optional[float]
    text: str
