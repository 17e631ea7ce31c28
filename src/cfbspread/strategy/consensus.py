"""Consensus line extraction from The Odds API event payloads.

Per-book home-team spread → sort ascending → element at index len // 2.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from cfbspread.config import ALLOWED_BOOKS
from cfbspread.models.odds import BookmakerLine
from cfbspread.strategy.normalize import names_equal, normalize_name

logger = logging.getLogger(__name__)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _objects(items) -> list[dict]:
    """Dict entries of a feed list; anything else (null, strings) is dropped."""
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


def extract_book_lines(
    event: dict,
    books: Iterable[str] = ALLOWED_BOOKS,
) -> list[BookmakerLine]:
    """Collect the home-team spread from each allow-listed bookmaker.

    Books without a "spreads" market, or whose home outcome has no
    numeric point, are skipped. Malformed entries are ignored.
    """
    allowed = set(books)
    home = normalize_name(event.get("home_team"))
    lines: list[BookmakerLine] = []

    for bm in _objects(event.get("bookmakers")):
        key = bm.get("key")
        if not isinstance(key, str) or key not in allowed:
            continue
        spreads = next(
            (m for m in _objects(bm.get("markets")) if m.get("key") == "spreads"),
            None,
        )
        if spreads is None:
            continue
        outcome = next(
            (o for o in _objects(spreads.get("outcomes")) if names_equal(o.get("name"), home)),
            None,
        )
        if outcome is None or not _is_number(outcome.get("point")):
            logger.debug("No numeric home spread from %s", key)
            continue
        lines.append(BookmakerLine(
            book=key,
            home_line=float(outcome["point"]),
            last_update=bm.get("last_update"),
        ))

    return sort_lines(lines)


def sort_lines(lines: Iterable[BookmakerLine]) -> list[BookmakerLine]:
    """Ascending by home_line."""
    return sorted(lines, key=lambda line: line.home_line)


def consensus_line(lines: list[BookmakerLine]) -> Optional[float]:
    """Middle home line of the sorted lines (index len // 2). None if no lines.

    [-3.5, -3, -2.5] → -3.0. Even counts take the upper-middle element:
    [-4, -3] → -3.0.
    """
    if not lines:
        return None
    ordered = sort_lines(lines)
    return ordered[len(ordered) // 2].home_line
