"""The Odds API client for NCAAF spread consensus.

Fetches every upcoming NCAAF event in one call, matches the requested
matchup client-side, and takes the lower median of the DK/FD/MGM
home-team spreads.

Matching:
    1. exact normalized equality of both away and home, across all events
    2. only if none: requested name ⊂ event name on both sides
    First match wins within each pass.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Optional

import aiohttp

from cfbspread.config import ALLOWED_BOOKS, DEFAULT_TIMEOUT, NCAAF_SPORT_KEY, ODDS_API_URL
from cfbspread.models.odds import OddsResult
from cfbspread.strategy.consensus import consensus_line, extract_book_lines
from cfbspread.strategy.normalize import name_contains, names_equal, normalize_name

logger = logging.getLogger(__name__)


def find_event(events: list[dict], away: str, home: str) -> Optional[dict]:
    """Find the requested matchup in an Odds API event list.

    Entries that are not objects are skipped. The exact pass covers the
    whole list before any substring match is considered, so an exact match
    later in the list beats an earlier fuzzy one. Within the fuzzy pass
    the feed order decides.
    """
    a = normalize_name(away)
    h = normalize_name(home)
    if not a or not h:
        return None

    candidates = [ev for ev in events if isinstance(ev, dict)]
    if len(candidates) != len(events):
        logger.warning("Skipping %d malformed odds events", len(events) - len(candidates))

    for ev in candidates:
        if names_equal(ev.get("away_team"), a) and names_equal(ev.get("home_team"), h):
            return ev

    for ev in candidates:
        if name_contains(ev.get("away_team"), a) and name_contains(ev.get("home_team"), h):
            logger.debug(
                "Fuzzy odds match: %s @ %s → %s @ %s",
                away, home, ev.get("away_team"), ev.get("home_team"),
            )
            return ev

    return None


def build_odds_result(event: Optional[dict], books=ALLOWED_BOOKS) -> OddsResult:
    """Matched event → OddsResult with per-book lines and consensus."""
    if event is None:
        return OddsResult(note="No matching game found in the odds feed.")

    lines = extract_book_lines(event, books)
    result = OddsResult(
        event_title=f"{event.get('away_team')} @ {event.get('home_team')}",
        consensus=consensus_line(lines),
        lines=lines,
    )
    if not lines:
        result.note = "No DK/FD/MGM spread posted for this game yet."
    return result


class OddsClient:
    """Client for The Odds API (https://the-odds-api.com/)."""

    SPORT_KEY = NCAAF_SPORT_KEY

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = ODDS_API_URL,
        timeout: int = DEFAULT_TIMEOUT,
    ):
        self._api_key = api_key if api_key is not None else os.environ.get("ODDS_API_KEY", "")
        self.base_url = base_url
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None
        # Track remaining requests from API response header
        self._last_remaining: int | None = None

    async def open(self) -> None:
        """Open aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)

    async def close(self) -> None:
        """Close aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> OddsClient:
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def requests_remaining(self) -> int | None:
        return self._last_remaining

    async def fetch_events(self) -> Optional[list[dict]]:
        """GET /sports/americanfootball_ncaaf/odds. 실패 시 None."""
        await self.open()
        url = f"{self.base_url}/sports/{self.SPORT_KEY}/odds"
        params = {
            "apiKey": self._api_key,
            "regions": "us",
            "markets": "spreads",
            "oddsFormat": "american",
        }
        try:
            async with self._session.get(url, params=params) as resp:
                if resp.status != 200:
                    logger.warning(
                        "Odds API error: %s %s",
                        resp.status, (await resp.text())[:200],
                    )
                    return None
                data = await resp.json(content_type=None)
                remaining = resp.headers.get("x-requests-remaining", "?")
                try:
                    self._last_remaining = int(remaining)
                except (ValueError, TypeError):
                    pass
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            logger.error("Odds API fetch failed: %s", exc)
            return None

        if not isinstance(data, list):
            logger.warning("Odds API returned non-list body")
            return None
        logger.info("Odds API: %d games, requests remaining: %s", len(data), remaining)
        return data

    async def fetch_consensus(self, away: str, home: str) -> OddsResult:
        """Consensus home line for away @ home. Never raises for upstream issues."""
        if not self._api_key:
            return OddsResult.unavailable("ODDS_API_KEY not configured")

        events = await self.fetch_events()
        if events is None:
            return OddsResult.unavailable("Odds feed unavailable right now.")

        return build_odds_result(find_event(events, away, home))
