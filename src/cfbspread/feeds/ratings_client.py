"""CollegeFootballData FPI ratings client.

GET /ratings/fpi?year=&team= → first record's fpi.
Failures never raise; they come back as TeamRating(value=None, note=...).
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Optional

import aiohttp

from cfbspread.config import CFBD_API_URL, DEFAULT_TIMEOUT
from cfbspread.models.rating import TeamRating

logger = logging.getLogger(__name__)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class FPIClient:
    """Async client for ESPN FPI via CollegeFootballData.

    Usage:
        async with FPIClient(api_key="...") as client:
            rating = await client.fetch_rating("Michigan", 2024)
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = CFBD_API_URL,
        timeout: int = DEFAULT_TIMEOUT,
    ):
        self._api_key = api_key if api_key is not None else os.environ.get("CFBD_API_KEY", "")
        self.base_url = base_url
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    async def open(self) -> None:
        """Open aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)

    async def close(self) -> None:
        """Close aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> FPIClient:
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def fetch_rating(self, team: str, year: int) -> TeamRating:
        """FPI for one team/season. 실패 시 value=None + note."""
        if not self._api_key:
            return TeamRating.unavailable(team, year, "CFBD_API_KEY not configured")

        await self.open()
        url = f"{self.base_url}/ratings/fpi"
        params = {"year": str(year), "team": team}
        headers = {
            "accept": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }
        try:
            async with self._session.get(url, params=params, headers=headers) as resp:
                if resp.status != 200:
                    logger.warning("CFBD FPI %s/%s returned %d", team, year, resp.status)
                    return TeamRating.unavailable(
                        team, year, f"FPI request failed for {team} (HTTP {resp.status})",
                    )
                data = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            logger.warning("CFBD FPI %s/%s error: %s", team, year, exc)
            return TeamRating.unavailable(team, year, f"FPI request failed for {team}")

        if not isinstance(data, list) or not data:
            return TeamRating.unavailable(team, year, f"FPI not found for {team} in {year}")

        record = data[0] if isinstance(data[0], dict) else {}
        value = record.get("fpi")
        if not _is_number(value):
            return TeamRating.unavailable(team, year, f"FPI not found for {team} in {year}")

        return TeamRating(team=team, year=year, value=float(value))

    async def fetch_ratings(
        self, away: str, home: str, year: int,
    ) -> tuple[TeamRating, TeamRating]:
        """Away/home ratings, fetched concurrently."""
        away_rating, home_rating = await asyncio.gather(
            self.fetch_rating(away, year),
            self.fetch_rating(home, year),
        )
        return away_rating, home_rating
