"""Bet analysis orchestration: license → inputs → ratings + odds → model → analysis.

HTTP concerns (status codes, CORS, method dispatch) live in server.app.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from cfbspread.analysis.provider import (
    MISSING_RATINGS_MESSAGE,
    AnalysisInput,
    AnalysisProvider,
    build_analysis_provider,
)
from cfbspread.config import LEAGUE, SpreadConfig
from cfbspread.feeds.odds_client import OddsClient
from cfbspread.feeds.ratings_client import FPIClient
from cfbspread.license.cache import LicenseCache, cache_key
from cfbspread.license.verifier import GumroadVerifier
from cfbspread.models.license import LicenseVerification, VerifyResult
from cfbspread.strategy.spread_model import (
    compare_to_consensus,
    compute_model_spread,
    home_field_advantage,
)

logger = logging.getLogger(__name__)

MISSING_RATINGS_NOTE = (
    "FPI not found for one or both teams. "
    "Try using disambiguated names like 'Miami (FL)'."
)


@dataclass
class Matchup:
    """Validated request body."""

    away: str
    home: str
    neutral: bool
    year: int


def current_season() -> int:
    return datetime.now(tz=timezone.utc).year


def parse_matchup(body, default_year: Optional[int] = None) -> tuple[Optional[Matchup], Optional[str]]:
    """Request JSON → (Matchup, None) or (None, error message)."""
    if not isinstance(body, dict):
        return None, "Request body must be a JSON object."

    away = body.get("away") or ""
    home = body.get("home") or ""
    if not isinstance(away, str) or not isinstance(home, str) or not away.strip() or not home.strip():
        return None, "Provide 'away' and 'home' team names."

    year = body.get("year")
    if not isinstance(year, int) or isinstance(year, bool):
        year = default_year if default_year is not None else current_season()

    return Matchup(
        away=away.strip(),
        home=home.strip(),
        neutral=bool(body.get("neutral", False)),
        year=year,
    ), None


class BetAnalysisService:
    """Per-process service holding the license cache and upstream clients.

    Args:
        config: SpreadConfig.
        cache: License cache (process lifetime). 기본값은 config TTL로 생성.
        verifier / ratings / odds / analysis: 주입 가능 (테스트용).
    """

    def __init__(
        self,
        config: SpreadConfig,
        cache: Optional[LicenseCache] = None,
        verifier: Optional[GumroadVerifier] = None,
        ratings: Optional[FPIClient] = None,
        odds: Optional[OddsClient] = None,
        analysis: Optional[AnalysisProvider] = None,
    ):
        self.config = config
        if cache is None:
            cache = LicenseCache(ttl_seconds=config.license_cache_ttl)
        if verifier is None:
            verifier = GumroadVerifier(timeout=config.http_timeout)
        if ratings is None:
            ratings = FPIClient(api_key=config.cfbd_api_key or "", timeout=config.http_timeout)
        if odds is None:
            odds = OddsClient(api_key=config.odds_api_key or "", timeout=config.http_timeout)
        if analysis is None:
            analysis = build_analysis_provider(config)
        self.cache = cache
        self.verifier = verifier
        self.ratings = ratings
        self.odds = odds
        self.analysis = analysis

    async def open(self) -> None:
        for client in (self.verifier, self.ratings, self.odds, self.analysis):
            await client.open()
        logger.info("AI analysis %s", "ON" if self.analysis.enabled else "OFF")

    async def close(self) -> None:
        for client in (self.verifier, self.ratings, self.odds, self.analysis):
            try:
                await client.close()
            except Exception:
                logger.exception("Error closing %s", type(client).__name__)

    # ------------------------------------------------------------------
    # License
    # ------------------------------------------------------------------

    async def authorize(self, license_key: str) -> VerifyResult:
        """캐시 우선 라이선스 확인. 성공 결과만 캐시."""
        product_id = self.config.gumroad_product_id
        key = cache_key(product_id, license_key)

        cached = self.cache.get(key)
        if cached is not None:
            return VerifyResult(ok=True, email=cached.email, uses=cached.uses)

        result = await self.verifier.verify(
            product_id, license_key, increment=self.config.increment_license_uses,
        )
        if result.ok:
            self.cache.set(key, LicenseVerification.from_result(result, self.cache.now()))
        return result

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    async def analyze(self, matchup: Matchup) -> dict:
        """Ratings + odds (concurrent) → model spread → optional AI analysis."""
        (away_rating, home_rating), odds = await asyncio.gather(
            self.ratings.fetch_ratings(matchup.away, matchup.home, matchup.year),
            self.odds.fetch_consensus(matchup.away, matchup.home),
        )

        hfa = home_field_advantage(matchup.neutral, self.config.home_field_advantage)
        notes = [r.note for r in (away_rating, home_rating, odds) if r.note]

        payload = {
            "ok": True,
            "league": LEAGUE,
            "eventTitle": odds.event_title if odds.matched else f"{matchup.away} @ {matchup.home}",
            "away": matchup.away,
            "home": matchup.home,
            "neutral": matchup.neutral,
            "year": matchup.year,
            "hfa": hfa,
            "prUsed": {"away": away_rating.value, "home": home_rating.value},
            "spread": None,
            "fav": None,
            "favAbs": None,
            "pickLine": None,
            "bookLine": odds.consensus,
            "edge": None,
            "bookCompare": None,
            "bookmakerLines": [line.to_dict() for line in odds.lines],
            "notes": notes,
        }

        if not (away_rating.available and home_rating.available):
            logger.info(
                "Missing FPI for %s @ %s (%d): %s",
                matchup.away, matchup.home, matchup.year, "; ".join(notes),
            )
            payload["note"] = MISSING_RATINGS_NOTE
            payload["analysis"] = MISSING_RATINGS_MESSAGE
            return payload

        model = compute_model_spread(
            matchup.away, matchup.home, away_rating.value, home_rating.value, hfa,
        )
        comparison = compare_to_consensus(model.spread, odds.consensus)
        payload.update({
            "spread": model.spread,
            "fav": model.fav,
            "favAbs": model.fav_abs,
            "pickLine": model.pick_line,
            "edge": comparison.edge,
            "bookCompare": comparison.text,
        })

        payload["analysis"] = await self.analysis.analyze(AnalysisInput(
            year=matchup.year,
            away=matchup.away,
            home=matchup.home,
            neutral=matchup.neutral,
            hfa=hfa,
            away_rating=away_rating.value,
            home_rating=home_rating.value,
            spread=model.spread,
            pick_line=model.pick_line,
            book_compare=comparison.text,
        ))
        logger.info(
            "%s @ %s: model %s, book %s",
            matchup.away, matchup.home, model.pick_line, odds.consensus,
        )
        return payload
