"""Optional AI betting analysis (Anthropic Messages API).

키 미설정 시 DisabledAnalysis가 고정 안내 문구를 반환 (크래시 없음).
The provider is chosen once at startup by build_analysis_provider().
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import aiohttp

from cfbspread.config import (
    ANTHROPIC_API_URL,
    ANTHROPIC_API_VERSION,
    DEFAULT_ANTHROPIC_MODEL,
    DEFAULT_TIMEOUT,
    LEAGUE,
    SpreadConfig,
)

logger = logging.getLogger(__name__)

DISABLED_MESSAGE = "Set ANTHROPIC_API_KEY to enable AI analysis."
EMPTY_MESSAGE = "No analysis generated."
FAILED_MESSAGE = "Analysis unavailable right now."
MISSING_RATINGS_MESSAGE = "Missing FPI prevents model pick."

SYSTEM_PROMPT = (
    "You are a sharp betting analyst. ≤150 words. Use the model spread and "
    "compare to the market. Mention key numbers (3,7,10,14) if relevant. "
    "End with a clear pick."
)
MAX_TOKENS = 400


@dataclass
class AnalysisInput:
    """Everything the analyst prompt needs for one matchup."""

    year: int
    away: str
    home: str
    neutral: bool
    hfa: float
    away_rating: float
    home_rating: float
    spread: float
    pick_line: str
    book_compare: str


def build_prompt(inp: AnalysisInput) -> str:
    """Structured user message for the analyst."""
    return (
        f"League: {LEAGUE}\n"
        f"Year: {inp.year}\n"
        f"Away: {inp.away}\n"
        f"Home: {inp.home}\n"
        f"Neutral site: {'Yes' if inp.neutral else 'No'}\n"
        f"HFA used: {inp.hfa:g}\n"
        f"Ratings source: ESPN FPI (via CollegeFootballData)\n"
        f"FPI used: {inp.away}={inp.away_rating:g}, {inp.home}={inp.home_rating:g}\n"
        f"Model spread (Home - Away + HFA): {inp.spread:g} ({inp.pick_line})\n"
        f"{inp.book_compare}\n"
        f"Books: DraftKings, FanDuel, BetMGM.\n"
        f"Finish with: Play: {inp.pick_line} (model)."
    )


class AnalysisProvider:
    """Base analysis provider."""

    enabled: bool = False

    async def open(self) -> None:
        pass

    async def close(self) -> None:
        pass

    async def analyze(self, inp: AnalysisInput) -> str:
        raise NotImplementedError


class DisabledAnalysis(AnalysisProvider):
    """No API key → fixed placeholder."""

    async def analyze(self, inp: AnalysisInput) -> str:
        return DISABLED_MESSAGE


class ClaudeAnalysis(AnalysisProvider):
    """Anthropic Messages API provider.

    Args:
        api_key: Anthropic API key.
        model: Model id.
        max_tokens: Output budget.
    """

    enabled = True

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_ANTHROPIC_MODEL,
        max_tokens: int = MAX_TOKENS,
        url: str = ANTHROPIC_API_URL,
        timeout: int = DEFAULT_TIMEOUT,
    ):
        self._api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.url = url
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

    async def analyze(self, inp: AnalysisInput) -> str:
        """Claude 분석 텍스트. 실패 시 대체 문구."""
        await self.open()
        payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "system": SYSTEM_PROMPT,
            "messages": [{"role": "user", "content": build_prompt(inp)}],
        }
        headers = {
            "x-api-key": self._api_key,
            "anthropic-version": ANTHROPIC_API_VERSION,
            "content-type": "application/json",
        }
        try:
            async with self._session.post(self.url, json=payload, headers=headers) as resp:
                if resp.status != 200:
                    body = await resp.text()
                    logger.warning("Anthropic API %d: %s", resp.status, body[:200])
                    return FAILED_MESSAGE
                data = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            logger.error("Anthropic API call failed: %s", exc)
            return FAILED_MESSAGE

        return first_text(data) or EMPTY_MESSAGE


def first_text(data) -> Optional[str]:
    """content[0].text from a Messages API response, if present."""
    if not isinstance(data, dict):
        return None
    content = data.get("content")
    if not isinstance(content, list) or not content:
        return None
    first = content[0]
    if not isinstance(first, dict):
        return None
    return first.get("text") or None


def build_analysis_provider(config: SpreadConfig) -> AnalysisProvider:
    """설정에 따라 provider 선택 (시작 시 1회)."""
    if config.analysis_enabled:
        return ClaudeAnalysis(
            api_key=config.anthropic_api_key,
            model=config.anthropic_model,
            timeout=config.http_timeout,
        )
    return DisabledAnalysis()
