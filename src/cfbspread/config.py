"""Service configuration: upstream endpoints, bookmaker allow-list, env-based config."""

from __future__ import annotations

import os
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Upstream endpoints
# ---------------------------------------------------------------------------

ODDS_API_URL = "https://api.the-odds-api.com/v4"
NCAAF_SPORT_KEY = "americanfootball_ncaaf"
CFBD_API_URL = "https://api.collegefootballdata.com"
GUMROAD_VERIFY_URL = "https://api.gumroad.com/v2/licenses/verify"
ANTHROPIC_API_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_API_VERSION = "2023-06-01"

DEFAULT_TIMEOUT = 15  # seconds
DEFAULT_ANTHROPIC_MODEL = "claude-3-7-sonnet-20250219"

# ---------------------------------------------------------------------------
# Consensus books (DK / FD / MGM)
# ---------------------------------------------------------------------------

ALLOWED_BOOKS: frozenset[str] = frozenset({"draftkings", "fanduel", "betmgm"})

LEAGUE = "CFB"


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() not in ("false", "0", "no")


# ---------------------------------------------------------------------------
# SpreadConfig: 환경변수 기반 설정
# ---------------------------------------------------------------------------


@dataclass
class SpreadConfig:
    """서비스 전체 설정. 환경변수 또는 기본값."""

    license_cache_ttl: int = 600  # seconds
    home_field_advantage: float = 1.7
    gumroad_product_id: str | None = None
    increment_license_uses: bool = True
    odds_api_key: str | None = None
    cfbd_api_key: str | None = None
    anthropic_api_key: str | None = None
    anthropic_model: str = DEFAULT_ANTHROPIC_MODEL
    http_timeout: int = DEFAULT_TIMEOUT
    host: str = "0.0.0.0"
    port: int = 8080

    def __post_init__(self):
        # 음수 TTL은 캐시 비활성과 동일하게 취급
        if self.license_cache_ttl < 0:
            self.license_cache_ttl = 0
        if self.http_timeout < 1:
            self.http_timeout = 1

    @classmethod
    def from_env(cls) -> SpreadConfig:
        """환경변수에서 설정 로드. 없으면 안전한 기본값."""
        return cls(
            license_cache_ttl=int(os.environ.get("GUMROAD_VERIFY_CACHE_SECS", "600")),
            home_field_advantage=float(os.environ.get("CFB_HFA", "1.7")),
            gumroad_product_id=os.environ.get("GUMROAD_PRODUCT_ID_CFB") or None,
            increment_license_uses=_env_flag("GUMROAD_INCREMENT_USES", "true"),
            odds_api_key=os.environ.get("ODDS_API_KEY") or None,
            cfbd_api_key=os.environ.get("CFBD_API_KEY") or None,
            anthropic_api_key=os.environ.get("ANTHROPIC_API_KEY") or None,
            anthropic_model=os.environ.get("ANTHROPIC_MODEL", DEFAULT_ANTHROPIC_MODEL),
            http_timeout=int(os.environ.get("CFBSPREAD_HTTP_TIMEOUT", str(DEFAULT_TIMEOUT))),
            host=os.environ.get("CFBSPREAD_HOST", "0.0.0.0"),
            port=int(os.environ.get("CFBSPREAD_PORT", "8080")),
        )

    @property
    def analysis_enabled(self) -> bool:
        """Anthropic 키가 있을 때만 AI 분석 활성."""
        return bool(self.anthropic_api_key)
