"""aiohttp web application exposing POST /api/bet-analysis.

Status mapping:
    401 missing/invalid/inactive license
    500 missing GUMROAD_PRODUCT_ID_CFB
    400 malformed body or missing team names
    200 {"ok": false} for any unexpected fault (client always gets JSON)
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from aiohttp import web

from cfbspread.analysis.provider import AnalysisProvider
from cfbspread.config import SpreadConfig
from cfbspread.feeds.odds_client import OddsClient
from cfbspread.feeds.ratings_client import FPIClient
from cfbspread.license.cache import LicenseCache
from cfbspread.license.verifier import GumroadVerifier
from cfbspread.server.service import BetAnalysisService, parse_matchup

logger = logging.getLogger(__name__)

ROUTE = "/api/bet-analysis"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}

SERVICE_KEY = web.AppKey("service", BetAnalysisService)

_BEARER = re.compile(r"^Bearer\s+", re.IGNORECASE)


def bearer_token(header: Optional[str]) -> str:
    """"Bearer <key>" → "<key>". Empty string if absent."""
    return _BEARER.sub("", header or "").strip()


@web.middleware
async def cors_middleware(request: web.Request, handler) -> web.StreamResponse:
    """북마클릿용 CORS 헤더를 모든 응답에 추가."""
    try:
        resp = await handler(request)
    except web.HTTPException as exc:
        exc.headers.update(CORS_HEADERS)
        raise
    resp.headers.update(CORS_HEADERS)
    return resp


async def handle_bet_analysis(request: web.Request) -> web.StreamResponse:
    if request.method == "OPTIONS":
        return web.Response(status=200)
    if request.method != "POST":
        return web.json_response({"error": "Method not allowed"}, status=405)

    service = request.app[SERVICE_KEY]
    try:
        license_key = bearer_token(request.headers.get("Authorization"))
        if not license_key:
            return web.json_response({"error": "Unauthorized"}, status=401)

        if not service.config.gumroad_product_id:
            logger.error("GUMROAD_PRODUCT_ID_CFB is not configured")
            return web.json_response({"error": "Missing GUMROAD_PRODUCT_ID_CFB"}, status=500)

        verdict = await service.authorize(license_key)
        if not verdict.ok:
            return web.json_response(
                {"error": f"Unauthorized ({verdict.reason})"}, status=401,
            )

        try:
            body = await request.json()
        except ValueError:
            return web.json_response({"error": "Invalid JSON body."}, status=400)

        matchup, error = parse_matchup(body)
        if error:
            return web.json_response({"error": error}, status=400)

        return web.json_response(await service.analyze(matchup))

    except Exception as exc:
        logger.exception("Unhandled error in bet analysis")
        return web.json_response({"ok": False, "error": str(exc) or "Unexpected error"})


async def _service_lifecycle(app: web.Application):
    service = app[SERVICE_KEY]
    await service.open()
    yield
    await service.close()


def create_app(
    config: Optional[SpreadConfig] = None,
    *,
    cache: Optional[LicenseCache] = None,
    verifier: Optional[GumroadVerifier] = None,
    ratings: Optional[FPIClient] = None,
    odds: Optional[OddsClient] = None,
    analysis: Optional[AnalysisProvider] = None,
) -> web.Application:
    """Build the web app. Collaborators are injectable for tests."""
    config = config or SpreadConfig.from_env()
    app = web.Application(middlewares=[cors_middleware])
    app[SERVICE_KEY] = BetAnalysisService(
        config,
        cache=cache,
        verifier=verifier,
        ratings=ratings,
        odds=odds,
        analysis=analysis,
    )
    app.cleanup_ctx.append(_service_lifecycle)
    app.router.add_route("*", ROUTE, handle_bet_analysis)
    return app
