"""HTTP server entry point.

Usage:
    python -m cfbspread
    python -m cfbspread --port 9000 --log-level DEBUG
"""

from __future__ import annotations

import argparse
import logging

from aiohttp import web
from dotenv import load_dotenv

from cfbspread.config import SpreadConfig
from cfbspread.server.app import ROUTE, create_app

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """커맨드라인 인자 파싱."""
    parser = argparse.ArgumentParser(
        prog="cfbspread",
        description="CFB model spread vs. sportsbook consensus API",
    )
    parser.add_argument(
        "--host", type=str, default=None,
        help="Bind address (default: CFBSPREAD_HOST or 0.0.0.0)",
    )
    parser.add_argument(
        "--port", type=int, default=None,
        help="Bind port (default: CFBSPREAD_PORT or 8080)",
    )
    parser.add_argument(
        "--log-level", type=str, default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> SpreadConfig:
    """환경변수 설정 + CLI 오버라이드."""
    config = SpreadConfig.from_env()
    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port
    return config


def cli_main(argv: list[str] | None = None) -> None:
    """CLI entry point. Loads .env before reading the environment."""
    load_dotenv()
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    config = build_config(args)
    logger.info(
        "Serving %s on %s:%d (HFA %.1f, cache TTL %ds)",
        ROUTE, config.host, config.port, config.home_field_advantage,
        config.license_cache_ttl,
    )
    if not config.gumroad_product_id:
        logger.warning("GUMROAD_PRODUCT_ID_CFB not set, every request will fail with 500")

    web.run_app(create_app(config), host=config.host, port=config.port, print=None)


if __name__ == "__main__":
    cli_main()
