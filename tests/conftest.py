"""Shared test fixtures for cfbspread."""

from __future__ import annotations

import pytest

from cfbspread.config import SpreadConfig


def _bookmaker(key: str, home: str, away: str, home_point, away_point=None) -> dict:
    """Odds API bookmaker entry with a single spreads market."""
    if away_point is None and isinstance(home_point, (int, float)):
        away_point = -home_point
    return {
        "key": key,
        "title": key.title(),
        "last_update": "2024-11-30T15:00:00Z",
        "markets": [
            {
                "key": "spreads",
                "last_update": "2024-11-30T15:00:00Z",
                "outcomes": [
                    {"name": home, "price": -110, "point": home_point},
                    {"name": away, "price": -110, "point": away_point},
                ],
            }
        ],
    }


@pytest.fixture
def make_bookmaker():
    """Factory for Odds API bookmaker entries."""
    return _bookmaker


@pytest.fixture
def config() -> SpreadConfig:
    """Fully configured service (AI analysis off)."""
    return SpreadConfig(
        gumroad_product_id="prod_cfb",
        odds_api_key="odds_key",
        cfbd_api_key="cfbd_key",
        home_field_advantage=1.7,
    )


@pytest.fixture
def michigan_event() -> dict:
    """Raw Odds API event: Ohio State @ Michigan with four books."""
    home, away = "Michigan Wolverines", "Ohio State Buckeyes"
    return {
        "id": "evt_osu_mich",
        "sport_key": "americanfootball_ncaaf",
        "commence_time": "2024-11-30T17:00:00Z",
        "home_team": home,
        "away_team": away,
        "bookmakers": [
            _bookmaker("fanduel", home, away, 20.5),
            _bookmaker("draftkings", home, away, 19.5),
            _bookmaker("bovada", home, away, 25.0),
            _bookmaker("betmgm", home, away, 21.0),
        ],
    }


@pytest.fixture
def odds_events(michigan_event) -> list[dict]:
    """Raw Odds API response with several events."""
    return [
        {
            "id": "evt_miami",
            "home_team": "Miami Hurricanes",
            "away_team": "Syracuse Orange",
            "bookmakers": [
                _bookmaker("draftkings", "Miami Hurricanes", "Syracuse Orange", -10.5),
            ],
        },
        michigan_event,
    ]
