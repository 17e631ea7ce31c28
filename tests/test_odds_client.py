"""Tests for The Odds API client: event matching and consensus."""

from __future__ import annotations

import asyncio
import re

import aiohttp
from aioresponses import aioresponses

from cfbspread.feeds.odds_client import OddsClient, build_odds_result, find_event

ODDS_PATTERN = re.compile(
    r"^https://api\.the-odds-api\.com/v4/sports/americanfootball_ncaaf/odds\b"
)


def _event(away: str, home: str, event_id: str = "evt") -> dict:
    return {"id": event_id, "away_team": away, "home_team": home, "bookmakers": []}


class TestFindEvent:
    def test_exact_match(self, odds_events):
        ev = find_event(odds_events, "Ohio State Buckeyes", "Michigan Wolverines")
        assert ev["id"] == "evt_osu_mich"

    def test_exact_match_ignores_case_and_punctuation(self):
        events = [_event("Miami (FL) Hurricanes", "Florida State Seminoles", "evt_1")]
        ev = find_event(events, "miami fl hurricanes", "FLORIDA STATE SEMINOLES")
        assert ev["id"] == "evt_1"

    def test_substring_fallback(self, odds_events):
        ev = find_event(odds_events, "Ohio State", "Michigan")
        assert ev["id"] == "evt_osu_mich"

    def test_both_sides_must_match(self, odds_events):
        assert find_event(odds_events, "Ohio State", "Miami") is None

    def test_orientation_matters(self, odds_events):
        assert find_event(odds_events, "Michigan", "Ohio State") is None

    def test_exact_beats_earlier_fuzzy(self):
        events = [
            _event("Michigan State Spartans", "Ohio State Buckeyes", "fuzzy"),
            _event("Michigan", "Ohio State", "exact"),
        ]
        ev = find_event(events, "Michigan", "Ohio State")
        assert ev["id"] == "exact"

    def test_first_fuzzy_wins(self):
        events = [
            _event("Michigan State Spartans", "Ohio State Buckeyes", "first"),
            _event("Michigan Wolverines", "Ohio State Buckeyes", "second"),
        ]
        ev = find_event(events, "Michigan", "Ohio State")
        assert ev["id"] == "first"

    def test_requested_name_must_be_substring_of_event(self):
        events = [_event("Ohio", "Michigan", "evt")]
        assert find_event(events, "Ohio State", "Michigan") is None

    def test_empty_names_never_match(self, odds_events):
        assert find_event(odds_events, "", "Michigan") is None
        assert find_event(odds_events, "!!!", "Michigan") is None

    def test_no_events(self):
        assert find_event([], "Ohio State", "Michigan") is None

    def test_skips_malformed_events(self):
        events = [None, "garbage", 42, _event("Ohio State", "Michigan", "evt")]
        ev = find_event(events, "Ohio State", "Michigan")
        assert ev["id"] == "evt"

    def test_skips_malformed_events_in_substring_pass(self):
        events = [None, [], _event("Ohio State Buckeyes", "Michigan Wolverines", "evt")]
        ev = find_event(events, "Ohio State", "Michigan")
        assert ev["id"] == "evt"

    def test_only_malformed_events(self):
        assert find_event([None, "x"], "Ohio State", "Michigan") is None


class TestBuildOddsResult:
    def test_no_event(self):
        result = build_odds_result(None)
        assert not result.matched
        assert result.consensus is None
        assert result.lines == []
        assert result.note

    def test_matched_event(self, michigan_event):
        result = build_odds_result(michigan_event)
        assert result.event_title == "Ohio State Buckeyes @ Michigan Wolverines"
        assert [line.book for line in result.lines] == ["draftkings", "fanduel", "betmgm"]
        assert result.consensus == 20.5
        assert result.note is None

    def test_matched_event_without_lines(self):
        result = build_odds_result(_event("Ohio State", "Michigan"))
        assert result.matched
        assert result.consensus is None
        assert "No DK/FD/MGM spread" in result.note

    def test_null_outcomes_degrade_to_note(self):
        event = _event("Ohio State", "Michigan")
        event["bookmakers"] = [
            {"key": "draftkings", "markets": [{"key": "spreads", "outcomes": [None]}]},
        ]
        result = build_odds_result(event)
        assert result.matched
        assert result.lines == []
        assert "No DK/FD/MGM spread" in result.note


class TestOddsClient:
    async def test_fetch_consensus(self, odds_events):
        with aioresponses() as m:
            m.get(ODDS_PATTERN, payload=odds_events, headers={"x-requests-remaining": "498"})
            async with OddsClient(api_key="odds_key") as client:
                result = await client.fetch_consensus("Ohio State", "Michigan")
                assert client._last_remaining == 498
        assert result.event_title == "Ohio State Buckeyes @ Michigan Wolverines"
        assert result.consensus == 20.5
        assert len(result.lines) == 3

    async def test_query_params(self, odds_events):
        with aioresponses() as m:
            m.get(ODDS_PATTERN, payload=odds_events)
            async with OddsClient(api_key="odds_key") as client:
                await client.fetch_consensus("Ohio State", "Michigan")
            (_, url), _ = next(iter(m.requests.items()))
        assert url.query["apiKey"] == "odds_key"
        assert url.query["regions"] == "us"
        assert url.query["markets"] == "spreads"
        assert url.query["oddsFormat"] == "american"

    async def test_no_match(self, odds_events):
        with aioresponses() as m:
            m.get(ODDS_PATTERN, payload=odds_events)
            async with OddsClient(api_key="odds_key") as client:
                result = await client.fetch_consensus("Alabama", "Auburn")
        assert not result.matched
        assert result.consensus is None
        assert result.note == "No matching game found in the odds feed."

    async def test_missing_api_key(self):
        async with OddsClient(api_key="") as client:
            result = await client.fetch_consensus("Ohio State", "Michigan")
        assert result.note == "ODDS_API_KEY not configured"
        assert result.lines == []

    async def test_http_error_degrades(self):
        with aioresponses() as m:
            m.get(ODDS_PATTERN, status=401, body="invalid api key")
            async with OddsClient(api_key="bad") as client:
                result = await client.fetch_consensus("Ohio State", "Michigan")
        assert not result.matched
        assert result.note == "Odds feed unavailable right now."

    async def test_timeout_degrades(self):
        with aioresponses() as m:
            m.get(ODDS_PATTERN, exception=asyncio.TimeoutError())
            async with OddsClient(api_key="odds_key") as client:
                result = await client.fetch_consensus("Ohio State", "Michigan")
        assert result.note == "Odds feed unavailable right now."

    async def test_connection_error_degrades(self):
        with aioresponses() as m:
            m.get(ODDS_PATTERN, exception=aiohttp.ClientConnectionError("refused"))
            async with OddsClient(api_key="odds_key") as client:
                result = await client.fetch_consensus("Ohio State", "Michigan")
        assert result.note == "Odds feed unavailable right now."

    async def test_non_list_body_degrades(self):
        with aioresponses() as m:
            m.get(ODDS_PATTERN, payload={"message": "quota exceeded"})
            async with OddsClient(api_key="odds_key") as client:
                assert await client.fetch_events() is None

    async def test_fetch_events_returns_list(self, odds_events):
        with aioresponses() as m:
            m.get(ODDS_PATTERN, payload=odds_events)
            async with OddsClient(api_key="odds_key") as client:
                events = await client.fetch_events()
        assert len(events) == 2

    async def test_malformed_entries_do_not_fail(self, odds_events):
        payload = [None, "garbage", *odds_events]
        with aioresponses() as m:
            m.get(ODDS_PATTERN, payload=payload)
            async with OddsClient(api_key="odds_key") as client:
                result = await client.fetch_consensus("Ohio State", "Michigan")
        assert result.consensus == 20.5
        assert len(result.lines) == 3
