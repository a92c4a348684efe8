"""
Unit Tests for the API-Football Data Source

The upstream API is replaced with an httpx.MockTransport.
"""

import asyncio

import httpx
import pytest

from football_predictor.domain.exceptions import (
    DataSourceNotConfiguredException,
    RateLimitExceededException,
    UpstreamResponseException,
)
from football_predictor.infrastructure.cache.cache_service import CacheService
from football_predictor.infrastructure.data_sources.api_football import (
    APIFootballConfig,
    APIFootballSource,
    RateLimiter,
    sport_key_for_league,
)


def _fixture(home_id, away_id, home_goals, away_goals):
    return {
        "fixture": {"id": home_id * 1000 + away_id},
        "teams": {"home": {"id": home_id, "name": f"Team {home_id}"}, "away": {"id": away_id, "name": f"Team {away_id}"}},
        "goals": {"home": home_goals, "away": away_goals},
    }


def run_with_source(handler, coroutine_factory, config=None, cache=None, clock=None):
    """Run ``coroutine_factory(source)`` against a mocked upstream."""
    config = config or APIFootballConfig(api_key="test-key", request_delay_seconds=0)

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            kwargs = {"clock": clock} if clock else {}
            source = APIFootballSource(config=config, cache=cache or CacheService(), client=client, **kwargs)
            return await coroutine_factory(source)

    return asyncio.run(run())


class TestRateLimiter:
    """Tests for the per-minute budget."""

    def test_budget_and_reset(self):
        now = [0.0]
        limiter = RateLimiter(max_requests=2, clock=lambda: now[0])

        limiter.record()
        limiter.record()
        assert limiter.can_request() is False
        assert limiter.remaining == 0

        now[0] = 60.0
        assert limiter.can_request() is True
        assert limiter.remaining == 2


class TestFetch:
    """Tests for APIFootballSource.fetch."""

    def test_not_configured(self):
        source = APIFootballSource(config=APIFootballConfig(api_key=None))

        assert source.is_configured is False
        with pytest.raises(DataSourceNotConfiguredException):
            asyncio.run(source.fetch("/leagues"))

    def test_sends_key_and_caches(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={"response": [{"id": 1}], "errors": []})

        async def fetch_twice(source):
            first = await source.fetch("/fixtures", {"league": 39, "next": 5})
            second = await source.fetch("/fixtures", {"league": 39, "next": 5})
            return first, second

        first, second = run_with_source(handler, fetch_twice)

        assert first == second == {"response": [{"id": 1}], "errors": []}
        assert len(calls) == 1
        assert calls[0].headers["x-apisports-key"] == "test-key"
        assert calls[0].url.params["league"] == "39"

    def test_rate_limit(self):
        def handler(request):
            return httpx.Response(200, json={"response": []})

        now = [0.0]
        config = APIFootballConfig(api_key="k", max_requests_per_minute=1)

        async def fetch_two(source):
            await source.fetch("/leagues")
            with pytest.raises(RateLimitExceededException):
                await source.fetch("/fixtures", {"league": 39})
            now[0] = 61.0
            return await source.fetch("/fixtures", {"league": 39})

        assert run_with_source(handler, fetch_two, config=config, clock=lambda: now[0]) == {"response": []}

    def test_http_error(self):
        def handler(request):
            return httpx.Response(500, json={"message": "boom"})

        with pytest.raises(UpstreamResponseException):
            run_with_source(handler, lambda source: source.fetch("/leagues"))

    def test_api_errors_field(self):
        def handler(request):
            return httpx.Response(200, json={"errors": {"token": "Invalid key"}, "response": []})

        with pytest.raises(UpstreamResponseException):
            run_with_source(handler, lambda source: source.fetch("/leagues"))

    def test_invalid_json(self):
        def handler(request):
            return httpx.Response(200, content=b"<html>not json</html>")

        with pytest.raises(UpstreamResponseException):
            run_with_source(handler, lambda source: source.fetch("/leagues"))

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        with pytest.raises(UpstreamResponseException):
            run_with_source(handler, lambda source: source.fetch("/leagues"))


class TestFixtures:
    """Tests for the fixture operations."""

    def test_all_fixtures_skip_failing_league(self):
        def handler(request):
            league = request.url.params["league"]
            if league == "140":
                return httpx.Response(503)
            return httpx.Response(200, json={"response": [{"league": league}]})

        fixtures = run_with_source(handler, lambda source: source.get_all_football_fixtures(("39", "140", "78")))

        assert fixtures == [{"league": "39"}, {"league": "78"}]

    def test_sport_key_mapping(self):
        assert sport_key_for_league("39") == "soccer_epl"
        assert sport_key_for_league("999") == "league_999"


class TestTeamStatsWithFallback:
    """Tests for fetch_team_stats_with_fallback."""

    def test_average_from_recent_fixtures(self):
        def handler(request):
            assert request.url.params["venue"] == "home"
            return httpx.Response(200, json={"response": [_fixture(33, 40, 2, 1), _fixture(33, 50, 0, 0)]})

        averages = run_with_source(handler, lambda source: source.fetch_team_stats_with_fallback("33", True))

        assert averages.avg_scored == 1.0
        assert averages.avg_conceded == 0.5
        assert averages.fallback is False

    def test_away_side_perspective(self):
        def handler(request):
            return httpx.Response(200, json={"response": [_fixture(40, 33, 3, 1)]})

        averages = run_with_source(handler, lambda source: source.fetch_team_stats_with_fallback("33", False))

        assert (averages.avg_scored, averages.avg_conceded) == (1.0, 3.0)

    def test_season_totals_when_no_recent_fixtures(self):
        def handler(request):
            if request.url.path == "/teams/statistics":
                return httpx.Response(200, json={"response": {
                    "fixtures": {"played": {"home": 10, "away": 9}},
                    "goals": {
                        "for": {"total": {"home": 20, "away": 9}},
                        "against": {"total": {"home": 5, "away": 18}},
                    },
                }})
            return httpx.Response(200, json={"response": []})

        averages = run_with_source(
            handler, lambda source: source.fetch_team_stats_with_fallback("33", True, league_id="39")
        )

        assert (averages.avg_scored, averages.avg_conceded) == (2.0, 0.5)

    def test_fallback_on_upstream_failure(self):
        def handler(request):
            return httpx.Response(500)

        averages = run_with_source(handler, lambda source: source.fetch_team_stats_with_fallback("33", True, league_id="39"))

        assert (averages.avg_scored, averages.avg_conceded) == (1.3, 1.3)
        assert averages.fallback is True

    def test_fallback_when_nothing_known(self):
        def handler(request):
            return httpx.Response(200, json={"response": []})

        averages = run_with_source(handler, lambda source: source.fetch_team_stats_with_fallback("33", False))
        assert averages.fallback is True
