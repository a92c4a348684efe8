"""
API-Football Data Source

This module integrates with API-Football (api-football.com) for upcoming
fixtures and team goal statistics. Responses are cached through an injected
CacheService and requests are limited to a per-minute budget.

API Documentation: https://www.api-football.com/documentation-v3
"""

import asyncio
import time
import logging
from dataclasses import dataclass
from typing import Callable, Optional
from urllib.parse import urlencode

import httpx

from football_predictor.config import Settings
from football_predictor.domain.constants import DEFAULT_GOALS_PER_MATCH
from football_predictor.domain.exceptions import (
    DataSourceException,
    DataSourceNotConfiguredException,
    RateLimitExceededException,
    UpstreamResponseException,
)
from football_predictor.domain.value_objects.value_objects import TeamGoalAverages
from football_predictor.infrastructure.cache.cache_service import CacheService


logger = logging.getLogger(__name__)


@dataclass
class APIFootballConfig:
    """Configuration for API-Football."""
    api_key: Optional[str] = None
    base_url: str = "https://v3.football.api-sports.io"
    timeout: int = 30
    max_requests_per_minute: int = 100
    request_delay_seconds: float = 0.5
    default_season: str = "2024"

    @classmethod
    def from_settings(cls, settings: Settings) -> "APIFootballConfig":
        return cls(
            api_key=settings.api_football_key,
            base_url=settings.api_football_base_url,
            max_requests_per_minute=settings.max_requests_per_minute,
            request_delay_seconds=settings.request_delay_seconds,
            default_season=settings.default_season,
        )


# Mapping of odds-feed sport keys to API-Football league IDs
SPORT_KEY_TO_LEAGUE_ID = {
    "soccer_epl": "39",                     # Premier League
    "soccer_spain_la_liga": "140",          # La Liga
    "soccer_germany_bundesliga": "78",      # Bundesliga
    "soccer_italy_serie_a": "135",          # Serie A
    "soccer_france_ligue_one": "61",        # Ligue 1
    "soccer_efl_champ": "40",               # Championship
    "soccer_netherlands_eredivisie": "88",  # Eredivisie
    "soccer_portugal_primeira_liga": "94",  # Primeira Liga
    "soccer_usa_mls": "253",                # MLS
    "soccer_brazil_serie_a": "71",          # Brasileirão
}

LEAGUE_ID_TO_SPORT_KEY = {league_id: key for key, league_id in SPORT_KEY_TO_LEAGUE_ID.items()}

# Leagues fetched by default (top five European leagues)
POPULAR_LEAGUE_IDS = ("39", "140", "78", "135", "61")


def sport_key_for_league(league_id: str) -> str:
    """Sport key of a league id; unmapped leagues become "league_<id>"."""
    return LEAGUE_ID_TO_SPORT_KEY.get(str(league_id), f"league_{league_id}")


class RateLimiter:
    """Fixed-window request budget; the counter resets once the window has elapsed."""

    def __init__(
        self,
        max_requests: int = 100,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._count = 0
        self._window_start = clock()

    def _reset_if_elapsed(self) -> None:
        now = self._clock()
        if now - self._window_start >= self.window_seconds:
            self._count = 0
            self._window_start = now

    def can_request(self) -> bool:
        self._reset_if_elapsed()
        return self._count < self.max_requests

    def record(self) -> None:
        self._count += 1

    @property
    def remaining(self) -> int:
        self._reset_if_elapsed()
        return max(0, self.max_requests - self._count)


class APIFootballSource:
    """
    Data source for API-Football.

    Provides upcoming fixtures and goal averages. Requires an API key.
    """

    SOURCE_NAME = "API-Football"

    def __init__(
        self,
        config: Optional[APIFootballConfig] = None,
        cache: Optional[CacheService] = None,
        client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the data source."""
        self.config = config or APIFootballConfig()
        self.cache = cache or CacheService()
        self._client = client
        self.rate_limiter = RateLimiter(self.config.max_requests_per_minute, clock=clock)

    @property
    def is_configured(self) -> bool:
        """Check if API key is configured."""
        return bool(self.config.api_key)

    @staticmethod
    def cache_key(endpoint: str, params: Optional[dict] = None) -> str:
        return f"{endpoint}?{urlencode(params or {})}"

    async def _get(self, url: str, params: dict) -> httpx.Response:
        headers = {
            "x-apisports-key": self.config.api_key,
            "Content-Type": "application/json",
        }
        if self._client is not None:
            return await self._client.get(url, headers=headers, params=params, timeout=self.config.timeout)
        async with httpx.AsyncClient() as client:
            return await client.get(url, headers=headers, params=params, timeout=self.config.timeout)

    async def fetch(self, endpoint: str, params: Optional[dict] = None) -> dict:
        """
        Make a cached, rate-limited request to API-Football.

        Args:
            endpoint: API endpoint (e.g., "/fixtures")
            params: Query parameters

        Returns:
            JSON response

        Raises:
            DataSourceNotConfiguredException: No API key
            RateLimitExceededException: Per-minute budget exhausted
            UpstreamResponseException: HTTP error, API error or unreadable payload
        """
        if not self.is_configured:
            logger.warning("API-Football not configured (no API key)")
            raise DataSourceNotConfiguredException("API-Football key not configured")

        params = {key: str(value) for key, value in (params or {}).items()}
        key = self.cache_key(endpoint, params)

        cached = self.cache.get(key)
        if cached is not None:
            logger.info(f"Using cached data for {endpoint}")
            return cached

        if not self.rate_limiter.can_request():
            logger.warning(f"API-Football rate limit reached ({self.config.max_requests_per_minute}/minute)")
            raise RateLimitExceededException("API rate limit exceeded. Try again later.")

        self.rate_limiter.record()
        logger.info(f"Fetching from API-Football: {endpoint}")

        try:
            response = await self._get(f"{self.config.base_url}{endpoint}", params)
        except httpx.HTTPError as e:
            logger.error(f"API-Football request error: {e}")
            raise UpstreamResponseException(f"Request to {endpoint} failed: {e}") from e

        remaining = response.headers.get("x-ratelimit-requests-remaining")
        if remaining:
            logger.info(f"Remaining API requests: {remaining}")

        if response.is_error:
            logger.error(f"API-Football HTTP error: {response.status_code} {response.reason_phrase}")
            raise UpstreamResponseException(f"API error: {response.status_code} {response.reason_phrase}")

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamResponseException(f"Invalid JSON from {endpoint}") from e

        if data.get("errors"):
            logger.error(f"API-Football error: {data['errors']}")
            raise UpstreamResponseException(f"API error: {data['errors']}")

        self.cache.set(key, data, self.cache.ttl_seconds)
        return data

    async def get_fixtures(self, league_id: str, season: Optional[str] = None, next_n: int = 20) -> dict:
        """Next fixtures of a league."""
        return await self.fetch("/fixtures", {
            "league": league_id,
            "season": season or self.config.default_season,
            "next": next_n,
        })

    async def get_team_stats(self, team_id: str, league_id: str, season: Optional[str] = None) -> dict:
        """Season statistics of a team in a league."""
        return await self.fetch("/teams/statistics", {
            "team": team_id,
            "league": league_id,
            "season": season or self.config.default_season,
        })

    async def get_team_recent_fixtures(
        self,
        team_id: str,
        season: Optional[str] = None,
        venue: Optional[str] = None,
        last: int = 15,
    ) -> dict:
        """Last fixtures of a team, optionally only at "home" or "away"."""
        params = {
            "team": team_id,
            "season": season or self.config.default_season,
            "last": last,
        }
        if venue:
            params["venue"] = venue
        return await self.fetch("/fixtures", params)

    async def get_leagues(self) -> dict:
        return await self.fetch("/leagues")

    async def get_all_football_fixtures(self, league_ids: tuple = POPULAR_LEAGUE_IDS) -> list[dict]:
        """
        Fixtures of several leagues, fetched one league at a time.

        A league that fails is logged and skipped.
        """
        all_fixtures = []
        for index, league_id in enumerate(league_ids):
            if index > 0:
                await asyncio.sleep(self.config.request_delay_seconds)
            try:
                logger.info(f"Fetching fixtures for league {league_id}...")
                data = await self.get_fixtures(league_id)
                all_fixtures.extend(data.get("response") or [])
            except DataSourceException as e:
                logger.error(f"Failed to fetch fixtures for league {league_id}: {e}")

        return all_fixtures

    @staticmethod
    def _average_from_fixtures(team_id: str, fixtures: list[dict]) -> Optional[TeamGoalAverages]:
        scored = conceded = matches = 0
        for fixture in fixtures:
            goals = fixture.get("goals") or {}
            home_id = str(((fixture.get("teams") or {}).get("home") or {}).get("id"))
            if home_id == str(team_id):
                scored += goals.get("home") or 0
                conceded += goals.get("away") or 0
            else:
                scored += goals.get("away") or 0
                conceded += goals.get("home") or 0
            matches += 1

        if matches == 0:
            return None
        return TeamGoalAverages(avg_scored=scored / matches, avg_conceded=conceded / matches)

    @staticmethod
    def _average_from_season(stats: dict, is_home: bool) -> TeamGoalAverages:
        venue = "home" if is_home else "away"
        played = ((stats.get("fixtures") or {}).get("played") or {}).get(venue) or 0
        if not played:
            return TeamGoalAverages(DEFAULT_GOALS_PER_MATCH, DEFAULT_GOALS_PER_MATCH, fallback=True)

        goals = stats.get("goals") or {}
        scored = (((goals.get("for") or {}).get("total")) or {}).get(venue) or 0
        conceded = (((goals.get("against") or {}).get("total")) or {}).get(venue) or 0
        return TeamGoalAverages(avg_scored=scored / played, avg_conceded=conceded / played)

    async def fetch_team_stats_with_fallback(
        self,
        team_id: str,
        is_home: bool,
        season: Optional[str] = None,
        league_id: Optional[str] = None,
    ) -> TeamGoalAverages:
        """
        Goal averages of a team at the venue it plays.

        Tries, in order: recent fixtures at that venue, season totals split by
        venue, and finally 1.3 / 1.3 flagged as fallback. Upstream failures
        also end in the fallback.
        """
        try:
            venue = "home" if is_home else "away"
            recent = await self.get_team_recent_fixtures(team_id, season, venue)
            averages = self._average_from_fixtures(team_id, recent.get("response") or [])
            if averages is not None:
                return averages

            if league_id:
                season_stats = await self.get_team_stats(team_id, league_id, season)
                if season_stats.get("response"):
                    return self._average_from_season(season_stats["response"], is_home)
        except DataSourceException as e:
            logger.warning(f"Error fetching team stats for {team_id}: {e}")

        return TeamGoalAverages(DEFAULT_GOALS_PER_MATCH, DEFAULT_GOALS_PER_MATCH, fallback=True)
