"""
Application Use Cases Module

Use cases represent application-specific business rules and orchestrate
the flow of data between the domain layer and the infrastructure layer.
"""

import asyncio
import logging
from typing import Optional

from pydantic import ValidationError

from football_predictor.application.dtos.dtos import (
    APIFootballFixtureDTO,
    LeagueConfigDTO,
    LeagueSummaryDTO,
    LeaguesResponseDTO,
    MarketPredictionRequestDTO,
    MatchPredictionRequestDTO,
    OddsDTO,
    PredictionDTO,
    StoredMatchesResponseDTO,
)
from football_predictor.domain.entities.entities import EnrichedMatch, Fixture, LeagueConfig
from football_predictor.domain.exceptions import DataSourceException, InvalidInputException
from football_predictor.domain.services.league_service import LeagueService
from football_predictor.domain.services.prediction_service import PredictionService
from football_predictor.domain.services.synthetic_data_service import SyntheticDataGenerator
from football_predictor.infrastructure.data_sources.api_football import APIFootballSource
from football_predictor.infrastructure.repositories.match_repository import MatchRepository


logger = logging.getLogger(__name__)


def _resolve_league_config(
    league_config: Optional[LeagueConfigDTO],
    sport_key: Optional[str],
) -> Optional[LeagueConfig]:
    if league_config is not None:
        return league_config.to_entity()
    if sport_key:
        return LeagueService.get_league_config(sport_key)
    return None


def parse_api_football_fixtures(raw_fixtures: list[dict]) -> list[Fixture]:
    """Validate raw API-Football fixtures; malformed records are skipped."""
    fixtures = []
    for raw in raw_fixtures:
        try:
            fixtures.append(APIFootballFixtureDTO.model_validate(raw).to_entity())
        except (ValidationError, InvalidInputException) as e:
            logger.warning(f"Skipping malformed API-Football fixture: {e}")
    return fixtures


class PredictMatchUseCase:
    """Use case for the advanced prediction of one match."""

    def __init__(self, prediction_service: PredictionService):
        self.prediction_service = prediction_service

    def execute(self, request: MatchPredictionRequestDTO) -> PredictionDTO:
        league_config = _resolve_league_config(request.league_config, request.sport_key)
        prediction = self.prediction_service.generate_prediction(request.to_context(league_config))
        return PredictionDTO.from_entity(prediction)


class MarketPredictionUseCase:
    """Use case for the market-blended prediction."""

    def __init__(self, prediction_service: PredictionService):
        self.prediction_service = prediction_service

    def execute(self, request: MarketPredictionRequestDTO) -> PredictionDTO:
        prediction = self.prediction_service.generate_market_prediction(
            odds=request.odds.to_entity(),
            home_stats=request.home_stats.to_entity(),
            away_stats=request.away_stats.to_entity(),
            league_config=_resolve_league_config(request.league_config, request.sport_key),
        )
        return PredictionDTO.from_entity(prediction)


class OddsPredictionUseCase:
    """Use case for the prediction from bookmaker prices alone."""

    def __init__(self, prediction_service: PredictionService):
        self.prediction_service = prediction_service

    def execute(self, odds: OddsDTO) -> PredictionDTO:
        return PredictionDTO.from_entity(self.prediction_service.generate_odds_prediction(odds.to_entity()))


class GetLeagueConfigUseCase:
    """Use case for league configuration lookups."""

    def execute(self, sport_key: str, sport_title: Optional[str] = None) -> LeagueConfigDTO:
        return LeagueConfigDTO.from_entity(LeagueService.get_league_config(sport_key, sport_title))

    def list_known(self) -> LeaguesResponseDTO:
        leagues = [
            LeagueSummaryDTO(sport_key=key, config=LeagueConfigDTO.from_entity(config))
            for key, config in LeagueService.list_known_leagues().items()
        ]
        return LeaguesResponseDTO(leagues=leagues, total=len(leagues))


class EnrichMatchesUseCase:
    """
    Use case for turning fixtures into predicted matches.

    Odds-feed fixtures get synthetic inputs and the advanced model;
    API-Football fixtures get fetched goal averages and the Poisson model.
    """

    def __init__(
        self,
        prediction_service: PredictionService,
        api_football: Optional[APIFootballSource] = None,
        request_delay_seconds: float = 0.2,
    ):
        self.prediction_service = prediction_service
        self.api_football = api_football
        self.request_delay_seconds = request_delay_seconds

    def enrich_fixture(self, fixture: Fixture) -> EnrichedMatch:
        league_config = LeagueService.get_league_config(fixture.sport_key, fixture.sport_title)
        context = SyntheticDataGenerator.build_match_context(
            fixture.home_team.name,
            fixture.away_team.name,
            league_config=league_config,
            odds=fixture.odds,
        )
        prediction = self.prediction_service.generate_prediction(context, data_source="synthetic")
        return EnrichedMatch(fixture=fixture, prediction=prediction, context=context)

    def enrich_fixtures(self, fixtures: list[Fixture]) -> list[EnrichedMatch]:
        return [self.enrich_fixture(fixture) for fixture in fixtures]

    async def enrich_api_football_fixture(self, fixture: Fixture) -> EnrichedMatch:
        """Prediction from the goal averages of both teams (fallback averages when unavailable)."""
        if self.api_football is None:
            raise DataSourceException("API-Football source not available")

        home_averages = await self.api_football.fetch_team_stats_with_fallback(
            fixture.home_team.id, True, fixture.season, fixture.league_id
        )
        away_averages = await self.api_football.fetch_team_stats_with_fallback(
            fixture.away_team.id, False, fixture.season, fixture.league_id
        )

        home_stats = SyntheticDataGenerator.generate_team_stats_from_averages(
            fixture.home_team.name, home_averages, is_home=True
        )
        away_stats = SyntheticDataGenerator.generate_team_stats_from_averages(
            fixture.away_team.name, away_averages, is_home=False
        )
        prediction = self.prediction_service.generate_poisson_prediction(home_stats, away_stats)
        return EnrichedMatch(fixture=fixture, prediction=prediction)

    async def enrich_api_football_fixtures(self, fixtures: list[Fixture]) -> list[EnrichedMatch]:
        """Enrich one fixture at a time; a fixture that fails is logged and skipped."""
        enriched = []
        for index, fixture in enumerate(fixtures):
            if index > 0:
                await asyncio.sleep(self.request_delay_seconds)
            try:
                enriched.append(await self.enrich_api_football_fixture(fixture))
            except (DataSourceException, InvalidInputException) as e:
                logger.error(f"Error enriching match {fixture.id}: {e}")
        return enriched


class RefreshMatchesUseCase:
    """Use case for refreshing the stored matches when they are stale."""

    def __init__(
        self,
        api_football: APIFootballSource,
        repository: MatchRepository,
        enrich_use_case: EnrichMatchesUseCase,
        max_age_seconds: int = 3600,
    ):
        self.api_football = api_football
        self.repository = repository
        self.enrich_use_case = enrich_use_case
        self.max_age_seconds = max_age_seconds

    def _stored(self, refreshed: bool) -> StoredMatchesResponseDTO:
        matches = self.repository.get_stored_matches()
        return StoredMatchesResponseDTO(
            matches=matches,
            total=len(matches),
            last_updated=self.repository.get_last_update_time(),
            refreshed=refreshed,
        )

    async def execute(self, force: bool = False) -> StoredMatchesResponseDTO:
        """
        Fetch, enrich and store fixtures when forced or when storage is stale.

        Without an API key the stored matches are returned unchanged.
        """
        if not force and not self.repository.needs_update(self.max_age_seconds):
            logger.info("Stored matches are fresh, skipping refresh")
            return self._stored(refreshed=False)

        if not self.api_football.is_configured:
            logger.warning("API-Football not configured, returning stored matches")
            return self._stored(refreshed=False)

        raw_fixtures = await self.api_football.get_all_football_fixtures()
        fixtures = parse_api_football_fixtures(raw_fixtures)
        enriched = await self.enrich_use_case.enrich_api_football_fixtures(fixtures)

        logger.info(f"Enriched {len(enriched)} of {len(raw_fixtures)} fixtures")
        self.repository.save_matches(enriched)
        return self._stored(refreshed=True)
