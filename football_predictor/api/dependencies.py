"""
API Dependencies Module

Provides dependency injection for FastAPI routes.
Contains factory functions for creating use case dependencies.
"""

from functools import lru_cache

from fastapi import Depends

from football_predictor.config import get_settings
from football_predictor.infrastructure.data_sources.api_football import APIFootballConfig, APIFootballSource
from football_predictor.infrastructure.cache.cache_service import get_cache_service
from football_predictor.infrastructure.database.database_service import get_database_service
from football_predictor.infrastructure.repositories.match_repository import MatchRepository
from football_predictor.domain.services.prediction_service import PredictionService
from football_predictor.application.use_cases.use_cases import (
    EnrichMatchesUseCase,
    GetLeagueConfigUseCase,
    MarketPredictionUseCase,
    OddsPredictionUseCase,
    PredictMatchUseCase,
    RefreshMatchesUseCase,
)


@lru_cache()
def get_api_football() -> APIFootballSource:
    """Get API-Football data source (cached)."""
    return APIFootballSource(
        config=APIFootballConfig.from_settings(get_settings()),
        cache=get_cache_service(),
    )


@lru_cache()
def get_prediction_service() -> PredictionService:
    """Get prediction service (cached)."""
    return PredictionService()


@lru_cache()
def get_match_repository() -> MatchRepository:
    """Get match repository (cached)."""
    return MatchRepository(get_database_service())


def get_predict_match_use_case(
    prediction_service: PredictionService = Depends(get_prediction_service),
) -> PredictMatchUseCase:
    return PredictMatchUseCase(prediction_service)


def get_market_prediction_use_case(
    prediction_service: PredictionService = Depends(get_prediction_service),
) -> MarketPredictionUseCase:
    return MarketPredictionUseCase(prediction_service)


def get_odds_prediction_use_case(
    prediction_service: PredictionService = Depends(get_prediction_service),
) -> OddsPredictionUseCase:
    return OddsPredictionUseCase(prediction_service)


def get_league_config_use_case() -> GetLeagueConfigUseCase:
    return GetLeagueConfigUseCase()


def get_enrich_matches_use_case(
    prediction_service: PredictionService = Depends(get_prediction_service),
    api_football: APIFootballSource = Depends(get_api_football),
) -> EnrichMatchesUseCase:
    return EnrichMatchesUseCase(
        prediction_service,
        api_football=api_football,
        request_delay_seconds=get_settings().enrichment_delay_seconds,
    )


def get_refresh_matches_use_case(
    api_football: APIFootballSource = Depends(get_api_football),
    repository: MatchRepository = Depends(get_match_repository),
    enrich_use_case: EnrichMatchesUseCase = Depends(get_enrich_matches_use_case),
) -> RefreshMatchesUseCase:
    return RefreshMatchesUseCase(
        api_football,
        repository,
        enrich_use_case,
        max_age_seconds=get_settings().storage_max_age_seconds,
    )
