"""
Leagues Router

API endpoints for league configurations.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from football_predictor.application.dtos.dtos import LeagueConfigDTO, LeaguesResponseDTO, ErrorResponseDTO
from football_predictor.application.use_cases.use_cases import GetLeagueConfigUseCase
from football_predictor.api.dependencies import get_league_config_use_case


router = APIRouter(prefix="/leagues", tags=["Leagues"])


@router.get(
    "",
    response_model=LeaguesResponseDTO,
    responses={
        500: {"model": ErrorResponseDTO, "description": "Internal server error"},
    },
    summary="Get known leagues",
    description="Returns the built-in configuration of every known league.",
)
async def get_leagues(
    use_case: GetLeagueConfigUseCase = Depends(get_league_config_use_case),
) -> LeaguesResponseDTO:
    """Get all known leagues."""
    return use_case.list_known()


@router.get(
    "/{sport_key}/config",
    response_model=LeagueConfigDTO,
    summary="Get league configuration",
    description=(
        "Configuration of a league by sport key. Unknown leagues get a "
        "deterministic configuration derived from the sport key."
    ),
)
async def get_league_config(
    sport_key: str,
    sport_title: Optional[str] = Query(default=None, description="Display name for unknown leagues"),
    use_case: GetLeagueConfigUseCase = Depends(get_league_config_use_case),
) -> LeagueConfigDTO:
    return use_case.execute(sport_key, sport_title)
