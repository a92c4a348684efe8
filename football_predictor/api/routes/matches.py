"""
Matches Router

API endpoints for enriched matches: enrichment of odds-feed fixtures and
the stored matches of the last API-Football refresh.
"""

import logging

from fastapi import APIRouter, Depends, Query

from football_predictor.application.dtos.dtos import (
    EnrichedMatchDTO,
    EnrichMatchesRequestDTO,
    EnrichMatchesResponseDTO,
    ErrorResponseDTO,
    StoredMatchesResponseDTO,
)
from football_predictor.application.use_cases.use_cases import EnrichMatchesUseCase, RefreshMatchesUseCase
from football_predictor.api.dependencies import get_enrich_matches_use_case, get_refresh_matches_use_case
from football_predictor.domain.exceptions import InvalidInputException


router = APIRouter(prefix="/matches", tags=["Matches"])
logger = logging.getLogger(__name__)


@router.get(
    "",
    response_model=StoredMatchesResponseDTO,
    responses={
        500: {"model": ErrorResponseDTO, "description": "Internal server error"},
    },
    summary="Get stored matches",
    description=(
        "Returns the enriched matches of the last refresh. Stale storage is "
        "refreshed from API-Football first when an API key is configured."
    ),
)
async def get_matches(
    force: bool = Query(default=False, description="Refresh even when storage is fresh"),
    use_case: RefreshMatchesUseCase = Depends(get_refresh_matches_use_case),
) -> StoredMatchesResponseDTO:
    return await use_case.execute(force=force)


@router.post(
    "/enrich",
    response_model=EnrichMatchesResponseDTO,
    responses={
        422: {"model": ErrorResponseDTO, "description": "Invalid fixtures"},
        500: {"model": ErrorResponseDTO, "description": "Internal server error"},
    },
    summary="Enrich odds-feed fixtures",
    description="Generates the match context of each fixture and predicts it with the advanced model.",
)
async def enrich_matches(
    request: EnrichMatchesRequestDTO,
    use_case: EnrichMatchesUseCase = Depends(get_enrich_matches_use_case),
) -> EnrichMatchesResponseDTO:
    """Enrich fixtures; fixtures that cannot be enriched are counted as skipped."""
    matches = []
    skipped = 0
    for event in request.fixtures:
        try:
            enriched = use_case.enrich_fixture(event.to_entity())
        except InvalidInputException as e:
            logger.warning(f"Skipping fixture {event.id}: {e}")
            skipped += 1
            continue
        matches.append(EnrichedMatchDTO.from_entity(enriched))

    return EnrichMatchesResponseDTO(matches=matches, skipped=skipped)
