"""
Predictions Router

API endpoints for single-match predictions.
"""

from fastapi import APIRouter, Depends

from football_predictor.application.dtos.dtos import (
    ErrorResponseDTO,
    MarketPredictionRequestDTO,
    MatchPredictionRequestDTO,
    OddsDTO,
    PredictionDTO,
)
from football_predictor.application.use_cases.use_cases import (
    MarketPredictionUseCase,
    OddsPredictionUseCase,
    PredictMatchUseCase,
)
from football_predictor.api.dependencies import (
    get_market_prediction_use_case,
    get_odds_prediction_use_case,
    get_predict_match_use_case,
)


router = APIRouter(prefix="/predictions", tags=["Predictions"])


@router.post(
    "",
    response_model=PredictionDTO,
    responses={
        422: {"model": ErrorResponseDTO, "description": "Invalid match context"},
        500: {"model": ErrorResponseDTO, "description": "Internal server error"},
    },
    summary="Predict a match",
    description=(
        "Runs the advanced model on a full match context: team stats, head-to-head, "
        "players, venue, market and motivation."
    ),
)
async def predict_match(
    request: MatchPredictionRequestDTO,
    use_case: PredictMatchUseCase = Depends(get_predict_match_use_case),
) -> PredictionDTO:
    """Advanced prediction for one match."""
    return use_case.execute(request)


@router.post(
    "/market",
    response_model=PredictionDTO,
    responses={
        422: {"model": ErrorResponseDTO, "description": "Invalid odds or team stats"},
        500: {"model": ErrorResponseDTO, "description": "Internal server error"},
    },
    summary="Predict a match from the market",
    description="Blends the bookmaker's implied probabilities with the recent form of both teams.",
)
async def predict_match_from_market(
    request: MarketPredictionRequestDTO,
    use_case: MarketPredictionUseCase = Depends(get_market_prediction_use_case),
) -> PredictionDTO:
    return use_case.execute(request)


@router.post(
    "/odds",
    response_model=PredictionDTO,
    responses={
        422: {"model": ErrorResponseDTO, "description": "Invalid odds"},
        500: {"model": ErrorResponseDTO, "description": "Internal server error"},
    },
    summary="Predict a match from the odds alone",
    description="Fallback for fixtures without team statistics: implied probabilities and odds-derived goals.",
)
async def predict_match_from_odds(
    odds: OddsDTO,
    use_case: OddsPredictionUseCase = Depends(get_odds_prediction_use_case),
) -> PredictionDTO:
    return use_case.execute(odds)
