"""
Football Match Predictor - FastAPI Application

Main entry point for the backend API.
This module configures the FastAPI app, middleware, and routes.
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from football_predictor.api.routes import leagues, predictions, matches
from football_predictor.api.dependencies import get_match_repository
from football_predictor.application.dtos.dtos import HealthResponseDTO, ErrorResponseDTO
from football_predictor.config import LOG_FORMAT, get_settings
from football_predictor.domain.exceptions import InvalidInputException
from football_predictor.utils.time_utils import get_current_time


# Log timestamps in the configured application timezone
class TimezoneFormatter(logging.Formatter):
    def formatTime(self, record, datefmt=None):
        ct = get_current_time()
        if datefmt:
            s = ct.strftime(datefmt)
        else:
            t = ct.strftime("%Y-%m-%d %H:%M:%S")
            s = "%s,%03d" % (t, record.msecs)
        return s


settings = get_settings()

handler = logging.StreamHandler()
handler.setFormatter(TimezoneFormatter(LOG_FORMAT))
root_logger = logging.getLogger()
root_logger.setLevel(settings.log_level.upper())
root_logger.handlers = [handler]
logger = logging.getLogger(__name__)


# Application metadata
APP_TITLE = "Football Match Predictor"
APP_DESCRIPTION = """
**Football Match Prediction API**

Turns upcoming fixtures into probabilistic match predictions.

## Models

* **Advanced** - Weighted match features and an ELO-style outcome simulation
* **Market** - Bookmaker odds blended with recent form
* **Poisson** - Independent Poisson goals from fetched goal averages

## Predictions Include

- Home Win / Draw / Away Win probabilities
- Over/Under 2.5 goals and both-teams-to-score
- Expected goals and the most likely scoreline
- Confidence score and value bets against the offered odds

---
**Educational purposes only** - Not for actual betting
"""
APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(f"Starting {APP_TITLE} v{APP_VERSION}")

    if settings.api_football_configured:
        logger.info("API-Football configured")
    else:
        logger.warning("API-Football not configured, stored matches will not refresh")

    get_match_repository().create_tables()
    logger.info("Match storage ready")

    yield

    logger.info("Shutting down...")


# Create FastAPI app
app = FastAPI(
    title=APP_TITLE,
    description=APP_DESCRIPTION,
    version=APP_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Exception handlers
@app.exception_handler(InvalidInputException)
async def invalid_input_handler(request: Request, exc: InvalidInputException):
    logger.warning(f"Invalid input: {exc}")
    return JSONResponse(
        status_code=422,
        content=ErrorResponseDTO(
            error="invalid_input",
            message=str(exc),
            details={"path": str(request.url)},
        ).model_dump(),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors."""
    logger.error(f"Unhandled error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=ErrorResponseDTO(
            error="internal_server_error",
            message="An unexpected error occurred",
            details={"path": str(request.url)},
        ).model_dump(),
    )


# Health check endpoint
@app.get(
    "/health",
    response_model=HealthResponseDTO,
    tags=["Health"],
    summary="Health check",
    description="Check if the API is running and healthy.",
)
async def health_check() -> HealthResponseDTO:
    """Health check endpoint."""
    return HealthResponseDTO(
        status="healthy",
        version=APP_VERSION,
        timestamp=get_current_time(),
    )


# Root endpoint
@app.get(
    "/",
    tags=["Root"],
    summary="API Information",
    description="Get basic API information and links.",
)
async def root():
    """Root endpoint with API info."""
    return {
        "name": APP_TITLE,
        "version": APP_VERSION,
        "documentation": "/docs",
        "health": "/health",
        "endpoints": {
            "leagues": "/api/v1/leagues",
            "predictions": "/api/v1/predictions",
            "market_predictions": "/api/v1/predictions/market",
            "odds_predictions": "/api/v1/predictions/odds",
            "matches": "/api/v1/matches",
            "enrich": "/api/v1/matches/enrich",
        },
    }


# Include routers
app.include_router(leagues.router, prefix="/api/v1")
app.include_router(predictions.router, prefix="/api/v1")
app.include_router(matches.router, prefix="/api/v1")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "football_predictor.api.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=True,
    )
