#!/usr/bin/env python3
"""
Prediction Worker Script

Refreshes the stored matches from API-Football, or enriches the fixtures of
an odds-feed JSON file when no API key is configured, and saves the results
to the match storage. Designed to run from a scheduler or locally.
"""
import sys
import json
import asyncio
import logging
import argparse
from datetime import datetime

import pandas as pd

from football_predictor.config import LOG_FORMAT, get_settings
from football_predictor.api.dependencies import (
    get_api_football,
    get_match_repository,
    get_prediction_service,
)
from football_predictor.application.dtos.dtos import OddsEventDTO
from football_predictor.application.use_cases.use_cases import EnrichMatchesUseCase, RefreshMatchesUseCase
from football_predictor.domain.exceptions import PredictionException


logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate and store match predictions")
    parser.add_argument("--input", help="JSON file with odds-feed events (used without an API key)")
    parser.add_argument("--force", action="store_true", help="Refresh even when storage is fresh")
    parser.add_argument("--csv", help="Also export the stored matches to this CSV file")
    return parser.parse_args(argv)


def load_odds_events(path: str) -> list[OddsEventDTO]:
    with open(path, encoding="utf-8") as f:
        raw_events = json.load(f)
    return [OddsEventDTO.model_validate(raw) for raw in raw_events]


def export_csv(matches: list[dict], path: str) -> None:
    """Flatten the stored matches into one row per match."""
    frame = pd.json_normalize(matches, sep="_")
    frame.to_csv(path, index=False)
    logger.info(f"Exported {len(frame)} matches to {path}")


async def main(argv=None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT, stream=sys.stdout)

    start_time = datetime.now()
    logger.info(f"Starting prediction worker at {start_time}")

    repository = get_match_repository()
    repository.create_tables()

    enrich_use_case = EnrichMatchesUseCase(
        get_prediction_service(),
        api_football=get_api_football(),
        request_delay_seconds=settings.enrichment_delay_seconds,
    )

    try:
        if settings.api_football_configured:
            refresh = RefreshMatchesUseCase(
                get_api_football(),
                repository,
                enrich_use_case,
                max_age_seconds=settings.storage_max_age_seconds,
            )
            result = await refresh.execute(force=args.force)
            matches = result.matches
            logger.info(f"Stored matches: {result.total} (refreshed: {result.refreshed})")
        elif args.input:
            events = load_odds_events(args.input)
            enriched = enrich_use_case.enrich_fixtures([event.to_entity() for event in events])
            repository.save_matches(enriched)
            matches = repository.get_stored_matches()
            logger.info(f"Enriched {len(enriched)} fixtures from {args.input}")
        else:
            logger.error("No API-Football key configured and no --input file given")
            return 1
    except (OSError, ValueError, PredictionException) as e:
        logger.error(f"Worker failed: {e}", exc_info=True)
        return 1

    if args.csv:
        export_csv(matches, args.csv)

    duration = (datetime.now() - start_time).total_seconds()
    logger.info(f"Worker completed in {duration:.2f} seconds")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
