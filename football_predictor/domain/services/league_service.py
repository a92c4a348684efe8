"""
League Service Module

Maps a sport key (e.g. "soccer_epl" or "league_39") to the league constants
used to normalise team statistics.
"""

import functools
from typing import Optional

from football_predictor.domain.constants import LEAGUE_CONFIGS
from football_predictor.domain.entities.entities import LeagueConfig
from football_predictor.domain.services.synthetic_data_service import SeededRandom


class LeagueService:
    """Known leagues come from a fixed table; anything else gets a seeded config."""

    @staticmethod
    def country_from_sport_key(sport_key: str) -> str:
        """Second underscore-separated segment, capitalised; "International" otherwise."""
        parts = sport_key.split("_")
        if len(parts) > 1 and parts[1]:
            return parts[1][0].upper() + parts[1][1:]
        return "International"

    @staticmethod
    def is_known(sport_key: str) -> bool:
        return sport_key in LEAGUE_CONFIGS

    @staticmethod
    @functools.lru_cache(maxsize=256)
    def get_league_config(sport_key: str, sport_title: Optional[str] = None) -> LeagueConfig:
        """
        League configuration for a sport key.

        Args:
            sport_key: Provider sport key
            sport_title: Display name used for unknown leagues

        Returns:
            LeagueConfig (deterministic for the same arguments)
        """
        known = LEAGUE_CONFIGS.get(sport_key)
        if known:
            return LeagueConfig(**known)

        rng = SeededRandom(sport_key)
        return LeagueConfig(
            name=sport_title or sport_key,
            country=LeagueService.country_from_sport_key(sport_key),
            avg_goals=round(rng.uniform(2.2, 3.0), 1),
            competitiveness=round(rng.uniform(0.7, 0.95), 2),
            home_advantage=round(rng.uniform(0.1, 0.2), 2),
        )

    @staticmethod
    def list_known_leagues() -> dict[str, LeagueConfig]:
        return {key: LeagueConfig(**values) for key, values in LEAGUE_CONFIGS.items()}
