"""
Expected Goals Service

Derives the Poisson rates of both sides from attack and defense strength
relative to the league average, with a home-advantage adjustment. When only
bookmaker prices are known the rates come from the odds themselves.
"""

import math

from football_predictor.domain.constants import (
    AWAY_HOME_ADVANTAGE_FACTOR,
    DEFAULT_LEAGUE_AVG_GOALS,
    MIN_EXPECTED_GOALS,
    MIN_GOALS_AGAINST,
    MIN_ODDS_EXPECTED_GOALS,
    ODDS_GOALS_INTERCEPT,
)
from football_predictor.domain.entities.entities import LeagueConfig, TeamStats
from football_predictor.domain.value_objects.value_objects import ExpectedGoals, Odds


class ExpectedGoalsService:
    """
    League-relative expected goals.

    homeXG = home attack * away defense * league avg * (1 + league HA + team HA)
    awayXG = away attack * home defense * league avg * (1 - league HA / 2 + away form)
    """

    @staticmethod
    def calculate_expected_goals(
        home_stats: TeamStats,
        away_stats: TeamStats,
        league_config: LeagueConfig,
    ) -> ExpectedGoals:
        """
        Calculate expected goals for both teams.

        Both values are floored at 0.1 so the Poisson rate stays positive.
        """
        league_avg = league_config.avg_goals if league_config.avg_goals > 0 else DEFAULT_LEAGUE_AVG_GOALS

        home_attack = home_stats.goals_for / league_avg
        away_attack = away_stats.goals_for / league_avg
        home_defense = league_avg / max(home_stats.goals_against, MIN_GOALS_AGAINST)
        away_defense = league_avg / max(away_stats.goals_against, MIN_GOALS_AGAINST)

        home_xg = (
            home_attack * away_defense * league_avg
            * (1 + league_config.home_advantage + home_stats.home_advantage)
        )
        away_xg = (
            away_attack * home_defense * league_avg
            * (1 - league_config.home_advantage * AWAY_HOME_ADVANTAGE_FACTOR + away_stats.away_form)
        )

        return ExpectedGoals(
            home=max(MIN_EXPECTED_GOALS, home_xg),
            away=max(MIN_EXPECTED_GOALS, away_xg),
        )

    @staticmethod
    def team_expected_goals(home_stats: TeamStats, away_stats: TeamStats) -> ExpectedGoals:
        """Each side's own expected-goals rate, floored at 0.1."""
        return ExpectedGoals(
            home=max(MIN_EXPECTED_GOALS, home_stats.xg_for),
            away=max(MIN_EXPECTED_GOALS, away_stats.xg_for),
        )

    @staticmethod
    def goals_from_price(price: float) -> float:
        """Scoring rate implied by a win price: 2 - ln(price), floored at 0.2."""
        return max(MIN_ODDS_EXPECTED_GOALS, ODDS_GOALS_INTERCEPT - math.log(price))

    @staticmethod
    def expected_goals_from_odds(odds: Odds) -> ExpectedGoals:
        """Expected goals of both sides from their win prices alone."""
        return ExpectedGoals(
            home=ExpectedGoalsService.goals_from_price(odds.home),
            away=ExpectedGoalsService.goals_from_price(odds.away),
        )
