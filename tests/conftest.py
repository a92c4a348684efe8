"""
Shared fixtures for the test suite.
"""

import pytest

from football_predictor.domain.entities.entities import (
    HeadToHead,
    HistoricalData,
    MarketData,
    MatchContext,
    MotivationFactors,
    PlayerData,
    TeamStats,
    VenueData,
)
from football_predictor.domain.value_objects.value_objects import Odds


def make_team_stats(form="WDWDL", goals_for=1.25, goals_against=1.25, xg_for=1.25, xg_against=1.25, **kwargs):
    return TeamStats(
        form=form,
        goals_for=goals_for,
        goals_against=goals_against,
        xg_for=xg_for,
        xg_against=xg_against,
        **kwargs,
    )


def make_context(home_stats=None, away_stats=None, odds=None, league_config=None, venue=None):
    """Neutral match context: identical squads and motivation on both sides."""
    odds = odds or Odds(home=2.0, draw=3.2, away=4.0)
    players = PlayerData(key_players_available=10, top_scorer_available=True, fitness_score=90)
    motivation = MotivationFactors(
        match_importance=6,
        league_position_pressure=5,
        recent_form_momentum=5,
        revenge_factor=2,
        fixture_congestion=4,
        rest_days=4,
    )
    return MatchContext(
        home_stats=home_stats or make_team_stats(),
        away_stats=away_stats or make_team_stats(),
        historical=HistoricalData(head_to_head=HeadToHead()),
        home_players=players,
        away_players=players,
        venue=venue or VenueData(home_advantage_factor=0.1),
        market=MarketData.from_odds(opening_odds=odds, current_odds=odds),
        home_motivation=motivation,
        away_motivation=motivation,
        league_config=league_config,
    )


@pytest.fixture
def neutral_context():
    return make_context()
