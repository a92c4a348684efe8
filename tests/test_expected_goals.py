"""
Unit Tests for the Expected Goals Service
"""

import math

import pytest

from football_predictor.domain.entities.entities import LeagueConfig
from football_predictor.domain.services.expected_goals_service import ExpectedGoalsService
from football_predictor.domain.value_objects.value_objects import Odds
from tests.conftest import make_team_stats


@pytest.fixture
def league():
    return LeagueConfig(name="Test League", country="Testland", avg_goals=2.5, competitiveness=0.8, home_advantage=0.1)


class TestExpectedGoalsService:
    """Tests for ExpectedGoalsService."""

    def test_league_relative_formula(self, league):
        home = make_team_stats(goals_for=1.25, goals_against=1.25)
        away = make_team_stats(goals_for=1.25, goals_against=1.25)

        xg = ExpectedGoalsService.calculate_expected_goals(home, away, league)

        # attack 0.5 * defense 2.0 * 2.5 = 2.5, then the home-advantage factors
        assert xg.home == pytest.approx(2.5 * 1.1)
        assert xg.away == pytest.approx(2.5 * 0.95)

    def test_team_modifiers(self, league):
        home = make_team_stats(goals_for=2.5, goals_against=2.5, home_advantage=0.2)
        away = make_team_stats(goals_for=2.5, goals_against=2.5, away_form=0.05)

        xg = ExpectedGoalsService.calculate_expected_goals(home, away, league)

        assert xg.home == pytest.approx(2.5 * 1.3)
        assert xg.away == pytest.approx(2.5 * 1.0)

    def test_floor_for_goalless_teams(self, league):
        home = make_team_stats(goals_for=0.0)
        away = make_team_stats(goals_for=0.0)

        xg = ExpectedGoalsService.calculate_expected_goals(home, away, league)
        assert xg.home == 0.1
        assert xg.away == 0.1

    def test_zero_league_average_falls_back(self):
        broken = LeagueConfig(name="X", country="Y", avg_goals=0.0, competitiveness=0.8, home_advantage=0.1)
        sane = LeagueConfig(name="X", country="Y", avg_goals=2.5, competitiveness=0.8, home_advantage=0.1)
        stats = make_team_stats()

        assert ExpectedGoalsService.calculate_expected_goals(stats, stats, broken) == \
            ExpectedGoalsService.calculate_expected_goals(stats, stats, sane)

    def test_team_expected_goals(self):
        home = make_team_stats(xg_for=1.8)
        away = make_team_stats(xg_for=0.0)

        xg = ExpectedGoalsService.team_expected_goals(home, away)
        assert (xg.home, xg.away) == (1.8, 0.1)
        assert str(xg) == "1.8 - 0.1"


class TestOddsExpectedGoals:
    """Tests for the goal rates implied by win prices."""

    @pytest.mark.parametrize("price,expected", [
        (1.0, 2.0),
        (2.0, 2 - math.log(2.0)),
        (math.e, 1.0),
        (10.0, 0.2),
        (50.0, 0.2),
    ])
    def test_goals_from_price(self, price, expected):
        assert ExpectedGoalsService.goals_from_price(price) == pytest.approx(expected)

    def test_expected_goals_from_odds(self):
        xg = ExpectedGoalsService.expected_goals_from_odds(Odds(home=1.5, draw=4.0, away=6.0))

        assert xg.home == pytest.approx(2 - math.log(1.5))
        assert xg.away == pytest.approx(2 - math.log(6.0))
        assert str(xg) == "1.6 - 0.2"
