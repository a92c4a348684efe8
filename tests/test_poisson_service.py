"""
Unit Tests for Poisson Service

Tests the goal distribution and the scoreline grid aggregations.
"""

import math

import pytest

from football_predictor.domain.exceptions import InvalidInputException
from football_predictor.domain.services.poisson_service import PoissonService


class TestPoissonProbability:
    """Tests for the probability mass function."""

    def test_known_values(self):
        # P(X=2) when λ=2 should be about 0.27
        assert 0.26 < PoissonService.poisson_probability(2.0, 2) < 0.28
        # P(X=0) when λ=1 should be about 0.37
        assert 0.36 < PoissonService.poisson_probability(1.0, 0) < 0.38

    @pytest.mark.parametrize("expected", [0.3, 1.0, 1.5, 3.0])
    def test_distribution_sums_to_one(self, expected):
        total = sum(PoissonService.get_poisson_distribution(expected, 20))
        assert abs(1 - total) < 1e-6

    def test_zero_rate_is_degenerate(self):
        assert PoissonService.poisson_probability(0.0, 0) == 1.0
        assert PoissonService.poisson_probability(0.0, 3) == 0.0

    def test_negative_goal_count_rejected(self):
        with pytest.raises(InvalidInputException):
            PoissonService.poisson_probability(1.5, -1)

    def test_factorial(self):
        assert PoissonService.factorial(0) == 1
        assert PoissonService.factorial(5) == 120
        with pytest.raises(InvalidInputException):
            PoissonService.factorial(-1)


class TestScorelineGrid:
    """Tests for the joint scoreline aggregations."""

    @pytest.mark.parametrize("home_xg,away_xg", [(1.5, 1.1), (2.8, 0.4), (0.6, 2.2)])
    def test_outcomes_partition_the_grid(self, home_xg, away_xg):
        probs = PoissonService.calculate_outcome_probabilities(home_xg, away_xg, max_goals=6)

        home_tail = 1 - sum(PoissonService.get_poisson_distribution(home_xg, 6))
        away_tail = 1 - sum(PoissonService.get_poisson_distribution(away_xg, 6))
        shortfall = 1 - probs.total

        assert shortfall >= -1e-12
        assert shortfall <= home_tail + away_tail + 1e-12

    def test_full_grid_covers_everything(self):
        total = PoissonService.joint_scoreline_sum(1.4, 1.2, 20, lambda h, a: True)
        assert total == pytest.approx(1.0, abs=1e-6)

    def test_stronger_home_side_is_favoured(self):
        probs = PoissonService.calculate_outcome_probabilities(2.0, 0.8)
        assert probs.home > probs.away
        assert probs.home > probs.draw

    def test_over_under_complement_on_grid(self):
        over, under = PoissonService.calculate_over_under_probability(1.6, 1.2)
        assert over + under == pytest.approx(1.0, abs=1e-4)

    def test_btts_matches_closed_form(self):
        home_xg, away_xg = 1.5, 1.2
        expected = (1 - math.exp(-home_xg)) * (1 - math.exp(-away_xg))
        assert PoissonService.calculate_btts_probability(home_xg, away_xg) == pytest.approx(expected, abs=2e-3)

    def test_btts_impossible_without_away_goals(self):
        assert PoissonService.calculate_btts_probability(2.0, 0.0) == 0.0


class TestMostLikelyScoreline:
    """Tests for the most likely exact score."""

    def test_dominant_home_side(self):
        score, prob = PoissonService.most_likely_scoreline(3.0, 0.3)

        # λ=3 gives equal mass to 2 and 3 goals
        assert str(score) in ("2-0", "3-0")
        assert score.home > score.away
        assert 0 < prob < 1

    def test_low_scoring_match(self):
        score, _ = PoissonService.most_likely_scoreline(0.4, 0.3)
        assert str(score) == "0-0"

    def test_scoreline_markets(self):
        markets = PoissonService.calculate_scoreline_markets(3.0, 0.3)
        assert markets.over_25_probability > 0.5
        assert markets.btts_probability < 0.3
        assert markets.most_likely_score.home > markets.most_likely_score.away
