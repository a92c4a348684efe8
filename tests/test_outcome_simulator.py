"""
Unit Tests for the Outcome Simulator
"""

from dataclasses import replace

import pytest

from football_predictor.domain.exceptions import InvalidInputException
from football_predictor.domain.services.ml_feature_extractor import MLFeatureExtractor
from football_predictor.domain.services.outcome_simulator import OutcomeSimulator
from football_predictor.domain.value_objects.value_objects import MLFeatures


def _features(**overrides) -> MLFeatures:
    base = MLFeatures(
        home_team_elo=1650,
        away_team_elo=1650,
        home_form_weighted=0.5,
        away_form_weighted=0.5,
        h2h_win_rate=0.0,
        home_xg_diff=0.0,
        away_xg_diff=0.0,
        home_attack_strength=1.0,
        away_attack_strength=1.0,
        home_defense_strength=1.0,
        away_defense_strength=1.0,
        home_key_players_score=0.8,
        away_key_players_score=0.8,
        venue_advantage=0.0,
        motivation_differential=0.0,
        market_confidence=0.3,
        league_competitiveness=0.8,
        season_stage=0.5,
    )
    return replace(base, **overrides)


class TestOutcomeSimulator:
    """Tests for OutcomeSimulator."""

    def test_elo_expectation(self):
        assert OutcomeSimulator.elo_expectation(0) == 0.5
        assert OutcomeSimulator.elo_expectation(400) == pytest.approx(10 / 11)

    def test_even_match(self):
        outcome = OutcomeSimulator.simulate(_features())
        probs = outcome.probabilities

        assert probs.home == pytest.approx(0.5)
        assert probs.away == pytest.approx(0.25)
        assert probs.draw == pytest.approx(0.25)
        assert outcome.confidence == pytest.approx(50)

    @pytest.mark.parametrize("overrides", [
        {"home_team_elo": 1800, "away_team_elo": 1500, "venue_advantage": 0.5, "h2h_win_rate": 1.0},
        {"home_team_elo": 1500, "away_team_elo": 1800, "away_xg_diff": 2.0, "motivation_differential": -1.0},
        {"home_form_weighted": 1.0, "away_form_weighted": 0.0},
        {"home_xg_diff": 0.6, "away_xg_diff": -0.2, "venue_advantage": 0.2},
        {"home_key_players_score": 0.0, "away_key_players_score": 1.0},
        {},
    ])
    def test_probabilities_bounded_and_sum_to_one(self, overrides):
        outcome = OutcomeSimulator.simulate(_features(**overrides))
        probs = outcome.probabilities

        for value in probs.as_tuple():
            assert 0.05 <= value <= 0.9
        assert probs.total == pytest.approx(1.0, abs=1e-12)
        assert 50 <= outcome.confidence <= 95

    def test_home_advantage_clamped(self):
        strong = _features(home_team_elo=2400, away_team_elo=1500, venue_advantage=0.5)
        weak = _features(home_team_elo=1500, away_team_elo=2400, away_xg_diff=3.0)

        assert OutcomeSimulator.calculate_home_advantage(strong) == 0.9
        assert OutcomeSimulator.calculate_home_advantage(weak) == 0.1

        outcome = OutcomeSimulator.simulate(strong)
        assert outcome.probabilities.away == 0.05
        assert outcome.probabilities.draw == pytest.approx(0.05)
        assert outcome.confidence == pytest.approx(86)

    def test_deterministic(self, neutral_context):
        features = MLFeatureExtractor.extract_features(neutral_context)
        assert OutcomeSimulator.simulate(features) == OutcomeSimulator.simulate(features)


class TestEloUpdate:
    """Tests for the K-factor rating update."""

    @pytest.mark.parametrize("actual,expected", [
        (1.0, 1516.0),
        (0.5, 1500.0),
        (0.0, 1484.0),
    ])
    def test_equal_ratings(self, actual, expected):
        assert OutcomeSimulator.update_elo_rating(1500, 1500, actual) == pytest.approx(expected)

    def test_favourite_gains_less(self):
        favourite_win = OutcomeSimulator.update_elo_rating(1700, 1500, 1.0)
        underdog_win = OutcomeSimulator.update_elo_rating(1500, 1700, 1.0)

        assert favourite_win - 1700 == pytest.approx(32 * (1 - 1 / (1 + 10 ** -0.5)))
        assert underdog_win - 1500 > favourite_win - 1700

    def test_custom_k_factor(self):
        assert OutcomeSimulator.update_elo_rating(1500, 1500, 1.0, k_factor=16) == pytest.approx(1508.0)

    def test_invalid_result(self):
        with pytest.raises(InvalidInputException):
            OutcomeSimulator.update_elo_rating(1500, 1500, 1.5)
