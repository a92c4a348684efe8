"""
Outcome Simulator Module

Turns a feature vector into home / draw / away probabilities and a confidence
score. The home probability starts from the logistic ELO expectation of the
rating differential and is nudged by a fixed linear combination of the other
features. Draw is not modelled: it is the remainder after a fixed baseline.
"""

import logging

from football_predictor.domain.constants import (
    BASE_DRAW_PROBABILITY,
    CONFIDENCE_SCALE,
    ELO_K_FACTOR,
    FORM_COEFFICIENT,
    H2H_COEFFICIENT,
    KEY_PLAYERS_COEFFICIENT,
    MAX_CONFIDENCE,
    MAX_HOME_ADVANTAGE,
    MIN_CONFIDENCE,
    MIN_HOME_ADVANTAGE,
    MIN_OUTCOME_PROBABILITY,
    MOTIVATION_COEFFICIENT,
    VENUE_COEFFICIENT,
    XG_COEFFICIENT,
)
from football_predictor.domain.exceptions import InvalidInputException
from football_predictor.domain.value_objects.value_objects import (
    MLFeatures,
    OutcomeProbabilities,
    SimulatedOutcome,
)

logger = logging.getLogger(__name__)


class OutcomeSimulator:
    """Heuristic 1X2 model over MLFeatures."""

    @staticmethod
    def elo_expectation(elo_diff: float) -> float:
        """Logistic ELO win expectation 1 / (1 + 10^(-diff/400))."""
        return 1 / (1 + 10 ** (-elo_diff / 400))

    @staticmethod
    def update_elo_rating(
        current_rating: float,
        opponent_rating: float,
        actual_result: float,
        k_factor: float = ELO_K_FACTOR,
    ) -> float:
        """
        Rating after one match: current + K * (actual - expected).

        Args:
            current_rating: Rating before the match
            opponent_rating: Opponent's rating before the match
            actual_result: 1 for a win, 0.5 for a draw, 0 for a loss
            k_factor: Maximum rating change per match
        """
        if not 0.0 <= actual_result <= 1.0:
            raise InvalidInputException(f"Match result must be between 0 and 1, got {actual_result}")
        expected = OutcomeSimulator.elo_expectation(current_rating - opponent_rating)
        return current_rating + k_factor * (actual_result - expected)

    @staticmethod
    def calculate_home_advantage(features: MLFeatures) -> float:
        """ELO expectation adjusted by the weighted features, clamped to [0.1, 0.9]."""
        home_advantage = OutcomeSimulator.elo_expectation(features.home_team_elo - features.away_team_elo)

        home_advantage += features.home_form_weighted * FORM_COEFFICIENT
        home_advantage -= features.away_form_weighted * FORM_COEFFICIENT
        home_advantage += features.h2h_win_rate * H2H_COEFFICIENT
        home_advantage += features.home_xg_diff * XG_COEFFICIENT
        home_advantage -= features.away_xg_diff * XG_COEFFICIENT
        home_advantage += features.home_key_players_score * KEY_PLAYERS_COEFFICIENT
        home_advantage -= features.away_key_players_score * KEY_PLAYERS_COEFFICIENT
        home_advantage += features.venue_advantage * VENUE_COEFFICIENT
        home_advantage += features.motivation_differential * MOTIVATION_COEFFICIENT

        return max(MIN_HOME_ADVANTAGE, min(MAX_HOME_ADVANTAGE, home_advantage))

    @staticmethod
    def simulate(features: MLFeatures) -> SimulatedOutcome:
        """
        Simulate the match outcome.

        The away probability is what is left after the home probability and a
        0.25 draw baseline, the draw is the remainder of both. Each is floored
        at 0.05 in that order, so the three always sum to exactly 1 and stay
        within [0.05, 0.9].

        Returns:
            SimulatedOutcome with confidence min(95, 50 + |home - 0.5| * 90)
        """
        home = OutcomeSimulator.calculate_home_advantage(features)
        away = max(MIN_OUTCOME_PROBABILITY, 1 - home - BASE_DRAW_PROBABILITY)
        draw = max(MIN_OUTCOME_PROBABILITY, 1 - home - away)

        confidence = min(MAX_CONFIDENCE, MIN_CONFIDENCE + abs(home - 0.5) * CONFIDENCE_SCALE)

        logger.debug(f"Simulated outcome: home={home:.3f} draw={draw:.3f} away={away:.3f} confidence={confidence:.1f}")
        return SimulatedOutcome(
            probabilities=OutcomeProbabilities(home=home, draw=draw, away=away),
            confidence=confidence,
        )
