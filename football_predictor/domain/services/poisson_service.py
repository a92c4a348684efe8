"""
Poisson Service Module

Scoreline mathematics shared by every prediction path:
1. Poisson probability mass function for goal counts
2. Double sums over the (home goals, away goals) grid for 1X2, over/under and BTTS markets
3. Most likely scoreline search

The grid is truncated at ``max_goals`` per side, so aggregated probabilities fall
slightly short of 1. Bounds used by the callers live in ``domain.constants``:
6 for 1X2 and BTTS, 8 for over/under (tail accuracy matters there), 5 for the
most likely scoreline. The choice is visible at the third decimal.
"""

import math
import functools
from typing import Callable

from football_predictor.domain.constants import (
    BTTS_MAX_GOALS,
    OUTCOME_MAX_GOALS,
    OVER_UNDER_LINE,
    OVER_UNDER_MAX_GOALS,
    SCORELINE_MAX_GOALS,
)
from football_predictor.domain.exceptions import InvalidInputException
from football_predictor.domain.value_objects.value_objects import (
    OutcomeProbabilities,
    Scoreline,
    ScorelineMarkets,
)


ScorelinePredicate = Callable[[int, int], bool]


class PoissonService:
    """Pure Poisson helpers; every method is static and side-effect free."""

    @staticmethod
    def factorial(n: int) -> int:
        """Integer factorial, factorial(0) == 1."""
        if n < 0:
            raise InvalidInputException(f"Factorial is undefined for negative numbers, got {n}")
        return math.factorial(n)

    @staticmethod
    @functools.lru_cache(maxsize=1024)
    def poisson_probability(expected: float, actual: int) -> float:
        """
        Calculate Poisson probability.

        P(X = k) = (λ^k * e^(-λ)) / k!

        Args:
            expected: Expected value (λ)
            actual: Actual value (k)

        Returns:
            Probability of exactly 'actual' events occurring
        """
        if actual < 0:
            raise InvalidInputException(f"Goal count cannot be negative, got {actual}")
        if expected <= 0:
            return 0.0 if actual > 0 else 1.0

        return (math.pow(expected, actual) * math.exp(-expected)) / PoissonService.factorial(actual)

    @staticmethod
    def get_poisson_distribution(expected: float, max_goals: int) -> list[float]:
        """Poisson probabilities for 0..max_goals goals."""
        return [PoissonService.poisson_probability(expected, k) for k in range(max_goals + 1)]

    @staticmethod
    def joint_scoreline_sum(
        home_expected: float,
        away_expected: float,
        max_goals: int,
        predicate: ScorelinePredicate,
    ) -> float:
        """
        Sum P(home=h) * P(away=a) over the grid cells satisfying ``predicate(h, a)``.

        Args:
            home_expected: Home Poisson rate
            away_expected: Away Poisson rate
            max_goals: Highest goal count considered for each side
            predicate: Selects the scorelines to aggregate

        Returns:
            Aggregated probability (truncated to the grid)
        """
        home_probs = PoissonService.get_poisson_distribution(home_expected, max_goals)
        away_probs = PoissonService.get_poisson_distribution(away_expected, max_goals)

        total = 0.0
        for home_goals in range(max_goals + 1):
            for away_goals in range(max_goals + 1):
                if predicate(home_goals, away_goals):
                    total += home_probs[home_goals] * away_probs[away_goals]
        return total

    @staticmethod
    def calculate_outcome_probabilities(
        home_expected: float,
        away_expected: float,
        max_goals: int = OUTCOME_MAX_GOALS,
    ) -> OutcomeProbabilities:
        """Home win / draw / away win probabilities from the truncated grid (not renormalised)."""
        return OutcomeProbabilities(
            home=PoissonService.joint_scoreline_sum(home_expected, away_expected, max_goals, lambda h, a: h > a),
            draw=PoissonService.joint_scoreline_sum(home_expected, away_expected, max_goals, lambda h, a: h == a),
            away=PoissonService.joint_scoreline_sum(home_expected, away_expected, max_goals, lambda h, a: h < a),
        )

    @staticmethod
    def calculate_over_under_probability(
        home_expected: float,
        away_expected: float,
        line: float = OVER_UNDER_LINE,
        max_goals: int = OVER_UNDER_MAX_GOALS,
    ) -> tuple[float, float]:
        """
        Calculate over/under goal probabilities.

        Returns:
            Tuple of (over_probability, under_probability)
        """
        over = PoissonService.joint_scoreline_sum(
            home_expected, away_expected, max_goals, lambda h, a: h + a > line
        )
        under = PoissonService.joint_scoreline_sum(
            home_expected, away_expected, max_goals, lambda h, a: h + a <= line
        )
        return (over, under)

    @staticmethod
    def calculate_btts_probability(
        home_expected: float,
        away_expected: float,
        max_goals: int = BTTS_MAX_GOALS,
    ) -> float:
        """Probability that both teams score."""
        return PoissonService.joint_scoreline_sum(
            home_expected, away_expected, max_goals, lambda h, a: h > 0 and a > 0
        )

    @staticmethod
    def most_likely_scoreline(
        home_expected: float,
        away_expected: float,
        max_goals: int = SCORELINE_MAX_GOALS,
    ) -> tuple[Scoreline, float]:
        """
        Most probable exact score.

        Cells are visited in ascending (home, away) order and only a strictly
        higher probability replaces the current best, so ties keep the first cell.
        """
        home_probs = PoissonService.get_poisson_distribution(home_expected, max_goals)
        away_probs = PoissonService.get_poisson_distribution(away_expected, max_goals)

        best = Scoreline(home=0, away=0)
        best_prob = 0.0
        for home_goals in range(max_goals + 1):
            for away_goals in range(max_goals + 1):
                prob = home_probs[home_goals] * away_probs[away_goals]
                if prob > best_prob:
                    best = Scoreline(home=home_goals, away=away_goals)
                    best_prob = prob
        return best, best_prob

    @staticmethod
    def calculate_scoreline_markets(home_expected: float, away_expected: float) -> ScorelineMarkets:
        """BTTS, over 2.5 and most likely scoreline for one pair of rates."""
        over_25, _ = PoissonService.calculate_over_under_probability(home_expected, away_expected)
        score, score_prob = PoissonService.most_likely_scoreline(home_expected, away_expected)
        return ScorelineMarkets(
            most_likely_score=score,
            scoreline_probability=score_prob,
            btts_probability=PoissonService.calculate_btts_probability(home_expected, away_expected),
            over_25_probability=over_25,
        )
