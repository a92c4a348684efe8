"""
Value Bet Service Module

Combines model probabilities with bookmaker prices and flags outcomes whose
model probability beats the implied probability by more than a fixed edge.

The edge is additive (model probability - 1 / odds > 0.05). The older
multiplicative check (probability * odds > 1.05) is not used anywhere, so the
stored edge and the Kelly fraction always agree with the flag.
"""

import logging
from typing import Optional

from football_predictor.domain.constants import (
    FORM_ADJUSTMENT_FACTOR,
    MARKET_WEIGHT,
    MAX_OUTCOME_PROBABILITY,
    MIN_OUTCOME_PROBABILITY,
    MODEL_WEIGHT,
    VALUE_EDGE_THRESHOLD,
)
from football_predictor.domain.entities.entities import ValueBet, ValueBets
from football_predictor.domain.services.risk_management.bankroll_service import BankrollService
from football_predictor.domain.value_objects.value_objects import Odds, OutcomeProbabilities

logger = logging.getLogger(__name__)


class ValueBetService:
    """
    Market blending and value detection.

    Args:
        bankroll_service: Kelly sizing; a default capped service is used when omitted
        edge_threshold: Minimum additive edge for an outcome to count as value
    """

    def __init__(
        self,
        bankroll_service: Optional[BankrollService] = None,
        edge_threshold: float = VALUE_EDGE_THRESHOLD,
    ):
        self.bankroll_service = bankroll_service or BankrollService()
        self.edge_threshold = edge_threshold

    @staticmethod
    def blend_with_market(
        model: OutcomeProbabilities,
        odds: Odds,
        home_form: float = 0.0,
        away_form: float = 0.0,
    ) -> OutcomeProbabilities:
        """
        Blend model and market probabilities (market 0.6 / model 0.4).

        Order of operations:
        1. Weighted average of normalised implied probabilities and the model
        2. Form nudge of +/- (home_form - away_form) * 0.1 on home and away
        3. Clamp home and away to [0.05, 0.9]
        4. Draw = 1 - home - away, floored at 0.05

        When home + away leaves less than the draw floor, both are scaled down
        proportionally so the three still sum to 1.
        """
        market_home, _, market_away = odds.to_probabilities()

        home = market_home * MARKET_WEIGHT + model.home * MODEL_WEIGHT
        away = market_away * MARKET_WEIGHT + model.away * MODEL_WEIGHT

        form_diff = home_form - away_form
        home += form_diff * FORM_ADJUSTMENT_FACTOR
        away -= form_diff * FORM_ADJUSTMENT_FACTOR

        home = max(MIN_OUTCOME_PROBABILITY, min(MAX_OUTCOME_PROBABILITY, home))
        away = max(MIN_OUTCOME_PROBABILITY, min(MAX_OUTCOME_PROBABILITY, away))

        available = 1 - MIN_OUTCOME_PROBABILITY
        if home + away > available:
            scale = available / (home + away)
            home = max(MIN_OUTCOME_PROBABILITY, home * scale)
            away = max(MIN_OUTCOME_PROBABILITY, away * scale)

        draw = max(MIN_OUTCOME_PROBABILITY, 1 - home - away)
        return OutcomeProbabilities(home=home, draw=draw, away=away)

    def evaluate(self, probability: float, odds: float) -> ValueBet:
        """
        Value assessment of one outcome.

        Odds of 1.0 or less carry no information and are never value.
        """
        if odds <= 1.0:
            return ValueBet(is_value=False, edge=0.0, kelly_fraction=0.0)

        edge = probability - 1 / odds
        is_value = edge > self.edge_threshold
        kelly = self.bankroll_service.kelly_fraction(probability, odds) if is_value else 0.0
        return ValueBet(is_value=is_value, edge=round(edge * 100, 2), kelly_fraction=kelly)

    def detect_value_bets(self, probabilities: OutcomeProbabilities, odds: Odds) -> ValueBets:
        """Value assessments for home, draw and away against the given prices."""
        value_bets = ValueBets(
            home=self.evaluate(probabilities.home, odds.home),
            draw=self.evaluate(probabilities.draw, odds.draw),
            away=self.evaluate(probabilities.away, odds.away),
        )
        logger.debug(f"Value bets: {value_bets.labels}")
        return value_bets
