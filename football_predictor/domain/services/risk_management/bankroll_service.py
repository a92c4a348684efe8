"""
Bankroll Service Module

Stake sizing with the Kelly Criterion. The fraction returned is full Kelly,
capped so a single outcome never suggests more than a quarter of the bankroll.
"""

import logging

from football_predictor.domain.constants import MAX_KELLY_FRACTION

logger = logging.getLogger(__name__)


class BankrollService:
    """
    Service for calculating optimal stake sizes.
    """

    def __init__(self, max_fraction: float = MAX_KELLY_FRACTION):
        self.max_fraction = max_fraction

    def kelly_fraction(self, probability: float, odds: float) -> float:
        """
        Full Kelly stake fraction.

        Formula: f* = (p * o - 1) / (o - 1)
        where:
          p = probability of winning
          o = decimal odds

        Returns:
            Fraction of bankroll in [0, max_fraction]; 0 for invalid odds or negative EV.
        """
        if odds <= 1.0:
            return 0.0

        f_star = (probability * odds - 1) / (odds - 1)
        return max(0.0, min(self.max_fraction, f_star))

