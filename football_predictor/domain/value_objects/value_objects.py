"""
Domain Value Objects Module

Value objects are immutable objects that are defined by their attributes rather than identity.
They encapsulate validation logic and provide type safety.
"""

import math
from dataclasses import dataclass
from typing import Optional

from football_predictor.domain.exceptions import InvalidInputException


@dataclass(frozen=True)
class Odds:
    """
    Represents decimal betting odds for a match.

    Stores decimal odds for home win, draw, and away win.
    """
    home: float
    draw: float
    away: float

    def __post_init__(self):
        for price in (self.home, self.draw, self.away):
            if not math.isfinite(price) or price < 1.0:
                raise InvalidInputException(
                    f"Odds must be finite and >= 1.0, got {self.home}/{self.draw}/{self.away}"
                )

    def implied_probabilities(self) -> tuple[float, float, float]:
        """Raw implied probabilities (1 / odds), bookmaker margin included."""
        return (1 / self.home, 1 / self.draw, 1 / self.away)

    def to_probabilities(self) -> tuple[float, float, float]:
        """
        Convert odds to implied probabilities.

        Returns:
            Tuple of (home_prob, draw_prob, away_prob) normalized to sum to 1;
            equal thirds when the implied probabilities cannot be normalised.
        """
        home_prob, draw_prob, away_prob = self.implied_probabilities()

        # Normalize to account for bookmaker margin
        total = home_prob + draw_prob + away_prob
        if not total > 0:
            return (1 / 3, 1 / 3, 1 / 3)
        return (
            home_prob / total,
            draw_prob / total,
            away_prob / total,
        )

    @property
    def bookmaker_margin(self) -> float:
        """
        Calculate the bookmaker's margin (overround).

        A fair market would have a margin of 0%.
        Typically, margins are 2-10% for most bookmakers.
        """
        return (sum(self.implied_probabilities()) - 1) * 100


@dataclass(frozen=True)
class Scoreline:
    """
    Represents a match score.

    Immutable value object for home and away goals.
    """
    home: int
    away: int

    def __post_init__(self):
        if self.home < 0 or self.away < 0:
            raise InvalidInputException("Goals cannot be negative")

    @property
    def total(self) -> int:
        """Total goals in the match."""
        return self.home + self.away

    @property
    def winner(self) -> Optional[str]:
        """
        Get the winner of the match.

        Returns:
            'home', 'away', or None for draw
        """
        if self.home > self.away:
            return "home"
        elif self.away > self.home:
            return "away"
        return None

    def __str__(self) -> str:
        return f"{self.home}-{self.away}"


@dataclass(frozen=True)
class OutcomeProbabilities:
    """Home win / draw / away win probabilities (0.0 to 1.0 each)."""
    home: float
    draw: float
    away: float

    def __post_init__(self):
        for value in (self.home, self.draw, self.away):
            if not 0.0 <= value <= 1.0:
                raise InvalidInputException(f"Probability must be between 0 and 1, got {value}")

    @property
    def total(self) -> float:
        return self.home + self.draw + self.away

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.home, self.draw, self.away)


@dataclass(frozen=True)
class SimulatedOutcome:
    """Outcome probabilities plus the 50-95 confidence of the feature model."""
    probabilities: OutcomeProbabilities
    confidence: float


@dataclass(frozen=True)
class ExpectedGoals:
    """Expected goals (Poisson rates) for both sides."""
    home: float
    away: float

    @property
    def total(self) -> float:
        return self.home + self.away

    def __str__(self) -> str:
        return f"{self.home:.1f} - {self.away:.1f}"


@dataclass(frozen=True)
class ScorelineMarkets:
    """Goal markets derived from the joint scoreline distribution."""
    most_likely_score: Scoreline
    scoreline_probability: float
    btts_probability: float
    over_25_probability: float


@dataclass(frozen=True)
class TeamGoalAverages:
    """Per-match goal averages fetched for one side, flagged when defaults were used."""
    avg_scored: float
    avg_conceded: float
    fallback: bool = False


@dataclass(frozen=True)
class MLFeatures:
    """
    Flat numeric feature vector consumed by the outcome simulator.

    Recomputed on every call from the raw match inputs; never mutated.
    """
    # Historical features
    home_team_elo: float
    away_team_elo: float
    home_form_weighted: float
    away_form_weighted: float
    h2h_win_rate: float

    # Performance metrics
    home_xg_diff: float
    away_xg_diff: float
    home_attack_strength: float
    away_attack_strength: float
    home_defense_strength: float
    away_defense_strength: float

    # Player impact
    home_key_players_score: float
    away_key_players_score: float

    # Contextual factors
    venue_advantage: float
    motivation_differential: float
    market_confidence: float

    # League context
    league_competitiveness: float
    season_stage: float
