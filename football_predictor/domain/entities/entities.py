"""
Domain Entities Module

This module contains the core domain entities for the football match prediction system.
These entities represent the core business concepts and are independent of any infrastructure.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Optional
from enum import Enum

from football_predictor.domain.constants import (
    FORM_POINTS,
    HIGH_CONFIDENCE_THRESHOLD,
    MEDIUM_CONFIDENCE_THRESHOLD,
)
from football_predictor.domain.exceptions import InvalidInputException
from football_predictor.domain.value_objects.value_objects import Odds


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MatchResult(Enum):
    """Possible predicted results of a football match."""
    HOME_WIN = "Home Win"
    DRAW = "Draw"
    AWAY_WIN = "Away Win"


@dataclass(frozen=True)
class Team:
    """
    Represents a football team.

    Attributes:
        id: Unique identifier for the team (provider id or name)
        name: Full name of the team
        logo: Optional logo URL supplied by the provider
    """
    id: str
    name: str
    logo: Optional[str] = None

    def __post_init__(self):
        if not self.name:
            raise InvalidInputException("Team name cannot be empty")


@dataclass(frozen=True)
class TeamStats:
    """
    Attacking and defensive profile of one side for one match.

    Attributes:
        form: Recent results as W/D/L symbols, most recent last (e.g. "WWDLW")
        goals_for: Goals scored per match
        goals_against: Goals conceded per match
        xg_for: Expected goals created per match
        xg_against: Expected goals conceded per match
        home_advantage: Extra home-advantage scalar (home side only)
        away_form: Away-form bonus scalar (away side only)
        fallback: True when the figures are defaults rather than real data
    """
    form: str
    goals_for: float
    goals_against: float
    xg_for: float
    xg_against: float
    shots_per_game: float = 0.0
    possession_avg: float = 50.0
    pass_accuracy: float = 0.0
    corners_per_game: float = 0.0
    fouls_per_game: float = 0.0
    cards_per_game: float = 0.0
    home_advantage: float = 0.0
    away_form: float = 0.0
    fallback: bool = False

    def __post_init__(self):
        invalid = set(self.form) - set(FORM_POINTS)
        if invalid:
            raise InvalidInputException(f"Form may only contain W, D or L, got {sorted(invalid)}")
        for name in ("goals_for", "goals_against", "xg_for", "xg_against"):
            if getattr(self, name) < 0:
                raise InvalidInputException(f"{name} cannot be negative")


@dataclass(frozen=True)
class HeadToHead:
    """Head-to-head record between the two sides."""
    matches: int = 0
    home_wins: int = 0
    away_wins: int = 0
    draws: int = 0
    avg_goals: float = 0.0

    def __post_init__(self):
        if min(self.matches, self.home_wins, self.away_wins, self.draws) < 0:
            raise InvalidInputException("Head-to-head counts cannot be negative")

    @property
    def is_consistent(self) -> bool:
        """Whether the win/draw counts add up to the match count."""
        return self.home_wins + self.away_wins + self.draws == self.matches


@dataclass(frozen=True)
class HistoricalData:
    """Aggregate record between two teams plus the nested head-to-head record."""
    home_wins: int = 0
    away_wins: int = 0
    draws: int = 0
    home_goals_avg: float = 0.0
    away_goals_avg: float = 0.0
    head_to_head: HeadToHead = field(default_factory=HeadToHead)

    def __post_init__(self):
        if min(self.home_wins, self.away_wins, self.draws) < 0:
            raise InvalidInputException("Historical counts cannot be negative")

    @property
    def matches(self) -> int:
        return self.home_wins + self.away_wins + self.draws


@dataclass(frozen=True)
class PlayerData:
    """Squad availability snapshot."""
    key_players_available: int
    top_scorer_available: bool
    key_injuries: int = 0
    suspensions: int = 0
    fitness_score: float = 100.0  # 0-100

    def __post_init__(self):
        if min(self.key_players_available, self.key_injuries, self.suspensions) < 0:
            raise InvalidInputException("Player counts cannot be negative")


@dataclass(frozen=True)
class VenueData:
    """
    Ground-specific modifiers.

    Altitude and travel distance are raw magnitudes (metres, kilometres);
    the other factors are roughly normalised to [0, 1].
    """
    home_advantage_factor: float
    altitude: float = 0.0
    weather_impact: float = 0.0
    pitch_condition: float = 1.0
    travel_distance: float = 0.0


@dataclass(frozen=True)
class MarketData:
    """
    Bookmaker state for a match.

    Attributes:
        opening_odds: Odds when the market opened
        current_odds: Latest odds
        odds_movement: Current minus opening odds for the home side
        betting_volume: Total matched volume
        sharp_money_indicator: 0-1 share attributed to professional bettors
    """
    opening_odds: Odds
    current_odds: Odds
    odds_movement: float = 0.0
    betting_volume: float = 0.0
    sharp_money_indicator: float = 0.0

    @classmethod
    def from_odds(
        cls,
        opening_odds: Odds,
        current_odds: Odds,
        betting_volume: float = 0.0,
        sharp_money_indicator: float = 0.0,
    ) -> "MarketData":
        """Build market data deriving the home odds movement."""
        return cls(
            opening_odds=opening_odds,
            current_odds=current_odds,
            odds_movement=round(current_odds.home - opening_odds.home, 2),
            betting_volume=betting_volume,
            sharp_money_indicator=sharp_money_indicator,
        )


@dataclass(frozen=True)
class MotivationFactors:
    """Qualitative pressure scores of one side (1-10 scale, rest days in days)."""
    match_importance: float
    league_position_pressure: float
    recent_form_momentum: float
    revenge_factor: float
    fixture_congestion: float
    rest_days: float


@dataclass(frozen=True)
class LeagueConfig:
    """
    Per-league normalisation constants.

    Attributes:
        name: League name (e.g., "Premier League")
        country: Country of the league
        avg_goals: Average total goals per match
        competitiveness: 0-1 competitiveness index
        home_advantage: Baseline home-advantage scalar
    """
    name: str
    country: str
    avg_goals: float
    competitiveness: float
    home_advantage: float


@dataclass(frozen=True)
class MatchContext:
    """Every input the feature model needs for one match."""
    home_stats: TeamStats
    away_stats: TeamStats
    historical: HistoricalData
    home_players: PlayerData
    away_players: PlayerData
    venue: VenueData
    market: MarketData
    home_motivation: MotivationFactors
    away_motivation: MotivationFactors
    league_config: Optional[LeagueConfig] = None


@dataclass(frozen=True)
class Fixture:
    """
    An upcoming match as delivered by a fixture or odds provider.

    Attributes:
        id: Provider match id
        home_team: Home side
        away_team: Away side
        commence_time: Kick-off time (None if unknown)
        sport_key: League key (e.g., "soccer_epl" or "league_39")
        sport_title: Human readable league name
        league_id: Provider league id, when known
        season: Season label, when known
        odds: Current 1X2 odds, when the provider supplies them
    """
    id: str
    home_team: Team
    away_team: Team
    commence_time: Optional[datetime]
    sport_key: str
    sport_title: str
    league_id: Optional[str] = None
    season: Optional[str] = None
    odds: Optional[Odds] = None


@dataclass(frozen=True)
class ValueBet:
    """Value assessment of one outcome against its market price."""
    is_value: bool
    edge: float  # Percentage points (model probability - implied probability) * 100
    kelly_fraction: float

    @property
    def label(self) -> str:
        return "Value" if self.is_value else "No Value"


@dataclass(frozen=True)
class ValueBets:
    """Value assessments for the three 1X2 outcomes."""
    home: ValueBet
    draw: ValueBet
    away: ValueBet

    @classmethod
    def none(cls) -> "ValueBets":
        """No market to compare against: nothing is value."""
        empty = ValueBet(is_value=False, edge=0.0, kelly_fraction=0.0)
        return cls(home=empty, draw=empty, away=empty)

    @property
    def labels(self) -> dict[str, str]:
        return {"home": self.home.label, "draw": self.draw.label, "away": self.away.label}


@dataclass(frozen=True)
class AdvancedStats:
    """Derived figures shown next to a prediction."""
    home_elo: Optional[int] = None
    away_elo: Optional[int] = None
    home_form_score: Optional[int] = None
    away_form_score: Optional[int] = None
    home_attack_strength: Optional[float] = None
    away_attack_strength: Optional[float] = None
    venue_advantage: Optional[int] = None
    motivation_differential: Optional[int] = None
    market_confidence: Optional[int] = None
    total_goals_expectancy: Optional[float] = None
    league_competitiveness: Optional[int] = None


@dataclass(frozen=True)
class Prediction:
    """
    Represents a prediction for a football match.

    Attributes:
        result: Most likely result label
        confidence: Confidence in the result (0-100)
        home_win_probability: Probability of home team winning (0-1)
        draw_probability: Probability of a draw (0-1)
        away_win_probability: Probability of away team winning (0-1)
        expected_goals: Expected goals rendered as "1.6 - 1.1"
        btts: Whether both teams are expected to score
        btts_probability: Probability of both teams scoring (0-1)
        over_25: Whether more than 2.5 goals are expected
        over_25_probability: Probability of over 2.5 goals (0-1)
        predicted_scoreline: Most likely scoreline (e.g., "1-0")
        scoreline_probability: Probability of that exact scoreline (0-1)
        value_bets: Per-outcome value flag, edge and Kelly fraction
        advanced_stats: Derived ratings and strengths
        model: Which prediction path produced the record
        data_source: Origin of the statistics ("model", "api", "fallback", "synthetic")
        created_at: Timestamp when prediction was created
    """
    result: MatchResult
    confidence: int
    home_win_probability: float
    draw_probability: float
    away_win_probability: float
    expected_goals: str
    btts: bool
    btts_probability: float
    over_25: bool
    over_25_probability: float
    predicted_scoreline: str
    scoreline_probability: float
    value_bets: ValueBets
    advanced_stats: AdvancedStats = field(default_factory=AdvancedStats)
    model: str = "advanced"
    data_source: str = "model"
    created_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self):
        """Validate probability values."""
        probs = [
            self.home_win_probability,
            self.draw_probability,
            self.away_win_probability,
            self.btts_probability,
            self.over_25_probability,
            self.scoreline_probability,
        ]
        for prob in probs:
            if not 0 <= prob <= 1:
                raise InvalidInputException(f"Probability must be between 0 and 1, got {prob}")
        if not 0 <= self.confidence <= 100:
            raise InvalidInputException(f"Confidence must be between 0 and 100, got {self.confidence}")

    @property
    def confidence_level(self) -> str:
        """Confidence band: "high" from 70, "medium" from 50, "low" below."""
        if self.confidence >= HIGH_CONFIDENCE_THRESHOLD:
            return "high"
        if self.confidence >= MEDIUM_CONFIDENCE_THRESHOLD:
            return "medium"
        return "low"

    def to_dict(self) -> dict:
        data = asdict(self)
        data["result"] = self.result.value
        data["confidence_level"] = self.confidence_level
        return data


@dataclass(frozen=True)
class EnrichedMatch:
    """A fixture together with the inputs used and the resulting prediction."""
    fixture: Fixture
    prediction: Prediction
    context: Optional[MatchContext] = None
    last_updated: datetime = field(default_factory=_utc_now)

    def to_dict(self) -> dict:
        """Flatten into the stored-match record shape."""
        return {
            "id": self.fixture.id,
            "sport_key": self.fixture.sport_key,
            "sport_title": self.fixture.sport_title,
            "commence_time": self.fixture.commence_time,
            "home_team": self.fixture.home_team.name,
            "away_team": self.fixture.away_team.name,
            "odds": asdict(self.fixture.odds) if self.fixture.odds else None,
            "context": asdict(self.context) if self.context else None,
            "prediction": self.prediction.to_dict(),
            "last_updated": self.last_updated,
        }
