"""
Data Transfer Objects (DTOs) Module

DTOs are used to transfer data between layers and to/from the API.
They use Pydantic for validation and serialization; loosely shaped provider
records are validated here before anything reaches the domain layer.
"""

import math
from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from football_predictor.domain.entities.entities import (
    AdvancedStats,
    EnrichedMatch,
    Fixture,
    HeadToHead,
    HistoricalData,
    LeagueConfig,
    MarketData,
    MatchContext,
    MotivationFactors,
    PlayerData,
    Prediction,
    Team,
    TeamStats,
    ValueBet,
    VenueData,
)
from football_predictor.domain.value_objects.value_objects import Odds


# ============================================================
# Input DTOs (match inputs)
# ============================================================

class OddsDTO(BaseModel):
    """Decimal 1X2 odds."""
    home: float = Field(..., ge=1.0, allow_inf_nan=False)
    draw: float = Field(..., ge=1.0, allow_inf_nan=False)
    away: float = Field(..., ge=1.0, allow_inf_nan=False)

    def to_entity(self) -> Odds:
        return Odds(home=self.home, draw=self.draw, away=self.away)

    @classmethod
    def from_entity(cls, odds: Odds) -> "OddsDTO":
        return cls(home=odds.home, draw=odds.draw, away=odds.away)


class TeamStatsDTO(BaseModel):
    """Attacking and defensive profile of one side."""
    form: str = Field(default="", pattern=r"^[WDL]*$", description="Recent results, most recent last")
    goals_for: float = Field(..., ge=0)
    goals_against: float = Field(..., ge=0)
    xg_for: float = Field(..., ge=0)
    xg_against: float = Field(..., ge=0)
    shots_per_game: float = Field(default=0.0, ge=0)
    possession_avg: float = Field(default=50.0, ge=0, le=100)
    pass_accuracy: float = Field(default=0.0, ge=0, le=100)
    corners_per_game: float = Field(default=0.0, ge=0)
    fouls_per_game: float = Field(default=0.0, ge=0)
    cards_per_game: float = Field(default=0.0, ge=0)
    home_advantage: float = 0.0
    away_form: float = 0.0

    @field_validator("form", mode="before")
    @classmethod
    def normalise_form(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    def to_entity(self) -> TeamStats:
        return TeamStats(**self.model_dump())


class HeadToHeadDTO(BaseModel):
    matches: int = Field(default=0, ge=0)
    home_wins: int = Field(default=0, ge=0)
    away_wins: int = Field(default=0, ge=0)
    draws: int = Field(default=0, ge=0)
    avg_goals: float = Field(default=0.0, ge=0)


class HistoricalDataDTO(BaseModel):
    home_wins: int = Field(default=0, ge=0)
    away_wins: int = Field(default=0, ge=0)
    draws: int = Field(default=0, ge=0)
    home_goals_avg: float = Field(default=0.0, ge=0)
    away_goals_avg: float = Field(default=0.0, ge=0)
    head_to_head: HeadToHeadDTO = Field(default_factory=HeadToHeadDTO)

    def to_entity(self) -> HistoricalData:
        data = self.model_dump(exclude={"head_to_head"})
        return HistoricalData(**data, head_to_head=HeadToHead(**self.head_to_head.model_dump()))


class PlayerDataDTO(BaseModel):
    key_players_available: int = Field(default=11, ge=0)
    top_scorer_available: bool = True
    key_injuries: int = Field(default=0, ge=0)
    suspensions: int = Field(default=0, ge=0)
    fitness_score: float = Field(default=100.0, ge=0, le=100)

    def to_entity(self) -> PlayerData:
        return PlayerData(**self.model_dump())


class VenueDataDTO(BaseModel):
    home_advantage_factor: float = Field(default=0.1, ge=0)
    altitude: float = Field(default=0.0, ge=0)
    weather_impact: float = 0.0
    pitch_condition: float = 1.0
    travel_distance: float = Field(default=0.0, ge=0)

    def to_entity(self) -> VenueData:
        return VenueData(**self.model_dump())


class MarketDataDTO(BaseModel):
    """Bookmaker state; opening odds default to the current odds."""
    current_odds: OddsDTO
    opening_odds: Optional[OddsDTO] = None
    betting_volume: float = Field(default=0.0, ge=0)
    sharp_money_indicator: float = Field(default=0.0, ge=0, le=1)

    def to_entity(self) -> MarketData:
        current = self.current_odds.to_entity()
        opening = self.opening_odds.to_entity() if self.opening_odds else current
        return MarketData.from_odds(
            opening_odds=opening,
            current_odds=current,
            betting_volume=self.betting_volume,
            sharp_money_indicator=self.sharp_money_indicator,
        )


class MotivationFactorsDTO(BaseModel):
    """Motivation sub-factors on a 1-10 scale; rest days in days."""
    match_importance: float = Field(default=5.0, ge=0, le=10)
    league_position_pressure: float = Field(default=5.0, ge=0, le=10)
    recent_form_momentum: float = Field(default=5.0, ge=0, le=10)
    revenge_factor: float = Field(default=1.0, ge=0, le=10)
    fixture_congestion: float = Field(default=5.0, ge=0, le=10)
    rest_days: float = Field(default=4.0, ge=0)

    def to_entity(self) -> MotivationFactors:
        return MotivationFactors(**self.model_dump())


class LeagueConfigDTO(BaseModel):
    """League normalisation constants."""
    name: str
    country: str
    avg_goals: float = Field(..., gt=0)
    competitiveness: float = Field(..., ge=0, le=1)
    home_advantage: float = Field(..., ge=0)

    def to_entity(self) -> LeagueConfig:
        return LeagueConfig(**self.model_dump())

    @classmethod
    def from_entity(cls, config: LeagueConfig) -> "LeagueConfigDTO":
        return cls(
            name=config.name,
            country=config.country,
            avg_goals=config.avg_goals,
            competitiveness=config.competitiveness,
            home_advantage=config.home_advantage,
        )


# ============================================================
# Request DTOs
# ============================================================

class MatchPredictionRequestDTO(BaseModel):
    """Request for the advanced prediction of one match."""
    home_stats: TeamStatsDTO
    away_stats: TeamStatsDTO
    market: MarketDataDTO
    historical: HistoricalDataDTO = Field(default_factory=HistoricalDataDTO)
    home_players: PlayerDataDTO = Field(default_factory=PlayerDataDTO)
    away_players: PlayerDataDTO = Field(default_factory=PlayerDataDTO)
    venue: VenueDataDTO = Field(default_factory=VenueDataDTO)
    home_motivation: MotivationFactorsDTO = Field(default_factory=MotivationFactorsDTO)
    away_motivation: MotivationFactorsDTO = Field(default_factory=MotivationFactorsDTO)
    league_config: Optional[LeagueConfigDTO] = None
    sport_key: Optional[str] = Field(default=None, description="Used for the league config when none is given")

    def to_context(self, league_config: Optional[LeagueConfig] = None) -> MatchContext:
        return MatchContext(
            home_stats=self.home_stats.to_entity(),
            away_stats=self.away_stats.to_entity(),
            historical=self.historical.to_entity(),
            home_players=self.home_players.to_entity(),
            away_players=self.away_players.to_entity(),
            venue=self.venue.to_entity(),
            market=self.market.to_entity(),
            home_motivation=self.home_motivation.to_entity(),
            away_motivation=self.away_motivation.to_entity(),
            league_config=league_config,
        )


class MarketPredictionRequestDTO(BaseModel):
    """Request for the market-blended prediction."""
    odds: OddsDTO
    home_stats: TeamStatsDTO
    away_stats: TeamStatsDTO
    league_config: Optional[LeagueConfigDTO] = None
    sport_key: Optional[str] = None


class OddsEventDTO(BaseModel):
    """
    Fixture from an odds feed (The Odds API event shape).

    Prices are read from the first bookmaker's "h2h" market; a record without
    usable (finite, >= 1.0) prices yields a fixture without odds, whose market
    the synthetic generator then seeds from the team names.
    """
    id: str
    sport_key: str
    sport_title: str = ""
    commence_time: Optional[datetime] = None
    home_team: str = Field(..., min_length=1)
    away_team: str = Field(..., min_length=1)
    bookmakers: list[dict[str, Any]] = Field(default_factory=list)

    def extract_odds(self) -> Optional[Odds]:
        if not self.bookmakers:
            return None
        markets = self.bookmakers[0].get("markets") or []
        h2h = next((m for m in markets if m.get("key") == "h2h"), None)
        if not h2h:
            return None

        prices = {outcome.get("name"): outcome.get("price") for outcome in h2h.get("outcomes") or []}
        home, draw, away = prices.get(self.home_team), prices.get("Draw"), prices.get(self.away_team)
        if not all(isinstance(p, (int, float)) and math.isfinite(p) and p >= 1.0 for p in (home, draw, away)):
            return None
        return Odds(home=float(home), draw=float(draw), away=float(away))

    def to_entity(self) -> Fixture:
        return Fixture(
            id=self.id,
            home_team=Team(id=self.home_team, name=self.home_team),
            away_team=Team(id=self.away_team, name=self.away_team),
            commence_time=self.commence_time,
            sport_key=self.sport_key,
            sport_title=self.sport_title or self.sport_key,
            odds=self.extract_odds(),
        )


class EnrichMatchesRequestDTO(BaseModel):
    """Fixtures to enrich with synthetic inputs and predictions."""
    fixtures: list[OddsEventDTO] = Field(..., min_length=1)


# ============================================================
# API-Football record DTOs
# ============================================================

class APIFootballTeamDTO(BaseModel):
    id: Union[int, str]
    name: str
    logo: Optional[str] = None


class APIFootballTeamsDTO(BaseModel):
    home: APIFootballTeamDTO
    away: APIFootballTeamDTO


class APIFootballLeagueDTO(BaseModel):
    id: Union[int, str]
    name: str
    season: Union[int, str]


class APIFootballFixtureInfoDTO(BaseModel):
    id: Union[int, str]
    date: Optional[datetime] = None


class APIFootballFixtureDTO(BaseModel):
    """One element of the API-Football /fixtures response."""
    fixture: APIFootballFixtureInfoDTO
    league: APIFootballLeagueDTO
    teams: APIFootballTeamsDTO

    def to_entity(self) -> Fixture:
        from football_predictor.infrastructure.data_sources.api_football import sport_key_for_league

        home, away = self.teams.home, self.teams.away
        return Fixture(
            id=str(self.fixture.id),
            home_team=Team(id=str(home.id), name=home.name, logo=home.logo),
            away_team=Team(id=str(away.id), name=away.name, logo=away.logo),
            commence_time=self.fixture.date,
            sport_key=sport_key_for_league(str(self.league.id)),
            sport_title=self.league.name,
            league_id=str(self.league.id),
            season=str(self.league.season),
        )


# ============================================================
# Response DTOs
# ============================================================

class ValueBetDTO(BaseModel):
    """Value assessment of one outcome."""
    label: str
    is_value: bool
    edge: float = Field(..., description="Percentage points above the implied probability")
    kelly_fraction: float = Field(..., ge=0, le=1)

    @classmethod
    def from_entity(cls, value_bet: ValueBet) -> "ValueBetDTO":
        return cls(
            label=value_bet.label,
            is_value=value_bet.is_value,
            edge=value_bet.edge,
            kelly_fraction=value_bet.kelly_fraction,
        )


class ValueBetsDTO(BaseModel):
    home: ValueBetDTO
    draw: ValueBetDTO
    away: ValueBetDTO


class AdvancedStatsDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

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


class PredictionDTO(BaseModel):
    """Prediction data transfer object."""
    result: str
    confidence: int = Field(..., ge=0, le=100)
    confidence_level: str
    home_win_probability: float = Field(..., ge=0, le=1)
    draw_probability: float = Field(..., ge=0, le=1)
    away_win_probability: float = Field(..., ge=0, le=1)
    expected_goals: str
    btts: bool
    btts_probability: float = Field(..., ge=0, le=1)
    over_25: bool
    over_25_probability: float = Field(..., ge=0, le=1)
    predicted_scoreline: str
    scoreline_probability: float = Field(..., ge=0, le=1)
    value_bets: ValueBetsDTO
    advanced_stats: AdvancedStatsDTO
    model: str
    data_source: str
    created_at: datetime

    @classmethod
    def from_entity(cls, prediction: Prediction) -> "PredictionDTO":
        stats: AdvancedStats = prediction.advanced_stats
        return cls(
            result=prediction.result.value,
            confidence=prediction.confidence,
            confidence_level=prediction.confidence_level,
            home_win_probability=prediction.home_win_probability,
            draw_probability=prediction.draw_probability,
            away_win_probability=prediction.away_win_probability,
            expected_goals=prediction.expected_goals,
            btts=prediction.btts,
            btts_probability=prediction.btts_probability,
            over_25=prediction.over_25,
            over_25_probability=prediction.over_25_probability,
            predicted_scoreline=prediction.predicted_scoreline,
            scoreline_probability=prediction.scoreline_probability,
            value_bets=ValueBetsDTO(
                home=ValueBetDTO.from_entity(prediction.value_bets.home),
                draw=ValueBetDTO.from_entity(prediction.value_bets.draw),
                away=ValueBetDTO.from_entity(prediction.value_bets.away),
            ),
            advanced_stats=AdvancedStatsDTO.model_validate(stats),
            model=prediction.model,
            data_source=prediction.data_source,
            created_at=prediction.created_at,
        )


class LeagueSummaryDTO(BaseModel):
    sport_key: str
    config: LeagueConfigDTO


class LeaguesResponseDTO(BaseModel):
    """Response containing the known leagues."""
    leagues: list[LeagueSummaryDTO]
    total: int


class EnrichedMatchDTO(BaseModel):
    """A fixture with its prediction."""
    id: str
    sport_key: str
    sport_title: str
    commence_time: Optional[datetime] = None
    home_team: str
    away_team: str
    odds: Optional[OddsDTO] = None
    prediction: PredictionDTO
    last_updated: datetime

    @classmethod
    def from_entity(cls, match: EnrichedMatch) -> "EnrichedMatchDTO":
        fixture = match.fixture
        return cls(
            id=fixture.id,
            sport_key=fixture.sport_key,
            sport_title=fixture.sport_title,
            commence_time=fixture.commence_time,
            home_team=fixture.home_team.name,
            away_team=fixture.away_team.name,
            odds=OddsDTO.from_entity(fixture.odds) if fixture.odds else None,
            prediction=PredictionDTO.from_entity(match.prediction),
            last_updated=match.last_updated,
        )


class EnrichMatchesResponseDTO(BaseModel):
    matches: list[EnrichedMatchDTO]
    skipped: int = 0


class StoredMatchesResponseDTO(BaseModel):
    """Matches of the last refresh as stored."""
    matches: list[dict[str, Any]]
    total: int
    last_updated: Optional[datetime] = None
    refreshed: bool = False


class HealthResponseDTO(BaseModel):
    """Health check response."""
    status: str = "healthy"
    version: str
    timestamp: datetime


class ErrorResponseDTO(BaseModel):
    """Error response."""
    error: str
    message: str
    details: Optional[dict] = None
