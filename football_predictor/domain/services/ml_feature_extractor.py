"""
ML Feature Extractor

Centralizes the logic for turning raw match inputs into the flat feature
vector consumed by the outcome simulator. Despite the name there is no trained
model behind it: every feature is a hand-tuned formula over team statistics,
squad availability, venue, market and motivation data.
"""

import logging

import numpy as np

from football_predictor.domain.constants import (
    BASE_ELO,
    BETTING_VOLUME_SCALE,
    DEFAULT_LEAGUE_AVG_GOALS,
    ELO_FORM_SCALE,
    FORM_DECAY,
    FORM_POINTS,
    FORM_SCORE_NORMALIZER,
    FORM_WEIGHTS,
    FULL_SQUAD,
    LEAGUE_COMPETITIVENESS,
    MAX_VENUE_ADVANTAGE,
    MIN_GOALS_AGAINST,
    SEASON_STAGE,
)
from football_predictor.domain.entities.entities import (
    HistoricalData,
    MarketData,
    MatchContext,
    MotivationFactors,
    PlayerData,
    TeamStats,
    VenueData,
)
from football_predictor.domain.value_objects.value_objects import MLFeatures

logger = logging.getLogger(__name__)


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


class MLFeatureExtractor:
    """
    Service for extracting features from match inputs.

    All methods are static and pure; identical inputs give identical features.
    """

    @staticmethod
    def calculate_weighted_form(form: str) -> float:
        """
        Weighted recent form in roughly [0, 1].

        The last character of ``form`` is the most recent match. Only the five
        most recent results count, weighted 0.4, 0.3, 0.2, 0.08, 0.02 and scored
        W=3, D=1, L=0; the weighted sum is divided by 3.
        """
        recent_first = form[::-1][:len(FORM_WEIGHTS)]
        score = sum(FORM_POINTS.get(result, 0) * weight for result, weight in zip(recent_first, FORM_WEIGHTS))
        return score / 3

    @staticmethod
    def calculate_form_score(form: str) -> float:
        """
        Exponential-decay form score used by the market-blended engine.

        Walks the whole string from the most recent (last) result backwards with
        weight 1.0 decaying by 0.85 per match, normalised by 15 and capped at 1.
        """
        if not form:
            return 0.0

        points = np.array([FORM_POINTS.get(result, 0) for result in reversed(form)], dtype=float)
        weights = np.power(FORM_DECAY, np.arange(len(points)))
        return min(float(np.dot(points, weights)) / FORM_SCORE_NORMALIZER, 1.0)

    @staticmethod
    def calculate_elo(form: str) -> float:
        """ELO-like rating: 1500 plus up to 300 points of weighted form."""
        return BASE_ELO + MLFeatureExtractor.calculate_weighted_form(form) * ELO_FORM_SCALE

    @staticmethod
    def calculate_h2h_win_rate(historical: HistoricalData) -> float:
        """Home wins over head-to-head matches; 0 when there is no history."""
        h2h = historical.head_to_head
        return h2h.home_wins / max(h2h.matches, 1)

    @staticmethod
    def calculate_attack_strength(stats: TeamStats, league_avg_goals: float) -> float:
        return stats.goals_for / league_avg_goals

    @staticmethod
    def calculate_defense_strength(stats: TeamStats, league_avg_goals: float) -> float:
        # goals_against floored so a clean-sheet record does not divide by zero
        return league_avg_goals / max(stats.goals_against, MIN_GOALS_AGAINST)

    @staticmethod
    def calculate_xg_differential(stats: TeamStats, league_avg_goals: float) -> float:
        return (stats.xg_for - stats.xg_against) / league_avg_goals

    @staticmethod
    def calculate_key_player_impact(players: PlayerData) -> float:
        """
        Squad availability score in [0, 1].

        Starts at 0.5; rewards an available top scorer, the share of a full XI
        available and overall fitness; penalises injuries and suspensions.
        """
        score = 0.5
        if players.top_scorer_available:
            score += 0.2
        score += (players.key_players_available / FULL_SQUAD) * 0.3
        score -= players.key_injuries * 0.1
        score -= players.suspensions * 0.15
        score += (players.fitness_score / 100) * 0.2
        return _clamp(score, 0.0, 1.0)

    @staticmethod
    def calculate_venue_advantage(venue: VenueData) -> float:
        """
        Home advantage scaled by weather, pitch and travel, clamped to [0, 0.5].

        Travel distance is a raw magnitude, so the travel multiplier is usually
        negative for long trips; the clamp is what keeps the result sane.
        """
        advantage = venue.home_advantage_factor
        advantage *= 1 + venue.weather_impact * 0.1
        advantage *= 1 + venue.pitch_condition * 0.05
        advantage *= 1 - venue.travel_distance * 0.02
        return _clamp(advantage, 0.0, MAX_VENUE_ADVANTAGE)

    @staticmethod
    def calculate_motivation_score(motivation: MotivationFactors) -> float:
        """Weighted motivation score in [0, 1] (sub-factors on a 1-10 scale, rest in days)."""
        score = 0.5
        score += (motivation.match_importance / 10) * 0.3
        score += (motivation.league_position_pressure / 10) * 0.2
        score += (motivation.recent_form_momentum / 10) * 0.2
        score += (motivation.revenge_factor / 10) * 0.1
        score -= (motivation.fixture_congestion / 10) * 0.15
        score += (motivation.rest_days / 7) * 0.1
        return _clamp(score, 0.0, 1.0)

    @staticmethod
    def calculate_market_confidence(market: MarketData) -> float:
        volume_share = min(market.betting_volume / BETTING_VOLUME_SCALE, 1.0)
        return abs(market.odds_movement) * 0.3 + volume_share * 0.4 + market.sharp_money_indicator * 0.3

    @staticmethod
    def extract_features(
        context: MatchContext,
        league_avg_goals: float = DEFAULT_LEAGUE_AVG_GOALS,
        league_competitiveness: float = LEAGUE_COMPETITIVENESS,
        season_stage: float = SEASON_STAGE,
    ) -> MLFeatures:
        """
        Build the feature vector for one match.

        Args:
            context: Raw inputs for both sides
            league_avg_goals: League average goals per match (non-positive values fall back to 2.5)
            league_competitiveness: League competitiveness index
            season_stage: 0 = start of season, 1 = end

        Returns:
            MLFeatures
        """
        if league_avg_goals <= 0:
            league_avg_goals = DEFAULT_LEAGUE_AVG_GOALS

        home, away = context.home_stats, context.away_stats
        features = MLFeatures(
            home_team_elo=MLFeatureExtractor.calculate_elo(home.form),
            away_team_elo=MLFeatureExtractor.calculate_elo(away.form),
            home_form_weighted=MLFeatureExtractor.calculate_weighted_form(home.form),
            away_form_weighted=MLFeatureExtractor.calculate_weighted_form(away.form),
            h2h_win_rate=MLFeatureExtractor.calculate_h2h_win_rate(context.historical),
            home_xg_diff=MLFeatureExtractor.calculate_xg_differential(home, league_avg_goals),
            away_xg_diff=MLFeatureExtractor.calculate_xg_differential(away, league_avg_goals),
            home_attack_strength=MLFeatureExtractor.calculate_attack_strength(home, league_avg_goals),
            away_attack_strength=MLFeatureExtractor.calculate_attack_strength(away, league_avg_goals),
            home_defense_strength=MLFeatureExtractor.calculate_defense_strength(home, league_avg_goals),
            away_defense_strength=MLFeatureExtractor.calculate_defense_strength(away, league_avg_goals),
            home_key_players_score=MLFeatureExtractor.calculate_key_player_impact(context.home_players),
            away_key_players_score=MLFeatureExtractor.calculate_key_player_impact(context.away_players),
            venue_advantage=MLFeatureExtractor.calculate_venue_advantage(context.venue),
            motivation_differential=(
                MLFeatureExtractor.calculate_motivation_score(context.home_motivation)
                - MLFeatureExtractor.calculate_motivation_score(context.away_motivation)
            ),
            market_confidence=MLFeatureExtractor.calculate_market_confidence(context.market),
            league_competitiveness=league_competitiveness,
            season_stage=season_stage,
        )
        logger.debug(f"Extracted features: {features}")
        return features
