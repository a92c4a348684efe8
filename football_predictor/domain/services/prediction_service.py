"""
Prediction Service Module

This domain service assembles prediction records. Four models are available:
1. Advanced: feature extraction + outcome simulation + Poisson goal markets
2. Market: league-relative expected goals blended with bookmaker prices
3. Poisson: plain Poisson on goal averages when nothing else is known
4. Odds: bookmaker prices alone, when no team statistics are available

This is a pure domain service with no external dependencies.
"""

import logging
import math
from typing import Optional

from football_predictor.domain.constants import (
    ATTACK_BASELINE_GOALS,
    BASE_ELO,
    DEFAULT_LEAGUE_AVG_GOALS,
    DEFAULT_LEAGUE_HOME_ADVANTAGE,
    GOAL_DIFF_ELO_SCALE,
    LEAGUE_COMPETITIVENESS,
    MAX_CONFIDENCE,
    MIN_CONFIDENCE,
    ODDS_BTTS_GOALS,
    OVER_UNDER_LINE,
)
from football_predictor.domain.entities.entities import (
    AdvancedStats,
    LeagueConfig,
    MatchContext,
    MatchResult,
    Prediction,
    TeamStats,
    ValueBets,
)
from football_predictor.domain.services.expected_goals_service import ExpectedGoalsService
from football_predictor.domain.services.ml_feature_extractor import MLFeatureExtractor
from football_predictor.domain.services.outcome_simulator import OutcomeSimulator
from football_predictor.domain.services.poisson_service import PoissonService
from football_predictor.domain.services.value_bet_service import ValueBetService
from football_predictor.domain.value_objects.value_objects import (
    ExpectedGoals,
    Odds,
    OutcomeProbabilities,
    Scoreline,
)

logger = logging.getLogger(__name__)


DEFAULT_LEAGUE_CONFIG = LeagueConfig(
    name="Unknown League",
    country="International",
    avg_goals=DEFAULT_LEAGUE_AVG_GOALS,
    competitiveness=LEAGUE_COMPETITIVENESS,
    home_advantage=DEFAULT_LEAGUE_HOME_ADVANTAGE,
)


class PredictionService:
    """
    Domain service for generating match predictions.

    Every path picks its result label with ``select_result`` so ties are
    resolved the same way everywhere.
    """

    def __init__(self, value_bet_service: Optional[ValueBetService] = None):
        self.value_bet_service = value_bet_service or ValueBetService()

    @staticmethod
    def select_result(home: float, draw: float, away: float) -> MatchResult:
        """
        Pick the strictly greatest outcome.

        Home must beat both others, then away must beat both others; anything
        else (including any exact tie) is a draw.
        """
        if home > max(draw, away):
            return MatchResult.HOME_WIN
        if away > max(home, draw):
            return MatchResult.AWAY_WIN
        return MatchResult.DRAW

    @staticmethod
    def _winning_probability(result: MatchResult, probabilities: OutcomeProbabilities) -> float:
        if result == MatchResult.HOME_WIN:
            return probabilities.home
        if result == MatchResult.AWAY_WIN:
            return probabilities.away
        return probabilities.draw

    @staticmethod
    def _goal_markets(expected: ExpectedGoals) -> dict:
        markets = PoissonService.calculate_scoreline_markets(expected.home, expected.away)
        return {
            "expected_goals": str(expected),
            "btts": markets.btts_probability > 0.5,
            "btts_probability": markets.btts_probability,
            "over_25": markets.over_25_probability > 0.5,
            "over_25_probability": markets.over_25_probability,
            "predicted_scoreline": str(markets.most_likely_score),
            "scoreline_probability": markets.scoreline_probability,
        }

    def generate_prediction(self, context: MatchContext, data_source: str = "model") -> Prediction:
        """
        Generate the advanced prediction for one match.

        The scoreline distribution uses each side's own expected-goals rate;
        the league-relative expected goals are reported as total goals
        expectancy in the advanced stats.

        Args:
            context: Every input of the match
            data_source: Origin of the inputs, carried onto the record

        Returns:
            Prediction with confidence in [50, 95]
        """
        league_config = context.league_config or DEFAULT_LEAGUE_CONFIG

        features = MLFeatureExtractor.extract_features(context, league_avg_goals=league_config.avg_goals)
        outcome = OutcomeSimulator.simulate(features)
        probabilities = outcome.probabilities

        team_xg = ExpectedGoalsService.team_expected_goals(context.home_stats, context.away_stats)
        league_xg = ExpectedGoalsService.calculate_expected_goals(
            context.home_stats, context.away_stats, league_config
        )

        value_bets = self.value_bet_service.detect_value_bets(probabilities, context.market.current_odds)
        result = self.select_result(*probabilities.as_tuple())

        advanced_stats = AdvancedStats(
            home_elo=round(features.home_team_elo),
            away_elo=round(features.away_team_elo),
            home_form_score=round(features.home_form_weighted * 100),
            away_form_score=round(features.away_form_weighted * 100),
            home_attack_strength=round(features.home_attack_strength, 2),
            away_attack_strength=round(features.away_attack_strength, 2),
            venue_advantage=round(features.venue_advantage * 100),
            motivation_differential=round(features.motivation_differential * 100),
            market_confidence=round(features.market_confidence * 100),
            total_goals_expectancy=round(league_xg.total, 1),
            league_competitiveness=round(features.league_competitiveness * 100),
        )

        prediction = Prediction(
            result=result,
            confidence=round(outcome.confidence),
            home_win_probability=probabilities.home,
            draw_probability=probabilities.draw,
            away_win_probability=probabilities.away,
            value_bets=value_bets,
            advanced_stats=advanced_stats,
            model="advanced",
            data_source=data_source,
            **self._goal_markets(team_xg),
        )
        logger.debug(f"Advanced prediction: {result.value} ({prediction.confidence})")
        return prediction

    def generate_market_prediction(
        self,
        odds: Odds,
        home_stats: TeamStats,
        away_stats: TeamStats,
        league_config: Optional[LeagueConfig] = None,
    ) -> Prediction:
        """
        Generate a prediction blending the goal model with bookmaker prices.

        Steps:
        1. League-relative expected goals
        2. Poisson home / draw / away on the 6-goal grid
        3. Market blend (0.6 market / 0.4 model) with the form nudge
        4. Result label, value bets against the same prices

        Returns:
            Prediction with confidence round(winning probability * 100) clamped to [50, 95]
        """
        league_config = league_config or DEFAULT_LEAGUE_CONFIG

        expected = ExpectedGoalsService.calculate_expected_goals(home_stats, away_stats, league_config)
        model_probs = PoissonService.calculate_outcome_probabilities(expected.home, expected.away)

        home_form = MLFeatureExtractor.calculate_form_score(home_stats.form)
        away_form = MLFeatureExtractor.calculate_form_score(away_stats.form)
        probabilities = ValueBetService.blend_with_market(model_probs, odds, home_form, away_form)

        result = self.select_result(*probabilities.as_tuple())
        confidence = round(self._winning_probability(result, probabilities) * 100)
        confidence = min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, confidence))

        league_avg = league_config.avg_goals if league_config.avg_goals > 0 else DEFAULT_LEAGUE_AVG_GOALS
        advanced_stats = AdvancedStats(
            home_form_score=round(home_form * 100),
            away_form_score=round(away_form * 100),
            home_attack_strength=round(home_stats.goals_for / league_avg, 2),
            away_attack_strength=round(away_stats.goals_for / league_avg, 2),
            total_goals_expectancy=round(expected.total, 1),
            league_competitiveness=round(league_config.competitiveness * 100),
        )

        prediction = Prediction(
            result=result,
            confidence=confidence,
            home_win_probability=probabilities.home,
            draw_probability=probabilities.draw,
            away_win_probability=probabilities.away,
            value_bets=self.value_bet_service.detect_value_bets(probabilities, odds),
            advanced_stats=advanced_stats,
            model="market",
            data_source="fallback" if home_stats.fallback or away_stats.fallback else "model",
            **self._goal_markets(expected),
        )
        logger.debug(f"Market prediction: {result.value} ({confidence})")
        return prediction

    def generate_poisson_prediction(self, home_stats: TeamStats, away_stats: TeamStats) -> Prediction:
        """
        Generate a plain Poisson prediction from goal averages.

        Used for provider statistics where only goals for / against are known:
        the Poisson rate of each side is its goals_for. No market is involved,
        so nothing is flagged as value.
        """
        expected = ExpectedGoals(home=home_stats.goals_for, away=away_stats.goals_for)
        probabilities = PoissonService.calculate_outcome_probabilities(expected.home, expected.away)

        result = self.select_result(*probabilities.as_tuple())
        confidence = round(self._winning_probability(result, probabilities) * 100)

        def form_share(stats: TeamStats) -> int:
            total = stats.goals_for + stats.goals_against
            return round(stats.goals_for / total * 100) if total > 0 else 50

        advanced_stats = AdvancedStats(
            home_elo=round(BASE_ELO + (home_stats.goals_for - home_stats.goals_against) * GOAL_DIFF_ELO_SCALE),
            away_elo=round(BASE_ELO + (away_stats.goals_for - away_stats.goals_against) * GOAL_DIFF_ELO_SCALE),
            home_form_score=form_share(home_stats),
            away_form_score=form_share(away_stats),
            home_attack_strength=round(home_stats.goals_for / ATTACK_BASELINE_GOALS, 2),
            away_attack_strength=round(away_stats.goals_for / ATTACK_BASELINE_GOALS, 2),
            venue_advantage=round(home_stats.home_advantage * 100),
            total_goals_expectancy=round(expected.total, 1),
        )

        return Prediction(
            result=result,
            confidence=confidence,
            home_win_probability=probabilities.home,
            draw_probability=probabilities.draw,
            away_win_probability=probabilities.away,
            value_bets=ValueBets.none(),
            advanced_stats=advanced_stats,
            model="poisson",
            data_source="fallback" if home_stats.fallback or away_stats.fallback else "api",
            **self._goal_markets(expected),
        )

    def generate_odds_prediction(self, odds: Odds) -> Prediction:
        """
        Generate a prediction from bookmaker prices alone.

        The result and confidence come from the normalised implied
        probabilities. Expected goals are 2 - ln(price) for each side; the
        goal flags read those rates directly (both above 0.8 for BTTS, a total
        above 2.5 for over) and the scoreline is the rates rounded half up.
        The probabilities next to the flags come from the Poisson grid.
        """
        probabilities = OutcomeProbabilities(*odds.to_probabilities())
        result = self.select_result(*probabilities.as_tuple())
        confidence = round(self._winning_probability(result, probabilities) * 100)

        expected = ExpectedGoalsService.expected_goals_from_odds(odds)
        scoreline = Scoreline(home=math.floor(expected.home + 0.5), away=math.floor(expected.away + 0.5))
        markets = PoissonService.calculate_scoreline_markets(expected.home, expected.away)

        return Prediction(
            result=result,
            confidence=confidence,
            home_win_probability=probabilities.home,
            draw_probability=probabilities.draw,
            away_win_probability=probabilities.away,
            expected_goals=str(expected),
            btts=expected.home > ODDS_BTTS_GOALS and expected.away > ODDS_BTTS_GOALS,
            btts_probability=markets.btts_probability,
            over_25=expected.total > OVER_UNDER_LINE,
            over_25_probability=markets.over_25_probability,
            predicted_scoreline=str(scoreline),
            scoreline_probability=(
                PoissonService.poisson_probability(expected.home, scoreline.home)
                * PoissonService.poisson_probability(expected.away, scoreline.away)
            ),
            value_bets=ValueBets.none(),
            advanced_stats=AdvancedStats(total_goals_expectancy=round(expected.total, 1)),
            model="odds",
            data_source="odds",
        )
