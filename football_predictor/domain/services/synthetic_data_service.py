"""
Synthetic Data Service

Deterministic placeholder inputs for matches without a real statistics feed.
Every value is drawn from a linear congruential sequence seeded by the sum of
the character codes of the team name(s), so the same names always produce the
same inputs. Nothing in here is random between calls.
"""

import functools
import logging
from typing import Optional

from football_predictor.domain.entities.entities import (
    HeadToHead,
    HistoricalData,
    LeagueConfig,
    MarketData,
    MatchContext,
    MotivationFactors,
    PlayerData,
    TeamStats,
    VenueData,
)
from football_predictor.domain.value_objects.value_objects import Odds, TeamGoalAverages

logger = logging.getLogger(__name__)


def name_seed(text: str) -> int:
    """Sum of the character codes of ``text``."""
    return sum(ord(char) for char in text)


class SeededRandom:
    """
    Linear congruential generator: state = (state * 9301 + 49297) % 233280.

    Each draw advances the state, so consecutive values differ.
    """

    MULTIPLIER = 9301
    INCREMENT = 49297
    MODULUS = 233280

    def __init__(self, key: str):
        self.state = name_seed(key)

    def random(self) -> float:
        self.state = (self.state * self.MULTIPLIER + self.INCREMENT) % self.MODULUS
        return self.state / self.MODULUS

    def uniform(self, low: float, high: float) -> float:
        return low + self.random() * (high - low)

    def pick_result(self, weights: tuple[float, float, float]) -> str:
        """One of W, D, L with the given weights."""
        u = self.random()
        if u < weights[0]:
            return "W"
        if u < weights[0] + weights[1]:
            return "D"
        return "L"


TOP_TEAM_WEIGHTS = (0.6, 0.3, 0.1)
AVERAGE_TEAM_WEIGHTS = (0.4, 0.4, 0.2)
LOWER_TEAM_WEIGHTS = (0.3, 0.3, 0.4)
POOR_TEAM_WEIGHTS = (0.2, 0.3, 0.5)
FORM_LENGTH = 5


class SyntheticDataGenerator:
    """
    Generates team, player, historical, venue, motivation and market inputs.

    All methods are static; the frequently reused per-team generators are memoised.
    """

    @staticmethod
    @functools.lru_cache(maxsize=512)
    def generate_team_stats(team_name: str) -> TeamStats:
        """Synthetic attacking / defensive profile of one team."""
        rng = SeededRandom(team_name)

        form = ""
        for _ in range(FORM_LENGTH):
            weights = TOP_TEAM_WEIGHTS if rng.uniform(0, 100) > 50 else LOWER_TEAM_WEIGHTS
            form += rng.pick_result(weights)

        return TeamStats(
            form=form,
            goals_for=round(rng.uniform(0.8, 2.8), 1),
            goals_against=round(rng.uniform(0.6, 2.0), 1),
            xg_for=round(rng.uniform(0.9, 2.5), 1),
            xg_against=round(rng.uniform(0.7, 1.9), 1),
            shots_per_game=round(rng.uniform(8, 18), 1),
            possession_avg=round(rng.uniform(40, 65), 1),
            pass_accuracy=round(rng.uniform(75, 90), 1),
            corners_per_game=round(rng.uniform(4, 8), 1),
            fouls_per_game=round(rng.uniform(8, 14), 1),
            cards_per_game=round(rng.uniform(1, 3), 1),
            home_advantage=round(rng.uniform(0.05, 0.2), 2),
            away_form=round(rng.uniform(-0.1, 0.1), 2),
        )

    @staticmethod
    def generate_team_stats_from_averages(
        team_name: str,
        averages: TeamGoalAverages,
        is_home: bool,
    ) -> TeamStats:
        """
        Team profile around fetched goal averages.

        Form follows the goal-difference band of the team (good, average, poor);
        xG is estimated as 1.1 times the actual goals; the remaining fields are
        seeded extras.
        """
        rng = SeededRandom(team_name)

        performance = averages.avg_scored - averages.avg_conceded
        if performance > 0.5:
            weights = TOP_TEAM_WEIGHTS
        elif performance > -0.5:
            weights = AVERAGE_TEAM_WEIGHTS
        else:
            weights = POOR_TEAM_WEIGHTS
        form = "".join(rng.pick_result(weights) for _ in range(FORM_LENGTH))

        return TeamStats(
            form=form,
            goals_for=averages.avg_scored,
            goals_against=averages.avg_conceded,
            xg_for=round(averages.avg_scored * 1.1, 2),
            xg_against=round(averages.avg_conceded * 1.1, 2),
            shots_per_game=round(averages.avg_scored * 6 + rng.uniform(0, 4), 1),
            possession_avg=round(rng.uniform(45, 65), 1),
            pass_accuracy=round(rng.uniform(75, 90), 1),
            corners_per_game=round(averages.avg_scored * 2 + rng.uniform(0, 3), 1),
            fouls_per_game=round(rng.uniform(8, 14), 1),
            cards_per_game=round(rng.uniform(1, 3), 1),
            home_advantage=round(rng.uniform(0.1, 0.2), 2) if is_home else 0.0,
            away_form=0.0 if is_home else round(rng.uniform(-0.05, 0.05), 2),
            fallback=averages.fallback,
        )

    @staticmethod
    @functools.lru_cache(maxsize=512)
    def generate_player_data(team_name: str) -> PlayerData:
        rng = SeededRandom(team_name)
        return PlayerData(
            key_players_available=round(rng.uniform(7, 11)),
            top_scorer_available=rng.random() > 0.2,
            key_injuries=round(rng.uniform(0, 3)),
            suspensions=round(rng.uniform(0, 1)),
            fitness_score=round(rng.uniform(75, 95)),
        )

    @staticmethod
    def generate_historical_data(home_team: str, away_team: str) -> HistoricalData:
        """
        Synthetic record between two teams.

        Draw counts are derived from the other counts so that wins and draws
        always add up to the number of matches.
        """
        rng = SeededRandom(home_team + away_team)

        total = round(rng.uniform(5, 20))
        home_wins = round(rng.uniform(total * 0.3, total * 0.6))
        away_wins = min(round(rng.uniform(total * 0.1, total * 0.4)), total - home_wins)
        home_goals_avg = round(rng.uniform(1.2, 2.5), 1)
        away_goals_avg = round(rng.uniform(0.8, 1.8), 1)

        h2h_matches = round(rng.uniform(5, 10))
        h2h_home_wins = min(round(rng.uniform(2, 6)), h2h_matches)
        h2h_away_wins = min(round(rng.uniform(1, 4)), h2h_matches - h2h_home_wins)

        return HistoricalData(
            home_wins=home_wins,
            away_wins=away_wins,
            draws=total - home_wins - away_wins,
            home_goals_avg=home_goals_avg,
            away_goals_avg=away_goals_avg,
            head_to_head=HeadToHead(
                matches=h2h_matches,
                home_wins=h2h_home_wins,
                away_wins=h2h_away_wins,
                draws=h2h_matches - h2h_home_wins - h2h_away_wins,
                avg_goals=round(rng.uniform(2.0, 3.5), 1),
            ),
        )

    @staticmethod
    def generate_venue_data(home_team: str) -> VenueData:
        rng = SeededRandom(home_team)
        return VenueData(
            home_advantage_factor=round(rng.uniform(0.1, 0.2), 2),
            altitude=round(rng.uniform(0, 1000)),
            weather_impact=round(rng.uniform(0, 0.1), 2),
            pitch_condition=round(rng.uniform(0.7, 1.0), 2),
            travel_distance=round(rng.uniform(50, 500)),
        )

    @staticmethod
    def generate_motivation_factors(team_name: str) -> MotivationFactors:
        rng = SeededRandom(team_name)
        return MotivationFactors(
            match_importance=round(rng.uniform(5, 10)),
            league_position_pressure=round(rng.uniform(4, 9)),
            recent_form_momentum=round(rng.uniform(3, 9)),
            revenge_factor=round(rng.uniform(1, 8)),
            fixture_congestion=round(rng.uniform(3, 8)),
            rest_days=round(rng.uniform(2, 6)),
        )

    @staticmethod
    def generate_market_data(home_team: str, away_team: str, odds: Optional[Odds] = None) -> MarketData:
        """
        Market state around the bookmaker prices, or seeded prices when there are none.

        Opening odds are the current odds moved by up to 0.1 either way.
        """
        rng = SeededRandom(home_team + away_team)

        if odds is None:
            odds = Odds(
                home=round(rng.uniform(1.5, 3.5), 2),
                draw=round(rng.uniform(2.5, 4.0), 2),
                away=round(rng.uniform(2.0, 5.0), 2),
            )

        def drift(price: float) -> float:
            return max(1.0, round(price + rng.uniform(-0.1, 0.1), 2))

        opening = Odds(home=drift(odds.home), draw=drift(odds.draw), away=drift(odds.away))
        return MarketData.from_odds(
            opening_odds=opening,
            current_odds=odds,
            betting_volume=round(rng.uniform(0, 5_000_000)),
            sharp_money_indicator=round(rng.uniform(0.2, 1.0), 1),
        )

    @staticmethod
    def build_match_context(
        home_team: str,
        away_team: str,
        league_config: Optional[LeagueConfig] = None,
        odds: Optional[Odds] = None,
    ) -> MatchContext:
        """Every synthetic input for one fixture."""
        logger.debug(f"Generating synthetic context for {home_team} vs {away_team}")
        return MatchContext(
            home_stats=SyntheticDataGenerator.generate_team_stats(home_team),
            away_stats=SyntheticDataGenerator.generate_team_stats(away_team),
            historical=SyntheticDataGenerator.generate_historical_data(home_team, away_team),
            home_players=SyntheticDataGenerator.generate_player_data(home_team),
            away_players=SyntheticDataGenerator.generate_player_data(away_team),
            venue=SyntheticDataGenerator.generate_venue_data(home_team),
            market=SyntheticDataGenerator.generate_market_data(home_team, away_team, odds),
            home_motivation=SyntheticDataGenerator.generate_motivation_factors(home_team),
            away_motivation=SyntheticDataGenerator.generate_motivation_factors(away_team),
            league_config=league_config,
        )
