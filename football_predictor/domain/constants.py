"""
Domain Constants

This module contains constant definitions valid across the domain layer:
model weights, caps, defaults for missing data and the known-league table.
"""

# ------------------------------------------------------------
# Defaults for missing or sparse data
# ------------------------------------------------------------
DEFAULT_GOALS_PER_MATCH = 1.3
DEFAULT_LEAGUE_AVG_GOALS = 2.5
DEFAULT_LEAGUE_HOME_ADVANTAGE = 0.1
MIN_GOALS_AGAINST = 0.1  # Floor for defense strength denominators
MIN_EXPECTED_GOALS = 0.1

# ------------------------------------------------------------
# Poisson grid bounds
# ------------------------------------------------------------
OUTCOME_MAX_GOALS = 6
BTTS_MAX_GOALS = 6
OVER_UNDER_MAX_GOALS = 8
SCORELINE_MAX_GOALS = 5
OVER_UNDER_LINE = 2.5

# ------------------------------------------------------------
# Feature extraction
# ------------------------------------------------------------
BASE_ELO = 1500
ELO_FORM_SCALE = 300
FORM_WEIGHTS = (0.4, 0.3, 0.2, 0.08, 0.02)  # Most recent match first
FORM_POINTS = {"W": 3, "D": 1, "L": 0}
FORM_DECAY = 0.85
FORM_SCORE_NORMALIZER = 15
FULL_SQUAD = 11
MAX_VENUE_ADVANTAGE = 0.5
BETTING_VOLUME_SCALE = 1_000_000
LEAGUE_COMPETITIVENESS = 0.8  # Placeholder until league tables are wired in
SEASON_STAGE = 0.5  # 0 = start, 1 = end of season
GOAL_DIFF_ELO_SCALE = 100  # Rating points per goal of average goal difference
ATTACK_BASELINE_GOALS = 1.5
ELO_K_FACTOR = 32

# ------------------------------------------------------------
# Outcome simulation
# ------------------------------------------------------------
FORM_COEFFICIENT = 0.15
H2H_COEFFICIENT = 0.1
XG_COEFFICIENT = 0.1
KEY_PLAYERS_COEFFICIENT = 0.1
VENUE_COEFFICIENT = 0.2
MOTIVATION_COEFFICIENT = 0.1
BASE_DRAW_PROBABILITY = 0.25
MIN_HOME_ADVANTAGE = 0.1
MAX_HOME_ADVANTAGE = 0.9
MIN_OUTCOME_PROBABILITY = 0.05
MAX_OUTCOME_PROBABILITY = 0.9
MIN_CONFIDENCE = 50
MAX_CONFIDENCE = 95
CONFIDENCE_SCALE = 90
HIGH_CONFIDENCE_THRESHOLD = 70
MEDIUM_CONFIDENCE_THRESHOLD = 50

# ------------------------------------------------------------
# Market blending and value detection
# ------------------------------------------------------------
MARKET_WEIGHT = 0.6
MODEL_WEIGHT = 0.4
FORM_ADJUSTMENT_FACTOR = 0.1
VALUE_EDGE_THRESHOLD = 0.05
MAX_KELLY_FRACTION = 0.25
AWAY_HOME_ADVANTAGE_FACTOR = 0.5

# ------------------------------------------------------------
# Odds-only goal model
# ------------------------------------------------------------
ODDS_GOALS_INTERCEPT = 2.0  # xG = intercept - ln(odds)
MIN_ODDS_EXPECTED_GOALS = 0.2
ODDS_BTTS_GOALS = 0.8  # Both sides above this rate count as both scoring

# ------------------------------------------------------------
# Known leagues (sport key -> normalisation constants)
# ------------------------------------------------------------
LEAGUE_CONFIGS = {
    "soccer_epl": {"name": "Premier League", "country": "England", "avg_goals": 2.8, "competitiveness": 0.9, "home_advantage": 0.12},
    "soccer_efl_champ": {"name": "Championship", "country": "England", "avg_goals": 2.5, "competitiveness": 0.92, "home_advantage": 0.13},
    "soccer_spain_la_liga": {"name": "La Liga", "country": "Spain", "avg_goals": 2.6, "competitiveness": 0.82, "home_advantage": 0.15},
    "soccer_germany_bundesliga": {"name": "Bundesliga", "country": "Germany", "avg_goals": 3.1, "competitiveness": 0.8, "home_advantage": 0.12},
    "soccer_italy_serie_a": {"name": "Serie A", "country": "Italy", "avg_goals": 2.7, "competitiveness": 0.85, "home_advantage": 0.14},
    "soccer_france_ligue_one": {"name": "Ligue 1", "country": "France", "avg_goals": 2.6, "competitiveness": 0.78, "home_advantage": 0.14},
    "soccer_netherlands_eredivisie": {"name": "Eredivisie", "country": "Netherlands", "avg_goals": 3.0, "competitiveness": 0.75, "home_advantage": 0.16},
    "soccer_portugal_primeira_liga": {"name": "Primeira Liga", "country": "Portugal", "avg_goals": 2.5, "competitiveness": 0.74, "home_advantage": 0.15},
    "soccer_usa_mls": {"name": "MLS", "country": "USA", "avg_goals": 2.9, "competitiveness": 0.88, "home_advantage": 0.18},
    "soccer_brazil_serie_a": {"name": "Brasileirão", "country": "Brazil", "avg_goals": 2.4, "competitiveness": 0.86, "home_advantage": 0.2},
}
