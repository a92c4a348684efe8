"""
Unit Tests for the League Service
"""

from football_predictor.domain.services.league_service import LeagueService


class TestLeagueService:
    """Tests for LeagueService."""

    def test_known_league(self):
        config = LeagueService.get_league_config("soccer_epl")

        assert config.name == "Premier League"
        assert config.country == "England"
        assert config.avg_goals == 2.8
        assert LeagueService.is_known("soccer_epl")

    def test_unknown_league_is_seeded(self):
        config = LeagueService.get_league_config("soccer_japan_j_league", "J League")

        assert config.name == "J League"
        assert config.country == "Japan"
        assert 2.2 <= config.avg_goals <= 3.0
        assert 0.7 <= config.competitiveness <= 0.95
        assert 0.1 <= config.home_advantage <= 0.2
        assert config == LeagueService.get_league_config("soccer_japan_j_league", "J League")

    def test_unknown_league_without_title(self):
        config = LeagueService.get_league_config("soccer_korea_kleague1")
        assert config.name == "soccer_korea_kleague1"
        assert config.country == "Korea"

    def test_country_fallback(self):
        assert LeagueService.country_from_sport_key("custom") == "International"
        assert LeagueService.country_from_sport_key("soccer_") == "International"

    def test_list_known_leagues(self):
        leagues = LeagueService.list_known_leagues()

        assert len(leagues) == 10
        assert leagues["soccer_germany_bundesliga"].avg_goals == 3.1
