"""
Unit Tests for API Endpoints

Tests the FastAPI routes and responses.
"""

import pytest
from fastapi.testclient import TestClient

from football_predictor.api.main import app
from football_predictor.api.dependencies import get_predict_match_use_case, get_refresh_matches_use_case
from football_predictor.application.dtos.dtos import StoredMatchesResponseDTO
from football_predictor.domain.exceptions import InvalidInputException


STATS = {"form": "WDWDL", "goals_for": 1.4, "goals_against": 1.2, "xg_for": 1.5, "xg_against": 1.1}


@pytest.fixture
def client():
    """Create test client."""
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealthEndpoint:
    """Tests for health check endpoint."""

    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data
        assert "timestamp" in data


class TestRootEndpoint:
    """Tests for root endpoint."""

    def test_root_returns_api_info(self, client):
        response = client.get("/")
        assert response.status_code == 200

        data = response.json()
        assert "name" in data
        assert "version" in data
        assert "endpoints" in data


class TestLeaguesEndpoints:
    """Tests for leagues endpoints."""

    def test_list_leagues(self, client):
        response = client.get("/api/v1/leagues")
        assert response.status_code == 200

        data = response.json()
        assert data["total"] == 10
        assert {league["sport_key"] for league in data["leagues"]} >= {"soccer_epl", "soccer_spain_la_liga"}

    def test_known_league_config(self, client):
        response = client.get("/api/v1/leagues/soccer_epl/config")
        assert response.status_code == 200
        assert response.json()["name"] == "Premier League"

    def test_unknown_league_config(self, client):
        response = client.get("/api/v1/leagues/soccer_japan_j_league/config", params={"sport_title": "J League"})
        assert response.status_code == 200

        data = response.json()
        assert data["name"] == "J League"
        assert data["country"] == "Japan"


class TestPredictionEndpoints:
    """Tests for prediction endpoints."""

    def test_predict_match(self, client):
        response = client.post("/api/v1/predictions", json={
            "home_stats": STATS,
            "away_stats": STATS,
            "market": {"current_odds": {"home": 2.1, "draw": 3.3, "away": 3.6}},
        })
        assert response.status_code == 200

        data = response.json()
        assert data["model"] == "advanced"
        assert data["result"] in ("Home Win", "Draw", "Away Win")
        assert set(data["value_bets"]) == {"home", "draw", "away"}
        total = data["home_win_probability"] + data["draw_probability"] + data["away_win_probability"]
        assert total == pytest.approx(1.0)

    def test_invalid_form_rejected(self, client):
        response = client.post("/api/v1/predictions", json={
            "home_stats": {**STATS, "form": "WXZ"},
            "away_stats": STATS,
            "market": {"current_odds": {"home": 2.1, "draw": 3.3, "away": 3.6}},
        })
        assert response.status_code == 422

    def test_domain_validation_error(self, client):
        class FailingUseCase:
            def execute(self, request):
                raise InvalidInputException("Odds must be >= 1.0")

        app.dependency_overrides[get_predict_match_use_case] = lambda: FailingUseCase()

        response = client.post("/api/v1/predictions", json={
            "home_stats": STATS,
            "away_stats": STATS,
            "market": {"current_odds": {"home": 2.1, "draw": 3.3, "away": 3.6}},
        })
        assert response.status_code == 422
        assert response.json()["error"] == "invalid_input"

    def test_market_prediction(self, client):
        response = client.post("/api/v1/predictions/market", json={
            "odds": {"home": 1.7, "draw": 3.8, "away": 5.0},
            "home_stats": STATS,
            "away_stats": STATS,
            "sport_key": "soccer_epl",
        })
        assert response.status_code == 200
        assert response.json()["model"] == "market"
        assert response.json()["confidence_level"] in ("high", "medium")

    def test_market_prediction_rejects_bad_odds(self, client):
        response = client.post("/api/v1/predictions/market", json={
            "odds": {"home": 0.5, "draw": 3.8, "away": 5.0},
            "home_stats": STATS,
            "away_stats": STATS,
        })
        assert response.status_code == 422

    @pytest.mark.parametrize("price", ["inf", "-inf", "nan"])
    def test_market_prediction_rejects_non_finite_odds(self, client, price):
        response = client.post("/api/v1/predictions/market", json={
            "odds": {"home": price, "draw": price, "away": price},
            "home_stats": STATS,
            "away_stats": STATS,
        })
        assert response.status_code == 422

    def test_advanced_prediction_rejects_infinite_odds(self, client):
        response = client.post("/api/v1/predictions", json={
            "home_stats": STATS,
            "away_stats": STATS,
            "market": {"current_odds": {"home": "inf", "draw": 3.2, "away": 4.0}},
        })
        assert response.status_code == 422

    def test_odds_prediction(self, client):
        response = client.post("/api/v1/predictions/odds", json={"home": 1.5, "draw": 4.0, "away": 6.0})
        assert response.status_code == 200

        data = response.json()
        assert data["model"] == "odds"
        assert data["result"] == "Home Win"
        assert data["confidence"] == 62
        assert data["confidence_level"] == "medium"
        assert data["predicted_scoreline"] == "2-0"

    def test_odds_prediction_rejects_infinite_odds(self, client):
        response = client.post("/api/v1/predictions/odds", json={"home": "inf", "draw": 4.0, "away": 6.0})
        assert response.status_code == 422


class TestMatchesEndpoints:
    """Tests for matches endpoints."""

    def test_enrich_fixtures(self, client):
        response = client.post("/api/v1/matches/enrich", json={"fixtures": [
            {
                "id": "evt-1",
                "sport_key": "soccer_epl",
                "sport_title": "EPL",
                "commence_time": "2024-08-17T14:00:00Z",
                "home_team": "Arsenal",
                "away_team": "Wolves",
                "bookmakers": [{"markets": [{"key": "h2h", "outcomes": [
                    {"name": "Arsenal", "price": 1.4},
                    {"name": "Draw", "price": 4.8},
                    {"name": "Wolves", "price": 7.5},
                ]}]}],
            },
            {"id": "evt-2", "sport_key": "soccer_usa_mls", "home_team": "LA Galaxy", "away_team": "LAFC"},
        ]})
        assert response.status_code == 200

        data = response.json()
        assert data["skipped"] == 0
        assert [match["id"] for match in data["matches"]] == ["evt-1", "evt-2"]
        assert data["matches"][0]["odds"] == {"home": 1.4, "draw": 4.8, "away": 7.5}
        assert data["matches"][0]["prediction"]["data_source"] == "synthetic"

    def test_enrich_requires_fixtures(self, client):
        response = client.post("/api/v1/matches/enrich", json={"fixtures": []})
        assert response.status_code == 422

    def test_stored_matches(self, client):
        class StubRefresh:
            def __init__(self):
                self.force = None

            async def execute(self, force=False):
                self.force = force
                return StoredMatchesResponseDTO(matches=[{"id": "1"}], total=1, refreshed=force)

        stub = StubRefresh()
        app.dependency_overrides[get_refresh_matches_use_case] = lambda: stub

        response = client.get("/api/v1/matches", params={"force": "true"})
        assert response.status_code == 200

        data = response.json()
        assert data["total"] == 1
        assert data["refreshed"] is True
        assert stub.force is True
