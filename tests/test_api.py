# =============================================================================
# tests/test_api.py - HTTP Endpoint Tests
# =============================================================================
# This module contains tests for:
# - The authentication gate (missing header, bad token, provisioning failure)
# - /coffee_shops list and detail, including query validation
# - /favorites, /visits and /user
# - Health, root and OPTIONS handling
#
# The FastAPI dependencies are overridden: storage is a MagicMock, tokens
# are verified against a generated key and Places is an httpx.MockTransport.
# =============================================================================

import json
from datetime import datetime, timezone

import httpx
import pytest
from fastapi.testclient import TestClient

from app.auth.dependencies import get_token_verifier
from app.auth.verifier import TokenVerifier
from app.dependencies import get_aggregation_service, get_storage
from app.exceptions import StorageError
from app.main import app
from core.models.user import FavoriteRecord, UserProfile, VisitRecord
from core.services.aggregation_service import AggregationService
from core.services.favorites_overlay import FavoritesOverlay
from core.services.place_normalizer import PlaceNormalizer
from lib.places_client import GooglePlacesClient


class FakePlacesApi:
    """Serves canned Places responses and records requests."""

    def __init__(self, search_payload, detail_payload):
        self.search_payload = search_payload
        self.detail_payload = detail_payload
        self.status_code = 200
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, text="backend error")
        if request.method == "POST":
            return httpx.Response(200, json=self.search_payload)
        return httpx.Response(200, json=self.detail_payload)


@pytest.fixture
def places_api(sample_search_payload, sample_detail_payload):
    return FakePlacesApi(sample_search_payload, sample_detail_payload)


@pytest.fixture
def use_fallback():
    return False


@pytest.fixture
def client(mock_storage, public_key, places_api, use_fallback):
    """TestClient with storage, token verification and Places replaced."""
    http = httpx.AsyncClient(transport=httpx.MockTransport(places_api))

    def aggregation_override():
        return AggregationService(
            places=GooglePlacesClient(http, api_key="test-key", base_url="https://places.test/v1"),
            normalizer=PlaceNormalizer(api_key="test-key"),
            overlay=FavoritesOverlay(mock_storage),
            use_fallback=use_fallback,
        )

    app.dependency_overrides[get_storage] = lambda: mock_storage
    app.dependency_overrides[get_token_verifier] = lambda: TokenVerifier(public_key)
    app.dependency_overrides[get_aggregation_service] = aggregation_override

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(make_token):
    return {"Authorization": f"Bearer {make_token()}"}


# =============================================================================
# Authentication
# =============================================================================

class TestAuthGate:
    """Every protected route goes through token verification and provisioning."""

    @pytest.mark.parametrize("path", ["/coffee_shops", "/favorites", "/visits", "/user"])
    def test_missing_header(self, client, path):
        response = client.get(path)

        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_HEADER"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_non_bearer_scheme(self, client):
        response = client.get("/favorites", headers={"Authorization": "Basic dXNlcjpwYXNz"})

        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_HEADER"

    def test_invalid_token(self, client, make_token):
        token = make_token(expires_in=-60)

        response = client.get("/favorites", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json() == {"detail": "Invalid or expired token", "code": "INVALID_TOKEN"}

    def test_first_request_provisions_user(self, client, mock_storage, auth_headers):
        mock_storage.get_user_id_by_external_id.return_value = None
        mock_storage.create_user.return_value = 77
        mock_storage.list_visits.return_value = []

        response = client.get("/visits", headers=auth_headers)

        assert response.status_code == 200
        mock_storage.create_user.assert_called_once_with(
            "user_2abc", "ada@example.com", "Ada", "Lovelace"
        )
        mock_storage.list_visits.assert_called_once_with(77)

    def test_provisioning_failure(self, client, mock_storage, auth_headers):
        """Test a storage failure while resolving the user is a 500."""
        mock_storage.get_user_id_by_external_id.side_effect = StorageError(
            "get_user_id_by_external_id", "connection refused"
        )

        response = client.get("/favorites", headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["code"] == "PROVISIONING_FAILED"
        assert "connection refused" not in response.text

    def test_missing_public_key(self, client, mock_storage, auth_headers):
        app.dependency_overrides[get_token_verifier] = lambda: TokenVerifier(None)

        response = client.get("/favorites", headers=auth_headers)

        assert response.status_code == 500
        assert response.json()["code"] == "CONFIG_ERROR"
        mock_storage.get_user_id_by_external_id.assert_not_called()


# =============================================================================
# Coffee Shops
# =============================================================================

class TestCoffeeShops:
    """Test /coffee_shops."""

    def test_list(self, client, mock_storage, places_api, auth_headers):
        mock_storage.get_favorite_ids.return_value = frozenset({"place_blue_bottle"})

        response = client.get(
            "/coffee_shops",
            params={"lat": 37.78, "lng": -122.41, "radius": 1000, "max": 5},
            headers=auth_headers,
        )

        assert response.status_code == 200
        shops = response.json()["coffeeShops"]
        assert shops[0] == {
            "id": "place_blue_bottle",
            "name": "Blue Bottle Coffee",
            "latitude": 37.7955,
            "longitude": -122.3937,
            "isFavorite": True,
        }
        assert shops[1]["isFavorite"] is False
        mock_storage.get_favorite_ids.assert_called_once_with(42)

        sent = json.loads(places_api.requests[0].content)
        assert sent["maxResultCount"] == 5
        assert sent["locationRestriction"]["circle"]["radius"] == 1000

    def test_list_defaults(self, client, places_api, auth_headers):
        response = client.get("/coffee_shops", headers=auth_headers)

        assert response.status_code == 200
        sent = json.loads(places_api.requests[0].content)
        circle = sent["locationRestriction"]["circle"]
        assert circle["center"] == {"latitude": 37.7937, "longitude": -122.3965}
        assert circle["radius"] == 500
        assert sent["maxResultCount"] == 10

    @pytest.mark.parametrize("params", [
        {"lat": "north"},
        {"lat": 91},
        {"lng": -181},
        {"radius": 0},
        {"radius": 50001},
        {"max": 0},
        {"max": 21},
    ])
    def test_invalid_query(self, client, places_api, auth_headers, params):
        """Test malformed or out-of-range parameters are a 400."""
        response = client.get("/coffee_shops", params=params, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
        assert places_api.requests == []

    def test_favorites_outage(self, client, mock_storage, auth_headers):
        mock_storage.get_favorite_ids.side_effect = StorageError("get_favorite_ids", "down")

        response = client.get("/coffee_shops", headers=auth_headers)

        assert response.status_code == 200
        assert all(not shop["isFavorite"] for shop in response.json()["coffeeShops"])

    def test_provider_failure(self, client, places_api, auth_headers):
        places_api.status_code = 503

        response = client.get("/coffee_shops", headers=auth_headers)

        assert response.status_code == 502
        assert response.json()["code"] == "PROVIDER_ERROR"
        assert "backend error" not in response.text

    @pytest.mark.parametrize("use_fallback", [True])
    def test_provider_failure_with_fallback(self, client, places_api, auth_headers, use_fallback):
        places_api.status_code = 503

        response = client.get("/coffee_shops", headers=auth_headers)

        assert response.status_code == 200
        ids = [shop["id"] for shop in response.json()["coffeeShops"]]
        assert ids == ["mock_1", "mock_2", "mock_3"]

    def test_detail(self, client, mock_storage, places_api, auth_headers):
        mock_storage.get_favorite_ids.return_value = frozenset({"place_blue_bottle"})

        response = client.get("/coffee_shops/place_blue_bottle", headers=auth_headers)

        assert response.status_code == 200
        shop = response.json()["coffeeShop"]
        assert shop["isFavorite"] is True
        assert shop["priceLevel"] == 2
        assert shop["phoneNumber"] == "+1 510-653-3394"
        assert len(shop["openingHours"]) == 7
        assert len(shop["photos"]) == 2
        assert str(places_api.requests[0].url).endswith("/places/place_blue_bottle")

    def test_detail_id_cannot_inject_query(self, client, places_api, auth_headers):
        """Test an encoded '?' in the path stays inside the provider path segment."""
        response = client.get("/coffee_shops/abc%3Ffoo=1", headers=auth_headers)

        assert response.status_code == 200
        sent = places_api.requests[0].url
        assert sent.query == b""
        assert sent.raw_path == b"/v1/places/abc%3Ffoo%3D1"

    def test_detail_without_hours_or_photos(self, client, places_api, auth_headers):
        places_api.detail_payload = {"id": "bare", "displayName": {"text": "Bare Cafe"}}

        response = client.get("/coffee_shops/bare", headers=auth_headers)

        shop = response.json()["coffeeShop"]
        assert shop["openingHours"] == []
        assert shop["photos"] == []
        assert shop["address"] is None


# =============================================================================
# Favorites
# =============================================================================

class TestFavorites:
    """Test /favorites."""

    def test_list(self, client, mock_storage, auth_headers):
        mock_storage.list_favorites.return_value = [
            FavoriteRecord(place_id="p1", name="Blue Bottle", latitude=1.0, longitude=2.0),
        ]

        response = client.get("/favorites", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {
            "favorites": [
                {"id": "p1", "name": "Blue Bottle", "latitude": 1.0, "longitude": 2.0, "isFavorite": True},
            ]
        }

    def test_add(self, client, mock_storage, auth_headers):
        mock_storage.add_favorite.return_value = True

        response = client.post(
            "/favorites",
            json={"id": "p1", "name": "Blue Bottle", "latitude": 1.0, "longitude": 2.0},
            headers=auth_headers,
        )

        assert response.status_code == 201
        assert response.json() == {"message": "Added to favorites"}
        user_id, favorite = mock_storage.add_favorite.call_args.args
        assert user_id == 42
        assert favorite.id == "p1"

    def test_add_duplicate(self, client, mock_storage, auth_headers):
        """Test repeating the request reports the existing favorite."""
        mock_storage.add_favorite.return_value = False

        response = client.post(
            "/favorites",
            json={"id": "p1", "name": "Blue Bottle"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Already in favorites"}

    @pytest.mark.parametrize("body", [
        {"name": "No id"},
        {"id": "", "name": "Empty id"},
        {"id": "p1"},
        {"id": "p1", "name": ""},
    ])
    def test_add_invalid(self, client, mock_storage, auth_headers, body):
        response = client.post("/favorites", json=body, headers=auth_headers)

        assert response.status_code == 400
        mock_storage.add_favorite.assert_not_called()

    def test_add_malformed_json(self, client, auth_headers):
        response = client.post(
            "/favorites",
            content=b"{not json",
            headers={**auth_headers, "Content-Type": "application/json"},
        )

        assert response.status_code == 400

    def test_remove(self, client, mock_storage, auth_headers):
        mock_storage.remove_favorite.return_value = 1

        response = client.delete("/favorites", params={"placeId": "p1"}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Removed from favorites"}
        mock_storage.remove_favorite.assert_called_once_with(42, "p1")

    def test_remove_missing(self, client, mock_storage, auth_headers):
        mock_storage.remove_favorite.return_value = 0

        response = client.delete("/favorites", params={"placeId": "p1"}, headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["code"] == "FAVORITE_NOT_FOUND"

    def test_remove_without_place_id(self, client, mock_storage, auth_headers):
        response = client.delete("/favorites", headers=auth_headers)

        assert response.status_code == 400
        mock_storage.remove_favorite.assert_not_called()


# =============================================================================
# Visits and User
# =============================================================================

class TestVisits:
    """Test /visits."""

    def test_list(self, client, mock_storage, auth_headers):
        visited_at = datetime(2025, 1, 15, 10, 30, tzinfo=timezone.utc)
        mock_storage.list_visits.return_value = [
            VisitRecord(place_id="p1", name="Blue Bottle", visited_at=visited_at),
        ]

        response = client.get("/visits", headers=auth_headers)

        assert response.status_code == 200
        visit = response.json()["visits"][0]
        assert visit["placeId"] == "p1"
        assert visit["visitedAt"].startswith("2025-01-15T10:30:00")

    def test_record(self, client, mock_storage, auth_headers):
        response = client.post("/visits", json={"id": "p1", "name": "Blue Bottle"}, headers=auth_headers)

        assert response.status_code == 201
        assert response.json() == {"message": "Visit recorded"}
        mock_storage.add_visit.assert_called_once_with(42, "p1", "Blue Bottle")

    def test_record_invalid(self, client, mock_storage, auth_headers):
        response = client.post("/visits", json={"name": "No id"}, headers=auth_headers)

        assert response.status_code == 400
        mock_storage.add_visit.assert_not_called()


class TestUser:
    """Test /user."""

    def test_profile(self, client, mock_storage, auth_headers):
        mock_storage.get_user_profile.return_value = UserProfile(
            id=42, clerk_id="user_2abc", email="ada@example.com", first_name="Ada"
        )

        response = client.get("/user", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["clerkId"] == "user_2abc"
        assert body["firstName"] == "Ada"

    def test_profile_missing(self, client, mock_storage, auth_headers):
        mock_storage.get_user_profile.return_value = None

        response = client.get("/user", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["code"] == "USER_NOT_FOUND"


# =============================================================================
# Public Endpoints
# =============================================================================

class TestPublicEndpoints:
    """Endpoints that need no token."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_live(self, client):
        assert client.get("/health/live").json()["status"] == "alive"

    def test_ready_checks_storage(self, client, mock_storage):
        response = client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["checks"]["database"] == "healthy"
        mock_storage.ping.assert_called_once()

    def test_ready_degraded(self, client, mock_storage):
        mock_storage.ping.side_effect = StorageError("ping", "down")

        response = client.get("/health/ready")

        assert response.json()["status"] == "degraded"

    def test_root(self, client):
        assert client.get("/").json()["name"] == "Ristretto API"

    @pytest.mark.parametrize("path", ["/coffee_shops", "/favorites", "/anything/else"])
    def test_options_without_auth(self, client, path):
        response = client.options(path)

        assert response.status_code == 200
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    def test_cors_preflight(self, client):
        response = client.options(
            "/favorites",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Authorization",
            },
        )

        assert response.status_code == 200
        assert "access-control-allow-origin" in response.headers

    @pytest.mark.parametrize("origin", ["http://localhost:3000", "https://unlisted.example.com"])
    def test_cors_preflight_any_origin_and_headers(self, client, origin):
        """Test preflights asking for extra headers from any origin are answered."""
        response = client.options(
            "/favorites",
            headers={
                "Origin": origin,
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Authorization, X-Requested-With",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        assert "x-requested-with" in response.headers["access-control-allow-headers"].lower()
