# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Generates RSA key pairs and signs Clerk-style session tokens
# - Provides a MagicMock storage handle shaped like SupabaseStorage
# =============================================================================

import os
import time

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("GOOGLE_PLACES_API_KEY", "test-places-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

from unittest.mock import MagicMock

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jose import jwt

from lib.supabase_client import SupabaseStorage


# =============================================================================
# Keys and Tokens
# =============================================================================

def _generate_key_pair() -> tuple[str, str]:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    public_pem = key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()
    return private_pem, public_pem


@pytest.fixture(scope="session")
def rsa_keys():
    """(private_pem, public_pem) used to sign and verify test tokens."""
    return _generate_key_pair()


@pytest.fixture(scope="session")
def other_rsa_keys():
    """A second, unrelated key pair."""
    return _generate_key_pair()


@pytest.fixture(scope="session")
def public_key(rsa_keys):
    return rsa_keys[1]


@pytest.fixture
def make_token(rsa_keys):
    """
    Build a signed session token.

    Usage:
        token = make_token(sub="user_abc", expires_in=-60)
    """
    private_pem, _ = rsa_keys

    def _make(
        sub: str | None = "user_2abc",
        expires_in: int = 300,
        algorithm: str = "RS256",
        key: str | None = None,
        **claims,
    ) -> str:
        now = int(time.time())
        payload = {
            "iss": "https://clerk.example.com",
            "iat": now,
            "exp": now + expires_in,
            "email": "ada@example.com",
            "firstName": "Ada",
            "lastName": "Lovelace",
            **claims,
        }
        if sub is not None:
            payload["sub"] = sub
        return jwt.encode(payload, key or private_pem, algorithm=algorithm)

    return _make


# =============================================================================
# Storage
# =============================================================================

@pytest.fixture
def mock_storage():
    """
    A storage handle with the SupabaseStorage interface.

    The Clerk user "user_2abc" already maps to local user 42 and has no
    favorites; individual tests reconfigure the return values they need.
    """
    storage = MagicMock(spec=SupabaseStorage)
    storage.get_user_id_by_external_id.return_value = 42
    storage.get_favorite_ids.return_value = frozenset()
    return storage


@pytest.fixture
def sample_search_payload():
    """A places:searchNearby response with two cafes."""
    return {
        "places": [
            {
                "id": "place_blue_bottle",
                "displayName": {"text": "Blue Bottle Coffee", "languageCode": "en"},
                "location": {"latitude": 37.7955, "longitude": -122.3937},
                "photos": [{"name": "places/place_blue_bottle/photos/p1", "widthPx": 800}],
            },
            {
                "id": "place_sightglass",
                "displayName": {"text": "Sightglass"},
                "location": {"latitude": 37.7770, "longitude": -122.4085},
            },
        ]
    }


@pytest.fixture
def sample_detail_payload():
    """A place details response with a full week of hours."""
    return {
        "id": "place_blue_bottle",
        "displayName": {"text": "Blue Bottle Coffee"},
        "formattedAddress": "1 Ferry Building, San Francisco, CA 94111",
        "location": {"latitude": 37.7955, "longitude": -122.3937},
        "googleMapsUri": "https://maps.google.com/?cid=1",
        "websiteUri": "https://bluebottlecoffee.com",
        "internationalPhoneNumber": "+1 510-653-3394",
        "rating": 4.6,
        "priceLevel": "PRICE_LEVEL_MODERATE",
        "currentOpeningHours": {
            "openNow": True,
            "periods": [
                {"open": {"day": 0, "hour": 8}, "close": {"day": 0, "hour": 17}},
                {"open": {"day": 1, "hour": 7}, "close": {"day": 1, "hour": 19}},
                {"open": {"day": 2, "hour": 7}, "close": {"day": 2, "hour": 19}},
                {"open": {"day": 3, "hour": 7}, "close": {"day": 3, "hour": 19}},
                {"open": {"day": 4, "hour": 7}, "close": {"day": 4, "hour": 19}},
                {"open": {"day": 5, "hour": 7}, "close": {"day": 5, "hour": 19, "minute": 30}},
            ],
        },
        "photos": [
            {"name": "places/place_blue_bottle/photos/p1"},
            {"name": "places/place_blue_bottle/photos/p2"},
        ],
    }
