# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Ristretto API:
# - test_verifier.py: Clerk token verification
# - test_identity_service.py: Local user provisioning
# - test_place_normalizer.py: Hours, photos and place normalization
# - test_places_client.py: Google Places client (httpx.MockTransport)
# - test_aggregation_service.py: Favorites overlay and fallback behavior
# - test_supabase_client.py: Storage wrapper over a mocked Supabase client
# - test_models.py: Unit tests for Pydantic model validation
# - test_config.py: Settings and the Places fallback switch
# - test_api.py: Endpoint tests through FastAPI's TestClient
#
# Run tests with: pytest
# =============================================================================
