# =============================================================================
# lib/ - External Service Clients
# =============================================================================
# This package contains the clients for the two external collaborators:
# - supabase_client.py: Typed storage handle over Supabase (users, favorites, visits)
# - places_client.py: Google Places API (nearby search, place details)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.places_client import GooglePlacesClient
from lib.supabase_client import SupabaseStorage, create_storage

__all__ = [
    "GooglePlacesClient",
    "SupabaseStorage",
    "create_storage",
]
