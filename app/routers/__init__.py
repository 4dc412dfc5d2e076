# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints (no auth)
# - coffee_shops.py: Nearby search and place details
# - favorites.py: Favorite coffee shops
# - visits.py: Visit history
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import coffee_shops
from . import favorites
from . import visits

__all__ = [
    "health",
    "coffee_shops",
    "favorites",
    "visits",
]
