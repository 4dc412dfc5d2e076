# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas:
# - place.py: Raw Google Places payloads and normalized coffee shop records
# - user.py: User profile, favorites and visits
# - identity.py: Verified token claims and the request principal
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Place Models - Provider payloads and client records
# -----------------------------------------------------------------------------
from .place import (
    CoffeeShopDetailResponse,
    CoffeeShopsResponse,
    DisplayName,
    HoursPeriod,
    LatLng,
    NormalizedPlace,
    NormalizedPlaceDetail,
    OpeningHours,
    Photo,
    RawPlace,
    RawPlaceDetail,
    TimeOfDay,
)

# -----------------------------------------------------------------------------
# User Models - Profile, favorites, visits
# -----------------------------------------------------------------------------
from .user import (
    FavoriteCreate,
    FavoriteRecord,
    FavoritesResponse,
    MessageResponse,
    UserProfile,
    VisitCreate,
    VisitRecord,
    VisitsResponse,
)

# -----------------------------------------------------------------------------
# Identity Models - Verified claims and the request principal
# -----------------------------------------------------------------------------
from .identity import Principal, VerifiedClaims

__all__ = [
    # Place
    "CoffeeShopDetailResponse",
    "CoffeeShopsResponse",
    "DisplayName",
    "HoursPeriod",
    "LatLng",
    "NormalizedPlace",
    "NormalizedPlaceDetail",
    "OpeningHours",
    "Photo",
    "RawPlace",
    "RawPlaceDetail",
    "TimeOfDay",
    # User
    "FavoriteCreate",
    "FavoriteRecord",
    "FavoritesResponse",
    "MessageResponse",
    "UserProfile",
    "VisitCreate",
    "VisitRecord",
    "VisitsResponse",
    # Identity
    "Principal",
    "VerifiedClaims",
]
