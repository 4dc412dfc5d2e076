# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .aggregation_service import AggregationService
from .favorite_service import FavoriteService
from .favorites_overlay import FavoritesOverlay
from .identity_service import IdentityProvisioner
from .place_normalizer import PhotoSize, PlaceNormalizer
from .user_service import UserService
from .visit_service import VisitService

__all__ = [
    "AggregationService",
    "FavoriteService",
    "FavoritesOverlay",
    "IdentityProvisioner",
    "PhotoSize",
    "PlaceNormalizer",
    "UserService",
    "VisitService",
]
