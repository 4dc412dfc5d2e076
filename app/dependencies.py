# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# The storage handle and the outbound HTTP client are created once in the
# application lifespan and kept on app.state; everything built on top of
# them is cheap and constructed per request.
# =============================================================================

from typing import Annotated

import httpx
from fastapi import Depends, Request

from app.config import Settings, get_settings
from core.services.aggregation_service import AggregationService
from core.services.favorite_service import FavoriteService
from core.services.favorites_overlay import FavoritesOverlay
from core.services.place_normalizer import PhotoSize, PlaceNormalizer
from core.services.user_service import UserService
from core.services.visit_service import VisitService
from lib.places_client import GooglePlacesClient
from lib.supabase_client import SupabaseStorage

SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_storage(request: Request) -> SupabaseStorage:
    """Get the storage handle created at startup."""
    return request.app.state.storage


StorageDep = Annotated[SupabaseStorage, Depends(get_storage)]


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Get the shared outbound HTTP client created at startup."""
    return request.app.state.http_client


# =============================================================================
# Places
# =============================================================================

def get_places_client(
    settings: SettingsDep,
    http: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> GooglePlacesClient:
    return GooglePlacesClient(
        http,
        api_key=settings.GOOGLE_PLACES_API_KEY,
        base_url=settings.PLACES_BASE_URL,
    )


def get_place_normalizer(settings: SettingsDep) -> PlaceNormalizer:
    return PlaceNormalizer(
        media_base_url=settings.PLACES_MEDIA_BASE_URL,
        api_key=settings.GOOGLE_PLACES_API_KEY,
        photo_size=PhotoSize(
            max_width_px=settings.PHOTO_MAX_WIDTH_PX,
            max_height_px=settings.PHOTO_MAX_HEIGHT_PX,
        ),
    )


def get_aggregation_service(
    settings: SettingsDep,
    storage: StorageDep,
    places: Annotated[GooglePlacesClient, Depends(get_places_client)],
    normalizer: Annotated[PlaceNormalizer, Depends(get_place_normalizer)],
) -> AggregationService:
    return AggregationService(
        places=places,
        normalizer=normalizer,
        overlay=FavoritesOverlay(storage),
        use_fallback=settings.use_places_fallback,
    )


AggregationDep = Annotated[AggregationService, Depends(get_aggregation_service)]


# =============================================================================
# CRUD Services
# =============================================================================

def get_favorite_service(storage: StorageDep) -> FavoriteService:
    return FavoriteService(storage)


def get_visit_service(storage: StorageDep) -> VisitService:
    return VisitService(storage)


def get_user_service(storage: StorageDep) -> UserService:
    return UserService(storage)


FavoriteServiceDep = Annotated[FavoriteService, Depends(get_favorite_service)]
VisitServiceDep = Annotated[VisitService, Depends(get_visit_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
