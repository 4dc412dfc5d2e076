# =============================================================================
# app/routers/favorites.py - Favorite Coffee Shop Endpoints
# =============================================================================
# All endpoints require authentication and act on the caller's favorites.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from app.auth import CurrentUserId
from app.dependencies import FavoriteServiceDep
from core.models.user import FavoriteCreate, FavoritesResponse, MessageResponse

router = APIRouter()


@router.get("", response_model=FavoritesResponse)
def list_favorites(user_id: CurrentUserId, favorites: FavoriteServiceDep):
    """List the caller's favorite coffee shops, newest first."""
    return FavoritesResponse(favorites=favorites.list_favorites(user_id))


@router.post(
    "",
    response_model=MessageResponse,
    status_code=201,
    responses={200: {"model": MessageResponse, "description": "Already a favorite"}},
)
def add_favorite(
    body: FavoriteCreate,
    user_id: CurrentUserId,
    favorites: FavoriteServiceDep,
):
    """
    Add a coffee shop to the caller's favorites.

    Idempotent: repeating the request returns 200 and changes nothing.
    """
    if favorites.add_favorite(user_id, body):
        return MessageResponse(message="Added to favorites")
    return JSONResponse(status_code=200, content={"message": "Already in favorites"})


@router.delete("", response_model=MessageResponse)
def remove_favorite(
    user_id: CurrentUserId,
    favorites: FavoriteServiceDep,
    place_id: Annotated[str, Query(alias="placeId", min_length=1, description="Place id to remove")],
):
    """Remove a coffee shop from the caller's favorites."""
    favorites.remove_favorite(user_id, place_id)
    return MessageResponse(message="Removed from favorites")
