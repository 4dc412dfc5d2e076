# =============================================================================
# app/routers/coffee_shops.py - Coffee Shop Endpoints
# =============================================================================
# Nearby search and details, backed by Google Places and flagged with the
# caller's favorites. All endpoints require authentication.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query

from app.auth import CurrentUserId
from app.dependencies import AggregationDep
from core.models.place import CoffeeShopDetailResponse, CoffeeShopsResponse

router = APIRouter()

# Downtown San Francisco, used when the client sends no location
DEFAULT_LATITUDE = 37.7937
DEFAULT_LONGITUDE = -122.3965
DEFAULT_RADIUS_M = 500.0
DEFAULT_MAX_RESULTS = 10


@router.get("", response_model=CoffeeShopsResponse)
async def list_coffee_shops(
    user_id: CurrentUserId,
    aggregation: AggregationDep,
    lat: Annotated[float, Query(ge=-90, le=90, description="Latitude of the search center")] = DEFAULT_LATITUDE,
    lng: Annotated[float, Query(ge=-180, le=180, description="Longitude of the search center")] = DEFAULT_LONGITUDE,
    radius: Annotated[float, Query(gt=0, le=50000, description="Search radius in meters")] = DEFAULT_RADIUS_M,
    max_results: Annotated[int, Query(alias="max", ge=1, le=20, description="Maximum number of results")] = DEFAULT_MAX_RESULTS,
):
    """
    List coffee shops near a point.

    Each result carries isFavorite for the authenticated user.
    """
    shops = await aggregation.list_nearby(lat, lng, radius, max_results, user_id=user_id)
    return CoffeeShopsResponse(coffee_shops=shops)


@router.get("/{place_id}", response_model=CoffeeShopDetailResponse)
async def get_coffee_shop(
    place_id: Annotated[str, Path(min_length=1, description="Google Places place id")],
    user_id: CurrentUserId,
    aggregation: AggregationDep,
):
    """
    Get details for one coffee shop.

    Returns address, phone, website, rating, price level, a Monday-first
    weekly schedule and photo URLs. Missing provider fields come back empty.
    """
    detail = await aggregation.get_detail(place_id, user_id=user_id)
    return CoffeeShopDetailResponse(coffee_shop=detail)
