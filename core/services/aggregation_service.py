# =============================================================================
# core/services/aggregation_service.py - Coffee Shop Aggregation
# =============================================================================
# Composes the Places client, the normalizer and the favorites overlay into
# the two read operations behind /coffee_shops:
#
#   list_nearby(...)  -> list[NormalizedPlace]
#   get_detail(...)   -> NormalizedPlaceDetail
#
# The provider call and the favorites read are independent and run
# concurrently. When the provider fails and fallback is enabled (every
# environment except production by default), fixed sample data goes through
# the same normalize + overlay path instead of surfacing a 502.
# =============================================================================

import asyncio
import logging

from app.exceptions import ProviderError
from core.models.place import (
    DisplayName,
    HoursPeriod,
    LatLng,
    NormalizedPlace,
    NormalizedPlaceDetail,
    OpeningHours,
    RawPlace,
    RawPlaceDetail,
    TimeOfDay,
)
from core.services.favorites_overlay import FavoritesOverlay
from core.services.place_normalizer import PlaceNormalizer
from lib.places_client import GooglePlacesClient

logger = logging.getLogger(__name__)


# =============================================================================
# Fallback Data
# =============================================================================

def fallback_places(latitude: float, longitude: float) -> list[RawPlace]:
    """Three sample cafes clustered around the requested point."""
    samples = [
        ("mock_1", "Café Sunrise", 0.0, 0.0),
        ("mock_2", "Bean Town", 0.001, -0.001),
        ("mock_3", "Morning Brew", -0.002, 0.002),
    ]
    return [
        RawPlace(
            id=place_id,
            display_name=DisplayName(text=name),
            location=LatLng(latitude=latitude + d_lat, longitude=longitude + d_lng),
        )
        for place_id, name, d_lat, d_lng in samples
    ]


def _period(day: int, opens: str, closes: str) -> HoursPeriod:
    return HoursPeriod(open=TimeOfDay(day=day, time=opens), close=TimeOfDay(day=day, time=closes))


def fallback_detail(place_id: str) -> RawPlaceDetail:
    """A sample cafe detail carrying the requested place id."""
    weekday_periods = [_period(day, "0700", "1900") for day in (1, 2, 3, 4)]
    return RawPlaceDetail(
        id=place_id,
        display_name=DisplayName(text="Café Sunrise"),
        location=LatLng(latitude=37.7937, longitude=-122.3965),
        formatted_address="123 Coffee Street, San Francisco, CA 94107",
        international_phone_number="+1 415-555-1234",
        website_uri="https://example.com/coffee",
        rating=4.5,
        price_level=2,
        current_opening_hours=OpeningHours(
            periods=weekday_periods + [
                _period(5, "0700", "2000"),
                _period(6, "0800", "2000"),
                _period(0, "0800", "1800"),
            ],
        ),
    )


# =============================================================================
# Service
# =============================================================================

class AggregationService:
    """
    Builds enriched coffee shop results for one user.

    Example:
        service = AggregationService(places_client, normalizer, overlay)
        shops = await service.list_nearby(37.79, -122.39, 500, 10, user_id=42)
    """

    def __init__(
        self,
        places: GooglePlacesClient,
        normalizer: PlaceNormalizer,
        overlay: FavoritesOverlay,
        use_fallback: bool = False,
    ):
        self._places = places
        self._normalizer = normalizer
        self._overlay = overlay
        self._use_fallback = use_fallback

    async def list_nearby(
        self,
        latitude: float,
        longitude: float,
        radius_m: float,
        max_results: int,
        user_id: int,
    ) -> list[NormalizedPlace]:
        """
        List cafes near a point, flagged with the user's favorites.

        Raises:
            ProviderError: If Places fails and fallback is disabled
        """
        search = self._places.search_nearby(latitude, longitude, radius_m, max_results)
        raw_places, favorites = await self._gather(search, user_id)

        if raw_places is None:
            logger.warning("Places search failed, serving fallback cafes")
            raw_places = fallback_places(latitude, longitude)

        results = []
        for raw in raw_places:
            if not raw.id:
                logger.debug("Dropping search result without a place id")
                continue
            results.append(self._normalizer.normalize_place(raw, is_favorite=raw.id in favorites))

        logger.info(f"Returning {len(results)} coffee shop(s) for user {user_id}")
        return results

    async def get_detail(self, place_id: str, user_id: int) -> NormalizedPlaceDetail:
        """
        Get one cafe's details, flagged with the user's favorites.

        Raises:
            ProviderError: If Places fails and fallback is disabled
        """
        raw_detail, favorites = await self._gather(self._places.get_detail(place_id), user_id)

        if raw_detail is None:
            logger.warning(f"Places details failed for {place_id}, serving fallback detail")
            raw_detail = fallback_detail(place_id)

        return self._normalizer.normalize_detail(
            raw_detail,
            is_favorite=place_id in favorites,
            fallback_id=place_id,
        )

    async def _gather(self, provider_call, user_id: int):
        """
        Run a provider coroutine alongside the favorites read.

        Returns (provider_result, favorites); provider_result is None when
        the provider failed and fallback is enabled.
        """
        provider_result, favorites = await asyncio.gather(
            provider_call,
            self._overlay.aload(user_id),
            return_exceptions=True,
        )

        # aload() catches storage errors itself
        if isinstance(favorites, BaseException):
            raise favorites

        if isinstance(provider_result, ProviderError):
            if not self._use_fallback:
                raise provider_result
            logger.warning(f"Provider error ({provider_result.log_detail}); fallback enabled")
            return None, favorites

        if isinstance(provider_result, BaseException):
            raise provider_result

        return provider_result, favorites
