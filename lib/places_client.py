# =============================================================================
# lib/places_client.py - Google Places API Client
# =============================================================================
# Thin async wrapper over the two Places (v1) endpoints the app uses:
# - POST places:searchNearby  - cafes inside a circle
# - GET  places/{id}          - details for one place
#
# Each call is a single request with a field mask to keep payloads small.
# There are no retries: failures surface immediately as ProviderError and
# the caller decides whether to fall back.
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from app.exceptions import ConfigError, ProviderError
from core.models.place import RawPlace, RawPlaceDetail

logger = logging.getLogger(__name__)

SEARCH_FIELD_MASK = "places.displayName,places.id,places.location,places.photos"
DETAIL_FIELD_MASK = ",".join([
    "id",
    "displayName",
    "formattedAddress",
    "location",
    "googleMapsUri",
    "websiteUri",
    "internationalPhoneNumber",
    "rating",
    "priceLevel",
    "currentOpeningHours",
    "photos",
])

INCLUDED_TYPES = ["cafe"]

# Upstream bodies are logged, not returned; keep log lines bounded
_MAX_LOGGED_BODY = 500


class GooglePlacesClient:
    """
    Client for the Google Places API.

    The httpx.AsyncClient is owned by the application and shared across
    requests; this class never closes it.

    Example:
        async with httpx.AsyncClient(timeout=10) as http:
            places = GooglePlacesClient(http, api_key="...")
            cafes = await places.search_nearby(37.79, -122.39, 500, 10)
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: str | None,
        base_url: str = "https://places.googleapis.com/v1",
    ):
        self._http = http
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    def _headers(self, field_mask: str) -> dict[str, str]:
        if not self._api_key:
            raise ConfigError("GOOGLE_PLACES_API_KEY")
        return {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self._api_key,
            "X-Goog-FieldMask": field_mask,
        }

    async def _request(
        self,
        operation: str,
        method: str,
        url: str,
        field_mask: str,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        headers = self._headers(field_mask)

        try:
            response = await self._http.request(method, url, headers=headers, json=json)
        except httpx.HTTPError as e:
            logger.error(f"Places {operation} request failed: {e!r}")
            raise ProviderError(operation, f"transport error: {e!r}")

        if response.status_code != 200:
            body = response.text[:_MAX_LOGGED_BODY]
            logger.error(f"Places {operation} returned {response.status_code}: {body}")
            raise ProviderError(
                operation,
                f"HTTP {response.status_code}: {body}",
                upstream_status=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise ProviderError(operation, f"invalid JSON body: {e}")

        if not isinstance(payload, dict):
            raise ProviderError(operation, f"expected a JSON object, got {type(payload).__name__}")

        return payload

    async def search_nearby(
        self,
        latitude: float,
        longitude: float,
        radius_m: float,
        max_results: int,
    ) -> list[RawPlace]:
        """
        Search for cafes within radius_m meters of a point.

        Entries that cannot be parsed are skipped with a warning; the rest
        of the result is still returned.

        Raises:
            ConfigError: If no API key is configured
            ProviderError: If the request fails or returns non-200
        """
        body = {
            "includedTypes": INCLUDED_TYPES,
            "maxResultCount": max_results,
            "locationRestriction": {
                "circle": {
                    "center": {"latitude": latitude, "longitude": longitude},
                    "radius": radius_m,
                },
            },
        }

        logger.info(
            f"Searching Places near ({latitude:.5f}, {longitude:.5f}) "
            f"radius={radius_m}m max={max_results}"
        )
        payload = await self._request(
            "search_nearby",
            "POST",
            f"{self._base_url}/places:searchNearby",
            SEARCH_FIELD_MASK,
            json=body,
        )

        entries = payload.get("places")
        if not isinstance(entries, list):
            # The provider omits "places" entirely when nothing matched
            return []

        places: list[RawPlace] = []
        for entry in entries:
            try:
                places.append(RawPlace.model_validate(entry))
            except ValidationError as e:
                logger.warning(f"Skipping malformed place in search response: {e.error_count()} error(s)")

        logger.info(f"Places search returned {len(places)} place(s)")
        return places

    async def get_detail(self, place_id: str) -> RawPlaceDetail:
        """
        Fetch details for one place.

        Raises:
            ConfigError: If no API key is configured
            ProviderError: If the request fails, returns non-200, or the
                payload cannot be parsed
        """
        logger.info(f"Fetching Places details for {place_id}")
        payload = await self._request(
            "get_detail",
            "GET",
            f"{self._base_url}/places/{quote(place_id, safe='')}",
            DETAIL_FIELD_MASK,
        )

        try:
            return RawPlaceDetail.model_validate(payload)
        except ValidationError as e:
            raise ProviderError("get_detail", f"malformed details payload: {e.error_count()} error(s)")
