# =============================================================================
# core/models/place.py - Place Schemas
# =============================================================================
# Two families of models live here:
#
# - Raw provider models (RawPlace, RawPlaceDetail, ...) mirror the Google
#   Places v1 JSON. Every field is optional and unknown keys are ignored,
#   because the provider omits anything it has no value for.
#
# - Normalized models (NormalizedPlace, NormalizedPlaceDetail) are the only
#   place data returned to clients. They serialize with camelCase keys to
#   match the mobile and web clients.
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ProviderModel(BaseModel):
    """Base for provider-shaped payloads: camelCase in, extras ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# =============================================================================
# Raw Provider Models
# =============================================================================

class DisplayName(ProviderModel):
    text: str | None = None
    language_code: str | None = None


class LatLng(ProviderModel):
    latitude: float | None = None
    longitude: float | None = None


class TimeOfDay(ProviderModel):
    """
    One end of an opening period.

    `day` follows the provider convention: 0 = Sunday ... 6 = Saturday.
    Legacy payloads carry `time` as "HHMM"; v1 payloads carry `hour` and
    `minute` and omit either when it is zero.
    """
    day: int | None = None
    hour: int | None = None
    minute: int | None = None
    time: str | None = None


class HoursPeriod(ProviderModel):
    open: TimeOfDay | None = None
    # No close means the place is open 24 hours from `open`
    close: TimeOfDay | None = None


class OpeningHours(ProviderModel):
    open_now: bool | None = None
    periods: list[HoursPeriod | None] | None = None
    weekday_descriptions: list[str] | None = None


class Photo(ProviderModel):
    # Opaque resource name, e.g. "places/{place_id}/photos/{photo_ref}"
    name: str | None = None
    width_px: int | None = None
    height_px: int | None = None


class RawPlace(ProviderModel):
    """A place as returned by places:searchNearby."""
    id: str | None = None
    display_name: DisplayName | None = None
    location: LatLng | None = None
    photos: list[Photo | None] | None = None


class RawPlaceDetail(RawPlace):
    """A place as returned by the place details endpoint."""
    formatted_address: str | None = None
    google_maps_uri: str | None = None
    website_uri: str | None = None
    international_phone_number: str | None = None
    rating: float | None = None
    # Legacy integer (0-4) or v1 enum string such as "PRICE_LEVEL_MODERATE"
    price_level: int | str | None = None
    current_opening_hours: OpeningHours | None = None


# =============================================================================
# Normalized Models
# =============================================================================

class ClientModel(BaseModel):
    """Base for models sent to clients: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class NormalizedPlace(ClientModel):
    """
    A coffee shop in list results.

    Example:
        {
            "id": "ChIJN1t_tDeuEmsRUsoyG83frY4",
            "name": "Blue Bottle Coffee",
            "latitude": 37.7955,
            "longitude": -122.3937,
            "isFavorite": false
        }
    """
    id: str
    name: str = ""
    latitude: float = 0.0
    longitude: float = 0.0
    is_favorite: bool = False


class NormalizedPlaceDetail(NormalizedPlace):
    """
    Full details for one coffee shop.

    `opening_hours` is either empty (provider sent no schedule) or exactly
    seven entries, Monday first.
    """
    address: str | None = None
    phone_number: str | None = None
    website: str | None = None
    google_maps_uri: str | None = None
    rating: float | None = None
    price_level: int | None = None
    opening_hours: list[str] = Field(default_factory=list)
    photos: list[str] = Field(default_factory=list)


class CoffeeShopsResponse(ClientModel):
    coffee_shops: list[NormalizedPlace]


class CoffeeShopDetailResponse(ClientModel):
    coffee_shop: NormalizedPlaceDetail
