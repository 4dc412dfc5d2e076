# =============================================================================
# core/services/place_normalizer.py - Provider Payload Normalization
# =============================================================================
# Turns provider-shaped place payloads into the stable client schema.
#
# Every function here is total: any optional field of the input may be
# missing and the output is still well defined.
#
# Opening hours: the provider numbers days 0 = Sunday ... 6 = Saturday.
# Clients get a Monday-first list of seven lines:
#   "Monday: 07:00 - 19:00", ..., "Sunday: Closed"
# =============================================================================

import logging
from dataclasses import dataclass

import httpx

from core.models.place import (
    HoursPeriod,
    NormalizedPlace,
    NormalizedPlaceDetail,
    OpeningHours,
    Photo,
    RawPlace,
    RawPlaceDetail,
    TimeOfDay,
)

logger = logging.getLogger(__name__)

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

OPEN_24_HOURS_CLOSE = "24:00"
DEFAULT_PHOTO_WIDTH_PX = 400

PRICE_LEVELS = {
    "PRICE_LEVEL_FREE": 0,
    "PRICE_LEVEL_INEXPENSIVE": 1,
    "PRICE_LEVEL_MODERATE": 2,
    "PRICE_LEVEL_EXPENSIVE": 3,
    "PRICE_LEVEL_VERY_EXPENSIVE": 4,
}


@dataclass(frozen=True)
class PhotoSize:
    """Requested photo bounds; zero or negative means unset."""
    max_width_px: int = 0
    max_height_px: int = 0


# =============================================================================
# Opening Hours
# =============================================================================

def provider_day_index(weekday: int) -> int:
    """Map a Monday-first weekday (0-6) to the provider's Sunday-first index."""
    return (weekday + 1) % 7


def format_time(point: TimeOfDay | None) -> str | None:
    """
    Render one end of a period as HH:MM.

    A four-digit "HHMM" string becomes "HH:MM"; any other string is passed
    through unchanged. Without a string, hour/minute are used and an omitted
    one counts as zero. Returns None when there is no point at all.
    """
    if point is None:
        return None

    if point.time is not None:
        raw = point.time
        if len(raw) == 4 and raw.isdigit():
            return f"{raw[:2]}:{raw[2:]}"
        return raw

    return f"{point.hour or 0:02d}:{point.minute or 0:02d}"


def _find_period(periods: list[HoursPeriod | None], day: int) -> HoursPeriod | None:
    for period in periods:
        if period is not None and period.open is not None and period.open.day == day:
            return period
    return None


def normalize_hours(opening_hours: OpeningHours | None) -> list[str]:
    """
    Build the Monday-first weekly schedule.

    Returns an empty list when there is no hours block or it has no
    periods; otherwise exactly seven entries.
    """
    if opening_hours is None or not opening_hours.periods:
        return []

    schedule = []
    for weekday, day_name in enumerate(WEEKDAYS):
        period = _find_period(opening_hours.periods, provider_day_index(weekday))
        if period is None:
            schedule.append(f"{day_name}: Closed")
            continue

        opens = format_time(period.open)
        closes = format_time(period.close) or OPEN_24_HOURS_CLOSE
        schedule.append(f"{day_name}: {opens} - {closes}")

    return schedule


# =============================================================================
# Normalizer
# =============================================================================

def normalize_price_level(value: int | str | None) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if 0 <= value <= 4 else None
    if isinstance(value, str):
        if value.isdigit():
            return normalize_price_level(int(value))
        return PRICE_LEVELS.get(value)
    return None


class PlaceNormalizer:
    """
    Converts raw provider records into client records.

    Holds only what photo URLs need (media base URL, API key and size);
    the rest is stateless.
    """

    def __init__(
        self,
        media_base_url: str = "https://places.googleapis.com/v1",
        api_key: str | None = None,
        photo_size: PhotoSize | None = None,
    ):
        self._media_base_url = media_base_url.rstrip("/")
        self._api_key = api_key
        self._photo_size = photo_size or PhotoSize(max_width_px=DEFAULT_PHOTO_WIDTH_PX)

    # -------------------------------------------------------------------------
    # Photos
    # -------------------------------------------------------------------------

    def photo_url(self, name: str, size: PhotoSize) -> str:
        """Build the media URL for one photo resource name."""
        params: dict[str, str | int] = {}
        if self._api_key:
            params["key"] = self._api_key
        if size.max_width_px > 0:
            params["maxWidthPx"] = size.max_width_px
        if size.max_height_px > 0:
            params["maxHeightPx"] = size.max_height_px
        if size.max_width_px <= 0 and size.max_height_px <= 0:
            params["maxWidthPx"] = DEFAULT_PHOTO_WIDTH_PX

        url = httpx.URL(f"{self._media_base_url}/{name.strip('/')}/media", params=params)
        return str(url)

    def normalize_photos(
        self,
        photos: list[Photo | None] | None,
        size: PhotoSize | None = None,
    ) -> list[str]:
        """
        Convert photo references into fetchable URLs.

        Entries without a name are skipped, so the result may be shorter
        than the input. None or empty input gives an empty list.
        """
        if not photos:
            return []

        size = size or self._photo_size
        return [
            self.photo_url(photo.name, size)
            for photo in photos
            if photo is not None and photo.name and photo.name.strip("/")
        ]

    # -------------------------------------------------------------------------
    # Places
    # -------------------------------------------------------------------------

    def normalize_hours(self, opening_hours: OpeningHours | None) -> list[str]:
        return normalize_hours(opening_hours)

    def normalize_place(self, raw: RawPlace, is_favorite: bool = False) -> NormalizedPlace:
        return NormalizedPlace(
            id=raw.id or "",
            name=_display_name(raw),
            latitude=_coordinate(raw, "latitude"),
            longitude=_coordinate(raw, "longitude"),
            is_favorite=is_favorite,
        )

    def normalize_detail(
        self,
        raw: RawPlaceDetail,
        is_favorite: bool = False,
        fallback_id: str = "",
    ) -> NormalizedPlaceDetail:
        """
        Build the detail record; fallback_id is used if the payload has no id.
        """
        return NormalizedPlaceDetail(
            id=raw.id or fallback_id,
            name=_display_name(raw),
            latitude=_coordinate(raw, "latitude"),
            longitude=_coordinate(raw, "longitude"),
            is_favorite=is_favorite,
            address=raw.formatted_address,
            phone_number=raw.international_phone_number,
            website=raw.website_uri,
            google_maps_uri=raw.google_maps_uri,
            rating=raw.rating,
            price_level=normalize_price_level(raw.price_level),
            opening_hours=self.normalize_hours(raw.current_opening_hours),
            photos=self.normalize_photos(raw.photos),
        )


def _display_name(raw: RawPlace) -> str:
    if raw.display_name is None or raw.display_name.text is None:
        return ""
    return raw.display_name.text


def _coordinate(raw: RawPlace, axis: str) -> float:
    if raw.location is None:
        return 0.0
    value = getattr(raw.location, axis)
    return value if value is not None else 0.0
