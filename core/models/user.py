# =============================================================================
# core/models/user.py - User, Favorite and Visit Schemas
# =============================================================================
# Typed records returned by the storage layer, plus the request bodies
# accepted by /favorites and /visits.
# =============================================================================

from datetime import datetime

from pydantic import Field

from .place import ClientModel, NormalizedPlace


class UserProfile(ClientModel):
    """
    Local user record, keyed by the Clerk user id.

    Example:
        {
            "id": 42,
            "clerkId": "user_2abc...",
            "email": "ada@example.com",
            "firstName": "Ada",
            "lastName": "Lovelace",
            "createdAt": "2025-01-15T10:30:00Z",
            "updatedAt": "2025-01-15T10:30:00Z"
        }
    """
    id: int
    clerk_id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class FavoriteRecord(ClientModel):
    """A row of favorite_coffee_shops."""
    place_id: str
    name: str
    # Nullable columns
    latitude: float | None = None
    longitude: float | None = None
    created_at: datetime | None = None

    def to_place(self) -> NormalizedPlace:
        return NormalizedPlace(
            id=self.place_id,
            name=self.name,
            latitude=self.latitude if self.latitude is not None else 0.0,
            longitude=self.longitude if self.longitude is not None else 0.0,
            is_favorite=True,
        )


class VisitRecord(ClientModel):
    """A row of visits."""
    place_id: str
    name: str
    visited_at: datetime | None = None


class FavoriteCreate(ClientModel):
    """Body of POST /favorites."""
    id: str = Field(..., min_length=1, description="Provider place id")
    name: str = Field(..., min_length=1, description="Display name of the coffee shop")
    latitude: float = Field(default=0.0, ge=-90, le=90)
    longitude: float = Field(default=0.0, ge=-180, le=180)


class VisitCreate(ClientModel):
    """Body of POST /visits."""
    id: str = Field(..., min_length=1, description="Provider place id")
    name: str = Field(..., min_length=1, description="Display name of the coffee shop")


class FavoritesResponse(ClientModel):
    favorites: list[NormalizedPlace]


class VisitsResponse(ClientModel):
    visits: list[VisitRecord]


class MessageResponse(ClientModel):
    message: str
