"""Pydantic request/response schemas."""

from atlas.schemas.auth import (
    CurrentUser,
    MessageResponse,
    SigninRequest,
    SigninResponse,
    SignupRequest,
    UserListItem,
    UsersListResponse,
)
from atlas.schemas.favorites import (
    FavoriteEntry,
    FavoriteToggleRequest,
    FavoritesResponse,
)
from atlas.schemas.health import HealthResponse

__all__ = [
    "CurrentUser",
    "FavoriteEntry",
    "FavoriteToggleRequest",
    "FavoritesResponse",
    "HealthResponse",
    "MessageResponse",
    "SigninRequest",
    "SigninResponse",
    "SignupRequest",
    "UserListItem",
    "UsersListResponse",
]
