"""Favorite countries for the signed-in user: list and toggle."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from atlas.api.v1.auth import get_current_user
from atlas.core.database import get_db
from atlas.schemas.auth import CurrentUser
from atlas.schemas.favorites import FavoritesResponse, FavoriteToggleRequest
from atlas.services.favorites import FavoritesStore, favorites_for

router = APIRouter()


def get_favorites_store(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> FavoritesStore:
    """Dependency: server-side favorites for the authenticated caller."""
    return favorites_for(current_user, db)


@router.get("", response_model=FavoritesResponse)
def get_favorites(
    store: Annotated[FavoritesStore, Depends(get_favorites_store)],
) -> FavoritesResponse:
    """Return the caller's favorite countries in the order they were added (empty if none)."""
    return FavoritesResponse(favorite_countries=store.entries())


@router.put("/toggle", response_model=FavoritesResponse)
def toggle_favorite(
    body: FavoriteToggleRequest,
    store: Annotated[FavoritesStore, Depends(get_favorites_store)],
) -> FavoritesResponse:
    """
    Add the country if it is not a favorite yet, otherwise remove it.

    Returns the full updated list. Toggling the same code twice restores the
    original list.
    """
    entries = store.toggle(body.country_code, body.country_name, body.flag_url)
    return FavoritesResponse(favorite_countries=entries)
