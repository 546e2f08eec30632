"""Favorite countries: one toggle/list interface over server and client-local storage.

Signed-in users keep favorites in the ``favorite_countries`` table. Anonymous
browsers keep the same {code, name, flag} list as JSON under a key-value
storage key. Both sides expose FavoritesStore so callers pick an implementation
by identity and never convert entries between modes.
"""

from __future__ import annotations

import json
import logging
from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Protocol

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from atlas.models import FavoriteCountry
from atlas.schemas.favorites import FavoriteEntry

if TYPE_CHECKING:
    from atlas.schemas.auth import CurrentUser

logger = logging.getLogger(__name__)

# Key the browser uses for its local favorites list.
LOCAL_STORAGE_KEY = "favoriteCountries"


class FavoritesStore(Protocol):
    """Ordered, country-code keyed favorites with symmetric toggle."""

    def entries(self) -> list[FavoriteEntry]: ...

    def toggle(self, code: str, name: str = "", flag: str = "") -> list[FavoriteEntry]: ...


def _to_entry(row: FavoriteCountry) -> FavoriteEntry:
    return FavoriteEntry(code=row.country_code, name=row.country_name, flag=row.flag_url)


def _text(value: object) -> str:
    # Hand-edited storage may hold numbers or null where strings belong.
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


class DatabaseFavorites:
    """Favorites for an authenticated user, persisted in favorite_countries."""

    def __init__(self, session: Session, user_id: int) -> None:
        self.session = session
        self.user_id = user_id

    def entries(self) -> list[FavoriteEntry]:
        rows = (
            self.session.query(FavoriteCountry)
            .filter(FavoriteCountry.user_id == self.user_id)
            .order_by(FavoriteCountry.id)
            .all()
        )
        return [_to_entry(row) for row in rows]

    def _has(self, code: str) -> bool:
        return (
            self.session.query(FavoriteCountry.id)
            .filter(
                FavoriteCountry.user_id == self.user_id,
                FavoriteCountry.country_code == code,
            )
            .first()
            is not None
        )

    def toggle(self, code: str, name: str = "", flag: str = "") -> list[FavoriteEntry]:
        """
        Remove the entry for code if present, otherwise add it; return all entries.

        The delete is a single statement and the insert is guarded by the
        (user_id, country_code) unique constraint, so concurrent toggles can
        never leave two entries with the same code.
        """
        code = code.upper()
        removed = (
            self.session.query(FavoriteCountry)
            .filter(
                FavoriteCountry.user_id == self.user_id,
                FavoriteCountry.country_code == code,
            )
            .delete(synchronize_session=False)
        )
        if removed:
            self.session.commit()
            logger.info("Favorite removed: user_id=%s code=%s", self.user_id, code)
            return self.entries()

        self.session.add(
            FavoriteCountry(
                user_id=self.user_id,
                country_code=code,
                country_name=name,
                flag_url=flag,
            )
        )
        try:
            self.session.commit()
            logger.info("Favorite added: user_id=%s code=%s", self.user_id, code)
        except IntegrityError:
            self.session.rollback()
            if not self._has(code):
                # Not a duplicate from a concurrent add (e.g. the user row is gone).
                raise
            logger.info(
                "Favorite add raced with another request: user_id=%s code=%s",
                self.user_id,
                code,
            )
        return self.entries()


class LocalFavorites:
    """
    Favorites for an anonymous caller, kept in a client key-value store.

    The value under LOCAL_STORAGE_KEY is a JSON array of {code, name, flag}.
    Older entries keyed by "cca3" are read as codes.
    """

    def __init__(self, storage: MutableMapping[str, str]) -> None:
        self.storage = storage

    def entries(self) -> list[FavoriteEntry]:
        raw = self.storage.get(LOCAL_STORAGE_KEY)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable local favorites value")
            return []
        if not isinstance(data, list):
            return []
        out: list[FavoriteEntry] = []
        for item in data:
            if not isinstance(item, dict):
                continue
            code = item.get("code") or item.get("cca3")
            if not isinstance(code, str) or not code:
                continue
            out.append(
                FavoriteEntry(
                    code=code.upper(),
                    name=_text(item.get("name")),
                    flag=_text(item.get("flag")),
                )
            )
        return out

    def toggle(self, code: str, name: str = "", flag: str = "") -> list[FavoriteEntry]:
        code = code.upper()
        current = self.entries()
        kept = [e for e in current if e.code != code]
        if len(kept) == len(current):
            kept.append(FavoriteEntry(code=code, name=name, flag=flag))
        self.storage[LOCAL_STORAGE_KEY] = json.dumps([e.model_dump() for e in kept])
        return kept


def favorites_for(
    user: CurrentUser | None,
    session: Session | None = None,
    storage: MutableMapping[str, str] | None = None,
) -> FavoritesStore:
    """Pick the server store for an authenticated user, else the local fallback."""
    if user is not None:
        if session is None:
            raise ValueError("A database session is required for an authenticated user.")
        return DatabaseFavorites(session, user.id)
    if storage is None:
        raise ValueError("Local storage is required for an anonymous caller.")
    return LocalFavorites(storage)
