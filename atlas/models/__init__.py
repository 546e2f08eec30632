"""SQLAlchemy ORM models."""

from atlas.models.base import Base
from atlas.models.favorite import FavoriteCountry
from atlas.models.role import Role
from atlas.models.user import User, user_roles

__all__ = ["Base", "FavoriteCountry", "Role", "User", "user_roles"]
