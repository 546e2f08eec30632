"""ORM model for the fixed role catalog."""

from sqlalchemy import Column, Integer, String

from atlas.models.base import Base


class Role(Base):
    """
    Catalog entry for a role name ('user', 'moderator', 'admin').

    Rows are reference data seeded from atlas.core.roles.RoleName.
    """

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(32), nullable=False, unique=True, index=True)

    def __repr__(self) -> str:
        return f"<Role {self.name}>"
