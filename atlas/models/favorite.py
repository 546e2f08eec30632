"""ORM model for a user's favorite countries."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import relationship

from atlas.models.base import Base


class FavoriteCountry(Base):
    """
    One saved country per row; (user_id, country_code) is unique.

    Insertion order is the id order.
    """

    __tablename__ = "favorite_countries"
    __table_args__ = (
        UniqueConstraint("user_id", "country_code", name="uq_favorite_countries_user_code"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    country_code = Column(String(3), nullable=False)
    country_name = Column(String(255), nullable=False, default="")
    flag_url = Column(String(2048), nullable=False, default="")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    user = relationship("User", back_populates="favorites")

    def __repr__(self) -> str:
        return f"<FavoriteCountry {self.user_id}:{self.country_code}>"
