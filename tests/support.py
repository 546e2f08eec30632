"""Shared helpers for tests: isolated in-memory database with a seeded role catalog."""

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from atlas.core import database  # noqa: F401  (turns on SQLite foreign keys)
from atlas.models import Base
from atlas.services.role_catalog import seed_roles


def make_session_factory(seed: bool = True) -> sessionmaker[Session]:
    """Fresh in-memory SQLite database; one shared connection so threads see the same data."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    if seed:
        session = factory()
        try:
            seed_roles(session)
        finally:
            session.close()
    return factory
