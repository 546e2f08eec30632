"""Role catalog access: seed the fixed role rows and resolve names to rows."""

import logging
from collections.abc import Sequence

from sqlalchemy.orm import Session

from atlas.core.roles import RoleName
from atlas.models import Role

logger = logging.getLogger(__name__)


class RoleCatalogError(Exception):
    """Raised when a catalog role row is missing (roles were never seeded)."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def seed_roles(session: Session) -> list[str]:
    """
    Insert any catalog role that has no row yet and commit.

    Returns the names inserted. Idempotent: safe to run repeatedly.
    """
    existing = {name for (name,) in session.query(Role.name).all()}
    missing = [role.value for role in RoleName if role.value not in existing]
    for name in missing:
        session.add(Role(name=name))
    session.commit()
    if missing:
        logger.info("Role catalog seeded: inserted=%s", ",".join(missing))
    return missing


def resolve_roles(session: Session, names: Sequence[RoleName]) -> list[Role]:
    """Load Role rows for the given names, preserving request order."""
    rows = session.query(Role).filter(Role.name.in_([n.value for n in names])).all()
    by_name = {row.name: row for row in rows}
    missing = [n.value for n in names if n.value not in by_name]
    if missing:
        logger.error("Role catalog is missing rows: %s", ",".join(missing))
        raise RoleCatalogError(
            f"Role catalog is not initialized (missing: {', '.join(missing)})."
        )
    return [by_name[n.value] for n in names]
