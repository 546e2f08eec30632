"""
Seed the fixed role catalog (user, moderator, admin). Run from project root:
  python -m atlas.scripts.seed_roles
Safe to run repeatedly.
"""

import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from atlas.core.database import SessionLocal
from atlas.services.role_catalog import seed_roles

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Insert any missing role rows."""
    db = SessionLocal()
    try:
        inserted = seed_roles(db)
        logger.info("Role seeding completed: inserted=%s", len(inserted))
        return 0
    except SQLAlchemyError as e:
        logger.exception("Role seeding failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
