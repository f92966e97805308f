"""Clear every table and re-seed the built-in roles.

Usage: python -m scripts.reset_db
"""
import logging

from core.database import Base, SessionLocal
from core.logging_config import setup_logging
from role.service import ensure_default_roles
import models_bootstrap  # noqa: F401

logger = logging.getLogger("staffdesk.scripts")


def reset_database(db) -> None:
    # children before parents
    for table in reversed(Base.metadata.sorted_tables):
        db.execute(table.delete())
        logger.info("cleared %s", table.name)
    ensure_default_roles(db)
    db.commit()


def main() -> None:
    setup_logging()
    db = SessionLocal()
    try:
        reset_database(db)
        logger.info("database cleared successfully")
    finally:
        db.close()


if __name__ == "__main__":
    main()
