#!/usr/bin/env python3
# backend/init_db.py
"""
Database initialization script.

Creates every table defined in balance_tracker.models without running
migrations (handy for local SQLite databases):

    python backend/init_db.py
"""
import logging

from balance_tracker.database import engine
from balance_tracker.models import Base

logger = logging.getLogger(__name__)


def init_db() -> None:
    """Create all database tables defined in models."""
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Tables created successfully!")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    init_db()
