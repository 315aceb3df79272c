# app/db/init_db.py
"""Database initialization utilities."""
from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from app.config.settings import settings
from app.core.logging import get_logger
from app.db.session import engine as default_engine
from app.models import Base

logger = get_logger(__name__)


def init_db(engine: Engine = None) -> None:
    """
    Create any missing tables.

    Suitable for development and testing only; production schemas are
    managed by the hosted database's migrations.
    """
    engine = engine or default_engine
    try:
        existing_tables = set(inspect(engine).get_table_names())
        missing = [
            table.name for table in Base.metadata.sorted_tables
            if table.name not in existing_tables
        ]

        if not missing:
            logger.info(f"Database already initialized with {len(existing_tables)} tables")
            return

        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created", extra={"tables": missing})

    except Exception as e:
        logger.error(f"Error initializing database: {e}", exc_info=True)
        raise


def drop_db(engine: Engine = None) -> None:
    """
    Drop all database tables.

    WARNING: This will delete all data! Only for development/testing purposes.
    """
    engine = engine or default_engine
    if settings.is_production():
        raise RuntimeError("Refusing to drop tables in production")
    Base.metadata.drop_all(bind=engine)
    logger.warning("All database tables dropped")
