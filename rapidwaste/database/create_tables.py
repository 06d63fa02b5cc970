"""
Create all tables known to the ORM metadata (idempotent).
"""
from rapidwaste.models import *  # noqa: F401,F403
from rapidwaste.database.session import engine, Base
from rapidwaste.core.logging_config import get_logger

logger = get_logger(__name__)


def create_tables(bind=None):
    """Initialize the database and create all tables."""
    try:
        Base.metadata.create_all(bind=bind or engine)
        logger.info("Database initialization completed")
    except Exception as e:
        logger.error(f"Database initialization failed: {str(e)}")
        raise


if __name__ == "__main__":
    create_tables()
