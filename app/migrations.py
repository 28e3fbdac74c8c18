import logging

from app.extensions import db
from app import models  # noqa: F401  registers every table on db.metadata

logger = logging.getLogger(__name__)


def run_migrations():
    """Create every table and index that does not exist yet.

    ``create_all`` checks for each object before issuing DDL, so this is safe
    to call on every boot. There is no versioning: changing a column on an
    existing table needs ``flask db migrate`` or a manual ALTER.
    """
    logger.info("Running database migrations...")
    try:
        db.create_all()
    except Exception:
        logger.exception("Migration error")
        raise
    logger.info("Database migrations completed successfully")
