from flask_sqlalchemy import SQLAlchemy
import logging

logger = logging.getLogger(__name__)

db = SQLAlchemy()


def init_db():
    """Create any missing tables. Must run inside an application context."""
    # Models register their tables on import
    from baakh import models  # noqa: F401

    db.create_all()
    logger.info("Database tables ready")
    return True


def teardown_db(exception=None):
    """Roll back a failed request's transaction before the session is removed."""
    if exception is not None:
        db.session.rollback()
