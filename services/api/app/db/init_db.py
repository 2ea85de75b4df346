from __future__ import annotations

import logging
import os

from services.api.app.db.database import get_engine
from services.api.app.db.models import Base

logger = logging.getLogger(__name__)


def auto_create_enabled() -> bool:
    return os.getenv("HOMECOOK_DB_AUTO_CREATE", "true").strip().lower() in {"1", "true", "yes", "y"}


def init_db() -> bool:
    if not auto_create_enabled():
        logger.info("Skipping table creation (HOMECOOK_DB_AUTO_CREATE disabled)")
        return False

    engine = get_engine()
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready on %s", engine.url.render_as_string(hide_password=True))
    return True
