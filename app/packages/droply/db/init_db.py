"""Database bootstrapping utilities."""

from __future__ import annotations

import logging

from app.packages.droply.db import session as db_session
from app.packages.droply.models.base import Base
from app.packages.droply.models.node import Node  # noqa: F401 - ensure table registration
from app.packages.droply.models.user import User  # noqa: F401 - ensure table registration

logger = logging.getLogger(__name__)


def init_db() -> None:
    """Create all database tables if they do not exist."""
    Base.metadata.create_all(bind=db_session.engine)
    logger.info("Database schema ready (%s tables)", len(Base.metadata.tables))
