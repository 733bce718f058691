"""
Create all tables directly, without Alembic. For local development only.

    python -m jobboard.db.init_db
"""
import logging

from jobboard.db.session import engine
from jobboard.db.base import Base
from jobboard.db import models  # noqa: F401  registers models on Base.metadata

logger = logging.getLogger(__name__)


def init_db(bind=engine):
    Base.metadata.create_all(bind=bind)
    logger.info(f"Tables created: {sorted(Base.metadata.tables)}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
