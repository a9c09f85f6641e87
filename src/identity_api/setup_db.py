from .db import Database
from .infrastructure.db.models import Base
from .logging_config import get_logger

logger = get_logger(__name__)


async def create_all(database: Database) -> None:
    """Create the ``users`` table (and its indexes) on a connected database."""
    try:
        async with database.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except Exception as exc:
        logger.error(
            "create_all failed during startup; could not create tables on the configured"
            " database. Ensure the database is reachable and DATABASE_URL is correct.",
            error=str(exc),
        )
        raise
    logger.info("database_tables_ready", tables=sorted(Base.metadata.tables))
