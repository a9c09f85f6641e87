from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from fastapi import FastAPI

from .db import Database
from .logging_config import get_logger
from .setup_db import create_all

logger = get_logger(__name__)


@dataclass
class WireResult:
    app: Any
    database: Database
    teardown: Any


async def wire_app(app: FastAPI) -> WireResult:
    """Connect the app's database and make sure the schema exists.

    MUST NOT be called at module import time; the app's startup hook runs it.
    The returned teardown disconnects the database and is safe to call twice.
    """
    database: Database = app.state.database
    await database.connect()
    await create_all(database)
    logger.info("application_wired", database=database.state.value)

    async def _teardown():
        await database.disconnect()

    return WireResult(app=app, database=database, teardown=_teardown)
