import enum
from typing import Any, Optional

from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from .config import Settings
from .exceptions import ConfigInvalid, DatabaseClosedError, DatabaseNotConnectedError
from .logging_config import get_logger

logger = get_logger(__name__)


class ConnectionState(str, enum.Enum):
    UNCONNECTED = "unconnected"
    CONNECTED = "connected"
    CLOSED = "closed"


def build_database_url(settings: Settings) -> URL:
    """Return the SQLAlchemy URL for ``settings``, applying DB_USER/DB_PASSWORD."""
    if not settings.database_url or not settings.database_url.strip():
        logger.error("database_url_missing", variable="DATABASE_URL")
        raise ConfigInvalid("DATABASE_URL must be provided")
    try:
        url = make_url(settings.database_url.strip())
    except ArgumentError as e:
        raise ConfigInvalid(f"DATABASE_URL is not a valid database URL: {e}") from e
    if settings.db_user:
        url = url.set(username=settings.db_user)
    if settings.db_password:
        url = url.set(password=settings.db_password)
    return url


class Database:
    """Owns the async engine and session factory (NOT user authentication sessions).

    Lifecycle is UNCONNECTED -> CONNECTED -> CLOSED. Connecting while connected
    and disconnecting while not connected are no-ops; a closed database cannot
    be reopened.
    """

    def __init__(self, settings: Settings):
        self._settings = settings
        self._state = ConnectionState.UNCONNECTED
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Any = None

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state is ConnectionState.CONNECTED

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None or not self.is_connected:
            raise DatabaseNotConnectedError("Database is not connected. Call connect() first.")
        return self._engine

    @property
    def session_factory(self) -> Any:
        """SQLAlchemy AsyncSession factory used for database transactions."""
        if self._session_factory is None or not self.is_connected:
            raise DatabaseNotConnectedError("Database is not connected. Call connect() first.")
        return self._session_factory

    def _create_engine(self) -> AsyncEngine:
        url = build_database_url(self._settings)
        kwargs: dict[str, Any] = {"echo": False, "future": True}
        backend = url.get_backend_name()
        if backend != "sqlite":
            kwargs.update(
                pool_size=self._settings.db_pool_size,
                max_overflow=self._settings.db_max_overflow,
                pool_recycle=self._settings.db_pool_recycle,
                pool_pre_ping=self._settings.db_pool_pre_ping,
            )
        if backend == "postgresql":
            # existence check and insert must see a stable snapshot
            kwargs["isolation_level"] = "REPEATABLE READ"
            if url.get_driver_name() == "asyncpg":
                kwargs["connect_args"] = {"command_timeout": 30}
        logger.debug(
            "database_engine_config",
            backend=backend,
            driver=url.get_driver_name(),
            database=url.database,
            user=url.username,
        )
        return create_async_engine(url, **kwargs)

    async def connect(self) -> None:
        if self._state is ConnectionState.CONNECTED:
            logger.info("database_already_connected")
            return
        if self._state is ConnectionState.CLOSED:
            raise DatabaseClosedError("Database has been closed and cannot be reconnected")

        logger.info("database_connecting")
        engine = self._create_engine()
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception:
            logger.exception("database_connect_failed")
            await engine.dispose()
            raise

        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)
        self._state = ConnectionState.CONNECTED
        logger.info("database_connected")

    async def disconnect(self) -> None:
        if self._state is not ConnectionState.CONNECTED:
            logger.info("database_not_connected_skip_disconnect", state=self._state.value)
            return

        logger.info("database_disconnecting")
        engine = self._engine
        self._engine = None
        self._session_factory = None
        self._state = ConnectionState.CLOSED
        if engine is not None:
            await engine.dispose()
        logger.info("database_disconnected")
