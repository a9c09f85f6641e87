from datetime import datetime, timezone
from typing import Any, List, Optional, Union, cast

from sqlalchemy import exists as sa_exists
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ...domain.results import Ok, UserAlreadyExists, UserNotFound
from ...domain.user import User as DomainUser
from ...logging_config import get_logger
from ..db import models

logger = get_logger(__name__)


def _as_utc(value: Any) -> Optional[datetime]:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value is None:
        return None
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _to_domain(row: models.UserModel) -> DomainUser:
    return DomainUser(
        id=cast(Any, row.id),
        first_name=cast(Any, row.first_name),
        last_name=cast(Any, row.last_name),
        email=cast(Any, row.email),
        hashed_password=cast(Any, row.hashed_password),
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
    )


class SqlAlchemyUserRepository:
    """User store over a SQLAlchemy async session factory.

    Each public method opens its own session and runs in a single transaction.
    """

    def __init__(self, session_factory: Any):
        self.session_factory = session_factory

    async def _get_row(
        self, session: AsyncSession, email: str, for_update: bool = False
    ) -> Optional[models.UserModel]:
        stmt = select(models.UserModel).where(models.UserModel.email == email)
        if for_update:
            stmt = stmt.with_for_update()
        q = await session.execute(stmt)
        return q.scalars().first()

    async def all(self) -> List[DomainUser]:
        logger.info("fetching_all_users")
        async with self.session_factory() as session:
            async with session.begin():
                q = await session.execute(select(models.UserModel))
                users = [_to_domain(r) for r in q.scalars().all()]
        logger.info("fetched_all_users", count=len(users))
        return users

    async def exists(self, email: str) -> bool:
        async with self.session_factory() as session:
            async with session.begin():
                q = await session.execute(
                    select(sa_exists().where(models.UserModel.email == email))
                )
                return bool(q.scalar())

    async def find_by_email(self, email: str) -> Union[Ok[DomainUser], UserNotFound]:
        logger.debug("fetching_user_by_email", email=email)
        async with self.session_factory() as session:
            async with session.begin():
                row = await self._get_row(session, email)
                if row is None:
                    logger.info("user_not_found", email=email)
                    return UserNotFound(email)
                return Ok(_to_domain(row))

    async def create(
        self, email: str, first_name: str, last_name: str, hashed_password: str
    ) -> Union[Ok[DomainUser], UserAlreadyExists]:
        if not hashed_password:
            raise ValueError("hashed_password must not be empty")
        logger.debug("creating_user", email=email)
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    if await self._get_row(session, email) is not None:
                        logger.warning("user_create_conflict", email=email)
                        return UserAlreadyExists(email)
                    m = models.UserModel(
                        email=email,
                        first_name=first_name,
                        last_name=last_name,
                        hashed_password=hashed_password,
                    )
                    session.add(m)
                    await session.flush()
                    created = _to_domain(m)
        except IntegrityError:
            # a concurrent registration won the race; the unique index rejects ours
            logger.warning("user_create_conflict", email=email, backstop="unique_index")
            return UserAlreadyExists(email)
        logger.info("user_created", user_id=str(created.id), email=email)
        return Ok(created)

    async def update_password(
        self, email: str, hashed_password: str
    ) -> Union[Ok[DomainUser], UserNotFound]:
        logger.debug("updating_user_password", email=email)
        async with self.session_factory() as session:
            async with session.begin():
                row = await self._get_row(session, email, for_update=True)
                if row is None:
                    logger.warning("password_update_user_not_found", email=email)
                    return UserNotFound(email)
                row.hashed_password = hashed_password
                row.updated_at = datetime.now(timezone.utc)
                await session.flush()
                updated = _to_domain(row)
        logger.info("user_password_updated", user_id=str(updated.id), email=email)
        return Ok(updated)

    async def update_email(
        self, old_email: str, new_email: str
    ) -> Union[Ok[DomainUser], UserNotFound, UserAlreadyExists]:
        """Move a user to ``new_email``.

        Uniqueness of ``new_email`` is the caller's job; only the unique index
        guards against a concurrent writer, reported as UserAlreadyExists.
        """
        logger.debug("updating_user_email", email=old_email, new_email=new_email)
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    row = await self._get_row(session, old_email, for_update=True)
                    if row is None:
                        logger.warning("email_update_user_not_found", email=old_email)
                        return UserNotFound(old_email)
                    row.email = new_email
                    row.updated_at = datetime.now(timezone.utc)
                    await session.flush()
                    updated = _to_domain(row)
        except IntegrityError:
            logger.warning("email_update_conflict", email=old_email, new_email=new_email)
            return UserAlreadyExists(new_email)
        logger.info("user_email_updated", user_id=str(updated.id), new_email=new_email)
        return Ok(updated)

    async def delete_by_email(self, email: str) -> Union[Ok[DomainUser], UserNotFound]:
        logger.debug("deleting_user", email=email)
        async with self.session_factory() as session:
            async with session.begin():
                row = await self._get_row(session, email, for_update=True)
                if row is None:
                    logger.warning("delete_user_not_found", email=email)
                    return UserNotFound(email)
                deleted = _to_domain(row)
                await session.delete(row)
        logger.info("user_deleted", user_id=str(deleted.id), email=email)
        return Ok(deleted)
