import asyncio
from typing import Union

from ..domain.results import (
    InvalidCredentials,
    Ok,
    UserAlreadyExists,
    UserNotFound,
)
from ..domain.user import User
from ..logging_config import get_logger
from ..metrics import ACCOUNT_OPERATIONS, AUTH_ATTEMPTS
from ..ports.repositories import UserRepository
from ..ports.security import PasswordHasher
from .token_service import TokenService

logger = get_logger(__name__)


def _record(operation: str, result) -> None:
    if ACCOUNT_OPERATIONS is not None:
        outcome = "ok" if result.ok else result.kind.value
        ACCOUNT_OPERATIONS.labels(operation=operation, result=outcome).inc()


def _record_auth(method: str, success: bool) -> None:
    if AUTH_ATTEMPTS is not None:
        AUTH_ATTEMPTS.labels(result="success" if success else "failure", method=method).inc()


class IdentityService:
    """Registration, authentication and account changes.

    Passwords are always verified before anything is written. Hashing runs in a
    worker thread so the event loop keeps serving other requests.
    """

    def __init__(self, users: UserRepository, hasher: PasswordHasher, tokens: TokenService):
        self.users = users
        self.hasher = hasher
        self.tokens = tokens

    async def _hash(self, password: str) -> str:
        return await asyncio.to_thread(self.hasher.hash, password)

    async def _verify(self, password: str, hashed: str) -> bool:
        return await asyncio.to_thread(self.hasher.verify, password, hashed)

    async def register(
        self, email: str, first_name: str, last_name: str, password: str
    ) -> Union[Ok[User], UserAlreadyExists]:
        email = email.strip()
        hashed = await self._hash(password)
        result = await self.users.create(email, first_name.strip(), last_name.strip(), hashed)
        _record("register", result)
        return result

    async def authenticate(self, email: str, password: str) -> Union[Ok[User], InvalidCredentials]:
        """Return the user for valid credentials.

        A missing account and a wrong password both yield the same
        InvalidCredentials so callers cannot probe for registered emails.
        """
        email = email.strip()
        found = await self.users.find_by_email(email)
        if not isinstance(found, Ok):
            # spend the same hashing time as a real check
            await asyncio.to_thread(self.hasher.dummy_verify)
            logger.info("authentication_failed", email=email)
            return InvalidCredentials()
        if not await self._verify(password, found.value.hashed_password):
            logger.info("authentication_failed", email=email)
            return InvalidCredentials()
        return found

    async def login(self, email: str, password: str) -> Union[Ok[str], InvalidCredentials]:
        result = await self.authenticate(email, password)
        _record_auth("login", result.ok)
        if not isinstance(result, Ok):
            return result
        logger.info("login_succeeded", user_id=str(result.value.id))
        return Ok(self.issue_token(result.value))

    async def profile(self, email: str) -> Union[Ok[User], UserNotFound]:
        return await self.users.find_by_email(email)

    async def change_password(
        self, email: str, old_password: str, new_password: str
    ) -> Union[Ok[User], UserNotFound, InvalidCredentials]:
        found = await self.users.find_by_email(email)
        if not isinstance(found, Ok):
            _record("change_password", found)
            return found
        if not await self._verify(old_password, found.value.hashed_password):
            logger.warning("password_change_rejected", email=email)
            _record_auth("change_password", False)
            return InvalidCredentials()
        _record_auth("change_password", True)

        hashed = await self._hash(new_password)
        result = await self.users.update_password(email, hashed)
        _record("change_password", result)
        return result

    async def change_email(
        self, old_email: str, new_email: str, password: str
    ) -> Union[Ok[User], UserNotFound, InvalidCredentials, UserAlreadyExists]:
        new_email = new_email.strip()
        found = await self.users.find_by_email(old_email)
        if not isinstance(found, Ok):
            _record("change_email", found)
            return found
        if not await self._verify(password, found.value.hashed_password):
            logger.warning("email_change_rejected", email=old_email)
            _record_auth("change_email", False)
            return InvalidCredentials()
        _record_auth("change_email", True)

        # only a caller holding valid credentials learns whether the address is taken
        if await self.users.exists(new_email):
            logger.info("email_change_conflict", email=old_email, new_email=new_email)
            conflict = UserAlreadyExists(new_email)
            _record("change_email", conflict)
            return conflict

        result = await self.users.update_email(old_email, new_email)
        _record("change_email", result)
        return result

    async def delete_by_email(self, email: str) -> Union[Ok[User], UserNotFound]:
        result = await self.users.delete_by_email(email)
        _record("delete", result)
        return result

    def issue_token(self, user: User) -> str:
        return self.tokens.issue(user.email)
