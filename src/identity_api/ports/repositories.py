from typing import List, Protocol, Union

from ..domain.results import Ok, UserAlreadyExists, UserNotFound
from ..domain.user import User


class UserRepository(Protocol):
    """Protocol for transactional access to persisted users.

    Every method runs in its own transaction and either fully applies or has
    no effect.
    """

    async def all(self) -> List[User]: ...
    async def exists(self, email: str) -> bool: ...
    async def find_by_email(self, email: str) -> Union[Ok[User], UserNotFound]: ...
    async def create(
        self, email: str, first_name: str, last_name: str, hashed_password: str
    ) -> Union[Ok[User], UserAlreadyExists]: ...
    async def update_password(
        self, email: str, hashed_password: str
    ) -> Union[Ok[User], UserNotFound]: ...
    async def update_email(
        self, old_email: str, new_email: str
    ) -> Union[Ok[User], UserNotFound, UserAlreadyExists]: ...
    async def delete_by_email(self, email: str) -> Union[Ok[User], UserNotFound]: ...
