from typing import Protocol


class PasswordHasher(Protocol):
    """Protocol for one-way credential hashing."""

    def hash(self, plaintext: str) -> str: ...
    def verify(self, plaintext: str, hashed: str) -> bool: ...
    def dummy_verify(self) -> None: ...
