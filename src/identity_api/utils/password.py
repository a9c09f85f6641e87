"""Password hashing and verification."""

import bcrypt
from passlib.context import CryptContext

# Keeps a single verification in the tens of milliseconds on current hardware
DEFAULT_ROUNDS = 29000

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72
BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


class PasswordHasher:
    """Salted one-way hashing backed by passlib.

    New hashes use pbkdf2_sha256 with a tunable work factor. Hashes written by
    the previous service are bcrypt and are checked with the bcrypt package
    directly, since passlib's bcrypt handler does not work with current bcrypt
    releases.
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        if rounds < 1:
            raise ValueError("rounds must be positive")
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["pbkdf2_sha256"],
            deprecated="auto",
            pbkdf2_sha256__default_rounds=rounds,
        )

    def hash(self, plaintext: str) -> str:
        return self._context.hash(plaintext)

    def verify(self, plaintext: str, hashed: str) -> bool:
        if hashed.startswith(BCRYPT_PREFIXES):
            secret = plaintext.encode("utf-8")[:BCRYPT_MAX_BYTES]
            return bcrypt.checkpw(secret, hashed.encode("ascii"))
        return bool(self._context.verify(plaintext, hashed))

    def dummy_verify(self) -> None:
        # same cost as verify(), used when there is no stored hash to check
        self._context.dummy_verify()
