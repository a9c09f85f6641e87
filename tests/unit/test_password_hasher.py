"""Unit tests for PasswordHasher."""

import bcrypt
import pytest

from identity_api.utils.password import DEFAULT_ROUNDS, PasswordHasher


def test_hash_is_salted(hasher):
    """Two hashes of the same password differ but both verify."""
    h1 = hasher.hash("correct horse")
    h2 = hasher.hash("correct horse")

    assert h1 != h2
    assert hasher.verify("correct horse", h1)
    assert hasher.verify("correct horse", h2)


def test_verify_rejects_other_password(hasher):
    hashed = hasher.hash("correct horse")
    assert hasher.verify("battery staple", hashed) is False
    assert hasher.verify("Correct horse", hashed) is False
    assert hasher.verify("", hashed) is False


def test_hash_does_not_contain_plaintext(hasher):
    hashed = hasher.hash("plaintext-secret")
    assert "plaintext-secret" not in hashed
    assert hashed.startswith("$pbkdf2-sha256$")


def test_work_factor_is_encoded_in_hash():
    hashed = PasswordHasher(rounds=1234).hash("pw")
    assert hashed.startswith("$pbkdf2-sha256$1234$")


def test_default_rounds():
    assert PasswordHasher().rounds == DEFAULT_ROUNDS


def test_rejects_non_positive_rounds():
    with pytest.raises(ValueError):
        PasswordHasher(rounds=0)


def test_hash_verifies_with_another_instance(hasher):
    """Hashes are self-describing: a hasher with a different work factor still verifies them."""
    hashed = hasher.hash("pw")
    assert PasswordHasher(rounds=2000).verify("pw", hashed)


def test_dummy_verify_returns_none(hasher):
    assert hasher.dummy_verify() is None


@pytest.mark.parametrize("prefix", ["$2a$", "$2b$"])
def test_verifies_legacy_bcrypt_hashes(hasher, prefix):
    legacy = bcrypt.hashpw(b"SecurePass123!", bcrypt.gensalt(rounds=4, prefix=prefix[1:3].encode()))
    hashed = legacy.decode()
    assert hashed.startswith(prefix)

    assert hasher.verify("SecurePass123!", hashed) is True
    assert hasher.verify("wrong", hashed) is False


def test_legacy_bcrypt_uses_first_72_bytes(hasher):
    long_password = "x" * 72 + "tail"
    hashed = bcrypt.hashpw(b"x" * 72, bcrypt.gensalt(rounds=4)).decode()

    assert hasher.verify(long_password, hashed) is True
    assert hasher.verify("x" * 71, hashed) is False
