from identity_api.domain.results import (
    FailureKind,
    InvalidCredentials,
    Ok,
    UserAlreadyExists,
    UserNotFound,
)
from identity_api.routers.errors import STATUS_BY_KIND


def test_failure_messages():
    assert UserNotFound("a@example.com").message == "User with email a@example.com is not registered"
    assert (
        UserAlreadyExists("a@example.com").message
        == "User with email a@example.com is already registered"
    )
    assert InvalidCredentials().message == "Invalid email or password"


def test_variants_are_tagged():
    assert Ok(1).ok is True
    for failure in (UserNotFound("x"), UserAlreadyExists("x"), InvalidCredentials()):
        assert failure.ok is False
    assert UserNotFound("x").kind is FailureKind.USER_NOT_FOUND
    assert UserAlreadyExists("x").kind is FailureKind.USER_ALREADY_EXISTS
    assert InvalidCredentials().kind is FailureKind.INVALID_CREDENTIALS
    assert UserNotFound("x") != UserAlreadyExists("x")


def test_every_failure_kind_has_a_status():
    assert {k: STATUS_BY_KIND[k] for k in FailureKind} == {
        FailureKind.USER_NOT_FOUND: 404,
        FailureKind.USER_ALREADY_EXISTS: 409,
        FailureKind.INVALID_CREDENTIALS: 401,
    }
