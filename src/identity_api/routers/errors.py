"""Mapping of identity failures to HTTP responses."""

from typing import Dict, TypeVar, Union

from fastapi import HTTPException, status

from ..domain.results import Failure, FailureKind, Ok

T = TypeVar("T")

STATUS_BY_KIND: Dict[FailureKind, int] = {
    FailureKind.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    FailureKind.USER_ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    FailureKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
}


def unwrap(result: Union[Ok[T], Failure]) -> T:
    """Return the value of an Ok result or raise the HTTPException for the failure."""
    if isinstance(result, Ok):
        return result.value
    code = STATUS_BY_KIND[result.kind]
    headers = {"WWW-Authenticate": "Bearer"} if code == status.HTTP_401_UNAUTHORIZED else None
    raise HTTPException(status_code=code, detail=result.message, headers=headers)
