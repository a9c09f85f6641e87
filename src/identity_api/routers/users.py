from fastapi import APIRouter, Depends

from ..deps import get_current_email, get_identity_service
from ..logging_config import get_logger
from ..schemas.auth import LoginResponse, UserResponse, user_to_response
from ..schemas.user import ChangeEmailRequest, ChangePasswordRequest
from ..services.identity_service import IdentityService
from .errors import unwrap

logger = get_logger(__name__)

router = APIRouter(prefix="/user", tags=["user"])


@router.get("/me", response_model=UserResponse)
async def me(
    email: str = Depends(get_current_email),
    identity: IdentityService = Depends(get_identity_service),
):
    return user_to_response(unwrap(await identity.profile(email)))


@router.post("/change-password", response_model=UserResponse)
async def change_password(
    req: ChangePasswordRequest,
    email: str = Depends(get_current_email),
    identity: IdentityService = Depends(get_identity_service),
):
    user = unwrap(await identity.change_password(email, req.old_password, req.new_password))
    return user_to_response(user)


@router.post("/change-email", response_model=LoginResponse)
async def change_email(
    req: ChangeEmailRequest,
    email: str = Depends(get_current_email),
    identity: IdentityService = Depends(get_identity_service),
):
    user = unwrap(await identity.change_email(email, req.new_email, req.password))
    # the old token names the old email; hand out one for the new address
    return LoginResponse(token=identity.issue_token(user))


@router.delete("", response_model=UserResponse)
async def delete_me(
    email: str = Depends(get_current_email),
    identity: IdentityService = Depends(get_identity_service),
):
    user = unwrap(await identity.delete_by_email(email))
    logger.info("account_deleted", user_id=str(user.id))
    return user_to_response(user)
