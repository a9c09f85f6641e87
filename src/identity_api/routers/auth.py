from fastapi import APIRouter, Depends, status

from ..deps import get_identity_service
from ..logging_config import get_logger
from ..schemas.auth import (
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    UserResponse,
    user_to_response,
)
from ..services.identity_service import IdentityService
from .errors import unwrap

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    req: RegisterRequest,
    identity: IdentityService = Depends(get_identity_service),
):
    logger.debug("register endpoint called", email=req.email)
    user = unwrap(
        await identity.register(req.email, req.first_name, req.last_name, req.password)
    )
    return user_to_response(user)


@router.post("/login", response_model=LoginResponse)
async def login(
    req: LoginRequest,
    identity: IdentityService = Depends(get_identity_service),
):
    logger.debug("login endpoint called", email=req.email)
    token = unwrap(await identity.login(req.email, req.password))
    return LoginResponse(token=token)
