from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from .config import Settings
from .db import Database
from .exceptions import ConfigInvalid, TokenError
from .logging_config import configure_logging, get_logger
from .metrics import metrics_response
from .services.token_service import create_token_service
from .utils.password import PasswordHasher

logger = get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
    password_hasher: PasswordHasher | None = None,
) -> FastAPI:
    """Create a routed FastAPI application.

    The token service is built here, so a blank JWT secret or issuer fails
    fast with ConfigInvalid. The database is only constructed; connecting it
    is the job of ``composition.wire_app`` at startup (tests may pass an
    already connected Database instead).
    """
    if settings is None:
        settings = Settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Identity API")
    app.state.settings = settings
    app.state.token_service = create_token_service(settings)
    app.state.password_hasher = password_hasher or PasswordHasher(settings.password_hash_rounds)
    app.state.database = database or Database(settings)

    from .middleware.metrics_middleware import MetricsMiddleware
    from .routers import auth, health, users

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(users.router)

    app.add_middleware(MetricsMiddleware)

    @app.get("/metrics")
    async def _metrics():
        data, content_type = metrics_response()
        return Response(content=data, media_type=content_type)

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info("request_validation_failed", path=request.url.path)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(TokenError)
    async def _token_error_handler(request: Request, exc: TokenError):
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": "Missing or invalid token"},
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(ConfigInvalid)
    async def _config_error_handler(request: Request, exc: ConfigInvalid):
        logger.error("configuration_invalid", error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Server misconfigured"},
        )

    return app


__all__ = ["create_app"]
