from . import composition
from .deps.providers import get_settings
from .logging_config import get_logger
from .wiring import create_app

logger = get_logger(__name__)

# built at import: a blank JWT secret or issuer stops the process before it serves
app = create_app(get_settings())


@app.on_event("startup")
async def on_startup():
    app.state.wiring = await composition.wire_app(app)


@app.on_event("shutdown")
async def on_shutdown():
    wiring = getattr(app.state, "wiring", None)
    if wiring is not None:
        await wiring.teardown()
    logger.info("shutdown complete")


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("identity_api.main:app", host=settings.server_host, port=settings.server_port)
