"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from clicktales.auth.mock_auth import MockAuthService
from clicktales.auth.remote import SupabaseAuthClient
from clicktales.auth.router import router as auth_router
from clicktales.auth.selector import select_auth_provider
from clicktales.config import settings
from clicktales.database.engine import async_session_factory, init_db
from clicktales.otp.manager import OTPManager
from clicktales.otp.router import router as otp_router
from clicktales.services.otp_delivery import OTPDeliveryClient
from clicktales.services.verification import VerificationService
from clicktales.storage.kv_store import SqlKeyValueStore

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle hook."""
    logger.info("Starting %s …", settings.app_name)
    await init_db()
    logger.info("Database initialised")

    otp_manager = OTPManager(
        code_width=settings.otp_code_width,
        default_ttl_minutes=settings.otp_ttl_minutes,
        sweep_interval_seconds=settings.otp_sweep_interval_seconds,
    )
    app.state.verification = VerificationService(otp_manager, OTPDeliveryClient())

    mock = MockAuthService(
        SqlKeyValueStore(async_session_factory),
        allow_dev_shortcuts=not settings.is_production,
    )
    app.state.auth_provider = await select_auth_provider(SupabaseAuthClient(), mock)

    # Started only once nothing else in startup can fail
    otp_manager.start()
    try:
        yield
    finally:
        logger.info("Shutting down %s …", settings.app_name)
        await otp_manager.shutdown()


app = FastAPI(
    title=settings.app_name,
    description="Photo-sharing backend core: email verification codes and auth fallback",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(otp_router)
app.include_router(auth_router)


@app.get("/health")
async def health_check(request: Request):
    """Simple liveness probe."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "auth_backend": request.app.state.auth_provider.name,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000)
