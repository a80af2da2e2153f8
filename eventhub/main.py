"""EventHub API application."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from eventhub import __version__
from eventhub.api.v1.router import router as v1_router
from eventhub.config import get_settings
from eventhub.database import close_db, get_db_context, init_models
from eventhub.errors import HTTP_STATUS_BY_KIND, TicketingError
from eventhub.redis_client import close_redis, get_redis
from eventhub.schemas.common import ErrorResponse
from eventhub.services.auth_service import AuthService
from eventhub.tasks import background_tasks

logging.basicConfig(
    level=logging.DEBUG if get_settings().DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

settings = get_settings()

API_DESCRIPTION = """
## EventHub Ticketing API

Event catalog, ticket purchase and cancellation for a single organization.

### Buying tickets
1. Find an upcoming event and check its availability
2. `POST /api/v1/tickets/purchase` with a quantity and payment method
3. The charge runs first; the ticket is written only if seats are still
   free once the event lock is held, otherwise the charge is refunded

### Cancelling
Paid tickets can be cancelled until 24 hours before the event starts.
The refunded quantity becomes available again.

### Authentication
`/api/v1/auth/register` and `/api/v1/auth/login` return a bearer token,
sent back as `Authorization: Bearer <token>`. Managing events, categories
and reports needs the admin role.
"""


async def bootstrap_admin() -> None:
    """Create the configured admin account on first start."""
    if not (settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD):
        return
    async with get_db_context() as db:
        await AuthService(db).ensure_admin(settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.APP_NAME} {__version__}")

    await init_models()
    await bootstrap_admin()
    await get_redis()
    await background_tasks.start()

    yield

    logger.info(f"Stopping {settings.APP_NAME}")
    await background_tasks.stop()
    await close_redis()
    await close_db()


def register_exception_handlers(app: FastAPI) -> None:
    """Render domain errors as ErrorResponse bodies and hide anything unexpected."""

    @app.exception_handler(TicketingError)
    async def ticketing_error_handler(request: Request, exc: TicketingError):
        status_code = HTTP_STATUS_BY_KIND[exc.kind]
        if status_code >= 500:
            logger.warning(f"{request.method} {request.url.path}: {exc}")

        body = ErrorResponse(
            error=exc.kind.value,
            detail=exc.message,
            timestamp=datetime.now(timezone.utc),
        )
        return JSONResponse(
            status_code=status_code,
            content=body.model_dump(mode="json"),
            headers={"WWW-Authenticate": "Bearer"} if status_code == 401 else None,
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "detail": str(exc) if settings.DEBUG else None,
            },
        )


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    app = FastAPI(
        title=settings.APP_NAME,
        version=__version__,
        description=API_DESCRIPTION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(v1_router, prefix="/api")
    register_exception_handlers(app)

    @app.get("/health", tags=["Health"])
    async def health_check():
        return {"status": "healthy", "version": __version__}

    return app


app = create_app()


def run():
    """Console entry point."""
    uvicorn.run(
        "eventhub.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()
