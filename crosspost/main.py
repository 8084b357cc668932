from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import settings
from .infrastructure.logging import configure_logging
from .presentation.api.dependencies import get_database, get_post_scheduler, uses_database
from .presentation.api.routes import connections, health, linkedin, posts
from .presentation.middleware import (
    CorrelationIdMiddleware,
    RequestSizeLimitMiddleware,
    SecurityHeadersMiddleware,
)

configure_logging(settings.service_name, debug=settings.debug)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare the credential store, run the post scheduler, clean up on exit."""
    logger.info("Starting application", service=settings.service_name, store=settings.credential_store)

    if uses_database():
        try:
            await get_database().create_tables()
        except Exception as e:
            logger.error(
                "Credential database unavailable",
                error=str(e),
                error_type=type(e).__name__,
                db_host=settings.db_host,
                exc_info=True,
            )
            raise

    scheduler = get_post_scheduler()
    scheduler.start()
    try:
        yield
    finally:
        scheduler.shutdown()
        if uses_database():
            await get_database().close()
        logger.info("Application shutdown complete")


app = FastAPI(
    title="Crosspost Publisher API",
    description="Connect social accounts and publish to several platforms at once",
    version=__version__,
    lifespan=lifespan,
)

# First added = last executed
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["Content-Type", "X-Request-ID", "X-Tenant-ID"],
)
app.add_middleware(RequestSizeLimitMiddleware, max_size=settings.max_request_size)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(CorrelationIdMiddleware)

app.include_router(health.router)
app.include_router(connections.router, prefix="/api")
app.include_router(posts.router, prefix="/api")
app.include_router(linkedin.router, prefix="/api")


@app.get("/")
def root() -> dict:
    return {
        "service": settings.service_name,
        "version": __version__,
        "docs": "/docs",
    }
