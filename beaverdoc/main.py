"""
BeaverDoc - Main FastAPI Application
Document management backend: PDF import, traceability footers, audit trail, sharing.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from beaverdoc.config import get_settings, get_cors_origins, APP_VERSION
from beaverdoc.exceptions import register_exception_handlers
from beaverdoc.models import HealthResponse
from beaverdoc.routers import audit, documents, health, shares
from beaverdoc.utils.logging import setup_logging, RequestIdMiddleware, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()
    setup_logging(
        environment=settings.environment,
        level=logging.DEBUG if settings.debug else logging.INFO,
    )
    logger.info(f"Starting BeaverDoc v{APP_VERSION} ({settings.environment})")
    yield
    logger.info("Shutting down BeaverDoc")


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    app = FastAPI(
        title="BeaverDoc",
        description="""Document management service.

Uploaded PDFs are stored unchanged. Downloads carry a traceability footer on
every page: document UID, tracking token, page position and, for signed
documents, the signature reference and timestamp.

Signatures are placeholders and carry no cryptographic guarantee.
""",
        version=APP_VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Content-Disposition"],
    )

    register_exception_handlers(app)

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health_check():
        """Liveness probe."""
        return {"status": "healthy", "version": APP_VERSION}

    app.include_router(health.router)
    app.include_router(documents.router)
    app.include_router(audit.router)
    app.include_router(shares.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("beaverdoc.main:app", host="0.0.0.0", port=8000)
