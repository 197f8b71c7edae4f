"""
Admission Intake API - Main Application Entry Point

This module initializes and configures the FastAPI application including:
- Logging
- Database connection
- Mirror targets (Google Sheet, document storage)
- CORS middleware
- API routing
- Liveness and health endpoints
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from admission_intake.api import api_router
from admission_intake.core.config import settings
from admission_intake.core.database import close_db, init_db
from admission_intake.modules.admissions.mirror import build_mirror_sync

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events including:
    - Database connection
    - Mirror target resolution (done once; handlers receive it as a dependency)
    """
    # Startup
    logger.info(f"Starting admission intake API in {settings.python_env} mode...")

    try:
        await init_db()
        logger.info("[OK] Database connected")
    except Exception as e:
        logger.error(f"[FAIL] Database connection failed: {e}")
        if settings.is_production:
            raise

    app.state.mirror = build_mirror_sync(settings)
    logger.info(
        f"[OK] Mirror targets: sheet={'on' if app.state.mirror.sheet_enabled else 'off'}, "
        f"storage={'on' if app.state.mirror.storage_enabled else 'off'}"
    )

    yield  # Application runs here

    # Shutdown
    logger.info("Shutting down admission intake API...")
    await close_db()
    logger.info("[OK] Cleanup complete")


app = FastAPI(
    title="Admission Intake API",
    description="Student admission registration, login, updates and document uploads",
    version="0.1.0",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

app.include_router(api_router, prefix="/api")

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials="*" not in settings.cors_origins_list,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["Root"], response_class=PlainTextResponse)
async def root() -> str:
    """Liveness text for uptime checks."""
    return "PPSU Backend is Live!"


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}


def run() -> None:
    """Run the API with uvicorn on the configured port."""
    import uvicorn

    uvicorn.run(
        "admission_intake.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    run()
