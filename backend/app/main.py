"""
Main FastAPI application entry point.
"""
import asyncio
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy import text

from .config import settings
from .database import init_db, engine
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    # Startup
    configure_logging(settings.log_level)
    logger.info("Starting Archive Catalog API...")
    logger.info("Database: %s", settings.database_url)
    logger.info("CORS origins: %s", settings.cors_origins_list)

    init_db()
    logger.info("Database initialized")

    yield

    # Shutdown
    logger.info("Shutting down Archive Catalog API...")


# Create FastAPI application
app = FastAPI(
    title="Archive Catalog API",
    description="Filtered, sorted and paginated list views over the archive catalog",
    version="0.1.0",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Archive Catalog API",
        "version": "0.1.0",
        "description": "Archive catalog list views",
        "docs": "/docs",
        "status": "running"
    }


@app.get("/livez")
async def liveness():
    """Liveness probe - zero dependencies, confirms process is responsive."""
    return {"status": "ok"}


@app.get("/readyz")
async def readiness():
    """Readiness probe - checks database connectivity off the event loop."""
    checks = {}
    healthy = True

    try:
        def _check_db():
            with engine.connect() as conn:
                return conn.execute(text("SELECT 1")).scalar() == 1

        if await asyncio.to_thread(_check_db):
            checks["database"] = "ok"
        else:
            checks["database"] = "error: unexpected reply"
            healthy = False
    except Exception as e:
        checks["database"] = f"error: {type(e).__name__}"
        healthy = False

    return JSONResponse(
        content={"status": "ok" if healthy else "unhealthy", "checks": checks},
        status_code=200 if healthy else 503,
    )


# Include API routers
from .api.v1.router import router as api_router
app.include_router(api_router, prefix="/api/v1")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )
