"""Main FastAPI application"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from bounty_sync.api import issues
from bounty_sync.config import settings
from bounty_sync.models.base import init_db

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info("Starting Bounty Sync Service")
    init_db()
    yield
    # Shutdown
    logger.info("Stopping Bounty Sync Service")
    if issues.get_event_publisher.cache_info().currsize:
        issues.get_event_publisher().close()


app = FastAPI(
    title="Bounty Sync Service",
    description="Track bounty issues on GitHub/GitLab and publish canonical issue events",
    version="1.0.0",
    lifespan=lifespan,
)

# Include API routers
app.include_router(issues.router)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "Bounty Sync"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "bounty_sync.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
