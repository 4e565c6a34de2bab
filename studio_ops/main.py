"""
FastAPI Main Application
Studio retainer capacity service
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from studio_ops.config import settings
from studio_ops.core.logging import setup_logging, get_logger
from studio_ops.infrastructure.db.database import init_db, close_db
from studio_ops.api.routes import health, retainers

setup_logging(settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager
    Handles startup and shutdown of the database
    """
    logger.info("Starting Studio Ops retainer service")
    logger.info(f"Environment: {settings.APP_ENV}, timezone: {settings.TIMEZONE}")

    await init_db()
    logger.info("Database initialized")

    yield

    logger.info("Closing database connections...")
    await close_db()
    logger.info("Studio Ops shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Studio Ops - Retainers",
    description="Retainer usage, monthly vs rollover allocation and capacity forecasts",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, tags=["Health"])
app.include_router(retainers.router, prefix="/api/v1/retainers", tags=["Retainers"])


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Studio Ops retainer service",
        "version": "1.0.0",
        "docs": "/docs"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "studio_ops.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
    )
