"""
SonicVision Studio - AI Music and Image Generation
FastAPI backend for generation requests, status tracking and image downloads
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Dict

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from .api.routes import constants, images, music, users
from .core.config import get_settings
from .core.logging import performance_logger, setup_logging
from .database.connection import database_manager
from .database.storage import DatabaseStorage
from .services.generation_service import GenerationService
from .services.image_provider import ImageProvider
from .services.suno_provider import SunoProvider

# Global settings
settings = get_settings()

logger = logging.getLogger("sonicvision")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events"""

    # Startup
    setup_logging(settings)
    logger.info("Starting SonicVision backend server...")

    try:
        await database_manager.initialize()
        if settings.is_development or settings.is_sqlite:
            await database_manager.create_tables()
        logger.info("Database connections initialized")

        storage = DatabaseStorage(database_manager.session_factory)
        suno = settings.get_suno_config()
        image = settings.get_image_config()
        polling = settings.get_polling_config()

        app.state.storage = storage
        app.state.generation_service = GenerationService(
            storage=storage,
            music_provider=SunoProvider(
                api_key=suno["api_key"],
                base_url=suno["base_url"],
                callback_url=suno["callback_url"],
                timeout=suno["timeout"]
            ),
            image_provider=ImageProvider(
                api_key=image["api_key"],
                base_url=image["base_url"],
                model=image["model"],
                size=image["size"],
                timeout=image["timeout"]
            ),
            polling_interval=polling["interval"],
            max_poll_attempts=polling["max_attempts"]
        )

        logger.info("SonicVision backend started successfully")

    except Exception as e:
        logger.error(f"Failed to start SonicVision backend: {e}")
        raise

    yield

    # Shutdown
    logger.info("Shutting down SonicVision backend...")

    try:
        await app.state.generation_service.close()
        logger.info("Provider clients closed")

        await database_manager.close()
        logger.info("Database connections closed")

        logger.info("SonicVision backend shutdown complete")

    except Exception as e:
        logger.error(f"Error during shutdown: {e}")


def create_app() -> FastAPI:
    """Build the FastAPI application with middleware and routes"""
    app = FastAPI(
        title="SonicVision API",
        description="AI music and image generation studio",
        version=settings.APP_VERSION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan
    )

    # Add middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.middleware("http")
    async def log_request_timing(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        performance_logger.log_request(
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=(time.perf_counter() - started) * 1000
        )
        return response

    # Exception handlers
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for unhandled exceptions"""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "detail": str(exc)}
        )

    # Health check endpoint
    @app.get("/health")
    async def health_check() -> Dict[str, Any]:
        """Health check endpoint"""
        try:
            db_status = await database_manager.check_health()

            return {
                "status": "healthy" if db_status else "degraded",
                "version": settings.APP_VERSION,
                "services": {
                    "database": "healthy" if db_status else "unhealthy",
                    "music_provider": "configured" if settings.SUNO_API_KEY else "unconfigured",
                    "image_provider": "configured" if settings.OPENAI_API_KEY else "unconfigured"
                }
            }
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return JSONResponse(
                status_code=503,
                content={
                    "status": "unhealthy",
                    "error": str(e)
                }
            )

    # API information endpoint
    @app.get("/api/info")
    async def api_info() -> Dict[str, Any]:
        """API information and capabilities"""
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "description": "AI music and image generation studio",
            "capabilities": {
                "music_generation": True,
                "image_generation": True,
                "image_download": True,
                "provider_callbacks": True
            },
            "limits": {
                "max_prompt_length": settings.MAX_PROMPT_LENGTH,
                "polling_interval_seconds": settings.POLLING_INTERVAL,
                "max_poll_attempts": settings.MAX_POLL_ATTEMPTS
            }
        }

    # API Routes
    app.include_router(music.router, prefix="/api/music", tags=["Music"])
    app.include_router(images.router, prefix="/api/images", tags=["Images"])
    app.include_router(users.router, prefix="/api/users", tags=["Users"])
    app.include_router(constants.router, prefix="/api/constants", tags=["Constants"])

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "sonicvision.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower()
    )
