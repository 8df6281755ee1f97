"""
SonicVision Logging Configuration
Structured logging setup with file rotation and generation tracking
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, Optional

import structlog
from pythonjsonlogger import jsonlogger

from .config import SonicVisionSettings, get_settings


def setup_logging(settings: Optional[SonicVisionSettings] = None) -> logging.Logger:
    """Set up structured logging for SonicVision"""

    settings = settings or get_settings()

    # Create logs directory
    log_dir = Path(settings.LOG_FILE_PATH).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper()))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)

    if settings.is_development:
        console_formatter = logging.Formatter(
            '\033[92m%(asctime)s\033[0m - '
            '\033[94m%(name)s\033[0m - '
            '%(levelname)s - '
            '%(message)s',
            datefmt='%H:%M:%S'
        )
    else:
        console_formatter = jsonlogger.JsonFormatter(
            '%(asctime)s %(name)s %(levelname)s %(message)s'
        )

    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    # File handler with rotation
    file_handler = logging.handlers.RotatingFileHandler(
        settings.LOG_FILE_PATH,
        maxBytes=settings.LOG_MAX_SIZE,
        backupCount=settings.LOG_BACKUP_COUNT,
        encoding='utf-8'
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(jsonlogger.JsonFormatter(
        '%(asctime)s %(name)s %(levelname)s %(pathname)s %(lineno)d %(funcName)s %(message)s'
    ))
    root_logger.addHandler(file_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if not settings.is_development
            else structlog.dev.ConsoleRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Adjust third-party library log levels
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("fastapi").setLevel(logging.INFO)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logging.getLogger("sonicvision.generation").setLevel(logging.INFO)
    logging.getLogger("sonicvision.player").setLevel(logging.DEBUG)

    logger = logging.getLogger("sonicvision")
    logger.info(f"Logging configured - Level: {settings.LOG_LEVEL}")

    return logger


class GenerationLogger:
    """Specialized logger for music and image generation requests"""

    def __init__(self):
        self.logger = structlog.get_logger("sonicvision.generation")

    def log_submitted(
        self,
        kind: str,
        generation_id: str,
        prompt: str,
        **kwargs: Any
    ) -> None:
        """Log a generation request handed to a provider"""
        self.logger.info(
            "Generation submitted",
            kind=kind,
            generation_id=generation_id,
            prompt=prompt[:100],
            **kwargs
        )

    def log_status_change(
        self,
        kind: str,
        generation_id: str,
        old_status: str,
        new_status: str,
        **kwargs: Any
    ) -> None:
        self.logger.info(
            "Generation status changed",
            kind=kind,
            generation_id=generation_id,
            old_status=old_status,
            new_status=new_status,
            **kwargs
        )

    def log_status_regression(
        self,
        kind: str,
        generation_id: str,
        current_status: str,
        reported_status: str
    ) -> None:
        """Log a provider report that would move a record backwards"""
        self.logger.warning(
            "Ignoring status regression",
            kind=kind,
            generation_id=generation_id,
            current_status=current_status,
            reported_status=reported_status
        )

    def log_failure(
        self,
        kind: str,
        generation_id: str,
        error: str,
        **kwargs: Any
    ) -> None:
        self.logger.error(
            "Generation failed",
            kind=kind,
            generation_id=generation_id,
            error=error,
            **kwargs
        )


class PerformanceLogger:
    """Logger for performance monitoring"""

    def __init__(self):
        self.logger = structlog.get_logger("sonicvision.performance")

    def log_request(
        self,
        method: str,
        path: str,
        status_code: int,
        duration_ms: float
    ) -> None:
        """Log HTTP request timing"""
        self.logger.debug(
            "HTTP request",
            method=method,
            path=path,
            status_code=status_code,
            duration_ms=round(duration_ms, 2)
        )

    def log_database_error(self, operation: str, error: str) -> None:
        self.logger.error(
            "Database operation failed",
            operation=operation,
            error=error
        )


# Create global logger instances
generation_logger = GenerationLogger()
performance_logger = PerformanceLogger()

__all__ = [
    "setup_logging",
    "GenerationLogger",
    "PerformanceLogger",
    "generation_logger",
    "performance_logger",
]
