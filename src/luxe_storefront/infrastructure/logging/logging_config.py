"""
Logging configuration for the storefront client

Console output for development, rotating JSON files for everything else,
and structlog wired on top of the stdlib loggers for structured callers.
"""

import logging
import logging.handlers
import os
import sys
import threading
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
from pythonjsonlogger import jsonlogger

from luxe_storefront.infrastructure.configuration.config import Settings, get_config

MAIN_LOG_FILE = "storefront.log"
ERROR_LOG_FILE = "storefront_errors.log"
MAX_LOG_FILE_SIZE = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5


class StorefrontJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter with storefront-specific fields"""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["thread_name"] = threading.current_thread().name
        log_record["process_id"] = os.getpid()

        if hasattr(record, "user_id"):
            log_record["user_id"] = record.user_id

        if hasattr(record, "order_id"):
            log_record["order_id"] = record.order_id

        if hasattr(record, "operation_time"):
            log_record["operation_time_ms"] = record.operation_time


def setup_logging(config: Optional[Settings] = None, log_to_files: bool = True) -> None:
    """
    Setup logging for the storefront client

    Features:
    - Human readable console output outside production
    - JSON application log and error-only log with rotation
    - structlog processors bridged onto the stdlib handlers
    """
    config = config or get_config()

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))
    root_logger.handlers.clear()

    if config.environment != "production":
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(console_handler)

    if log_to_files:
        logs_dir = Path(config.log_dir)
        logs_dir.mkdir(parents=True, exist_ok=True)

        app_handler = logging.handlers.RotatingFileHandler(
            logs_dir / MAIN_LOG_FILE,
            maxBytes=MAX_LOG_FILE_SIZE,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        app_handler.setFormatter(StorefrontJsonFormatter())
        app_handler.setLevel(logging.INFO)
        root_logger.addHandler(app_handler)

        error_handler = logging.handlers.RotatingFileHandler(
            logs_dir / ERROR_LOG_FILE,
            maxBytes=MAX_LOG_FILE_SIZE,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        error_handler.setFormatter(StorefrontJsonFormatter())
        error_handler.setLevel(logging.ERROR)
        root_logger.addHandler(error_handler)

    _configure_structlog()

    # HTTP client chatter
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        "Logging configured",
        extra={"environment": config.environment, "log_level": config.log_level},
    )


def _configure_structlog() -> None:
    """Configure structlog for structured logging"""
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
            structlog.stdlib.render_to_log_kwargs,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_structured_logger(name: str, **context: Any) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger bound to the given context"""
    return structlog.get_logger(name).bind(**context)


class PerformanceLogger:
    """Context manager for performance logging"""

    def __init__(
        self,
        operation_name: str,
        logger: Optional[logging.Logger] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.operation_name = operation_name
        self.logger = logger or logging.getLogger(__name__)
        self.details = details or {}
        self.start_time = 0.0
        self.duration_ms = 0.0

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.debug(
            "Starting operation: %s",
            self.operation_name,
            extra={"operation": self.operation_name, **self.details},
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration_ms = (time.perf_counter() - self.start_time) * 1000

        if exc_type is None:
            self.logger.debug(
                "Completed operation: %s in %.1fms",
                self.operation_name,
                self.duration_ms,
                extra={
                    "operation": self.operation_name,
                    "operation_time": self.duration_ms,
                    "success": True,
                    **self.details,
                },
            )
        else:
            self.logger.warning(
                "Failed operation: %s after %.1fms (%s)",
                self.operation_name,
                self.duration_ms,
                exc_type.__name__,
                extra={
                    "operation": self.operation_name,
                    "operation_time": self.duration_ms,
                    "success": False,
                    "error_type": exc_type.__name__,
                    "error_message": str(exc_val) if exc_val else None,
                    **self.details,
                },
            )
        return False
