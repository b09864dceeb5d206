"""
Logging configuration for bitcrud applications.
Provides structured logging with different levels and formats.

File handlers sit behind a QueueHandler so log writes never block the
event loop; a QueueListener performs the file I/O in a separate thread.
"""

import atexit
import logging
import logging.handlers
import queue
import sys
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel

from .middleware.correlation import get_correlation_id


# Global queue listener for cleanup
_queue_listener: Optional[logging.handlers.QueueListener] = None


class LogConfig(BaseModel):
    """Logging configuration settings."""

    level: str = "INFO"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    enable_file_logging: bool = False
    log_dir: str = "logs"
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5
    enable_console: bool = True


class CorrelationIdFilter(logging.Filter):
    """Attach the current request's correlation id to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for console output."""

    # Color codes
    grey = "\x1b[38;21m"
    yellow = "\x1b[33;21m"
    red = "\x1b[31;21m"
    bold_red = "\x1b[31;1m"
    blue = "\x1b[34;21m"
    reset = "\x1b[0m"

    COLORS = {
        logging.DEBUG: grey,
        logging.INFO: blue,
        logging.WARNING: yellow,
        logging.ERROR: red,
        logging.CRITICAL: bold_red,
    }

    def format(self, record):
        # Copy so other handlers keep the plain levelname
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelno, self.grey)
        record.levelname = f"{color}{record.levelname}{self.reset}"
        return f"{super().format(record)}{self.reset}"


def setup_logging(config: Optional[LogConfig] = None) -> None:
    """Setup application logging with configuration.

    - Console handler writes directly to stdout
    - File handler is fed through a QueueHandler/QueueListener pair
    """
    global _queue_listener

    if config is None:
        config = LogConfig()

    level = getattr(logging, config.level.upper())

    # Stop existing listener if running
    if _queue_listener:
        _queue_listener.stop()
        _queue_listener = None

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    correlation_filter = CorrelationIdFilter()

    if config.enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.addFilter(correlation_filter)
        console_handler.setFormatter(
            ColoredFormatter(
                fmt="%(asctime)s | %(name)s | %(levelname)s | %(correlation_id)s | %(message)s",
                datefmt=config.date_format,
            )
        )
        root_logger.addHandler(console_handler)

    if config.enable_file_logging:
        log_path = Path(config.log_dir)
        log_path.mkdir(exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_path / "app.log",
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s | %(name)s | %(levelname)s | %(correlation_id)s | "
                "%(funcName)s:%(lineno)d | %(message)s",
                datefmt=config.date_format,
            )
        )

        # Filter on the queue handler: the correlation id only exists in
        # the request's context, not in the listener thread
        log_queue = queue.Queue(-1)
        queue_handler = logging.handlers.QueueHandler(log_queue)
        queue_handler.addFilter(correlation_filter)
        root_logger.addHandler(queue_handler)

        _queue_listener = logging.handlers.QueueListener(
            log_queue,
            file_handler,
            respect_handler_level=True,
        )
        _queue_listener.start()

        atexit.register(stop_queue_listener)

    # SQL echo is controlled by DATABASE_ECHO, keep the engine logger quiet
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def stop_queue_listener() -> None:
    """Stop the queue listener gracefully.

    Called automatically on exit via atexit.
    Can also be called manually during shutdown.
    """
    global _queue_listener

    if _queue_listener:
        _queue_listener.stop()
        _queue_listener = None


class CrudLogger:
    """Structured logger for CRUD operations."""

    def __init__(self, name: str = "crud"):
        self.logger = logging.getLogger(f"crud.{name}")

    def operation_committed(
        self,
        resource: str,
        operation: str,
        affected: Optional[int] = None,
    ) -> None:
        """Log a write operation whose transaction was committed."""
        affected_str = f" | Affected: {affected}" if affected is not None else ""
        self.logger.info(
            f"Committed | Resource: {resource} | Operation: {operation}{affected_str}"
        )

    def operation_rolled_back(self, resource: str, operation: str, reason: str) -> None:
        """Log a write operation vetoed by its transaction hook."""
        self.logger.warning(
            f"Rolled back | Resource: {resource} | Operation: {operation} | "
            f"Reason: {reason}"
        )

    def body_rejected(self, resource: str, operation: str, error: str) -> None:
        """Log a request body that failed to bind."""
        self.logger.info(
            f"Body rejected | Resource: {resource} | Operation: {operation} | "
            f"Error: {error}"
        )

    def error_occurred(
        self,
        resource: str,
        operation: str,
        error: Any = "",
    ) -> None:
        """Log errors with context."""
        self.logger.error(
            f"CRUD error | Resource: {resource} | Operation: {operation} | Error: {error}"
        )
