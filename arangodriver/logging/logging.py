"""
Structured Logging
==================

Logging configuration for applications built on arangodriver, using structlog
for structured JSON events on top of the standard library handlers.

Library modules only obtain loggers (``structlog.get_logger(__name__)``);
configuring output is left to the application, or to ``arangoctl``.
"""

import logging
from logging.handlers import RotatingFileHandler
import os
from pathlib import Path
import tempfile
import threading

import structlog

LOG_FILE_NAME = "arangodriver.log"
ERROR_LOG_FILE_NAME = "errors.log"


def _get_log_directory() -> Path:
    """
    Get a writable log directory.

    Priority:
    1. LOG_DIR environment variable
    2. Current working directory / logs
    3. System temp directory / arangodriver_logs

    Returns:
        Path to writable log directory
    """
    if env_log_dir := os.environ.get("LOG_DIR"):
        log_dir = Path(env_log_dir)
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            if os.access(log_dir, os.W_OK):
                return log_dir
        except OSError:
            pass

    try:
        log_dir = Path.cwd() / "logs"
        log_dir.mkdir(exist_ok=True)
        if os.access(log_dir, os.W_OK):
            return log_dir
    except OSError:
        pass

    log_dir = Path(tempfile.gettempdir()) / "arangodriver_logs"
    log_dir.mkdir(exist_ok=True)
    return log_dir


def _validate_log_level(log_level: str) -> int:
    """
    Validate and convert log level string to numeric value.

    Args:
        log_level: Log level name (case-insensitive)

    Returns:
        Numeric logging level

    Raises:
        ValueError: If log_level is not a valid logging level name
    """
    level_name = str(log_level).upper()

    valid_levels = {"DEBUG", "INFO", "WARNING", "WARN", "ERROR", "CRITICAL", "FATAL"}
    if level_name not in valid_levels:
        raise ValueError(
            f"Invalid log level: '{log_level}'. "
            f"Must be one of: {', '.join(sorted(valid_levels))}"
        )

    return getattr(logging, level_name)

# Global flag and lock for thread-safe initialization
_logging_initialized = False
_init_lock = threading.Lock()


class LogManager:
    """
    Logging configuration for arangodriver applications.

    Features:
    - Structured JSON events
    - Rotating request and error logs
    - Bound context per component (e.g. endpoint, database)
    """

    @staticmethod
    def setup(log_level: str = "INFO", log_to_file: bool = True):
        """
        Setup logging configuration.

        Safe to call more than once; only the first call has an effect.

        Args:
            log_level: Default log level
            log_to_file: Also write rotating files into the log directory
        """
        global _logging_initialized

        if _logging_initialized:
            return

        with _init_lock:
            if _logging_initialized:
                return

            numeric_level = _validate_log_level(log_level)

            logging.basicConfig(
                level=numeric_level,
                format='%(message)s'
            )

            log_dir = None
            if log_to_file:
                log_dir = _get_log_directory()
                root_logger = logging.getLogger()

                # Main log file with rotation (10MB, keep 5 backups)
                main_handler = RotatingFileHandler(
                    log_dir / LOG_FILE_NAME,
                    maxBytes=10_485_760,
                    backupCount=5
                )
                main_handler.setLevel(numeric_level)
                root_logger.addHandler(main_handler)

                # Error log file (10MB, keep 3 backups)
                error_handler = RotatingFileHandler(
                    log_dir / ERROR_LOG_FILE_NAME,
                    maxBytes=10_485_760,
                    backupCount=3
                )
                error_handler.setLevel(logging.ERROR)
                root_logger.addHandler(error_handler)

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
                    structlog.processors.dict_tracebacks,
                    structlog.processors.JSONRenderer()
                ],
                context_class=dict,
                logger_factory=structlog.stdlib.LoggerFactory(),
                cache_logger_on_first_use=True,
            )

            _logging_initialized = True

            logger = structlog.get_logger()
            logger.info(
                "logging_initialized",
                log_dir=str(log_dir) if log_dir else None,
                level=log_level,
            )

    @staticmethod
    def get_logger(component: str, **context):
        """
        Get a logger bound to a component and extra context.

        Args:
            component: Name of the component logging (e.g. "arangoctl")
            **context: Additional key/value pairs bound to every event

        Returns:
            Configured logger instance
        """
        if not _logging_initialized:
            LogManager.setup()

        return structlog.get_logger().bind(component=component, **context)
