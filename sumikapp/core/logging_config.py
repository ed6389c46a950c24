"""
Logging Configuration Module.

This module provides centralized logging configuration for SumikAPP.
It sets up logging with different levels for different modules and environments.

Features:
- Configurable log levels per module
- Console and file logging
- JSON format support
- Structured service context attached through ``extra={"ctx": {...}}``
"""

import logging
from pathlib import Path
from typing import Any, Optional


def _get_logging_config() -> dict[str, Any]:
    """Get logging configuration from the settings model.

    The settings import is deferred to avoid circular imports during module
    initialization.
    """
    from sumikapp.server.core.config import settings

    return {
        "log_level": settings.log_level.upper(),
        "log_format": settings.log_format,
        "log_file_dir": settings.log_file_dir,
        "enable_file_logging": settings.enable_file_logging,
    }


_config = _get_logging_config()
LOG_LEVEL = _config["log_level"]
LOG_FORMAT = _config["log_format"]
LOG_FILE_DIR = _config["log_file_dir"]
ENABLE_FILE_LOGGING = _config["enable_file_logging"]


SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s%(ctx_suffix)s"

DETAILED_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s() - "
    "%(message)s%(ctx_suffix)s"
)

JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"module": "%(filename)s", "function": "%(funcName)s", "line": %(lineno)d, '
    '"message": "%(message)s", "ctx": %(ctx_json)s}'
)

FORMATS = {
    "json": JSON_FORMAT,
    "simple": SIMPLE_FORMAT,
    "detailed": DETAILED_FORMAT,
}


# Module-specific log levels
MODULE_LOG_LEVELS = {
    "sumikapp": "INFO",
    "sumikapp.server.api": "DEBUG",
    "sumikapp.server.services": "DEBUG",
    "sumikapp.navigation": "INFO",
    "sumikapp.dashboards": "INFO",
    "sumikapp.prediction": "DEBUG",
    # Third-party libraries (reduce noise)
    "sqlalchemy": "WARNING",
    "sqlalchemy.engine": "WARNING",
    "sqlalchemy.pool": "WARNING",
    "httpx": "WARNING",
    "asyncio": "WARNING",
    "uvicorn": "INFO",
    "uvicorn.access": "INFO",
}


class ContextFilter(logging.Filter):
    """Render the ``ctx`` dict that services pass via ``extra`` into the record."""

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = getattr(record, "ctx", None)
        if isinstance(ctx, dict) and ctx:
            pairs = " ".join(f"{key}={value}" for key, value in ctx.items())
            record.ctx_suffix = f" [{pairs}]"
            record.ctx_json = "{" + ", ".join(f'"{key}": "{value}"' for key, value in ctx.items()) + "}"
        else:
            record.ctx_suffix = ""
            record.ctx_json = "{}"
        return True


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = True,
) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Override default log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Override default format (simple, detailed, json)
        enable_file: Whether to enable file logging
    """
    level = (log_level or LOG_LEVEL).upper()
    fmt = log_format or LOG_FORMAT
    format_str = FORMATS.get(fmt, DETAILED_FORMAT)

    formatter = logging.Formatter(format_str, datefmt="%Y-%m-%d %H:%M:%S")
    context_filter = ContextFilter()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture all levels, filter at handler level

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(context_filter)
    root_logger.addHandler(console_handler)

    file_logging = enable_file and ENABLE_FILE_LOGGING
    if file_logging:
        Path(LOG_FILE_DIR).mkdir(parents=True, exist_ok=True)
        log_file = Path(LOG_FILE_DIR) / "sumikapp.log"
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)  # Always log DEBUG to file
        file_handler.setFormatter(formatter)
        file_handler.addFilter(context_filter)
        root_logger.addHandler(file_handler)

    for module_name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(module_name).setLevel(module_level)

    root_logger.info(f"Logging configured: level={level}, format={fmt}, file_logging={file_logging}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The module name (typically __name__)

    Returns:
        A configured logger instance
    """
    return logging.getLogger(name)


def log_context(name: str, **values: Any) -> dict[str, Any]:
    """Build the structured context dict services attach to their log lines.

    ``name`` is the operation namespace, e.g. ``"trainee_report.approve"``.
    ``None`` values are dropped.
    """
    ctx: dict[str, Any] = {"name": name}
    ctx.update({key: value for key, value in values.items() if value is not None})
    return ctx
