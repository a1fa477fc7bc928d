"""
Logging utilities with optional structured formatting.
"""
import logging
import logging.handlers
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..config.configuration import ViewCacheConfiguration

CONTEXT_FIELDS = ("template_name", "generation", "root", "event")


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def __init__(self, **kwargs):
        """Initialize with optional fields."""
        self.additional_fields = kwargs
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info)
            }

        log_data.update(self.additional_fields)

        return json.dumps(log_data, default=str)


class ViewLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds template context to log records."""

    def process(self, msg, kwargs):
        """Add context to log records."""
        kwargs.setdefault("extra", {}).update(self.extra)
        return msg, kwargs


def configure_logging(config: Union[ViewCacheConfiguration, Dict[str, Any]]) -> None:
    """
    Configure the root logger.

    Args:
        config: Configuration object or dictionary
    """
    if isinstance(config, ViewCacheConfiguration):
        config = config.model_dump()

    log_level = getattr(logging, str(config.get("log_level", "INFO")).upper(), logging.INFO)
    log_file: Optional[str] = config.get("log_file")
    use_json = config.get("structured_logging", False)
    max_bytes = config.get("log_max_bytes", 10 * 1024 * 1024)
    backup_count = config.get("log_backup_count", 5)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count
        ))

    if use_json:
        formatter = JsonFormatter(application="view_cache")
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
        )

    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    logging.debug(f"Logging configured with level: {logging.getLevelName(log_level)}")


def get_logger(name: str, **context) -> Union[logging.Logger, ViewLoggerAdapter]:
    """
    Get a logger with context.

    Args:
        name: Logger name
        **context: Additional context fields, e.g. template_name or generation

    Returns:
        Logger with context
    """
    logger = logging.getLogger(name)

    if context:
        return ViewLoggerAdapter(logger, context)

    return logger
