"""
Utility functions and classes.
"""
from .logging import (
    configure_logging,
    get_logger,
    JsonFormatter,
    ViewLoggerAdapter
)

__all__ = [
    'configure_logging',
    'get_logger',
    'JsonFormatter',
    'ViewLoggerAdapter'
]
