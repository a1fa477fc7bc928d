"""
Exceptions raised by the view cache.
"""
from .exceptions import (
    ErrorContext,
    ViewCacheError,
    ConfigurationError,
    LoadError,
    RootNotFoundError,
    CompileError,
    TemplateNotFoundError,
    RenderError,
)

__all__ = [
    'ErrorContext',
    'ViewCacheError',
    'ConfigurationError',
    'LoadError',
    'RootNotFoundError',
    'CompileError',
    'TemplateNotFoundError',
    'RenderError',
]
