"""
Centralized exception definitions for the view cache.
"""
from typing import Optional


class ErrorContext:
    """Context information for errors."""

    def __init__(self, component: str = None, operation: str = None, **kwargs):
        self.component = component
        self.operation = operation
        self.details = kwargs


class ViewCacheError(Exception):
    """Base class for all view cache errors."""

    def __init__(self, message: str, context: ErrorContext = None, details: dict = None):
        super().__init__(message)
        self.context = context or ErrorContext()
        self.details = details or {}

    def __str__(self):
        base_str = super().__str__()
        if self.context.component and self.context.operation:
            return f"{base_str} [in {self.context.component}.{self.context.operation}]"
        return base_str


class ConfigurationError(ViewCacheError):
    """Error in configuration."""
    pass


class LoadError(ViewCacheError):
    """A rebuild of the template store failed."""
    pass


class RootNotFoundError(LoadError):
    """The configured template root does not exist."""

    def __init__(self, root: str):
        super().__init__(
            f"Template root not found: {root}",
            ErrorContext(component="store", operation="rebuild"),
            {"root": root},
        )
        self.root = root


class CompileError(LoadError):
    """A single template could not be read or compiled."""

    def __init__(self, name: str, cause: Optional[BaseException] = None):
        super().__init__(
            f"Failed to compile template '{name}': {cause}",
            ErrorContext(component="store", operation="rebuild"),
            {"name": name},
        )
        self.name = name
        self.cause = cause


class TemplateNotFoundError(ViewCacheError, LookupError):
    """The requested template is absent from the current snapshot."""

    def __init__(self, name: str):
        super().__init__(
            f"Template not found: {name}",
            ErrorContext(component="renderer", operation="render"),
            {"name": name},
        )
        self.name = name


class RenderError(ViewCacheError):
    """The template engine failed while evaluating a template."""

    def __init__(self, name: str, cause: Optional[BaseException] = None):
        super().__init__(
            f"Failed to render template '{name}': {cause}",
            ErrorContext(component="renderer", operation="render"),
            {"name": name},
        )
        self.name = name
        self.cause = cause
