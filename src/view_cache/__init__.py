"""
View Cache: compiled template cache and renderer for a directory of views.
"""
__version__ = "1.0.0"

from .config import ViewCacheConfiguration, ensure_config, load_config
from .error import (
    ViewCacheError,
    ConfigurationError,
    LoadError,
    RootNotFoundError,
    CompileError,
    TemplateNotFoundError,
    RenderError,
)
from .source import ChangeEvent, FileSource, LocalFileSource
from .templates import (
    HtmlMinifier,
    IncludeResolver,
    JinjaTemplateEngine,
    ReloadCoordinator,
    StoreState,
    TemplateSnapshot,
    TemplateStore,
    derive_template_name,
)
from .renderer import ViewRenderer

__all__ = [
    'ViewRenderer',
    'ViewCacheConfiguration',
    'ensure_config',
    'load_config',
    'ViewCacheError',
    'ConfigurationError',
    'LoadError',
    'RootNotFoundError',
    'CompileError',
    'TemplateNotFoundError',
    'RenderError',
    'ChangeEvent',
    'FileSource',
    'LocalFileSource',
    'HtmlMinifier',
    'IncludeResolver',
    'JinjaTemplateEngine',
    'ReloadCoordinator',
    'StoreState',
    'TemplateSnapshot',
    'TemplateStore',
    'derive_template_name',
]
