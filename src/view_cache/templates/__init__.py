"""
Template compilation, caching and reloading.
"""
from .utils import derive_template_name
from .minifier import HtmlMinifier, Minifier
from .resolver import IncludeResolver
from .engine import JinjaTemplateEngine, TemplateEngine
from .store import StoreState, TemplateSnapshot, TemplateStore
from .coordinator import ReloadCoordinator

__all__ = [
    'derive_template_name',
    'HtmlMinifier',
    'Minifier',
    'IncludeResolver',
    'JinjaTemplateEngine',
    'TemplateEngine',
    'StoreState',
    'TemplateSnapshot',
    'TemplateStore',
    'ReloadCoordinator',
]
