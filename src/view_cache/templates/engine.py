"""
Template engine binding for Jinja2.
"""
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

import yaml
from jinja2 import Environment, StrictUndefined, Template, TemplateSyntaxError, Undefined, select_autoescape

from ..config.configuration import ViewCacheConfiguration
from ..error.exceptions import CompileError
from .resolver import IncludeResolver

logger = logging.getLogger(__name__)


class TemplateEngine(ABC):
    """Compiles template text and renders compiled templates."""

    @abstractmethod
    def create_environment(self, resolver: IncludeResolver) -> Any:
        """Create the compilation environment of one snapshot, resolving includes via resolver."""
        pass

    @abstractmethod
    def compile(self, environment: Any, name: str, source: str) -> Any:
        """
        Compile template text.

        Raises:
            CompileError: If the text is not a valid template
        """
        pass

    @abstractmethod
    async def render_async(self, template: Any, model: Any = None) -> str:
        """Render a compiled template with model."""
        pass


class JinjaTemplateEngine(TemplateEngine):
    """Jinja2 engine; the model is exposed to templates as ``model``."""

    def __init__(self, config: Optional[ViewCacheConfiguration] = None):
        self.config = config or ViewCacheConfiguration()
        self.filters: Dict[str, Callable] = {
            'to_json': lambda obj: json.dumps(obj, indent=2, default=str),
            'to_yaml': lambda obj: yaml.safe_dump(obj, default_flow_style=False),
        }

    def create_environment(self, resolver: IncludeResolver) -> Environment:
        if self.config.autoescape:
            autoescape = select_autoescape(['html', 'htm', 'xml'], default_for_string=False)
        else:
            autoescape = False

        env = Environment(
            loader=resolver,
            extensions=['jinja2.ext.do', 'jinja2.ext.loopcontrols'],
            autoescape=autoescape,
            undefined=StrictUndefined if self.config.strict_undefined else Undefined,
            trim_blocks=self.config.trim_blocks,
            lstrip_blocks=self.config.lstrip_blocks,
            enable_async=True,
            # The snapshot is the cache
            cache_size=0,
            auto_reload=False,
        )
        env.filters.update(self.filters)
        return env

    def compile(self, environment: Environment, name: str, source: str) -> Template:
        try:
            code = environment.compile(source, name=name, filename=name)
        except TemplateSyntaxError as e:
            raise CompileError(name, e) from e
        logger.debug(f"Compiled template {name}")
        return environment.template_class.from_code(
            environment, code, environment.make_globals(None)
        )

    async def render_async(self, template: Template, model: Any = None) -> str:
        return await template.render_async(model=model)
