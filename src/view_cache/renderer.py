"""
View renderer: the public entry point for rendering cached templates.
"""
import logging
from typing import Any, Dict, List, Optional, Union

from .config.configuration import ViewCacheConfiguration, ensure_config
from .error.exceptions import RenderError, TemplateNotFoundError
from .source.base import FileSource
from .source.local import LocalFileSource
from .templates.coordinator import ReloadCoordinator
from .templates.engine import JinjaTemplateEngine, TemplateEngine
from .templates.minifier import HtmlMinifier, Minifier
from .templates.store import StoreState, TemplateSnapshot, TemplateStore

logger = logging.getLogger(__name__)


class ViewRenderer:
    """
    Renders templates by name from an in-memory cache of the template root.

    The cache is populated on the first render and, when watching is
    enabled, rebuilt in the background whenever a template file changes.
    Watching starts in initialize(), or on the first render otherwise,
    and ends with close().

    Usage:
        async with ViewRenderer({"template_root": "views"}) as views:
            html = await views.render("home.html", {"name": "Ada"})
    """

    def __init__(
        self,
        config: Union[ViewCacheConfiguration, Dict[str, Any], None] = None,
        file_source: Optional[FileSource] = None,
        engine: Optional[TemplateEngine] = None,
        minifier: Optional[Minifier] = None,
    ):
        """
        Initialize the renderer.

        Args:
            config: Configuration object or dictionary
            file_source: Template file access, defaults to the local filesystem
            engine: Template engine, defaults to Jinja2
            minifier: Minifier used when minification is enabled
        """
        self.config = ensure_config(config)
        self.file_source = file_source or LocalFileSource(poll_interval=self.config.poll_interval)
        self.engine = engine or JinjaTemplateEngine(self.config)

        if self.config.minify:
            minifier = minifier or HtmlMinifier()
        else:
            minifier = None

        self.store = TemplateStore(
            self.config.template_root,
            self.file_source,
            self.engine,
            minifier=minifier,
            encoding=self.config.encoding,
        )
        self.coordinator = ReloadCoordinator(
            self.store,
            self.file_source,
            pattern=self.config.watch_pattern,
            debounce=self.config.reload_debounce,
        )
        self._watch_started = False

    async def initialize(self) -> None:
        """Start watching the template root when enabled."""
        if self.config.watch_for_changes:
            self._watch_started = True
            await self.coordinator.start()

    async def close(self) -> None:
        await self.coordinator.stop()

    async def __aenter__(self) -> 'ViewRenderer':
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def state(self) -> StoreState:
        return self.store.state

    async def render(self, name: str, model: Any = None) -> str:
        """
        Render a template with model.

        The whole render, including nested includes, uses the snapshot that
        was current when it started.

        Args:
            name: Template name relative to the template root, e.g. ``a/b.html``
            model: Value exposed to the template as ``model``

        Returns:
            Rendered text

        Raises:
            RootNotFoundError, CompileError: If the first load fails
            TemplateNotFoundError: If name is not in the cache
            RenderError: If the template fails while rendering
        """
        if self.config.watch_for_changes and not self._watch_started:
            # Used without initialize() or async with
            await self.initialize()

        snapshot = await self.store.current()

        template = snapshot.get(name)
        if template is None:
            raise TemplateNotFoundError(name)

        try:
            return await self.engine.render_async(template, model)
        except Exception as e:
            logger.debug(f"Rendering {name} failed in generation {snapshot.generation}: {e}")
            raise RenderError(name, e) from e

    async def reload(self) -> TemplateSnapshot:
        """Rebuild the cache now and return the new snapshot."""
        return await self.store.rebuild()

    async def list_templates(self) -> List[str]:
        snapshot = await self.store.current()
        return sorted(snapshot)
