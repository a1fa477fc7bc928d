"""
Template store holding the published snapshot of compiled templates.
"""
import asyncio
import logging
import os
import time
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional

from ..error.exceptions import CompileError
from ..source.base import FileSource
from .engine import TemplateEngine
from .minifier import Minifier
from .resolver import IncludeResolver
from .utils import derive_template_name

logger = logging.getLogger(__name__)


class StoreState(str, Enum):
    """Lifecycle state of a template store."""
    EMPTY = "empty"      # nothing published yet
    LOADING = "loading"  # rebuild in progress
    READY = "ready"      # snapshot published, no rebuild running


class TemplateSnapshot(Mapping):
    """
    One fully compiled generation of the template cache.

    Read-only mapping from template name to compiled template. The resolver
    serves includes for templates of this generation only.
    """

    def __init__(self, generation: int, templates: Dict[str, Any], resolver: IncludeResolver):
        self.generation = generation
        self.resolver = resolver
        self.created_at = time.time()
        self._templates = MappingProxyType(templates)

    def __getitem__(self, name: str) -> Any:
        return self._templates[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._templates)

    def __len__(self) -> int:
        return len(self._templates)

    def __repr__(self) -> str:
        return f"TemplateSnapshot(generation={self.generation}, templates={len(self)})"


class TemplateStore:
    """
    Builds snapshots from a template root and publishes them atomically.

    Readers take the published reference and keep it for as long as they
    need; a rebuild compiles into a fresh snapshot and swaps the reference
    only once every template compiled. Rebuilds are serialized.
    """

    def __init__(
        self,
        root: str,
        file_source: FileSource,
        engine: TemplateEngine,
        minifier: Optional[Minifier] = None,
        encoding: str = "utf-8",
    ):
        """
        Initialize the template store.

        Args:
            root: Template root directory
            file_source: Source used to list and read template files
            engine: Engine compiling the template sources
            minifier: Applied to every source before compiling when given
            encoding: Encoding of template files
        """
        self.root = os.fspath(root)
        self.file_source = file_source
        self.engine = engine
        self.minifier = minifier
        self.encoding = encoding
        self._snapshot: Optional[TemplateSnapshot] = None
        self._generation = 0
        self._loading = False
        self._lock = asyncio.Lock()

    @property
    def snapshot(self) -> Optional[TemplateSnapshot]:
        """The published snapshot, without triggering a build."""
        return self._snapshot

    @property
    def state(self) -> StoreState:
        if self._loading:
            return StoreState.LOADING
        if self._snapshot is None:
            return StoreState.EMPTY
        return StoreState.READY

    async def current(self) -> TemplateSnapshot:
        """
        Return the published snapshot, building the first one if needed.

        Never waits for a rebuild once a snapshot has been published.
        """
        snapshot = self._snapshot
        if snapshot is not None:
            return snapshot

        async with self._lock:
            if self._snapshot is None:
                return await self._rebuild_locked()
            return self._snapshot

    async def rebuild(self) -> TemplateSnapshot:
        """
        Build a new snapshot from the template root and publish it.

        Raises:
            RootNotFoundError: If the template root does not exist
            CompileError: If any template fails to read or compile; the
                previously published snapshot stays in place
        """
        async with self._lock:
            return await self._rebuild_locked()

    async def _rebuild_locked(self) -> TemplateSnapshot:
        self._loading = True
        try:
            snapshot = await self._build()
        finally:
            self._loading = False

        self._snapshot = snapshot
        logger.info(f"Published template generation {snapshot.generation} with {len(snapshot)} templates")
        return snapshot

    async def _build(self) -> TemplateSnapshot:
        logger.debug(f"Loading templates from {self.root}")
        paths = self.file_source.list_files(self.root)

        templates: Dict[str, Any] = {}
        resolver = IncludeResolver(templates)
        environment = self.engine.create_environment(resolver)

        for path in paths:
            name = derive_template_name(self.root, path)
            source = await self._read_source(name, path)
            templates[name] = self.engine.compile(environment, name, source)

        self._generation += 1
        return TemplateSnapshot(self._generation, templates, resolver)

    async def _read_source(self, name: str, path: str) -> str:
        try:
            raw = await self.file_source.read_all(path)
            text = raw.decode(self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise CompileError(name, e) from e

        if self.minifier is not None:
            text = self.minifier.minify(text)
        return text
