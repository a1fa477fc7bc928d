"""
Reload coordination: turns file change notifications into serialized rebuilds.
"""
import asyncio
from typing import Optional

from ..error.exceptions import LoadError
from ..source.base import FileSource
from ..utils.logging import get_logger
from .store import TemplateStore


class ReloadCoordinator:
    """
    Decides when the template store rebuilds.

    Requests arriving while a rebuild runs are coalesced into a single
    trailing rebuild. A failed rebuild leaves the last good snapshot
    published and is retried on the next request. A watcher that fails or
    ends is subscribed again after retry_delay seconds.
    """

    def __init__(
        self,
        store: TemplateStore,
        file_source: FileSource,
        pattern: str = "**/*.html",
        debounce: float = 0.0,
        retry_delay: float = 1.0,
    ):
        self.store = store
        self.file_source = file_source
        self.pattern = pattern
        self.debounce = debounce
        self.retry_delay = retry_delay
        self.completed_reloads = 0
        self.failed_reloads = 0
        self.last_error: Optional[LoadError] = None
        self._pending = False
        self._drain_task: Optional[asyncio.Task] = None
        self._watch_task: Optional[asyncio.Task] = None
        self._log = get_logger(__name__, root=store.root)

    @property
    def watching(self) -> bool:
        return self._watch_task is not None and not self._watch_task.done()

    async def start(self) -> None:
        """Subscribe to change notifications of the store's root."""
        if self.watching:
            return
        self._watch_task = asyncio.create_task(self._watch())
        self._log.info(f"Watching {self.store.root} for changes to {self.pattern}")

    async def stop(self) -> None:
        """Stop watching and cancel any pending rebuild."""
        tasks = [task for task in (self._watch_task, self._drain_task) if task is not None]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        self._watch_task = None
        self._drain_task = None
        self._pending = False

    def request_reload(self) -> asyncio.Task:
        """
        Schedule a rebuild.

        Returns:
            The task draining reload requests; it completes once no request
            is outstanding.
        """
        self._pending = True
        if self._drain_task is None or self._drain_task.done():
            self._drain_task = asyncio.create_task(self._drain())
        return self._drain_task

    async def wait_idle(self) -> None:
        """Wait until every requested rebuild has run."""
        if self._drain_task is not None:
            await self._drain_task

    async def _drain(self) -> None:
        while self._pending:
            if self.debounce:
                await asyncio.sleep(self.debounce)
            self._pending = False

            try:
                snapshot = await self.store.rebuild()
            except LoadError as e:
                self.failed_reloads += 1
                self.last_error = e
                current = self.store.snapshot
                kept = current.generation if current is not None else None
                self._log.error(f"Template reload failed, still serving generation {kept}: {e}")
            else:
                self.completed_reloads += 1
                self.last_error = None
                self._log.info(f"Templates reloaded, generation {snapshot.generation}")

    async def _watch(self) -> None:
        while True:
            try:
                async for event in self.file_source.watch(self.store.root, self.pattern):
                    self._log.debug(f"Template {event.kind}: {event.name}")
                    self.request_reload()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self._log.exception(f"Template watcher failed, retrying in {self.retry_delay}s: {e}")
            await asyncio.sleep(self.retry_delay)
