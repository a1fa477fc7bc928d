import asyncio
from types import SimpleNamespace

import pytest

from support import MemoryFileSource, wait_for
from view_cache.error.exceptions import CompileError
from view_cache.templates.coordinator import ReloadCoordinator
from view_cache.templates.engine import JinjaTemplateEngine
from view_cache.templates.store import TemplateStore


class BlockingStore:
    """Store stand-in whose rebuilds wait until released."""

    root = "views"
    snapshot = None

    def __init__(self):
        self.calls = 0
        self.release = asyncio.Event()

    async def rebuild(self):
        self.calls += 1
        await self.release.wait()
        return SimpleNamespace(generation=self.calls)


@pytest.mark.asyncio
async def test_requests_during_a_rebuild_coalesce_into_one(memory_source):
    store = BlockingStore()
    coordinator = ReloadCoordinator(store, memory_source)

    task = coordinator.request_reload()
    await wait_for(lambda: store.calls == 1)

    for _ in range(10):
        assert coordinator.request_reload() is task

    store.release.set()
    await coordinator.wait_idle()

    assert store.calls == 2
    assert coordinator.completed_reloads == 2


@pytest.mark.asyncio
async def test_single_request_runs_a_single_rebuild(memory_source):
    store = BlockingStore()
    store.release.set()
    coordinator = ReloadCoordinator(store, memory_source)

    await coordinator.request_reload()

    assert store.calls == 1


@pytest.mark.asyncio
async def test_failed_reload_keeps_serving_last_snapshot(memory_source):
    store = TemplateStore("views", memory_source, JinjaTemplateEngine())
    coordinator = ReloadCoordinator(store, memory_source)
    good = await store.rebuild()

    memory_source.files["home.html"] = "{% block content %}"
    await coordinator.request_reload()

    assert coordinator.failed_reloads == 1
    assert isinstance(coordinator.last_error, CompileError)
    assert store.snapshot is good

    memory_source.files["home.html"] = "fixed"
    await coordinator.request_reload()

    assert coordinator.completed_reloads == 1
    assert coordinator.last_error is None
    assert store.snapshot.generation == good.generation + 1


@pytest.mark.asyncio
async def test_change_notifications_trigger_reloads(memory_source):
    store = TemplateStore("views", memory_source, JinjaTemplateEngine())
    coordinator = ReloadCoordinator(store, memory_source)
    await store.rebuild()

    await coordinator.start()
    assert coordinator.watching

    memory_source.files["new.html"] = "new"
    memory_source.notify("new.html", "created")
    await wait_for(lambda: coordinator.completed_reloads == 1)

    assert "new.html" in store.snapshot

    await coordinator.stop()
    assert not coordinator.watching


@pytest.mark.asyncio
async def test_debounce_delays_the_rebuild(memory_source):
    store = BlockingStore()
    store.release.set()
    coordinator = ReloadCoordinator(store, memory_source, debounce=0.05)

    coordinator.request_reload()
    await asyncio.sleep(0)
    coordinator.request_reload()
    assert store.calls == 0

    await coordinator.wait_idle()
    assert store.calls == 1


@pytest.mark.asyncio
async def test_stop_cancels_pending_rebuild(memory_source):
    store = BlockingStore()
    coordinator = ReloadCoordinator(store, memory_source)

    task = coordinator.request_reload()
    await wait_for(lambda: store.calls == 1)
    await coordinator.stop()

    assert task.cancelled()
    assert coordinator.completed_reloads == 0


class FlakyWatchSource(MemoryFileSource):
    """Memory source whose first subscription fails."""

    def __init__(self, files):
        super().__init__(files)
        self.subscriptions = 0

    async def watch(self, root, pattern):
        self.subscriptions += 1
        if self.subscriptions == 1:
            raise RuntimeError("watch backend unavailable")
        async for event in super().watch(root, pattern):
            yield event


@pytest.mark.asyncio
async def test_failed_watcher_subscribes_again():
    source = FlakyWatchSource({"page.html": "v1"})
    store = TemplateStore("views", source, JinjaTemplateEngine())
    coordinator = ReloadCoordinator(store, source, retry_delay=0.01)
    await store.rebuild()

    await coordinator.start()
    await wait_for(lambda: source.subscriptions == 2)
    assert coordinator.watching

    source.files["page.html"] = "v2"
    source.notify("page.html")
    await wait_for(lambda: coordinator.completed_reloads == 1)

    assert await store.snapshot["page.html"].render_async() == "v2"
    await coordinator.stop()
