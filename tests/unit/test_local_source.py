import asyncio
import logging
import threading

import pytest

from support import wait_for, write_file
from view_cache.error.exceptions import RootNotFoundError
from view_cache.source.base import ChangeEvent
from view_cache.source.local import LocalFileSource


class RecordingFileSource(LocalFileSource):
    """Local source that records the thread of every finished scan."""

    def __init__(self, poll_interval):
        super().__init__(poll_interval=poll_interval)
        self.scan_threads = []

    def _scan(self, root, pattern, previous):
        states = super()._scan(root, pattern, previous)
        self.scan_threads.append(threading.get_ident())
        return states


def test_list_files_is_recursive_and_sorted(views_dir):
    paths = LocalFileSource().list_files(str(views_dir))

    assert paths == [
        str(views_dir / "home.html"),
        str(views_dir / "layout.html"),
        str(views_dir / "partials" / "greeting.html"),
    ]


def test_list_files_missing_root(tmp_path):
    with pytest.raises(RootNotFoundError):
        LocalFileSource().list_files(str(tmp_path / "nope"))


@pytest.mark.asyncio
async def test_read_all_returns_bytes(views_dir):
    data = await LocalFileSource().read_all(str(views_dir / "partials" / "greeting.html"))
    assert data == b"Hello {{ model.name }}"


async def next_event(watcher):
    return await asyncio.wait_for(watcher.__anext__(), timeout=5)


async def start_watching(source, watcher):
    """Run the initial scan and return the task waiting for the first event."""
    pending = asyncio.ensure_future(watcher.__anext__())
    await wait_for(lambda: len(source.scan_threads) >= 1)
    return pending


@pytest.mark.asyncio
async def test_watch_reports_created_modified_and_deleted(views_dir):
    source = RecordingFileSource(poll_interval=0.02)
    watcher = source.watch(str(views_dir), "**/*.html")
    try:
        pending = await start_watching(source, watcher)

        write_file(views_dir / "notes.txt", "ignored")
        write_file(views_dir / "about.html", "about")
        assert await asyncio.wait_for(pending, timeout=5) == ChangeEvent("created", "about.html")

        write_file(views_dir / "partials" / "greeting.html", "Hello again {{ model.name }}")
        assert await next_event(watcher) == ChangeEvent("modified", "partials/greeting.html")

        (views_dir / "layout.html").unlink()
        assert await next_event(watcher) == ChangeEvent("deleted", "layout.html")
    finally:
        await watcher.aclose()


@pytest.mark.asyncio
async def test_watch_ignores_touch_without_content_change(views_dir):
    source = RecordingFileSource(poll_interval=0.02)
    watcher = source.watch(str(views_dir), "**/*.html")
    try:
        pending = await start_watching(source, watcher)

        write_file(views_dir / "home.html", (views_dir / "home.html").read_text())
        write_file(views_dir / "contact.html", "contact")

        assert await asyncio.wait_for(pending, timeout=5) == ChangeEvent("created", "contact.html")
    finally:
        await watcher.aclose()


@pytest.mark.asyncio
async def test_watch_scans_outside_the_event_loop_thread(views_dir):
    source = RecordingFileSource(poll_interval=0.01)
    watcher = source.watch(str(views_dir), "**/*.html")
    pending = await start_watching(source, watcher)
    try:
        await wait_for(lambda: len(source.scan_threads) >= 3)
    finally:
        pending.cancel()
        await asyncio.gather(pending, return_exceptions=True)
        await watcher.aclose()

    assert threading.get_ident() not in source.scan_threads


@pytest.mark.asyncio
async def test_watch_warns_when_root_is_missing(tmp_path, caplog):
    source = RecordingFileSource(poll_interval=0.01)
    watcher = source.watch(str(tmp_path / "not-yet"), "**/*.html")
    with caplog.at_level(logging.WARNING, logger="view_cache.source.local"):
        pending = await start_watching(source, watcher)
    try:
        assert "Template root does not exist yet" in caplog.text
    finally:
        pending.cancel()
        await asyncio.gather(pending, return_exceptions=True)
        await watcher.aclose()
