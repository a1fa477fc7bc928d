"""Fakes and helpers shared by the unit tests."""
import asyncio
import os
import time
from pathlib import Path
from typing import Callable, Dict, Union

from view_cache.error.exceptions import RootNotFoundError
from view_cache.source.base import ChangeEvent, FileSource
from view_cache.templates.utils import derive_template_name

LAYOUT = "<html>{% block content %}{% endblock %}</html>"
HOME = "{% extends 'layout.html' %}{% block content %}Hi {{ model.name }}{% endblock %}"


class MemoryFileSource(FileSource):
    """In-memory template tree whose change notifications are sent by the test."""

    def __init__(self, files: Dict[str, Union[str, bytes]] = None, root: str = "views"):
        self.root = root
        self.files = dict(files or {})
        self.exists = True
        self.reads = 0
        self.events: asyncio.Queue = asyncio.Queue()

    def list_files(self, root):
        if not self.exists:
            raise RootNotFoundError(root)
        return [f"{root}/{name}" for name in sorted(self.files)]

    async def read_all(self, path):
        self.reads += 1
        value = self.files[derive_template_name(self.root, path)]
        return value.encode("utf-8") if isinstance(value, str) else value

    async def watch(self, root, pattern):
        while True:
            yield await self.events.get()

    def notify(self, name: str, kind: str = "modified") -> None:
        self.events.put_nowait(ChangeEvent(kind, name))


async def wait_for(predicate: Callable[[], bool], timeout: float = 5.0) -> None:
    """Poll predicate until it holds or fail after timeout."""
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.01)


def write_file(path: Path, content: str) -> None:
    """Write content and move the mtime forward so pollers always notice."""
    path.parent.mkdir(parents=True, exist_ok=True)
    existed = path.exists()
    previous = path.stat().st_mtime_ns if existed else 0
    path.write_text(content, encoding="utf-8")
    if existed:
        bumped = max(path.stat().st_mtime_ns, previous + 1_000_000_000)
        os.utime(path, ns=(bumped, bumped))


