"""
File source backed by the local filesystem, with polling change detection.
"""
import asyncio
import hashlib
import logging
import os
from dataclasses import dataclass
from typing import AsyncIterator, Dict, List, Optional

import aiofiles

from ..error.exceptions import RootNotFoundError
from ..templates.utils import derive_template_name
from .base import ChangeEvent, FileSource, matches_pattern

logger = logging.getLogger(__name__)


@dataclass
class FileState:
    """Last observed state of a watched file."""
    path: str
    mtime_ns: int
    size: int
    content_hash: str


def _compute_hash(path: str) -> str:
    """Compute a hash of the file content."""
    with open(path, 'rb') as f:
        return hashlib.md5(f.read()).hexdigest()


class LocalFileSource(FileSource):
    """Local directory tree; changes are detected by polling."""

    def __init__(self, poll_interval: float = 1.0):
        """
        Initialize the file source.

        Args:
            poll_interval: Seconds between two scans while watching
        """
        self.poll_interval = poll_interval

    def list_files(self, root: str) -> List[str]:
        root = os.fspath(root)
        if not os.path.isdir(root):
            raise RootNotFoundError(root)

        paths = []
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames.sort()
            for filename in sorted(filenames):
                paths.append(os.path.join(dirpath, filename))
        return paths

    async def read_all(self, path: str) -> bytes:
        async with aiofiles.open(path, mode='rb') as f:
            return await f.read()

    async def watch(self, root: str, pattern: str) -> AsyncIterator[ChangeEvent]:
        root = os.fspath(root)
        if not os.path.isdir(root):
            logger.warning(f"Template root does not exist yet: {root}")

        loop = asyncio.get_running_loop()
        # Scans walk the tree and hash changed files in the default executor
        previous = await loop.run_in_executor(None, self._scan, root, pattern, {})
        logger.debug(f"Watching {len(previous)} files under {root} matching {pattern}")

        while True:
            await asyncio.sleep(self.poll_interval)
            current = await loop.run_in_executor(None, self._scan, root, pattern, previous)
            for event in self._diff(previous, current):
                yield event
            previous = current

    def _scan(self, root: str, pattern: str, previous: Dict[str, FileState]) -> Dict[str, FileState]:
        """Snapshot the state of matching files, reusing hashes of unchanged ones."""
        states: Dict[str, FileState] = {}
        if not os.path.isdir(root):
            return states

        for dirpath, _, filenames in os.walk(root):
            for filename in filenames:
                path = os.path.join(dirpath, filename)
                name = derive_template_name(root, path)
                if not matches_pattern(name, pattern):
                    continue
                state = self._stat(path, previous.get(name))
                if state is not None:
                    states[name] = state
        return states

    def _stat(self, path: str, known: Optional[FileState]) -> Optional[FileState]:
        try:
            stat = os.stat(path)
            if known and known.mtime_ns == stat.st_mtime_ns and known.size == stat.st_size:
                return known
            return FileState(path, stat.st_mtime_ns, stat.st_size, _compute_hash(path))
        except OSError:
            # Removed between listing and stat
            return None

    @staticmethod
    def _diff(previous: Dict[str, FileState], current: Dict[str, FileState]) -> List[ChangeEvent]:
        events = []
        for name, state in current.items():
            known = previous.get(name)
            if known is None:
                events.append(ChangeEvent("created", name))
            elif known.content_hash != state.content_hash:
                events.append(ChangeEvent("modified", name))
        for name in previous:
            if name not in current:
                events.append(ChangeEvent("deleted", name))
        return events
