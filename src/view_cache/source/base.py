"""
Base file source interface.
"""
import fnmatch
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import AsyncIterator, List


@dataclass(frozen=True)
class ChangeEvent:
    """A change to one file under a watched root."""
    kind: str  # created, modified, deleted
    name: str


def matches_pattern(name: str, pattern: str) -> bool:
    """
    Match a forward-slash template name against a glob pattern.

    A leading ``**/`` also matches names directly under the root.
    """
    if fnmatch.fnmatchcase(name, pattern):
        return True
    if pattern.startswith("**/"):
        return fnmatch.fnmatchcase(name, pattern[3:])
    return False


class FileSource(ABC):
    """Abstract access to a tree of template files."""

    @abstractmethod
    def list_files(self, root: str) -> List[str]:
        """
        List every file below root, recursively.

        Args:
            root: Directory to scan

        Returns:
            Paths of the files found

        Raises:
            RootNotFoundError: If root is not a directory
        """
        pass

    @abstractmethod
    async def read_all(self, path: str) -> bytes:
        """Read the full contents of one listed file."""
        pass

    @abstractmethod
    def watch(self, root: str, pattern: str) -> AsyncIterator[ChangeEvent]:
        """
        Stream change notifications for files under root matching pattern.

        Creations, modifications and deletions are reported; a rename shows
        up as a deletion plus a creation.
        """
        pass
