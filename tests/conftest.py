"""Pytest configuration and fixtures."""
import pytest

from support import HOME, LAYOUT, MemoryFileSource, write_file


@pytest.fixture
def memory_source():
    """Template tree with a layout and a page extending it."""
    return MemoryFileSource({"layout.html": LAYOUT, "home.html": HOME})


@pytest.fixture
def views_dir(tmp_path):
    """Template root on disk with a layout, a page and a nested partial."""
    root = tmp_path / "views"
    write_file(root / "layout.html", LAYOUT)
    write_file(root / "home.html", HOME)
    write_file(root / "partials" / "greeting.html", "Hello {{ model.name }}")
    return root
