"""
File sources that feed the template store.
"""
from .base import ChangeEvent, FileSource, matches_pattern
from .local import LocalFileSource

__all__ = [
    'ChangeEvent',
    'FileSource',
    'LocalFileSource',
    'matches_pattern',
]
