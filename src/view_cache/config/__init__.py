"""
Configuration components for the view cache.
"""
from .configuration import (
    ViewCacheConfiguration,
    ensure_config,
    load_config_file,
    load_configuration_from_env,
    merge_configs,
)
from .loader import load_config

__all__ = [
    'ViewCacheConfiguration',
    'ensure_config',
    'load_config',
    'load_config_file',
    'load_configuration_from_env',
    'merge_configs',
]
