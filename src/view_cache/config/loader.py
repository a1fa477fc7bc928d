"""
Configuration loading from files and environment variables.
"""
import os
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .configuration import (
    ViewCacheConfiguration,
    ensure_config,
    load_config_file,
    load_configuration_from_env,
    merge_configs,
)

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ["view_cache.yaml", "view_cache.yml", "view_cache.json"]


def load_config(
    config_path: Optional[str] = None,
    env_prefix: str = "VIEW_CACHE_",
    defaults: Optional[Dict[str, Any]] = None,
    search_paths: Optional[List[str]] = None
) -> ViewCacheConfiguration:
    """
    Load configuration from a file and the environment.

    Args:
        config_path: Path to the configuration file (optional)
        env_prefix: Prefix for environment variables to consider
        defaults: Default configuration values
        search_paths: Directories searched when no config_path is given

    Returns:
        ViewCacheConfiguration object with loaded configuration
    """
    config = defaults or {}

    if search_paths is None:
        search_paths = [os.getcwd(), str(Path(os.getcwd()) / "config")]

    if config_path:
        logger.info(f"Loading configuration from specified file: {config_path}")
        config = merge_configs(config, load_config_file(config_path))
    else:
        for path in search_paths:
            for filename in CONFIG_FILENAMES:
                full_path = os.path.join(path, filename)
                if os.path.exists(full_path):
                    logger.info(f"Loading configuration from discovered file: {full_path}")
                    config = merge_configs(config, load_config_file(full_path))
                    break
            else:
                continue
            break
        else:
            logger.info("No configuration file found, using defaults and environment variables")

    # Environment takes precedence over files
    config = merge_configs(config, load_configuration_from_env(env_prefix))

    return ensure_config(config)
