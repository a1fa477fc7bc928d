"""
Configuration for the view cache with validation.
"""
import os
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..error.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ViewCacheConfiguration(BaseModel):
    """Configuration for template loading, reloading and rendering."""

    model_config = ConfigDict(validate_assignment=True, arbitrary_types_allowed=True)

    # Template source settings
    template_root: Path = Field(default=Path("views"), description="Directory scanned for templates")
    encoding: str = Field(default="utf-8", description="Encoding of template files")
    minify: bool = Field(default=False, description="Minify templates before compiling")

    # Reload settings
    watch_for_changes: bool = Field(default=False, description="Rebuild the cache when files change")
    watch_pattern: str = Field(default="**/*.html", description="Glob of files that trigger a rebuild")
    poll_interval: float = Field(default=1.0, description="Seconds between change polls", gt=0)
    reload_debounce: float = Field(default=0.0, description="Delay before a coalesced rebuild", ge=0)

    # Engine settings
    autoescape: bool = Field(default=True, description="Autoescape html and xml templates")
    strict_undefined: bool = Field(default=False, description="Fail on undefined template variables")
    trim_blocks: bool = False
    lstrip_blocks: bool = False

    # Logging settings
    log_level: str = "INFO"
    log_file: Optional[str] = None
    structured_logging: bool = False

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        value_upper = value.upper()
        if value_upper not in valid_levels:
            raise ValueError(f"Invalid log level '{value}'. Must be one of: {valid_levels}")
        return value_upper

    @field_validator("template_root", mode="before")
    @classmethod
    def convert_path(cls, value: Any) -> Path:
        """Convert path strings to Path objects."""
        if isinstance(value, (str, Path)):
            return Path(value).expanduser()
        raise ValueError(f"Invalid path value: {value}")

    @field_validator("watch_pattern")
    @classmethod
    def validate_watch_pattern(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("watch_pattern must not be empty")
        return value.replace("\\", "/")


def ensure_config(
    config: Union[ViewCacheConfiguration, Dict[str, Any], None] = None
) -> ViewCacheConfiguration:
    """Ensure a valid view cache configuration."""
    if isinstance(config, ViewCacheConfiguration):
        return config

    try:
        return ViewCacheConfiguration(**(config or {}))
    except Exception as e:
        raise ConfigurationError(f"Invalid configuration: {str(e)}")


def load_config_file(file_path: str) -> Dict[str, Any]:
    """
    Load configuration from a file (YAML or JSON).

    Args:
        file_path: Path to the configuration file

    Returns:
        Dictionary with configuration

    Raises:
        ConfigurationError: If the file is not found or cannot be parsed
    """
    path = Path(file_path).expanduser()

    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {file_path}")

    try:
        content = path.read_text(encoding='utf-8')

        if path.suffix in (".yaml", ".yml"):
            loaded_config = yaml.safe_load(content) or {}
        elif path.suffix == ".json":
            loaded_config = json.loads(content) or {}
        else:
            raise ConfigurationError(f"Unsupported config file format: {file_path}")

        logger.debug(f"Loaded configuration from {file_path}")
        return loaded_config

    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML format in {file_path}: {str(e)}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON format in {file_path}: {str(e)}")
    except OSError as e:
        raise ConfigurationError(f"Error reading config file {file_path}: {str(e)}")


def load_configuration_from_env(prefix: str = "VIEW_CACHE_") -> Dict[str, Any]:
    """Collect configuration values from environment variables such as VIEW_CACHE_MINIFY."""
    fields = ViewCacheConfiguration.model_fields
    config = {}
    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue
        field_name = key[len(prefix):].lower()
        if field_name in fields:
            config[field_name] = value
    return config


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge two configuration dictionaries."""
    result = base.copy()
    for key, value in override.items():
        if isinstance(value, dict) and key in result and isinstance(result[key], dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value
    return result
