"""Configuration management for newswatch."""

from .loader import Config, load_config, load_sources, save_config, save_sources
from .models import (
    APIConfig,
    ConfigModel,
    CrawlConfig,
    PostgresConfig,
    SourceConfig,
    StorageConfig,
)

__all__ = [
    "Config",
    "ConfigModel",
    "PostgresConfig",
    "StorageConfig",
    "CrawlConfig",
    "APIConfig",
    "SourceConfig",
    "load_config",
    "load_sources",
    "save_config",
    "save_sources",
]
