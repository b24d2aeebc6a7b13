"""Configuration loader."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from .models import ConfigModel, SourceConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "newswatch"


class Config:
    """Configuration manager."""

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """Initialize config manager."""
        if config_path is None:
            config_path = DEFAULT_CONFIG_DIR / "config.yaml"
        self.config_path = config_path
        self._config: Optional[ConfigModel] = None

    @classmethod
    def from_model(cls, model: ConfigModel, config_path: Optional[Path] = None) -> "Config":
        """Wrap an already-built model (used by tests and init)."""
        config = cls(config_path)
        config._config = model
        return config

    @property
    def config(self) -> ConfigModel:
        """Get loaded config."""
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config

    @property
    def sources_path(self) -> Path:
        """Path of sources.yaml next to the config file."""
        return self.config_path.parent / "sources.yaml"

    def get_db_config(self) -> Dict[str, Any]:
        """Get database configuration dict."""
        db_config = self.config.postgres.model_dump()

        if db_config.get("dsn_env"):
            dsn = os.environ.get(db_config["dsn_env"])
            if dsn:
                db_config["dsn"] = dsn

        if db_config.get("password_env"):
            password = os.environ.get(db_config["password_env"])
            if password:
                db_config["password"] = password

        return db_config

    def get_storage_config(self) -> Dict[str, Any]:
        """Get content store configuration dict."""
        storage_config = self.config.storage.model_dump()

        if storage_config.get("bucket_env"):
            bucket = os.environ.get(storage_config["bucket_env"])
            if bucket:
                storage_config["bucket"] = bucket

        if not storage_config.get("bucket"):
            raise ValueError(
                "No content store bucket configured (set storage.bucket or storage.bucket_env)"
            )
        return storage_config


def load_config(config_path: Path) -> ConfigModel:
    """Load configuration from YAML file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path) as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            config_data = {}

        return ConfigModel(**config_data)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}")
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}")


def load_sources(sources_path: Path) -> List[SourceConfig]:
    """Load sources from YAML file, in file order."""
    if not sources_path.exists():
        raise FileNotFoundError(f"Sources file not found: {sources_path}")

    try:
        with open(sources_path) as f:
            sources_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in sources file: {e}")

    if sources_data is None or "sources" not in sources_data:
        return []

    sources = []
    for source_data in sources_data["sources"] or []:
        try:
            sources.append(SourceConfig(**source_data))
        except ValidationError as e:
            logger.warning("Skipping invalid source %s: %s", source_data.get("name", "unknown"), e)

    return sources


def save_config(config: ConfigModel, config_path: Path) -> None:
    """Save configuration to YAML file."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        yaml.dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)


def save_sources(sources: List[SourceConfig], sources_path: Path) -> None:
    """Save sources to YAML file."""
    sources_path.parent.mkdir(parents=True, exist_ok=True)

    sources_data = {"sources": [s.model_dump() for s in sources]}

    with open(sources_path, "w") as f:
        yaml.dump(sources_data, f, default_flow_style=False, sort_keys=False)
