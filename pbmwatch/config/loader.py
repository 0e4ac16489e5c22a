"""Configuration loader."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from .models import ConfigModel, SourceConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PBMWATCH_CONFIG"


def default_config_path() -> Path:
    """Config path from the environment, or the per-user default."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return Path.home() / ".config" / "pbmwatch" / "config.yaml"


class Config:
    """Configuration manager."""

    def __init__(
        self,
        config_path: Optional[Path] = None,
        config: Optional[ConfigModel] = None,
    ) -> None:
        """Initialize config manager."""
        if config_path is None:
            config_path = default_config_path()
        self.config_path = config_path
        self._config: Optional[ConfigModel] = config

    @property
    def config(self) -> ConfigModel:
        """Get loaded config, falling back to defaults when no file exists."""
        if self._config is None:
            if self.config_path.exists():
                self._config = load_config(self.config_path)
            else:
                logger.info("No config file at %s, using defaults", self.config_path)
                self._config = ConfigModel()
        return self._config

    @property
    def data_dir(self) -> Path:
        """Get the directory holding persisted state."""
        return Path(self.config.storage.data_dir).expanduser()

    def get_source_config(self, name: str) -> Optional[SourceConfig]:
        """Get configuration for a named source."""
        for source in self.config.sources:
            if source.name == name:
                return source
        return None

    def get_api_key(self, source: SourceConfig) -> Optional[str]:
        """Resolve a source's API key from its environment variable."""
        if source.api_key_env:
            return os.environ.get(source.api_key_env) or None
        return None

    def get_email_config(self) -> Dict[str, Any]:
        """Get email configuration dict."""
        email_config = self.config.email.model_dump()

        # Handle API key from environment if specified
        if email_config.get("api_key_env"):
            api_key = os.environ.get(email_config["api_key_env"])
            if api_key:
                email_config["api_key"] = api_key

        return email_config


def load_config(config_path: Path) -> ConfigModel:
    """Load configuration from YAML file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            config_data = {}

        return ConfigModel(**config_data)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}")
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}")


def save_config(config: ConfigModel, config_path: Path) -> None:
    """Save configuration to YAML file."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(
            config.model_dump(),
            f,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
