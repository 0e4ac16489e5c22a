"""Configuration management for the Bloodless Medicine Monitor."""

from .loader import Config, default_config_path, load_config, save_config
from .models import (
    ConfigModel,
    EmailConfig,
    FilterPolicy,
    RankingConfig,
    SearchConfig,
    SourceConfig,
    StorageConfig,
)

__all__ = [
    "Config",
    "ConfigModel",
    "EmailConfig",
    "FilterPolicy",
    "RankingConfig",
    "SearchConfig",
    "SourceConfig",
    "StorageConfig",
    "default_config_path",
    "load_config",
    "save_config",
]
