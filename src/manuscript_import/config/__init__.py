"""Configuration package for manuscript import."""

from manuscript_import.config.app_config import (
    AppConfig,
    DetectorConfig,
    LLMSettings,
    ProviderConfig,
    clear_config_cache,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "DetectorConfig",
    "LLMSettings",
    "ProviderConfig",
    "clear_config_cache",
    "load_app_config",
]
