"""Application configuration loader.

Loads centralized configuration from configs/manuscript.yaml (or the path
in the MANUSCRIPT_CONFIG environment variable), falling back to built-in
defaults when the file is absent.

Usage:
    from manuscript_import.config.app_config import load_app_config

    config = load_app_config()
    detector = config.detector
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

CONFIG_FILE = Path("configs/manuscript.yaml")
CONFIG_ENV_VAR = "MANUSCRIPT_CONFIG"


@dataclass
class ProviderConfig:
    """Configuration for a single LLM provider.

    A provider with ``api_key_env`` set cannot be used until that variable
    is present in the environment.
    """

    base_url: str | None
    default_model: str
    api_key_env: str | None = None
    supports_json_object: bool = False

    def get_api_key(self) -> str | None:
        """Get API key from environment variable."""
        if self.api_key_env:
            return os.environ.get(self.api_key_env)
        return None

    @property
    def requires_api_key(self) -> bool:
        return bool(self.api_key_env)


@dataclass
class LLMSettings:
    """The ``llm`` section: active provider and request settings."""

    provider: str = "openai"
    model: str | None = None
    base_url: str | None = None
    temperature: float = 0.3
    max_tokens: int = 2000
    timeout: float = 60.0
    max_retries: int = 0
    supports_json_object: bool | None = None


@dataclass
class DetectorConfig:
    """Tunables for document structure detection."""

    min_content_length: int = 500
    ai_enabled: bool = True
    ai_sample_chars: int = 15000
    preview_chars: int = 200
    sparse_max_chapters: int = 2
    sparse_word_threshold: int = 10000
    single_chapter_word_threshold: int = 5000
    title_page_max_words: int = 100
    title_scan_lines: int = 10


@dataclass
class AppConfig:
    """Application-wide configuration."""

    llm: LLMSettings = field(default_factory=LLMSettings)
    providers: dict[str, ProviderConfig] = field(default_factory=dict)
    detector: DetectorConfig = field(default_factory=DetectorConfig)


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "llm": {},
        "providers": {
            "openai": {
                "base_url": "https://api.openai.com/v1",
                "default_model": "gpt-4o-mini",
                "api_key_env": "OPENAI_API_KEY",
                "supports_json_object": True,
            },
            "lmstudio": {
                "base_url": "http://localhost:1234/v1",
                "default_model": "llama-3.2-3b-instruct",
                "api_key_env": None,
            },
            "anthropic": {
                "base_url": "https://api.anthropic.com/v1",
                "default_model": "claude-sonnet-4-20250514",
                "api_key_env": "ANTHROPIC_API_KEY",
            },
        },
        "detector": {},
    }


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    defaults = _get_defaults()

    llm_data = data.get("llm") or {}
    llm_base = LLMSettings()
    llm = LLMSettings(
        provider=llm_data.get("provider", llm_base.provider),
        model=llm_data.get("model"),
        base_url=llm_data.get("base_url"),
        temperature=llm_data.get("temperature", llm_base.temperature),
        max_tokens=llm_data.get("max_tokens", llm_base.max_tokens),
        timeout=llm_data.get("timeout", llm_base.timeout),
        max_retries=llm_data.get("max_retries", llm_base.max_retries),
        supports_json_object=llm_data.get("supports_json_object"),
    )

    providers = {}
    for name, pconfig in (data.get("providers") or defaults["providers"]).items():
        providers[name] = ProviderConfig(
            base_url=pconfig.get("base_url"),
            default_model=pconfig.get("default_model", "default"),
            api_key_env=pconfig.get("api_key_env"),
            supports_json_object=bool(pconfig.get("supports_json_object", False)),
        )

    detector_data = data.get("detector") or {}
    base = DetectorConfig()
    detector = DetectorConfig(
        min_content_length=detector_data.get("min_content_length", base.min_content_length),
        ai_enabled=detector_data.get("ai_enabled", base.ai_enabled),
        ai_sample_chars=detector_data.get("ai_sample_chars", base.ai_sample_chars),
        preview_chars=detector_data.get("preview_chars", base.preview_chars),
        sparse_max_chapters=detector_data.get("sparse_max_chapters", base.sparse_max_chapters),
        sparse_word_threshold=detector_data.get(
            "sparse_word_threshold", base.sparse_word_threshold
        ),
        single_chapter_word_threshold=detector_data.get(
            "single_chapter_word_threshold", base.single_chapter_word_threshold
        ),
        title_page_max_words=detector_data.get("title_page_max_words", base.title_page_max_words),
        title_scan_lines=detector_data.get("title_scan_lines", base.title_scan_lines),
    )

    return AppConfig(llm=llm, providers=providers, detector=detector)


def _config_path() -> Path:
    return Path(os.environ.get(CONFIG_ENV_VAR, CONFIG_FILE))


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    path = _config_path()
    data: dict[str, Any]

    if path.exists():
        logger.debug("loading_app_config", source=str(path))
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    else:
        logger.info("using_default_config")
        data = _get_defaults()

    _cached_config = _parse_config(data)
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
