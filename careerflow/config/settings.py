"""
Configuration management for CareerFlow.

This module loads environment variables (optionally from a .env file), the
remote store settings entered through the settings screen, and exposes them
as dataclasses. Remote store settings are an explicit object: changing them
returns a new ``RemoteStoreConfig`` which callers use to rebuild their
collections.
"""

import os
from typing import Dict, Any, Optional, List
from pathlib import Path
from dotenv import load_dotenv
import logging
from dataclasses import dataclass, asdict, field

from ..storage.local_store import LocalStore

logger = logging.getLogger(__name__)

# Local storage keys written by the settings screen
REMOTE_URL_KEY = "careerflow_sb_url"
REMOTE_KEY_KEY = "careerflow_sb_key"


class ConfigurationError(Exception):
    """Raised when a required setting is missing."""


@dataclass
class LLMConfig:
    """Configuration for the generative-language provider."""
    api_key: Optional[str] = None
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    fast_model: str = "gemini-2.5-flash"
    pro_model: str = "gemini-3-pro-preview"
    chat_model: str = "gemini-3-pro-preview"
    timeout_seconds: float = 120.0


@dataclass
class RemoteStoreConfig:
    """Connection settings for the remote store."""
    url: Optional[str] = None
    key: Optional[str] = None
    source: Optional[str] = None  # "env", "local" or None
    timeout_seconds: float = 15.0

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.key)

    @property
    def is_from_env(self) -> bool:
        return self.source == "env"


@dataclass
class AppConfig:
    """Main application configuration."""
    log_level: str = "INFO"
    log_to_file: bool = True
    data_dir: str = "data"
    storage_dir: str = "data/storage"

    llm: LLMConfig = field(default_factory=LLMConfig)
    remote: RemoteStoreConfig = field(default_factory=RemoteStoreConfig)


class ConfigManager:
    """Manages application configuration from environment variables and local settings."""

    def __init__(self, env_file: Optional[str] = None, local_store: Optional[LocalStore] = None):
        """Initialize configuration manager."""
        self.env_file = env_file or ".env"
        self.config = AppConfig()
        self.local_store = local_store
        self.load_config()

    def load_config(self) -> None:
        """Load configuration from environment variables."""
        if Path(self.env_file).exists():
            load_dotenv(self.env_file)
            logger.info(f"Loaded environment from {self.env_file}")

        # App Configuration
        self.config.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.config.log_to_file = os.getenv("LOG_TO_FILE", "true").lower() == "true"
        self.config.data_dir = os.getenv("DATA_DIR", "data")
        self.config.storage_dir = os.getenv("STORAGE_DIR", f"{self.config.data_dir}/storage")

        if self.local_store is None:
            self.local_store = LocalStore(self.config.storage_dir)

        # LLM Configuration
        llm = self.config.llm
        llm.api_key = os.getenv("API_KEY") or os.getenv("GEMINI_API_KEY")
        llm.base_url = os.getenv("GEMINI_BASE_URL", llm.base_url)
        llm.fast_model = os.getenv("FAST_MODEL", llm.fast_model)
        llm.pro_model = os.getenv("PRO_MODEL", llm.pro_model)
        llm.chat_model = os.getenv("CHAT_MODEL", llm.chat_model)
        llm.timeout_seconds = float(os.getenv("LLM_TIMEOUT_SECONDS", str(llm.timeout_seconds)))

        # Remote store configuration
        self.config.remote = self._load_remote_config()

        logger.info("Configuration loaded successfully")

    def _load_remote_config(self) -> RemoteStoreConfig:
        timeout = float(os.getenv("REMOTE_TIMEOUT_SECONDS", "15"))

        # Environment variables take precedence
        env_url = os.getenv("SUPABASE_URL")
        env_key = os.getenv("SUPABASE_KEY")
        if env_url and env_key:
            return RemoteStoreConfig(url=env_url, key=env_key, source="env", timeout_seconds=timeout)

        local_url = self.local_store.get_item(REMOTE_URL_KEY)
        local_key = self.local_store.get_item(REMOTE_KEY_KEY)
        if local_url and local_key:
            return RemoteStoreConfig(url=local_url, key=local_key, source="local", timeout_seconds=timeout)

        return RemoteStoreConfig(timeout_seconds=timeout)

    def get_llm_config(self) -> LLMConfig:
        """Get LLM configuration."""
        return self.config.llm

    def get_remote_config(self) -> RemoteStoreConfig:
        """Get remote store configuration."""
        return self.config.remote

    def get_app_config(self) -> AppConfig:
        """Get full application configuration."""
        return self.config

    def update_remote_config(self, url: str, key: str) -> RemoteStoreConfig:
        """Store remote settings entered by the user and return the new configuration."""
        self.local_store.set_item(REMOTE_URL_KEY, url.strip())
        self.local_store.set_item(REMOTE_KEY_KEY, key.strip())
        self.config.remote = self._load_remote_config()
        logger.info(f"Remote store configuration updated (source: {self.config.remote.source})")
        return self.config.remote

    def clear_remote_config(self) -> RemoteStoreConfig:
        """Forget user-entered remote settings and return the new configuration."""
        self.local_store.remove_item(REMOTE_URL_KEY)
        self.local_store.remove_item(REMOTE_KEY_KEY)
        self.config.remote = self._load_remote_config()
        logger.info("Remote store configuration cleared")
        return self.config.remote

    def require_api_key(self) -> str:
        """Return the AI provider key or raise ConfigurationError."""
        if not self.config.llm.api_key:
            raise ConfigurationError(
                "The API_KEY environment variable is missing. "
                "CareerFlow requires a valid Google Gemini API key to function."
            )
        return self.config.llm.api_key

    def validate_config(self) -> Dict[str, List[str]]:
        """Validate configuration and return any issues."""
        issues = {
            "errors": [],
            "warnings": []
        }

        if not self.config.llm.api_key:
            issues["errors"].append("No AI provider key configured. Set API_KEY in .env")

        if not self.config.remote.is_configured:
            issues["warnings"].append("Remote store not configured - data is saved locally only")

        return issues

    def mask_sensitive_config(self) -> Dict[str, Any]:
        """Get configuration with sensitive values masked for display."""
        config_dict = asdict(self.config)
        sensitive_keys = ["api_key", "key"]

        def mask_value(obj):
            if isinstance(obj, dict):
                for key, value in obj.items():
                    if key in sensitive_keys and value:
                        obj[key] = f"{value[:8]}..." if len(value) > 8 else "***"
                    elif isinstance(value, dict):
                        mask_value(value)
            return obj

        return mask_value(config_dict)


# Global configuration manager, created on first use
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def get_config() -> AppConfig:
    """Get the global configuration instance."""
    return get_config_manager().get_app_config()


def get_llm_config() -> LLMConfig:
    """Get LLM configuration."""
    return get_config_manager().get_llm_config()


def get_remote_config() -> RemoteStoreConfig:
    """Get remote store configuration."""
    return get_config_manager().get_remote_config()


def validate_config() -> Dict[str, List[str]]:
    """Validate current configuration."""
    return get_config_manager().validate_config()
