"""
Configuration module for CareerFlow.

This module provides application, AI provider and remote store configuration.
"""

from .settings import (
    ConfigManager,
    ConfigurationError,
    AppConfig,
    LLMConfig,
    RemoteStoreConfig,
    get_config_manager,
    get_config,
    get_llm_config,
    get_remote_config,
    validate_config,
)

__all__ = [
    'ConfigManager',
    'ConfigurationError',
    'AppConfig',
    'LLMConfig',
    'RemoteStoreConfig',
    'get_config_manager',
    'get_config',
    'get_llm_config',
    'get_remote_config',
    'validate_config',
]
