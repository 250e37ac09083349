"""Configuration management module."""

from kisquote.core.config.settings import (
    AppConfig,
    BatchConfig,
    ConfigManager,
    KISConfig,
    LoggingConfig,
    ProxyEntry,
    get_default_config,
    load_config_from_env,
)

__all__ = [
    "AppConfig",
    "BatchConfig",
    "ConfigManager",
    "KISConfig",
    "LoggingConfig",
    "ProxyEntry",
    "get_default_config",
    "load_config_from_env",
]
