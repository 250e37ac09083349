"""Configuration management for the kisquote service and CLI."""

import os
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

DEFAULT_BASE_URL = "https://openapi.koreainvestment.com:9443"
DEFAULT_CONFIG_PATH = Path.home() / ".kisquote" / "config.toml"


@dataclass
class KISConfig:
    """Credentials and transport settings for the KIS Open API."""

    app_key: str = ""
    app_secret: str = ""
    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = 10.0

    @property
    def has_credentials(self) -> bool:
        return bool(self.app_key and self.app_secret)


@dataclass
class BatchConfig:
    """Chunking and pacing used by batch retrieval."""

    chunk_size: int = 10
    etf_delay: float = 0.1
    overseas_delay: float = 0.15
    call_timeout: float = 10.0

    def __post_init__(self) -> None:
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if self.etf_delay < 0 or self.overseas_delay < 0:
            raise ValueError("inter-chunk delays must be non-negative")
        if self.call_timeout <= 0:
            raise ValueError("call_timeout must be positive")


@dataclass
class LoggingConfig:
    level: str = "INFO"
    file: str | None = None


@dataclass
class ProxyEntry:
    """One index-to-proxy row as written in ``[[proxies]]``."""

    index: str
    proxy: str
    exchange: str
    multiplier: str
    label: str


@dataclass
class AppConfig:
    """Top level kisquote configuration."""

    kis: KISConfig = field(default_factory=KISConfig)
    batch: BatchConfig = field(default_factory=BatchConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    proxies: list[ProxyEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "AppConfig":
        """Build a config from a nested dictionary (TOML document or env overrides)."""
        proxies = [
            ProxyEntry(**{key: str(value) for key, value in entry.items()})
            for entry in config_dict.get("proxies", [])
        ]
        return cls(
            kis=KISConfig(**config_dict.get("kis", {})),
            batch=BatchConfig(**config_dict.get("batch", {})),
            logging=LoggingConfig(**config_dict.get("logging", {})),
            proxies=proxies,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "kis": asdict(self.kis),
            "batch": asdict(self.batch),
            "logging": asdict(self.logging),
            "proxies": [asdict(entry) for entry in self.proxies],
        }


def _deep_update(target: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
    for key, value in updates.items():
        if isinstance(value, dict):
            target[key] = _deep_update(dict(target.get(key, {})), value)
        else:
            target[key] = value
    return target


class ConfigManager:
    """Load the TOML config file and layer environment overrides on top."""

    def __init__(self, config_path: Path | None = None, *, use_env: bool = True):
        """
        Args:
            config_path: config file, defaults to ``$KISQUOTE_CONFIG`` or
                ``~/.kisquote/config.toml``
            use_env: apply ``load_config_from_env`` overrides
        """
        env_path = os.getenv("KISQUOTE_CONFIG")
        self.config_path = config_path or (Path(env_path) if env_path else DEFAULT_CONFIG_PATH)
        self.use_env = use_env
        self.config = self._load_config()

    def _read_file(self) -> dict[str, Any]:
        if not self.config_path.exists():
            return {}
        try:
            with open(self.config_path, "rb") as f:
                return tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning(f"Failed to load config from {self.config_path}: {e}")
            return {}

    def _load_config(self) -> AppConfig:
        config_dict = self._read_file()
        if self.use_env:
            _deep_update(config_dict, load_config_from_env())
        return AppConfig.from_dict(config_dict)

    def get_config(self) -> AppConfig:
        return self.config

    def update_config(self, **updates: Any) -> None:
        """Apply nested overrides, e.g. ``update_config(batch={"chunk_size": 5})``."""
        config_dict = _deep_update(self.config.to_dict(), updates)
        self.config = AppConfig.from_dict(config_dict)


def get_default_config() -> AppConfig:
    return AppConfig()


def load_config_from_env() -> dict[str, Any]:
    """Collect overrides from ``KIS_*`` and ``KISQUOTE_*`` environment variables."""
    config: dict[str, Any] = {}

    kis_config: dict[str, Any] = {}
    app_key = os.getenv("KIS_APP_KEY")
    if app_key is not None:
        kis_config["app_key"] = app_key
    app_secret = os.getenv("KIS_APP_SECRET")
    if app_secret is not None:
        kis_config["app_secret"] = app_secret
    base_url = os.getenv("KIS_BASE_URL")
    if base_url:
        kis_config["base_url"] = base_url
    if kis_config:
        config["kis"] = kis_config

    batch_config: dict[str, Any] = {}
    chunk_size = os.getenv("KISQUOTE_CHUNK_SIZE")
    if chunk_size is not None:
        batch_config["chunk_size"] = int(chunk_size)
    etf_delay = os.getenv("KISQUOTE_ETF_DELAY")
    if etf_delay is not None:
        batch_config["etf_delay"] = float(etf_delay)
    overseas_delay = os.getenv("KISQUOTE_OVERSEAS_DELAY")
    if overseas_delay is not None:
        batch_config["overseas_delay"] = float(overseas_delay)
    call_timeout = os.getenv("KISQUOTE_CALL_TIMEOUT")
    if call_timeout is not None:
        batch_config["call_timeout"] = float(call_timeout)
    if batch_config:
        config["batch"] = batch_config

    log_level = os.getenv("KISQUOTE_LOG_LEVEL")
    if log_level is not None:
        config["logging"] = {"level": log_level}

    return config
