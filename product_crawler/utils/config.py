"""
Configuration management for the product crawler.
"""

import yaml
import logging
from pathlib import Path
from typing import Dict, List, Any, Optional
from dataclasses import dataclass, field, fields


DEFAULT_DOMAINS = ['www.aliexpress.com']


@dataclass
class CrawlerConfig:
    """Configuration for crawler behavior."""
    domains: List[str] = field(default_factory=lambda: list(DEFAULT_DOMAINS))
    rate_limit: float = 0.01
    concurrency: int = 50
    request_timeout: float = 10.0
    user_agent: str = 'product-crawler/1.0'
    output_file: str = 'product_urls.json'


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = 'INFO'
    file: str = 'logs/crawler.log'
    format: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    json: bool = False


@dataclass
class MonitoringConfig:
    """Configuration for monitoring."""
    metrics_enabled: bool = False
    prometheus_port: int = 8000


@dataclass
class ServerConfig:
    """Configuration for the HTTP serving layer."""
    host: str = '0.0.0.0'
    port: int = 8080


@dataclass
class Config:
    """Main configuration class."""
    crawler: CrawlerConfig = field(default_factory=CrawlerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


def _build_section(section_cls, data: Optional[Dict[str, Any]]):
    """Instantiate a config dataclass, rejecting unknown keys."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(
            f"{section_cls.__name__} section must be a mapping, got {type(data).__name__}"
        )
    known = {f.name for f in fields(section_cls)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(
            f"Unknown {section_cls.__name__} keys: {', '.join(sorted(unknown))}"
        )
    return section_cls(**data)


class ConfigManager:
    """Manages configuration loading and validation."""

    def __init__(self, config_path: Optional[str] = "config.yaml"):
        self.config_path = Path(config_path) if config_path else None
        self._config: Optional[Config] = None

    def load_config(self) -> Config:
        """Load configuration from YAML file."""
        if self.config_path is None:
            return self.from_dict({})

        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r') as file:
            config_data = yaml.safe_load(file) or {}

        return self.from_dict(config_data)

    def from_dict(self, config_data: Dict[str, Any]) -> Config:
        """Build and validate configuration from a plain mapping."""
        if not isinstance(config_data, dict):
            raise ValueError("Configuration must be a mapping of sections")

        self._config = Config(
            crawler=_build_section(CrawlerConfig, config_data.get('crawler')),
            logging=_build_section(LoggingConfig, config_data.get('logging')),
            monitoring=_build_section(MonitoringConfig, config_data.get('monitoring')),
            server=_build_section(ServerConfig, config_data.get('server'))
        )

        self._validate_config()
        return self._config

    def _validate_config(self):
        """Validate configuration values."""
        if not self._config:
            raise ValueError("Configuration not loaded")

        validate_crawler_config(self._config.crawler)

        port = self._config.server.port
        if isinstance(port, bool) or not isinstance(port, int) or port < 1:
            raise ValueError("server port must be a positive integer")

        logging.getLogger(__name__).debug("Configuration validation passed")

    @property
    def config(self) -> Config:
        """Get the loaded configuration."""
        if not self._config:
            raise ValueError("Configuration not loaded. Call load_config() first.")
        return self._config


def _require_number(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    return value


def validate_crawler_config(crawler: CrawlerConfig):
    """Validate crawler settings; raises ValueError on the first problem."""
    if not isinstance(crawler.domains, list):
        raise ValueError(f"domains must be a list of hostnames, got {crawler.domains!r}")

    if not crawler.domains:
        raise ValueError("At least one domain must be provided")

    for domain in crawler.domains:
        if not isinstance(domain, str) or not domain:
            raise ValueError(f"Domain must be a non-empty string: {domain!r}")
        if '://' in domain or '/' in domain:
            raise ValueError(f"Domain must be a bare hostname: {domain!r}")

    duplicates = sorted({d for d in crawler.domains if crawler.domains.count(d) > 1})
    if duplicates:
        raise ValueError(f"Domains listed more than once: {', '.join(duplicates)}")

    if _require_number('rate_limit', crawler.rate_limit) < 0:
        raise ValueError("rate_limit must be non-negative")

    if isinstance(crawler.concurrency, bool) or not isinstance(crawler.concurrency, int):
        raise ValueError(f"concurrency must be an integer, got {crawler.concurrency!r}")
    if crawler.concurrency < 1:
        raise ValueError("concurrency must be at least 1")

    if _require_number('request_timeout', crawler.request_timeout) <= 0:
        raise ValueError("request_timeout must be positive")


# Global config manager instance
config_manager = ConfigManager(None)


def get_config() -> Config:
    """Get the global configuration instance."""
    return config_manager.config


def load_config(config_path: Optional[str] = "config.yaml") -> Config:
    """Load configuration from file; None yields the built-in defaults."""
    global config_manager
    config_manager = ConfigManager(config_path)
    return config_manager.load_config()
