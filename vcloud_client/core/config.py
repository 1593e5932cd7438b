"""
Configuration management module for vCloud API Client.
Loads and validates configuration from config.yaml.
"""

import os
from pathlib import Path
from typing import Any, List, Optional
import yaml

from vcloud_client.core.context import (
    ProviderContext,
    new_session_cache,
    new_version_cache,
)


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""
    pass


class Config:
    """
    Configuration manager for the vCloud API Client.
    Loads configuration from config.yaml and provides validated access to settings.
    """

    def __init__(self, config_path: str = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to config.yaml. If None, uses config/config.yaml
                         under the project root.
        """
        if config_path is None:
            config_path = Path(__file__).parent.parent.parent / "config" / "config.yaml"
        else:
            config_path = Path(config_path)

        if not config_path.exists():
            raise ConfigError(
                f"Configuration file not found: {config_path}\n"
                f"Please copy config/config.example.yaml to config/config.yaml and configure it."
            )

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                self._config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in configuration file: {e}")
        except OSError as e:
            raise ConfigError(f"Error reading configuration file: {e}")

        self._validate_config()

    def _validate_config(self):
        """Validate that all required configuration is present."""
        required_fields = [
            'cloud.endpoint',
            'cloud.account',
            'cloud.user',
        ]

        missing_fields = []
        for field in required_fields:
            if not self._get_nested(field):
                missing_fields.append(field)

        if not self.password:
            missing_fields.append('cloud.password (or VCLOUD_PASSWORD)')

        if missing_fields:
            raise ConfigError(
                f"Missing required configuration fields:\n" +
                "\n".join(f"  - {field}" for field in missing_fields)
            )

        endpoint = self.endpoint
        if not endpoint.startswith(('http://', 'https://')):
            raise ConfigError(
                f"Invalid endpoint '{endpoint}'. Must start with http:// or https://."
            )

        preference = self._get_nested('cloud.version_preference', [])
        if preference is not None and not isinstance(preference, list):
            raise ConfigError("cloud.version_preference must be a list of version strings")

        if self.task_poll_interval <= 0:
            raise ConfigError("tasks.poll_interval_seconds must be greater than zero")

    def _get_nested(self, key: str, default=None) -> Any:
        """
        Get a nested configuration value using dot notation.

        Args:
            key: Dot-separated key (e.g., 'cloud.endpoint')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    @property
    def endpoint(self) -> str:
        """Get the cloud endpoint (scheme://host[:port])."""
        return str(self._get_nested('cloud.endpoint')).rstrip('/')

    @property
    def account(self) -> str:
        """Get the org identifier used as account number."""
        return str(self._get_nested('cloud.account'))

    @property
    def user(self) -> str:
        """Get the login user (without the @org suffix)."""
        return str(self._get_nested('cloud.user'))

    @property
    def password(self) -> Optional[str]:
        """Get the login password; VCLOUD_PASSWORD overrides the file."""
        return os.environ.get('VCLOUD_PASSWORD') or self._get_nested('cloud.password')

    @property
    def compat(self) -> bool:
        """Whether ids use the legacy /kind/id format."""
        return bool(self._get_nested('cloud.compat', False))

    @property
    def insecure(self) -> bool:
        """Whether TLS certificate verification is disabled."""
        return bool(self._get_nested('cloud.insecure', False))

    @property
    def version_preference(self) -> List[str]:
        """Get the preferred API versions, most preferred first."""
        return [str(v) for v in (self._get_nested('cloud.version_preference') or [])]

    @property
    def proxy(self) -> Optional[str]:
        """Get the optional HTTP proxy URL."""
        return self._get_nested('cloud.proxy')

    @property
    def api_timeout(self) -> int:
        """Get API request timeout in seconds."""
        return self._get_nested('api_settings.timeout', 30)

    @property
    def version_cache_ttl(self) -> int:
        """Get version cache lifetime in seconds."""
        return self._get_nested('cache.version_ttl_seconds', 24 * 60 * 60)

    @property
    def session_cache_ttl(self) -> int:
        """Get session cache lifetime in seconds."""
        return self._get_nested('cache.session_ttl_seconds', 25 * 60)

    @property
    def task_poll_interval(self) -> float:
        """Get delay between task polls in seconds."""
        return self._get_nested('tasks.poll_interval_seconds', 15)

    @property
    def task_timeout_minutes(self) -> float:
        """Get the wall-clock limit for waiting on a task."""
        return self._get_nested('tasks.timeout_minutes', 30)

    @property
    def task_raise_on_timeout(self) -> bool:
        """Whether a task timeout raises instead of returning quietly."""
        return bool(self._get_nested('tasks.raise_on_timeout', False))

    @property
    def log_level(self) -> str:
        """Get log level."""
        return self._get_nested('logging.level', 'INFO')

    @property
    def log_wire(self) -> bool:
        """Whether HTTP traffic is logged."""
        return bool(self._get_nested('logging.wire', False))

    @property
    def log_file(self) -> Path:
        """Get log file path."""
        return Path(self._get_nested('logging.file', './logs/vcloud-api-client.log'))

    @property
    def log_max_size_mb(self) -> int:
        """Get maximum log file size in MB."""
        return self._get_nested('logging.max_size_mb', 10)

    @property
    def log_backup_count(self) -> int:
        """Get number of backup log files to keep."""
        return self._get_nested('logging.backup_count', 5)

    def to_context(self) -> ProviderContext:
        """Build a provider context with fresh caches from this configuration."""
        return ProviderContext(
            endpoint=self.endpoint,
            account_number=self.account,
            access_public=self.user,
            access_private=self.password,
            compat=self.compat,
            insecure=self.insecure,
            version_preference=self.version_preference,
            proxy=self.proxy,
            timeout=self.api_timeout,
            version_cache=new_version_cache(self.version_cache_ttl),
            session_cache=new_session_cache(self.session_cache_ttl),
        )

    def ensure_directories(self):
        """Create the log directory if it doesn't exist."""
        try:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigError(f"Failed to create directory {self.log_file.parent}: {e}")
