"""
Configuration manager for centralized configuration handling.

Loads ``base.yaml`` from the configuration directory, merges the
environment specific file over it, validates the result and wraps it in
an EnvironmentConfig.
"""

from typing import Dict, Any, Optional
import os
import yaml
from pathlib import Path

from ...core.entities import SiteConfig
from ...shared.exceptions import ConfigurationError
from .config_validator import ConfigValidator
from .environment_config import EnvironmentConfig


class ConfigManager:
    """
    Manager for application configurations.

    The merged configuration is loaded lazily and cached for the lifetime
    of the manager.
    """

    def __init__(
        self,
        config_dir: str = "config",
        environment: Optional[str] = None
    ):
        """
        Initialize the manager.

        Args:
            config_dir: Configuration directory path
            environment: Optional environment name, defaults to ``APP_ENV``
        """
        self.config_dir = Path(config_dir)
        self.environment = environment or os.getenv("APP_ENV", "development")
        self.validator = ConfigValidator()
        self._config: Optional[EnvironmentConfig] = None

    def load_config(self) -> EnvironmentConfig:
        """
        Load configuration from files.

        Returns:
            EnvironmentConfig: Loaded configuration

        Raises:
            ConfigurationError: If the base file is missing or the
                configuration is invalid
        """
        if self._config is not None:
            return self._config

        base_config = self._load_yaml("base.yaml", required=True)
        env_config = self._load_yaml(f"{self.environment}.yaml", required=False)

        config = self._merge_configs(base_config, env_config)
        environment_config = EnvironmentConfig(config)

        # Overrides come from the environment, so validate after applying them
        self.validator.validate_config(environment_config.config)

        self._config = environment_config
        return self._config

    def get_config(self) -> EnvironmentConfig:
        """Current configuration, loading it on first use."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def get_site_config(self) -> SiteConfig:
        """
        Site configuration snapshot.

        Returns:
            SiteConfig: Immutable snapshot of the ``search`` section
        """
        return self.get_config().site_config()

    def _load_yaml(self, filename: str, required: bool) -> Dict[str, Any]:
        """
        Load a YAML configuration file.

        Args:
            filename: Configuration file name
            required: Whether a missing file is an error

        Returns:
            Dict[str, Any]: Loaded configuration, empty for an optional
            missing file

        Raises:
            ConfigurationError: If a required file is missing or a file
                cannot be parsed
        """
        file_path = self.config_dir / filename
        if not file_path.exists():
            if required:
                raise ConfigurationError(f"Configuration file not found: {file_path}")
            return {}

        try:
            with open(file_path, "r") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {file_path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file must contain a mapping: {file_path}")
        return data

    def _merge_configs(
        self,
        base: Dict[str, Any],
        override: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Merge two configurations.

        Args:
            base: Base configuration
            override: Override configuration

        Returns:
            Dict[str, Any]: Merged configuration
        """
        result = base.copy()

        for key, value in override.items():
            if (
                key in result and
                isinstance(result[key], dict) and
                isinstance(value, dict)
            ):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result
