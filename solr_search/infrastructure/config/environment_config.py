"""
Environment configuration for environment-specific settings.

Wraps the merged configuration mapping and applies environment variable
overrides for connection settings and the log level.
"""

from typing import Dict, Any, Optional, Tuple
import os

from ...core.entities import SiteConfig

ENVIRONMENT_OVERRIDES = {
    "SOLR_URL": ("solr", "url"),
    "FEDORA_URL": ("fedora", "url"),
    "FEDORA_USER": ("fedora", "username"),
    "FEDORA_PASSWORD": ("fedora", "password"),
    "LOG_LEVEL": ("logging", "level"),
}


class EnvironmentConfig:
    """
    Environment-specific configuration.

    Provides typed accessors over the merged configuration mapping.
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize the configuration.

        Args:
            config: Merged configuration
        """
        self.config = config
        self._apply_environment_overrides()

    def _apply_environment_overrides(self) -> None:
        """Apply environment variable overrides to configuration."""
        for variable, (section, key) in ENVIRONMENT_OVERRIDES.items():
            if variable in os.environ:
                self.config.setdefault(section, {})[key] = os.environ[variable]

    def get(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.config[key]

    def __contains__(self, key: str) -> bool:
        return key in self.config

    def get_solr_url(self) -> str:
        """
        Get Solr core URL.

        Returns:
            str: Solr URL
        """
        return self.config["solr"]["url"]

    def get_solr_timeout(self) -> Tuple[float, float]:
        solr = self.config.get("solr", {})
        return (
            solr.get("connect_timeout_seconds", 5.0),
            solr.get("timeout_seconds", 30.0)
        )

    def detect_solr_version(self) -> bool:
        return bool(self.config.get("solr", {}).get("detect_version", True))

    def get_fedora_url(self) -> Optional[str]:
        """
        Get Fedora base URL.

        Returns:
            Optional[str]: Fedora URL, None when no graph store is configured
        """
        return self.config.get("fedora", {}).get("url")

    def get_fedora_credentials(self) -> Tuple[Optional[str], Optional[str]]:
        fedora = self.config.get("fedora", {})
        return fedora.get("username"), fedora.get("password")

    def get_fedora_timeout(self) -> Tuple[float, float]:
        fedora = self.config.get("fedora", {})
        return (
            fedora.get("connect_timeout_seconds", 5.0),
            fedora.get("timeout_seconds", 30.0)
        )

    def get_session_max_entries(self) -> int:
        return self.config.get("session", {}).get("max_entries", 1000)

    def get_log_level(self) -> str:
        """
        Get logging level.

        Returns:
            str: Logging level
        """
        return self.config.get("logging", {}).get("level", "INFO")

    def get_log_format(self) -> str:
        """
        Get logging format for module loggers.

        Returns:
            str: Logging format
        """
        return self.config.get("logging", {}).get(
            "format",
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    def get_log_output(self) -> Optional[str]:
        """
        Get logging output.

        Returns:
            Optional[str]: ``stdout`` or ``stderr``
        """
        return self.config.get("logging", {}).get("output")

    def site_config(self) -> SiteConfig:
        """
        Build the site configuration snapshot.

        Returns:
            SiteConfig: Snapshot of the ``search`` section, defaults filled in
        """
        return SiteConfig.from_dict(self.config.get("search", {}) or {})
