"""
Configuration validator for validating configuration values.

Collects every problem in the merged configuration and reports them
together as a single ConfigurationError.
"""

from typing import Dict, Any, List
import re

from ...shared.exceptions import ConfigurationError

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
VALID_LOG_OUTPUTS = ["stdout", "stderr"]
VALID_HTTP_METHODS = ["GET", "POST"]
VALID_FACET_SORTS = ["count", "index"]
VALID_SORT_ORDERS = ["asc", "desc"]


class ConfigValidator:
    """
    Validator for configuration values.

    Sections that are absent are not validated; defaults apply to them.
    """

    def __init__(self):
        """Initialize the validator."""
        self.errors: List[str] = []

    def validate_config(self, config: Dict[str, Any]) -> None:
        """
        Validate configuration.

        Args:
            config: Configuration to validate

        Raises:
            ConfigurationError: If configuration is invalid
        """
        self.errors = []

        if "solr" in config:
            self._validate_solr_config(config["solr"])
        else:
            self.errors.append("Missing required section: solr")

        if config.get("fedora"):
            self._validate_fedora_config(config["fedora"])

        if config.get("search"):
            self._validate_search_config(config["search"])

        if config.get("session"):
            self._validate_session_config(config["session"])

        if config.get("logging"):
            self._validate_logging_config(config["logging"])

        if self.errors:
            raise ConfigurationError("\n".join(self.errors), {"errors": list(self.errors)})

    def _validate_url(self, section: str, url: Any) -> None:
        if not isinstance(url, str) or not url:
            self.errors.append(f"{section} URL must be a non-empty string")
        elif not re.match(r"^https?://", url):
            self.errors.append(f"{section} URL must start with http:// or https://")

    def _validate_timeouts(self, section: str, config: Dict[str, Any]) -> None:
        for key in ("timeout_seconds", "connect_timeout_seconds"):
            if key in config:
                timeout = config[key]
                if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
                    self.errors.append(f"{section} {key} must be a positive number")

    def _validate_solr_config(self, config: Dict[str, Any]) -> None:
        """
        Validate Solr configuration.

        Args:
            config: Solr configuration
        """
        if not isinstance(config, dict):
            self.errors.append("Solr configuration must be a mapping")
            return
        if "url" not in config:
            self.errors.append("Missing required solr field: url")
        else:
            self._validate_url("Solr", config["url"])
        self._validate_timeouts("Solr", config)

    def _validate_fedora_config(self, config: Dict[str, Any]) -> None:
        if not isinstance(config, dict):
            self.errors.append("Fedora configuration must be a mapping")
            return
        if "url" in config:
            self._validate_url("Fedora", config["url"])
        self._validate_timeouts("Fedora", config)

    def _validate_search_config(self, config: Dict[str, Any]) -> None:
        """
        Validate search configuration.

        Args:
            config: Search configuration
        """
        if not isinstance(config, dict):
            self.errors.append("Search configuration must be a mapping")
            return

        for key in ("results_per_page", "facet_max_count", "scope_max_depth"):
            if key in config:
                value = config[key]
                if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                    self.errors.append(f"Search {key} must be a positive integer")

        for key in ("facet_min_count", "facet_display_limit"):
            if key in config:
                value = config[key]
                if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                    self.errors.append(f"Search {key} must be a non-negative integer")

        if "http_method" in config and config["http_method"] not in VALID_HTTP_METHODS:
            self.errors.append(
                f"Search http_method must be one of: {', '.join(VALID_HTTP_METHODS)}"
            )

        if config.get("base_sort"):
            for clause in str(config["base_sort"]).split(","):
                parts = clause.split()
                if not parts or len(parts) > 2 or (
                    len(parts) == 2 and parts[1].lower() not in VALID_SORT_ORDERS
                ):
                    self.errors.append(f"Invalid base_sort clause: {clause.strip()!r}")

        if "facet_fields" in config:
            self._validate_facet_fields(config["facet_fields"])

    def _validate_facet_fields(self, fields: Any) -> None:
        if not isinstance(fields, list):
            self.errors.append("Search facet_fields must be a list")
            return
        for index, entry in enumerate(fields):
            if isinstance(entry, str):
                continue
            if not isinstance(entry, dict) or not entry.get("solr_field"):
                self.errors.append(f"Facet field #{index} must name a solr_field")
                continue
            sort_by = entry.get("sort_by")
            if sort_by and sort_by not in VALID_FACET_SORTS:
                self.errors.append(
                    f"Facet field {entry['solr_field']} sort_by must be one of: "
                    f"{', '.join(VALID_FACET_SORTS)}"
                )

    def _validate_session_config(self, config: Dict[str, Any]) -> None:
        if "max_entries" in config:
            value = config["max_entries"]
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                self.errors.append("Session max_entries must be a positive integer")

    def _validate_logging_config(self, config: Dict[str, Any]) -> None:
        """
        Validate logging configuration.

        Args:
            config: Logging configuration
        """
        if "level" in config:
            level = config["level"]
            if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
                self.errors.append(
                    f"Logging level must be one of: {', '.join(VALID_LOG_LEVELS)}"
                )

        if "format" in config:
            fmt = config["format"]
            if not isinstance(fmt, str) or not fmt:
                self.errors.append("Logging format must be a non-empty string")

        if "output" in config and config["output"] not in VALID_LOG_OUTPUTS:
            self.errors.append(
                f"Logging output must be one of: {', '.join(VALID_LOG_OUTPUTS)}"
            )
