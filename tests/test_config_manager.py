"""
Tests for configuration loading.
"""

import pytest

from solr_search.core.entities import SiteConfig
from solr_search.infrastructure.config.config_manager import ConfigManager
from solr_search.infrastructure.config.config_validator import ConfigValidator
from solr_search.shared.exceptions import ConfigurationError

BASE_YAML = """
solr:
  url: http://solr.test/solr/core
fedora:
  url: http://fedora.test/fedora
search:
  results_per_page: 25
  facet_fields:
    - RELS_EXT_hasModel_uri_ms
    - solr_field: mods_dateIssued_dt
      range_facet: true
logging:
  level: INFO
"""


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for variable in ("APP_ENV", "SOLR_URL", "FEDORA_URL", "FEDORA_USER", "FEDORA_PASSWORD", "LOG_LEVEL"):
        monkeypatch.delenv(variable, raising=False)


@pytest.fixture
def config_dir(tmp_path):
    (tmp_path / "base.yaml").write_text(BASE_YAML)
    return tmp_path


class TestConfigManager:
    """Test suite for the configuration manager."""

    def test_loads_base_config(self, config_dir):
        manager = ConfigManager(str(config_dir), "development")

        assert manager.get_config().get_solr_url() == "http://solr.test/solr/core"
        assert manager.get_config().get_fedora_url() == "http://fedora.test/fedora"
        assert manager.get_config().get_log_level() == "INFO"

    def test_environment_file_is_merged(self, config_dir):
        (config_dir / "production.yaml").write_text(
            "search:\n  http_method: POST\nlogging:\n  level: WARNING\n"
        )
        manager = ConfigManager(str(config_dir), "production")

        search = manager.get_config().get("search")
        assert search["http_method"] == "POST"
        assert search["results_per_page"] == 25
        assert manager.get_config().get_log_level() == "WARNING"

    def test_environment_from_app_env(self, config_dir, monkeypatch):
        monkeypatch.setenv("APP_ENV", "staging")
        assert ConfigManager(str(config_dir)).environment == "staging"

    def test_environment_variable_overrides(self, config_dir, monkeypatch):
        monkeypatch.setenv("SOLR_URL", "https://solr.prod/solr/core")
        monkeypatch.setenv("FEDORA_USER", "fedoraAdmin")
        monkeypatch.setenv("FEDORA_PASSWORD", "secret")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        env = ConfigManager(str(config_dir), "development").get_config()

        assert env.get_solr_url() == "https://solr.prod/solr/core"
        assert env.get_fedora_credentials() == ("fedoraAdmin", "secret")
        assert env.get_log_level() == "DEBUG"

    def test_invalid_override_is_rejected(self, config_dir, monkeypatch):
        monkeypatch.setenv("SOLR_URL", "solr.prod")

        with pytest.raises(ConfigurationError):
            ConfigManager(str(config_dir), "development").load_config()

    def test_site_config(self, config_dir):
        site = ConfigManager(str(config_dir), "development").get_site_config()

        assert isinstance(site, SiteConfig)
        assert site.results_per_page == 25
        assert site.facet_fields[0] == "RELS_EXT_hasModel_uri_ms"
        assert site.base_query == "*:*"
        assert site.repository_root_id == "root-collection"

    def test_missing_base_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            ConfigManager(str(tmp_path), "development").load_config()

    def test_invalid_yaml(self, config_dir):
        (config_dir / "development.yaml").write_text("search: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            ConfigManager(str(config_dir), "development").load_config()

    def test_config_is_cached(self, config_dir):
        manager = ConfigManager(str(config_dir), "development")
        assert manager.get_config() is manager.get_config()


class TestConfigValidator:
    """Test suite for configuration validation."""

    @pytest.fixture
    def validator(self):
        return ConfigValidator()

    def test_valid_config(self, validator):
        validator.validate_config({"solr": {"url": "http://solr.test/solr/core"}})
        assert validator.errors == []

    def test_solr_section_required(self, validator):
        with pytest.raises(ConfigurationError, match="solr"):
            validator.validate_config({})

    def test_collects_all_errors(self, validator):
        config = {
            "solr": {"url": "ftp://solr", "timeout_seconds": 0},
            "search": {
                "results_per_page": -1,
                "http_method": "PUT",
                "base_sort": "score sideways",
                "facet_fields": [{"label": "No field"}, {"solr_field": "a_ms", "sort_by": "random"}],
            },
            "logging": {"level": "LOUD", "output": "syslog"},
        }

        with pytest.raises(ConfigurationError) as excinfo:
            validator.validate_config(config)

        assert len(excinfo.value.details["errors"]) == 9

    def test_lowercase_log_level_is_accepted(self, validator):
        validator.validate_config({
            "solr": {"url": "http://solr.test"},
            "logging": {"level": "debug"},
        })
