"""Tests for configuration loading and validation."""

import pytest
import yaml

from instance_type_catalog.config import (
    CONFIG_ENV_VAR,
    DEFAULT_EXCLUDE_LIST,
    AppConfig,
    CatalogConfig,
    load_config,
    resolve_config,
)
from instance_type_catalog.exceptions import ConfigError, ConfigurationError


def _write_config(tmp_path, data) -> str:
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump(data))
    return str(path)


class TestDefaults:
    def test_default_exclude_list(self):
        config = AppConfig()
        assert config.catalog.exclude_list == DEFAULT_EXCLUDE_LIST
        assert config.catalog.exclude_list == (
            "a1.metal", "a1.medium", "a1.large", "a1.xlarge", "a1.2xlarge", "a1.4xlarge",
        )

    def test_empty_list_policy_defaults_to_exclude_all(self):
        assert AppConfig().catalog.empty_list_excludes_all is True

    def test_exclude_list_converted_to_tuple(self):
        assert CatalogConfig(exclude_list=["a1.metal"]).exclude_list == ("a1.metal",)

    def test_defaults(self):
        config = AppConfig()
        assert config.catalog.match_mode == "exact"
        assert config.aws.region == ""
        assert config.aws.page_size is None
        assert config.logging.format == "json"


class TestLoadConfig:
    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(str(path)) == AppConfig()

    def test_missing_file_raises(self):
        with pytest.raises(ConfigError, match="not found"):
            load_config("/nonexistent/file.yaml")

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("just a string")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(str(path))

    def test_full_config(self, tmp_path):
        data = {
            "aws": {
                "region": "eu-central-1",
                "credential_profile": "ops",
                "connect_timeout": 5,
                "read_timeout": 60,
                "max_attempts": 2,
                "page_size": 50,
            },
            "catalog": {
                "exclude_list": ["a1\\..*", "t2.nano"],
                "match_mode": "pattern",
                "empty_list_excludes_all": False,
            },
            "logging": {"level": "DEBUG", "format": "text"},
        }
        config = load_config(_write_config(tmp_path, data))
        assert config.aws.region == "eu-central-1"
        assert config.aws.credential_profile == "ops"
        assert config.aws.page_size == 50
        assert config.catalog.exclude_list == ("a1\\..*", "t2.nano")
        assert config.catalog.match_mode == "pattern"
        assert config.catalog.empty_list_excludes_all is False
        assert config.logging.format == "text"

    def test_unknown_keys_ignored(self, tmp_path):
        data = {"catalog": {"exclude_list": ["x1.large"], "colour": "blue"}, "extra": 1}
        config = load_config(_write_config(tmp_path, data))
        assert config.catalog.exclude_list == ("x1.large",)

    def test_env_var_interpolation(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TEST_REGION", "ap-south-1")
        data = {"aws": {"region": "${TEST_REGION}"}}
        config = load_config(_write_config(tmp_path, data))
        assert config.aws.region == "ap-south-1"

    def test_env_var_missing_raises(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SURELY_MISSING_VAR", raising=False)
        data = {"aws": {"region": "${SURELY_MISSING_VAR}"}}
        with pytest.raises(ConfigError, match="SURELY_MISSING_VAR"):
            load_config(_write_config(tmp_path, data))

    def test_invalid_match_mode(self, tmp_path):
        data = {"catalog": {"match_mode": "glob"}}
        with pytest.raises(ConfigError, match="match_mode"):
            load_config(_write_config(tmp_path, data))

    def test_exclude_list_must_be_list(self, tmp_path):
        data = {"catalog": {"exclude_list": "a1.metal"}}
        with pytest.raises(ConfigError, match="exclude_list"):
            load_config(_write_config(tmp_path, data))

    def test_exclude_list_entries_must_be_strings(self, tmp_path):
        data = {"catalog": {"exclude_list": ["a1.metal", 42]}}
        with pytest.raises(ConfigError, match="42"):
            load_config(_write_config(tmp_path, data))

    def test_exclude_list_loaded_as_tuple(self, tmp_path):
        data = {"catalog": {"exclude_list": ["a1.metal", "a1.large"]}}
        config = load_config(_write_config(tmp_path, data))
        assert isinstance(config.catalog.exclude_list, tuple)

    def test_invalid_pattern_entry_rejected(self, tmp_path):
        data = {"catalog": {"exclude_list": ["a1.("], "match_mode": "pattern"}}
        with pytest.raises(ConfigError, match="Invalid exclude-list pattern"):
            load_config(_write_config(tmp_path, data))

    def test_inline_flag_entry_rejected(self, tmp_path):
        data = {"catalog": {"exclude_list": ["(?i)a1.metal"], "match_mode": "pattern"}}
        with pytest.raises(ConfigError, match="Invalid exclude-list pattern"):
            load_config(_write_config(tmp_path, data))

    def test_empty_exclude_entry_rejected(self, tmp_path):
        data = {"catalog": {"exclude_list": ["a1.metal", ""]}}
        with pytest.raises(ConfigError, match="Invalid exclude-list entry"):
            load_config(_write_config(tmp_path, data))

    def test_empty_list_policy_must_be_bool(self, tmp_path):
        data = {"catalog": {"empty_list_excludes_all": "yes please"}}
        with pytest.raises(ConfigError, match="empty_list_excludes_all"):
            load_config(_write_config(tmp_path, data))

    def test_page_size_out_of_range(self, tmp_path):
        data = {"aws": {"page_size": 500}}
        with pytest.raises(ConfigError, match="page_size"):
            load_config(_write_config(tmp_path, data))

    def test_non_positive_timeout(self, tmp_path):
        data = {"aws": {"read_timeout": 0}}
        with pytest.raises(ConfigError, match="timeout"):
            load_config(_write_config(tmp_path, data))

    def test_max_attempts_too_low(self, tmp_path):
        data = {"aws": {"max_attempts": 0}}
        with pytest.raises(ConfigError, match="max_attempts"):
            load_config(_write_config(tmp_path, data))

    def test_invalid_logging_format(self, tmp_path):
        data = {"logging": {"format": "xml"}}
        with pytest.raises(ConfigError, match="logging.format"):
            load_config(_write_config(tmp_path, data))


class TestResolveConfig:
    def test_defaults_without_env_var(self):
        assert resolve_config({}) == AppConfig()

    def test_loads_file_named_by_env_var(self, tmp_path):
        path = _write_config(tmp_path, {"catalog": {"exclude_list": ["t2.nano"]}})
        config = resolve_config({CONFIG_ENV_VAR: path})
        assert config.catalog.exclude_list == ("t2.nano",)

    def test_reads_process_environment(self, tmp_path, monkeypatch):
        path = _write_config(tmp_path, {"logging": {"level": "ERROR"}})
        monkeypatch.setenv(CONFIG_ENV_VAR, path)
        assert resolve_config().logging.level == "ERROR"

    def test_missing_file_raises(self):
        with pytest.raises(ConfigurationError, match="not found"):
            resolve_config({CONFIG_ENV_VAR: "/nonexistent/config.yaml"})
