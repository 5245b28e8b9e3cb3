"""Unit tests for config_manager module."""

import os
from pathlib import Path

import pytest

from stackctl.config_manager import ConfigManager, StackctlConfig
from stackctl.exceptions import ConfigError

PROJECT_ID = "0b7c6a4e-3c4b-4c1f-9f7a-3d5e8e6a1b21"


class TestStackctlConfig:
    """Tests for StackctlConfig dataclass."""

    def test_default_values(self):
        config = StackctlConfig()
        assert config.project_id is None
        assert config.region == "eu01"
        assert config.request_timeout is None

    def test_to_dict_skips_none(self):
        config = StackctlConfig(project_id=PROJECT_ID)
        assert config.to_dict() == {"project_id": PROJECT_ID, "region": "eu01"}

    def test_from_dict_partial(self):
        config = StackctlConfig.from_dict({"project_id": PROJECT_ID, "request_timeout": "60"})
        assert config.project_id == PROJECT_ID
        assert config.region == "eu01"  # Default
        assert config.request_timeout == 60

    def test_keys(self):
        assert StackctlConfig.keys() == [
            "project_id",
            "region",
            "mongodbflex_custom_endpoint",
            "iaas_custom_endpoint",
            "request_timeout",
        ]


class TestConfigManager:
    """Tests for ConfigManager class."""

    def test_load_config_not_exists(self):
        config = ConfigManager.load_config()
        assert config == StackctlConfig()

    def test_save_and_load(self, isolated_config):
        ConfigManager.save_config(StackctlConfig(project_id=PROJECT_ID, region="eu02"))

        config_file = isolated_config / "config.toml"
        assert config_file.exists()
        assert os.stat(config_file).st_mode & 0o777 == 0o600
        assert os.stat(isolated_config).st_mode & 0o777 == 0o700

        config = ConfigManager.load_config()
        assert config.project_id == PROJECT_ID
        assert config.region == "eu02"

    def test_save_preserves_comments(self, isolated_config):
        isolated_config.mkdir()
        config_file = isolated_config / "config.toml"
        config_file.write_text('# my settings\nregion = "eu01"\n')
        config_file.chmod(0o600)

        ConfigManager.update_config(project_id=PROJECT_ID)

        content = config_file.read_text()
        assert "# my settings" in content
        assert PROJECT_ID in content

    def test_insecure_permissions_fixed(self, isolated_config):
        isolated_config.mkdir()
        config_file = isolated_config / "config.toml"
        config_file.write_text('region = "eu02"\n')
        config_file.chmod(0o644)

        assert ConfigManager.load_config().region == "eu02"
        assert os.stat(config_file).st_mode & 0o777 == 0o600

    def test_invalid_toml(self, isolated_config):
        isolated_config.mkdir()
        config_file = isolated_config / "config.toml"
        config_file.write_text("region = \n")
        config_file.chmod(0o600)

        with pytest.raises(ConfigError, match="Failed to load config"):
            ConfigManager.load_config()

    def test_update_unknown_key(self):
        with pytest.raises(ConfigError, match="Unknown config key"):
            ConfigManager.update_config(vm_size="big")

    def test_unset_removes_key(self, isolated_config):
        ConfigManager.update_config(project_id=PROJECT_ID, request_timeout=60)

        config = ConfigManager.unset_config("request_timeout")

        assert config.request_timeout is None
        assert "request_timeout" not in (isolated_config / "config.toml").read_text()
        assert ConfigManager.load_config().project_id == PROJECT_ID

    def test_unset_region_resets_default(self):
        ConfigManager.update_config(region="eu02")
        assert ConfigManager.unset_config("region").region == "eu01"

    def test_custom_path(self, tmp_path):
        custom = tmp_path / "custom.toml"
        ConfigManager.update_config(str(custom), region="eu02")
        assert ConfigManager.load_config(str(custom)).region == "eu02"

    def test_custom_path_outside_allowed_dirs(self):
        with pytest.raises(ConfigError, match="outside allowed directories"):
            ConfigManager.get_config_path("/etc/stackctl.toml")

    def test_get_project_id_cli_override(self):
        ConfigManager.update_config(project_id=PROJECT_ID)
        assert ConfigManager.get_project_id("other") == "other"
        assert ConfigManager.get_project_id(None) == PROJECT_ID

    def test_get_region(self):
        assert ConfigManager.get_region("eu02") == "eu02"
        assert ConfigManager.get_region(None) == "eu01"

    def test_default_path(self, isolated_config):
        assert ConfigManager.get_config_path() == Path(isolated_config) / "config.toml"
