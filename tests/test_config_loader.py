"""
Tests for configuration loader.

This module tests the ConfigLoader class including file loading,
environment variable processing, and configuration validation.
"""

import pytest
import json
import os
from pathlib import Path
from typing import Any, Dict
from unittest.mock import patch

import yaml

from ioc_container.infrastructure.config.loader import ConfigLoader
from ioc_container.infrastructure.config.models import (
    ApplicationConfig,
    ContainerConfig,
    LoggingConfig,
)


class TestConfigLoader:
    """Test cases for ConfigLoader class."""

    @pytest.fixture
    def config_loader(self) -> ConfigLoader:
        """Create a ConfigLoader instance."""
        return ConfigLoader()

    @pytest.fixture
    def sample_config_dict(self) -> Dict[str, Any]:
        """Sample configuration dictionary."""
        return {
            "name": "Test Application",
            "debug": True,
            "container": {
                "cache_fakes": True,
                "autoload": {"App": "app"},
                "aliases": {"Redis": "My/Redis"},
                "providers": ["providers.redis:RedisProvider"],
            },
            "logging": {
                "level": "debug",
                "console_enabled": False,
            },
        }

    @pytest.fixture(autouse=True)
    def clean_environment(self) -> Any:
        with patch.dict(os.environ, {}, clear=False):
            for key in list(os.environ):
                if key.startswith("IOC_"):
                    del os.environ[key]
            yield

    def test_load_default_config(self, config_loader: ConfigLoader) -> None:
        """Test loading with no file."""
        config = config_loader.load_config()

        assert isinstance(config, ApplicationConfig)
        assert config.container == ContainerConfig()
        assert config.logging.level == "INFO"
        assert config.config_file_path is None

    def test_load_yaml_config(self, config_loader: ConfigLoader, tmp_path: Path,
                              sample_config_dict: Dict[str, Any]) -> None:
        """Test loading a YAML file."""
        config_file = tmp_path / "ioc.yaml"
        config_file.write_text(yaml.safe_dump(sample_config_dict), encoding="utf-8")

        config = config_loader.load_config(str(config_file))

        assert config.name == "Test Application"
        assert config.debug is True
        assert config.container.cache_fakes is True
        assert config.container.aliases == {"Redis": "My/Redis"}
        assert config.container.providers == ["providers.redis:RedisProvider"]
        assert config.logging.level == "DEBUG"
        assert config.config_file_path == str(config_file)

    def test_relative_autoload_paths_follow_config_file(self, config_loader: ConfigLoader,
                                                        tmp_path: Path,
                                                        sample_config_dict: Dict[str, Any]) -> None:
        config_file = tmp_path / "ioc.json"
        sample_config_dict["container"]["autoload"]["Abs"] = str(tmp_path / "absolute")
        config_file.write_text(json.dumps(sample_config_dict), encoding="utf-8")

        config = config_loader.load_config(str(config_file))

        assert config.container.autoload == {
            "App": str(tmp_path / "app"),
            "Abs": str(tmp_path / "absolute"),
        }

    def test_missing_file(self, config_loader: ConfigLoader, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            config_loader.load_config(str(tmp_path / "missing.yaml"))

    def test_unsupported_format(self, config_loader: ConfigLoader, tmp_path: Path) -> None:
        config_file = tmp_path / "ioc.toml"
        config_file.write_text("", encoding="utf-8")

        with pytest.raises(ValueError, match="Unsupported configuration file format"):
            config_loader.load_config(str(config_file))

    def test_invalid_yaml(self, config_loader: ConfigLoader, tmp_path: Path) -> None:
        config_file = tmp_path / "ioc.yaml"
        config_file.write_text("container: [unclosed", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid YAML"):
            config_loader.load_config(str(config_file))

    def test_invalid_json(self, config_loader: ConfigLoader, tmp_path: Path) -> None:
        config_file = tmp_path / "ioc.json"
        config_file.write_text("{not json", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid JSON"):
            config_loader.load_config(str(config_file))

    def test_empty_yaml(self, config_loader: ConfigLoader, tmp_path: Path) -> None:
        config_file = tmp_path / "ioc.yml"
        config_file.write_text("", encoding="utf-8")

        assert config_loader.load_config(str(config_file)).container == ContainerConfig()

    def test_unknown_top_level_keys_are_ignored(self, config_loader: ConfigLoader, tmp_path: Path,
                                                sample_config_dict: Dict[str, Any]) -> None:
        sample_config_dict["environment"] = "production"
        config_file = tmp_path / "ioc.yaml"
        config_file.write_text(yaml.safe_dump(sample_config_dict), encoding="utf-8")

        config = config_loader.load_config(str(config_file))

        assert config.name == "Test Application"
        assert not hasattr(config, "environment")

    def test_unknown_section_keys(self, config_loader: ConfigLoader, tmp_path: Path,
                                  sample_config_dict: Dict[str, Any]) -> None:
        sample_config_dict["container"]["bindings"] = {"My/Redis": "redis:Redis"}
        config_file = tmp_path / "ioc.yaml"
        config_file.write_text(yaml.safe_dump(sample_config_dict), encoding="utf-8")

        with pytest.raises(ValueError, match="Unknown keys in 'container' section: bindings"):
            config_loader.load_config(str(config_file))

    def test_environment_overrides(self, config_loader: ConfigLoader, tmp_path: Path,
                                   sample_config_dict: Dict[str, Any]) -> None:
        config_file = tmp_path / "ioc.json"
        config_file.write_text(json.dumps(sample_config_dict), encoding="utf-8")

        with patch.dict(os.environ, {
            "IOC_DEBUG": "false",
            "IOC_CACHE_FAKES": "no",
            "IOC_LOG_LEVEL": "warning",
        }):
            config = config_loader.load_config(str(config_file))

        assert config.debug is False
        assert config.container.cache_fakes is False
        assert config.container.aliases == {"Redis": "My/Redis"}
        assert config.logging.level == "WARNING"
        assert config.logging.console_enabled is False

    def test_custom_env_prefix(self) -> None:
        with patch.dict(os.environ, {"MYAPP_DEBUG": "1"}):
            config = ConfigLoader(env_prefix="MYAPP_").load_config()

        assert config.debug is True

    @pytest.mark.parametrize("fmt", ["yaml", "json"])
    def test_save_and_reload(self, config_loader: ConfigLoader, tmp_path: Path, fmt: str) -> None:
        config = ApplicationConfig(
            container=ContainerConfig(aliases={"Redis": "My/Redis"}, providers=["a:B"]))
        path = tmp_path / f"saved.{fmt}"

        config_loader.save_config(config, str(path), format=fmt)
        reloaded = config_loader.load_config(str(path))

        assert reloaded.container.aliases == {"Redis": "My/Redis"}
        assert reloaded.container.providers == ["a:B"]

    def test_save_unsupported_format(self, config_loader: ConfigLoader, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            config_loader.save_config(ApplicationConfig(), str(tmp_path / "x.ini"), format="ini")


class TestConfigModels:
    """Test cases for configuration validation."""

    def test_unknown_log_level(self) -> None:
        with pytest.raises(ValueError, match="Unknown log level"):
            ApplicationConfig(logging=LoggingConfig(level="LOUD"))

    def test_negative_backup_count(self) -> None:
        with pytest.raises(ValueError):
            ApplicationConfig(logging=LoggingConfig(backup_count=-1))

    def test_empty_alias_target(self) -> None:
        with pytest.raises(ValueError):
            ApplicationConfig(container=ContainerConfig(aliases={"Redis": ""}))

    def test_round_trip_dict(self) -> None:
        config = ApplicationConfig(debug=True, container=ContainerConfig(cache_fakes=True))

        data = config.to_dict()

        assert "config_file_path" not in data
        assert ApplicationConfig.from_dict(data) == config
