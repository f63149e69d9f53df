"""Tests for environment-driven configuration."""

import logging
from pathlib import Path

import pytest

from hookforge.core.config import HookforgeConfig, configure_logging


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("HOOKFORGE_MANIFEST", raising=False)
    monkeypatch.delenv("HOOKFORGE_LOG_LEVEL", raising=False)


@pytest.fixture
def restore_hookforge_logger():
    logger = logging.getLogger("hookforge")
    level = logger.level
    yield logger
    logger.setLevel(level)


class TestHookforgeConfig:
    def test_defaults(self):
        config = HookforgeConfig.from_env()
        assert config.manifest_path == Path("hookforge.yaml")
        assert config.log_level == "WARNING"

    def test_base_path(self, tmp_path):
        config = HookforgeConfig.from_env(tmp_path)
        assert config.manifest_path == tmp_path / "hookforge.yaml"

    def test_manifest_env_wins(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOOKFORGE_MANIFEST", "/etc/plugins.yaml")
        config = HookforgeConfig.from_env(tmp_path)
        assert config.manifest_path == Path("/etc/plugins.yaml")

    def test_log_level_env_is_normalized(self, monkeypatch):
        monkeypatch.setenv("HOOKFORGE_LOG_LEVEL", "debug")
        config = HookforgeConfig.from_env()
        assert config.log_level == "DEBUG"
        assert config.level == logging.DEBUG

    def test_unknown_level(self):
        config = HookforgeConfig(manifest_path=Path("x.yaml"), log_level="LOUD")
        with pytest.raises(ValueError, match="Unknown log level 'LOUD'"):
            config.level


class TestConfigureLogging:
    def test_sets_package_logger_level(self, restore_hookforge_logger):
        configure_logging(HookforgeConfig(manifest_path=Path("x.yaml"), log_level="INFO"))
        assert restore_hookforge_logger.level == logging.INFO

    def test_invalid_level_raises(self, restore_hookforge_logger):
        with pytest.raises(ValueError):
            configure_logging(HookforgeConfig(manifest_path=Path("x.yaml"), log_level="nope"))
