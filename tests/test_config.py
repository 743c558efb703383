"""
Tests for settings loading and logging configuration.
"""

import logging

import pytest

from lapbom.utils.config import (
    DEFAULT_IMAGE_MAX_SIZE,
    DEFAULT_MODEL,
    Settings,
    configure_logging,
    load_settings,
)
from lapbom.utils.errors import ConfigError


ENV_VARS = ["GEMINI_API_KEY", "API_KEY", "LAPBOM_MODEL", "LAPBOM_IMAGE_MAX_SIZE", "LAPBOM_LOG_LEVEL"]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Empty environment and a .env path that does not exist."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return tmp_path / "missing.env"


class TestLoadSettings:
    """Test reading settings from the environment."""

    def test_defaults(self, clean_env):
        settings = load_settings(clean_env)

        assert settings.api_key is None
        assert settings.model == DEFAULT_MODEL
        assert settings.image_max_size == DEFAULT_IMAGE_MAX_SIZE
        assert settings.log_level == "WARNING"

    def test_gemini_key_preferred(self, clean_env, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "primary")
        monkeypatch.setenv("API_KEY", "fallback")

        assert load_settings(clean_env).api_key == "primary"

    def test_api_key_fallback(self, clean_env, monkeypatch):
        monkeypatch.setenv("API_KEY", "fallback")

        assert load_settings(clean_env).api_key == "fallback"

    def test_overrides(self, clean_env, monkeypatch):
        monkeypatch.setenv("LAPBOM_MODEL", "gemini-2.5-pro")
        monkeypatch.setenv("LAPBOM_IMAGE_MAX_SIZE", "512")
        monkeypatch.setenv("LAPBOM_LOG_LEVEL", "debug")

        settings = load_settings(clean_env)

        assert settings.model == "gemini-2.5-pro"
        assert settings.image_max_size == 512
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize("raw", ["big", "0", "-5"])
    def test_invalid_image_size(self, clean_env, monkeypatch, raw):
        monkeypatch.setenv("LAPBOM_IMAGE_MAX_SIZE", raw)

        with pytest.raises(ConfigError):
            load_settings(clean_env)

    def test_dotenv_file(self, clean_env, monkeypatch, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("GEMINI_API_KEY=from-file\nLAPBOM_MODEL=file-model\n")
        # load_dotenv writes into os.environ; let monkeypatch undo it
        monkeypatch.setenv("GEMINI_API_KEY", "")
        monkeypatch.setenv("LAPBOM_MODEL", "")
        monkeypatch.delenv("GEMINI_API_KEY")
        monkeypatch.delenv("LAPBOM_MODEL")

        settings = load_settings(env_file)

        assert settings.api_key == "from-file"
        assert settings.model == "file-model"

    def test_environment_wins_over_dotenv(self, clean_env, monkeypatch, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("GEMINI_API_KEY=from-file\n")
        monkeypatch.setenv("GEMINI_API_KEY", "from-env")

        assert load_settings(env_file).api_key == "from-env"


class TestSettings:
    def test_require_api_key(self):
        assert Settings(api_key="k").require_api_key() == "k"

    def test_require_api_key_missing(self):
        with pytest.raises(ConfigError) as exc_info:
            Settings().require_api_key()

        assert "API key" in exc_info.value.user_message


class TestConfigureLogging:
    def test_unknown_level_falls_back(self, monkeypatch):
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))

        configure_logging("chatty")

        assert calls["level"] == logging.WARNING

    def test_named_level(self, monkeypatch):
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))

        configure_logging("debug")

        assert calls["level"] == logging.DEBUG
