"""
Tests for environment configuration.
"""

import os
import tempfile

import pytest

from heyi.config import AppConfig, load_config
from heyi.errors import ConfigError


class TestLoadConfig:
    """Test cases for load_config."""

    def test_defaults(self):
        config = load_config({"HEYI_API_KEY": "sk-test"})
        assert config == AppConfig(api_key="sk-test", model="openai/gpt-4o-mini", crawler="fetch")

    def test_overrides(self):
        config = load_config({
            "HEYI_API_KEY": "sk-test",
            "HEYI_MODEL": "anthropic/claude-3.5-sonnet",
            "HEYI_CRAWLER": "chrome",
        })
        assert config.model == "anthropic/claude-3.5-sonnet"
        assert config.crawler == "chrome"

    def test_empty_optional_values_use_defaults(self):
        config = load_config({"HEYI_API_KEY": "sk-test", "HEYI_MODEL": "", "HEYI_CRAWLER": ""})
        assert config.model == "openai/gpt-4o-mini"
        assert config.crawler == "fetch"

    @pytest.mark.parametrize("environ", [{}, {"HEYI_API_KEY": ""}, {"HEYI_API_KEY": "   "}])
    def test_missing_api_key(self, environ):
        with pytest.raises(ConfigError, match="HEYI_API_KEY environment variable is required"):
            load_config(environ)

    def test_repr_hides_api_key(self):
        assert "sk-secret" not in repr(AppConfig(api_key="sk-secret"))

    def test_config_is_frozen(self):
        config = AppConfig(api_key="sk-test")
        with pytest.raises(Exception):
            config.model = "other"

    def test_reads_dotenv_file(self, monkeypatch):
        monkeypatch.delenv("HEYI_API_KEY", raising=False)
        monkeypatch.delenv("HEYI_MODEL", raising=False)
        try:
            with tempfile.TemporaryDirectory() as tmpdir:
                with open(os.path.join(tmpdir, ".env"), "w", encoding="utf-8") as f:
                    f.write("HEYI_API_KEY=sk-from-dotenv\nHEYI_MODEL=meta/llama\n")
                monkeypatch.chdir(tmpdir)
                config = load_config()
        finally:
            # load_dotenv writes straight into os.environ
            os.environ.pop("HEYI_API_KEY", None)
            os.environ.pop("HEYI_MODEL", None)
        assert config.api_key == "sk-from-dotenv"
        assert config.model == "meta/llama"

    def test_environment_beats_dotenv(self, monkeypatch):
        monkeypatch.setenv("HEYI_API_KEY", "sk-from-env")
        with tempfile.TemporaryDirectory() as tmpdir:
            with open(os.path.join(tmpdir, ".env"), "w", encoding="utf-8") as f:
                f.write("HEYI_API_KEY=sk-from-dotenv\n")
            monkeypatch.chdir(tmpdir)
            config = load_config()
        assert config.api_key == "sk-from-env"
