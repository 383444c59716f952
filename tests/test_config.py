"""
Unit tests for clubs.config.
"""
import pytest
import tomllib

from clubs.config import DEFAULT_BASE_URL, Config, default_config_path
from clubs.errors import ConfigError


class TestConfig:
    """Test loading and writing the configuration."""

    def test_defaults(self):
        config = Config()
        assert config.base_url == DEFAULT_BASE_URL
        assert config.message_timeout == 5.0
        assert config.request_timeout is None
        assert config.show_search and config.show_category and config.show_sort

    def test_from_dict(self):
        config = Config.from_dict({
            "base_url": "http://school.test",
            "message_timeout": 3,
            "request_timeout": 2.5,
            "show_sort": False,
        })
        assert config.base_url == "http://school.test"
        assert config.message_timeout == 3.0
        assert config.request_timeout == 2.5
        assert config.show_sort is False
        assert config.show_search is True

    def test_missing_file_gives_defaults(self, tmp_path, monkeypatch):
        monkeypatch.delenv("CLUBS_URL", raising=False)
        assert Config.load(tmp_path / "missing.toml") == Config()

    def test_env_and_argument_override(self, tmp_path, monkeypatch):
        path = tmp_path / "config.toml"
        path.write_text('base_url = "http://file.test"\n')

        monkeypatch.setenv("CLUBS_URL", "http://env.test")
        assert Config.load(path).base_url == "http://env.test"
        assert Config.load(path, base_url="http://flag.test").base_url == "http://flag.test"

    def test_broken_file(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("message_timeout = [")
        with pytest.raises(ConfigError):
            Config.load(path)

    def test_write_round_trip(self, tmp_path, monkeypatch):
        monkeypatch.delenv("CLUBS_URL", raising=False)
        path = tmp_path / "nested" / "config.toml"
        config = Config(base_url="http://school.test", show_category=False)

        config.write(path)

        assert "request_timeout" not in tomllib.loads(path.read_text())
        assert Config.load(path) == config

    def test_default_path_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CLUBS_CONFIG", str(tmp_path / "clubs.toml"))
        assert default_config_path() == tmp_path / "clubs.toml"

    def test_default_path_xdg(self, tmp_path, monkeypatch):
        monkeypatch.delenv("CLUBS_CONFIG", raising=False)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert default_config_path() == tmp_path / "clubs" / "config.toml"
