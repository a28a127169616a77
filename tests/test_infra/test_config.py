"""Tests for config loading."""

from pathlib import Path

import pytest

from agentcommander.config import AppConfig, default_config_path, init_config, load_config
from agentcommander.errors import ConfigurationError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "AGENT_COMMANDER_CONFIG",
        "AGENT_COMMANDER_SHELL",
        "AGENT_COMMANDER_DOCKER_IMAGE",
        "AGENT_COMMANDER_DEFAULT_TOOL",
    ):
        monkeypatch.delenv(name, raising=False)


class TestConfig:
    def test_load_defaults(self):
        """Loading with no file should return defaults."""
        config = load_config(Path("/nonexistent/config.toml"))
        assert config.general.default_tool == "claude"
        assert config.general.shell == "bash"
        assert config.isolation.default_mode == "none"
        assert config.docker.image == "node:18-slim"
        assert config.streaming.compact_input is True
        assert config.streaming.read_chunk_bytes == 65536

    def test_dataclass_defaults_match_file_defaults(self):
        loaded = load_config(Path("/nonexistent/config.toml"))
        default = AppConfig()
        assert loaded.general == default.general
        assert loaded.docker == default.docker
        assert loaded.streaming == default.streaming

    def test_init_config(self, tmp_path):
        path = tmp_path / "nested" / "config.toml"
        result = init_config(path)
        assert result == path
        assert path.exists()
        config = load_config(path)
        assert config.config_path == path
        assert config.general.default_tool == "claude"

    def test_partial_file(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[docker]\nimage = "ubuntu:24.04"\n')
        config = load_config(path)
        assert config.docker.image == "ubuntu:24.04"
        assert config.general.shell == "bash"

    def test_env_overlay(self, tmp_path, monkeypatch):
        path = init_config(tmp_path / "config.toml")
        monkeypatch.setenv("AGENT_COMMANDER_SHELL", "/bin/sh")
        monkeypatch.setenv("AGENT_COMMANDER_DOCKER_IMAGE", "alpine:3")
        monkeypatch.setenv("AGENT_COMMANDER_DEFAULT_TOOL", "codex")
        config = load_config(path)
        assert config.general.shell == "/bin/sh"
        assert config.docker.image == "alpine:3"
        assert config.general.default_tool == "codex"

    def test_config_path_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("AGENT_COMMANDER_CONFIG", str(tmp_path / "custom.toml"))
        assert default_config_path() == tmp_path / "custom.toml"
        assert init_config() == tmp_path / "custom.toml"

    @pytest.mark.parametrize("value", ["0", "-4", '"big"'])
    def test_read_chunk_bytes_must_be_positive(self, tmp_path, value):
        path = tmp_path / "config.toml"
        path.write_text(f"[streaming]\nread_chunk_bytes = {value}\n")
        with pytest.raises(ConfigurationError, match="read_chunk_bytes"):
            load_config(path)
