"""Configuration loading: TOML file + environment variable overlay."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]

from agentcommander.errors import ConfigurationError


DEFAULT_CONFIG_DIR = Path.home() / ".config" / "agentcommander"
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.toml"

#: Bytes requested per read from agent stdout/stderr pipes.
DEFAULT_READ_CHUNK_BYTES = 64 * 1024


def default_config_path() -> Path:
    """Config path, honouring AGENT_COMMANDER_CONFIG."""
    override = os.environ.get("AGENT_COMMANDER_CONFIG")
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_PATH


DEFAULT_CONFIG_TOML = """\
[general]
default_tool = "claude"
shell = "bash"

[isolation]
default_mode = "none"

[docker]
image = "node:18-slim"

[streaming]
compact_input = true
read_chunk_bytes = 65536
"""


@dataclass
class GeneralConfig:
    default_tool: str = "claude"
    shell: str = "bash"


@dataclass
class IsolationConfig:
    default_mode: str = "none"  # none, screen, docker


@dataclass
class DockerConfig:
    image: str = "node:18-slim"


@dataclass
class StreamingConfig:
    compact_input: bool = True
    read_chunk_bytes: int = DEFAULT_READ_CHUNK_BYTES


@dataclass
class AppConfig:
    general: GeneralConfig = field(default_factory=GeneralConfig)
    isolation: IsolationConfig = field(default_factory=IsolationConfig)
    docker: DockerConfig = field(default_factory=DockerConfig)
    streaming: StreamingConfig = field(default_factory=StreamingConfig)
    config_path: Path = DEFAULT_CONFIG_PATH


def _env_overlay(config: AppConfig) -> None:
    """Override config values with environment variables where applicable."""
    if shell := os.environ.get("AGENT_COMMANDER_SHELL"):
        config.general.shell = shell
    if tool := os.environ.get("AGENT_COMMANDER_DEFAULT_TOOL"):
        config.general.default_tool = tool
    if image := os.environ.get("AGENT_COMMANDER_DOCKER_IMAGE"):
        config.docker.image = image


def check_read_chunk_bytes(value: object) -> None:
    """Reject chunk sizes that would stop pipe reads from making progress."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigurationError(
            f"streaming.read_chunk_bytes must be a positive integer, got {value!r}"
        )


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration from TOML file with env var overlay."""
    path = config_path or default_config_path()

    if path.exists():
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    else:
        raw = tomllib.loads(DEFAULT_CONFIG_TOML)

    general_raw = raw.get("general", {})
    isolation_raw = raw.get("isolation", {})
    docker_raw = raw.get("docker", {})
    streaming_raw = raw.get("streaming", {})

    config = AppConfig(
        general=GeneralConfig(
            default_tool=general_raw.get("default_tool", "claude"),
            shell=general_raw.get("shell", "bash"),
        ),
        isolation=IsolationConfig(
            default_mode=isolation_raw.get("default_mode", "none"),
        ),
        docker=DockerConfig(
            image=docker_raw.get("image", "node:18-slim"),
        ),
        streaming=StreamingConfig(
            compact_input=streaming_raw.get("compact_input", True),
            read_chunk_bytes=streaming_raw.get("read_chunk_bytes", DEFAULT_READ_CHUNK_BYTES),
        ),
        config_path=path,
    )

    _env_overlay(config)
    check_read_chunk_bytes(config.streaming.read_chunk_bytes)
    return config


def init_config(config_path: Path | None = None) -> Path:
    """Create default config file."""
    path = config_path or default_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG_TOML)
    return path
