"""CLI handlers for config commands."""

from __future__ import annotations

import json

import click

from agentcommander.commands._helpers import exit_error
from agentcommander.config import (
    check_read_chunk_bytes,
    default_config_path,
    init_config,
    load_config,
)
from agentcommander.errors import ConfigurationError


@click.group("config")
def config_group():
    """Manage configuration."""
    pass


@config_group.command("init")
def config_init():
    """Create default configuration file."""
    path = init_config()
    click.echo(f"Configuration created at: {path}")


@config_group.command("show")
def config_show():
    """Show current configuration."""
    try:
        config = load_config()
    except ConfigurationError as e:
        exit_error(e)
    click.echo(f"Config file: {config.config_path}")
    click.echo(f"  Default tool: {config.general.default_tool}")
    click.echo(f"  Shell: {config.general.shell}")
    click.echo(f"  Isolation: {config.isolation.default_mode}")
    click.echo(f"  Docker image: {config.docker.image}")
    click.echo(f"  Compact input: {config.streaming.compact_input}")
    click.echo(f"  Read chunk: {config.streaming.read_chunk_bytes} bytes")


def _coerce(value: str):
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    if value.isdigit():
        return int(value)
    if value.startswith("[") or value.startswith("{"):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    return value


@config_group.command("set")
@click.argument("key")
@click.argument("value")
def config_set(key: str, value: str):
    """Set a configuration value.

    Modifies the TOML config file. Key uses dot notation, e.g.:
    general.default_tool, docker.image, streaming.compact_input
    """
    import tomli_w

    path = default_config_path()
    if not path.exists():
        click.echo("No config file found. Run 'agentcommander config init' first.", err=True)
        return

    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    with open(path, "rb") as f:
        data = tomllib.load(f)

    parts = key.split(".")
    target = data
    for part in parts[:-1]:
        target = target.setdefault(part, {})
    coerced = _coerce(value)
    if key == "streaming.read_chunk_bytes":
        try:
            check_read_chunk_bytes(coerced)
        except ConfigurationError as e:
            exit_error(e)
    target[parts[-1]] = coerced

    with open(path, "wb") as f:
        tomli_w.dump(data, f)

    click.echo(f"Set {key} = {value}")
