"""CLI handlers for inspecting the supported agent tools."""

from __future__ import annotations

import click

from agentcommander.config import load_config
from agentcommander.infra.tools import get_tool, list_tools


@click.group("tools")
def tools_group():
    """Inspect supported agent tools."""
    pass


@tools_group.command("list")
def tools_list():
    """List supported tools."""
    default = load_config().general.default_tool
    for name in list_tools():
        tool = get_tool(name)
        marker = "*" if name == default else " "
        click.echo(f"{marker} {name:<10} {tool.display_name} ({tool.executable})")


@tools_group.command("show")
@click.argument("name", required=False, default="")
def tools_show(name: str):
    """Show capabilities and model aliases of a tool (default: configured tool)."""
    name = name or load_config().general.default_tool
    try:
        tool = get_tool(name)
    except ValueError as e:
        click.echo(str(e), err=True)
        raise SystemExit(1) from e

    info = tool.describe()
    models = info.pop("models")
    click.echo(f"{info.pop('display_name')} ({info.pop('name')})")
    for key, value in info.items():
        click.echo(f"  {key}: {value}")
    if models:
        click.echo("\n  Models:")
        for alias, model_id in models.items():
            click.echo(f"    {alias} -> {model_id}")
