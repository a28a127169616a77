"""Shared CLI helpers: option validation, logging setup, async runner."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import NoReturn

import click

from agentcommander.models.agent import IsolationMode

START_ISOLATION_MODES = (IsolationMode.NONE.value, IsolationMode.SCREEN.value, IsolationMode.DOCKER.value)
STOP_ISOLATION_MODES = (IsolationMode.SCREEN.value, IsolationMode.DOCKER.value)


def run(coro):
    """Run an async function from sync context."""
    return asyncio.run(coro)


def configure_logging(debug: bool) -> None:
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _target_errors(isolation: str, screen_name: str, container_name: str) -> list[str]:
    errors = []
    if isolation == IsolationMode.SCREEN and not screen_name:
        errors.append("--screen-name is required for screen isolation")
    if isolation == IsolationMode.DOCKER and not container_name:
        errors.append("--container-name is required for docker isolation")
    return errors


def validate_start_options(
    tool: str,
    working_directory: str,
    isolation: str,
    screen_name: str,
    container_name: str,
) -> list[str]:
    """Collect every problem with start-agent options, in a stable order."""
    errors = []
    if not tool:
        errors.append("--tool is required")
    if not working_directory:
        errors.append("--working-directory is required")
    errors.extend(_target_errors(isolation, screen_name, container_name))
    if isolation not in START_ISOLATION_MODES:
        errors.append(f"--isolation must be one of: {', '.join(START_ISOLATION_MODES)}")
    return errors


def validate_stop_options(isolation: str, screen_name: str, container_name: str) -> list[str]:
    """Collect every problem with stop-agent options."""
    if not isolation:
        return ["--isolation is required"]
    errors = []
    if isolation not in STOP_ISOLATION_MODES:
        errors.append(f"--isolation must be one of: {', '.join(STOP_ISOLATION_MODES)}")
    errors.extend(_target_errors(isolation, screen_name, container_name))
    return errors


def exit_invalid(errors: list[str], command_name: str) -> NoReturn:
    click.echo("Error: Invalid options\n", err=True)
    for error in errors:
        click.echo(f"  - {error}", err=True)
    click.echo(f'\nRun "{command_name} --help" for usage information.', err=True)
    raise SystemExit(1)


def exit_error(error: Exception) -> NoReturn:
    click.echo(f"Error: {error}", err=True)
    raise SystemExit(1)
