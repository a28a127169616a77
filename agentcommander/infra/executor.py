"""Run shell commands for agents: blocking, non-blocking handle, or detached."""

from __future__ import annotations

import asyncio
import contextlib
import inspect
import logging
import signal
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

import click

from agentcommander.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_SHELL = "bash"

#: Bytes requested per pipe read.
DEFAULT_READ_CHUNK = 64 * 1024

LineCallback = Callable[[str], None]

# Detached children are reaped in the background so their transports close.
_reapers: set[asyncio.Task] = set()


@dataclass(frozen=True)
class ExecutionResult:
    """Result of running a command to completion."""

    exit_code: int
    stdout: str
    stderr: str
    command: str


def _exit_code(returncode: int | None) -> int:
    # asyncio reports death-by-signal as a negative return code.
    if returncode is None or returncode < 0:
        return 1
    return returncode


def _decode_line(raw: bytes) -> str:
    text = raw.decode(errors="replace")
    if text.endswith("\r"):
        text = text[:-1]
    return text


def _print_dry_run(command: str) -> None:
    click.echo("Dry run - command that would be executed:")
    click.echo(command)


class ProcessHandle:
    """Owns one running child process and its stdout/stderr pipes.

    Both pipes are drained concurrently from the moment the handle is
    created, so a chatty child never blocks on a full pipe. Lines are
    accumulated in order per pipe and passed to the optional callbacks as
    they arrive.
    """

    def __init__(
        self,
        command: str,
        process: asyncio.subprocess.Process,
        attached: bool = False,
        on_stdout: LineCallback | None = None,
        on_stderr: LineCallback | None = None,
        read_chunk: int = DEFAULT_READ_CHUNK,
    ) -> None:
        self.command = command
        self._process = process
        self._read_chunk = read_chunk
        self._stdout_lines: list[str] = []
        self._stderr_lines: list[str] = []
        self._exit_code: int | None = None

        stdout_callbacks = [self._stdout_lines.append]
        stderr_callbacks = [self._stderr_lines.append]
        if attached:
            stdout_callbacks.append(click.echo)
            stderr_callbacks.append(lambda line: click.echo(line, err=True))
        if on_stdout:
            stdout_callbacks.append(on_stdout)
        if on_stderr:
            stderr_callbacks.append(on_stderr)

        self._readers = asyncio.gather(
            self._drain(process.stdout, stdout_callbacks, "stdout"),
            self._drain(process.stderr, stderr_callbacks, "stderr"),
        )

    @property
    def pid(self) -> int | None:
        return self._process.pid

    async def _drain(
        self,
        stream: asyncio.StreamReader | None,
        callbacks: Iterable[LineCallback],
        name: str,
    ) -> None:
        if stream is None:
            return
        pending = b""
        while True:
            chunk = await stream.read(self._read_chunk)
            if not chunk:
                break
            pending += chunk
            *lines, pending = pending.split(b"\n")
            for raw in lines:
                self._emit(_decode_line(raw), callbacks)
        if pending:
            self._emit(_decode_line(pending), callbacks)
        logger.debug("%s closed for pid %s", name, self.pid)

    @staticmethod
    def _emit(line: str, callbacks: Iterable[LineCallback]) -> None:
        for callback in callbacks:
            try:
                callback(line)
            except Exception:
                logger.warning("Output callback %r failed", callback, exc_info=True)

    async def wait_for_exit(self) -> int:
        """Wait for both pipes to close, then for the process to exit.

        The exit code is cached; later calls return it without touching the
        pipes again.
        """
        if self._exit_code is not None:
            return self._exit_code

        # Shielded so a cancelled caller leaves the pipes draining.
        await asyncio.shield(self._readers)
        returncode = await asyncio.shield(self._process.wait())
        self._exit_code = _exit_code(returncode)
        logger.debug("pid %s exited with %d", self.pid, self._exit_code)
        return self._exit_code

    def has_exited(self) -> bool:
        return self._exit_code is not None

    def get_output(self) -> tuple[str, str, int | None]:
        """Return (stdout, stderr, exit code or None) collected so far."""
        stdout = "".join(f"{line}\n" for line in self._stdout_lines)
        stderr = "".join(f"{line}\n" for line in self._stderr_lines)
        return stdout, stderr, self._exit_code

    def terminate(self) -> None:
        """Send SIGTERM to the child if it is still running."""
        if self._process.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                self._process.terminate()


async def start_command(
    command: str,
    attached: bool = False,
    on_stdout: LineCallback | None = None,
    on_stderr: LineCallback | None = None,
    shell: str = DEFAULT_SHELL,
    read_chunk: int = DEFAULT_READ_CHUNK,
) -> ProcessHandle:
    """Spawn ``shell -c command`` and return without waiting for it."""
    if read_chunk < 1:
        raise ConfigurationError(f"read_chunk must be at least 1 byte, got {read_chunk}")
    process = await asyncio.create_subprocess_exec(
        shell,
        "-c",
        command,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    logger.debug("Spawned pid %s: %s", process.pid, command)
    return ProcessHandle(
        command,
        process,
        attached=attached,
        on_stdout=on_stdout,
        on_stderr=on_stderr,
        read_chunk=read_chunk,
    )


async def execute_command(
    command: str,
    dry_run: bool = False,
    attached: bool = False,
    shell: str = DEFAULT_SHELL,
) -> ExecutionResult:
    """Run a command to completion and collect its output.

    With ``attached`` each line is echoed to our own stdout/stderr as it
    arrives. A dry run prints the command and spawns nothing.
    """
    if dry_run:
        _print_dry_run(command)
        return ExecutionResult(exit_code=0, stdout="", stderr="", command=command)

    handle = await start_command(command, attached=attached, shell=shell)
    exit_code = await handle.wait_for_exit()
    stdout, stderr, _ = handle.get_output()
    return ExecutionResult(exit_code=exit_code, stdout=stdout, stderr=stderr, command=command)


async def execute_detached(command: str, shell: str = DEFAULT_SHELL) -> int | None:
    """Spawn a command with all standard streams discarded; return its pid."""
    process = await asyncio.create_subprocess_exec(
        shell,
        "-c",
        command,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.DEVNULL,
        stderr=asyncio.subprocess.DEVNULL,
        start_new_session=True,
    )
    logger.info("Detached pid %s: %s", process.pid, command)
    reaper = asyncio.ensure_future(process.wait())
    _reapers.add(reaper)
    reaper.add_done_callback(_reapers.discard)
    return process.pid


def setup_signal_handler(
    cleanup: Callable[[], Any],
    signals: Iterable[signal.Signals] = (signal.SIGINT, signal.SIGTERM),
) -> Callable[[], None]:
    """Run ``cleanup`` from the event loop when an interrupt arrives.

    Must be called with a running loop. ``cleanup`` may be a plain function
    or a coroutine function. Returns a function that removes the handlers.
    """
    loop = asyncio.get_running_loop()
    installed: list[signal.Signals] = []

    def _handle() -> None:
        result = cleanup()
        if inspect.isawaitable(result):
            asyncio.ensure_future(result)

    for sig in signals:
        try:
            loop.add_signal_handler(sig, _handle)
        except (NotImplementedError, RuntimeError, ValueError):
            logger.debug("Signal handlers unavailable for %s", sig)
            continue
        installed.append(sig)

    def remove() -> None:
        for sig in installed:
            loop.remove_signal_handler(sig)
        installed.clear()

    return remove
