"""Shell quoting helpers shared by the tool and isolation command builders."""

from __future__ import annotations


def escape_single_quotes(text: str) -> str:
    """Escape text for embedding inside a single-quoted shell string."""
    return text.replace("'", "'\\''")


def escape_for_bash_c(text: str) -> str:
    """Escape text for embedding inside ``bash -c "..."``."""
    return (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("$", "\\$")
        .replace("`", "\\`")
    )


def build_piped_command(input_text: str, command: str) -> str:
    """Feed ``input_text`` to ``command`` on stdin via printf."""
    return f"printf '%s' '{escape_single_quotes(input_text)}' | {command}"
