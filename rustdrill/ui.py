"""Coloured status lines printed to the terminal."""

from __future__ import annotations

import os

from rich.console import Console
from rich.text import Text


def _no_emoji() -> bool:
    return "NO_EMOJI" in os.environ


def _emit(icon: str, message: str, colour: str) -> str:
    line = Text.assemble((icon, colour), " ", (message, colour))
    Console(soft_wrap=True, highlight=False).print(line)
    return line.plain


def warn(message: str) -> str:
    """Print a red warning line and return its plain text."""
    icon = "!" if _no_emoji() else "⚠️ "
    return _emit(icon, str(message), "red")


def success(message: str) -> str:
    """Print a green success line and return its plain text."""
    icon = "✓" if _no_emoji() else "✅"
    return _emit(icon, str(message), "green")