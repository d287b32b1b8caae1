"""Keyboard shortcut language, typed argument formats and terminal colors for a console."""

__version__ = "0.1.0"

__all__ = [
    "arguments",
    "colors",
    "shortcut_parser",
    "shortcut_runner",
    "shortcut_suggest",
]