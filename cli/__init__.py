"""Command-line interface for loading and summarizing sensor readings."""

from importlib import import_module
from types import ModuleType


def __getattr__(name: str) -> ModuleType:
    if name == "app":
        return import_module("cli.app")
    raise AttributeError(name)

# The Typer instance stays in ``cli.app`` so that tests can patch attributes on
# that module path.

__all__ = []
