"""Terminal front-end exports."""

from .console import ConsoleDependencies, ConsoleRuntime

__all__ = ["ConsoleDependencies", "ConsoleRuntime"]
