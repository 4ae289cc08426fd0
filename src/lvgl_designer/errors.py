"""Typed exceptions and error handling decorator."""

from __future__ import annotations

import functools
from typing import Any, Callable, TypeVar

from rich.console import Console

F = TypeVar("F", bound=Callable[..., Any])

err_console = Console(stderr=True)


class LvglDesignerError(Exception):
    """Base exception for lvgl-designer."""

    exit_code: int = 1


class DocumentError(LvglDesignerError):
    """The configuration text could not be parsed as YAML."""

    exit_code = 2


class WidgetNotFoundError(LvglDesignerError):
    """No widget with the requested id or name exists in the tree."""

    exit_code = 4

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Widget '{key}' not found")


class ConfigurationError(LvglDesignerError):
    """Invalid or unreadable editor configuration."""

    exit_code = 6


class ValidationError(LvglDesignerError):
    """A value supplied on the command line was rejected."""

    exit_code = 7

    def __init__(self, message: str = "") -> None:
        super().__init__(message or "Validation error")


def error_handler(func: F) -> F:
    """Decorator that catches LvglDesignerError and prints user-friendly messages."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except LvglDesignerError as exc:
            err_console.print(f"[bold red]Error:[/] {exc}")
            raise SystemExit(exc.exit_code)
        except ValueError as exc:
            err_console.print(f"[bold red]Error:[/] {exc}")
            raise SystemExit(1)

    return wrapper  # type: ignore[return-value]
