"""Exit handling utilities for the CLI."""

from typing import NoReturn

import typer

from ocmops.cli.common.output import out
from ocmops.core.errors import ValidationError


def ok_exit(msg: str | None = None) -> NoReturn:
    """Exit successfully with an optional informational message."""
    if msg:
        out.info(msg)
    raise typer.Exit(0)


def die(msg: str, code: int = 1) -> NoReturn:
    """Exit with an error message and optional exit code."""
    out.error(msg)
    raise typer.Exit(code)


def warn_exit(msg: str, code: int = 0) -> NoReturn:
    """Exit with a warning message and optional exit code."""
    out.warn(msg)
    raise typer.Exit(code)


def exit_from_exc(exc: Exception, *, message: str, code: int | None = None) -> NoReturn:
    """
    Print an error message and exit, chaining the original exception.

    Without an explicit code, invalid input exits with 2 and every other
    failure with 1.
    """
    if code is None:
        code = 2 if isinstance(exc, ValidationError) else 1
    out.error(message)
    raise typer.Exit(code) from exc
