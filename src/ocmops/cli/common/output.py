"""Output formatting utilities for the CLI."""

from __future__ import annotations

import json
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

import questionary
from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from ocmops.cli.common.tui_style import (
    QUESTIONARY_STYLE_CONFIRM,
    QUESTIONARY_STYLE_INPUT,
)

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)
err_console = Console(theme=_THEME, stderr=True)


def dig(data: Mapping[str, Any], path: str) -> Any:
    """Resolve a dotted path (e.g. `gcp.project_id`) in nested mappings."""
    value: Any = data
    for part in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part)
    return value


def column_header(path: str) -> str:
    """Render a dotted column path as a table header."""
    return path.replace(".", " ").replace("_", " ").upper()


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages, prompts and tables."""

    def _q_try(self, fn, *args, **kwargs):
        """Call questionary prompts and drop unsupported kwargs on older versions."""
        try:
            return fn(*args, **kwargs)
        except TypeError:
            for k in ("instruction", "auto_enter"):
                kwargs.pop(k, None)
            return fn(*args, **kwargs)

    def _q(self, message: str) -> str:
        """Prefix Questionary prompts to keep them recognisable."""
        return f"[OCMOPS] {message}"

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        err_console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        err_console.print(f"[err]✗[/] {msg}")

    def print(self, msg: str) -> None:
        """Print a raw Rich-formatted message to the console."""
        console.print(msg)

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs with aligned values."""
        width = max((len(k) for k in items), default=0) + 1
        for k, v in items.items():
            console.print(f"[meta]{(k + ':').ljust(width)}[/] {v}", highlight=False)

    def ask_text(
        self, message: str, *, help_text: str | None = None, secret: bool = False
    ) -> str:
        """
        Prompt the user for a single value.

        Returns the stripped answer, or an empty string when the prompt is
        cancelled (Ctrl-C / Ctrl-D).
        """
        fn = questionary.password if secret else questionary.text
        prompt = self._q_try(
            fn,
            self._q(message),
            style=QUESTIONARY_STYLE_INPUT,
            qmark="✦",
            instruction=help_text,
        )
        return (prompt.ask() or "").strip()

    def confirm(self, message: str, *, default: bool = False) -> bool:
        """
        Ask the user for confirmation using a standardized Questionary prompt.

        Args:
            message: Confirmation question shown to the user.
            default: Default answer if the user just presses enter.

        Returns:
            True if the user confirms, False otherwise.
        """
        # Questionary renders `instruction=...` inline next to the echoed answer.
        console.print("[meta]Use y/n then Enter[/]")

        prompt = self._q_try(
            questionary.confirm,
            self._q(message),
            default=default,
            style=QUESTIONARY_STYLE_CONFIRM,
            qmark="✦",
            auto_enter=False,
        )
        return bool(prompt.ask())

    def dump_json(self, payload: Any, *, single: bool = False, stderr: bool = False) -> None:
        """Print a JSON document, pretty by default or on one line."""
        target = err_console if stderr else console
        if isinstance(payload, str):
            target.print(payload, markup=False, highlight=False)
        elif single:
            target.print(json.dumps(payload, separators=(",", ":")), markup=False, highlight=False)
        else:
            target.print_json(data=payload)

    def dns_zones_table(
        self,
        domains: Iterable[Any],
        columns: Sequence[str],
        *,
        show_header: bool = True,
        title: str | None = None,
    ) -> None:
        """
        Expects objects with .to_dict() (like ocmops.core.dns.DnsDomain);
        each column is a dotted path into that dict.
        """
        t = Table(title=title, show_header=show_header, box=None, pad_edge=False)
        for i, path in enumerate(columns):
            t.add_column(column_header(path), style="ok" if i == 0 else None)

        for d in domains:
            data = d.to_dict()
            t.add_row(*[str(dig(data, path) or "") for path in columns])

        console.print(t)

    def versions_table(
        self, versions: Iterable[str], default: str, title: str = "Versions"
    ) -> None:
        """Render enabled versions, marking the default one."""
        t = Table(title=title, show_lines=False)
        t.add_column("Version", style="ok", no_wrap=True)
        t.add_column("Default", style="meta")

        for v in versions:
            t.add_row(v, "yes" if v == default else "")

        console.print(t)


out = Out()
