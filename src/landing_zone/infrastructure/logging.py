"""Logging & console helpers.

Features:
    * RichHandler based console logging (color, tracebacks)
    * Optional JSON logging mode (``LOG_JSON=1``) for machine ingest
    * Helper utilities (`get_console`, `render_panel`) so service layers avoid
      importing rich directly, keeping presentation concerns centralized.
"""

from __future__ import annotations

import json
import logging
import os

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

_INITIALIZED = False
_JSON_MODE = False
_CONSOLE: Console | None = None


class _JsonHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        try:
            data = {
                "level": record.levelname,
                "name": record.name,
                "message": record.getMessage(),
            }
            if record.exc_info:
                data["exc_info"] = logging.Formatter().formatException(record.exc_info)
            print(json.dumps(data, ensure_ascii=False))
        except Exception:  # pragma: no cover
            self.handleError(record)


def setup_logging(level: str | None = None, json_mode: bool | None = None) -> None:
    global _INITIALIZED, _JSON_MODE
    if _INITIALIZED and json_mode is None:
        return
    if json_mode is None:
        json_mode = os.getenv("LOG_JSON", "").lower() in {"1", "true", "yes"}
    _JSON_MODE = json_mode
    lvl_name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    lvl = getattr(logging, lvl_name, logging.INFO)
    handler: logging.Handler
    if _JSON_MODE:
        handler = _JsonHandler()
    else:
        handler = RichHandler(
            console=Console(stderr=True), rich_tracebacks=True, show_path=False, markup=False
        )
    logging.basicConfig(level=lvl, handlers=[handler], force=True, format="%(message)s")
    _INITIALIZED = True


def get_console() -> Console:
    """Return the shared rich Console.

    Services should *not* import rich directly; use this accessor to keep
    presentation centralized.
    """
    global _CONSOLE
    if _CONSOLE is None:
        _CONSOLE = Console()
    return _CONSOLE


def render_panel(title: str, body: str, *, style: str = "cyan") -> None:
    get_console().print(Panel.fit(body, title=title, border_style=style))


def log_plan_start(*, name: str, description: str | None) -> None:
    """Standard banner printed before a plan is built."""
    desc = description or ""
    body = f"[bold cyan]Parameter set:[/bold cyan] {name}\n[dim]{desc}[/dim]"
    render_panel("plan", body, style="cyan")


__all__ = [
    "get_console",
    "log_plan_start",
    "render_panel",
    "setup_logging",
]
