"""
Rich-based rendering of a finished batch (``batchexec --summary``).
"""

from __future__ import annotations

import io
from typing import Any, List

from .models import BatchResult

_STATUS_STYLE = {
    "succeeded": "bold green",
    "failed": "bold red",
    "launch_failure": "magenta",
    "wait_failure": "yellow",
}


def _fmt_elapsed(sec: float | None) -> str:
    if sec is None:
        return "-"
    sec = int(sec)
    h, rem = divmod(sec, 3600)
    m, s = divmod(rem, 60)
    return f"{h:d}:{m:02d}:{s:02d}" if h else f"{m:02d}:{s:02d}"


def build_summary_renderables(result: BatchResult) -> List[Any]:
    """Return a header line and a per-command table."""
    from rich.table import Table
    from rich.text import Text

    header = Text(
        f"{result.succeeded}/{result.total} ok, {result.failed} failed, "
        f"{result.launch_failures} launch failures, {result.wait_failures} wait failures",
        style="bold",
    )
    if not result.reports:
        return [header, Text("(no processes)")]

    table = Table(expand=True, show_lines=False)
    table.add_column("#", justify="right")
    table.add_column("command", style="bold")
    table.add_column("status")
    table.add_column("exit", justify="right")
    table.add_column("elapsed", justify="right")
    table.add_column("error")
    for r in result.reports:
        table.add_row(
            str(r.index),
            r.command,
            Text(r.status, style=_STATUS_STYLE.get(r.status, "white")),
            str(r.outcome) if r.outcome is not None else "-",
            _fmt_elapsed(r.duration),
            r.error.describe() if r.error is not None else "",
        )
    return [header, table]


def render_summary(result: BatchResult, width: int = 120) -> str:
    """One-shot render of the summary, returned as plain text."""
    from rich.console import Console, Group

    console = Console(record=True, width=width, file=io.StringIO())
    console.print(Group(*build_summary_renderables(result)))
    return console.export_text(clear=False)

