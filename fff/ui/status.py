"""Per-URL status lines rendered with Rich."""

from __future__ import annotations

from threading import Lock
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape

if TYPE_CHECKING:  # pragma: no cover
    from ..dispatcher import ProcessingResult


def status_style(status: int) -> str | None:
    if 200 <= status < 300:
        return "green"
    if 300 <= status < 400:
        return "cyan"
    if 400 <= status < 500:
        return "yellow"
    if 500 <= status < 600:
        return "red"
    return None


class StatusReporter:
    """Print one line per finished URL; safe to call from worker threads."""

    def __init__(self, console: Console | None = None, enabled: bool = True) -> None:
        self.enabled = enabled
        self._console = console or Console(highlight=False)
        self._lock = Lock()

    def report(self, result: "ProcessingResult") -> None:
        if not self.enabled:
            return
        url = escape(result.url)
        if result.status in ("saved", "duplicate"):
            line = f"{url} [green]Saved ({result.status_code})[/green]"
        elif result.status_code is not None and result.status != "write_failed":
            style = status_style(result.status_code)
            code = str(result.status_code)
            line = f"{url} [{style}]{code}[/{style}]" if style else f"{url} {code}"
        else:
            line = f"{url} [red]{escape(result.reason or result.status)}[/red]"
        with self._lock:
            self._console.print(line)


__all__ = ["StatusReporter", "status_style"]
