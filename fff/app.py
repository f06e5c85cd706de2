"""Typer CLI entrypoint for fff."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.markup import escape

from . import __version__
from .config import load_config
from .dispatcher import EXIT_CONFIG_ERROR, Dispatcher
from .errors import ConfigurationError
from .logging_conf import configure_logging
from .ui import StatusReporter

app = typer.Typer(
    help="Request URLs provided on stdin fairly frickin' fast.",
    add_completion=False,
    rich_markup_mode=None,
)

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"fff {__version__}")
        raise typer.Exit()


def _collect_overrides(**options: Any) -> dict[str, Any]:
    """Keep only the options given on the command line."""

    overrides: dict[str, Any] = {}
    for key, value in options.items():
        if value is None or value is False or value == []:
            continue
        overrides[key] = value
    return overrides


@app.command()
def main(
    body: Optional[str] = typer.Option(None, "--body", "-b", help="Request body."),
    delay: Optional[int] = typer.Option(
        None, "--delay", "-d", help="Delay between issuing requests (ms). [default: 100]"
    ),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Add a header to the request (repeatable)."
    ),
    ignore_html: bool = typer.Option(
        False, "--ignore-html", help="Don't save HTML files.", is_flag=True
    ),
    ignore_empty: bool = typer.Option(
        False, "--ignore-empty", help="Don't save empty files.", is_flag=True
    ),
    keep_alive: bool = typer.Option(
        False, "--keep-alive", "--keep-alives", "-k", help="Use HTTP Keep-Alive.", is_flag=True
    ),
    method: Optional[str] = typer.Option(
        None, "--method", "-m", help="HTTP method (default GET, or POST with a body)."
    ),
    match: Optional[str] = typer.Option(
        None, "--match", "-M", help="Save responses that include this string in the body."
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Directory to save responses in. [default: out]"
    ),
    save_status: Optional[list[int]] = typer.Option(
        None, "--save-status", "-s", help="Save responses with this status (repeatable)."
    ),
    save: bool = typer.Option(False, "--save", "-S", help="Save all responses.", is_flag=True),
    proxy: Optional[str] = typer.Option(None, "--proxy", "-x", help="Use the given HTTP proxy."),
    concurrency: Optional[int] = typer.Option(
        None, "--concurrency", "-c", help="Maximum parallel requests. [default: 40]"
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", "-t", help="Per-request timeout in seconds. [default: 10]"
    ),
    verify_tls: bool = typer.Option(
        False, "--verify-tls", help="Verify TLS certificates.", is_flag=True
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", help="YAML or JSON file with default options."
    ),
    log_dir: Optional[Path] = typer.Option(
        None, "--log-dir", help="Also write JSON logs to this directory."
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Don't print status lines.", is_flag=True),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging.", is_flag=True),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show the version and exit.",
        callback=_version_callback,
        is_eager=True,
        is_flag=True,
    ),
) -> None:
    """Fetch every URL read from stdin and save the matching responses."""

    overrides = _collect_overrides(
        body=body,
        delay_ms=delay,
        headers=header,
        ignore_html=ignore_html,
        ignore_empty=ignore_empty,
        keep_alive=keep_alive,
        method=method,
        match_string=match,
        output_dir=output,
        save_status=save_status,
        save_all=save,
        proxy_url=proxy,
        concurrency=concurrency,
        timeout=timeout,
        verify_tls=verify_tls,
    )
    try:
        fetch_config = load_config(config, overrides)
    except ConfigurationError as exc:
        err_console.print(f"[red]Invalid configuration: {escape(str(exc))}[/red]")
        raise typer.Exit(code=EXIT_CONFIG_ERROR)

    logger = configure_logging(verbose, log_dir=log_dir)
    logger.debug("configuration_loaded", **fetch_config.model_dump(mode="json"))
    reporter = StatusReporter(console=console, enabled=not quiet)
    dispatcher = Dispatcher(fetch_config, reporter=reporter)
    stdin = typer.get_binary_stream("stdin")
    exit_code = dispatcher.run(stdin)
    raise typer.Exit(code=exit_code)


__all__ = ["app", "main"]
