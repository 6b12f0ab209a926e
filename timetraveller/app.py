"""Typer CLI entrypoint for timetraveller."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

import typer
from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .config import ConfigRepository, LookupSettings, SelectionMode
from .engine import AggregationResult
from .engine.aggregator import Renderer
from .logging_conf import configure_logging, tail_log
from .orchestrator import LookupOrchestrator
from .ui import OutcomeRenderer

app = typer.Typer(
    help="Look up Wayback Machine snapshots for many URLs at once.",
    no_args_is_help=True,
    rich_markup_mode=None,
)

console = Console(highlight=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False)

OrchestratorFactory = Callable[[LookupSettings, Renderer], LookupOrchestrator]


@dataclass
class AppState:
    repository: ConfigRepository
    orchestrator_factory: OrchestratorFactory


def build_state(verbose: bool) -> AppState:
    repository = ConfigRepository()
    return AppState(
        repository=repository,
        orchestrator_factory=lambda settings, renderer: LookupOrchestrator(
            settings, renderer=renderer
        ),
    )


def _get_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if state is None:
        state = build_state(verbose=False)
        ctx.obj = state
    return state


def _read_stdin_urls() -> list[str]:
    stream = sys.stdin
    if stream is None or stream.isatty():
        return []
    return [line.strip() for line in stream if line.strip()]


def _ms(value: Optional[int]) -> Optional[float]:
    return None if value is None else value / 1000.0


def _render_summary(result: AggregationResult, output: Optional[Path]) -> Table:
    summary = result.summary()
    table = Table(box=box.SIMPLE_HEAD, show_header=True, pad_edge=False)
    table.add_column("found", style="green", justify="right")
    table.add_column("not found", style="yellow", justify="right")
    table.add_column("error", style="red", justify="right")
    table.add_column("total", justify="right")
    table.add_row(
        str(summary["found"]),
        str(summary["not_found"]),
        str(summary["error"]),
        str(summary["total"]),
    )
    if output is not None:
        table.caption = Text(f"{len(result.found_urls)} link(s) written to {output}")
    return table


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging on stderr."),
) -> None:
    configure_logging(verbose=verbose)
    ctx.obj = build_state(verbose)


@app.command("lookup", help="Look up snapshots for URLs given as arguments or piped on stdin.")
def lookup(
    ctx: typer.Context,
    urls: Optional[List[str]] = typer.Argument(None, help="URLs to look up."),
    threads: Optional[int] = typer.Option(
        None, "--threads", "-t", min=1, help="Number of concurrent workers [default: 10]."
    ),
    timeout_ms: Optional[int] = typer.Option(
        None, "--timeout", min=1, help="Timeout for each HTTP request in milliseconds."
    ),
    delay_ms: Optional[int] = typer.Option(
        None, "--delay", "-d", min=0, help="Pause in milliseconds between requests of one worker."
    ),
    retries: Optional[int] = typer.Option(
        None, "--retries", "-r", min=0, help="Retries for rate-limited, 5xx or network failures."
    ),
    retry_delay_ms: Optional[int] = typer.Option(
        None, "--retry-delay", min=0, help="Base backoff delay in milliseconds, doubled per retry."
    ),
    latest: bool = typer.Option(False, "--latest", help="Report the latest snapshot instead of the oldest."),
    no_err: bool = typer.Option(False, "--no-err", help="Hide 'not found' and error results."),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", dir_okay=False, help="Write archive links of found URLs to this file."
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", exists=True, dir_okay=False, help="Settings file (YAML or JSON)."
    ),
) -> None:
    state = _get_state(ctx)
    targets = list(urls or []) or _read_stdin_urls()
    if not targets:
        err_console.print("Usage: timetraveller lookup [OPTIONS] URL [URL ...]", markup=False)
        err_console.print("Or pipe URLs:  cat urls.txt | timetraveller lookup [OPTIONS]", markup=False)
        raise typer.Exit(code=1)

    try:
        base = state.repository.load_settings(config)
        settings = base.merged(
            {
                "workers": threads,
                "request_timeout": _ms(timeout_ms),
                "delay": _ms(delay_ms),
                "retry_attempts": retries,
                "retry_delay": _ms(retry_delay_ms),
                "mode": SelectionMode.LATEST if latest else None,
                "hide_failures": True if no_err else None,
            }
        )
    except (ValidationError, ValueError, FileNotFoundError) as exc:
        raise typer.BadParameter(str(exc)) from exc

    renderer = OutcomeRenderer(settings.mode, console=console)
    orchestrator = state.orchestrator_factory(settings, renderer)
    result = orchestrator.run(targets, output=output)
    err_console.print(_render_summary(result, output))


@app.command("init-config", help="Write a settings file populated with the defaults.")
def init_config(
    ctx: typer.Context,
    path: Optional[Path] = typer.Argument(None, help="Destination (default: ./timetraveller.yaml)."),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file."),
) -> None:
    state = _get_state(ctx)
    target = path or state.repository.locator.settings_path()
    if target.exists() and not force:
        err_console.print(f"{target} already exists; use --force to overwrite.", style="yellow", markup=False)
        raise typer.Exit(code=1)
    written = state.repository.save_settings(LookupSettings(), target)
    console.print(f"Wrote default settings to {written}", markup=False)


@app.command("logs", help="Show the tail of the application log.")
def logs(
    ctx: typer.Context,
    lines: int = typer.Option(50, "--lines", "-n", min=1, help="Number of lines to show."),
) -> None:
    state = _get_state(ctx)
    path = state.repository.locator.logs_dir / "timetraveller.log"
    content = tail_log(path, lines)
    if not content:
        console.print(f"No log entries at {path}", style="dim", markup=False)
        raise typer.Exit(code=0)
    for line in content:
        console.print(line.rstrip("\n"), markup=False)


def run() -> None:
    app()


__all__ = ["AppState", "app", "build_state", "run"]
