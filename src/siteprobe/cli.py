"""
siteprobe command line.

Runs probe suites against target URLs and reports every probe's outcome.

Exit codes:
    0  every probe PASSED or was SKIPPED
    1  at least one probe FAILED or ERRORED (or the browser could not start)
    2  configuration error; no probe ran
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from siteprobe._version import __version__
from siteprobe.browser_gate import configure_browser_gate
from siteprobe.config import ProbeSettings, load_settings
from siteprobe.errors import ConfigurationError
from siteprobe.models import OutcomeKind, SuiteResult, ViewportSize
from siteprobe.probes import SUITES, get_suite, list_suites
from siteprobe.runner import run_suites, run_target

app = typer.Typer(
    help="Declarative smoke probes for web pages.",
    no_args_is_help=True,
)

console = Console()

FORMATS = ("table", "json", "markdown")

OUTCOME_STYLES = {
    OutcomeKind.PASSED: "green",
    OutcomeKind.FAILED: "red",
    OutcomeKind.ERRORED: "magenta",
    OutcomeKind.SKIPPED: "yellow",
}


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"siteprobe {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Declarative smoke probes for web pages."""


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _render_table(result: SuiteResult) -> None:
    table = Table(title=f"Probes: {result.target_url}")
    table.add_column("Probe")
    table.add_column("Category")
    table.add_column("Outcome")
    table.add_column("Reason")
    table.add_column("Duration", justify="right")

    for r in result:
        style = OUTCOME_STYLES[r.outcome.kind]
        table.add_row(
            r.name,
            r.category.value,
            f"[{style}]{r.outcome.kind.value.upper()}[/{style}]",
            r.outcome.reason or "",
            f"{r.duration_ms:.0f}ms",
        )
    console.print(table)

    counts = result.summary()
    status = "[green]PASS[/green]" if result.passed else "[red]FAIL[/red]"
    console.print(
        f"{status}  {counts['passed']} passed, {counts['failed']} failed, "
        f"{counts['errored']} errored, {counts['skipped']} skipped"
    )
    if result.aborted:
        console.print("[yellow]Run aborted by a prior failure[/yellow]")


def _check_format(format: str) -> None:
    if format not in FORMATS:
        raise ConfigurationError(f"Unknown format {format!r}; use {', '.join(FORMATS)}")


def _as_json(results: list[SuiteResult]) -> str:
    if len(results) == 1:
        return results[0].to_json()
    return json.dumps([r.to_dict() for r in results], indent=2)


def _emit(results: list[SuiteResult], format: str, output: str | None) -> None:
    if format == "table":
        for result in results:
            _render_table(result)
        content = None
    elif format == "json":
        content = _as_json(results)
    else:
        content = "\n\n".join(r.to_markdown() for r in results)

    if output:
        output_path = Path(output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        if content is None:
            content = _as_json(results)
        output_path.write_text(content)
        typer.echo(f"Saved report to {output_path}", err=True)
    elif content is not None:
        typer.echo(content)


@app.command("run")
def run_command(
    url: str = typer.Argument(
        None,
        help="Target URL (default: SITEPROBE_TARGET_URL / TEST_URL or siteprobe.toml)",
    ),
    suite: str = typer.Option(None, "--suite", "-s", help="Suite to run"),
    config: str = typer.Option("siteprobe.toml", "--config", "-c", help="Config file"),
    timeout: int = typer.Option(
        None, "--timeout", help="Navigation and element query timeout (ms)"
    ),
    probe_timeout: int = typer.Option(None, "--probe-timeout", help="Per-probe time cap (ms)"),
    viewport: str = typer.Option(None, "--viewport", help="Default viewport, e.g. 1280x720"),
    fail_fast: bool = typer.Option(
        False, "--fail-fast", help="Stop at the first FAILED or ERRORED probe"
    ),
    headed: bool = typer.Option(False, "--headed", help="Show the browser window"),
    format: str = typer.Option("table", "--format", "-f", help="table, json or markdown"),
    output: str = typer.Option(None, "--output", "-o", help="Write the report to a file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """
    Run a probe suite against one target URL.

    Examples:
        siteprobe run https://example.com
        siteprobe run https://example.com --suite basic --format json
        TEST_URL=https://shop.example.com siteprobe run --suite shopping
    """
    _configure_logging(verbose)
    try:
        _check_format(format)
        settings = load_settings(Path(config))
        target = url or settings.target_url
        if not target:
            raise ConfigurationError("No target URL given")
        probes = get_suite(suite or settings.suite)
        _apply_overrides(settings, timeout, probe_timeout, viewport, fail_fast, headed)
        options = settings.run_options()
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=2)

    try:
        gate = configure_browser_gate(settings.max_browsers, settings.headless)
        result = asyncio.run(run_target(target, probes, options, gate=gate))
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=2)
    except Exception as e:
        typer.echo(f"Run failed: {e}", err=True)
        raise typer.Exit(code=1)

    _emit([result], format, output)
    raise typer.Exit(code=result.exit_code)


@app.command("batch")
def batch_command(
    urls: list[str] = typer.Argument(..., help="Target URLs, one suite each"),
    suite: str = typer.Option(None, "--suite", "-s", help="Suite to run"),
    config: str = typer.Option("siteprobe.toml", "--config", "-c", help="Config file"),
    timeout: int = typer.Option(
        None, "--timeout", help="Navigation and element query timeout (ms)"
    ),
    probe_timeout: int = typer.Option(None, "--probe-timeout", help="Per-probe time cap (ms)"),
    viewport: str = typer.Option(None, "--viewport", help="Default viewport, e.g. 1280x720"),
    fail_fast: bool = typer.Option(
        False, "--fail-fast", help="Stop each suite at its first FAILED or ERRORED probe"
    ),
    headed: bool = typer.Option(False, "--headed", help="Show the browser windows"),
    format: str = typer.Option("table", "--format", "-f", help="table, json or markdown"),
    output: str = typer.Option(None, "--output", "-o", help="Write the report to a file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """
    Run the same suite against several URLs in parallel.

    Concurrency is bounded by max_browsers in siteprobe.toml or
    SITEPROBE_MAX_BROWSERS (default 2).
    """
    _configure_logging(verbose)
    try:
        _check_format(format)
        settings = load_settings(Path(config))
        probes = get_suite(suite or settings.suite)
        _apply_overrides(settings, timeout, probe_timeout, viewport, fail_fast, headed)
        options = settings.run_options()
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=2)

    try:
        gate = configure_browser_gate(settings.max_browsers, settings.headless)
        results = asyncio.run(run_suites(urls, probes, options, gate=gate))
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=2)
    except Exception as e:
        typer.echo(f"Run failed: {e}", err=True)
        raise typer.Exit(code=1)

    _emit(results, format, output)
    raise typer.Exit(code=max((r.exit_code for r in results), default=0))


def _apply_overrides(
    settings: ProbeSettings,
    timeout: int | None,
    probe_timeout: int | None,
    viewport: str | None,
    fail_fast: bool,
    headed: bool,
) -> None:
    if timeout is not None:
        settings.navigation_timeout_ms = timeout
    if probe_timeout is not None:
        settings.probe_timeout_ms = probe_timeout
    if viewport:
        settings.viewport = ViewportSize.parse(viewport)
    if fail_fast:
        settings.continue_on_error = False
    if headed:
        settings.headless = False


@app.command("suites")
def suites_command() -> None:
    """List the built-in suites."""
    table = Table(title="Suites")
    table.add_column("Suite")
    table.add_column("Probes", justify="right")
    for name in list_suites():
        table.add_row(name, str(len(SUITES[name])))
    console.print(table)


@app.command("probes")
def probes_command(
    suite: str = typer.Argument("all", help="Suite whose probes to list"),
) -> None:
    """List the probes in a suite, in run order."""
    try:
        probes = get_suite(suite)
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=2)

    table = Table(title=f"Probes in '{suite}'")
    table.add_column("Probe")
    table.add_column("Category")
    table.add_column("Description")
    for probe in probes:
        table.add_row(probe.name, probe.category.value, probe.description)
    console.print(table)


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
