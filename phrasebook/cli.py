#!/usr/bin/env python3
"""
Phrasebook CLI - Natural-Language Assertion Suites

Usage:
    phrasebook run <suite.yaml> [OPTIONS]
    phrasebook validate <suite.yaml>
    phrasebook phrases [--filter TEXT]
    phrasebook info
    phrasebook --version
"""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import __version__, expect, expect_async
from .reporting import CheckStatus, RunStatus
from .suite import load_suite, run_suite

app = typer.Typer(
    name="phrasebook",
    help="📖 Phrasebook - Natural-Language Assertion Suites",
    add_completion=False,
)
console = Console()

STATUS_STYLES = {
    CheckStatus.PASSED: "[green]✅ Passed[/green]",
    CheckStatus.FAILED: "[red]❌ Failed[/red]",
    CheckStatus.ERROR: "[yellow]⚠️  Error[/yellow]",
    CheckStatus.SKIPPED: "[dim]⏭️  Skipped[/dim]",
}


def version_callback(value: bool):
    if value:
        console.print(f"📖 Phrasebook v{__version__}")
        raise typer.Exit()


def configure_logging(debug: bool) -> None:
    """Route library debug logs through rich when --debug is given."""
    if not debug:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
        force=True,
    )


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True,
        help="Show version and exit"
    ),
):
    """
    📖 Phrasebook - Natural-Language Assertion Suites

    Check data with declarative YAML suites of phrase assertions.
    """
    pass


@app.command()
def run(
    suite_file: Path = typer.Argument(
        ...,
        help="Path to the suite YAML file",
        exists=True,
        readable=True,
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q",
        help="Only show errors and final status"
    ),
    output: str = typer.Option(
        "text", "--output", "-o",
        help="Output format: text or json"
    ),
    report_dir: Path = typer.Option(
        Path("reports"), "--report-dir", "-r",
        help="Directory to save JSON reports"
    ),
    no_report: bool = typer.Option(
        False, "--no-report",
        help="Don't save a JSON report file"
    ),
    debug: bool = typer.Option(
        False, "--debug",
        help="Log assertion matching details"
    ),
):
    """
    Run an assertion suite.

    Dispatch every check in the suite and generate a run report.
    """
    configure_logging(debug)
    as_json = output == "json"
    chatty = not quiet and not as_json

    if output not in ("text", "json"):
        console.print(f"[red]❌ Unknown output format:[/red] {output} (use text or json)")
        raise typer.Exit(code=2)

    if chatty:
        console.print(f"\n📄 Loading suite: {suite_file}")

    suite, validation = load_suite(suite_file, phrases=expect.phrases)

    if not validation.is_valid:
        console.print(f"\n[red]❌ Validation failed:[/red]")
        console.print(str(validation))
        raise typer.Exit(code=1)

    if chatty:
        console.print(f"   [green]✅ Valid suite:[/green] {suite.name} ({len(suite.checks)} checks)\n")

    reporter = run_suite(suite)
    report = reporter.report

    if chatty:
        for record in report.checks:
            console.print(f"▶ [bold]{record.check_id}[/bold]: {STATUS_STYLES.get(record.status, record.status.value)}")
            if record.failure_message:
                console.print(f"  {record.failure_message}", markup=False)
            elif record.error_message:
                console.print(f"  {record.error_message}", markup=False)

    if as_json:
        console.print_json(data=report.to_dict())
    elif not quiet:
        console.print("\n" + report.summary(), markup=False)
    else:
        console.print(f"{report.status.value.upper()}: {report.passed_checks}/{report.total_checks} checks passed")

    if not no_report:
        report_path = report_dir / f"{report.run_id}.json"
        reporter.save_json(report_path)
        if chatty:
            console.print(f"\n📁 Report saved: {report_path}")

    raise typer.Exit(code=0 if report.status == RunStatus.PASSED else 1)


@app.command()
def validate(
    suite_file: Path = typer.Argument(
        ...,
        help="Path to the suite YAML file",
        exists=True,
        readable=True,
    ),
):
    """
    Validate a suite YAML file.

    Check the schema and every leading phrase without running the suite.
    """
    console.print(f"\n📄 Validating: {suite_file}")

    suite, validation = load_suite(suite_file, phrases=expect.phrases)

    if not validation.is_valid:
        console.print(f"\n[red]❌ Validation failed:[/red]")
        console.print(str(validation))
        raise typer.Exit(code=1)

    console.print(f"\n[green]✅ Valid suite:[/green] {suite.name}")
    console.print(f"   Checks: {len(suite.checks)}")

    table = Table(title="Checks")
    table.add_column("ID", style="cyan")
    table.add_column("Subject", style="magenta")
    table.add_column("Expect")

    for check in suite.checks:
        subject = f"from: {check.path}" if check.path else repr(check.subject)
        table.add_row(check.id, escape(subject), escape(" ".join(repr(arg) for arg in check.expect)))

    console.print()
    console.print(table)


@app.command()
def phrases(
    filter_text: str = typer.Option(
        None, "--filter", "-f",
        help="Only show assertions whose pattern contains this text"
    ),
):
    """
    List the registered assertions (async ones only work with expect_async).
    """
    table = Table(title="Assertions")
    table.add_column("ID", style="cyan")
    table.add_column("Pattern")
    table.add_column("Async", style="magenta")

    shown = 0
    for definition in expect_async.definitions:
        pattern = str(definition.pattern)
        if filter_text and filter_text.lower() not in pattern.lower():
            continue
        table.add_row(definition.id, escape(pattern), "yes" if definition.is_async else "")
        shown += 1

    console.print(table)
    console.print(f"{shown} of {len(expect_async.definitions)} assertions")


@app.command()
def info():
    """
    Show information about Phrasebook.
    """
    console.print(f"""
📖 [bold]Phrasebook[/bold] v{__version__}

Natural-language assertions dispatched by phrase

[bold]Features:[/bold]
  • expect(subject, "phrase", ...) assertions with negation ("not ...")
  • Conjunctions: "to be a string", "and", "to be non-empty"
  • Declarative YAML suites with JSONPath subjects
  • Detailed JSON run reports

[bold]Quick Start:[/bold]
  phrasebook run suites/payload.yaml
  phrasebook validate suites/payload.yaml
  phrasebook phrases --filter between
""")


if __name__ == "__main__":
    app()
