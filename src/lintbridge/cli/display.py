"""Console rendering shared by the CLI commands."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from lintbridge.analyzer.models import END_OF_LINE, Finding, Severity, WorkspaceReport
from lintbridge.config import EngineConfig
from lintbridge.session.manager import SessionManager
from lintbridge.session.models import Notice, NoticeLevel

console = Console(stderr=True)

_SEVERITY_COLORS = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFORMATION: "blue",
    Severity.HINT: "dim",
}


def print_notice(notice: Notice) -> None:
    if notice.level == NoticeLevel.ERROR:
        console.print(f"[red]{notice.message}[/red]")
    else:
        console.print(f"[dim]{notice.message}[/dim]")


def make_manager(config: EngineConfig) -> SessionManager:
    """Build a session that prints notices to the console."""
    try:
        return SessionManager(config, on_notice=print_notice)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc


def print_findings(findings: list[Finding], base_dir: str = "") -> None:
    table = Table(title="Findings", show_lines=False)
    table.add_column("Severity", style="bold", width=10)
    table.add_column("File", style="cyan")
    table.add_column("Line", justify="right")
    table.add_column("Columns", justify="right")
    table.add_column("Message")

    for finding in findings:
        color = _SEVERITY_COLORS.get(finding.severity, "white")
        end = "eol" if finding.end_column == END_OF_LINE else str(finding.end_column + 1)
        table.add_row(
            f"[{color}]{finding.severity.value}[/{color}]",
            _shorten_path(finding.file_path, base_dir),
            str(finding.line + 1),
            f"{finding.start_column + 1}-{end}",
            finding.message,
        )

    console.print(table)


def print_summary(report: WorkspaceReport) -> None:
    suffix = " [yellow](cancelled)[/yellow]" if report.cancelled else ""
    console.print(
        f"\nScanned {report.files_scanned} of {report.total_files} files "
        f"in {report.duration:.2f}s{suffix}"
    )
    if report.failures:
        console.print(f"Failed files: {len(report.failures)}")
    console.print(f"Total findings: {report.issue_count}")


def error_count(findings: list[Finding]) -> int:
    return sum(1 for f in findings if f.severity == Severity.ERROR)


def _shorten_path(file_path: str, base_dir: str) -> str:
    """Shorten file path relative to the scanned directory."""
    if base_dir and file_path.startswith(base_dir):
        return file_path[len(base_dir) :].lstrip("/")
    return file_path
