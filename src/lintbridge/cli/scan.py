"""CLI command: lintbridge scan <directory> — validate a whole workspace."""

from __future__ import annotations

import asyncio
import os
import signal
import sys
import threading

import click
from rich.progress import BarColumn, Progress, TextColumn, TimeElapsedColumn

from lintbridge.analyzer.workspace import discover_sources
from lintbridge.cli.display import (
    console,
    error_count,
    make_manager,
    print_findings,
    print_summary,
)
from lintbridge.storage.db import get_db
from lintbridge.storage.repos import ReportRepo


@click.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.option(
    "--exclude",
    "-e",
    multiple=True,
    help="Directory or file names to exclude from the scan.",
)
@click.option("--save", is_flag=True, help="Store the report in the local database.")
@click.pass_context
def scan(
    ctx: click.Context,
    directory: str,
    exclude: tuple[str, ...],
    save: bool,
) -> None:
    """Run the validator over every C/C++ source in DIRECTORY."""
    config = ctx.obj["config"]
    manager = make_manager(config)
    root = os.path.abspath(directory)

    files = discover_sources(root, exclude=[*config.exclude, *exclude])
    console.print(
        f"[bold]lintbridge[/bold] analyzing [cyan]{len(files)}[/cyan] file(s) in "
        f"[cyan]{root}[/cyan] with [cyan]{manager.profile.tag}[/cyan]"
    )
    console.print("  Press Ctrl+C to stop.\n")

    cancel = threading.Event()

    def _signal_handler(signum: int, frame: object) -> None:
        console.print("\n[dim]Stopping after the current file...[/dim]")
        cancel.set()

    previous_handler = signal.signal(signal.SIGINT, _signal_handler)

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.percentage:>3.0f}%"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Analyzing workspace...", total=1.0)

        def on_progress(increment: float, label: str) -> None:
            progress.update(task, advance=increment, description=label)

        try:
            report = asyncio.run(
                manager.scan_workspace(
                    files, cancel=cancel, progress=on_progress, root=root
                )
            )
        finally:
            signal.signal(signal.SIGINT, previous_handler)

    manager.close()

    if report.findings:
        print_findings(report.findings, root)
    else:
        console.print("[green]No findings.[/green]")
    print_summary(report)

    if save:
        report_id = asyncio.run(_save_report(config.data_dir / "lintbridge.db", report))
        console.print(f"Saved report [cyan]{report_id}[/cyan]")

    errors = error_count(report.findings)
    if errors > 0:
        console.print(f"\n[red]{errors} error(s)[/red]")
        sys.exit(1)


async def _save_report(db_path, report) -> str:
    db = await get_db(db_path)
    try:
        return await ReportRepo(db).save(report)
    finally:
        await db.close()
