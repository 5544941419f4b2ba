"""CLI command: lintbridge analyze <file> — validate a single document."""

from __future__ import annotations

import asyncio
import os
import sys

import click

from lintbridge.analyzer.models import AnalysisStatus
from lintbridge.cli.display import console, error_count, make_manager, print_findings


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def analyze(ctx: click.Context, file: str) -> None:
    """Run the validator on FILE and print its findings."""
    config = ctx.obj["config"]
    manager = make_manager(config)
    path = os.path.abspath(file)

    result = asyncio.run(manager.analyze_document(path))
    manager.close()

    if result.status == AnalysisStatus.UNCONFIGURED:
        console.print(
            "[yellow]No validator configured.[/yellow] Set analyzer_path in the "
            "config file or LINTBRIDGE_ANALYZER_PATH."
        )
        sys.exit(2)
    if result.status == AnalysisStatus.DISABLED:
        console.print(f"[dim]{manager.profile.tag} validator is disabled.[/dim]")
        return
    if result.status == AnalysisStatus.FAILED:
        sys.exit(2)

    if not result.findings:
        console.print("[green]No findings.[/green]")
        return

    print_findings(result.findings, os.path.dirname(path))
    errors = error_count(result.findings)
    if errors > 0:
        console.print(f"\n[red]{errors} error(s)[/red]")
        sys.exit(1)
