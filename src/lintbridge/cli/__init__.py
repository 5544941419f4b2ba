"""CLI entry point — Click group with global options."""

from __future__ import annotations

import logging
import os

import click

from lintbridge import __version__
from lintbridge.config import EngineConfig


@click.group()
@click.version_option(version=__version__, prog_name="lintbridge")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to a YAML config file.",
)
@click.option(
    "--profile",
    "-P",
    help="Analyzer profile to use (auxid or oxide).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.pass_context
def main(
    ctx: click.Context,
    config_path: str | None,
    profile: str | None,
    verbose: bool,
) -> None:
    """lintbridge — surface C/C++ validator findings as editor diagnostics."""
    ctx.ensure_object(dict)

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        config = EngineConfig.load(config_path)
    except (OSError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc
    if profile:
        config.profile = profile
    config.verbose = verbose

    ctx.obj["config"] = config.with_workspace(os.getcwd())


def _register_commands() -> None:
    from lintbridge.cli.analyze import analyze  # noqa: F811
    from lintbridge.cli.scan import scan  # noqa: F811
    from lintbridge.cli.server import server  # noqa: F811

    main.add_command(analyze)
    main.add_command(scan)
    main.add_command(server)


_register_commands()
