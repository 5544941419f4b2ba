"""CLI command: lintbridge server — serve the results API."""

from __future__ import annotations

import click

from lintbridge.cli.display import console, make_manager


@click.command()
@click.option(
    "--port",
    type=int,
    default=None,
    help="Port to listen on (default: 8471).",
)
@click.pass_context
def server(ctx: click.Context, port: int | None) -> None:
    """Start the lintbridge results API for an editor or results panel."""
    try:
        import uvicorn
    except ImportError:
        console.print(
            "[red]Web dependencies not installed.[/red]\n"
            "Install with: pip install lintbridge[web]"
        )
        raise SystemExit(1)

    config = ctx.obj["config"]
    if port is not None:
        config.web_port = port

    console.print(
        f"[bold]lintbridge[/bold] API starting on "
        f"[cyan]http://{config.web_host}:{config.web_port}/api[/cyan]"
    )
    console.print("  [dim]Bound to 127.0.0.1 only[/dim]\n")

    from lintbridge.web.app import create_app

    app = create_app(config, manager=make_manager(config))
    uvicorn.run(
        app,
        host=config.web_host,
        port=config.web_port,
        log_level="debug" if config.verbose else "info",
    )
