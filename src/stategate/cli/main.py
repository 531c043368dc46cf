"""Main CLI entry point for stategate.

Provides the ``serve`` command, which runs the HTTP server under uvicorn.
"""

from typing import Optional

import click
import uvicorn

from stategate import __version__
from stategate.config import load_config_from_env

# Server tuning
KEEP_ALIVE_TIMEOUT_SECONDS = 5
GRACEFUL_SHUTDOWN_TIMEOUT_SECONDS = 10


@click.group()
@click.version_option(version=__version__, prog_name="stategate")
def cli() -> None:
    """stategate - HTTP façade over a key/value state store."""
    pass


@cli.command()
@click.option("--host", default="0.0.0.0", show_default=True, help="Interface to bind.")
@click.option("--port", type=int, default=None, help="Port to bind (default: APP_PORT or 8080).")
def serve(host: str, port: Optional[int]) -> None:
    """Run the HTTP server until SIGINT or SIGTERM.

    On a termination signal the server stops accepting connections and waits
    up to the graceful shutdown timeout for in-flight requests before the
    application shutdown flushes telemetry.
    """
    config = load_config_from_env()
    bind_port = port if port is not None else int(config.port)

    click.echo(f"Starting stategate on {host}:{bind_port} (store: {config.store_name})")

    uvicorn.run(
        "stategate.api.app:create_app",
        factory=True,
        host=host,
        port=bind_port,
        log_level=config.log_level.lower(),
        timeout_keep_alive=KEEP_ALIVE_TIMEOUT_SECONDS,
        timeout_graceful_shutdown=GRACEFUL_SHUTDOWN_TIMEOUT_SECONDS,
    )


def main() -> None:
    """CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
