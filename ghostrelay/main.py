"""ghostrelay entry point: loads settings and serves until signalled."""

from __future__ import annotations

import asyncio
import signal
import sys

import click

from ghostrelay import __version__
from ghostrelay.config import Settings, load_settings
from ghostrelay.server import RelayServer
from ghostrelay.utils.logging import get_logger, setup_logging

log = get_logger(__name__)


async def run(settings: Settings) -> None:
    server = RelayServer(settings)

    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()

    def _signal_handler() -> None:
        log.info("shutdown_signal")
        stop_event.set()

    if sys.platform != "win32":
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, _signal_handler)

    log.info("ghostrelay_starting", version=__version__, strategy=settings.strategy)
    await server.start()

    try:
        if sys.platform == "win32":
            while not stop_event.is_set():
                await asyncio.sleep(1)
        else:
            await stop_event.wait()
    except KeyboardInterrupt:
        pass
    finally:
        await server.stop()


@click.command()
@click.option("--config", "config_path", default=None, help="Path to config YAML file")
@click.option("--log-level", default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")
@click.option(
    "--port", type=int, default=None, envvar="PORT",
    help="Listen port (overrides config, also read from $PORT)",
)
def cli(config_path: str | None, log_level: str | None, port: int | None) -> None:
    """Relay Ghost webhooks to a deploy trigger."""
    settings = load_settings(config_path)
    if log_level:
        settings.log_level = log_level
    if port is not None:
        settings.server.port = port
    setup_logging(level=settings.log_level, json_output=settings.log_json)
    asyncio.run(run(settings))


if __name__ == "__main__":
    cli()
