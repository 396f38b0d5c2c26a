"""Entry point for the bond poller — `bond-poller` console script."""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
from datetime import timedelta

from rich.console import Console
from rich.panel import Panel

from bond_poller.config import Settings, settings
from bond_poller.connector.client import BondsClient
from bond_poller.health.publisher import HealthPublisher
from bond_poller.poller import BondPoller

console = Console()
logger = logging.getLogger(__name__)


def build_poller(cfg: Settings, client: BondsClient) -> BondPoller:
    publisher = HealthPublisher(
        json_path=cfg.health_json_path,
        text_path=cfg.health_text_path,
        stale_after=timedelta(seconds=cfg.stale_after),
    )
    return BondPoller(
        client=client,
        publisher=publisher,
        interval=cfg.poll_interval,
        console=console,
        show_response=cfg.show_response,
    )


def _install_signal_handlers(stop_event: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except (NotImplementedError, ValueError):
            # Windows / non-main thread: Ctrl+C still cancels asyncio.run()
            logger.debug("Signal handler for %s not installed", sig.name)


async def serve(cfg: Settings, stop_event: asyncio.Event | None = None) -> bool:
    """Run the poller until ``stop_event`` is set (SIGINT/SIGTERM by default).

    Returns False if the polling loop ended on its own instead of being stopped.
    """
    if stop_event is None:
        stop_event = asyncio.Event()
        _install_signal_handlers(stop_event)

    async with BondsClient(
        base_url=cfg.bonds_api_base_url,
        api_key=cfg.bonds_api_key,
        path=cfg.bonds_api_path,
        timeout=cfg.bonds_api_timeout,
    ) as client:
        poller = build_poller(cfg, client)
        logger.info("Health JSON file: %s", poller.publisher.json_path)
        logger.info("Health text file: %s", poller.publisher.text_path)

        await poller.start()
        waiter = asyncio.create_task(stop_event.wait(), name="bond-poller-shutdown")
        try:
            done, _ = await asyncio.wait(
                {waiter, poller.task}, return_when=asyncio.FIRST_COMPLETED,
            )
            if waiter in done:
                logger.info("Shutdown requested")
                return True
            logger.error("Bond poller loop exited unexpectedly, shutting down")
            return False
        finally:
            waiter.cancel()
            await poller.stop()


def main() -> None:
    """Start the bond poller."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    key_status = "SET" if settings.bonds_api_key else "NOT SET"

    console.print(
        Panel.fit(
            f"[bold]Bond Poller[/bold]\n"
            f"Endpoint:  {settings.bonds_api_base_url.rstrip('/')}/{settings.bonds_api_path}\n"
            f"API key:   {key_status}\n"
            f"Interval:  {settings.poll_interval:g}s  (stale after {settings.stale_after:g}s)\n"
            f"JSON file: {settings.health_json_path}\n"
            f"Text file: {settings.health_text_path}",
            title="bond-poller",
            border_style="green",
        )
    )

    if not settings.bonds_api_key:
        console.print(
            "[yellow]WARNING: No BONDS_API_KEY set. "
            "Requests will be sent without an X-API-KEY header.[/yellow]\n"
        )

    try:
        clean = asyncio.run(serve(settings))
    except KeyboardInterrupt:
        clean = True

    if not clean:
        sys.exit(1)


if __name__ == "__main__":
    main()
