"""Background poller — calls the bonds API on a fixed interval and publishes health.

Each cycle: stamp last_run → GET the bonds path → record outcome → publish → sleep.

- No backoff: the fixed interval is the retry mechanism
- A failed call or publish never escapes the cycle
- Cancelling the task (stop()) is the only way out, and it aborts an
  in-flight request as well as the sleep
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from rich.console import Console

from bond_poller.connector.client import BondsApiError, BondsApiOfflineError, BondsClient
from bond_poller.health.models import HealthStatus
from bond_poller.health.publisher import HealthPublisher

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 60.0  # seconds


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _describe(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class BondPoller:
    """Polls the bonds API and keeps the published health record current.

    Lifecycle:
        poller = BondPoller(client, publisher)
        await poller.start()
        ...
        await poller.stop()
    """

    def __init__(
        self,
        client: BondsClient,
        publisher: HealthPublisher,
        interval: float = DEFAULT_INTERVAL,
        clock: Callable[[], datetime] = _utcnow,
        console: Console | None = None,
        show_response: bool = True,
    ) -> None:
        self.client = client
        self.publisher = publisher
        self.interval = interval
        self.status = HealthStatus()
        self.show_response = show_response
        self.console = console or Console()
        self._clock = clock
        self._task: asyncio.Task[None] | None = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def task(self) -> asyncio.Task[None] | None:
        return self._task

    async def start(self) -> None:
        """Start the background polling loop."""
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self.run_forever(), name="bond-poller")
        logger.info(
            "Bond poller started at %s (interval=%ss, stale_after=%ss)",
            self._clock().isoformat(),
            self.interval,
            self.publisher.stale_after.total_seconds(),
        )

    async def stop(self) -> None:
        """Stop the poller, aborting any in-flight request."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            except Exception:
                logger.exception("Bond poller loop failed")
            self._task = None
        logger.info("Bond poller stopping at %s", self._clock().isoformat())

    async def run_forever(self) -> None:
        """Run cycles back to back until cancelled.

        The first cycle starts immediately.
        """
        self._running = True
        while self._running:
            await self.run_cycle()
            logger.info("Next check scheduled in %.0f seconds...", self.interval)
            await asyncio.sleep(self.interval)

    async def run_cycle(self) -> bool:
        """One poll: call, record, publish. Returns True if the call succeeded."""
        now = self._clock()
        self.status.mark_run(now)

        logger.info("Calling bonds API at %s", now.isoformat())
        try:
            body = await self.client.fetch_bonds()
        except (BondsApiOfflineError, BondsApiError) as e:
            self.status.mark_failure(_describe(e))
            logger.error("Error calling bonds API: %s", self.status.last_error)
            ok = False
        except Exception as e:
            self.status.mark_failure(_describe(e))
            logger.exception("Unexpected error calling bonds API")
            ok = False
        else:
            self.status.mark_success(now)
            if self.show_response:
                self._show_response(body)
            ok = True

        self.publisher.publish(self.status, now=self._clock())
        return ok

    def _show_response(self, body: str) -> None:
        try:
            self.console.rule("[bold green]Bonds API response[/bold green]", style="green")
            self.console.print(body, markup=False, highlight=False)
            self.console.rule(style="green")
        except (Exception, SystemExit):
            # rich raises SystemExit(1) when stdout is a broken pipe
            logger.exception("Failed to display bonds API response")
