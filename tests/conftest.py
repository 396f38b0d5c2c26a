"""Shared test fixtures."""

from __future__ import annotations

import io
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from rich.console import Console

from bond_poller.connector.client import BondsApiError
from bond_poller.health.publisher import HealthPublisher
from bond_poller.poller import BondPoller

T0 = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


class FakeBondsClient:
    """Stands in for BondsClient; plays back scripted outcomes.

    Each outcome is either a body string or an exception instance.
    Once the script is exhausted the last outcome repeats.
    """

    def __init__(self, *outcomes: str | Exception) -> None:
        self.outcomes = list(outcomes) or ["[]"]
        self.calls = 0

    async def fetch_bonds(self) -> str:
        outcome = self.outcomes[min(self.calls, len(self.outcomes) - 1)]
        self.calls += 1
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def publisher(tmp_path: Path) -> HealthPublisher:
    return HealthPublisher(
        json_path=tmp_path / "health-status.json",
        text_path=tmp_path / "healthy",
    )


@pytest.fixture
def quiet_console() -> Console:
    return Console(file=io.StringIO(), force_terminal=False)


@pytest.fixture
def server_error() -> BondsApiError:
    return BondsApiError(503, "Service Unavailable")


@pytest.fixture
def make_poller(clock: FakeClock, publisher: HealthPublisher, quiet_console: Console):
    """Factory: make_poller(*outcomes) -> (BondPoller, FakeBondsClient)."""

    def _make(
        *outcomes: str | Exception,
        interval: float = 60.0,
        pub: HealthPublisher | None = None,
    ):
        client = FakeBondsClient(*outcomes)
        poller = BondPoller(
            client=client,  # type: ignore[arg-type]
            publisher=pub or publisher,
            interval=interval,
            clock=clock,
            console=quiet_console,
        )
        return poller, client

    return _make
