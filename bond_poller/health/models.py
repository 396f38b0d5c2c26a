"""Pydantic model for the published health record."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Zero value for timestamps. A record that never succeeded is unhealthy.
NEVER = datetime.min.replace(tzinfo=timezone.utc)


class HealthStatus(BaseModel):
    """Health of the bond poller, mutated in place every cycle.

    Serialized with camelCase names (``lastRun``, ``lastSuccess``,
    ``lastError``, ``isHealthy``).
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    last_run: datetime = NEVER
    last_success: datetime = NEVER
    last_error: str = ""
    is_healthy: bool = False

    def mark_run(self, now: datetime) -> None:
        self.last_run = now

    def mark_success(self, now: datetime) -> None:
        if now > self.last_success:
            self.last_success = now
        self.last_error = ""

    def mark_failure(self, message: str) -> None:
        self.last_error = message

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)
