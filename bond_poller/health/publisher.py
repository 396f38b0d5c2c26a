"""Health publisher — derives the healthy flag and writes the probe files.

Two files are replaced in full on every publish:
- a JSON snapshot of the whole HealthStatus
- a plain-text file holding ``healthy`` or ``unhealthy``

Both are written to a temp sibling first and moved into place with
os.replace, so a probe never reads a partial file.
"""

from __future__ import annotations

import logging
import os
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

from .models import HealthStatus

logger = logging.getLogger(__name__)

DEFAULT_STALE_AFTER = timedelta(minutes=10)

HEALTHY = "healthy"
UNHEALTHY = "unhealthy"


def _atomic_write(path: Path, text: str) -> None:
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(text)
        os.replace(tmp, path)
    except BaseException:
        try:
            os.unlink(tmp)
        except FileNotFoundError:
            pass
        raise


class HealthPublisher:
    """Writes the health record for an external file probe."""

    def __init__(
        self,
        json_path: Path,
        text_path: Path,
        stale_after: timedelta = DEFAULT_STALE_AFTER,
    ) -> None:
        self.json_path = Path(json_path)
        self.text_path = Path(text_path)
        self.stale_after = stale_after

    def is_stale(self, last_success: datetime, now: datetime) -> bool:
        return (now - last_success) >= self.stale_after

    def publish(self, status: HealthStatus, now: datetime | None = None) -> bool:
        """Recompute ``is_healthy`` and write both files.

        Returns False (after logging) if either write fails; never raises.
        """
        now = now or datetime.now(timezone.utc)
        status.is_healthy = not self.is_stale(status.last_success, now)

        try:
            _atomic_write(self.json_path, status.to_json())
            _atomic_write(self.text_path, HEALTHY if status.is_healthy else UNHEALTHY)
        except Exception:
            logger.exception(
                "Failed to write health files (%s, %s)", self.json_path, self.text_path,
            )
            return False

        logger.debug("Published health: healthy=%s", status.is_healthy)
        return True
