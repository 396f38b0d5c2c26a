from __future__ import annotations

import tempfile
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

from bond_poller.connector.client import DEFAULT_BONDS_PATH


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env file."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # Bonds API
    bonds_api_base_url: str = "https://tiwaz.hayatnet.local/"
    bonds_api_key: str = ""
    bonds_api_path: str = DEFAULT_BONDS_PATH
    bonds_api_timeout: float = Field(default=30.0, gt=0)

    # Scheduling; the threshold is independent of the interval
    poll_interval: float = Field(default=60.0, gt=0)  # seconds between cycles
    stale_after: float = Field(default=600.0, gt=0)  # max age of last success

    # Health files (empty dir = system temp dir)
    health_dir: str = ""
    health_json_file: str = "health-status.json"
    health_text_file: str = "healthy"

    # Print each successful response body on the console
    show_response: bool = True

    # Logging
    log_level: str = "INFO"

    @property
    def health_root(self) -> Path:
        return Path(self.health_dir or tempfile.gettempdir())

    @property
    def health_json_path(self) -> Path:
        return self.health_root / self.health_json_file

    @property
    def health_text_path(self) -> Path:
        return self.health_root / self.health_text_file


settings = Settings()
