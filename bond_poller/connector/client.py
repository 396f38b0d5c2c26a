"""httpx-based async client for the bonds API.

All calls return the response body or raise BondsApiOfflineError / BondsApiError.
Cancelling the awaiting task aborts an in-flight request.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BONDS_PATH = "v1/bonds"


class BondsApiOfflineError(Exception):
    """Raised when the bonds API is unreachable."""


class BondsApiError(Exception):
    """Raised when the bonds API answers with a non-2xx status."""

    def __init__(self, status_code: int, detail: str) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Bonds API error {status_code}: {detail}")


class BondsClient:
    """Async httpx client bound to one base URL and API key."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        path: str = DEFAULT_BONDS_PATH,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url
        self.path = path
        self._api_key = api_key
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=self._headers,
            timeout=timeout,
            transport=transport,
            follow_redirects=True,
        )

    @property
    def _headers(self) -> dict[str, str]:
        h = {"Accept": "*/*"}
        if self._api_key:
            h["X-API-KEY"] = self._api_key
        return h

    async def _get(self, path: str) -> httpx.Response:
        """Perform a GET request relative to the base URL."""
        try:
            resp = await self._client.get(path)
        except httpx.ConnectError:
            raise BondsApiOfflineError("Bonds API is offline or unreachable")
        except httpx.TimeoutException:
            raise BondsApiOfflineError("Bonds API request timed out")
        except httpx.TransportError as e:
            raise BondsApiOfflineError(f"Bonds API transport error: {e}")

        if not resp.is_success:
            detail: Any = resp.text
            try:
                detail = resp.json().get("detail", resp.text)
            except Exception:
                pass
            raise BondsApiError(resp.status_code, str(detail) or resp.reason_phrase)
        return resp

    # ── High-level methods ───────────────────────────────────────────────

    async def fetch_bonds(self) -> str:
        """GET v1/bonds — returns the raw body text."""
        logger.debug("GET %s%s", self.base_url, self.path)
        resp = await self._get(self.path)
        return resp.text

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> BondsClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()
