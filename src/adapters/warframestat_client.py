"""HTTP fissure source backed by the warframestat.us API.

Implements the core FissureSource port with an httpx async client.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import httpx

from adapters.fissure_mapper import parse_fissures
from core.errors import FetchError
from core.models import Fissure

LOGGER = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.warframestat.us/pc/"
FISSURES_ENDPOINT = "fissures"
DEFAULT_TIMEOUT = 30.0


class WarframestatClient:
    """Fetches the full current fissure list on every call."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        # The endpoint is joined by plain concatenation, so keep one trailing slash.
        self._base_url = base_url.rstrip("/") + "/"
        self._timeout = timeout
        self._transport = transport

    @property
    def url(self) -> str:
        return f"{self._base_url}{FISSURES_ENDPOINT}"

    async def fetch_fissures(self) -> List[Fissure]:
        """Return every active fissure, raising FetchError on any failure."""

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(self.url, headers={"Accept": "application/json"})
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise FetchError(f"HTTP {exc.response.status_code} from {self.url}") from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"request to {self.url} failed: {exc}") from exc
        except ValueError as exc:
            raise FetchError(f"invalid JSON from {self.url}: {exc}") from exc

        fissures = parse_fissures(payload)
        LOGGER.debug("Fetched %d fissures", len(fissures))
        return fissures
