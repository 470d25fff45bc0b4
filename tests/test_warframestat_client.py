from __future__ import annotations

import asyncio

import httpx
import pytest

from adapters.warframestat_client import WarframestatClient
from core.errors import FetchError

PAYLOAD = [
    {
        "id": "a1",
        "activation": "2024-01-01T10:00:00.000Z",
        "expiry": "2024-01-01T11:00:00.000Z",
        "node": "Tolstoj (Mercury)",
        "missionType": "Assassination",
        "tier": "Meso",
        "enemy": "Grineer",
        "isStorm": False,
        "isHard": False,
    }
]


def _client(handler) -> WarframestatClient:
    return WarframestatClient(
        base_url="https://api.example.test/pc",
        transport=httpx.MockTransport(handler),
    )


def test_fetch_fissures_requests_endpoint_and_maps_payload() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json=PAYLOAD)

    fissures = asyncio.run(_client(handler).fetch_fissures())

    assert seen == ["https://api.example.test/pc/fissures"]
    assert [f.id for f in fissures] == ["a1"]
    assert str(fissures[0]) == "Meso Assassination on Tolstoj (Mercury)"


def test_http_error_status_raises_fetch_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="maintenance")

    with pytest.raises(FetchError, match="503"):
        asyncio.run(_client(handler).fetch_fissures())


def test_transport_error_raises_fetch_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(FetchError):
        asyncio.run(_client(handler).fetch_fissures())


def test_invalid_json_raises_fetch_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>not json</html>")

    with pytest.raises(FetchError, match="invalid JSON"):
        asyncio.run(_client(handler).fetch_fissures())
