from __future__ import annotations

import asyncio
import json
from pathlib import Path

import httpx
import pytest

from services.errors import MalformedInput, SourceUnavailable
from storage.sources import SourceFetcher, decode_payload, split_sources


def _fetch(fetcher: SourceFetcher, source: str):
    async def run():
        try:
            return await fetcher.fetch(source)
        finally:
            await fetcher.aclose()

    return asyncio.run(run())


def _mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_split_sources_flattens_comma_lists() -> None:
    assert split_sources(["a.json, https://x/y.json", " ", "b.json,"]) == [
        "a.json",
        "https://x/y.json",
        "b.json",
    ]


def test_decode_payload_tolerates_bom() -> None:
    assert decode_payload(b"\xef\xbb\xbf[1]") == [1]


def test_decode_payload_rejects_invalid_json() -> None:
    with pytest.raises(MalformedInput):
        decode_payload(b"{not json", "broken.json")


def test_local_file_relative_to_base_dir(tmp_path: Path) -> None:
    (tmp_path / "readings.json").write_text(json.dumps({"data": [{"ts": 1}]}))

    payload = _fetch(SourceFetcher(base_dir=tmp_path), "readings.json")

    assert payload == {"data": [{"ts": 1}]}


def test_missing_local_file_is_unavailable(tmp_path: Path) -> None:
    with pytest.raises(SourceUnavailable) as excinfo:
        _fetch(SourceFetcher(base_dir=tmp_path), "missing.json")

    assert excinfo.value.source == "missing.json"


def test_remote_source_success() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url == "https://sensors.example/feed.json"
        return httpx.Response(200, json=[{"ts": 1, "co2": 420}])

    fetcher = SourceFetcher(client=_mock_client(handler))

    assert _fetch(fetcher, "https://sensors.example/feed.json") == [{"ts": 1, "co2": 420}]


def test_remote_error_status_is_unavailable() -> None:
    fetcher = SourceFetcher(client=_mock_client(lambda request: httpx.Response(503)))

    with pytest.raises(SourceUnavailable) as excinfo:
        _fetch(fetcher, "https://sensors.example/feed.json")

    assert excinfo.value.status_code == 503


def test_remote_transport_error_is_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    fetcher = SourceFetcher(client=_mock_client(handler))

    with pytest.raises(SourceUnavailable):
        _fetch(fetcher, "http://sensors.example/feed.json")
