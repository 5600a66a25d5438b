from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Iterable, List, Optional

import httpx

from services.errors import MalformedInput, SourceUnavailable

logger = logging.getLogger(__name__)

_REMOTE_SCHEMES = ("http://", "https://")
_FILE_SCHEME = "file://"


def split_sources(values: Iterable[str]) -> List[str]:
    """Flatten comma-separated source lists, dropping blank entries."""
    sources: List[str] = []
    for value in values:
        sources.extend(part.strip() for part in value.split(",") if part.strip())
    return sources


def is_remote(source: str) -> bool:
    return source.lower().startswith(_REMOTE_SCHEMES)


def decode_payload(raw: bytes, source: str = "<bytes>") -> Any:
    """Decode a UTF-8 JSON document (a leading BOM is tolerated)."""
    try:
        return json.loads(raw.decode("utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise MalformedInput(source, original_error=exc) from exc


class SourceFetcher:
    """Reads raw JSON documents from local files or remote URLs."""

    def __init__(
        self,
        base_dir: Optional[Path] = None,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_dir = base_dir or Path(".")
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    async def __aenter__(self) -> "SourceFetcher":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch(self, source: str) -> Any:
        """Return the decoded JSON document behind ``source``."""
        raw = await self.fetch_bytes(source)
        return decode_payload(raw, source)

    async def fetch_bytes(self, source: str) -> bytes:
        if is_remote(source):
            return await self._fetch_remote(source)
        return await self._read_local(source)

    def resolve_path(self, source: str) -> Path:
        if source.lower().startswith(_FILE_SCHEME):
            source = source[len(_FILE_SCHEME):]
        path = Path(source).expanduser()
        if path.is_absolute():
            return path
        return self.base_dir / path

    async def _fetch_remote(self, url: str) -> bytes:
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            raise SourceUnavailable(url, f"request failed: {exc}", original_error=exc) from exc

        if not response.is_success:
            raise SourceUnavailable(
                url,
                f"server answered with status {response.status_code}",
                status_code=response.status_code,
            )
        logger.debug(
            "Fetched remote source",
            extra={"source": url, "status_code": response.status_code},
        )
        return response.content

    async def _read_local(self, source: str) -> bytes:
        path = self.resolve_path(source)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            raise SourceUnavailable(source, f"cannot read {path}: {exc.strerror or exc}", original_error=exc) from exc
