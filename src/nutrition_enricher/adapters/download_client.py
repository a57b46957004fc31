"""Streaming download of the compressed dataset export."""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import httpx

ProgressCallback = Callable[[int, int | None], None]

_CHUNK_SIZE = 1024 * 1024


class DatasetDownloadClient(Protocol):
    """Interface for fetching the dataset archive."""

    async def download(
        self, url: str, destination: Path, on_progress: ProgressCallback
    ) -> int:
        """Stream ``url`` into ``destination`` and return the bytes written."""


@dataclass
class HttpxDownloadClient(DatasetDownloadClient):
    """Download client implemented with httpx streaming."""

    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, read_timeout: float = 60.0) -> "HttpxDownloadClient":
        """Create a download client with a managed httpx session."""
        timeout = httpx.Timeout(30.0, read=read_timeout)
        return cls(
            http_client=httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        )

    async def download(
        self, url: str, destination: Path, on_progress: ProgressCallback
    ) -> int:
        """Stream the response body to disk, reporting bytes received."""
        received = 0
        async with self.http_client.stream("GET", url) as response:
            response.raise_for_status()
            total = _content_length(response)
            with destination.open("wb") as handle:
                async for chunk in response.aiter_bytes(_CHUNK_SIZE):
                    handle.write(chunk)
                    received += len(chunk)
                    on_progress(received, total)
        return received

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _content_length(response: httpx.Response) -> int | None:
    raw = response.headers.get("content-length")
    if raw is None or not raw.isdigit():
        return None
    return int(raw) or None
