"""Background download and installation of the nutrition dataset."""

import asyncio
import gzip
import logging
import os
import threading
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from pathlib import Path

from nutrition_enricher.adapters.download_client import DatasetDownloadClient
from nutrition_enricher.domain.refresh import (
    DatasetInfo,
    RefreshOutcome,
    RefreshState,
    RefreshStatus,
)

_logger = logging.getLogger(__name__)

DOWNLOAD_START_PROGRESS = 10
DOWNLOAD_END_PROGRESS = 85
DECOMPRESS_START_PROGRESS = 85
DECOMPRESS_END_PROGRESS = 95

_COPY_CHUNK_SIZE = 4 * 1024 * 1024


class DatasetRefreshError(Exception):
    """Raised when a fresh dataset cannot be downloaded or installed."""


@dataclass
class DatasetRefreshService:
    """Owns the dataset file on disk and the process-wide refresh status.

    This service is the only writer of :class:`RefreshStatus`. At most one
    refresh runs at a time; overlapping requests are rejected, not queued.
    The live file is replaced by an atomic rename only after a complete
    decompression, so a failed run leaves the previous dataset in place.
    """

    download_client: DatasetDownloadClient
    source_url: str
    dataset_path: Path
    download_timeout_seconds: float = 600.0
    max_age_hours: float = 24.0
    _status: RefreshStatus = field(default_factory=RefreshStatus, init=False)
    _active: bool = field(default=False, init=False)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )
    _task: "asyncio.Task[None] | None" = field(default=None, init=False, repr=False)

    def status(self) -> RefreshStatus:
        """Return the current status snapshot."""
        return self._status

    def dataset_info(self, now: datetime | None = None) -> DatasetInfo:
        """Describe the installed dataset file and whether it is stale."""
        try:
            stat = self.dataset_path.stat()
        except FileNotFoundError:
            return DatasetInfo(
                exists=False,
                last_modified=None,
                hours_since_update=None,
                needs_update=True,
            )
        last_modified = datetime.fromtimestamp(stat.st_mtime, tz=UTC)
        current = now or datetime.now(tz=UTC)
        hours = max((current - last_modified).total_seconds() / 3600, 0.0)
        return DatasetInfo(
            exists=True,
            last_modified=last_modified,
            hours_since_update=hours,
            needs_update=hours > self.max_age_hours,
        )

    def start_refresh(self) -> RefreshOutcome:
        """Start a refresh in the background unless one is already running.

        Must be called from a running event loop.
        """
        loop = asyncio.get_running_loop()
        if not self._claim():
            _logger.info("Dataset refresh already in progress, rejecting request")
            return RefreshOutcome.REJECTED_IN_PROGRESS
        self._task = loop.create_task(self._run())
        return RefreshOutcome.ACCEPTED

    async def refresh(self) -> RefreshOutcome:
        """Run a refresh to completion unless one is already running."""
        if not self._claim():
            _logger.info("Dataset refresh already in progress, skipping")
            return RefreshOutcome.REJECTED_IN_PROGRESS
        await self._run()
        return RefreshOutcome.ACCEPTED

    async def join(self) -> None:
        """Wait for the background refresh started last, if any."""
        task = self._task
        if task is not None and not task.done():
            await asyncio.shield(task)

    def _claim(self) -> bool:
        with self._lock:
            if self._active:
                return False
            self._active = True
            self._publish(
                RefreshStatus(
                    state=RefreshState.DOWNLOADING,
                    progress=0,
                    last_update=self._status.last_update,
                )
            )
            return True

    def _publish(self, status: RefreshStatus) -> None:
        """Replace the current snapshot; callers hold the lock."""
        self._status = status

    def _advance(self, progress: int, state: RefreshState | None = None) -> None:
        with self._lock:
            current = self._status
            self._publish(
                replace(
                    current,
                    state=state or current.state,
                    progress=max(current.progress, min(progress, 100)),
                )
            )

    async def _run(self) -> None:
        name = self.dataset_path.name
        temp_path = self.dataset_path.with_name(f"temp-{name}.gz")
        staging_path = self.dataset_path.with_name(f"{name}.partial")
        error: str | None = "Refresh cancelled"
        try:
            await self._download_and_install(temp_path, staging_path)
            error = None
        except Exception as exc:
            _logger.exception("Dataset refresh failed")
            error = str(exc) or type(exc).__name__
        finally:
            for artifact in (temp_path, staging_path):
                artifact.unlink(missing_ok=True)
            self._finish(error)

    async def _download_and_install(self, temp_path: Path, staging_path: Path) -> None:
        self.dataset_path.parent.mkdir(parents=True, exist_ok=True)
        self._advance(DOWNLOAD_START_PROGRESS)
        _logger.info("Downloading dataset from %s", self.source_url)
        try:
            size = await asyncio.wait_for(
                self.download_client.download(
                    self.source_url, temp_path, self._on_download_progress
                ),
                timeout=self.download_timeout_seconds,
            )
        except TimeoutError as exc:
            raise DatasetRefreshError(
                f"Download timed out after {self.download_timeout_seconds:g}s"
            ) from exc
        if size == 0:
            raise DatasetRefreshError("Downloaded archive is empty")

        _logger.info("Decompressing dataset archive (%s bytes)", size)
        self._advance(DECOMPRESS_START_PROGRESS, RefreshState.DECOMPRESSING)
        await asyncio.to_thread(self._decompress, temp_path, staging_path)
        os.replace(staging_path, self.dataset_path)
        _logger.info("Installed dataset at %s", self.dataset_path)

    def _on_download_progress(self, received: int, total: int | None) -> None:
        if not total:
            return
        span = DOWNLOAD_END_PROGRESS - DOWNLOAD_START_PROGRESS
        fraction = min(received / total, 1.0)
        self._advance(DOWNLOAD_START_PROGRESS + int(fraction * span))

    def _decompress(self, source: Path, destination: Path) -> None:
        total = source.stat().st_size
        span = DECOMPRESS_END_PROGRESS - DECOMPRESS_START_PROGRESS
        written = 0
        with (
            source.open("rb") as raw,
            gzip.GzipFile(fileobj=raw) as archive,
            destination.open("wb") as output,
        ):
            while chunk := archive.read(_COPY_CHUNK_SIZE):
                output.write(chunk)
                written += len(chunk)
                fraction = min(raw.tell() / total, 1.0) if total else 1.0
                self._advance(DECOMPRESS_START_PROGRESS + int(fraction * span))
        if written == 0:
            raise DatasetRefreshError("Decompressed dataset is empty")

    def _finish(self, error: str | None) -> None:
        with self._lock:
            current = self._status
            if error is None:
                self._publish(
                    RefreshStatus(
                        state=RefreshState.COMPLETED,
                        progress=100,
                        last_update=datetime.now(tz=UTC),
                    )
                )
            else:
                self._publish(replace(current, state=RefreshState.ERROR, error=error))
            self._active = False
        if error is None:
            _logger.info("Dataset refresh completed")
