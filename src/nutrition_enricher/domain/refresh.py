"""Dataset refresh domain models."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class RefreshState(StrEnum):
    """Lifecycle state of the dataset refresh pipeline."""

    IDLE = "idle"
    DOWNLOADING = "downloading"
    DECOMPRESSING = "decompressing"
    COMPLETED = "completed"
    ERROR = "error"


ACTIVE_STATES = frozenset({RefreshState.DOWNLOADING, RefreshState.DECOMPRESSING})


class RefreshOutcome(StrEnum):
    """Answer to a refresh request."""

    ACCEPTED = "accepted"
    REJECTED_IN_PROGRESS = "already_in_progress"


@dataclass(frozen=True)
class RefreshStatus:
    """Snapshot of the refresh pipeline state."""

    state: RefreshState = RefreshState.IDLE
    progress: int = 0
    last_update: datetime | None = None
    error: str | None = None

    @property
    def is_downloading(self) -> bool:
        """Whether a refresh run is active."""
        return self.state in ACTIVE_STATES

    def as_dict(self) -> dict[str, object]:
        """Serialize in the status query format."""
        return {
            "isDownloading": self.is_downloading,
            "progress": self.progress,
            "status": self.state.value,
            "lastUpdate": self.last_update.isoformat() if self.last_update else None,
            "error": self.error,
        }


@dataclass(frozen=True)
class DatasetInfo:
    """Freshness of the installed dataset file."""

    exists: bool
    last_modified: datetime | None
    hours_since_update: float | None
    needs_update: bool
