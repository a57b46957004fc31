"""Periodic dataset refresh scheduling."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from nutrition_enricher.domain.refresh import RefreshOutcome
from nutrition_enricher.services.refresh import DatasetRefreshService

_logger = logging.getLogger(__name__)

REFRESH_JOB_ID = "refresh_dataset"


def parse_cron(expr: str) -> CronTrigger:
    """Parse a five-field cron expression into a trigger."""
    parts = expr.split()
    if len(parts) != 5:
        raise ValueError(f"Invalid cron expression: {expr!r}")
    minute, hour, day, month, day_of_week = parts
    return CronTrigger(
        minute=minute,
        hour=hour,
        day=day,
        month=month,
        day_of_week=day_of_week,
    )


class DatasetRefreshScheduler:
    """Runs the dataset refresh on a cron schedule via APScheduler."""

    def __init__(
        self,
        refresh_service: DatasetRefreshService,
        cron: str = "0 1 * * *",
    ) -> None:
        self._refresh_service = refresh_service
        self._cron = cron
        self._scheduler = AsyncIOScheduler()
        self._running = False

    def setup_jobs(self) -> None:
        """Register the refresh job."""
        self._scheduler.add_job(
            self._job_refresh_dataset,
            trigger=parse_cron(self._cron),
            id=REFRESH_JOB_ID,
            name="Nutrition dataset refresh",
            replace_existing=True,
        )
        _logger.info("Registered dataset refresh job: %s", self._cron)

    def start(self) -> None:
        """Start the scheduler; requires a running event loop."""
        if self._running:
            return
        self.setup_jobs()
        self._scheduler.start()
        self._running = True
        _logger.info("Scheduler started")

    def stop(self) -> None:
        """Stop the scheduler."""
        if self._running:
            self._scheduler.shutdown(wait=False)
            self._running = False
            _logger.info("Scheduler stopped")

    @property
    def running(self) -> bool:
        return self._running

    def get_jobs(self) -> list[dict[str, str | None]]:
        """Return info about scheduled jobs."""
        jobs = []
        for job in self._scheduler.get_jobs():
            next_run = getattr(job, "next_run_time", None)
            jobs.append(
                {
                    "id": job.id,
                    "name": job.name,
                    "next_run": str(next_run) if next_run else None,
                }
            )
        return jobs

    async def _job_refresh_dataset(self) -> None:
        """Scheduled refresh; overlapping runs are skipped."""
        _logger.info("Scheduled dataset refresh starting")
        outcome = await self._refresh_service.refresh()
        if outcome is RefreshOutcome.REJECTED_IN_PROGRESS:
            _logger.info("Scheduled refresh skipped: another refresh is running")
            return
        status = self._refresh_service.status()
        _logger.info("Scheduled dataset refresh finished: %s", status.state)
