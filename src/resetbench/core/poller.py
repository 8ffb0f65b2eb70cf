"""Completion Poller: drives each Job in a batch to a terminal state.

Per-job state machine::

    unknown -> {pending, running} -> {succeeded, failed, missing}

A job the API no longer knows about becomes ``missing``. A job reporting
succeeded/failed counts is terminal; it yields a Sample only when both
start and completion timestamps are present. Terminal jobs are never
queried again, so a batch is complete exactly when every job is terminal.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass

from resetbench.adapters.base import JobStatusSource
from resetbench.errors import PollTimeoutError
from resetbench.models.enums import JobState
from resetbench.models.job import JobRecord, JobStatus, Sample

from .sample_store import SampleStore

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 5.0
NO_TIMEOUT = None


@dataclass
class BatchPollResult:
    """Counts after one polling round over a batch."""
    batch: int
    running: int = 0
    pending: int = 0
    succeeded: int = 0
    failed: int = 0
    missing: int = 0
    samples_recorded: int = 0

    @property
    def complete(self) -> bool:
        return self.running == 0 and self.pending == 0


class CompletionPoller:
    """Polls job status on a fixed interval. Sole writer to the SampleStore."""

    def __init__(
        self,
        status_source: JobStatusSource,
        store: SampleStore,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_wait: float | None = NO_TIMEOUT,
    ):
        self.status_source = status_source
        self.store = store
        self.poll_interval = poll_interval
        self.max_wait = max_wait

    async def wait_for_batch(self, batch: int, jobs: list[JobRecord]) -> BatchPollResult:
        """Block until every job in ``jobs`` is terminal."""
        logger.info("Waiting for batch %d to complete...", batch)
        started = time.monotonic()
        while True:
            result = await self.poll_once(batch, jobs)
            if result.complete:
                logger.info("Batch %d completed.", batch)
                return result

            logger.info("Batch %d Running: %d, Pending: %d", batch, result.running, result.pending)
            if self.max_wait is not None and time.monotonic() - started >= self.max_wait:
                raise PollTimeoutError(
                    f"Batch {batch} not complete after {self.max_wait}s "
                    f"(running={result.running}, pending={result.pending})"
                )
            await asyncio.sleep(self.poll_interval)

    async def poll_once(self, batch: int, jobs: list[JobRecord]) -> BatchPollResult:
        """Query every non-terminal job once and tally the batch."""
        result = BatchPollResult(batch=batch)
        for job in jobs:
            if not job.is_terminal:
                if await self._refresh(job):
                    result.samples_recorded += 1

            if job.state == JobState.SUCCEEDED:
                result.succeeded += 1
            elif job.state == JobState.FAILED:
                result.failed += 1
            elif job.state == JobState.MISSING:
                result.missing += 1
            elif job.state == JobState.RUNNING:
                result.running += 1
            else:
                result.pending += 1
        return result

    async def _refresh(self, job: JobRecord) -> bool:
        """Advance one job's state. Returns True if a Sample was appended."""
        try:
            status = await self.status_source.get_job_status(job.name)
        except Exception as exc:
            # No data this round; next interval retries.
            logger.warning("Status query for %s failed: %s", job.name, exc)
            return False

        if status is None:
            logger.warning("Job %s not found.", job.name)
            job.state = JobState.MISSING
            return False

        if status.succeeded >= 1 or status.failed >= 1:
            job.state = JobState.SUCCEEDED if status.succeeded >= 1 else JobState.FAILED
            return self._record(job, status)

        job.state = JobState.RUNNING if status.active >= 1 else JobState.PENDING
        return False

    def _record(self, job: JobRecord, status: JobStatus) -> bool:
        start, end = status.start_time, status.completion_time
        if start is None or end is None:
            logger.warning(
                "Job %s (Node %s) finished but missing times. S/F: %d/%d",
                job.name, job.node, status.succeeded, status.failed,
            )
            return False
        if end < start:
            logger.warning(
                "Job %s (Node %s) completion time %s precedes start time %s",
                job.name, job.node, end.isoformat(), start.isoformat(),
            )
            return False
        if job.name in self.store:
            return False

        sample = Sample(
            job_name=job.name,
            node=job.node,
            start_time=start,
            completion_time=end,
        )
        self.store.append(sample)
        logger.info(
            "Job %s (Node %s) %s in %ds",
            job.name, job.node, job.state.value, sample.duration_seconds,
        )
        return True
