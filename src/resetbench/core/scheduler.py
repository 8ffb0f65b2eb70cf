"""Batch Scheduler: runs waves of one-job-per-node until target_runs is covered."""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass, field

from resetbench.errors import ConfigurationError
from resetbench.models.job import JobRecord

from .launcher import JobLauncher
from .poller import BatchPollResult, CompletionPoller
from .sample_store import SampleStore

logger = logging.getLogger(__name__)


def compute_batch_count(target_runs: int, node_count: int) -> int:
    """ceil(target_runs / node_count)."""
    if target_runs < 1:
        raise ValueError(f"target_runs must be >= 1, got {target_runs}")
    if node_count < 1:
        raise ValueError(f"node_count must be >= 1, got {node_count}")
    return math.ceil(target_runs / node_count)


@dataclass
class BenchmarkResult:
    run_id: int
    nodes: list[str]
    batches: int
    store: SampleStore
    jobs: list[JobRecord] = field(default_factory=list)
    batch_results: list[BatchPollResult] = field(default_factory=list)

    @property
    def total_jobs(self) -> int:
        return len(self.jobs)


class BatchScheduler:
    """Launches batch N, waits for it to be fully terminal, then batch N+1."""

    def __init__(
        self,
        launcher: JobLauncher,
        poller: CompletionPoller,
        target_runs: int,
        *,
        batch_pause: float = 0.0,
    ):
        self.launcher = launcher
        self.poller = poller
        self.target_runs = target_runs
        self.batch_pause = batch_pause
        self.jobs: list[JobRecord] = []

    async def run(self, nodes: list[str], run_id: int) -> BenchmarkResult:
        if not nodes:
            raise ConfigurationError("No nodes found.")
        batches = compute_batch_count(self.target_runs, len(nodes))
        logger.info(
            "Targeting %d runs. Will run %d batches on %d nodes.",
            self.target_runs, batches, len(nodes),
        )

        result = BenchmarkResult(
            run_id=run_id, nodes=list(nodes), batches=batches,
            store=self.poller.store, jobs=self.jobs,
        )
        for batch in range(1, batches + 1):
            logger.info("Starting Batch %d / %d", batch, batches)
            # Created jobs land in self.jobs even if a sibling submission fails.
            batch_jobs = await self.launcher.launch_batch(
                nodes, run_id, batch, created=self.jobs,
            )

            result.batch_results.append(
                await self.poller.wait_for_batch(batch, batch_jobs)
            )
            if self.batch_pause and batch < batches:
                await asyncio.sleep(self.batch_pause)

        return result
