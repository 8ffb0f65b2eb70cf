"""Benchmark runner: node discovery, template check, batches, artifact, cleanup."""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass

from resetbench.adapters.base import ClusterAdapter
from resetbench.config import Settings
from resetbench.errors import ConfigurationError
from resetbench.models.job import PercentileReport, new_run_id

from .launcher import JobLauncher
from .percentiles import compute_report
from .poller import CompletionPoller
from .sample_store import SampleStore
from .scheduler import BatchScheduler, BenchmarkResult
from .template import JobTemplate

logger = logging.getLogger(__name__)

RESULTS_FILENAME = "results.csv"


@dataclass
class BenchmarkOutcome:
    result: BenchmarkResult
    results_path: str
    report: PercentileReport | None


class BenchmarkRunner:
    def __init__(self, cluster: ClusterAdapter, settings: Settings):
        self.cluster = cluster
        self.settings = settings
        self.scheduler: BatchScheduler | None = None

    async def discover_nodes(self) -> list[str]:
        selector = self.settings.node_selector
        logger.info("Finding nodes using selector: %s", selector)
        nodes = await self.cluster.list_nodes(selector)
        if not nodes:
            raise ConfigurationError(f"No nodes found for selector {selector}.")
        logger.info("Found %d nodes: %s", len(nodes), " ".join(nodes))
        return nodes

    def prepare_output_dir(self) -> str:
        if self.settings.output_dir:
            os.makedirs(self.settings.output_dir, exist_ok=True)
            return self.settings.output_dir
        return tempfile.mkdtemp(prefix="resetbench-")

    async def run(self, run_id: int | None = None) -> BenchmarkOutcome:
        """Run the whole benchmark. Configuration errors abort before any Job exists."""
        nodes = await self.discover_nodes()
        template = JobTemplate.load(self.settings.job_template_path)

        run_id = run_id if run_id is not None else new_run_id()
        logger.info("Run ID: %d", run_id)

        output_dir = self.prepare_output_dir()
        results_path = os.path.join(output_dir, RESULTS_FILENAME)
        logger.info("Tracking jobs in %s", output_dir)

        store = SampleStore()
        poller = CompletionPoller(
            self.cluster,
            store,
            poll_interval=self.settings.poll_interval,
            max_wait=self.settings.max_wait,
        )
        launcher = JobLauncher(self.cluster, template, self.settings)
        self.scheduler = BatchScheduler(
            launcher, poller, self.settings.target_runs,
            batch_pause=self.settings.batch_pause,
        )
        try:
            result = await self.scheduler.run(nodes, run_id)
        finally:
            store.write_csv(results_path)
            await self.cleanup()

        return BenchmarkOutcome(
            result=result,
            results_path=results_path,
            report=compute_report(store.durations()),
        )

    async def cleanup(self) -> None:
        """Exit hook. Deletes created jobs only when cleanup_jobs is set."""
        if not self.settings.cleanup_jobs or self.scheduler is None:
            return
        logger.info("Cleaning up %d jobs...", len(self.scheduler.jobs))
        for job in self.scheduler.jobs:
            try:
                await self.cluster.delete_job(job.name)
            except Exception:
                logger.exception("Failed to delete job %s", job.name)
