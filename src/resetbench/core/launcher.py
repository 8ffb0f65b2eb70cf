"""Job Launcher: renders the reset Job template and submits one Job per node."""

from __future__ import annotations

import asyncio
import logging

from resetbench.adapters.base import ClusterAdapter
from resetbench.config import Settings
from resetbench.errors import SubmissionError
from resetbench.models.job import JobKey, JobRecord

from .template import JobTemplate

logger = logging.getLogger(__name__)


class JobLauncher:
    def __init__(self, cluster: ClusterAdapter, template: JobTemplate, settings: Settings):
        self.cluster = cluster
        self.template = template
        self.settings = settings

    async def launch(self, node: str, run_id: int, batch: int) -> JobRecord:
        """Submit exactly one Job for ``node`` in ``batch``. Returns its record."""
        key = JobKey(run_id=run_id, batch=batch, node=node)
        prefix = self.settings.job_name_prefix
        try:
            manifest = self.template.render(
                node=node,
                reset_threshold_days=self.settings.reset_threshold_days,
                generate_name=key.name_prefix(prefix),
                labels=key.labels(prefix),
            )
            job_name = await self.cluster.create_job(manifest)
        except Exception as exc:
            raise SubmissionError(
                f"Failed to submit job for {node} (batch {batch}): {exc}"
            ) from exc

        logger.info("Submitted %s for %s (Batch %d)", job_name, node, batch)
        return JobRecord(name=job_name, node=node, batch=batch)

    async def launch_batch(
        self,
        nodes: list[str],
        run_id: int,
        batch: int,
        created: list[JobRecord] | None = None,
    ) -> list[JobRecord]:
        """Launch one Job per node. Creation order across nodes is unspecified.

        Every successfully created job is appended to ``created`` before the
        first SubmissionError is raised, so callers can still clean it up.
        """
        outcomes = await asyncio.gather(
            *(self.launch(node, run_id, batch) for node in nodes),
            return_exceptions=True,
        )
        records = [o for o in outcomes if isinstance(o, JobRecord)]
        if created is not None:
            created.extend(records)
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome
        return records
