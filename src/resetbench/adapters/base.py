from abc import ABC, abstractmethod
from typing import Any

from resetbench.models.job import JobStatus


class JobStatusSource(ABC):
    @abstractmethod
    async def get_job_status(self, job_name: str) -> JobStatus | None:
        """Fetch a job's status. Returns None if the job does not exist."""


class ClusterAdapter(JobStatusSource):
    @abstractmethod
    async def list_nodes(self, label_selector: str) -> list[str]:
        """Return names of nodes matching a label selector."""

    @abstractmethod
    async def create_job(self, manifest: dict[str, Any]) -> str:
        """Create a Job from a rendered manifest. Returns the generated name."""

    @abstractmethod
    async def delete_job(self, job_name: str) -> None:
        """Delete a Job and its pods."""
