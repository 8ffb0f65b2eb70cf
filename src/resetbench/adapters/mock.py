from typing import Any

from resetbench.models.job import JobStatus

from .base import ClusterAdapter


class MockClusterAdapter(ClusterAdapter):
    """In-memory cluster. Each created job replays a scripted status sequence.

    ``status_script`` maps a node name to the list of statuses returned on
    successive queries for a job on that node; the last entry repeats. A
    ``None`` entry simulates the job disappearing from the API.
    """

    def __init__(
        self,
        nodes: list[str] | None = None,
        status_script: dict[str, list[JobStatus | None]] | None = None,
        default_status: JobStatus | None = None,
    ):
        self.calls: list[tuple[str, tuple, dict]] = []
        self.nodes = list(nodes or [])
        self.status_script = status_script or {}
        self.default_status = default_status or JobStatus(succeeded=1)
        self.jobs: dict[str, dict[str, Any]] = {}
        self.deleted_jobs: set[str] = set()
        self.fail_create_for: set[str] = set()
        self.fail_query_for: set[str] = set()
        self._query_counts: dict[str, int] = {}
        self._counter = 0

    async def list_nodes(self, label_selector: str) -> list[str]:
        self.calls.append(("list_nodes", (label_selector,), {}))
        return list(self.nodes)

    async def create_job(self, manifest: dict[str, Any]) -> str:
        self.calls.append(("create_job", (manifest,), {}))
        node = _manifest_node(manifest)
        if node in self.fail_create_for:
            raise RuntimeError(f"create rejected for {node}")
        self._counter += 1
        name = f"{manifest['metadata']['generateName']}{self._counter:05d}"
        self.jobs[name] = manifest
        return name

    async def get_job_status(self, job_name: str) -> JobStatus | None:
        self.calls.append(("get_job_status", (job_name,), {}))
        if job_name in self.fail_query_for:
            raise ConnectionError(f"status query failed for {job_name}")
        manifest = self.jobs.get(job_name)
        if manifest is None or job_name in self.deleted_jobs:
            return None
        script = self.status_script.get(_manifest_node(manifest))
        if not script:
            return self.default_status
        idx = self._query_counts.get(job_name, 0)
        self._query_counts[job_name] = idx + 1
        return script[min(idx, len(script) - 1)]

    async def delete_job(self, job_name: str) -> None:
        self.calls.append(("delete_job", (job_name,), {}))
        self.deleted_jobs.add(job_name)

    def calls_to(self, method: str) -> list[tuple[str, tuple, dict]]:
        return [c for c in self.calls if c[0] == method]


def _manifest_node(manifest: dict[str, Any]) -> str:
    labels = manifest.get("metadata", {}).get("labels", {})
    for key, value in labels.items():
        if key.endswith("/node"):
            return value
    return ""
