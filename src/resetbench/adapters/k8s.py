"""Kubernetes adapter using the official kubernetes Python client."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException

from resetbench.errors import ConfigurationError
from resetbench.models.job import JobStatus

from .base import ClusterAdapter

logger = logging.getLogger(__name__)


class KubernetesAdapter(ClusterAdapter):
    """Wraps synchronous kubernetes client calls in asyncio.to_thread()."""

    def __init__(
        self,
        namespace: str = "default",
        kubeconfig: str | None = None,
        in_cluster: bool = False,
    ):
        try:
            if in_cluster:
                config.load_incluster_config()
            else:
                config.load_kube_config(config_file=kubeconfig)
        except (ConfigException, OSError) as exc:
            raise ConfigurationError(f"Cannot load Kubernetes config: {exc}") from exc
        self._namespace = namespace
        self._core = client.CoreV1Api()
        self._batch = client.BatchV1Api()
        logger.info("Using Kubernetes namespace %s", namespace)

    def _list_nodes_sync(self, label_selector: str) -> list[str]:
        nodes = self._core.list_node(label_selector=label_selector)
        return [n.metadata.name for n in nodes.items]

    async def list_nodes(self, label_selector: str) -> list[str]:
        return await asyncio.to_thread(self._list_nodes_sync, label_selector)

    def _create_job_sync(self, manifest: dict[str, Any]) -> str:
        namespace = manifest.get("metadata", {}).get("namespace") or self._namespace
        job = self._batch.create_namespaced_job(namespace=namespace, body=manifest)
        return job.metadata.name

    async def create_job(self, manifest: dict[str, Any]) -> str:
        return await asyncio.to_thread(self._create_job_sync, manifest)

    def _get_job_status_sync(self, job_name: str) -> JobStatus | None:
        try:
            job = self._batch.read_namespaced_job_status(job_name, self._namespace)
        except ApiException as exc:
            if exc.status == 404:
                return None
            raise
        status = job.status
        if status is None:
            return JobStatus()
        return JobStatus(
            succeeded=status.succeeded or 0,
            failed=status.failed or 0,
            active=status.active or 0,
            start_time=status.start_time,
            completion_time=status.completion_time,
        )

    async def get_job_status(self, job_name: str) -> JobStatus | None:
        return await asyncio.to_thread(self._get_job_status_sync, job_name)

    def _delete_job_sync(self, job_name: str) -> None:
        self._batch.delete_namespaced_job(
            job_name,
            self._namespace,
            propagation_policy="Background",
        )

    async def delete_job(self, job_name: str) -> None:
        await asyncio.to_thread(self._delete_job_sync, job_name)
