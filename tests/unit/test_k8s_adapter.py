"""Unit tests for KubernetesAdapter — kubernetes client calls are mocked."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException

from resetbench.errors import ConfigurationError
from resetbench.models.job import JobStatus

from .conftest import T0


@pytest.fixture
def adapter():
    with patch("resetbench.adapters.k8s.config") as mock_config, \
            patch("resetbench.adapters.k8s.client") as mock_client:
        from resetbench.adapters.k8s import KubernetesAdapter

        adapter = KubernetesAdapter(namespace="gpu-ops", kubeconfig="/tmp/kubeconfig")
    adapter._mock_config = mock_config
    adapter._mock_client = mock_client
    return adapter


def test_loads_kubeconfig(adapter):
    adapter._mock_config.load_kube_config.assert_called_once_with(config_file="/tmp/kubeconfig")
    adapter._mock_config.load_incluster_config.assert_not_called()


def test_in_cluster_config():
    with patch("resetbench.adapters.k8s.config") as mock_config, \
            patch("resetbench.adapters.k8s.client"):
        from resetbench.adapters.k8s import KubernetesAdapter

        KubernetesAdapter(in_cluster=True)
    mock_config.load_incluster_config.assert_called_once()
    mock_config.load_kube_config.assert_not_called()


async def test_list_nodes(adapter):
    adapter._core.list_node.return_value = SimpleNamespace(items=[
        SimpleNamespace(metadata=SimpleNamespace(name="gpu-node-a")),
        SimpleNamespace(metadata=SimpleNamespace(name="gpu-node-b")),
    ])
    nodes = await adapter.list_nodes("pool=gpu")
    assert nodes == ["gpu-node-a", "gpu-node-b"]
    adapter._core.list_node.assert_called_once_with(label_selector="pool=gpu")


async def test_create_job_returns_generated_name(adapter):
    created = MagicMock()
    created.metadata.name = "gpu-reset-1-batch-1-x7k2p"
    adapter._batch.create_namespaced_job.return_value = created
    manifest = {"kind": "Job", "metadata": {"generateName": "gpu-reset-1-batch-1-"}}

    name = await adapter.create_job(manifest)
    assert name == "gpu-reset-1-batch-1-x7k2p"
    adapter._batch.create_namespaced_job.assert_called_once_with(namespace="gpu-ops", body=manifest)


async def test_create_job_honours_manifest_namespace(adapter):
    manifest = {"kind": "Job", "metadata": {"generateName": "p-", "namespace": "other"}}
    await adapter.create_job(manifest)
    assert adapter._batch.create_namespaced_job.call_args[1]["namespace"] == "other"


async def test_get_job_status(adapter):
    status = SimpleNamespace(succeeded=1, failed=None, active=None,
                             start_time=T0, completion_time=T0)
    adapter._batch.read_namespaced_job_status.return_value = SimpleNamespace(status=status)

    result = await adapter.get_job_status("job-1")
    assert result == JobStatus(succeeded=1, failed=0, active=0,
                               start_time=T0, completion_time=T0)
    adapter._batch.read_namespaced_job_status.assert_called_once_with("job-1", "gpu-ops")


async def test_get_job_status_not_found(adapter):
    adapter._batch.read_namespaced_job_status.side_effect = ApiException(status=404)
    assert await adapter.get_job_status("gone") is None


async def test_get_job_status_other_error_raises(adapter):
    adapter._batch.read_namespaced_job_status.side_effect = ApiException(status=500)
    with pytest.raises(ApiException):
        await adapter.get_job_status("job-1")


async def test_get_job_status_without_status_block(adapter):
    adapter._batch.read_namespaced_job_status.return_value = SimpleNamespace(status=None)
    assert await adapter.get_job_status("job-1") == JobStatus()


async def test_delete_job(adapter):
    await adapter.delete_job("job-1")
    adapter._batch.delete_namespaced_job.assert_called_once_with(
        "job-1", "gpu-ops", propagation_policy="Background",
    )


def test_bad_kubeconfig_is_configuration_error():
    with patch("resetbench.adapters.k8s.config") as mock_config, \
            patch("resetbench.adapters.k8s.client"):
        mock_config.load_kube_config.side_effect = ConfigException("No configuration found.")
        from resetbench.adapters.k8s import KubernetesAdapter

        with pytest.raises(ConfigurationError, match="No configuration found"):
            KubernetesAdapter(kubeconfig="/nonexistent/kubeconfig")
