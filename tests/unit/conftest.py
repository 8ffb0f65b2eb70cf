from datetime import datetime, timedelta, timezone

import pytest

from resetbench.adapters.mock import MockClusterAdapter
from resetbench.core.template import JobTemplate
from resetbench.models.job import JobStatus

T0 = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

TEMPLATE_TEXT = """\
apiVersion: batch/v1
kind: Job
metadata:
  generateName: gpu-reset-manual-job-
  labels:
    app: gpu-reset
spec:
  template:
    spec:
      restartPolicy: Never
      nodeSelector:
        kubernetes.io/hostname: ##NODE_NAME##
      containers:
        - name: gpu-reset
          image: busybox
          env:
            - name: RESET_THRESHOLD_DAYS
              value: "##RESET_THRESHOLD_DAYS##"
"""

NODES = ["gpu-node-a", "gpu-node-b", "gpu-node-c"]


def done_status(duration=60, start=T0, succeeded=1, failed=0):
    return JobStatus(
        succeeded=succeeded,
        failed=failed,
        start_time=start,
        completion_time=start + timedelta(seconds=duration),
    )


@pytest.fixture
def template():
    return JobTemplate(TEMPLATE_TEXT)


@pytest.fixture
def template_file(settings):
    with open(settings.job_template_path, "w") as f:
        f.write(TEMPLATE_TEXT)
    return settings.job_template_path


@pytest.fixture
def mock_cluster():
    return MockClusterAdapter(nodes=list(NODES), default_status=done_status())
