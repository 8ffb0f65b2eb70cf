import pytest

from resetbench.config import Settings


@pytest.fixture
def settings(tmp_path):
    return Settings(
        target_runs=7,
        node_selector="cloud.google.com/gke-accelerator=nvidia-b200",
        job_template_path=str(tmp_path / "gpu-reset-job.yaml"),
        poll_interval=0,
        output_dir=str(tmp_path / "out"),
    )
