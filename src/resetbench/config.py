from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "RESETBENCH_"}

    # Benchmark size
    target_runs: int = 30

    # Node discovery
    node_selector: str = "cloud.google.com/gke-accelerator=nvidia-b200"

    # Job template
    job_template_path: str = "gpu-reset-job.yaml"
    reset_threshold_days: str = "-1"  # negative forces a reset
    template_name_prefix: str = "gpu-reset-manual-job-"
    job_name_prefix: str = "gpu-reset"

    # Kubernetes
    namespace: str = "default"
    kubeconfig: str | None = None
    in_cluster: bool = False

    # Completion polling
    poll_interval: float = 5.0
    max_wait: float | None = None  # seconds per batch; None waits forever
    batch_pause: float = 0.0

    # Output
    output_dir: str | None = None  # temporary directory if None
    cleanup_jobs: bool = False

    # Logging
    log_level: str = "INFO"
