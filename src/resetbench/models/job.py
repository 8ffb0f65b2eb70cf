import time
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from .enums import JobState


def new_run_id() -> int:
    """Process-wide token namespacing every job created by one invocation."""
    return int(time.time())


class JobKey(BaseModel):
    """Structured identity of one job slot: (run, batch, node)."""

    model_config = {"frozen": True}

    run_id: int
    batch: int = Field(ge=1)
    node: str

    def name_prefix(self, base: str = "gpu-reset") -> str:
        # Server appends a random suffix to generateName.
        return f"{base}-{self.run_id}-batch-{self.batch}-"

    def labels(self, base: str = "gpu-reset") -> dict[str, str]:
        return {
            f"{base}/run-id": str(self.run_id),
            f"{base}/batch": str(self.batch),
            f"{base}/node": self.node,
        }


class JobStatus(BaseModel):
    """The subset of a Job's status the completion poller acts on."""

    succeeded: int = 0
    failed: int = 0
    active: int = 0
    start_time: Optional[datetime] = None
    completion_time: Optional[datetime] = None


class JobRecord(BaseModel):
    name: str
    node: str
    batch: int
    state: JobState = JobState.UNKNOWN

    @property
    def is_terminal(self) -> bool:
        return self.state.is_terminal


class Sample(BaseModel):
    """One completed job with valid timestamps."""

    model_config = {"frozen": True}

    job_name: str
    node: str
    start_time: datetime
    completion_time: datetime
    duration_seconds: int = Field(default=0, ge=0)

    @model_validator(mode="before")
    @classmethod
    def _derive_duration(cls, data):
        if isinstance(data, dict) and data.get("duration_seconds") is None:
            start, end = data.get("start_time"), data.get("completion_time")
            if isinstance(start, datetime) and isinstance(end, datetime):
                data = {**data, "duration_seconds": int((end - start).total_seconds())}
        return data


class PercentileReport(BaseModel):
    count: int
    p50: float
    p90: float
    p99: float
