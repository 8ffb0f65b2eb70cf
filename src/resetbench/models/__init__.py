from .enums import TERMINAL_STATES, JobState
from .job import JobKey, JobRecord, JobStatus, PercentileReport, Sample, new_run_id

__all__ = [
    "JobKey",
    "JobRecord",
    "JobState",
    "JobStatus",
    "PercentileReport",
    "Sample",
    "TERMINAL_STATES",
    "new_run_id",
]
