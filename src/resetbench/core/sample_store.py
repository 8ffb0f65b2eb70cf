"""Append-only store of completed-job samples and its CSV artifact."""

from __future__ import annotations

import csv
from datetime import datetime, timezone
from typing import Iterator

from resetbench.models.job import Sample

CSV_HEADER = ["job_name", "node", "start_time", "completion_time", "duration_seconds"]


class SampleStore:
    def __init__(self):
        self._samples: list[Sample] = []
        self._job_names: set[str] = set()

    def append(self, sample: Sample) -> None:
        if sample.job_name in self._job_names:
            raise ValueError(f"Sample for {sample.job_name} already recorded")
        self._job_names.add(sample.job_name)
        self._samples.append(sample)

    def __contains__(self, job_name: str) -> bool:
        return job_name in self._job_names

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[Sample]:
        return iter(self._samples)

    @property
    def samples(self) -> list[Sample]:
        return list(self._samples)

    def durations(self) -> list[int]:
        """Sample durations in ascending order."""
        return sorted(s.duration_seconds for s in self._samples)

    def write_csv(self, path: str) -> None:
        with open(path, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(CSV_HEADER)
            for s in self._samples:
                writer.writerow([
                    s.job_name,
                    s.node,
                    _format_ts(s.start_time),
                    _format_ts(s.completion_time),
                    s.duration_seconds,
                ])

    @classmethod
    def read_csv(cls, path: str) -> SampleStore:
        store = cls()
        with open(path, newline="") as f:
            for row in csv.DictReader(f):
                store.append(Sample(
                    job_name=row["job_name"],
                    node=row["node"],
                    start_time=row["start_time"],
                    completion_time=row["completion_time"],
                    duration_seconds=int(row["duration_seconds"]),
                ))
        return store


def _format_ts(ts: datetime) -> str:
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc).replace(tzinfo=None)
    return ts.isoformat(timespec="seconds") + "Z"
