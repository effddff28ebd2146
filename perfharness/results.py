"""Append-only sample accumulator shared by the workers of one run."""

import threading
from typing import List

from perfharness.models import MetricSample


class ResultSet:
    """Ordered-by-completion collection of MetricSamples for a single run.

    Appends are serialized with a lock so concurrent writers never lose or
    duplicate a sample. Readers work on snapshots.
    """

    def __init__(self):
        self._samples: List[MetricSample] = []
        self._lock = threading.Lock()

    def append(self, sample: MetricSample) -> None:
        with self._lock:
            self._samples.append(sample)

    def snapshot(self) -> List[MetricSample]:
        with self._lock:
            return list(self._samples)

    def average_response_time(self) -> float:
        """Mean response time over every sample, successful or not."""
        samples = self.snapshot()
        if not samples:
            return 0.0
        return sum(s.response_time for s in samples) / len(samples)

    def __len__(self) -> int:
        with self._lock:
            return len(self._samples)
