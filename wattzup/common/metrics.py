from dataclasses import dataclass, field
from typing import Dict, List
import threading
import time

@dataclass
class EstimationMetrics:
    """Estimation throughput and latency metrics"""
    estimates_computed: int
    failures: int
    avg_compute_time_ms: float
    estimates_per_second: float
    mode_counts: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {
            'estimates_computed': self.estimates_computed,
            'failures': self.failures,
            'avg_compute_time_ms': self.avg_compute_time_ms,
            'estimates_per_second': self.estimates_per_second,
            'mode_counts': dict(self.mode_counts)
        }


class MetricsCollector:
    """Collects and aggregates estimation metrics"""

    def __init__(self):
        self.compute_times: List[float] = []
        self.mode_counts: Dict[str, int] = {}
        self.estimates_computed = 0
        self.failures = 0
        self.start_time = time.time()
        # Batch estimation records from worker threads
        self._lock = threading.Lock()

    def record_estimate(self, duration_ms: float, mode: str):
        with self._lock:
            self.compute_times.append(duration_ms)
            self.estimates_computed += 1
            self.mode_counts[mode] = self.mode_counts.get(mode, 0) + 1
            # Keep buffer size manageable
            if len(self.compute_times) > 1000:
                self.compute_times.pop(0)

    def record_failure(self):
        with self._lock:
            self.failures += 1

    def get_metrics(self) -> EstimationMetrics:
        with self._lock:
            elapsed = time.time() - self.start_time
            rate = self.estimates_computed / elapsed if elapsed > 0 else 0.0
            avg = sum(self.compute_times) / len(self.compute_times) if self.compute_times else 0.0

            return EstimationMetrics(
                estimates_computed=self.estimates_computed,
                failures=self.failures,
                avg_compute_time_ms=avg,
                estimates_per_second=rate,
                mode_counts=dict(self.mode_counts)
            )
