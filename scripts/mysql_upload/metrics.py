"""
Timing and row-count metrics for upload phases.
"""
import time
from dataclasses import dataclass
from typing import Dict, Optional


@dataclass
class PhaseTimer:
    """Accumulated timing for one upload phase."""
    start_time: Optional[float] = None
    total_time: float = 0.0
    count: int = 0

    def start(self):
        self.start_time = time.perf_counter()

    def stop(self) -> float:
        if self.start_time is None:
            return 0.0
        duration = time.perf_counter() - self.start_time
        self.total_time += duration
        self.count += 1
        self.start_time = None
        return duration


class MetricsCollector:
    """
    Collects phase timings (stage, connect, query) and counters
    (rows_loaded, uploads_failed) across uploads.
    """

    def __init__(self):
        self._timers: Dict[str, PhaseTimer] = {}
        self._counters: Dict[str, int] = {}
        self._start_time = time.perf_counter()

    def start_timer(self, name: str):
        self._timers.setdefault(name, PhaseTimer()).start()

    def stop_timer(self, name: str) -> float:
        timer = self._timers.get(name)
        return timer.stop() if timer else 0.0

    def record_count(self, name: str, amount: int = 1):
        self._counters[name] = self._counters.get(name, 0) + amount

    def get_count(self, name: str) -> int:
        return self._counters.get(name, 0)

    def get_timer_stats(self, name: str) -> Dict[str, float]:
        timer = self._timers.get(name)
        if timer is None:
            return {"total": 0.0, "count": 0}
        return {"total": timer.total_time, "count": timer.count}

    def format_summary(self) -> str:
        """Format complete metrics summary."""
        lines = ["", "Upload Metrics:", "=" * 50]
        lines.append(f"Total execution time: {time.perf_counter() - self._start_time:.3f}s")

        if self._counters:
            lines.append("Counters:")
            for name, count in sorted(self._counters.items()):
                lines.append(f"  {name}: {count:,}")

        if self._timers:
            lines.append("Phase timings:")
            for name, timer in sorted(self._timers.items()):
                if timer.count > 0:
                    lines.append(f"  {name}: {timer.count} ops, total {timer.total_time:.3f}s")

        lines.append("=" * 50)
        return "\n".join(lines)
