"""Aggregation sinks, one per metric kind.

Sinks are not thread-safe; the registry serialises ``add`` calls.
"""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Dict, List, Optional

from tagmetrics.metrics.errors import UnsupportedKindError
from tagmetrics.metrics.sample import Sample
from tagmetrics.metrics.types import MetricType


class Sink(ABC):
    @abstractmethod
    def add(self, sample: Sample) -> None:
        ...

    @abstractmethod
    def format(self, duration: timedelta) -> Dict[str, float]:
        ...

    @abstractmethod
    def is_empty(self) -> bool:
        ...


class CounterSink(Sink):
    def __init__(self) -> None:
        self.value = 0.0
        self.first: Optional[Sample] = None

    def add(self, sample: Sample) -> None:
        self.value += sample.value
        if self.first is None:
            self.first = sample

    def format(self, duration: timedelta) -> Dict[str, float]:
        seconds = duration.total_seconds()
        rate = self.value / seconds if seconds > 0 else 0.0
        return {"count": self.value, "rate": rate}

    def is_empty(self) -> bool:
        return self.first is None


class GaugeSink(Sink):
    def __init__(self) -> None:
        self.value = 0.0
        self.min = 0.0
        self.max = 0.0
        self._seen = False

    def add(self, sample: Sample) -> None:
        self.value = sample.value
        if not self._seen or sample.value < self.min:
            self.min = sample.value
        if not self._seen or sample.value > self.max:
            self.max = sample.value
        self._seen = True

    def format(self, duration: timedelta) -> Dict[str, float]:
        return {"value": self.value, "min": self.min, "max": self.max}

    def is_empty(self) -> bool:
        return not self._seen


class TrendSink(Sink):
    def __init__(self) -> None:
        self.values: List[float] = []
        self.sum = 0.0
        self._sorted = True

    def add(self, sample: Sample) -> None:
        if self.values and sample.value < self.values[-1]:
            self._sorted = False
        self.values.append(sample.value)
        self.sum += sample.value

    def _ensure_sorted(self) -> None:
        if not self._sorted:
            self.values.sort()
            self._sorted = True

    def p(self, pct: float) -> float:
        """Linear-interpolated percentile, ``pct`` in [0, 1]."""
        if not self.values:
            return 0.0
        self._ensure_sorted()
        if pct <= 0:
            return self.values[0]
        if pct >= 1:
            return self.values[-1]
        position = pct * (len(self.values) - 1)
        lower = math.floor(position)
        upper = math.ceil(position)
        if lower == upper:
            return self.values[lower]
        weight = position - lower
        return self.values[lower] + (self.values[upper] - self.values[lower]) * weight

    def format(self, duration: timedelta) -> Dict[str, float]:
        count = len(self.values)
        if count == 0:
            return {"min": 0.0, "max": 0.0, "avg": 0.0, "med": 0.0, "count": 0}
        self._ensure_sorted()
        return {
            "min": self.values[0],
            "max": self.values[-1],
            "avg": self.sum / count,
            "med": self.p(0.5),
            "count": count,
        }

    def is_empty(self) -> bool:
        return not self.values


class RateSink(Sink):
    def __init__(self) -> None:
        self.trues = 0
        self.total = 0

    def add(self, sample: Sample) -> None:
        self.total += 1
        if sample.value != 0:
            self.trues += 1

    def format(self, duration: timedelta) -> Dict[str, float]:
        rate = self.trues / self.total if self.total else 0.0
        return {"rate": rate, "passes": self.trues, "fails": self.total - self.trues}

    def is_empty(self) -> bool:
        return self.total == 0


def sink_for(metric_type: MetricType) -> Sink:
    """Instantiate the sink matching ``metric_type``."""
    if metric_type is MetricType.COUNTER:
        return CounterSink()
    if metric_type is MetricType.GAUGE:
        return GaugeSink()
    if metric_type is MetricType.TREND:
        return TrendSink()
    if metric_type is MetricType.RATE:
        return RateSink()
    raise UnsupportedKindError(metric_type)
