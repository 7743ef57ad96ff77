"""Metric kinds and value classifications."""
from __future__ import annotations

from enum import Enum


class MetricType(Enum):
    """Aggregation kind of a metric; fixed when the metric is created."""

    COUNTER = "counter"
    GAUGE = "gauge"
    TREND = "trend"
    RATE = "rate"

    @classmethod
    def parse(cls, text: str) -> "MetricType":
        try:
            return cls(str(text).strip().lower())
        except ValueError:
            raise ValueError(f"unknown metric type {text!r}") from None

    def __str__(self) -> str:
        return self.value


class ValueType(Enum):
    """What a sampled value represents."""

    DEFAULT = "default"
    TIME = "time"
    DATA = "data"

    @classmethod
    def parse(cls, text: str) -> "ValueType":
        try:
            return cls(str(text).strip().lower())
        except ValueError:
            raise ValueError(f"unknown value type {text!r}") from None

    def __str__(self) -> str:
        return self.value
