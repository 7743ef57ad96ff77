"""
Exceptions raised by metric declaration and submetric derivation.

MetricsError (base)
├── NameSyntaxError (alias ErrMetricNameParsing)
├── EmptyCriteriaError
├── DuplicateSubmetricError
├── NestedSubmetricError
├── UnsupportedKindError
├── MetricRegistrationError
└── UnknownMetricError
"""
from __future__ import annotations

from typing import Any


class MetricsError(Exception):
    """Base class for all metric errors."""


class NameSyntaxError(MetricsError, ValueError):
    """A metric name expression could not be parsed.

    Every rule violation of the ``name{key:value,...}`` grammar raises this
    class, so callers can catch the category and still read ``detail``.
    """

    category = "parsing metric name failed"

    def __init__(self, expression: str, detail: str) -> None:
        self.expression = expression
        self.detail = detail
        super().__init__(f"{self.category}, {detail}")


ErrMetricNameParsing = NameSyntaxError


class EmptyCriteriaError(MetricsError, ValueError):
    """A submetric filter clause was empty after trimming."""

    def __init__(self, metric_name: str) -> None:
        self.metric_name = metric_name
        super().__init__(f"submetric criteria for metric '{metric_name}' cannot be empty")


class DuplicateSubmetricError(MetricsError):
    """A submetric with an equal tag set already exists on the parent."""

    def __init__(self, clause: str, metric_name: str, existing_name: str) -> None:
        self.clause = clause
        self.metric_name = metric_name
        self.existing_name = existing_name
        super().__init__(
            f"sub-metric with params '{clause}' already exists for metric "
            f"{metric_name}: {existing_name}"
        )


class NestedSubmetricError(MetricsError):
    """Submetrics are one level deep; a backing metric cannot have its own."""

    def __init__(self, metric_name: str) -> None:
        self.metric_name = metric_name
        super().__init__(f"metric '{metric_name}' is a submetric and cannot have submetrics")


class UnsupportedKindError(MetricsError, TypeError):
    """No sink exists for the given metric kind."""

    def __init__(self, kind: Any) -> None:
        self.kind = kind
        super().__init__(f"unsupported metric kind {kind!r}")


class MetricRegistrationError(MetricsError):
    """A metric could not be registered under the requested name."""


class UnknownMetricError(MetricsError, KeyError):
    """A metric name was referenced that is not registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"metric '{self.name}' is not registered"
