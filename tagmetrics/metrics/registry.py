"""Process-wide metric registry.

Declares metrics by name, resolves ``name{key:value,...}`` expressions to
submetrics and routes samples into sinks. All mutations are thread-safe.
"""
from __future__ import annotations

import logging
import re
from datetime import timedelta
from threading import Lock
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from tagmetrics.core.structured_logging import log_debug
from tagmetrics.metrics.errors import MetricRegistrationError, UnknownMetricError
from tagmetrics.metrics.metric import Metric, Submetric, new_metric, parse_metric_name
from tagmetrics.metrics.sample import Sample
from tagmetrics.metrics.types import MetricType, ValueType

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(r"[\w._ !?/&#()<>%-]{1,128}")


def _as_metric_type(value: Union[str, MetricType]) -> MetricType:
    if isinstance(value, MetricType):
        return value
    return MetricType.parse(value)


def _as_value_type(value: Union[str, ValueType, None]) -> ValueType:
    if value is None:
        return ValueType.DEFAULT
    if isinstance(value, ValueType):
        return value
    return ValueType.parse(value)


def check_name(name: str) -> bool:
    return bool(_NAME_RE.fullmatch(name))


class Registry:
    def __init__(self) -> None:
        self._metrics: Dict[str, Metric] = {}
        self._lock = Lock()
        self._sink_lock = Lock()

    def new_metric(
        self,
        name: str,
        metric_type: Union[str, MetricType],
        value_type: Union[str, ValueType, None] = None,
    ) -> Metric:
        """Register ``name`` or return the metric already registered under it.

        Re-registering with a different type or value type is an error.
        """
        if not check_name(name):
            raise MetricRegistrationError(
                f"invalid metric name {name!r}: 1-128 letters, digits or ._ !?/&#()<>%- expected"
            )
        try:
            mt = _as_metric_type(metric_type)
            vt = _as_value_type(value_type)
        except ValueError as exc:
            raise MetricRegistrationError(f"metric {name!r}: {exc}") from exc

        with self._lock:
            existing = self._metrics.get(name)
            if existing is not None:
                if existing.type is not mt or existing.contains is not vt:
                    raise MetricRegistrationError(
                        f"metric {name!r} already registered as {existing.type}/{existing.contains}, "
                        f"requested {mt}/{vt}"
                    )
                return existing

            metric = new_metric(name, mt, vt)
            self._metrics[name] = metric

        log_debug(logger, "metric_registered", name=name, type=mt, contains=vt)
        return metric

    def get(self, name: str) -> Optional[Metric]:
        with self._lock:
            return self._metrics.get(name)

    def all(self) -> List[Metric]:
        with self._lock:
            return list(self._metrics.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._metrics)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._metrics

    def get_or_create_submetric(self, expression: str) -> Optional[Submetric]:
        """Resolve ``name{key:value,...}`` to a submetric of a registered metric.

        Returns None for a plain metric name. Raises NameSyntaxError for a
        malformed expression and UnknownMetricError when the base metric is
        not registered.
        """
        name, clauses = parse_metric_name(expression)
        metric = self.get(name)
        if metric is None:
            raise UnknownMetricError(name)
        if not clauses:
            return None

        submetric, created = metric.get_or_add_submetric(",".join(clauses))
        if created:
            log_debug(
                logger,
                "submetric_created",
                parent=metric.name,
                name=submetric.name,
                tags=submetric.tags,
            )
        return submetric

    def _registered(self, metric: Metric) -> None:
        with self._lock:
            if self._metrics.get(metric.name) is not metric:
                raise UnknownMetricError(metric.name)

    def push(self, samples: Iterable[Sample]) -> int:
        """Feed samples into their metric sinks and matching submetric sinks.

        Returns the number of samples consumed. Every sample must belong to a
        registered metric; otherwise nothing is consumed.
        """
        batch = list(samples)
        for sample in batch:
            self._registered(sample.metric)

        with self._sink_lock:
            for sample in batch:
                metric = sample.metric
                metric.sink.add(sample)
                metric.observed = True
                for sm in metric.submetrics:
                    if sm.metric is not None and sample.tags.contains(sm.tags):
                        sm.metric.sink.add(sample)
                        sm.metric.observed = True
        return len(batch)

    def snapshot(self, duration: timedelta) -> Dict[str, Dict[str, float]]:
        """Formatted aggregates for every observed metric and submetric."""
        result: Dict[str, Dict[str, float]] = {}
        with self._sink_lock:
            for metric in self.all():
                if metric.observed:
                    result[metric.name] = metric.sink.format(duration)
                for sm in metric.submetrics:
                    if sm.metric is not None and sm.metric.observed:
                        result[sm.name] = sm.metric.sink.format(duration)
        return result


def declare_metrics(registry: Registry, config: Mapping[str, Any]) -> List[Metric]:
    """Declare every entry of the ``metrics`` config block.

    Each entry needs ``name`` and ``type`` and may set ``contains``. A name
    carrying a tag filter declares the base metric and then its submetric.
    Returns the metrics declared, submetric backing metrics included.
    """
    declared: List[Metric] = []
    for entry in config.get("metrics") or []:
        if not isinstance(entry, Mapping) or "name" not in entry or "type" not in entry:
            raise MetricRegistrationError(f"metric declaration needs 'name' and 'type': {entry!r}")

        base_name, clauses = parse_metric_name(str(entry["name"]))
        metric = registry.new_metric(base_name, entry["type"], entry.get("contains"))
        if not clauses:
            declared.append(metric)
            continue

        submetric = registry.get_or_create_submetric(str(entry["name"]))
        if submetric is not None and submetric.metric is not None:
            declared.append(submetric.metric)
    return declared
