"""Metric declarations, tag-filtered submetrics and name expressions.

A metric name expression has the form ``name`` or ``name{key:value,...}``.
:func:`parse_metric_name` splits it into the base name and the raw
``key:value`` clauses. :meth:`Metric.add_submetric` accepts a comma-joined
clause string and re-parses it with a more permissive grammar: keys and
values may be quoted and a bare ``key`` maps to an empty value. The two
grammars are intentionally kept separate; callers joining parsed clauses
back together with ``","`` get the stricter of the two.

Nothing in this module logs. Failures are raised to the caller and never
leave a metric half-updated.
"""
from __future__ import annotations

from datetime import datetime
from threading import RLock
from typing import Dict, List, Optional, Tuple

from tagmetrics.metrics.errors import (
    DuplicateSubmetricError,
    EmptyCriteriaError,
    NameSyntaxError,
    NestedSubmetricError,
)
from tagmetrics.metrics.sample import Sample
from tagmetrics.metrics.sinks import Sink, sink_for
from tagmetrics.metrics.tags import SampleTags, into_sample_tags
from tagmetrics.metrics.types import MetricType, ValueType

_QUOTES = ("'", '"')


class Metric:
    """A named, typed series of observations with its aggregation sink."""

    def __init__(
        self,
        name: str,
        metric_type: MetricType,
        contains: ValueType,
        sink: Sink,
    ) -> None:
        self.name = name
        self.type = metric_type
        self.contains = contains
        self.sink = sink

        self.tainted: Optional[bool] = None
        self.thresholds: List[str] = []
        self.submetrics: List[Submetric] = []
        # set only on the backing metric of a submetric
        self.sub: Optional[Submetric] = None
        self.observed = False

        self._lock = RLock()

    def sample(self, time: datetime, tags: SampleTags, value: float) -> Sample:
        return Sample(time=time, tags=tags, value=value, metric=self)

    def find_submetric(self, tags: SampleTags) -> Optional["Submetric"]:
        for sm in self.submetrics:
            if sm.tags.is_equal(tags):
                return sm
        return None

    def add_submetric(self, key_values: str) -> "Submetric":
        """Create a submetric from a ``key:value,...`` clause and attach it.

        Raises:
            EmptyCriteriaError: the clause is blank.
            DuplicateSubmetricError: a submetric with an equal tag set exists.
            NestedSubmetricError: this metric already backs a submetric.
        """
        key_values = key_values.strip()
        if not key_values:
            raise EmptyCriteriaError(self.name)
        if self.sub is not None:
            raise NestedSubmetricError(self.name)

        tags = into_sample_tags(parse_submetric_clause(key_values))

        with self._lock:
            existing = self.find_submetric(tags)
            if existing is not None:
                raise DuplicateSubmetricError(key_values, self.name, existing.name)

            sub_metric = Submetric(
                name=f"{self.name}{{{key_values}}}",
                suffix=key_values,
                tags=tags,
                parent=self,
            )
            backing = new_metric(sub_metric.name, self.type, self.contains)
            backing.sub = sub_metric
            sub_metric.metric = backing

            self.submetrics.append(sub_metric)

        return sub_metric

    def get_or_add_submetric(self, key_values: str) -> Tuple["Submetric", bool]:
        """Return the submetric for ``key_values``, creating it when missing.

        The second element is True when a new submetric was created.
        """
        stripped = key_values.strip()
        if not stripped:
            raise EmptyCriteriaError(self.name)
        tags = into_sample_tags(parse_submetric_clause(stripped))
        with self._lock:
            existing = self.find_submetric(tags)
            if existing is not None:
                return existing, False
            return self.add_submetric(stripped), True

    def __repr__(self) -> str:
        return f"Metric(name={self.name!r}, type={self.type}, contains={self.contains})"


class Submetric:
    """A tag-filtered view over a parent metric, backed by its own metric."""

    def __init__(self, name: str, suffix: str, tags: SampleTags, parent: Metric) -> None:
        self.name = name
        self.suffix = suffix
        self.tags = tags
        self.parent = parent
        self.metric: Optional[Metric] = None

    def __repr__(self) -> str:
        return f"Submetric(name={self.name!r}, tags={self.tags!r})"


def new_metric(
    name: str,
    metric_type: MetricType,
    value_type: ValueType = ValueType.DEFAULT,
) -> Metric:
    """Build a metric with the sink matching ``metric_type``.

    Raises UnsupportedKindError for anything that is not a MetricType member.
    """
    sink = sink_for(metric_type)
    return Metric(name=name, metric_type=metric_type, contains=value_type, sink=sink)


def _strip_quotes(text: str) -> str:
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in _QUOTES:
        return text[1:-1]
    return text


def parse_submetric_clause(key_values: str) -> Dict[str, str]:
    """Parse ``key1:value1, 'key2':"value2", key3`` into a mapping.

    Bare keys map to ``""``; repeated keys keep the last value.
    """
    raw_tags: Dict[str, str] = {}
    for kv in key_values.split(","):
        if not kv.strip():
            continue
        key, sep, value = kv.partition(":")
        key = _strip_quotes(key)
        raw_tags[key] = _strip_quotes(value) if sep else ""
    return raw_tags


def parse_metric_name(name: str) -> Tuple[str, List[str]]:
    """Parse ``metric_name{tag_key:tag_value,...}``.

    Returns the base name and the trimmed ``key:value`` clauses in their
    original order; a plain name yields an empty list. Raises
    NameSyntaxError when the expression is malformed.
    """
    opening_pos = name.find("{")
    closing_pos = name.rfind("}")
    has_opening = opening_pos != -1
    has_closing = closing_pos != -1

    if not has_opening and not has_closing:
        return name, []

    if has_opening != has_closing:
        raise NameSyntaxError(
            name, f"metric {name!r} has unmatched opening/close curly brace"
        )

    if closing_pos < opening_pos:
        raise NameSyntaxError(
            name, f"metric {name!r} closing curly brace appears before opening one"
        )

    if closing_pos != len(name) - 1:
        raise NameSyntaxError(
            name, f"metric {name!r} lacks a closing curly brace in its last position"
        )

    tags = name[opening_pos + 1:closing_pos].split(",")
    for i, tag in enumerate(tags):
        key, sep, value = tag.partition(":")
        if not sep or not key.strip() or not value.strip():
            raise NameSyntaxError(name, f"metric {tag!r} tag expression is malformed")
        tags[i] = tag.strip()

    return name[:opening_pos], tags
