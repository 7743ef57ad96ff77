from datetime import datetime, timedelta

import pytest

from tagmetrics.metrics.errors import UnsupportedKindError
from tagmetrics.metrics.metric import new_metric
from tagmetrics.metrics.sinks import Sink, sink_for
from tagmetrics.metrics.tags import SampleTags
from tagmetrics.metrics.types import MetricType

_TS = datetime(2024, 1, 1, 12, 0, 0)


def _feed(metric_type, values):
    metric = new_metric("m", metric_type)
    for v in values:
        metric.sink.add(metric.sample(_TS, SampleTags(), v))
    return metric.sink


def test_counter_sums_and_computes_rate():
    sink = _feed(MetricType.COUNTER, [1, 2, 3])
    assert sink.format(timedelta(seconds=2)) == {"count": 6.0, "rate": 3.0}
    assert sink.first.value == 1
    assert sink.format(timedelta(0))["rate"] == 0.0


def test_gauge_tracks_last_min_max():
    sink = _feed(MetricType.GAUGE, [5, -1, 3])
    assert sink.format(timedelta(seconds=1)) == {"value": 3, "min": -1, "max": 5}


def test_trend_summary():
    sink = _feed(MetricType.TREND, [4, 1, 3, 2])
    summary = sink.format(timedelta(seconds=1))
    assert summary["min"] == 1
    assert summary["max"] == 4
    assert summary["avg"] == pytest.approx(2.5)
    assert summary["med"] == pytest.approx(2.5)
    assert summary["count"] == 4
    assert sink.p(0.0) == 1
    assert sink.p(1.0) == 4


def test_rate_counts_non_zero_samples():
    sink = _feed(MetricType.RATE, [1, 0, 1, 1])
    assert sink.format(timedelta(seconds=1)) == {"rate": 0.75, "passes": 3, "fails": 1}


@pytest.mark.parametrize("metric_type", list(MetricType))
def test_fresh_sinks_are_empty(metric_type):
    assert sink_for(metric_type).is_empty()


def test_sink_for_rejects_non_members():
    with pytest.raises(UnsupportedKindError) as excinfo:
        sink_for("histogram")
    assert excinfo.value.kind == "histogram"


def test_incomplete_sink_cannot_be_constructed():
    class AddOnlySink(Sink):
        def add(self, sample):
            pass

    with pytest.raises(TypeError):
        AddOnlySink()
    with pytest.raises(TypeError):
        Sink()
