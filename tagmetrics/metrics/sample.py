from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from tagmetrics.metrics.tags import SampleTags

if TYPE_CHECKING:
    from tagmetrics.metrics.metric import Metric


@dataclass(frozen=True)
class Sample:
    """A single observation of a metric; aggregation happens in the sink."""

    time: datetime
    tags: SampleTags
    value: float
    metric: "Metric"
