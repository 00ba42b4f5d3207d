"""
The metric value type sent to OpenTSDB.

A metric is a plain value: two metrics with the same name, timestamp, value
and tags are equal and hash alike, so a set of metrics silently collapses
duplicates before anything is sent.
"""
import json
import math
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Union

import pytz

from .errors import InvalidMetricError, SerializationError

Timestamp = Union[int, datetime, None]


def to_epoch_seconds(timestamp: Timestamp) -> int:
    """
    Normalize a timestamp to integer epoch seconds.

    Args:
        timestamp: ``None`` for now, an ``int`` passed through as is, or a
            ``datetime``. Naive datetimes are taken to be UTC.

    Returns:
        int: Epoch seconds
    """
    if timestamp is None:
        return int(datetime.now(pytz.UTC).timestamp())
    if isinstance(timestamp, datetime):
        if timestamp.tzinfo is None:
            timestamp = pytz.UTC.localize(timestamp)
        return int(timestamp.timestamp())
    if isinstance(timestamp, bool) or not isinstance(timestamp, int):
        raise InvalidMetricError(f"Invalid timestamp: {timestamp!r}")
    return timestamp


@dataclass(frozen=True, eq=False)
class Metric:
    """A single time-series data point."""
    name: str
    timestamp: int
    value: Union[int, float]
    tags: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise InvalidMetricError("Metric name must be a non-empty string")
        if isinstance(self.timestamp, bool) or not isinstance(self.timestamp, int):
            raise InvalidMetricError(f"Invalid timestamp for {self.name}: {self.timestamp!r}")
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise InvalidMetricError(f"Invalid value for {self.name}: {self.value!r}")
        if self.tags is None:
            object.__setattr__(self, 'tags', {})
        if not isinstance(self.tags, Mapping):
            raise InvalidMetricError(f"Tags of {self.name} must be a mapping, got {self.tags!r}")
        for key, value in self.tags.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise InvalidMetricError(f"Tags of {self.name} must map str to str, got {key!r}: {value!r}")
        object.__setattr__(self, 'tags', MappingProxyType(dict(self.tags)))

    @classmethod
    def create(cls, name: str, value: Union[int, float], timestamp: Timestamp = None,
               tags: Optional[Mapping[str, str]] = None) -> 'Metric':
        """
        Build a metric, defaulting the timestamp to the current time.

        Args:
            name (str): Metric name
            value (int | float): Measured value
            timestamp (int | datetime, optional): When the value was measured
            tags (dict, optional): Tag key/value pairs

        Returns:
            Metric: The new metric

        Raises:
            InvalidMetricError: If any field is invalid
        """
        return cls(name, to_epoch_seconds(timestamp), value, dict(tags or {}))

    def with_tags(self, **tags: str) -> 'Metric':
        """Return a copy of this metric with ``tags`` merged over its own."""
        merged = dict(self.tags)
        merged.update(tags)
        return Metric(self.name, self.timestamp, self.value, merged)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'metric': self.name,
            'timestamp': self.timestamp,
            'value': self.value,
            'tags': dict(self.tags),
        }

    def _key(self):
        return (self.name, self.timestamp, type(self.value), self.value, frozenset(self.tags.items()))

    def __eq__(self, other):
        if not isinstance(other, Metric):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        return f"Metric(name={self.name!r}, timestamp={self.timestamp}, value={self.value}, tags={dict(self.tags)})"


def encode_metrics(metrics: Iterable[Metric]) -> bytes:
    """
    Encode metrics as the JSON array body of an ``/api/put`` request.

    Args:
        metrics: The metrics of one batch

    Returns:
        bytes: UTF-8 encoded JSON payload

    Raises:
        SerializationError: If a metric cannot be represented in JSON
    """
    try:
        points = []
        for metric in metrics:
            if isinstance(metric.value, float) and not math.isfinite(metric.value):
                raise SerializationError(f"{metric.name} has a non-finite value {metric.value}")
            points.append(metric.to_dict())
        return json.dumps(points, allow_nan=False).encode('utf-8')
    except (TypeError, ValueError, AttributeError) as e:
        raise SerializationError(str(e)) from e
