"""
Time-series observation model.

A series is an ordered sequence of DataPoint values. Ordering by timestamp
is the caller's responsibility; the engine only looks at positions.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional


@dataclass(frozen=True)
class DataPoint:
    """
    A single timestamped observation.

    Attributes:
        timestamp: Observation time (epoch milliseconds or any monotone key)
        value: Observed value
        label: Optional label
        metadata: Optional free-form metadata
    """

    timestamp: float
    value: float
    label: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        data = {"timestamp": self.timestamp, "value": self.value}
        if self.label:
            data["label"] = self.label
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DataPoint':
        return cls(
            timestamp=data["timestamp"],
            value=data["value"],
            label=data.get("label"),
            metadata=data.get("metadata", {}),
        )


def values_of(series: Iterable[Any]) -> List[float]:
    """Extract the numeric values of a series.

    Accepts DataPoint objects, mappings with a ``value`` key, or bare numbers.
    """
    out: List[float] = []
    for item in series:
        if isinstance(item, DataPoint):
            out.append(float(item.value))
        elif isinstance(item, dict):
            out.append(float(item["value"]))
        else:
            out.append(float(item))
    return out
