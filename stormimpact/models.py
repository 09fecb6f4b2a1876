"""
Data model (EventAggregate, RankedView, QualityCheck)
=====================================================

The pipeline works on pandas tables until the grouping step. From there on,
each event label becomes one `EventAggregate` object. These are immutable
(`frozen=True`) so that:
- ranking selects and reorders aggregates rather than editing them, and
- the same aggregates feed both the health and the economic view.

Data-quality checks are returned as `QualityCheck` values, so callers decide
whether a nonzero count should stop the run.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Tuple

import pandas as pd

HEALTH = "health"
ECONOMIC = "economic"


class DataQualityError(ValueError):
    """Raised when a failed QualityCheck is treated as fatal."""

    def __init__(self, check: "QualityCheck") -> None:
        super().__init__(check.describe())
        self.check = check


@dataclass(frozen=True)
class QualityCheck:
    """Outcome of one validation step (duplicates, unmapped codes, missing values)."""
    name: str
    count: int
    total: int
    samples: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.count == 0

    def describe(self) -> str:
        msg = f"{self.name}: {self.count} of {self.total} rows flagged"
        if self.samples:
            msg += f" (samples: {list(self.samples)})"
        return msg

    def raise_if_failed(self) -> None:
        if not self.ok:
            raise DataQualityError(self)


@dataclass(frozen=True)
class EventAggregate:
    """Summed metrics for one event label."""
    event: str
    fatalities: float
    injuries: float
    # both damages in US$ after suffix scaling
    property_damage: float
    crop_damage: float

    @property
    def health_total(self) -> float:
        return self.fatalities + self.injuries

    @property
    def economic_total(self) -> float:
        return self.property_damage + self.crop_damage


# kind -> (metric column names, attribute names, total attribute)
_VIEW_LAYOUT = {
    HEALTH: (("Fatalities", "Injuries"), ("fatalities", "injuries"), "health_total"),
    ECONOMIC: (("Property.Damage", "Crop.Damage"), ("property_damage", "crop_damage"), "economic_total"),
}


@dataclass(frozen=True)
class RankedView:
    """Top-N event aggregates ordered by one derived total, descending."""
    kind: str
    rows: Tuple[EventAggregate, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.kind not in _VIEW_LAYOUT:
            raise ValueError(f"kind must be one of {sorted(_VIEW_LAYOUT)}")

    @property
    def metrics(self) -> Tuple[str, str]:
        return _VIEW_LAYOUT[self.kind][0]

    def total(self, agg: EventAggregate) -> float:
        return getattr(agg, _VIEW_LAYOUT[self.kind][2])

    def to_frame(self) -> pd.DataFrame:
        """Wide table: Event, metric-a, metric-b, Total (one row per event)."""
        names, attrs, _ = _VIEW_LAYOUT[self.kind]
        records: List[dict] = []
        for a in self.rows:
            rec = {"Event": a.event}
            for name, attr in zip(names, attrs):
                rec[name] = getattr(a, attr)
            rec["Total"] = self.total(a)
            records.append(rec)
        return pd.DataFrame.from_records(records, columns=["Event", *names, "Total"])

    def __len__(self) -> int:
        return len(self.rows)
