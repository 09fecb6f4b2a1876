"""
Aggregator
==========

Groups analysis rows by event label and ranks the groups.

Grouping is by *exact* label equality after whitespace trimming, so
"TORNADO" and "tornado" are different events. Near-duplicate spellings are
only merged if the optional `canonical` step runs first.

Group order is first-encounter order in the source (`sort=False`). Ranking
is a stable descending merge sort, so equal totals keep that order.
"""

from __future__ import annotations
import logging
from typing import List, Sequence

import pandas as pd

from .cleaning import EVENT
from .dsa import top_k
from .models import ECONOMIC, HEALTH, EventAggregate, RankedView

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 10

_SUM_COLUMNS = ["Fatalities", "Injuries", "Property.Damage", "Crop.Damage"]


def aggregate_events(analysis: pd.DataFrame) -> List[EventAggregate]:
    """Sum the four metrics per event label.

    Returns:
        One EventAggregate per distinct label, in first-encounter order.
    """
    sums = (
        analysis[[EVENT, *_SUM_COLUMNS]]
        .astype({c: "float64" for c in _SUM_COLUMNS})
        .groupby(EVENT, sort=False, dropna=False)[_SUM_COLUMNS]
        .sum()
    )
    out: List[EventAggregate] = []
    for event, row in sums.iterrows():
        out.append(EventAggregate(
            event=event,
            fatalities=float(row["Fatalities"]),
            injuries=float(row["Injuries"]),
            property_damage=float(row["Property.Damage"]),
            crop_damage=float(row["Crop.Damage"]),
        ))
    logger.info("Aggregated %s rows into %s event labels", f"{len(analysis):,}", len(out))
    return out


def rank(aggregates: Sequence[EventAggregate], kind: str, n: int = DEFAULT_TOP_N) -> RankedView:
    """Top-n aggregates of one view kind, largest total first."""
    template = RankedView(kind=kind)
    return RankedView(kind=kind, rows=tuple(top_k(list(aggregates), n, key=template.total)))


def rank_health(aggregates: Sequence[EventAggregate], n: int = DEFAULT_TOP_N) -> RankedView:
    return rank(aggregates, HEALTH, n)


def rank_economic(aggregates: Sequence[EventAggregate], n: int = DEFAULT_TOP_N) -> RankedView:
    return rank(aggregates, ECONOMIC, n)
