"""
Normalizer and projector
========================

Cleaning steps between the raw table and the five-column analysis view:

1) strip_text          -> trim whitespace in every text cell
2) check_duplicates    -> count fully identical rows (reported, never dropped)
3) project_analysis    -> decode damage suffixes, keep the five analysis columns
4) check_completeness  -> count analysis rows with any missing value

The checks return `QualityCheck` values instead of raising, so the caller
chooses whether to halt or carry on.
"""

from __future__ import annotations
from typing import Any

import pandas as pd
from pandas.api.types import is_object_dtype, is_string_dtype

from .loader import EVTYPE, FATALITIES, INJURIES, PROPDMG, PROPDMGEXP, CROPDMG, CROPDMGEXP
from .models import QualityCheck
from .scale import apply_scale

EVENT = "Event"
ANALYSIS_COLUMNS = ["Event", "Fatalities", "Injuries", "Property.Damage", "Crop.Damage"]


def _strip(x: Any) -> Any:
    return x.strip() if isinstance(x, str) else x


def strip_text(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy with leading/trailing whitespace removed from text cells."""
    out = df.copy()
    for c in out.columns:
        if is_object_dtype(out[c]) or is_string_dtype(out[c]):
            out[c] = out[c].map(_strip)
    return out


def check_duplicates(df: pd.DataFrame) -> QualityCheck:
    # later copies of an identical row count, the first occurrence does not
    n_dup = int(df.duplicated(keep="first").sum())
    return QualityCheck(name="duplicate rows", count=n_dup, total=len(df))


def project_analysis(df: pd.DataFrame) -> pd.DataFrame:
    """Build the five-column analysis view from a normalized table."""
    return pd.DataFrame({
        "Event": df[EVTYPE],
        "Fatalities": pd.to_numeric(df[FATALITIES], errors="coerce").astype("float64"),
        "Injuries": pd.to_numeric(df[INJURIES], errors="coerce").astype("float64"),
        "Property.Damage": apply_scale(df[PROPDMG], df[PROPDMGEXP]),
        "Crop.Damage": apply_scale(df[CROPDMG], df[CROPDMGEXP]),
    }, columns=ANALYSIS_COLUMNS)


def check_completeness(analysis: pd.DataFrame) -> QualityCheck:
    missing = analysis[ANALYSIS_COLUMNS].isna().any(axis=1)
    return QualityCheck(name="incomplete analysis rows", count=int(missing.sum()), total=len(analysis))
