"""
Event-label canonicalization (opt-in)
=====================================

Storm Data spells the same event type many ways ("TSTM WIND",
"THUNDERSTORM WINDS", "Thunderstorm Wind"). The baseline report groups
labels exactly as written; this module is an explicit extra step that folds
common variants together before grouping. It is only applied when asked for
(`run_pipeline(..., canonicalize=True)` / `--canonicalize`).
"""

from __future__ import annotations
import re
from types import MappingProxyType
from typing import Any, Mapping

import pandas as pd

from .cleaning import EVENT

# upper-cased, single-spaced label -> canonical label
EVENT_ALIASES: Mapping[str, str] = MappingProxyType({
    "TSTM WIND": "THUNDERSTORM WIND",
    "THUNDERSTORM WINDS": "THUNDERSTORM WIND",
    "TSTM WINDS": "THUNDERSTORM WIND",
    "MARINE TSTM WIND": "MARINE THUNDERSTORM WIND",
    "FLASH FLOODING": "FLASH FLOOD",
    "FLOOD/FLASH FLOOD": "FLASH FLOOD",
    "FLOODING": "FLOOD",
    "RIVER FLOODING": "FLOOD",
    "HURRICANE": "HURRICANE (TYPHOON)",
    "TYPHOON": "HURRICANE (TYPHOON)",
    "HURRICANE/TYPHOON": "HURRICANE (TYPHOON)",
    "STORM SURGE": "STORM SURGE/TIDE",
    "HIGH WINDS": "HIGH WIND",
    "STRONG WINDS": "STRONG WIND",
    "WILD/FOREST FIRE": "WILDFIRE",
    "WILD FIRES": "WILDFIRE",
    "EXTREME HEAT": "EXCESSIVE HEAT",
    "HEAT WAVE": "HEAT",
    "EXTREME COLD": "EXTREME COLD/WIND CHILL",
    "FOG": "DENSE FOG",
    "RIP CURRENTS": "RIP CURRENT",
    "WINTER WEATHER/MIX": "WINTER WEATHER",
    "URBAN/SML STREAM FLD": "HEAVY RAIN",
    "SMALL HAIL": "HAIL",
})

_SPACES = re.compile(r"\s+")


def canonical_label(label: Any) -> Any:
    """Upper-case, collapse internal whitespace, then apply EVENT_ALIASES."""
    if not isinstance(label, str):
        return label
    key = _SPACES.sub(" ", label.strip().upper())
    return EVENT_ALIASES.get(key, key)


def canonicalize_events(analysis: pd.DataFrame) -> pd.DataFrame:
    out = analysis.copy()
    out[EVENT] = out[EVENT].map(canonical_label)
    return out
