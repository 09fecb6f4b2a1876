"""
Magnitude decoder
=================

Storm Data stores each damage figure as a base number plus a one-character
suffix code (PROPDMGEXP / CROPDMGEXP) giving the order of magnitude:

    25, "K"  ->  25,000 US$
    1.5, "M" ->  1,500,000 US$

The code alphabet is closed. `SCALE_TABLE` maps every known code to its
multiplier; anything else is unmapped and decodes to NaN so that the
completeness check downstream can count it.

Note: "-" and "?" both map to 0. The NOAA documentation describes "?" as an
unknown magnitude, so zero is a compatibility choice, not a measured value.
"""

from __future__ import annotations
from types import MappingProxyType
from typing import Mapping

import numpy as np
import pandas as pd

from .models import QualityCheck


def _build_table() -> Mapping[str, float]:
    table = {}
    for letter, mult in (("H", 1e2), ("K", 1e3), ("M", 1e6), ("B", 1e9)):
        table[letter] = mult
        table[letter.lower()] = mult
    for digit in "012345678":
        table[digit] = 10.0
    table["+"] = 1.0
    for code in ("-", "?", ""):
        table[code] = 0.0
    return MappingProxyType(table)


SCALE_TABLE: Mapping[str, float] = _build_table()


class UnknownScaleCode(KeyError):
    """A suffix code outside the closed alphabet."""


def decode_scale(code: str) -> float:
    """Return the multiplier for one suffix code."""
    try:
        return SCALE_TABLE[code]
    except (KeyError, TypeError):
        raise UnknownScaleCode(code) from None


def scale_series(codes: pd.Series) -> pd.Series:
    """Decode a column of codes; unmapped codes become NaN."""
    return codes.map(lambda c: SCALE_TABLE.get(c, np.nan) if isinstance(c, str) else np.nan).astype("float64")


def apply_scale(base: pd.Series, codes: pd.Series) -> pd.Series:
    """base x decoded scale. NaN wherever the code is unmapped."""
    base = pd.to_numeric(base, errors="coerce").astype("float64")
    return base * scale_series(codes)


def check_codes(codes: pd.Series, column: str) -> QualityCheck:
    """Count codes that are not in SCALE_TABLE."""
    unmapped = ~codes.map(lambda c: isinstance(c, str) and c in SCALE_TABLE).astype(bool)
    n_bad = int(unmapped.sum())
    samples = tuple(str(v) for v in codes[unmapped].unique()[:10])
    return QualityCheck(name=f"unmapped {column} codes", count=n_bad, total=len(codes), samples=samples)
