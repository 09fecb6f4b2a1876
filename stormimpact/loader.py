"""
Dataset loader (CSV / Excel -> DataFrame)
=========================================

This module reads a NOAA Storm Data export into a pandas DataFrame.

Key ideas:
- We try exact and normalized column names because exports vary in case and
  punctuation (EVTYPE vs evtype vs "Ev Type").
- The two magnitude-suffix columns are always read as text, so codes like
  "0" or "5" are not turned into numbers and empty cells become "".
- A file whose rows do not share one column layout is a structural error and
  aborts the run with `ParseError`.
"""

from __future__ import annotations
import bz2
import csv
import gzip
import logging
import lzma
import re
import zipfile
from pathlib import Path
from typing import Dict, List, Union

import pandas as pd

logger = logging.getLogger(__name__)

EVTYPE = "EVTYPE"
FATALITIES = "FATALITIES"
INJURIES = "INJURIES"
PROPDMG = "PROPDMG"
PROPDMGEXP = "PROPDMGEXP"
CROPDMG = "CROPDMG"
CROPDMGEXP = "CROPDMGEXP"

REQUIRED_COLUMNS = (EVTYPE, FATALITIES, INJURIES, PROPDMG, PROPDMGEXP, CROPDMG, CROPDMGEXP)
CODE_COLUMNS = (PROPDMGEXP, CROPDMGEXP)

_EXCEL_SUFFIXES = (".xlsx", ".xlsm")
_OPENERS = {".bz2": bz2.open, ".gz": gzip.open, ".xz": lzma.open}


class ParseError(ValueError):
    """The source file could not be read as one consistent table."""


def _norm(s: str) -> str:
    return re.sub(r"[^a-z0-9]+", "", str(s).lower())


def _col(columns: List[str], *names: str) -> str:
    for n in names:
        if n in columns:
            return n
    norm_map = {_norm(c): c for c in columns}
    for n in names:
        nn = _norm(n)
        if nn in norm_map:
            return norm_map[nn]
    raise KeyError(f"Missing required column. Tried={names}. Available={columns}")


def resolve_columns(columns: List[str]) -> Dict[str, str]:
    """Map each required canonical name to the column actually present."""
    columns = [str(c).strip() for c in columns]
    return {name: _col(columns, name) for name in REQUIRED_COLUMNS}


def _is_excel(path: Path) -> bool:
    return path.suffix.lower() in _EXCEL_SUFFIXES


def _read(path: Path, **kwargs) -> pd.DataFrame:
    try:
        if _is_excel(path):
            return pd.read_excel(path, engine="openpyxl", **kwargs)
        return pd.read_csv(path, index_col=False, low_memory=False, **kwargs)
    except (ValueError, OSError, zipfile.BadZipFile) as e:
        raise ParseError(f"Cannot parse {path}: {e}") from e


def check_row_shape(path: Path, encoding: str = "utf-8") -> int:
    """Verify every data row has as many fields as the header.

    pandas pads short rows with NaN and, when every row carries one extra
    field, silently turns the first column into the index. Both shift or
    hide data, so the field counts are checked before parsing.

    Returns:
        Number of data rows seen.
    """
    opener = _OPENERS.get(path.suffix.lower(), open)
    n_rows = 0
    try:
        with opener(path, "rt", encoding=encoding, newline="") as f:
            reader = csv.reader(f)
            header = next(reader, None)
            if header is None:
                raise ParseError(f"Cannot parse {path}: file is empty")
            width = len(header)
            for row in reader:
                # pandas skips blank lines, so do we
                if not row:
                    continue
                n_rows += 1
                if len(row) != width:
                    raise ParseError(
                        f"Cannot parse {path}: expected {width} fields, "
                        f"saw {len(row)} on line {reader.line_num}"
                    )
    except (OSError, EOFError, UnicodeDecodeError, csv.Error, lzma.LZMAError) as e:
        raise ParseError(f"Cannot parse {path}: {e}") from e
    return n_rows


def load_storm_data(path: Union[str, Path]) -> pd.DataFrame:
    """
    Read the storm-event table at `path`.

    `.csv` (optionally compressed, e.g. `.csv.bz2`) goes through pandas'
    C parser, `.xlsx` through openpyxl. CSV rows must all have the header's
    field count; a short or long row raises `ParseError`, as does a file that
    cannot be opened or decompressed. Required columns are renamed to their
    canonical upper-case names; any extra columns are kept untouched.
    """
    path = Path(path)
    if not _is_excel(path):
        check_row_shape(path)
    header = _read(path, nrows=0)
    raw_cols = [str(c) for c in header.columns]
    mapping = resolve_columns(raw_cols)

    # read suffix codes as text, keyed by the name actually in the file
    stripped_to_raw = {c.strip(): c for c in raw_cols}
    dtype = {stripped_to_raw[mapping[c]]: str for c in CODE_COLUMNS}

    df = _read(path, dtype=dtype)
    df.rename(columns={c: str(c).strip() for c in df.columns}, inplace=True)
    df.rename(columns={actual: canon for canon, actual in mapping.items() if actual != canon}, inplace=True)

    for c in CODE_COLUMNS:
        df[c] = df[c].fillna("")

    logger.info("Loaded %s rows x %s columns from %s", f"{len(df):,}", len(df.columns), path)
    return df
