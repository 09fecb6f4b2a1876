"""Write ranked tables to CSV or JSON."""

from __future__ import annotations
import csv
import json
from pathlib import Path
from typing import Union

from .models import RankedView


def export_csv(view: RankedView, path: Union[str, Path]) -> None:
    m1, m2 = view.metrics
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(["Rank", "Event", m1, m2, "Total"])
        for rank, row in enumerate(view.to_frame().itertuples(index=False), start=1):
            w.writerow([rank, *row])


def export_json(view: RankedView, path: Union[str, Path]) -> None:
    """Export one view as a JSON list, preserving field names and rank order."""
    payload = [
        {"rank": rank, **rec}
        for rank, rec in enumerate(view.to_frame().to_dict(orient="records"), start=1)
    ]
    with open(path, "w", encoding="utf-8") as f:
        json.dump({"view": view.kind, "rows": payload}, f, ensure_ascii=False, indent=2)
