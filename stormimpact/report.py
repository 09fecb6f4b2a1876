from __future__ import annotations

"""
Storm Impact report generator
-----------------------------
This module turns a PipelineResult into charts and a DOCX report.

Design goals:
- Keep the pipeline usable without report dependencies (lazy imports of
  matplotlib and python-docx).
- Charts consume the long form of each ranked table (one row per event per
  metric), so the grouped bars keep the ranking order on the x-axis.
- Economic values are drawn in billions of US$; tables show full figures.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Tuple, Union
import os
import tempfile

import numpy as np
import pandas as pd

from .models import ECONOMIC, HEALTH, RankedView

if TYPE_CHECKING:
    from .pipeline import PipelineResult

BILLION = 1e9


# -----------------------------
# Configuration / citation types
# -----------------------------

@dataclass
class DatasetCitation:
    """Minimal dataset citation metadata for the DOCX report."""
    database_name: str = "Storm Events Database (Storm Data)"
    institutional_author: str = "NOAA National Centers for Environmental Information"
    location: str = "Asheville, NC, USA"
    website: str = "https://www.ncei.noaa.gov/stormevents/"
    file_name: Optional[str] = None


@dataclass
class ReportConfig:
    """High-level knobs to control how the report is written."""
    title: str = "Storm Impact Report"
    subtitle: str = "Health and economic consequences of severe weather events"
    dataset_name: str = "NOAA Storm Data export"
    citation: DatasetCitation = field(default_factory=DatasetCitation)

    # figure size in inches and resolution for saved charts
    figsize: Tuple[float, float] = (10.0, 6.0)
    dpi: int = 150


# -----------------------------
# Wide -> long reshape
# -----------------------------

def to_long(view: RankedView) -> pd.DataFrame:
    """One row per (event, metric), events in rank order.

    `Event` and `Metric` are ordered Categoricals so plotting libraries keep
    the ranking instead of sorting labels alphabetically.
    """
    wide = view.to_frame()
    m1, m2 = view.metrics
    events = [str(e) for e in wide["Event"]]
    wide = wide.assign(Event=events)
    long = wide.melt(id_vars="Event", value_vars=[m1, m2], var_name="Metric", value_name="Value")
    long["Event"] = pd.Categorical(long["Event"], categories=events, ordered=True)
    long["Metric"] = pd.Categorical(long["Metric"], categories=[m1, m2], ordered=True)
    return long.sort_values(["Event", "Metric"], kind="mergesort").reset_index(drop=True)


# -----------------------------
# Charts
# -----------------------------

def _pyplot():
    try:
        import matplotlib.pyplot as plt
    except ImportError as e:
        raise ImportError(
            "Missing dependency: matplotlib.\n"
            "Install it with: python -m pip install matplotlib"
        ) from e
    return plt


def _levels(s: pd.Series) -> list:
    if isinstance(s.dtype, pd.CategoricalDtype):
        return list(s.cat.categories)
    return list(dict.fromkeys(s))


def bar_heights(long_df: pd.DataFrame, metric: str, events: List[str], value_scale: float = 1.0) -> List[float]:
    """Bar heights for one metric, in `events` order, divided by `value_scale`."""
    sub = long_df[long_df["Metric"] == metric].set_index("Event")["Value"]
    return [float(sub.get(e, 0.0)) / value_scale for e in events]


def plot_grouped_bars(
    long_df: pd.DataFrame,
    out_path: Union[str, Path],
    *,
    title: str,
    ylabel: str,
    value_scale: float = 1.0,
    config: Optional[ReportConfig] = None,
) -> str:
    """Grouped bar chart: x = event, one bar per metric, y = value / value_scale."""
    config = config or ReportConfig()
    plt = _pyplot()

    events = _levels(long_df["Event"])
    metrics = _levels(long_df["Metric"])
    x = np.arange(len(events))
    width = 0.8 / max(len(metrics), 1)

    plt.figure(figsize=config.figsize)
    for i, metric in enumerate(metrics):
        heights = bar_heights(long_df, metric, events, value_scale)
        plt.bar(x + (i - (len(metrics) - 1) / 2) * width, heights, width, label=str(metric), edgecolor="black", linewidth=0.5)
    plt.xticks(x, events, rotation=45, ha="right")
    plt.title(title)
    plt.xlabel("Event")
    plt.ylabel(ylabel)
    plt.legend()
    plt.grid(True, alpha=0.3, axis="y")
    plt.tight_layout()

    out_path = str(out_path)
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    plt.savefig(out_path, dpi=config.dpi)
    plt.close()
    return out_path


def render_charts(
    result: "PipelineResult",
    out_dir: Union[str, Path],
    *,
    config: Optional[ReportConfig] = None,
) -> List[Tuple[str, str, str]]:
    """Draw both charts into `out_dir`.

    Returns:
        (title, file_path, caption) for each chart.
    """
    n_h, n_e = len(result.health), len(result.economic)
    health_title = f"Top {n_h} Events by Fatalities and Injuries"
    econ_title = f"Top {n_e} Events by Property and Crop Damage"
    return [
        (
            health_title,
            plot_grouped_bars(to_long(result.health), Path(out_dir) / "health_top.png",
                              title=health_title, ylabel="Number of people", config=config),
            "Fatalities and injuries summed per event type, ranked by their total.",
        ),
        (
            econ_title,
            plot_grouped_bars(to_long(result.economic), Path(out_dir) / "economic_top.png",
                              title=econ_title, ylabel="Damage (US$ billions)",
                              value_scale=BILLION, config=config),
            "Property and crop damage after suffix scaling, ranked by their total. Values in billions of US$.",
        ),
    ]


# -----------------------------
# DOCX report
# -----------------------------

def _fmt(v: float, kind: str) -> str:
    if kind == ECONOMIC:
        return f"{v:,.0f}"
    return f"{int(round(v)):,}"


def generate_docx_report(
    result: "PipelineResult",
    out_path: Union[str, Path],
    *,
    config: Optional[ReportConfig] = None,
    chart_dir: Optional[Union[str, Path]] = None,
) -> str:
    """
    Write the two ranked tables, both charts and the data-quality summary
    to a DOCX file. Charts go to `chart_dir`, or a temp dir if not given.
    """
    config = config or ReportConfig()

    try:
        from docx import Document
        from docx.shared import Pt, Inches
        from docx.enum.text import WD_ALIGN_PARAGRAPH
    except ImportError as e:
        raise ImportError(
            "Missing dependency: python-docx.\n"
            "Install it with: python -m pip install python-docx"
        ) from e

    chart_dir = chart_dir or tempfile.mkdtemp(prefix="stormimpact_report_")
    charts = render_charts(result, chart_dir, config=config)

    doc = Document()
    style = doc.styles["Normal"]
    style.font.name = "Calibri"
    style.font.size = Pt(11)

    def _center_title(text: str, size: int, bold: bool = False, italic: bool = False) -> None:
        p = doc.add_paragraph()
        r = p.add_run(text)
        r.bold = bold
        r.italic = italic
        r.font.size = Pt(size)
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER

    def _kv(key: str, value: str) -> None:
        p = doc.add_paragraph()
        r = p.add_run(f"{key}: ")
        r.bold = True
        p.add_run(value)

    _center_title(config.title, 22, bold=True)
    _center_title(config.subtitle, 12, italic=True)

    doc.add_paragraph("")
    _kv("Dataset", config.dataset_name)
    _kv("Records loaded", f"{result.n_rows:,}")
    _kv("Distinct event labels", f"{len(result.aggregates):,}")

    cit = config.citation
    doc.add_heading("Dataset citation", level=1)
    if cit.file_name:
        doc.add_paragraph(f"Data file used: {cit.file_name}")
    doc.add_paragraph(f"{cit.institutional_author}. {cit.database_name}. {cit.location}. {cit.website}.")

    # Data quality (counted, not corrected)
    doc.add_heading("Data quality", level=1)
    doc.add_paragraph("Counts are reported as found; no rows were dropped or repaired.")
    tq = doc.add_table(rows=1, cols=3)
    tq.rows[0].cells[0].text = "Check"
    tq.rows[0].cells[1].text = "Flagged"
    tq.rows[0].cells[2].text = "Rows"
    for check in result.checks:
        row = tq.add_row().cells
        row[0].text = check.name
        row[1].text = f"{check.count:,}"
        row[2].text = f"{check.total:,}"

    # Ranked tables
    for heading, view in (
        ("Population health: most harmful events", result.health),
        ("Economic consequences: most costly events (US$)", result.economic),
    ):
        doc.add_heading(heading, level=1)
        frame = view.to_frame()
        t = doc.add_table(rows=1, cols=len(frame.columns))
        for i, name in enumerate(frame.columns):
            t.rows[0].cells[i].text = str(name)
        for rec in frame.itertuples(index=False):
            cells = t.add_row().cells
            cells[0].text = str(rec[0])
            for i, v in enumerate(rec[1:], start=1):
                cells[i].text = _fmt(v, view.kind)

    doc.add_heading("Visualizations", level=1)
    for title, path, caption in charts:
        doc.add_paragraph(title)
        doc.add_picture(path, width=Inches(6.5))
        doc.add_paragraph(caption)

    doc.add_heading("Notes", level=1)
    for note in [
        "Event labels are grouped exactly as written after whitespace trimming; "
        "spelling variants such as 'TSTM WIND' and 'THUNDERSTORM WIND' stay separate "
        "unless canonicalization was requested.",
        "Suffix codes '-', '?' and empty decode to a zero multiplier; digits 0-8 decode to 10.",
        "Ties in a ranked table keep the order in which the events first appear in the source.",
    ]:
        doc.add_paragraph(note, style="List Bullet")

    # -----------------------------
    # Reproducibility footer
    # -----------------------------
    doc.add_heading("Reproducibility footer", level=1)
    from . import __version__
    from datetime import datetime as _dt
    doc.add_paragraph(f"stormimpact version: {__version__}")
    doc.add_paragraph(f"Report generated at: {_dt.now().isoformat(timespec='seconds')}")
    if result.source_path:
        doc.add_paragraph(f"Dataset file: {os.path.basename(result.source_path)}")

    out_path = str(out_path)
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    doc.save(out_path)
    return out_path


def describe_view(view: RankedView) -> List[str]:
    """Console lines for one ranked table (used by the CLI)."""
    m1, m2 = view.metrics
    unit = " (US$)" if view.kind == ECONOMIC else ""
    lines = [f"Top {len(view)} events by {m1} + {m2}{unit}:"]
    for i, a in enumerate(view.rows, start=1):
        if view.kind == HEALTH:
            lines.append(f"[{i}] {a.event} | fatalities={_fmt(a.fatalities, HEALTH)} "
                         f"injuries={_fmt(a.injuries, HEALTH)} total={_fmt(a.health_total, HEALTH)}")
        else:
            lines.append(f"[{i}] {a.event} | property={_fmt(a.property_damage, ECONOMIC)} "
                         f"crop={_fmt(a.crop_damage, ECONOMIC)} total={_fmt(a.economic_total, ECONOMIC)}")
    return lines
