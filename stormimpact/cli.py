"""
Storm Impact Command Line Interface (CLI)
=========================================

Run the whole report in one go:

    python -m stormimpact.cli --csv "repdata_data_StormData.csv.bz2" --report report.docx

Steps: load -> normalize -> decode damage suffixes -> aggregate -> print the
two ranked tables, then optionally write charts, CSV/JSON tables and a DOCX
report. The input file is never modified.
"""

from __future__ import annotations
import argparse
import logging
import os
import sys
from typing import List, Optional

from .aggregate import DEFAULT_TOP_N
from .export import export_csv, export_json
from .loader import ParseError
from .models import DataQualityError
from .pipeline import run_pipeline

EXIT_OK = 0
EXIT_LOAD_ERROR = 1
EXIT_QUALITY_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="stormimpact",
        description="Rank storm event types by health and economic impact.",
    )
    ap.add_argument("--csv", required=True, help="Path to the Storm Data table (.csv, .csv.bz2 or .xlsx)")
    ap.add_argument("--report", help="Write a DOCX report to this path")
    ap.add_argument("--charts-dir", help="Directory for the two bar-chart PNGs")
    ap.add_argument("--export-dir", help="Directory for the ranked tables as CSV and JSON")
    ap.add_argument("--top-n", type=int, default=DEFAULT_TOP_N, help="Rows kept per ranked table (default: 10)")
    ap.add_argument("--strict", action="store_true", help="Stop on the first failed data-quality check")
    ap.add_argument("--canonicalize", action="store_true",
                    help="Fold spelling variants of event labels (e.g. TSTM WIND) before grouping")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log every pipeline step")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the Storm Impact CLI.

    1) Run the pipeline
    2) Print the data-quality summary and both tables
    3) Write any requested outputs
    """
    ap = build_parser()
    args = ap.parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.top_n < 1:
        ap.error("--top-n must be at least 1")

    print("Loading dataset...")
    try:
        result = run_pipeline(args.csv, top_n=args.top_n, strict=args.strict, canonicalize=args.canonicalize)
    except (ParseError, KeyError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_LOAD_ERROR
    except DataQualityError as e:
        print(f"Data-quality check failed: {e}", file=sys.stderr)
        return EXIT_QUALITY_ERROR

    from .report import describe_view
    print(f"Loaded {result.n_rows} records, {len(result.aggregates)} event labels.")
    for check in result.checks:
        print(f"  {check.describe()}")
    for view in (result.health, result.economic):
        print("")
        for line in describe_view(view):
            print(line)

    if args.export_dir:
        os.makedirs(args.export_dir, exist_ok=True)
        for view in (result.health, result.economic):
            export_csv(view, os.path.join(args.export_dir, f"{view.kind}_top.csv"))
            export_json(view, os.path.join(args.export_dir, f"{view.kind}_top.json"))
        print(f"Exported tables to {args.export_dir}")

    if args.report:
        from .report import DatasetCitation, ReportConfig, generate_docx_report
        cfg = ReportConfig(citation=DatasetCitation(file_name=os.path.basename(args.csv)))
        generate_docx_report(result, args.report, config=cfg, chart_dir=args.charts_dir)
        print(f"Report written to {args.report}")
    elif args.charts_dir:
        from .report import render_charts
        for title, path, _ in render_charts(result, args.charts_dir):
            print(f"Chart '{title}' written to {path}")

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
