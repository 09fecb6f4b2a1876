import docx
import matplotlib.pyplot as plt
import pytest

from stormimpact.pipeline import run_pipeline
from stormimpact.report import (
    BILLION,
    bar_heights,
    DatasetCitation,
    ReportConfig,
    describe_view,
    generate_docx_report,
    plot_grouped_bars,
    render_charts,
    to_long,
)


@pytest.fixture
def result(example_csv):
    return run_pipeline(example_csv)


def test_to_long_keeps_rank_order(result):
    long = to_long(result.economic)
    assert list(long.columns) == ["Event", "Metric", "Value"]
    assert len(long) == 2 * len(result.economic)
    assert list(long["Event"].cat.categories) == ["FLOOD", "TORNADO", "tornado"]
    assert list(long["Event"][:2]) == ["FLOOD", "FLOOD"]
    assert list(long["Metric"][:2]) == ["Property.Damage", "Crop.Damage"]
    assert long["Value"].iloc[0] == 2e9


def test_to_long_health_metrics(result):
    long = to_long(result.health)
    assert list(long["Metric"].cat.categories) == ["Fatalities", "Injuries"]
    first = long[long["Event"] == "TORNADO"].set_index("Metric")["Value"]
    assert first["Fatalities"] == 5.0
    assert first["Injuries"] == 10.0


def test_plot_grouped_bars_writes_png(result, tmp_path):
    out = plot_grouped_bars(to_long(result.economic), tmp_path / "sub" / "econ.png",
                            title="Economic", ylabel="US$ billions", value_scale=1e9)
    assert out.endswith("econ.png")
    assert (tmp_path / "sub" / "econ.png").stat().st_size > 0


def test_bar_heights_scale_to_billions(result):
    long = to_long(result.economic)
    events = ["FLOOD", "TORNADO", "tornado"]
    assert bar_heights(long, "Property.Damage", events, BILLION) == [2.0, 1e-6, 0.0]
    assert bar_heights(long, "Crop.Damage", events, BILLION) == [0.0, 0.0, 0.0]
    assert bar_heights(long, "Property.Damage", events) == [2e9, 1000.0, 0.0]


def test_economic_chart_draws_billions(result, tmp_path, monkeypatch):
    # keep the figure open so the drawn bars can be inspected
    real_close = plt.close
    monkeypatch.setattr(plt, "close", lambda *a, **k: None)
    plot_grouped_bars(to_long(result.economic), tmp_path / "econ.png",
                      title="Economic", ylabel="US$ billions", value_scale=BILLION)
    heights = [p.get_height() for p in plt.gca().patches]
    real_close("all")
    # property bars first, then crop bars
    assert heights[:3] == pytest.approx([2.0, 1e-6, 0.0])
    assert heights[3:] == pytest.approx([0.0, 0.0, 0.0])


def test_render_charts_writes_both(result, tmp_path):
    charts = render_charts(result, tmp_path)
    assert [p.split("/")[-1] for _, p, _ in charts] == ["health_top.png", "economic_top.png"]
    assert "billions" in charts[1][2]


def test_docx_report_contains_tables_and_charts(result, tmp_path):
    cfg = ReportConfig(citation=DatasetCitation(file_name="storm.csv"))
    out = generate_docx_report(result, tmp_path / "report.docx", config=cfg, chart_dir=tmp_path / "charts")
    doc = docx.Document(out)
    # quality + health + economic
    assert len(doc.tables) == 3
    assert len(doc.inline_shapes) == 2
    economic = doc.tables[2]
    assert [c.text for c in economic.rows[0].cells] == ["Event", "Property.Damage", "Crop.Damage", "Total"]
    assert economic.rows[1].cells[0].text == "FLOOD"
    assert economic.rows[1].cells[3].text == "2,000,000,000"
    text = "\n".join(p.text for p in doc.paragraphs)
    assert "Data file used: storm.csv" in text


def test_describe_view_lines(result):
    lines = describe_view(result.health)
    assert lines[0].startswith("Top 3 events")
    assert lines[1] == "[1] TORNADO | fatalities=5 injuries=10 total=15"
