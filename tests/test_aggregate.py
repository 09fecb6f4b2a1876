import pandas as pd
import pytest

from stormimpact.aggregate import aggregate_events, rank_economic, rank_health
from stormimpact.cleaning import ANALYSIS_COLUMNS
from stormimpact.models import ECONOMIC, HEALTH, EventAggregate, RankedView


def _analysis(rows):
    return pd.DataFrame(rows, columns=ANALYSIS_COLUMNS)


EXAMPLE = _analysis([
    ("TORNADO", 5, 10, 1000.0, 0.0),
    ("tornado", 2, 0, 0.0, 0.0),
    ("FLOOD", 0, 0, 2e9, 0.0),
])


def test_example_gives_three_case_sensitive_groups():
    aggs = aggregate_events(EXAMPLE)
    assert [a.event for a in aggs] == ["TORNADO", "tornado", "FLOOD"]


def test_economic_view_ranks_flood_first():
    view = rank_economic(aggregate_events(EXAMPLE))
    assert view.rows[0].event == "FLOOD"
    assert view.rows[0].economic_total == 2_000_000_000


def test_health_view_totals():
    view = rank_health(aggregate_events(EXAMPLE))
    assert [(a.event, a.health_total) for a in view.rows] == [("TORNADO", 15.0), ("tornado", 2.0), ("FLOOD", 0.0)]


def test_grouping_preserves_totals():
    analysis = _analysis([
        ("HAIL", 1, 2, 10.0, 5.0),
        ("WIND", 0, 1, 0.0, 0.0),
        ("HAIL", 3, 0, 1.0, 0.0),
        ("FLOOD", 4, 4, 0.0, 100.0),
        ("WIND", 2, 2, 7.0, 1.0),
    ])
    aggs = aggregate_events(analysis)
    assert sum(a.fatalities for a in aggs) == analysis["Fatalities"].sum()
    assert sum(a.injuries for a in aggs) == analysis["Injuries"].sum()
    assert sum(a.property_damage for a in aggs) == analysis["Property.Damage"].sum()
    assert sum(a.crop_damage for a in aggs) == analysis["Crop.Damage"].sum()
    hail = next(a for a in aggs if a.event == "HAIL")
    assert (hail.fatalities, hail.injuries, hail.property_damage, hail.crop_damage) == (4.0, 2.0, 11.0, 5.0)


def test_views_are_non_increasing_and_truncated():
    analysis = _analysis([(f"E{i}", i % 7, i % 3, float(i * 13 % 17), float(i % 5)) for i in range(40)])
    aggs = aggregate_events(analysis)
    health = rank_health(aggs)
    economic = rank_economic(aggs)
    assert len(health) == 10 and len(economic) == 10
    h = [a.health_total for a in health.rows]
    e = [a.economic_total for a in economic.rows]
    assert h == sorted(h, reverse=True)
    assert e == sorted(e, reverse=True)
    assert h[0] == max(a.health_total for a in aggs)


def test_ties_keep_first_encounter_order():
    analysis = _analysis([
        ("B", 1, 0, 0.0, 0.0),
        ("A", 0, 1, 0.0, 0.0),
        ("C", 2, 0, 0.0, 0.0),
        ("D", 1, 0, 0.0, 0.0),
    ])
    view = rank_health(aggregate_events(analysis))
    assert [a.event for a in view.rows] == ["C", "B", "A", "D"]


def test_custom_top_n():
    view = rank_health(aggregate_events(EXAMPLE), n=2)
    assert [a.event for a in view.rows] == ["TORNADO", "tornado"]


def test_to_frame_columns():
    aggs = aggregate_events(EXAMPLE)
    health = rank_health(aggs).to_frame()
    economic = rank_economic(aggs).to_frame()
    assert list(health.columns) == ["Event", "Fatalities", "Injuries", "Total"]
    assert list(economic.columns) == ["Event", "Property.Damage", "Crop.Damage", "Total"]
    assert economic.iloc[0]["Total"] == 2e9


def test_empty_view_frame_has_columns():
    frame = RankedView(kind=HEALTH).to_frame()
    assert frame.empty
    assert list(frame.columns) == ["Event", "Fatalities", "Injuries", "Total"]


def test_unknown_view_kind_rejected():
    with pytest.raises(ValueError):
        RankedView(kind="weather")


def test_event_aggregate_is_immutable():
    a = EventAggregate("HAIL", 1.0, 2.0, 3.0, 4.0)
    assert (a.health_total, a.economic_total) == (3.0, 7.0)
    with pytest.raises(AttributeError):
        a.fatalities = 0.0
    assert RankedView(kind=ECONOMIC, rows=(a,)).total(a) == 7.0
