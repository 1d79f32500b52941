"""
Unit tests for grid aggregation and derived views.
"""
import pytest

from heatmap.analyzer.aggregator import DAYS, HOURS, Grid, aggregate, in_domain, slots
from heatmap.core.view_registry import DerivedView, project
from heatmap.ingest.parser import parse
from heatmap.models.grid_models import Cell, Record


def test_empty_grid_lookup_is_total():
    grid = aggregate([])

    all_slots = list(slots())
    assert len(all_slots) == 168
    assert len(set(all_slots)) == 168
    for day, hour in all_slots:
        assert grid.cell(day, hour) == Cell(conversions=0, cost=0)
        for view in DerivedView:
            assert grid.value(day, hour, view) == 0


def test_header_only_report_gives_all_zero_grid():
    grid = aggregate(parse("Hour of the day,Day of the week,Conversions,Cost\n"))

    assert grid == Grid()
    assert grid.totals() == Cell(conversions=0, cost=0)


def test_scenario_single_record_derived_values():
    grid = aggregate(parse("Hour of the day,Day of the week,Conversions,Cost\n9,Monday,5,10\n"))

    assert grid.value("Monday", 9, DerivedView.CONVERSIONS) == 5
    assert grid.value("Monday", 9, DerivedView.COST) == 10
    assert grid.value("Monday", 9, DerivedView.CONVERSION_COST) == pytest.approx(0.5)
    assert grid.value("Monday", 9, DerivedView.COST_CONVERSION) == pytest.approx(2)
    assert grid.cell("Tuesday", 9) == Cell()


def test_ratio_views_are_zero_on_zero_denominator():
    assert project(DerivedView.CONVERSION_COST, conversions=4, cost=0) == 0
    assert project(DerivedView.COST_CONVERSION, conversions=0, cost=25) == 0
    assert project("cost-conversion", conversions=0, cost=0) == 0


def test_last_record_wins_on_collision():
    grid = aggregate(
        [
            Record(hour=3, day="Friday", conversions=1, cost=1),
            Record(hour=3, day="Friday", conversions=7, cost=14),
        ]
    )

    assert grid.cell("Friday", 3) == Cell(conversions=7, cost=14)


def test_records_outside_domain_are_dropped():
    grid = aggregate(
        [
            Record(hour=24, day="Monday", conversions=1, cost=1),
            Record(hour=5, day="Mon", conversions=1, cost=1),
            Record(hour=-1, day="Sunday", conversions=1, cost=1),
        ]
    )

    assert grid == Grid()


def test_lookup_outside_domain_raises_key_error():
    grid = aggregate([])

    with pytest.raises(KeyError):
        grid.cell("Funday", 1)
    with pytest.raises(KeyError):
        grid.cell("Monday", 24)
    assert not in_domain("monday", 1)


def test_bounds_floor_when_all_zero():
    bounds = aggregate([]).bounds(DerivedView.CONVERSIONS)

    assert bounds.min_value == 0
    assert bounds.max_value == 1


def test_bounds_span_all_cells():
    grid = aggregate(
        [
            Record(hour=1, day="Monday", conversions=2, cost=8),
            Record(hour=2, day="Monday", conversions=6, cost=3),
        ]
    )

    assert grid.bounds(DerivedView.CONVERSIONS).max_value == 6
    assert grid.bounds(DerivedView.COST).max_value == 8
    assert grid.bounds(DerivedView.CONVERSION_COST).max_value == 2
    assert grid.bounds(DerivedView.COST_CONVERSION).max_value == 4
    assert grid.bounds(DerivedView.COST_CONVERSION).min_value == 0


def test_small_ratios_keep_max_floor_of_one():
    grid = aggregate([Record(hour=1, day="Monday", conversions=1, cost=50)])

    assert grid.bounds(DerivedView.CONVERSION_COST).max_value == 1


def test_zero_slots_in_drawing_order():
    grid = aggregate([Record(hour=0, day="Sunday", conversions=1, cost=1)])

    zero = grid.zero_slots(DerivedView.CONVERSIONS)

    assert len(zero) == 167
    assert ("Sunday", 0) not in zero
    assert zero[0] == ("Monday", 0)


def test_rows_cover_every_slot_day_major():
    rows = list(aggregate([]).rows())

    assert len(rows) == len(DAYS) * len(HOURS)
    assert rows[0][:2] == ("Sunday", 0)
    assert rows[24][:2] == ("Monday", 0)
