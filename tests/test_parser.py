"""
Unit tests for the report parser.
"""
import pytest

from heatmap.analyzer.aggregator import aggregate, slots
from heatmap.ingest.parser import find_header_index, parse, parse_header, serialize
from heatmap.models.grid_models import Record


def test_parse_single_row():
    """Standard four-column report with one data row."""
    text = "Hour of the day,Day of the week,Conversions,Cost\n9,Monday,5,10\n"

    records = parse(text)

    assert records == [Record(hour=9, day="Monday", conversions=5.0, cost=10.0)]


def test_parse_skips_banner_lines():
    """Exported reports prepend a title and date range before the header."""
    text = (
        "Hour of day report\n"
        "\"Jan 1, 2024 - Jan 31, 2024\"\n"
        "\n"
        "Hour of the day,Day of the week,Conversions,Cost\n"
        "0,Sunday,1,2\n"
        "23,Saturday,3,4\n"
    )

    records = parse(text)

    assert len(records) == 2
    assert records[0] == Record(hour=0, day="Sunday", conversions=1.0, cost=2.0)
    assert records[1] == Record(hour=23, day="Saturday", conversions=3.0, cost=4.0)


def test_header_columns_in_any_order_with_extras():
    text = (
        '"Cost","Campaign","Day of the week","Conversions","Hour of the day"\n'
        "12.5,Brand,Friday,3,17\n"
    )

    records = parse(text)

    assert records == [Record(hour=17, day="Friday", conversions=3.0, cost=12.5)]


def test_header_matching_is_case_sensitive():
    positions = parse_header("hour of the day,Day of the week,conversions,Cost")

    assert positions == {"Day of the week": 1, "Cost": 3}


def test_malformed_numbers_read_as_zero():
    text = (
        "Hour of the day,Day of the week,Conversions,Cost\n"
        "7,Tuesday,n/a,--\n"
        "8,Tuesday,,\n"
        "9,Tuesday\n"
    )

    records = parse(text)

    assert [r.conversions for r in records] == [0.0, 0.0, 0.0]
    assert [r.cost for r in records] == [0.0, 0.0, 0.0]
    assert [r.hour for r in records] == [7, 8, 9]


def test_numeric_formats_are_tolerated():
    text = (
        "Hour of the day,Day of the week,Conversions,Cost\n"
        '9.0, Monday ,"1,204","$1,234.50"\n'
        "10,Monday,-4,nan\n"
    )

    first, second = parse(text)

    assert first == Record(hour=9, day="Monday", conversions=1204.0, cost=1234.5)
    assert second.conversions == 0.0
    assert second.cost == 0.0


def test_blank_lines_skipped():
    text = (
        "Hour of the day,Day of the week,Conversions,Cost\n"
        "\n"
        "   \n"
        "1,Monday,1,1\r\n"
        "\r\n"
        "2,Monday,2,2\r\n"
    )

    records = parse(text)

    assert [r.hour for r in records] == [1, 2]


def test_header_only_parses_to_no_records():
    assert parse("Hour of the day,Day of the week,Conversions,Cost\n") == []


def test_empty_text_parses_to_no_records():
    assert parse("") == []
    assert parse("   \n  ") == []


def test_first_line_is_header_without_marker():
    lines = ["Day of the week,Conversions", "Monday,4"]

    assert find_header_index(lines) == 0
    assert parse("\n".join(lines)) == [Record(hour=0, day="Monday", conversions=4.0, cost=0.0)]


def test_records_are_immutable():
    record = parse("Hour of the day,Day of the week,Conversions,Cost\n9,Monday,5,10\n")[0]

    with pytest.raises(Exception):
        record.hour = 10


def test_serialized_grid_parses_back_to_same_grid():
    grid = aggregate(
        [
            Record(hour=9, day="Monday", conversions=5, cost=10),
            Record(hour=0, day="Sunday", conversions=0.1, cost=1 / 3),
            Record(hour=23, day="Saturday", conversions=12345.678, cost=0),
        ]
    )

    rebuilt = aggregate(parse(serialize(grid.rows())))

    for day, hour in slots():
        original, copy = grid.cell(day, hour), rebuilt.cell(day, hour)
        assert copy.conversions == pytest.approx(original.conversions)
        assert copy.cost == pytest.approx(original.cost)


def test_oversized_field_does_not_raise():
    """A field past the csv module's size limit falls back to a plain split."""
    text = (
        "Hour of the day,Day of the week,Conversions,Cost,Notes\n"
        "9,Monday,5,10," + "x" * 200000 + "\n"
    )

    records = parse(text)

    assert records == [Record(hour=9, day="Monday", conversions=5.0, cost=10.0)]
