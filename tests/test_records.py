"""
Tests for src/flight_stats/records.py.
"""

from src.flight_stats.records import (
    MIN_FIELDS,
    parse_file_partition,
    parse_records,
    split_record,
)

ROW = "1,AA,JFK,LAX,10,15,,,,0,0,0,0,x"


class TestSplitRecord:
    """Tests for splitting one raw line."""

    def test_preserves_empty_fields(self) -> None:
        fields = split_record("a,,c" + "," * 10)

        assert fields is not None
        assert fields[:3] == ["a", "", "c"]

    def test_trailing_commas_keep_field_count(self) -> None:
        fields = split_record("," * (MIN_FIELDS - 1))

        assert fields == [""] * MIN_FIELDS

    def test_rejects_short_lines(self) -> None:
        assert split_record("1,AA,JFK,LAX,10,15") is None
        assert split_record("") is None

    def test_extra_columns_are_kept(self) -> None:
        fields = split_record(ROW)

        assert fields is not None
        assert len(fields) == 14
        assert fields[1] == "AA"


class TestParseRecords:
    """Tests for header handling within one input split."""

    def test_first_line_is_dropped_whatever_it_contains(self) -> None:
        # A header that looks exactly like data is still a header
        records = list(parse_records([ROW, ROW], skip_header=True))

        assert len(records) == 1

    def test_no_skip_keeps_first_line(self) -> None:
        records = list(parse_records([ROW, ROW], skip_header=False))

        assert len(records) == 2

    def test_short_rows_are_dropped(self) -> None:
        lines = ["header", ROW, "2,AA", "", ROW]

        records = list(parse_records(lines, skip_header=True))

        assert len(records) == 2

    def test_empty_split(self) -> None:
        assert list(parse_records([], skip_header=True)) == []

    def test_only_partition_zero_skips_header(self) -> None:
        assert len(list(parse_file_partition(0, [ROW, ROW]))) == 1
        assert len(list(parse_file_partition(1, [ROW, ROW]))) == 2
        assert len(list(parse_file_partition(5, [ROW]))) == 1

    def test_reparsing_is_repeatable(self) -> None:
        lines = ["header", ROW, "2,AA,JFK,LAX,,,,,,,300,0,0,x"]

        first = list(parse_records(lines, skip_header=True))
        second = list(parse_records(lines, skip_header=True))

        assert first == second
