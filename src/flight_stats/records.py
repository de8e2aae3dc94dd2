"""
Flight record parsing.

Turns raw CSV lines into field sequences. Lines are split on every comma
with empty fields preserved ("a,,c" yields three fields), and a line is
only usable when it carries at least MIN_FIELDS columns. Anything shorter
is dropped silently; malformed input never raises here.
"""

from collections.abc import Iterable, Iterator

FIELD_SEPARATOR = ","

# Data rows need this many columns; extra columns are ignored
MIN_FIELDS = 13

# Column positions (0-indexed)
CARRIER = 1
ORIGIN = 2
DEST = 3
TAXI_OUT = 4
TAXI_IN = 5
CARRIER_DELAY = 7
WEATHER_DELAY = 8
NAS_DELAY = 9
SECURITY_DELAY = 10
LATE_AIRCRAFT_DELAY = 11

DELAY_COLUMNS = (
    CARRIER_DELAY,
    WEATHER_DELAY,
    NAS_DELAY,
    SECURITY_DELAY,
    LATE_AIRCRAFT_DELAY,
)

FlightRecord = list[str]


def split_record(line: str) -> FlightRecord | None:
    """
    Split one raw line into its fields.

    Returns:
        The field list, or None when the line has fewer than MIN_FIELDS
        columns
    """
    fields = line.split(FIELD_SEPARATOR)
    if len(fields) < MIN_FIELDS:
        return None
    return fields


def parse_records(lines: Iterable[str], skip_header: bool) -> Iterator[FlightRecord]:
    """
    Parse the lines of one input split.

    Args:
        lines: Raw lines of the split, in file order
        skip_header: True when the split starts at a file boundary; its
                     first line is then dropped whatever it contains

    Yields:
        Usable flight records
    """
    iterator = iter(lines)
    if skip_header:
        next(iterator, None)

    for line in iterator:
        fields = split_record(line)
        if fields is not None:
            yield fields


def parse_file_partition(partition_index: int, lines: Iterable[str]) -> Iterator[FlightRecord]:
    """mapPartitionsWithIndex adapter: partition 0 of a file holds its header."""
    return parse_records(lines, skip_header=partition_index == 0)
