"""
Taxi Time Analysis — average ground-taxi minutes per airport

A record contributes up to two pairs: (origin, taxi_out) and
(dest, taxi_in). Taxi-out and taxi-in minutes land under the same airport
key and are averaged together with the (sum, count) monoid pattern.

A side with an empty airport code or empty minutes is simply not emitted.
A side whose minutes do not parse as a finite number drops the whole
record, including the other side.

Output line per airport:
    JFK\t10.0

Usage:
    python -m src.flight_stats.taxi_time_analysis <input path> <output path>
"""

import math
import sys

from src.flight_stats.pipeline import AggregationJob, run_cli
from src.flight_stats.records import DEST, ORIGIN, TAXI_IN, TAXI_OUT, FlightRecord


def parse_minutes(raw: str) -> float:
    """
    Parse a taxi duration.

    Raises:
        ValueError: If the value is not a finite number
    """
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"non-finite taxi minutes: {raw!r}")
    return value


# ---------------------------------------------------------------------------
# Map phase
# ---------------------------------------------------------------------------


def emit_taxi_times(fields: FlightRecord) -> list[tuple[str, float]]:
    """Emit (origin, taxi_out) and (dest, taxi_in) for each side that is present."""
    try:
        origin = fields[ORIGIN].strip()
        dest = fields[DEST].strip()
        taxi_out = fields[TAXI_OUT].strip()
        taxi_in = fields[TAXI_IN].strip()

        contributions = []
        if origin and taxi_out:
            contributions.append((origin, parse_minutes(taxi_out)))
        if dest and taxi_in:
            contributions.append((dest, parse_minutes(taxi_in)))
    except (IndexError, ValueError):
        return []

    return contributions


# ---------------------------------------------------------------------------
# Reduce phase — (sum, count) monoid
# ---------------------------------------------------------------------------


def create_sum_count(minutes: float) -> tuple[float, int]:
    return (minutes, 1)


def add_minutes(acc: tuple[float, int], minutes: float) -> tuple[float, int]:
    return (acc[0] + minutes, acc[1] + 1)


def add_sum_counts(a: tuple[float, int], b: tuple[float, int]) -> tuple[float, int]:
    return (a[0] + b[0], a[1] + b[1])


def compute_average(sum_count: tuple[float, int]) -> float | None:
    """Average taxi minutes, or None for an empty group."""
    total, count = sum_count
    if count == 0:
        return None
    return total / count


def format_average(airport: str, average: float) -> str:
    return f"{airport}\t{average}"


TAXI_TIME_JOB = AggregationJob(
    name="Taxi Time Analysis",
    usage_name="TaxiTimeAnalysis",
    emit=emit_taxi_times,
    create_combiner=create_sum_count,
    merge_value=add_minutes,
    merge_combiners=add_sum_counts,
    finalize=compute_average,
    format_summary=format_average,
)


def main(argv: list[str] | None = None) -> int:
    """Compute the average taxi time per airport: <input path> <output path>."""
    return run_cli(TAXI_TIME_JOB, argv)


if __name__ == "__main__":
    sys.exit(main())
