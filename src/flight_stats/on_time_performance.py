"""
On-Time Performance Analysis — on-time rate per carrier

Each flight record becomes one (carrier, on_time_flag) pair, where the flag
is 1 when the five delay-cause columns add up to at most five minutes.
Blank or unparsable delay values count as 0.0 rather than rejecting the
row. The flags are folded with a (total, on_time) monoid, which is safe to
combine on the map side and across partitions in any order.

Output line per carrier:
    AA\tTotalFlights=2, OnTimeFlights=1, OnTimeRate=50.00%

Usage:
    python -m src.flight_stats.on_time_performance <input path> <output path>
"""

import sys
from decimal import ROUND_HALF_UP, Decimal
from typing import NamedTuple

from src.flight_stats.pipeline import AggregationJob, run_cli
from src.flight_stats.records import CARRIER, DELAY_COLUMNS, FlightRecord

# A flight is on time when its total delay is at most this many minutes
ON_TIME_THRESHOLD_MINUTES = 5.0

RATE_QUANTUM = Decimal("0.01")


class OnTimeSummary(NamedTuple):
    total_flights: int
    on_time_flights: int
    on_time_rate: float


# ---------------------------------------------------------------------------
# Map phase
# ---------------------------------------------------------------------------


def parse_delay(raw: str) -> float:
    """
    Parse a delay column leniently: blank or unparsable values read as 0.0.

    NaN and infinity do parse, and leave the flight marked as delayed.
    """
    try:
        return float(raw.strip())
    except ValueError:
        return 0.0


def emit_on_time_flag(fields: FlightRecord) -> list[tuple[str, int]]:
    """
    Emit (carrier, 1) for an on-time flight and (carrier, 0) otherwise.

    Records without a carrier code, or that cannot be read at all, emit
    nothing.
    """
    try:
        carrier = fields[CARRIER].strip()
        if not carrier:
            return []
        total_delay = sum(parse_delay(fields[column]) for column in DELAY_COLUMNS)
    except (IndexError, AttributeError):
        return []

    return [(carrier, 1 if total_delay <= ON_TIME_THRESHOLD_MINUTES else 0)]


# ---------------------------------------------------------------------------
# Reduce phase — (total_flights, on_time_flights) monoid
# ---------------------------------------------------------------------------


def create_counts(flag: int) -> tuple[int, int]:
    return (1, flag)


def add_flag(counts: tuple[int, int], flag: int) -> tuple[int, int]:
    return (counts[0] + 1, counts[1] + flag)


def add_counts(a: tuple[int, int], b: tuple[int, int]) -> tuple[int, int]:
    return (a[0] + b[0], a[1] + b[1])


def round_half_up(rate: float) -> float:
    """Round to 2 decimals with ties going up (0.625 -> 0.63)."""
    return float(Decimal(str(rate)).quantize(RATE_QUANTUM, rounding=ROUND_HALF_UP))


def to_summary(counts: tuple[int, int]) -> OnTimeSummary:
    """Compute the on-time rate (in percent, 2 decimals) from the counts."""
    total, on_time = counts
    rate = 0.0 if total == 0 else 100.0 * on_time / total
    return OnTimeSummary(total, on_time, round_half_up(rate))


def format_summary(carrier: str, summary: OnTimeSummary) -> str:
    return (
        f"{carrier}\tTotalFlights={summary.total_flights}, "
        f"OnTimeFlights={summary.on_time_flights}, "
        f"OnTimeRate={summary.on_time_rate:.2f}%"
    )


ON_TIME_JOB = AggregationJob(
    name="On-Time Performance Analysis",
    usage_name="OnTimePerformance",
    emit=emit_on_time_flag,
    create_combiner=create_counts,
    merge_value=add_flag,
    merge_combiners=add_counts,
    finalize=to_summary,
    format_summary=format_summary,
)


def main(argv: list[str] | None = None) -> int:
    """Compute the on-time rate per carrier: <input path> <output path>."""
    return run_cli(ON_TIME_JOB, argv)


if __name__ == "__main__":
    sys.exit(main())
