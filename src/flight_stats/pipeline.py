"""
Key-grouped aggregation pipeline shared by the flight statistics jobs.

Both jobs are instances of the same four steps:

  1. Parse    — raw lines -> flight records (header dropped once per file)
  2. Extract  — flatMap each record into zero or more (key, value) pairs
  3. Group    — combineByKey folds every value of a key into one combiner
  4. Finalize — mapValues turns each combiner into the job's summary

Combiners are (count, sum)-style monoids, so the result does not depend on
how Spark partitions the input, the order the pairs are emitted in, or
whether a retried task emits the same pairs twice into a fresh attempt.
"""

import sys
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any, NamedTuple

from py4j.protocol import Py4JJavaError
from pyspark import SparkContext
from pyspark.rdd import RDD

from src.common.data_loader import load_file_lines
from src.common.spark_session import create_spark_session
from src.flight_stats.records import FlightRecord, parse_file_partition

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


class AggregationJob(NamedTuple):
    """One "extract -> group -> combine" job definition."""

    name: str
    usage_name: str
    emit: Callable[[FlightRecord], list[tuple[str, Any]]]
    create_combiner: Callable[[Any], Any]
    merge_value: Callable[[Any, Any], Any]
    merge_combiners: Callable[[Any, Any], Any]
    finalize: Callable[[Any], Any]
    format_summary: Callable[[str, Any], str]


# ---------------------------------------------------------------------------
# Pipeline steps
# ---------------------------------------------------------------------------


def parse_lines(lines: RDD) -> RDD:
    """
    Parse an RDD of raw lines read from a single file.

    Only partition 0 starts at the file boundary, so only its first line is
    treated as the header.
    """
    return lines.mapPartitionsWithIndex(parse_file_partition)


def extract_contributions(records: RDD, job: AggregationJob) -> RDD:
    """Map phase: emit the job's (key, value) contributions for every record."""
    return records.flatMap(job.emit)


def group_contributions(pairs: RDD, job: AggregationJob) -> RDD:
    """
    Shuffle phase: fold all values of a key into a single combiner.

    Only keys that received at least one contribution come out of here.
    """
    return pairs.combineByKey(
        job.create_combiner,
        job.merge_value,
        job.merge_combiners,
    )


def summarize(grouped: RDD, job: AggregationJob) -> RDD:
    """Reduce phase: finalize each combiner, dropping keys with no summary."""
    return grouped.mapValues(job.finalize).filter(lambda kv: kv[1] is not None)


def format_summaries(summaries: RDD, job: AggregationJob) -> RDD:
    """Render summaries as output lines, sorted by key into one partition."""
    return (
        summaries.sortByKey()
        .map(lambda kv: job.format_summary(kv[0], kv[1]))
        .coalesce(1)
    )


# ---------------------------------------------------------------------------
# Whole-pipeline helpers
# ---------------------------------------------------------------------------


def summarize_records(records: RDD, job: AggregationJob) -> RDD:
    """Run extract, group and finalize over parsed flight records."""
    grouped = group_contributions(extract_contributions(records, job), job)
    return summarize(grouped, job)


def summarize_input(sc: SparkContext, job: AggregationJob, input_path: str | Path) -> RDD:
    """Run the pipeline over every file under input_path, one header per file."""
    parsed = [parse_lines(lines) for lines in load_file_lines(sc, input_path)]
    records = parsed[0] if len(parsed) == 1 else sc.union(parsed)
    return summarize_records(records, job)


def run_aggregation(sc: SparkContext, job: AggregationJob, input_path: str | Path) -> RDD:
    """Run the full pipeline and return the formatted output lines."""
    return format_summaries(summarize_input(sc, job, input_path), job)


def collect_summaries(
    sc: SparkContext,
    job: AggregationJob,
    input_path: str | Path,
) -> dict[str, Any]:
    """Run the pipeline and bring the summaries back to the driver."""
    return dict(summarize_input(sc, job, input_path).collect())


# ---------------------------------------------------------------------------
# Command surface
# ---------------------------------------------------------------------------


def print_usage(job: AggregationJob) -> None:
    print(f"Usage: {job.usage_name} <input path> <output path>", file=sys.stderr)


def run_job(sc: SparkContext, job: AggregationJob, input_path: str, output_path: str) -> int:
    """
    Run a job end to end and write its output directory.

    Returns:
        Number of keys written
    """
    output = run_aggregation(sc, job, input_path).cache()
    output.saveAsTextFile(output_path)
    return output.count()


def run_cli(job: AggregationJob, argv: Sequence[str] | None = None) -> int:
    """
    Entry point shared by the job modules.

    Args:
        job: The job to run
        argv: Positional arguments (defaults to sys.argv[1:]); exactly an
              input path and an output path are accepted

    Returns:
        Process exit code
    """
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 2:
        print_usage(job)
        return EXIT_USAGE

    input_path, output_path = args

    try:
        spark = create_spark_session(job.name)
    except ValueError as e:
        print(f"{job.name} failed: {e}", file=sys.stderr)
        return EXIT_FAILURE

    try:
        print(f"=== {job.name} ===")
        print(f"Input: {input_path}")
        keys_written = run_job(spark.sparkContext, job, input_path, output_path)
        print(f"Output: {output_path} ({keys_written} keys)")
    except (OSError, ValueError, Py4JJavaError) as e:
        print(f"{job.name} failed: {e}", file=sys.stderr)
        return EXIT_FAILURE
    finally:
        spark.stop()

    return EXIT_SUCCESS
