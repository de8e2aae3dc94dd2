"""
Pytest configuration and shared fixtures for the flight statistics tests.
"""

from collections.abc import Callable
from pathlib import Path

import pytest
from pyspark.sql import SparkSession

HEADER = (
    "FL_NUM,OP_CARRIER,ORIGIN,DEST,TAXI_OUT,TAXI_IN,DEP_DELAY,CARRIER_DELAY,"
    "WEATHER_DELAY,NAS_DELAY,SECURITY_DELAY,LATE_AIRCRAFT_DELAY,FL_DATE"
)


@pytest.fixture(scope="session")
def spark() -> SparkSession:
    """
    Create a SparkSession for testing.

    Uses session scope to reuse the same Spark context across all tests,
    which significantly speeds up test execution.
    """
    spark = (
        SparkSession.builder
        .appName("pytest-flight-stats")
        .master("local[2]")  # Two cores so pipelines really run in parallel
        .config("spark.sql.shuffle.partitions", "2")
        .config("spark.default.parallelism", "2")
        .config("spark.ui.enabled", "false")
        .config("spark.driver.memory", "1g")
        .getOrCreate()
    )

    spark.sparkContext.setLogLevel("WARN")

    yield spark

    spark.stop()


@pytest.fixture(scope="session")
def sc(spark: SparkSession):
    """SparkContext of the session fixture, for RDD-based tests."""
    return spark.sparkContext


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """
    Return a helper that writes a flight CSV (header + rows) under tmp_path.

    The header row can be replaced to check that its content is irrelevant.
    """

    def _write(name: str, rows: list[str], header: str | None = HEADER) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        lines = ([header] if header is not None else []) + rows
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write
