"""
Shared SparkSession utilities for the flight statistics jobs.

Every job builds its session through create_spark_session() so that the
runtime is configured the same way whether it runs on a laptop or is
pointed at a cluster master through the environment.

Logging is configured via conf/log4j2.properties to:
- Write INFO logs to .logs/spark.log
- Only show ERROR on console (job output stays readable)
"""

import os
from pathlib import Path

from pyspark import SparkContext
from pyspark.sql import SparkSession

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Path to log4j2 config
LOG4J2_CONFIG = PROJECT_ROOT / "conf" / "log4j2.properties"

# Final app name will be: APP_NAME_PREFIX-<JobName>
APP_NAME_PREFIX = "FlightStats"

DEFAULT_MASTER = "local[*]"
DEFAULT_SHUFFLE_PARTITIONS = 4

MASTER_ENV_VAR = "FLIGHT_STATS_SPARK_MASTER"
SHUFFLE_PARTITIONS_ENV_VAR = "FLIGHT_STATS_SHUFFLE_PARTITIONS"


def _ensure_logs_dir() -> None:
    """Ensure .logs directory exists."""
    logs_dir = PROJECT_ROOT / ".logs"
    logs_dir.mkdir(exist_ok=True)


def _to_title(name: str) -> str:
    """
    Convert a snake_case or spaced name to TitleCase.

    Examples:
        on_time_performance -> OnTimePerformance
        Taxi Time Analysis -> TaxiTimeAnalysis
    """
    words = name.replace("-", " ").replace("_", " ").split()
    return "".join(word[:1].upper() + word[1:] for word in words)


def _parse_script_identifier(script_id: str | None) -> str | None:
    """
    Parse a script identifier, which can be either a file path or a job name.

    File paths (__file__) are reduced to their stem; both forms are
    converted to TitleCase.
    """
    if script_id is None:
        return None

    if "/" in script_id or script_id.endswith(".py"):
        return _to_title(Path(script_id).stem)

    return _to_title(script_id)


def _build_app_name(script_name: str | None = None) -> str:
    """Build the full application name, e.g. FlightStats-TaxiTimeAnalysis."""
    if script_name:
        return f"{APP_NAME_PREFIX}-{script_name}"
    return APP_NAME_PREFIX


def resolve_master(master: str | None = None) -> str:
    """Pick the Spark master: explicit argument, then environment, then local."""
    if master:
        return master
    return os.environ.get(MASTER_ENV_VAR) or DEFAULT_MASTER


def resolve_shuffle_partitions() -> int:
    """
    Read the shuffle partition count from the environment.

    Raises:
        ValueError: If the variable is set to something other than a
            positive integer.
    """
    raw = os.environ.get(SHUFFLE_PARTITIONS_ENV_VAR)
    if not raw:
        return DEFAULT_SHUFFLE_PARTITIONS

    try:
        partitions = int(raw)
    except ValueError:
        partitions = 0
    if partitions < 1:
        raise ValueError(
            f"{SHUFFLE_PARTITIONS_ENV_VAR} must be a positive integer, got {raw!r}"
        )
    return partitions


def create_spark_session(
    script_name: str | None = None,
    master: str | None = None,
) -> SparkSession:
    """
    Create a SparkSession configured for the flight statistics jobs.

    Args:
        script_name: Identifier for the job. Either __file__ or a job name
                     such as "Taxi Time Analysis"; results in an app name
                     like "FlightStats-TaxiTimeAnalysis"
        master: Spark master URL. Defaults to $FLIGHT_STATS_SPARK_MASTER,
                then local[*]

    Returns:
        Configured SparkSession instance
    """
    _ensure_logs_dir()

    app_name = _build_app_name(_parse_script_identifier(script_name))
    shuffle_partitions = resolve_shuffle_partitions()

    # log4j resolves its relative file appender path against the cwd
    original_cwd = os.getcwd()
    os.chdir(PROJECT_ROOT)

    try:
        builder = SparkSession.builder.appName(app_name).master(resolve_master(master))

        if LOG4J2_CONFIG.exists():
            builder = builder.config(
                "spark.driver.extraJavaOptions",
                f"-Dlog4j.configurationFile=file:{LOG4J2_CONFIG}",
            )

        spark = (
            builder.config("spark.sql.shuffle.partitions", str(shuffle_partitions))
            .config("spark.default.parallelism", str(shuffle_partitions))
            .config("spark.driver.memory", "2g")
            .config("spark.ui.showConsoleProgress", "false")
            .getOrCreate()
        )

        spark.sparkContext.setLogLevel("ERROR")

        return spark
    finally:
        os.chdir(original_cwd)


def get_spark_context(script_name: str | None = None) -> SparkContext:
    """Get the SparkContext of a session built by create_spark_session()."""
    spark = create_spark_session(script_name)
    return spark.sparkContext
