"""
Input discovery and line loading for the flight statistics jobs.

An input path may name a single CSV file, a directory of CSV files, or a
glob pattern. Every file carries its own header line, so each one is
loaded as its own RDD. Partition 0 of such an RDD is the one that starts
at the file boundary, so the parser can drop exactly one header per file
no matter how Spark splits the file.
"""

import glob
from pathlib import Path

from pyspark import SparkContext
from pyspark.rdd import RDD

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Bundled sample datasets live next to the job modules
DATA_DIR = PROJECT_ROOT / "src" / "flight_stats" / "data"

# Files skipped when expanding a directory (_SUCCESS markers, .crc files, ...)
HIDDEN_PREFIXES = ("_", ".")


def _is_visible(path: Path) -> bool:
    return path.is_file() and not path.name.startswith(HIDDEN_PREFIXES)


def list_input_files(input_path: str | Path) -> list[Path]:
    """
    Expand an input path into the list of files to process.

    Args:
        input_path: A file, a directory, or a glob pattern

    Returns:
        Sorted list of visible files

    Raises:
        FileNotFoundError: If nothing matches the input path
    """
    path = Path(input_path)

    if path.is_dir():
        files = sorted(p for p in path.iterdir() if _is_visible(p))
    elif path.is_file():
        files = [path]
    else:
        files = sorted(p for p in map(Path, glob.glob(str(input_path))) if _is_visible(p))

    if not files:
        raise FileNotFoundError(f"No input files found at {input_path}")

    return files


def load_file_lines(sc: SparkContext, input_path: str | Path) -> list[RDD]:
    """
    Load every input file as its own RDD of raw lines.

    Args:
        sc: Active SparkContext
        input_path: A file, a directory, or a glob pattern

    Returns:
        One RDD per input file, in file name order
    """
    return [sc.textFile(str(path)) for path in list_input_files(input_path)]


def get_data_path(filename: str) -> Path:
    """
    Get the full path to a bundled sample data file.

    Args:
        filename: Data file name (e.g., "flights_sample.csv")
    """
    return DATA_DIR / filename
