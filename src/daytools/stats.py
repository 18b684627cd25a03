# daytools/stats.py
"""
Summary statistics over a stream of integers.

Responsibilities:
- Read newline-delimited integers until the "stop" sentinel (or EOF).
- Compute mean, median, mode and population standard deviation.
- Render the selected statistics as fixed-format lines.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

import numpy as np

from .errors import EmptyInputError, ParseError

logger = logging.getLogger(__name__)

STOP_TOKEN = "stop"

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


# --------------------------------------------------------------------
# Dataclasses
# --------------------------------------------------------------------


@dataclass(frozen=True)
class StatsFlags:
    """Which statistics to print. All off by default."""

    mean: bool = False
    median: bool = False
    mode: bool = False
    sd: bool = False

    def any(self) -> bool:
        return self.mean or self.median or self.mode or self.sd


@dataclass(frozen=True)
class Summary:
    mean: float
    median: float
    mode: int
    sd: float


# --------------------------------------------------------------------
# Input
# --------------------------------------------------------------------


def parse_number(token: str) -> int:
    """
    Parse one base-10 signed integer token.

    Only an optional sign followed by ASCII digits is accepted: no
    surrounding whitespace, no underscores. The value must fit in int64.
    """
    if not _INT_RE.fullmatch(token):
        raise ParseError(f"Invalid input: {token!r} is not an integer")

    value = int(token)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ParseError(f"Invalid input: {token!r} is out of range")
    return value


def read_numbers(lines: Iterable[str], stop: str = STOP_TOKEN) -> np.ndarray:
    """
    Collect integers from `lines` until the sentinel or end of input.

    Returns a sorted, read-only int64 array. Raises ParseError on the first
    bad token; nothing after it is read.
    """
    values: List[int] = []
    for line in lines:
        token = line.rstrip("\n")
        if token.endswith("\r"):
            token = token[:-1]
        if token == stop:
            break
        values.append(parse_number(token))

    numbers = np.sort(np.asarray(values, dtype=np.int64))
    numbers.flags.writeable = False
    logger.debug("read %d numbers", numbers.size)
    return numbers


# --------------------------------------------------------------------
# Statistics
# --------------------------------------------------------------------


def _require_values(numbers: np.ndarray) -> np.ndarray:
    arr = np.asarray(numbers, dtype=np.int64)
    if arr.size == 0:
        raise EmptyInputError("no numbers to summarise")
    return arr


def mean(numbers: np.ndarray) -> float:
    arr = _require_values(numbers)
    return float(np.mean(arr, dtype=np.float64))


def median(numbers: np.ndarray) -> float:
    """Middle value, or the average of the two middle values for even counts."""
    arr = np.sort(_require_values(numbers))
    middle = arr.size // 2
    if arr.size % 2 == 0:
        return (float(arr[middle - 1]) + float(arr[middle])) / 2.0
    return float(arr[middle])


def mode(numbers: np.ndarray) -> int:
    """
    Most frequent value; on a tie, the smallest of the tied values.

    np.unique returns values in ascending order and argmax returns the
    first maximum, which gives the tie-break.
    """
    arr = _require_values(numbers)
    values, counts = np.unique(arr, return_counts=True)
    return int(values[int(np.argmax(counts))])


def standard_deviation(numbers: np.ndarray, mean_value: Optional[float] = None) -> float:
    """Population standard deviation (divides by N)."""
    arr = _require_values(numbers).astype(np.float64)
    if mean_value is None:
        mean_value = float(np.mean(arr))
    deviations = arr - mean_value
    return float(np.sqrt(np.mean(deviations * deviations)))


def summarise(numbers: np.ndarray) -> Summary:
    mean_value = mean(numbers)
    return Summary(
        mean=mean_value,
        median=median(numbers),
        mode=mode(numbers),
        sd=standard_deviation(numbers, mean_value),
    )


# --------------------------------------------------------------------
# Output
# --------------------------------------------------------------------


def format_summary(summary: Summary, flags: StatsFlags) -> List[str]:
    """Selected statistics, always in the order mean, median, mode, SD."""
    lines: List[str] = []
    if flags.mean:
        lines.append(f"Mean: {summary.mean:.2f}")
    if flags.median:
        lines.append(f"Median: {summary.median:.2f}")
    if flags.mode:
        lines.append(f"Mode: {summary.mode:d}")
    if flags.sd:
        lines.append(f"SD: {summary.sd:.2f}")
    return lines


def run_stats(lines: Iterable[str], flags: StatsFlags) -> List[str]:
    """
    Read numbers from `lines` and return the output lines for `flags`.

    Empty input is only an error when at least one statistic is requested.
    """
    numbers = read_numbers(lines)
    if not flags.any():
        return []
    return format_summary(summarise(numbers), flags)
