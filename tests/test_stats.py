# tests/test_stats.py
"""
Tests for the statistics engine.

Numbers are fed as lists of lines, the same shape sys.stdin iterates in.
"""
from __future__ import annotations

import math

import numpy as np
import pytest

from daytools.errors import EmptyInputError, ParseError
from daytools.stats import (
    StatsFlags,
    Summary,
    format_summary,
    mean,
    median,
    mode,
    parse_number,
    read_numbers,
    run_stats,
    standard_deviation,
    summarise,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def as_lines(*tokens: str) -> list[str]:
    return [f"{t}\n" for t in tokens]


ALL = StatsFlags(mean=True, median=True, mode=True, sd=True)


# ---------------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("token, expected", [("5", 5), ("-12", -12), ("+7", 7), ("007", 7)])
def test_parse_number_accepts_signed_integers(token, expected):
    assert parse_number(token) == expected


@pytest.mark.parametrize("token", ["abc", "", " 5", "5 ", "1.5", "1_000", "--1", "9223372036854775808"])
def test_parse_number_rejects_bad_tokens(token):
    with pytest.raises(ParseError):
        parse_number(token)


def test_parse_number_int64_bounds():
    assert parse_number("9223372036854775807") == 2**63 - 1
    assert parse_number("-9223372036854775808") == -(2**63)


def test_read_numbers_stops_at_sentinel_and_sorts():
    numbers = read_numbers(as_lines("5", "3", "9", "stop", "not-a-number"))
    assert numbers.tolist() == [3, 5, 9]
    assert numbers.dtype == np.int64
    assert not numbers.flags.writeable


def test_read_numbers_eof_is_implicit_stop():
    assert read_numbers(["4\n", "2"]).tolist() == [2, 4]


def test_read_numbers_handles_crlf():
    assert read_numbers(["1\r\n", "2\r\n", "stop\r\n"]).tolist() == [1, 2]


def test_read_numbers_sentinel_is_case_sensitive():
    with pytest.raises(ParseError):
        read_numbers(as_lines("1", "STOP"))


def test_read_numbers_fails_on_first_bad_token():
    with pytest.raises(ParseError, match="abc"):
        read_numbers(as_lines("5", "abc", "stop"))


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------


def test_mean_matches_sum_over_len():
    seq = [4, -2, 17, 8, 8]
    assert mean(np.array(seq)) == sum(seq) / len(seq)


def test_median_odd_and_even_counts():
    assert median(np.array([3, 1, 2])) == 2.0
    assert median(np.array([1, 2, 3])) == 2.0
    assert median(np.array([5, 3])) == 4.0
    assert median(np.array([1, 2, 3, 10])) == 2.5


def test_mode_breaks_ties_with_smallest_value():
    assert mode(np.array([1, 1, 2, 2])) == 1
    assert mode(np.array([9, 9, -3, -3, 4])) == -3
    assert mode(np.array([7, 2, 7])) == 7


def test_standard_deviation_is_population_formula():
    numbers = np.array([2, 4, 4, 4, 5, 5, 7, 9])
    assert mean(numbers) == 5.0
    assert standard_deviation(numbers, 5.0) == 2.0
    assert standard_deviation(numbers) == 2.0


def test_single_value():
    summary = summarise(np.array([42]))
    assert summary == Summary(mean=42.0, median=42.0, mode=42, sd=0.0)


def test_large_values_do_not_overflow():
    big = 2**62
    numbers = np.array([big, big], dtype=np.int64)
    assert math.isclose(mean(numbers), float(big))
    assert math.isclose(median(numbers), float(big))


@pytest.mark.parametrize("fn", [mean, median, mode, standard_deviation])
def test_empty_input_raises(fn):
    with pytest.raises(EmptyInputError):
        fn(np.array([], dtype=np.int64))


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def test_format_summary_fixed_order_and_formats():
    summary = Summary(mean=4.0, median=4.0, mode=3, sd=1.0)
    assert format_summary(summary, ALL) == [
        "Mean: 4.00",
        "Median: 4.00",
        "Mode: 3",
        "SD: 1.00",
    ]


def test_format_summary_subset():
    summary = Summary(mean=1.234, median=2.0, mode=-1, sd=0.556)
    flags = StatsFlags(mode=True, sd=True)
    assert format_summary(summary, flags) == ["Mode: -1", "SD: 0.56"]


def test_run_stats_mean_and_median():
    lines = run_stats(as_lines("5", "3", "stop"), StatsFlags(mean=True, median=True))
    assert lines == ["Mean: 4.00", "Median: 4.00"]


def test_run_stats_no_flags_prints_nothing_even_for_empty_input():
    assert run_stats(as_lines("stop"), StatsFlags()) == []
    assert run_stats([], StatsFlags()) == []


def test_run_stats_empty_input_with_flags_is_an_error():
    with pytest.raises(EmptyInputError):
        run_stats(as_lines("stop"), StatsFlags(mean=True))
