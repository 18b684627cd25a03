# daytools/cli.py
"""
Command-line entry points.

    daytools-stats  [-mean] [-median] [-mode] [-sd]  < numbers.txt
    daytools-readdb -f <database.xml|database.json>

Each entry point parses argv into a small config dataclass, runs the pure
functions from stats / recipes, and writes the result. Errors from the
DayToolsError family are logged to stderr and turned into exit status 1.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import List, Optional, Sequence, TextIO

from .errors import DayToolsError, OutputError, UsageError
from .recipes import RecipeFormat, convert
from .stats import StatsFlags, run_stats

logger = logging.getLogger(__name__)

READDB_USAGE = "Usage: readdb -f <filename>"


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting with 2."""

    def error(self, message: str):  # type: ignore[override]
        raise UsageError(f"{self.prog}: {message}")


def _setup_logging() -> None:
    logging.basicConfig(stream=sys.stderr, level=logging.WARNING, format="%(message)s")


def _write_output(stdout: TextIO, text: str) -> None:
    try:
        stdout.write(text)
        stdout.flush()
    except (OSError, UnicodeEncodeError) as exc:
        raise OutputError(f"Error writing output: {exc}") from exc


# --------------------------------------------------------------------
# stats
# --------------------------------------------------------------------


def parse_stats_args(argv: Optional[Sequence[str]] = None) -> StatsFlags:
    parser = _ArgumentParser(
        prog="stats",
        description="Read integers from stdin until 'stop' and print statistics.",
        allow_abbrev=False,
    )
    parser.add_argument("-mean", action="store_true", help="print mean")
    parser.add_argument("-median", action="store_true", help="print median")
    parser.add_argument("-mode", action="store_true", help="print mode")
    parser.add_argument("-sd", action="store_true", help="print standard deviation")
    args = parser.parse_args(argv)
    return StatsFlags(mean=args.mean, median=args.median, mode=args.mode, sd=args.sd)


def stats_main(
    argv: Optional[Sequence[str]] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    _setup_logging()
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    try:
        flags = parse_stats_args(argv)
        lines = run_stats(stdin, flags)
        _write_output(stdout, "".join(line + "\n" for line in lines))
    except DayToolsError as exc:
        logger.error("%s", exc)
        return 1

    return 0


# --------------------------------------------------------------------
# readdb
# --------------------------------------------------------------------


@dataclass(frozen=True)
class ConvertArgs:
    filename: str
    format: RecipeFormat


def parse_readdb_args(argv: Optional[Sequence[str]] = None) -> ConvertArgs:
    """
    Expect exactly two arguments, `-f <filename>`. The first slot is not
    checked. The format comes from the extension, so an unsupported file
    is rejected before it is opened.
    """
    args: List[str] = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 2:
        raise UsageError(READDB_USAGE)

    filename = args[1]
    return ConvertArgs(filename=filename, format=RecipeFormat.from_filename(filename))


def readdb_main(
    argv: Optional[Sequence[str]] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    _setup_logging()
    stdout = stdout if stdout is not None else sys.stdout

    try:
        config = parse_readdb_args(argv)
        output = convert(config.filename, config.format)
        _write_output(stdout, output.decode("utf-8") + "\n")
    except DayToolsError as exc:
        logger.error("%s", exc)
        return 1

    return 0

