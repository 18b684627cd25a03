# daytools/errors.py
"""Error taxonomy shared by both command-line tools."""

from __future__ import annotations


class DayToolsError(Exception):
    """Base class for every error the CLIs report and exit on."""


class UsageError(DayToolsError):
    """Wrong argument count or unknown flag."""


class UnsupportedFormatError(DayToolsError):
    """File extension does not map to a known database format."""

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(f"Unsupported file format: {filename}")


class DatabaseIOError(DayToolsError):
    """Database file could not be opened or read."""


class ParseError(DayToolsError):
    """Malformed integer token or malformed database content."""


class SerializationError(DayToolsError):
    """Output representation could not be produced."""


class EmptyInputError(DayToolsError):
    """Statistics requested over an empty sequence."""


class OutputError(DayToolsError):
    """Result could not be written to stdout."""
