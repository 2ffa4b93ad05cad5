"""Exception hierarchy for the CAPM analysis pipeline.

Every failure aborts the run: there are no retries and no partial results.
Each exception carries an optional ``context`` mapping with the identifiers
involved (symbol, date range, sample size) so the top-level caller can report
the cause precisely.
"""

from __future__ import annotations

from typing import Any, Mapping

__all__ = [
    "CapmError",
    "DataUnavailableError",
    "InsufficientDataError",
    "InvalidParameterError",
]


class CapmError(Exception):
    """Base class for analysis errors surfaced to the caller."""

    def __init__(self, message: str, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = dict(context or {})


class DataUnavailableError(CapmError):
    """A provider returned no data for the requested identifier or range."""


class InsufficientDataError(CapmError):
    """Too few valid observations, or a regressor without variance."""


class InvalidParameterError(CapmError, ValueError):
    """Malformed scenario inputs or a non-chronological date range."""
