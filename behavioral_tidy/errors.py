"""Exceptions raised by the tidying transforms."""

from __future__ import annotations


class TidyDataError(ValueError):
    """Base class for malformed input detected by a tidying step."""


class DimensionMismatch(TidyDataError):
    """Label sequences do not match the extents of the threshold array."""


class MissingKeyField(TidyDataError):
    """A record lacks one of the columns needed to group or order it."""


class UnorderedTrials(TidyDataError):
    """Trial order within a (person, condition) partition is ambiguous."""
