"""Exceptions raised by simdiv."""

from __future__ import annotations


class SimdivError(Exception):
    """Base class for simdiv errors."""


class InputShapeError(SimdivError, ValueError):
    """Array lengths or shapes that should agree do not."""


class DomainError(SimdivError, ValueError):
    """A value lies outside the domain of the calculation (e.g. negative)."""


class AmbiguousInputError(SimdivError, ValueError):
    """Abundances cannot be read unambiguously as counts or as proportions."""
