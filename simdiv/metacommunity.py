"""Metacommunity A, B, G and R diversities.

Each metacommunity measure is the power mean of order 1-q of the matching
subcommunity measure, weighted by subcommunity size. Together with the
order q-1 used within subcommunities this makes both scopes generalised
means of the same underlying quantity.
"""

from __future__ import annotations

import logging
from typing import Callable, Sequence

import numpy as np

from .diversity import DiversityResult
from .errors import InputShapeError
from .io import AbundanceTable, as_abundance_table
from .power_mean import power_mean
from .subcommunity import (
    subcommunity_alpha,
    subcommunity_beta,
    subcommunity_gamma,
    subcommunity_rho,
)
from .summary import summarise

logger = logging.getLogger(__name__)

METACOMMUNITY_ROW = "metacommunity"


def aggregate(
    diversities: DiversityResult, weights: np.ndarray, measure: str = ""
) -> DiversityResult:
    """Reduce subcommunity diversities to a single metacommunity row.

    Parameters
    ----------
    diversities : DiversityResult
        Subcommunity-by-q diversities.
    weights : np.ndarray
        Weight of each subcommunity, shape (n_subcommunities,).
    measure : str
        Tag recorded on the result.

    Returns
    -------
    DiversityResult
        Shape (1, n_qs), row labelled ``"metacommunity"``.
    """
    weights = np.asarray(weights, dtype=np.float64).ravel()
    if weights.shape[0] != len(diversities.row_ids):
        raise InputShapeError(
            f"Got {weights.shape[0]} weights for {len(diversities.row_ids)} subcommunities"
        )
    qs = diversities.qs
    values = np.empty((1, len(qs)))
    for k, q in enumerate(qs):
        values[0, k] = power_mean(diversities.values[:, k], 1 - q, weights)
    return DiversityResult(
        row_ids=[METACOMMUNITY_ROW],
        q_labels=list(diversities.q_labels),
        values=values,
        measure=measure,
    )


def _metacommunity(
    subcommunity_measure: Callable[..., DiversityResult],
    name: str,
    populations: AbundanceTable | np.ndarray,
    qs: Sequence[float],
    Z: np.ndarray | None,
    normalise: bool,
) -> DiversityResult:
    table = as_abundance_table(populations)
    data = summarise(table, normalise)
    ds = subcommunity_measure(table, qs, Z, normalise)
    measure = f"{name}.bar" if normalise else name
    logger.debug("Aggregating %s over %d subcommunities", measure, data.num)
    return aggregate(ds, data.weights, measure)


def metacommunity_A(
    populations: AbundanceTable | np.ndarray,
    qs: Sequence[float],
    Z: np.ndarray | None = None,
    normalise: bool = False,
) -> DiversityResult:
    """Metacommunity alpha: average diversity of the subcommunities."""
    return _metacommunity(subcommunity_alpha, "metacommunity.A", populations, qs, Z, normalise)


def metacommunity_A_bar(
    populations: AbundanceTable | np.ndarray,
    qs: Sequence[float],
    Z: np.ndarray | None = None,
) -> DiversityResult:
    """Normalised metacommunity alpha diversity."""
    return metacommunity_A(populations, qs, Z, normalise=True)


def metacommunity_B(
    populations: AbundanceTable | np.ndarray,
    qs: Sequence[float],
    Z: np.ndarray | None = None,
    normalise: bool = False,
) -> DiversityResult:
    """Metacommunity beta: average distinctiveness of the subcommunities."""
    return _metacommunity(subcommunity_beta, "metacommunity.B", populations, qs, Z, normalise)


def metacommunity_B_bar(
    populations: AbundanceTable | np.ndarray,
    qs: Sequence[float],
    Z: np.ndarray | None = None,
) -> DiversityResult:
    """Normalised metacommunity beta diversity."""
    return metacommunity_B(populations, qs, Z, normalise=True)


def metacommunity_G(
    populations: AbundanceTable | np.ndarray,
    qs: Sequence[float],
    Z: np.ndarray | None = None,
    normalise: bool = False,
) -> DiversityResult:
    """Metacommunity gamma: diversity of the pooled metacommunity."""
    return _metacommunity(subcommunity_gamma, "metacommunity.G", populations, qs, Z, normalise)


def metacommunity_G_bar(
    populations: AbundanceTable | np.ndarray,
    qs: Sequence[float],
    Z: np.ndarray | None = None,
) -> DiversityResult:
    """Normalised metacommunity gamma diversity."""
    return metacommunity_G(populations, qs, Z, normalise=True)


def metacommunity_R(
    populations: AbundanceTable | np.ndarray,
    qs: Sequence[float],
    Z: np.ndarray | None = None,
    normalise: bool = False,
) -> DiversityResult:
    """Metacommunity rho: average redundancy of the subcommunities."""
    return _metacommunity(subcommunity_rho, "metacommunity.R", populations, qs, Z, normalise)


def metacommunity_R_bar(
    populations: AbundanceTable | np.ndarray,
    qs: Sequence[float],
    Z: np.ndarray | None = None,
) -> DiversityResult:
    """Normalised metacommunity rho diversity."""
    return metacommunity_R(populations, qs, Z, normalise=True)
