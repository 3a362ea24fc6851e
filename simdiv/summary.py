"""Proportions and weights of a metacommunity."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .io import AbundanceTable, as_abundance_table


@dataclass(frozen=True)
class CommunitySummary:
    """Proportions of each type and the weight of each subcommunity."""

    proportions: np.ndarray  # shape (n_types, n_subcommunities)
    totals: np.ndarray       # shape (n_types,), type abundance over the metacommunity
    weights: np.ndarray      # shape (n_subcommunities,), share of total effort
    num: int                 # number of subcommunities


def summarise(populations: AbundanceTable | np.ndarray, normalise: bool = True) -> CommunitySummary:
    """Convert abundances into proportions and subcommunity weights.

    With ``normalise`` the matrix is divided by its grand total, the column
    sums of that become the subcommunity weights (summing to 1), and each
    column is then rescaled to sum to 1. An all-zero column gives NaN
    proportions, marking an empty subcommunity.

    Without ``normalise`` the abundances are used as given and the weights
    are the raw column sums.
    """
    table = as_abundance_table(populations)
    abundances = table.abundances
    totals = abundances.sum(axis=1)

    if normalise:
        total = totals.sum()
        with np.errstate(divide="ignore", invalid="ignore"):
            totals = totals / total
            proportions = abundances / total
            weights = proportions.sum(axis=0)
            proportions = proportions / weights[np.newaxis, :]
    else:
        proportions = abundances
        weights = abundances.sum(axis=0)

    return CommunitySummary(
        proportions=proportions,
        totals=totals,
        weights=weights,
        num=weights.shape[0],
    )
