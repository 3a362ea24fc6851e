"""Subcommunity alpha, beta, gamma and rho diversities.

Each measure returns one row per subcommunity and one column per order q.
The raw measures take a ``normalise`` flag; the ``_bar`` (normalised)
variants are the raw measures with ``normalise=True``, i.e. with
proportions taken relative to the whole metacommunity.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from .diversity import DiversityResult, diversity_single, q_label
from .io import AbundanceTable, as_abundance_table, as_similarity_matrix
from .power_mean import power_mean
from .similarity import ordinariness
from .summary import CommunitySummary, summarise

logger = logging.getLogger(__name__)


def _prepare(
    populations: AbundanceTable | np.ndarray,
    qs: Sequence[float],
    Z: np.ndarray | None,
    normalise: bool,
) -> tuple[AbundanceTable, np.ndarray, np.ndarray, CommunitySummary]:
    table = as_abundance_table(populations)
    Z = as_similarity_matrix(Z, table.n_types)
    qs = np.atleast_1d(np.asarray(qs, dtype=np.float64))
    data = summarise(table, normalise)
    logger.debug(
        "%d types x %d subcommunities, qs=%s, normalise=%s",
        table.n_types, table.n_subcommunities, qs.tolist(), normalise,
    )
    return table, Z, qs, data


def _tag(name: str, normalise: bool) -> str:
    return f"{name}.bar" if normalise else name


def _result(
    table: AbundanceTable, qs: np.ndarray, values: np.ndarray, measure: str
) -> DiversityResult:
    return DiversityResult(
        row_ids=list(table.subcommunity_ids),
        q_labels=[q_label(q) for q in qs],
        values=values,
        measure=measure,
    )


def subcommunity_alpha(
    populations: AbundanceTable | np.ndarray,
    qs: Sequence[float],
    Z: np.ndarray | None = None,
    normalise: bool = False,
) -> DiversityResult:
    """Diversity of each subcommunity as if it were in isolation.

    Ordinariness is ``Z @ P`` over the subcommunity's own proportions.
    """
    table, Z, qs, data = _prepare(populations, qs, Z, normalise)
    zp = ordinariness(Z, data.proportions)

    values = np.empty((data.num, len(qs)))
    for j in range(data.num):
        for k, q in enumerate(qs):
            values[j, k] = diversity_single(data.proportions[:, j], q, zp=zp[:, j])
    return _result(table, qs, values, _tag("subcommunity.alpha", normalise))


def subcommunity_alpha_bar(
    populations: AbundanceTable | np.ndarray,
    qs: Sequence[float],
    Z: np.ndarray | None = None,
) -> DiversityResult:
    """Normalised subcommunity alpha diversity."""
    return subcommunity_alpha(populations, qs, Z, normalise=True)


def subcommunity_gamma(
    populations: AbundanceTable | np.ndarray,
    qs: Sequence[float],
    Z: np.ndarray | None = None,
    normalise: bool = False,
) -> DiversityResult:
    """Contribution of each subcommunity to metacommunity diversity.

    Ordinariness is computed once from the metacommunity totals and shared
    by every subcommunity; only the weighting proportions differ.
    """
    table, Z, qs, data = _prepare(populations, qs, Z, normalise)
    zp = ordinariness(Z, data.totals)

    values = np.empty((data.num, len(qs)))
    for j in range(data.num):
        for k, q in enumerate(qs):
            values[j, k] = diversity_single(data.proportions[:, j], q, zp=zp)
    return _result(table, qs, values, _tag("subcommunity.gamma", normalise))


def subcommunity_gamma_bar(
    populations: AbundanceTable | np.ndarray,
    qs: Sequence[float],
    Z: np.ndarray | None = None,
) -> DiversityResult:
    """Normalised subcommunity gamma diversity."""
    return subcommunity_gamma(populations, qs, Z, normalise=True)


def subcommunity_beta(
    populations: AbundanceTable | np.ndarray,
    qs: Sequence[float],
    Z: np.ndarray | None = None,
    normalise: bool = False,
) -> DiversityResult:
    """Distinctiveness of each subcommunity from the metacommunity.

    The power mean of order q-1 of ``Zb = (Z @ P) / (Z @ totals)``,
    weighted by the subcommunity proportions.
    """
    table, Z, qs, data = _prepare(populations, qs, Z, normalise)
    zp_j = Z @ data.proportions
    zp = np.broadcast_to((Z @ data.totals)[:, np.newaxis], zp_j.shape)
    with np.errstate(divide="ignore", invalid="ignore"):
        zb = zp_j / zp
    zb[zb == 0] = np.nan

    values = np.empty((data.num, len(qs)))
    for j in range(data.num):
        for k, q in enumerate(qs):
            values[j, k] = power_mean(zb[:, j], q - 1, data.proportions[:, j])
    return _result(table, qs, values, _tag("subcommunity.beta", normalise))


def subcommunity_beta_bar(
    populations: AbundanceTable | np.ndarray,
    qs: Sequence[float],
    Z: np.ndarray | None = None,
) -> DiversityResult:
    """Normalised subcommunity beta diversity."""
    return subcommunity_beta(populations, qs, Z, normalise=True)


def subcommunity_rho(
    populations: AbundanceTable | np.ndarray,
    qs: Sequence[float],
    Z: np.ndarray | None = None,
    normalise: bool = False,
) -> DiversityResult:
    """Redundancy of each subcommunity: the reciprocal of beta."""
    beta = subcommunity_beta(populations, qs, Z, normalise)
    with np.errstate(divide="ignore"):
        values = 1.0 / beta.values
    return DiversityResult(
        row_ids=list(beta.row_ids),
        q_labels=list(beta.q_labels),
        values=values,
        measure=_tag("subcommunity.rho", normalise),
    )


def subcommunity_rho_bar(
    populations: AbundanceTable | np.ndarray,
    qs: Sequence[float],
    Z: np.ndarray | None = None,
) -> DiversityResult:
    """Normalised subcommunity rho diversity."""
    return subcommunity_rho(populations, qs, Z, normalise=True)


def similarity_sensitive_diversity(
    populations: AbundanceTable | np.ndarray,
    qs: Sequence[float],
    Z: np.ndarray | None = None,
) -> DiversityResult:
    """Similarity-sensitive diversity of independent populations.

    Each column is an independent population; with the default naive
    similarity this gives the Hill numbers of each column.
    """
    return subcommunity_alpha_bar(populations, qs, Z)
