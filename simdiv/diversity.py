"""Similarity-sensitive diversity of single populations, and Hill numbers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .errors import InputShapeError
from .io import AbundanceTable, as_abundance_table
from .power_mean import power_mean
from .similarity import naive_similarity, ordinariness


def q_label(q: float) -> str:
    """Column label for order ``q``: ``q0``, ``q0.5``, ``q1``, ``qInf``..."""
    q = float(q)
    if np.isposinf(q):
        return "qInf"
    if np.isneginf(q):
        return "q-Inf"
    return "q" + format(q + 0.0, ".15g")


def parse_q_label(label: str) -> float:
    """Inverse of :func:`q_label`."""
    if not label.startswith("q"):
        raise ValueError(f"Column label {label!r} does not encode a q value")
    try:
        return float(label[1:])
    except ValueError:
        raise ValueError(f"Column label {label!r} does not encode a q value") from None


@dataclass(frozen=True)
class DiversityResult:
    """Diversities labelled by row (subcommunity) and column (order q).

    ``values`` is read-only; every measure builds a fresh result.
    """

    row_ids: list[str]
    q_labels: list[str]
    values: np.ndarray  # shape (n_rows, n_qs)
    measure: str = ""

    def __post_init__(self) -> None:
        values = np.array(self.values, dtype=np.float64)
        if values.shape != (len(self.row_ids), len(self.q_labels)):
            raise InputShapeError(
                f"Values shape {values.shape} != "
                f"({len(self.row_ids)}, {len(self.q_labels)})"
            )
        values.setflags(write=False)
        object.__setattr__(self, "values", values)

    @property
    def qs(self) -> np.ndarray:
        return np.array([parse_q_label(label) for label in self.q_labels])

    def column(self, q: float | str) -> np.ndarray:
        """Values for one order, given as a number or a ``q<value>`` label."""
        label = q if isinstance(q, str) else q_label(q)
        return self.values[:, self.q_labels.index(label)]

    def row(self, row_id: str) -> np.ndarray:
        return self.values[self.row_ids.index(row_id)]


def diversity_single(
    proportions: np.ndarray,
    q: float,
    Z: np.ndarray | None = None,
    zp: np.ndarray | None = None,
) -> float:
    """Similarity-sensitive diversity of order q of one population.

    D = 1 / M_{q-1}(Zp; p), the inverse power mean of the ordinariness
    ``Zp`` weighted by the proportions ``p``. With the naive similarity
    matrix this is the Hill number of order q.
    """
    proportions = np.asarray(proportions, dtype=np.float64)
    if zp is None:
        if Z is None:
            Z = naive_similarity(proportions.shape[0])
        zp = ordinariness(Z, proportions)
    with np.errstate(divide="ignore"):
        return float(np.float64(1.0) / power_mean(zp, q - 1, proportions))


def hill_number_single(proportions: np.ndarray, q: float) -> float:
    """Naive (similarity-blind) Hill number of order q."""
    proportions = np.asarray(proportions, dtype=np.float64)
    with np.errstate(divide="ignore"):
        return float(np.float64(1.0) / power_mean(proportions, q - 1, proportions))


def hill_numbers(
    populations: AbundanceTable | np.ndarray,
    qs: Sequence[float],
) -> DiversityResult:
    """Naive Hill numbers of each subcommunity for each order in ``qs``.

    Each column is turned into proportions of its own total; an empty
    column gives NaN.
    """
    table = as_abundance_table(populations)
    qs = np.atleast_1d(np.asarray(qs, dtype=np.float64))
    with np.errstate(divide="ignore", invalid="ignore"):
        props = table.abundances / table.abundances.sum(axis=0)[np.newaxis, :]

    values = np.empty((table.n_subcommunities, len(qs)))
    for j in range(table.n_subcommunities):
        for k, q in enumerate(qs):
            values[j, k] = hill_number_single(props[:, j], q)

    return DiversityResult(
        row_ids=list(table.subcommunity_ids),
        q_labels=[q_label(q) for q in qs],
        values=values,
        measure="hill",
    )
