"""Data loading and validation for metacommunity diversity.

Every public measure accepts its abundance input through
:func:`as_abundance_table`, which turns vectors, matrices and tables into the
one canonical type-by-subcommunity matrix used internally.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import numpy as np

from .errors import AmbiguousInputError, DomainError, InputShapeError
from .similarity import naive_similarity

logger = logging.getLogger(__name__)

# Column sums within this distance of 1 count as proportions.
PROPORTION_TOLERANCE = 1.5e-8


@dataclass
class AbundanceTable:
    """Type-by-subcommunity abundance matrix."""

    type_ids: list[str]
    subcommunity_ids: list[str]
    abundances: np.ndarray  # shape (n_types, n_subcommunities)

    def __post_init__(self) -> None:
        if self.abundances.ndim != 2:
            raise InputShapeError(
                f"Abundances must be 2-dimensional, got {self.abundances.ndim} dimensions"
            )
        n_types, n_subcommunities = self.abundances.shape
        if n_types != len(self.type_ids):
            raise InputShapeError(
                f"Row count {n_types} != len(type_ids) {len(self.type_ids)}"
            )
        if n_subcommunities != len(self.subcommunity_ids):
            raise InputShapeError(
                f"Col count {n_subcommunities} != len(subcommunity_ids) "
                f"{len(self.subcommunity_ids)}"
            )

    @property
    def n_types(self) -> int:
        return len(self.type_ids)

    @property
    def n_subcommunities(self) -> int:
        return len(self.subcommunity_ids)


def check_proportions(abundances: np.ndarray) -> None:
    """Reject matrices that mix counts and proportions.

    Any entry strictly between 0 and 1 means the input is read as
    proportions, in which case every column must sum to 1.
    """
    if np.any((abundances > 0) & (abundances < 1)):
        col_sums = abundances.sum(axis=0)
        if not np.allclose(col_sums, 1.0, rtol=0.0, atol=PROPORTION_TOLERANCE):
            raise AmbiguousInputError(
                "Abundances must be entered either as counts or as proportions "
                f"with every column summing to 1; column sums are {col_sums.tolist()}"
            )


def as_abundance_table(
    populations: AbundanceTable | np.ndarray | Sequence[float] | Sequence[Sequence[float]],
    type_ids: Sequence[str] | None = None,
    subcommunity_ids: Sequence[str] | None = None,
) -> AbundanceTable:
    """Convert abundance input into a validated :class:`AbundanceTable`.

    A 1-D input is a single subcommunity. Missing labels are synthesised as
    ``t1..tS`` for types and ``sc1..scN`` for subcommunities.

    Raises
    ------
    InputShapeError
        If the input is not 1- or 2-dimensional or labels do not fit.
    DomainError
        If any abundance is negative.
    AmbiguousInputError
        If the input mixes counts and proportions.
    """
    if isinstance(populations, AbundanceTable):
        table = populations
    else:
        abundances = np.asarray(populations, dtype=np.float64)
        if abundances.ndim == 1:
            abundances = abundances.reshape(-1, 1)
        if abundances.ndim != 2:
            raise InputShapeError(
                f"Abundances must be a vector or matrix, got {abundances.ndim} dimensions"
            )
        n_types, n_subcommunities = abundances.shape
        if type_ids is None:
            type_ids = [f"t{i + 1}" for i in range(n_types)]
        if subcommunity_ids is None:
            subcommunity_ids = [f"sc{j + 1}" for j in range(n_subcommunities)]
        table = AbundanceTable(
            type_ids=list(type_ids),
            subcommunity_ids=list(subcommunity_ids),
            abundances=abundances,
        )

    if np.any(table.abundances < 0):
        raise DomainError(
            f"Abundances must be non-negative, got min {table.abundances.min()}"
        )
    check_proportions(table.abundances)
    return table


def as_similarity_matrix(Z: np.ndarray | None, n_types: int) -> np.ndarray:
    """Return ``Z`` as an (n_types, n_types) float matrix, identity if None."""
    if Z is None:
        return naive_similarity(n_types)
    Z = np.asarray(Z, dtype=np.float64)
    if Z.shape != (n_types, n_types):
        raise InputShapeError(
            f"Similarity matrix shape {Z.shape} != ({n_types}, {n_types})"
        )
    if np.any((Z < 0) | (Z > 1)):
        logger.warning(
            "Similarity matrix has entries outside [0, 1] (min %.4g, max %.4g)",
            Z.min(), Z.max(),
        )
    return Z


def _read_labelled_tsv(path: Path, what: str) -> tuple[list[str], list[str], np.ndarray]:
    """Read a TSV whose header and first column hold IDs.

    Returns the column IDs, the row IDs and the numeric body. Every failure
    to parse the file is reported as :class:`InputShapeError`.
    """
    with open(path, newline="") as f:
        reader = csv.reader(f, delimiter="\t")
        header = next(reader, None)
        if header is None:
            raise InputShapeError(f"{what} file {path} is empty")
        column_ids = [h.strip() for h in header[1:]]
        row_ids: list[str] = []
        rows: list[list[float]] = []
        for lineno, row in enumerate(reader, start=2):
            if not row or not row[0].strip():
                continue
            if len(row) != len(header):
                raise InputShapeError(
                    f"{what} file {path} line {lineno} has {len(row)} fields, "
                    f"expected {len(header)}"
                )
            try:
                rows.append([float(x) for x in row[1:]])
            except ValueError as e:
                raise InputShapeError(
                    f"{what} file {path} line {lineno} has a non-numeric value"
                ) from e
            row_ids.append(row[0].strip())
    body = np.array(rows, dtype=np.float64).reshape(len(rows), len(column_ids))
    return column_ids, row_ids, body


def _reorder_rows(ids: list[str], type_ids: Sequence[str], what: str) -> list[int]:
    idx_map = {t: i for i, t in enumerate(ids)}
    missing = [t for t in type_ids if t not in idx_map]
    if missing:
        raise InputShapeError(f"{what} has no entries for types {missing}")
    return [idx_map[t] for t in type_ids]


def load_abundance_table(path: str | Path) -> AbundanceTable:
    """Load a tab-separated abundance table.

    First column = type ID, remaining columns = subcommunity abundances.
    """
    path = Path(path)
    subcommunity_ids, type_ids, abundances = _read_labelled_tsv(path, "Abundance table")
    logger.debug("Loaded %d types x %d subcommunities from %s", len(type_ids), len(subcommunity_ids), path)
    return AbundanceTable(
        type_ids=type_ids, subcommunity_ids=subcommunity_ids, abundances=abundances
    )


def _load_square_matrix(
    path: str | Path, type_ids: Sequence[str] | None, what: str
) -> np.ndarray:
    path = Path(path)
    header, row_ids, M = _read_labelled_tsv(path, what)
    if M.shape[0] != M.shape[1] or row_ids != header:
        raise InputShapeError(
            f"{what} in {path} must be square with matching row and column IDs"
        )
    if type_ids is None:
        return M
    indices = _reorder_rows(row_ids, type_ids, what)
    return M[np.ix_(indices, indices)]


def load_similarity_matrix(
    path: str | Path, type_ids: Sequence[str] | None = None
) -> np.ndarray:
    """Load a square tab-separated similarity matrix.

    The header row and first column hold type IDs. When ``type_ids`` is
    given, rows and columns are reordered to match it.
    """
    return _load_square_matrix(path, type_ids, "Similarity matrix")


def load_distance_matrix(
    path: str | Path, type_ids: Sequence[str] | None = None
) -> np.ndarray:
    """Load a square tab-separated distance matrix, laid out like a similarity matrix."""
    return _load_square_matrix(path, type_ids, "Distance matrix")


def load_feature_table(
    path: str | Path, type_ids: Sequence[str] | None = None
) -> np.ndarray:
    """Load a type-by-feature TSV, one row per type.

    When ``type_ids`` is given, rows are reordered to match it.
    """
    path = Path(path)
    _, row_ids, features = _read_labelled_tsv(path, "Feature table")
    logger.debug("Loaded %d features for %d types from %s", features.shape[1], len(row_ids), path)
    if type_ids is None:
        return features
    return features[_reorder_rows(row_ids, type_ids, "Feature table")]
