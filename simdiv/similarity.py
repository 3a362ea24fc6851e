"""Similarity matrices and ordinariness."""

from __future__ import annotations

import numpy as np
from scipy.spatial.distance import pdist, squareform

from .errors import DomainError, InputShapeError


def naive_similarity(n_types: int) -> np.ndarray:
    """Identity similarity: every type is distinct from every other."""
    return np.eye(n_types)


def ordinariness(Z: np.ndarray, X: np.ndarray) -> np.ndarray:
    """Similarity-weighted abundance ``Z @ X`` with zeros marked undefined.

    A type with nothing similar to it present has no defined contribution
    to diversity, so exact zeros are replaced by NaN and left to propagate
    through the power mean.
    """
    Z = np.asarray(Z, dtype=np.float64)
    X = np.asarray(X, dtype=np.float64)
    if Z.ndim != 2 or Z.shape[1] != X.shape[0]:
        raise InputShapeError(
            f"Cannot multiply similarity matrix {Z.shape} by abundances {X.shape}"
        )
    zp = Z @ X
    zp[zp == 0] = np.nan
    return zp


def similarity_from_distances(distances: np.ndarray, k: float = 1.0) -> np.ndarray:
    """Convert a square distance matrix into similarities ``exp(-k * d)``."""
    distances = np.asarray(distances, dtype=np.float64)
    if distances.ndim != 2 or distances.shape[0] != distances.shape[1]:
        raise InputShapeError(f"Distance matrix must be square, got {distances.shape}")
    if np.any(distances < 0):
        raise DomainError("Distances must be non-negative")
    if k < 0:
        raise DomainError(f"k must be >= 0, got {k}")
    return np.exp(-k * distances)


def similarity_from_features(
    features: np.ndarray, metric: str = "euclidean", k: float = 1.0
) -> np.ndarray:
    """Similarity between types described by feature vectors.

    ``features`` has one row per type; pairwise distances use
    :func:`scipy.spatial.distance.pdist` with the given metric.
    """
    features = np.asarray(features, dtype=np.float64)
    if features.ndim != 2:
        raise InputShapeError(f"Features must be 2-dimensional, got {features.shape}")
    if features.shape[0] < 2:
        return np.ones((features.shape[0], features.shape[0]))
    try:
        dm = squareform(pdist(features, metric=metric))
    except ValueError as e:
        raise DomainError(f"Cannot compute {metric!r} distances: {e}") from e
    return similarity_from_distances(dm, k=k)
