"""Weighted power (generalised) mean."""

from __future__ import annotations

import numpy as np

from .errors import DomainError, InputShapeError

# Orders closer to zero than this use the geometric mean.
ORDER_TOLERANCE = 1.5e-8


def power_mean(
    values: np.ndarray,
    order: float = 1.0,
    weights: np.ndarray | None = None,
) -> float:
    """Weighted power mean of ``values`` of the given order.

    Weights are normalised to sum to 1 before use, so only their relative
    sizes matter. Elements with zero weight are ignored entirely, even if
    their value is NaN. If every normalised weight is NaN (e.g. all weights
    are zero) the group is empty and the result is NaN.

    Parameters
    ----------
    values : np.ndarray
        Non-negative values (NaN allowed).
    order : float
        Order of the mean: 1 is arithmetic, 0 geometric, -1 harmonic,
        ``inf`` the maximum and ``-inf`` the minimum.
    weights : np.ndarray, optional
        Weight of each element; uniform when omitted.

    Returns
    -------
    float
        The power mean, or NaN for an empty group.
    """
    values = np.asarray(values, dtype=np.float64).ravel()
    if weights is None:
        weights = np.ones(values.shape[0])
    weights = np.asarray(weights, dtype=np.float64).ravel()

    if values.shape[0] != weights.shape[0]:
        raise InputShapeError(
            f"Number of values ({values.shape[0]}) does not equal "
            f"number of weights ({weights.shape[0]})"
        )
    present = values[~np.isnan(values)]
    if np.any(present < 0):
        raise DomainError(f"Values must be non-negative, got min {present.min()}")

    with np.errstate(divide="ignore", invalid="ignore"):
        proportions = weights / weights.sum()
    if np.all(np.isnan(proportions)):
        return float("nan")

    # Restrict to positive weights before exponentiating: 0 ** negative = inf
    mask = weights > 0
    v = values[mask]
    p = proportions[mask]
    if v.size == 0:
        return float("nan")

    if np.isposinf(order):
        return float(np.max(v))
    if np.isneginf(order):
        return float(np.min(v))
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        if abs(order) < ORDER_TOLERANCE:
            return float(np.prod(v**p))
        if np.any(np.isnan(v)):
            return float("nan")
        # Scale by the dominant value so large |order| cannot overflow
        m = np.max(v) if order > 0 else np.min(v)
        if m == 0 or np.isinf(m):
            return float(m)
        return float(m * np.sum(p * (v / m) ** order) ** (1.0 / order))
