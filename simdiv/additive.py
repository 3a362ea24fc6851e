"""Conversion between diversities and additive diversities.

Column labels (``q0``, ``q1``, ``q2``...) select the transform:

=====  ==================  ====================
q      to additive         back to diversity
=====  ==================  ====================
0      identity            identity
1      ``log(D)``          ``exp(A)``
other  ``D ** (1 - q)``    ``A ** (1 / (1 - q))``
=====  ==================  ====================
"""

from __future__ import annotations

import numpy as np

from .diversity import DiversityResult, parse_q_label


def _convert(diversities: DiversityResult, to_additive: bool) -> DiversityResult:
    out = np.empty(diversities.values.shape)
    # Negative bases with fractional exponents give NaN, never complex values
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        for k, label in enumerate(diversities.q_labels):
            q = parse_q_label(label)
            col = diversities.values[:, k]
            if q == 0:
                out[:, k] = col
            elif q == 1:
                out[:, k] = np.log(col) if to_additive else np.exp(col)
            elif to_additive:
                out[:, k] = np.power(col, 1 - q)
            else:
                out[:, k] = np.power(col, 1 / (1 - q))
    return DiversityResult(
        row_ids=list(diversities.row_ids),
        q_labels=list(diversities.q_labels),
        values=out,
        measure=diversities.measure,
    )


def diversity_to_additive(diversities: DiversityResult) -> DiversityResult:
    """Convert diversities into additive diversities, column by column."""
    return _convert(diversities, to_additive=True)


def additive_to_diversity(additive: DiversityResult) -> DiversityResult:
    """Inverse of :func:`diversity_to_additive`."""
    return _convert(additive, to_additive=False)
