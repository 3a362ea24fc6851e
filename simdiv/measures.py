"""Registry of named diversity measures."""

from __future__ import annotations

from typing import Callable, Sequence

import numpy as np

from . import metacommunity as meta
from . import subcommunity as sub
from .diversity import DiversityResult
from .io import AbundanceTable

MeasureFunc = Callable[..., DiversityResult]

# Keys match DiversityResult.measure of each function's output
MEASURES: dict[str, MeasureFunc] = {
    "subcommunity.alpha": sub.subcommunity_alpha,
    "subcommunity.alpha.bar": sub.subcommunity_alpha_bar,
    "subcommunity.beta": sub.subcommunity_beta,
    "subcommunity.beta.bar": sub.subcommunity_beta_bar,
    "subcommunity.gamma": sub.subcommunity_gamma,
    "subcommunity.gamma.bar": sub.subcommunity_gamma_bar,
    "subcommunity.rho": sub.subcommunity_rho,
    "subcommunity.rho.bar": sub.subcommunity_rho_bar,
    "metacommunity.A": meta.metacommunity_A,
    "metacommunity.A.bar": meta.metacommunity_A_bar,
    "metacommunity.B": meta.metacommunity_B,
    "metacommunity.B.bar": meta.metacommunity_B_bar,
    "metacommunity.G": meta.metacommunity_G,
    "metacommunity.G.bar": meta.metacommunity_G_bar,
    "metacommunity.R": meta.metacommunity_R,
    "metacommunity.R.bar": meta.metacommunity_R_bar,
}


def measure_names() -> list[str]:
    return list(MEASURES)


def get_measure(name: str) -> MeasureFunc:
    """Look up a measure by name, e.g. ``"metacommunity.G.bar"``."""
    try:
        return MEASURES[name]
    except KeyError:
        raise KeyError(
            f"Unknown measure {name!r}; choose from {', '.join(MEASURES)}"
        ) from None


def compute_measure(
    name: str,
    populations: AbundanceTable | np.ndarray,
    qs: Sequence[float],
    Z: np.ndarray | None = None,
) -> DiversityResult:
    """Compute the named measure."""
    return get_measure(name)(populations, qs, Z)
