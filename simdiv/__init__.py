"""simdiv: similarity-sensitive diversity of metacommunities.

Generalises Hill numbers to account for pairwise similarity between types,
and partitions metacommunity diversity into alpha, beta, gamma and rho
components at subcommunity and metacommunity scope.
"""

__version__ = "0.1.0"
