"""
Sources of independent standard normal numbers for Monte Carlo engines.

Engines receive a generator instead of using a global random state, so that
a run is reproduced by a fresh generator built with the same seed.
"""

from typing import Optional, Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class NormalGenerator(Protocol):
    """Produces arrays of independent standard normal numbers."""

    def normals(self, n_factors: int, n_paths: int) -> np.ndarray:
        """Array of shape (n_factors, n_paths)."""
        ...


class NumpyNormalGenerator:
    """
    Normal generator backed by a numpy Generator (PCG64).

    Numbers are consumed sequentially: the k-th call returns the same array
    for the same seed and the same sequence of requested shapes.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def normals(self, n_factors: int, n_paths: int) -> np.ndarray:
        return self._rng.standard_normal((n_factors, n_paths))

    def __repr__(self) -> str:
        return f"NumpyNormalGenerator(seed={self.seed})"


__all__ = ["NormalGenerator", "NumpyNormalGenerator"]
