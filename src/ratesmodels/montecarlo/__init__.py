"""
Monte Carlo package - LMM evolution and European pricing.

Provides:
- NormalGenerator protocol and a numpy backed implementation
- LmmMonteCarloEvolution: single jump evolution of the forward rates
- LmmMonteCarloEuropeanPricer: block-wise path averaging
"""

from .random import NormalGenerator, NumpyNormalGenerator
from .evolution import LmmMonteCarloEvolution, integrated_variance
from .european import LmmMonteCarloEuropeanPricer, MulticurveLayout

__all__ = [
    "NormalGenerator",
    "NumpyNormalGenerator",
    "LmmMonteCarloEvolution",
    "integrated_variance",
    "LmmMonteCarloEuropeanPricer",
    "MulticurveLayout",
]
