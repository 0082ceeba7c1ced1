"""
Numerical settings shared by pricers and calibrators.

Provides:
- MonteCarloSettings: path count, block size and jump size
- RootSearchSettings: tolerances for 1-D and N-D root searches
- IntegrationSettings: quadrature domain and tolerances
- TaylorSettings: finite difference shift of the analytic CMS expansion
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class MonteCarloSettings:
    """
    Monte Carlo path settings.

    Attributes:
        n_paths: Total number of paths
        block_size: Paths simulated per block (bounds memory)
        max_jump: Maximal time step of the evolution; None for a single jump
        seed: Seed used when the pricer builds its own normal generator
    """
    n_paths: int = 10_000
    block_size: int = 1_000
    max_jump: Optional[float] = None
    seed: Optional[int] = None

    def __post_init__(self):
        if self.n_paths <= 0:
            raise ValueError(f"n_paths must be positive, got {self.n_paths}")
        if self.block_size <= 0:
            raise ValueError(f"block_size must be positive, got {self.block_size}")
        if self.max_jump is not None and self.max_jump <= 0:
            raise ValueError(f"max_jump must be positive, got {self.max_jump}")

    def decomposition(self) -> Tuple[int, int, int]:
        """
        Split the path count into full blocks and a residual block.

        Returns:
            Tuple (number of full blocks, block size, residual paths)
        """
        return self.n_paths // self.block_size, self.block_size, self.n_paths % self.block_size

    @classmethod
    def quick(cls, seed: Optional[int] = None) -> "MonteCarloSettings":
        """Small run for smoke tests."""
        return cls(n_paths=2_000, block_size=500, seed=seed)


@dataclass(frozen=True)
class RootSearchSettings:
    """
    Root search tolerances.

    Attributes:
        xtol: Absolute tolerance on the unknown
        rtol: Relative tolerance on the unknown
        maxiter: Maximal number of iterations
        bracket: Initial bracket for 1-D searches (relative to the start point)
    """
    xtol: float = 1e-12
    rtol: float = 1e-12
    maxiter: int = 200
    bracket: Tuple[float, float] = (0.05, 20.0)

    @classmethod
    def calibration(cls) -> "RootSearchSettings":
        """Tolerances used by the volatility calibrators."""
        return cls(xtol=1e-12, rtol=1e-12, maxiter=200, bracket=(0.25, 4.0))


@dataclass(frozen=True)
class IntegrationSettings:
    """
    Quadrature settings for integrals against the Gaussian density.

    Attributes:
        limit: Integration bound in standard deviations (treated as infinity)
        epsabs: Absolute tolerance
        epsrel: Relative tolerance
        subdivisions: Maximal number of adaptive subintervals
    """
    limit: float = 12.0
    epsabs: float = 1e-10
    epsrel: float = 1e-8
    subdivisions: int = 500


@dataclass(frozen=True)
class TaylorSettings:
    """
    Settings of the Taylor expansion used by the analytic CMS pricer.

    Attributes:
        third_order_shift: Shift of the central difference giving the third derivative
    """
    third_order_shift: float = 1.0e-4


__all__ = [
    "MonteCarloSettings",
    "RootSearchSettings",
    "IntegrationSettings",
    "TaylorSettings",
]
