"""
Calibration of LMM volatilities to swaption Bachelier volatilities.

Provides:
- LmmSwaptionVolatility1LevelCalibrator: one multiplier on all loadings
- LmmSwaptionVolatility2SkewCalibrator: multipliers on the loadings and on
  the displacements, fitted to two swaptions with different strikes
- LmmSwaptionVolatilityNLevelCalibrator: a term structure of multipliers
  interpolated on the model periods, one node per swaption

The model volatilities are computed with the explicit approximation
pricer. Root searches run once from the starting parameters; a search that
does not converge raises CalibrationError.
"""

import logging
from dataclasses import replace
from typing import Callable, List, Optional, Sequence

import numpy as np
from scipy.optimize import brentq, root

from ..config import RootSearchSettings
from ..curves.interpolation import create_interpolator
from ..errors import CalibrationError, InstrumentOrderError
from ..models.lmm import LmmParameters
from ..pricers.swaption_lmm import LmmSwaptionPhysicalExplicitApproxPricer
from ..products.swaption import Swaption


logger = logging.getLogger(__name__)


class LmmSwaptionCalibrator:
    """
    Common pieces of the LMM swaption calibrators.

    Args:
        starting_parameters: Model whose loadings (and displacements) are scaled
        settings: Root search tolerances
    """

    def __init__(self, starting_parameters: LmmParameters, settings: Optional[RootSearchSettings] = None):
        self.starting_parameters = starting_parameters
        self.settings = settings or RootSearchSettings.calibration()
        self.pricer = LmmSwaptionPhysicalExplicitApproxPricer()

    def model_volatilities(self, swaptions: Sequence[Swaption], env, model: LmmParameters) -> np.ndarray:
        return np.array([self.pricer.implied_volatility(s, env, model) for s in swaptions])

    def solve(self, residuals: Callable[[np.ndarray], np.ndarray], start: np.ndarray) -> np.ndarray:
        """
        Multi-dimensional root of the residuals.

        Raises:
            CalibrationError: If the root search does not converge
        """
        solution = root(residuals, start, method="hybr",
                        options={"xtol": self.settings.xtol, "maxfev": self.settings.maxiter * (len(start) + 1)})
        if not solution.success:
            raise CalibrationError(f"LMM calibration did not converge: {solution.message}")
        logger.info("LMM calibration converged in %d evaluations: %s", solution.nfev, solution.x)
        return solution.x


class LmmSwaptionVolatility1LevelCalibrator(LmmSwaptionCalibrator):
    """Scale all the loadings by one multiplier to match one swaption."""

    def calibrate(self, swaption: Swaption, implied_volatility: float, env) -> LmmParameters:
        """
        Calibrate the volatility level.

        Args:
            swaption: Calibration swaption
            implied_volatility: Target Bachelier volatility
            env: RatesEnvironment

        Returns:
            Parameters with the loadings multiplied by the calibrated level

        Raises:
            CalibrationError: If the multiplier cannot be bracketed or the search fails
        """
        start = self.starting_parameters

        def residual(x: float) -> float:
            model = start.with_volatilities(start.volatilities * x)
            return self.pricer.implied_volatility(swaption, env, model) - implied_volatility

        lower, upper = self.settings.bracket
        try:
            x, result = brentq(residual, lower, upper, xtol=self.settings.xtol, rtol=self.settings.rtol,
                               maxiter=self.settings.maxiter, full_output=True)
        except (ValueError, RuntimeError) as e:
            raise CalibrationError(f"LMM level calibration failed: {e}") from e
        if not result.converged:
            raise CalibrationError(f"LMM level calibration did not converge: {result.flag}")
        logger.info("LMM level %.10f after %d iterations", x, result.iterations)
        return start.with_volatilities(start.volatilities * x)


class LmmSwaptionVolatility2SkewCalibrator(LmmSwaptionCalibrator):
    """Scale the loadings and the displacements to match two swaptions."""

    def calibrate(self, swaptions: Sequence[Swaption], implied_volatilities: Sequence[float], env) -> LmmParameters:
        """
        Calibrate the level and the skew.

        Args:
            swaptions: Two swaptions, usually on the same underlying dates with two strikes
            implied_volatilities: Target Bachelier volatilities
            env: RatesEnvironment

        Returns:
            Parameters with scaled loadings and displacements

        Raises:
            ValueError: If there are not exactly two swaptions and two volatilities
            CalibrationError: If the root search does not converge
        """
        if len(swaptions) != 2 or len(implied_volatilities) != 2:
            raise ValueError("The skew calibration needs exactly two swaptions and two volatilities")
        start = self.starting_parameters
        targets = np.asarray(implied_volatilities, dtype=np.float64)

        def updated(x: np.ndarray) -> LmmParameters:
            return replace(start, volatilities=start.volatilities * x[0], displacements=start.displacements * x[1])

        def residuals(x: np.ndarray) -> np.ndarray:
            return self.model_volatilities(swaptions, env, updated(x)) - targets

        x = self.solve(residuals, np.array([1.0, 1.0]))
        return updated(x)


class LmmSwaptionVolatilityNLevelCalibrator(LmmSwaptionCalibrator):
    """
    Interpolated term structure of volatility multipliers.

    The node of swaption i is placed on the period index axis between the
    start index of its underlying (first swaption) and its last period
    (last swaption):

        node_i = (1 - w_i) start_i + w_i (end_i - 1),   w_i = i / (n - 1)

    The multiplier of each model period is interpolated between the nodes.

    Args:
        starting_parameters: Model whose loadings are scaled
        interpolation: Interpolation method of the multipliers
        left_extrapolation: Extrapolation below the first node
        right_extrapolation: Extrapolation above the last node
        settings: Root search tolerances
    """

    def __init__(
        self,
        starting_parameters: LmmParameters,
        interpolation: str = "linear",
        left_extrapolation: str = "flat",
        right_extrapolation: str = "flat",
        settings: Optional[RootSearchSettings] = None
    ):
        super().__init__(starting_parameters, settings)
        self.interpolation = interpolation
        self.left_extrapolation = left_extrapolation
        self.right_extrapolation = right_extrapolation

    def node_indices(self, swaptions: Sequence[Swaption], env) -> np.ndarray:
        """
        Nodes of the multiplier curve on the period index axis.

        Raises:
            InstrumentOrderError: If start or end indices are not strictly increasing
        """
        model = self.starting_parameters
        legs = [s.underlying.ibor_leg() for s in swaptions]
        start_indices = model.ibor_time_index(env.times(leg.start_date for leg in legs))
        end_indices = model.ibor_time_index(env.times(leg.end_date for leg in legs))
        if np.any(np.diff(start_indices) <= 0):
            raise InstrumentOrderError("swaptions must be in strictly increasing start date order")
        if np.any(np.diff(end_indices) <= 0):
            raise InstrumentOrderError("swaptions must be in strictly increasing end date order")
        n = len(swaptions)
        weights = np.arange(n) / (n - 1) if n > 1 else np.zeros(1)
        return (1.0 - weights) * start_indices + weights * (end_indices - 1)

    def multipliers(self, nodes: np.ndarray, values: np.ndarray) -> np.ndarray:
        """Multiplier of each model period."""
        periods = np.arange(self.starting_parameters.period_count, dtype=np.float64)
        if len(nodes) == 1:
            return np.full(len(periods), float(values[0]))
        curve = create_interpolator(self.interpolation, self.left_extrapolation, self.right_extrapolation)
        curve.fit(nodes, values)
        return np.array([curve.interpolate(p) for p in periods])

    def calibrate(self, swaptions: List[Swaption], implied_volatilities: Sequence[float], env) -> LmmParameters:
        """
        Calibrate one multiplier node per swaption.

        Args:
            swaptions: Swaptions in strictly increasing start and end order
            implied_volatilities: Target Bachelier volatilities
            env: RatesEnvironment

        Returns:
            Parameters with each row of loadings scaled by its multiplier

        Raises:
            ValueError: If the numbers of swaptions and volatilities differ
            InstrumentOrderError: If the swaptions are not in increasing order
            CalibrationError: If the root search does not converge
        """
        if len(swaptions) != len(implied_volatilities):
            raise ValueError("the number of swaptions must be equal to the number of implied volatilities")
        nodes = self.node_indices(swaptions, env)
        start = self.starting_parameters
        targets = np.asarray(implied_volatilities, dtype=np.float64)

        def updated(values: np.ndarray) -> LmmParameters:
            factors = self.multipliers(nodes, values)
            return start.with_volatilities(start.volatilities * factors[:, None])

        def residuals(values: np.ndarray) -> np.ndarray:
            return self.model_volatilities(swaptions, env, updated(values)) - targets

        values = self.solve(residuals, np.ones(len(swaptions)))
        return updated(values)


__all__ = [
    "LmmSwaptionCalibrator",
    "LmmSwaptionVolatility1LevelCalibrator",
    "LmmSwaptionVolatility2SkewCalibrator",
    "LmmSwaptionVolatilityNLevelCalibrator",
]
