"""
Calibration of model parameters to swaption prices by root search.

A subset of the parameters of any ParameterizedModel is adjusted so that
a model swaption pricer reproduces one target price per adjusted
parameter. The other parameters keep their starting values.
"""

import logging
from typing import Optional, Sequence

import numpy as np
from scipy.optimize import root

from ..config import RootSearchSettings
from ..errors import CalibrationError
from ..models.parameters import ParameterizedModel
from ..pricers.swaption_common import ModelSwaptionPricer, swaption_bachelier_price
from ..products.swaption import Swaption


logger = logging.getLogger(__name__)


class SwaptionRootPriceCalibrator:
    """
    Root-price calibrator of model parameters on physical swaptions.

    Example:
        >>> calibrator = SwaptionRootPriceCalibrator(HullWhiteSwaptionPhysicalPricer())
        >>> hw = calibrator.calibrate(start, [1], [swaption], [price], env)
    """

    def __init__(self, pricer: ModelSwaptionPricer, settings: Optional[RootSearchSettings] = None):
        self.pricer = pricer
        self.settings = settings or RootSearchSettings.calibration()

    def calibrate(
        self,
        starting_model: ParameterizedModel,
        parameter_indices: Sequence[int],
        swaptions: Sequence[Swaption],
        target_prices: Sequence[float],
        env
    ) -> ParameterizedModel:
        """
        Adjust the parameters at parameter_indices to match the target prices.

        Args:
            starting_model: Model giving the starting point and the fixed parameters
            parameter_indices: Indices (in the indexed parameter view) to calibrate
            swaptions: Calibration swaptions, one per calibrated parameter
            target_prices: Target present values
            env: RatesEnvironment

        Returns:
            Calibrated model

        Raises:
            ValueError: If the numbers of parameters, swaptions and prices differ
            CalibrationError: If the root search does not converge
        """
        indices = list(parameter_indices)
        if not (len(indices) == len(swaptions) == len(target_prices)):
            raise ValueError("number of variable parameters should be equal to the number of swaptions")
        targets = np.asarray(target_prices, dtype=np.float64)
        scale = np.maximum(np.abs(targets), 1.0)

        def generate(x: np.ndarray) -> ParameterizedModel:
            model = starting_model
            for index, value in zip(indices, x):
                model = model.with_replaced(index, float(value))
            return model

        def residuals(x: np.ndarray) -> np.ndarray:
            model = generate(x)
            prices = np.array([self.pricer.present_value(s, env, model) for s in swaptions])
            return (prices - targets) / scale

        start = np.array([starting_model.get_parameter(i) for i in indices])
        solution = root(residuals, start, method="hybr",
                        options={"xtol": self.settings.xtol, "maxfev": self.settings.maxiter * (len(start) + 1)})
        if not solution.success:
            raise CalibrationError(f"Swaption price calibration did not converge: {solution.message}")
        logger.info("Calibrated parameters %s in %d evaluations", solution.x, solution.nfev)
        return generate(solution.x)

    def calibrate_to_volatilities(
        self,
        starting_model: ParameterizedModel,
        parameter_indices: Sequence[int],
        swaptions: Sequence[Swaption],
        implied_volatilities: Sequence[float],
        env
    ) -> ParameterizedModel:
        """Same as calibrate, with targets given as Bachelier volatilities."""
        prices = [swaption_bachelier_price(s, env, v) for s, v in zip(swaptions, implied_volatilities)]
        return self.calibrate(starting_model, parameter_indices, swaptions, prices, env)


__all__ = ["SwaptionRootPriceCalibrator"]
