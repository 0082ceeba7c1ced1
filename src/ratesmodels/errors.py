"""
Exception types raised by model construction, pricing and calibration.

Each error derives from a built-in so callers can catch either the specific
class or the generic ValueError / RuntimeError.
"""


class ParameterValidationError(ValueError):
    """Raised when model parameters violate a construction invariant."""
    pass


class InstrumentOrderError(ValueError):
    """Raised when calibration instruments are not in the required order."""
    pass


class MissingFixingError(ValueError):
    """Raised when a fixing date has passed and no fixing is available."""

    def __init__(self, index_name: str, fixing_date):
        self.index_name = index_name
        self.fixing_date = fixing_date
        super().__init__(
            f"No fixing for index {index_name} on {fixing_date.isoformat()}"
        )


class CalibrationError(RuntimeError):
    """Raised when a calibration root search does not converge."""
    pass


class IntegrationError(RuntimeError):
    """Raised when numerical quadrature fails."""
    pass


__all__ = [
    "ParameterValidationError",
    "InstrumentOrderError",
    "MissingFixingError",
    "CalibrationError",
    "IntegrationError",
]
