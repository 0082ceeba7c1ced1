"""
Risk package - parameter and curve sensitivities.
"""

from .sensitivities import (
    BumpResult,
    cms_zero_rate_sensitivities,
    parallel_bump,
    parallel_dv01,
    parameter_sensitivities,
)

__all__ = [
    "BumpResult",
    "parameter_sensitivities",
    "parallel_bump",
    "parallel_dv01",
    "cms_zero_rate_sensitivities",
]
