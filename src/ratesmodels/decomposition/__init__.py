"""
Decomposition package - products as dated payments and rate computations.

Provides:
- Cash-flow equivalent of fixed and Ibor legs
- Multi-curve equivalent (decision date schedule) for Monte Carlo pricing
"""

from .cash_flow_equivalent import (
    Payment,
    cash_flow_equivalent_fixed_leg,
    cash_flow_equivalent_ibor_leg,
    cash_flow_equivalent_ibor_period,
    cash_flow_equivalent_swap,
    sort_compress,
)
from .multicurve_equivalent import MulticurveEquivalent, decision_schedule, multicurve_equivalent_swap

__all__ = [
    "Payment",
    "cash_flow_equivalent_fixed_leg",
    "cash_flow_equivalent_ibor_leg",
    "cash_flow_equivalent_ibor_period",
    "cash_flow_equivalent_swap",
    "sort_compress",
    "MulticurveEquivalent",
    "decision_schedule",
    "multicurve_equivalent_swap",
]
