"""
Curves package - discount curves and interpolation.

Provides:
- Curve: discount factors, zero and forward rates, parallel bumps
- Linear interpolator with flat or linear extrapolation
"""

from .curve import Curve, CurveNode, create_flat_curve
from .interpolation import (
    Interpolator,
    LinearInterpolator,
    create_interpolator,
)

__all__ = [
    "Curve",
    "CurveNode",
    "create_flat_curve",
    "Interpolator",
    "LinearInterpolator",
    "create_interpolator",
]
