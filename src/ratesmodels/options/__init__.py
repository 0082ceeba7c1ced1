"""
Options package - Bachelier and Black formulas and the implied normal volatility.
"""

from .base_models import bachelier_price, black_price, implied_vol_bachelier

__all__ = ["bachelier_price", "black_price", "implied_vol_bachelier"]
