"""
Common interface of model based physical swaption pricers.

Provides:
- swaption_implied_volatility: Bachelier volatility of a swaption price
- ModelSwaptionPricer: base class giving the implied volatility of any
  model price
"""

from ..options.base_models import bachelier_price, implied_vol_bachelier
from ..products.swaption import Swaption
from .swap_discounting import DiscountingSwapPricer


def swaption_implied_volatility(swaption: Swaption, env, present_value: float) -> float:
    """
    Bachelier implied volatility of a physical swaption price.

    The forward is the par rate of the underlying, the annuity its |PVBP|
    and the strike its fixed rate. A payer is a call, a receiver a put.

    Args:
        swaption: The swaption
        env: RatesEnvironment
        present_value: Price of the swaption position (negative when short)

    Returns:
        Normal volatility
    """
    swap_pricer = DiscountingSwapPricer(env)
    forward = swap_pricer.par_rate(swaption.underlying)
    annuity = abs(swap_pricer.pvbp(swaption.underlying))
    expiry = env.time(swaption.expiry_date)
    return implied_vol_bachelier(
        present_value * swaption.sign, forward, swaption.strike, expiry,
        annuity=annuity, is_call=swaption.is_payer
    )


def swaption_bachelier_price(swaption: Swaption, env, volatility: float) -> float:
    """Price of a swaption position from a Bachelier volatility."""
    swap_pricer = DiscountingSwapPricer(env)
    forward = swap_pricer.par_rate(swaption.underlying)
    annuity = abs(swap_pricer.pvbp(swaption.underlying))
    expiry = env.time(swaption.expiry_date)
    price = bachelier_price(forward, swaption.strike, expiry, volatility, swaption.is_payer, annuity)
    return swaption.sign * price


class ModelSwaptionPricer:
    """Base class: subclasses implement present_value(swaption, env, model)."""

    def present_value(self, swaption: Swaption, env, model) -> float:
        raise NotImplementedError

    def implied_volatility(self, swaption: Swaption, env, model) -> float:
        """Bachelier volatility implied by the model price."""
        return swaption_implied_volatility(swaption, env, self.present_value(swaption, env, model))

    @staticmethod
    def validate(swaption: Swaption, env) -> None:
        if swaption.expiry_date < env.valuation_date:
            raise ValueError(f"Swaption expired on {swaption.expiry_date}")


__all__ = ["swaption_implied_volatility", "swaption_bachelier_price", "ModelSwaptionPricer"]
