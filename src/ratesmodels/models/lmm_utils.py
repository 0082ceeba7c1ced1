"""
Factories of LMM parameter sets on a schedule of Ibor dates.

Provides:
- lmm_hw: one-factor LMM reproducing Hull-White dynamics
- lmm_1factor: one-factor LMM with a flat volatility level
- lmm_2angle: two-factor LMM with angle-shaped loadings
- model_period_dates: model period dates aligned on a schedule end date
"""

from datetime import date
from typing import List, Sequence

import numpy as np

from ..conventions import year_fraction
from ..dates import DateUtils
from ..products.swap import IborIndex
from .lmm import DEFAULT_TIME_TOLERANCE, LmmParameters


def model_period_dates(start: date, end: date, index: IborIndex, holidays=None) -> List[date]:
    """
    Model period dates from start to end, rolled backward from end by the index tenor.

    Periods are aligned with swaps whose schedules end on the same date;
    the first period may be a short stub.
    """
    return DateUtils.generate_schedule(
        start, end, DateUtils.tenor_to_months(index.tenor), index.business_day, holidays
    )


def _period_data(ibor_dates: Sequence[date], index: IborIndex, env):
    """Ibor times, accrual factors and multiplicative spreads of the periods."""
    times = env.times(ibor_dates)
    n = len(ibor_dates) - 1
    accruals = np.zeros(n)
    spreads = np.zeros(n)
    for i in range(n):
        accruals[i] = year_fraction(ibor_dates[i], ibor_dates[i + 1], index.day_count)
        effective = ibor_dates[i]
        maturity = index.maturity_from_effective(effective)
        ibor_rate = env.ibor_forward_rate(index, effective, maturity)
        forward_ratio = env.discount_factor(effective) / env.discount_factor(maturity)
        spreads[i] = (1.0 + accruals[i] * ibor_rate) / forward_ratio
    return times, accruals, spreads


def lmm_hw(
    mean_reversion: float,
    sigma: float,
    ibor_dates: List[date],
    index: IborIndex,
    env
) -> LmmParameters:
    """
    One-factor LMM equivalent to a Hull-White model with constant volatility.

    The displacement of each period is 1 / delta, so that the displaced
    forward is the bond ratio P(t_i) / P(t_{i+1}) / delta.

    Args:
        mean_reversion: Hull-White mean reversion a
        sigma: Hull-White volatility
        ibor_dates: Dates of the model periods (n + 1 dates)
        index: Ibor index defining the accrual day count and the spreads
        env: RatesEnvironment

    Returns:
        LmmParameters with n periods and one factor
    """
    times, accruals, spreads = _period_data(ibor_dates, index, env)
    a = mean_reversion
    vols = sigma / a * (np.exp(-a * times[:-1]) - np.exp(-a * times[1:]))
    return LmmParameters(
        ibor_times=times,
        accrual_factors=accruals,
        multiplicative_spreads=spreads,
        displacements=1.0 / accruals,
        volatilities=vols.reshape(-1, 1),
        mean_reversion=a,
        time_tolerance=DEFAULT_TIME_TOLERANCE
    )


def lmm_1factor(
    mean_reversion: float,
    vol_level: float,
    displacement: float,
    ibor_dates: List[date],
    index: IborIndex,
    env
) -> LmmParameters:
    """One-factor LMM with the same loading and displacement on all periods."""
    times, accruals, spreads = _period_data(ibor_dates, index, env)
    n = len(accruals)
    return LmmParameters(
        ibor_times=times,
        accrual_factors=accruals,
        multiplicative_spreads=spreads,
        displacements=np.full(n, displacement),
        volatilities=np.full((n, 1), vol_level),
        mean_reversion=mean_reversion
    )


def lmm_2angle(
    mean_reversion: float,
    vol_level: float,
    angle: float,
    vol_angle: float,
    displacement: float,
    ibor_dates: List[date],
    index: IborIndex,
    env,
    year_angle: float = 20.0,
    vol_angle_slope: float = 0.0
) -> LmmParameters:
    """
    Two-factor LMM with loadings rotating with the period start time.

    gamma_i = (level + v_i sin(t_i / year_angle * angle),
               level + v_i cos(t_i / year_angle * angle))

    with the amplitude v_i moving linearly from vol_angle on the first
    period to vol_angle + vol_angle_slope on the last one. For angle = 0
    the model has a single effective factor.

    Args:
        mean_reversion: Time dependency of the loadings
        vol_level: Common volatility level
        angle: Total rotation over year_angle years
        vol_angle: Amplitude of the rotating part on the first period
        displacement: Displacement of all periods
        ibor_dates: Dates of the model periods
        index: Ibor index
        env: RatesEnvironment
        year_angle: Horizon in years of the full rotation
        vol_angle_slope: Change of the amplitude between the first and last periods

    Returns:
        LmmParameters with two factors
    """
    times, accruals, spreads = _period_data(ibor_dates, index, env)
    n = len(accruals)
    phase = times[:-1] / year_angle * angle
    amplitude = vol_angle + np.arange(n) * vol_angle_slope / max(n - 1, 1)
    vols = np.column_stack([
        vol_level + amplitude * np.sin(phase),
        vol_level + amplitude * np.cos(phase),
    ])
    return LmmParameters(
        ibor_times=times,
        accrual_factors=accruals,
        multiplicative_spreads=spreads,
        displacements=np.full(n, displacement),
        volatilities=vols,
        mean_reversion=mean_reversion
    )


__all__ = ["model_period_dates", "lmm_hw", "lmm_1factor", "lmm_2angle"]
