# planner/calculator.py — Time-value-of-money layer (ContributionSolver)
#
# Pure numeric functions. Rates are annual percentages unless the name says
# monthly_rate / step_up_rate (fractions). Payments are made at month end.

import logging
from datetime import date
from typing import Optional

import numpy as np
import pandas as pd

from config import DAYS_PER_YEAR, SOLVER_MAX_ITERATIONS, SOLVER_TOLERANCE, SOLVER_NUDGE

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# TIME REMAINING
# ─────────────────────────────────────────────────────────────────────────────

def _to_timestamp(value) -> Optional[pd.Timestamp]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        ts = pd.to_datetime(value, errors="coerce")
    except (TypeError, ValueError):
        return None
    if ts is None or pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert(None)
    return ts


def years_remaining(target_date, today: Optional[date] = None) -> float:
    """Fractional years from today until `target_date`, never negative."""
    target = _to_timestamp(target_date)
    if target is None:
        return 0.0
    now = _to_timestamp(today) if today is not None else pd.Timestamp.today()
    years = (target - now) / pd.Timedelta(days=DAYS_PER_YEAR)
    return max(0.0, float(years))


def months_remaining(target_date, today: Optional[date] = None) -> int:
    """Whole months until `target_date`, never negative."""
    return max(0, int(round(years_remaining(target_date, today) * 12)))


# ─────────────────────────────────────────────────────────────────────────────
# LUMP SUMS
# ─────────────────────────────────────────────────────────────────────────────

def inflation_adjusted(present_value: float, inflation_rate: float, years: float) -> float:
    """FV = PV × (1 + i)^n"""
    if years <= 0:
        return present_value
    return present_value * (1 + inflation_rate / 100) ** years


def lumpsum_fv(principal: float, annual_rate: float, years: float) -> float:
    """Future value of a lump sum under monthly compounding."""
    if years <= 0 or principal <= 0:
        return principal
    monthly_rate = annual_rate / 100 / 12
    months = round(years * 12)
    return principal * (1 + monthly_rate) ** months


# ─────────────────────────────────────────────────────────────────────────────
# LEVEL SIP
# ─────────────────────────────────────────────────────────────────────────────

def sip_fv(monthly_payment: float, annual_rate: float, months: int) -> float:
    """
    Future value of a level monthly SIP (ordinary annuity).
    FV = PMT × ((1 + r)^n − 1) / r
    """
    if monthly_payment <= 0 or months <= 0:
        return 0.0
    r = annual_rate / 100 / 12
    if r == 0:
        return monthly_payment * months
    return monthly_payment * ((1 + r) ** months - 1) / r


def regular_sip(future_value: float, annual_rate: float, months: int) -> float:
    """
    Level monthly payment reaching `future_value` after `months`.
    PMT = FV × r / ((1 + r)^n − 1)   — inverse of sip_fv
    """
    if future_value <= 0 or months <= 0:
        return 0.0
    r = annual_rate / 100 / 12
    if r == 0:
        return future_value / months
    return future_value * r / ((1 + r) ** months - 1)


# ─────────────────────────────────────────────────────────────────────────────
# STEP-UP SIP
# ─────────────────────────────────────────────────────────────────────────────

def step_up_future_value(
    starting_payment: float,
    monthly_rate: float,
    total_months: int,
    step_up_rate: float,
) -> float:
    """
    Forward simulation of an annually stepped-up SIP.

    Months are grouped into 12-month blocks (the last one may be shorter).
    Every payment in block k is starting_payment × (1 + step_up_rate)^k and
    compounds for the months left to the horizon after it is paid.
    """
    total_months = int(total_months)
    if starting_payment <= 0 or total_months <= 0:
        return 0.0
    month    = np.arange(total_months)
    payments = starting_payment * (1 + step_up_rate) ** (month // 12)
    growth   = (1 + monthly_rate) ** (total_months - month - 1)
    return float(np.sum(payments * growth))


def step_up_sip(
    future_value: float,
    annual_rate: float,
    months: int,
    annual_step_up: float,
) -> float:
    """
    Starting monthly payment that reaches `future_value` when the payment
    rises by `annual_step_up` % every 12 months.

    Bisection on [0, 2·FV/months]. The answer is conservative: it never
    projects below the target by more than the solver tolerance.
    """
    if future_value <= 0 or months <= 0:
        return 0.0
    if annual_step_up == 0:
        return regular_sip(future_value, annual_rate, months)

    monthly_rate = annual_rate / 100 / 12
    step_up_rate = annual_step_up / 100

    low  = 0.0
    high = future_value / months * 2

    for _ in range(SOLVER_MAX_ITERATIONS):
        mid = (low + high) / 2
        fv  = step_up_future_value(mid, monthly_rate, months, step_up_rate)

        if abs(fv - future_value) < SOLVER_TOLERANCE:
            return mid if fv >= future_value else mid + SOLVER_NUDGE

        if fv < future_value:
            low = mid
        else:
            high = mid

    # high always projects at or above target
    logger.debug("step_up_sip: bisection exhausted for fv=%.2f months=%d", future_value, months)
    return high
