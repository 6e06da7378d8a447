# planner/goals.py — Goal projection engine (GoalProjector + RetirementAdjuster)
#
# Goals: one-time targets and retirement
# Horizon: two buckets only — short (< 5 years) and long (>= 5 years)
#
# Each projection reports:
#   - Years / months to the target date and horizon bucket
#   - Inflation-adjusted target
#   - Blended expected return for the bucket
#   - Value already covered by linked holdings
#   - Required monthly SIP on the remaining gap
#   - Retirement only: EPF/NPS corpus + contribution breakdown

import logging
from typing import Optional

import pandas as pd

from config import SHORT, LONG, SHORT_TERM_THRESHOLD, EPF_RETURN, NPS_RETURN, \
    EPF_NPS_STEP_UP, EPF_CATEGORIES, NPS_CATEGORIES
from models.plan import RETIREMENT, RetirementContributions, get_assets, get_income, \
    linked_total, num
from planner.calculator import (
    years_remaining, months_remaining, inflation_adjusted, lumpsum_fv,
    sip_fv, regular_sip, step_up_sip, step_up_future_value,
)

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# HORIZON → BUCKET
# ─────────────────────────────────────────────────────────────────────────────

def bucket_for_years(years: float) -> str:
    return SHORT if years < SHORT_TERM_THRESHOLD else LONG


def horizon_bucket(target_date, today=None) -> str:
    """'short' when the goal is less than 5 years away, else 'long'."""
    return bucket_for_years(years_remaining(target_date, today))


def blended_return(
    bucket: str,
    equity_return: float,
    debt_return: float,
    arbitrage_return: Optional[float],
    equity_allocation: float = 60,
) -> float:
    """
    Expected annual return (%) of the recommended mix for a bucket.
    Short term sits fully in arbitrage funds (debt return for older plans
    without an arbitrage assumption); long term is an equity/debt blend.
    """
    if bucket == SHORT:
        return debt_return if arbitrage_return is None else arbitrage_return
    debt_allocation = 100 - equity_allocation
    return equity_allocation / 100 * equity_return + debt_allocation / 100 * debt_return


# ─────────────────────────────────────────────────────────────────────────────
# UNIFIED GOAL PROJECTION
# ─────────────────────────────────────────────────────────────────────────────

def project_unified_goal(
    goal: dict,
    equity_return: float,
    debt_return: float,
    arbitrage_return: Optional[float],
    equity_allocation: float = 60,
    annual_step_up: float = 0,
    today=None,
) -> dict:
    """
    Project a goal to its target date and solve for the monthly SIP.

    Holdings already linked to the goal are grown to the target date at the
    bucket's blended return; only the remaining gap needs new savings.
    """
    goal = goal if isinstance(goal, dict) else {}
    target_date = goal.get("target_date")

    years  = years_remaining(target_date, today)
    months = months_remaining(target_date, today)
    bucket = bucket_for_years(years)

    target = inflation_adjusted(num(goal.get("target_amount")), num(goal.get("inflation_rate")), years)
    r_blended = blended_return(bucket, equity_return, debt_return, arbitrage_return, equity_allocation)

    linked_amount = linked_total(goal)
    linked_fv     = lumpsum_fv(linked_amount, r_blended, years)
    gap           = max(0.0, target - linked_fv)

    if annual_step_up > 0:
        monthly_sip = step_up_sip(gap, r_blended, months, annual_step_up)
    else:
        monthly_sip = regular_sip(gap, r_blended, months)

    return {
        "years":                     years,
        "months":                    months,
        "bucket":                    bucket,
        "inflation_adjusted_target": target,
        "blended_return":            r_blended,
        "monthly_sip":               monthly_sip,
        "annual_step_up":            annual_step_up,
        "linked_amount":             linked_amount,
        "linked_fv":                 linked_fv,
        "gap_amount":                gap,
    }


# ─────────────────────────────────────────────────────────────────────────────
# RETIREMENT (EPF / NPS)
# ─────────────────────────────────────────────────────────────────────────────

def retirement_contributions(document) -> RetirementContributions:
    """Sum EPF/NPS corpora from holdings and monthly EPF/NPS from every income source."""
    assets = get_assets(document)
    income = get_income(document)
    return RetirementContributions(
        monthly_epf = sum(num(i.get("epf")) for i in income),
        monthly_nps = sum(num(i.get("nps")) for i in income),
        epf_corpus  = sum(num(a.get("value")) for a in assets if a.get("category") in EPF_CATEGORIES),
        nps_corpus  = sum(num(a.get("value")) for a in assets if a.get("category") in NPS_CATEGORIES),
    )


def _contribution_fv(monthly: float, annual_rate: float, months: int, step_up: float) -> float:
    if step_up > 0:
        return step_up_future_value(monthly, annual_rate / 100 / 12, months, step_up / 100)
    return sip_fv(monthly, annual_rate, months)


def project_retirement_goal(
    goal: dict,
    contributions: Optional[RetirementContributions],
    equity_return: float,
    debt_return: float,
    arbitrage_return: Optional[float],
    equity_allocation: float = 60,
    epf_return: float = EPF_RETURN,
    nps_return: float = NPS_RETURN,
    annual_step_up: float = 0,
    today=None,
) -> dict:
    """
    Retirement projection net of payroll retirement funds.

    EPF/NPS corpus and future monthly contributions are projected to the
    goal date at their own returns; the SIP covers only what is left.
    """
    base = project_unified_goal(
        goal, equity_return, debt_return, arbitrage_return,
        equity_allocation, annual_step_up, today,
    )
    goal = goal if isinstance(goal, dict) else {}

    if (
        goal.get("goal_type") != RETIREMENT
        or contributions is None
        or not goal.get("include_epf_nps")
        or (contributions.total_monthly == 0 and contributions.total_corpus == 0)
    ):
        return {**base, "epf_nps": None}

    years  = base["years"]
    months = base["months"]

    if years <= 0:
        corpus_fv = contributions.total_corpus
    else:
        corpus_fv = (lumpsum_fv(contributions.epf_corpus, epf_return, years)
                     + lumpsum_fv(contributions.nps_corpus, nps_return, years))

    step_up = EPF_NPS_STEP_UP if goal.get("epf_nps_step_up") else 0
    contribution_fv = (_contribution_fv(contributions.monthly_epf, epf_return, months, step_up)
                       + _contribution_fv(contributions.monthly_nps, nps_return, months, step_up))

    total_fv = corpus_fv + contribution_fv
    gap = max(0.0, base["inflation_adjusted_target"] - base["linked_fv"] - total_fv)

    if gap <= 0:
        monthly_sip = 0.0
    elif annual_step_up > 0:
        monthly_sip = step_up_sip(gap, base["blended_return"], months, annual_step_up)
    else:
        monthly_sip = regular_sip(gap, base["blended_return"], months)

    logger.debug("Retirement goal %s: EPF/NPS covers %.0f, gap %.0f",
                 goal.get("id"), total_fv, gap)

    return {
        **base,
        "gap_amount":  gap,
        "monthly_sip": monthly_sip,
        "epf_nps": {
            **contributions.to_dict(),
            "corpus_fv":       corpus_fv,
            "contribution_fv": contribution_fv,
            "total_fv":        total_fv,
            "epf_return":      epf_return,
            "nps_return":      nps_return,
            "step_up_rate":    step_up,
        },
    }


# ─────────────────────────────────────────────────────────────────────────────
# YEAR-BY-YEAR PROJECTION
# ─────────────────────────────────────────────────────────────────────────────

def yearly_projection(projection: dict) -> pd.DataFrame:
    """
    Year-by-year corpus path for a projected goal at the flat blended return.
    Linked holdings seed the corpus; the SIP steps up once a year.
    """
    n_years = int(round(projection.get("years", 0)))
    columns = ["year", "years_remaining", "sip", "corpus", "invested", "gain"]
    if n_years <= 0:
        return pd.DataFrame(columns=columns)

    r_monthly = projection["blended_return"] / 100 / 12
    step_up   = projection.get("annual_step_up", 0) / 100
    sip       = projection["monthly_sip"]
    corpus    = projection.get("linked_amount", 0.0)
    invested  = corpus

    epf_nps = projection.get("epf_nps")
    if epf_nps:
        epf_corpus = epf_nps["epf_corpus"]
        nps_corpus = epf_nps["nps_corpus"]
        monthly_epf = epf_nps["monthly_epf"]
        monthly_nps = epf_nps["monthly_nps"]
        epf_rate = epf_nps["epf_return"] / 100 / 12
        nps_rate = epf_nps["nps_return"] / 100 / 12
        epf_step = epf_nps["step_up_rate"] / 100

    rows = []
    for yr in range(1, n_years + 1):
        for _ in range(12):
            corpus = corpus * (1 + r_monthly) + sip
            if epf_nps:
                epf_corpus = epf_corpus * (1 + epf_rate) + monthly_epf
                nps_corpus = nps_corpus * (1 + nps_rate) + monthly_nps
        invested += sip * 12
        row = {
            "year":            yr,
            "years_remaining": n_years - yr,
            "sip":             round(sip, 0),
            "corpus":          round(corpus, 0),
            "invested":        round(invested, 0),
            "gain":            round(corpus - invested, 0),
        }
        if epf_nps:
            row["epf_nps_corpus"] = round(epf_corpus + nps_corpus, 0)
            row["total_corpus"]   = round(corpus + epf_corpus + nps_corpus, 0)
            monthly_epf *= 1 + epf_step
            monthly_nps *= 1 + epf_step
        rows.append(row)
        sip *= 1 + step_up

    return pd.DataFrame(rows)


# ─────────────────────────────────────────────────────────────────────────────
# VALIDATION
# ─────────────────────────────────────────────────────────────────────────────

def validate_goal_inputs(goal: dict, today=None) -> list[str]:
    """Returns list of warnings for the user (not errors — just guidance)."""
    warnings_list = []
    goal = goal if isinstance(goal, dict) else {}
    years = years_remaining(goal.get("target_date"), today)

    if num(goal.get("target_amount")) <= 0:
        warnings_list.append("Target amount is zero — no savings will be planned for this goal.")

    if years <= 0:
        warnings_list.append(
            "Target date has passed or is missing — the goal is excluded from planning."
        )

    inflation = num(goal.get("inflation_rate"))
    if inflation < 0 or inflation > 15:
        warnings_list.append(
            f"Inflation of {inflation:.1f}% is unusual. Typical Indian inflation is 5-7%."
        )

    if goal.get("goal_type") == RETIREMENT and 0 < years < 7:
        warnings_list.append(
            "Retirement goals need at least 7-10 years to compound meaningfully."
        )

    if goal.get("goal_type") != RETIREMENT and goal.get("include_epf_nps"):
        warnings_list.append("EPF/NPS is only counted toward retirement goals.")

    return warnings_list
