# planner/plan.py — Full recompute and horizon-bucket roll-up (Aggregator)

import logging

import pandas as pd

from config import SHORT, LONG, EQUITY_SPLIT, FUND_HOUSES, GENERIC_FUNDS
from models.plan import RETIREMENT, Settings, get_goals
from planner.allocator import auto_assign_assets, get_asset_allocations
from planner.goals import project_unified_goal, project_retirement_goal, retirement_contributions

logger = logging.getLogger(__name__)

TABLE_COLUMNS = [
    "goal_id", "name", "goal_type", "bucket", "target_date", "years", "months",
    "inflation_adjusted_target", "blended_return", "linked_amount", "linked_fv",
    "gap_amount", "monthly_sip",
]


def project_goals(document, today=None, step_up: bool = False) -> list[dict]:
    """Projection for every goal, in document order."""
    settings = Settings.from_document(document)
    contributions = retirement_contributions(document)
    annual_step_up = settings.investment_step_up if step_up else 0

    projections = []
    for goal in get_goals(document):
        if goal.get("goal_type") == RETIREMENT:
            p = project_retirement_goal(
                goal, contributions,
                settings.equity_return, settings.debt_return, settings.arbitrage_return,
                settings.equity_allocation, settings.epf_return, settings.nps_return,
                annual_step_up, today,
            )
        else:
            p = project_unified_goal(
                goal,
                settings.equity_return, settings.debt_return, settings.arbitrage_return,
                settings.equity_allocation, annual_step_up, today,
            )
        projections.append(p)
    return projections


def goal_table(document, projections: list[dict]) -> pd.DataFrame:
    """One row per goal: horizon, target, linked cover and required SIP."""
    rows = []
    for goal, p in zip(get_goals(document), projections):
        rows.append({
            "goal_id":     goal.get("id"),
            "name":        goal.get("name", ""),
            "goal_type":   goal.get("goal_type", ""),
            "target_date": goal.get("target_date"),
            **{k: p[k] for k in TABLE_COLUMNS if k in p},
        })
    return pd.DataFrame(rows, columns=TABLE_COLUMNS)


def fund_names(fund_house) -> dict:
    """Scheme name per split line for a fund house; generic names when unknown."""
    house = FUND_HOUSES.get(fund_house, {})
    return {line: house.get(line, generic) for line, generic in GENERIC_FUNDS.items()}


def bucket_summary(table: pd.DataFrame, settings: Settings) -> dict:
    """
    Roll goals up per horizon bucket and split each bucket's SIP into funds.
    Past-dated goals are left out of the roll-up.

    Short term → 100% arbitrage fund.
    Long term  → equity/debt per the equity allocation; equity split
                 70/30 between Nifty 50 and Nifty Next 50, debt to money market.
    """
    table = table[table["years"] > 0]
    names = fund_names(settings.fund_house)

    grouped = table.groupby("bucket").agg(
        goals        = ("goal_id", "size"),
        total_sip    = ("monthly_sip", "sum"),
        total_target = ("inflation_adjusted_target", "sum"),
        total_linked = ("linked_amount", "sum"),
    ) if not table.empty else pd.DataFrame()

    def totals(bucket):
        if bucket in grouped.index:
            row = grouped.loc[bucket]
            return {
                "goals":        int(row["goals"]),
                "total_sip":    float(row["total_sip"]),
                "total_target": float(row["total_target"]),
                "total_linked": float(row["total_linked"]),
            }
        return {"goals": 0, "total_sip": 0.0, "total_target": 0.0, "total_linked": 0.0}

    short = totals(SHORT)
    short_return = settings.debt_return if settings.arbitrage_return is None else settings.arbitrage_return
    short.update({
        "blended_return": short_return,
        "allocation":     {"arbitrage": short["total_sip"]},
        "funds":          {"arbitrage": names["arbitrage"]},
    })

    long = totals(LONG)
    equity_pct = settings.equity_allocation
    debt_pct   = 100 - equity_pct
    equity_amount = long["total_sip"] * equity_pct / 100
    long.update({
        "blended_return":    equity_pct / 100 * settings.equity_return + debt_pct / 100 * settings.debt_return,
        "equity_allocation": equity_pct,
        "debt_allocation":   debt_pct,
        "allocation": {
            "nifty50":      equity_amount * EQUITY_SPLIT["nifty50"] / 100,
            "nifty_next50": equity_amount * EQUITY_SPLIT["nifty_next50"] / 100,
            "money_market": long["total_sip"] * debt_pct / 100,
        },
        "funds": {line: names[line] for line in ("nifty50", "nifty_next50", "money_market")},
    })
    return {SHORT: short, LONG: long}


def build_plan(document, today=None, step_up: bool = False) -> dict:
    """
    Full recompute: re-link holdings, project every goal, roll up buckets.
    `document` is mutated (linked_assets only) and returned in the result.
    """
    document = auto_assign_assets(document, today)
    projections = project_goals(document, today, step_up)
    table = goal_table(document, projections)
    buckets = bucket_summary(table, Settings.from_document(document))
    total_sip = buckets[SHORT]["total_sip"] + buckets[LONG]["total_sip"]

    logger.info("Plan built: %d goals, total monthly SIP %.0f", len(projections), total_sip)
    return {
        "document":    document,
        "projections": projections,
        "table":       table,
        "buckets":     buckets,
        "total_sip":   total_sip,
        "allocations": get_asset_allocations(document),
    }
